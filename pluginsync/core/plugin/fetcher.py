"""插件元数据拉取器

职责:
- 缓存优先，未命中才访问更新中心
- version 非空拉取指定版本，为空拉取 latest
- 404 视为自定义插件，合成占位记录（始终兼容）
- 其他失败一律致命，直接抛出
"""

from __future__ import annotations

import logging
import os
import shutil
import tempfile
import urllib.error
import urllib.request
from pathlib import Path
from typing import TYPE_CHECKING, Callable

from pluginsync.core.exceptions import TransportError, UnexpectedStatusError
from pluginsync.core.models import PluginRecord
from pluginsync.core.plugin.cache import MetadataCache
from pluginsync.core.plugin.manifest import parse_dependencies, read_manifest
from pluginsync.utils.net import latest_url, pinned_url, validate_url_scheme

if TYPE_CHECKING:
    from pluginsync.core.config import Config

logger = logging.getLogger(__name__)

# 接受本地插件包路径，返回 MANIFEST 字段
ManifestReader = Callable[[Path], "dict[str, str]"]


class PluginFetcher:
    """插件元数据拉取器 - 缓存优先 + 更新中心下载"""

    def __init__(
        self,
        cache: MetadataCache,
        jenkins_version: str,
        *,
        latest_base: str = "https://updates.jenkins-ci.org/latest",
        version_base: str = "https://updates.jenkins-ci.org/download/plugins",
        archive_ext: str = "hpi",
        runtime_baseline: str = "1.8",
        manifest_reader: ManifestReader | None = None,
    ) -> None:
        self.cache = cache
        self.jenkins_version = jenkins_version
        self.latest_base = latest_base
        self.version_base = version_base
        self.archive_ext = archive_ext
        self.runtime_baseline = runtime_baseline
        self._read_manifest = manifest_reader or read_manifest

    @classmethod
    def from_config(
        cls, config: Config, cache: MetadataCache,
        manifest_reader: ManifestReader | None = None,
    ) -> PluginFetcher:
        return cls(
            cache, config.jenkins_version,
            latest_base=config.latest_url,
            version_base=config.version_url,
            archive_ext=config.archive_ext,
            runtime_baseline=config.runtime_baseline,
            manifest_reader=manifest_reader,
        )

    def address(self, name: str, version: str = "") -> str:
        if version:
            return pinned_url(self.version_base, name, version, self.archive_ext)
        return latest_url(self.latest_base, name, self.archive_ext)

    def fetch(self, name: str, version: str = "") -> PluginRecord:
        """拉取单个插件版本的元数据

        策略: 缓存优先
          1. (name, version) 已缓存 → 直接返回，不访问网络
          2. 下载插件包 → 读取 MANIFEST → 组装记录
          3. 404 → 占位记录
        记录只缓存在请求键下，不同 version 参数互不命中。
        """
        cached = self.cache.get(name, version)
        if cached is not None:
            return cached

        url = self.address(name, version)
        validate_url_scheme(url, context=f"plugin {name}")

        fd, tmp = tempfile.mkstemp(suffix=f".{self.archive_ext}", prefix="pluginsync-")
        os.close(fd)
        archive = Path(tmp)
        try:
            if not self._download(url, archive):
                logger.info("更新中心不存在，按自定义插件处理: %s@%s", name, version or "latest")
                return self.cache.set(name, version, self._placeholder(name, version))
            fields = self._read_manifest(archive)
        finally:
            archive.unlink(missing_ok=True)

        record = self._build_record(name, fields)
        logger.debug("已拉取: %s@%s -> %s", name, version or "latest", record.version)
        return self.cache.set(name, version, record)

    def _download(self, url: str, dest: Path) -> bool:
        """下载到 dest，404 返回 False，其余失败抛出"""
        logger.debug("下载: %s", url)
        try:
            with urllib.request.urlopen(url) as resp:  # nosec B310
                status = getattr(resp, "status", 200)
                if status != 200:
                    raise UnexpectedStatusError(status, url)
                with open(dest, "wb") as f:
                    shutil.copyfileobj(resp, f)
        except urllib.error.HTTPError as e:
            if e.code == 404:
                return False
            raise UnexpectedStatusError(e.code, url) from e
        except (urllib.error.URLError, OSError) as e:
            raise TransportError(f"下载失败: {url} - {e}") from e
        return True

    def _placeholder(self, name: str, version: str) -> PluginRecord:
        return PluginRecord(
            name=name,
            long_name=name,
            version=version,
            dependencies=(),
            min_platform_version=self.jenkins_version,
            min_runtime_version=self.runtime_baseline,
        )

    def _build_record(self, name: str, fields: dict[str, str]) -> PluginRecord:
        short_name = fields.get("Short-Name") or name
        return PluginRecord(
            name=short_name,
            long_name=fields.get("Long-Name") or short_name,
            version=fields.get("Plugin-Version", ""),
            dependencies=parse_dependencies(fields.get("Plugin-Dependencies", "")),
            # 未声明平台版本的旧插件视为兼容当前平台
            min_platform_version=fields.get("Jenkins-Version") or self.jenkins_version,
            min_runtime_version=fields.get("Minimum-Java-Version", ""),
        )
