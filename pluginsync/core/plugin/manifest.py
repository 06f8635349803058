"""插件包 MANIFEST 读取

.hpi / .jpi 本质是 zip，元信息位于 META-INF/MANIFEST.MF 的主段:
  - 每行 "Key: value"
  - 以单个空格开头的行是上一行的续行（72 列折行）
  - 空行结束主段
"""

from __future__ import annotations

import logging
import zipfile
from pathlib import Path

from pluginsync.core.exceptions import ManifestReadError
from pluginsync.core.models import DependencyRef

logger = logging.getLogger(__name__)

MANIFEST_PATH = "META-INF/MANIFEST.MF"
OPTIONAL_MARKER = "resolution:=optional"


def parse_manifest(text: str) -> dict[str, str]:
    """解析 MANIFEST.MF 主段为扁平字典"""
    fields: dict[str, str] = {}
    key = ""
    for raw in text.splitlines():
        if not raw.strip():
            if fields:
                break
            continue
        if raw.startswith(" "):
            if not key:
                raise ManifestReadError(f"续行前没有字段: {raw!r}")
            fields[key] += raw[1:]
            continue
        if ":" not in raw:
            raise ManifestReadError(f"无效的 MANIFEST 行: {raw!r}")
        key, value = raw.split(":", 1)
        key = key.strip()
        if key in fields:
            raise ManifestReadError(f"MANIFEST 字段重复: {key}")
        fields[key] = value[1:] if value.startswith(" ") else value
    return {k: v.strip() for k, v in fields.items()}


def read_manifest(path: str | Path) -> dict[str, str]:
    """从插件包中读取 MANIFEST.MF

    Raises:
        ManifestReadError: 文件不是 zip、缺少 MANIFEST 或内容无法解码
    """
    try:
        with zipfile.ZipFile(path) as zf:
            raw = zf.read(MANIFEST_PATH)
    except KeyError as e:
        raise ManifestReadError(f"插件包缺少 {MANIFEST_PATH}: {path}") from e
    except (zipfile.BadZipFile, OSError) as e:
        raise ManifestReadError(f"插件包不可读: {path} - {e}") from e

    try:
        text = raw.decode("utf-8")
    except UnicodeDecodeError as e:
        raise ManifestReadError(f"MANIFEST 编码无效: {path} - {e}") from e
    return parse_manifest(text)


def parse_dependencies(field_value: str) -> tuple[DependencyRef, ...]:
    """解析 Plugin-Dependencies 字段

    格式: "workflow-step-api:2.20,workflow-cps:2.80;resolution:=optional"
    标记为 optional 的依赖直接丢弃。
    """
    deps: list[DependencyRef] = []
    for entry in field_value.split(","):
        entry = entry.strip()
        if not entry:
            continue
        spec, *attrs = entry.split(";")
        if OPTIONAL_MARKER in (a.strip() for a in attrs):
            logger.debug("跳过可选依赖: %s", spec)
            continue
        name, sep, version = spec.partition(":")
        if not sep or not name.strip() or not version.strip():
            raise ManifestReadError(f"无效的依赖声明: {entry!r}")
        deps.append(DependencyRef(name=name.strip(), min_version=version.strip()))
    return tuple(deps)
