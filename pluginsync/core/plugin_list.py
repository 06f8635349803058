"""声明式插件清单读写

文件格式:
    jenkins_plugins:
    - name: git
      title: Jenkins Git plugin
      version: 4.2.2
      version_lock: true
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import yaml

from pluginsync.core.exceptions import ValidationError
from pluginsync.core.models import PluginRequest
from pluginsync.utils.yaml_io import NumberAsTextLoader, load_yaml, save_yaml

logger = logging.getLogger(__name__)

SECTION_KEY = "jenkins_plugins"


class PluginList:
    """插件清单文件 - 加载为 PluginRequest 列表 / 写回更新结果"""

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)

    def load(self) -> list[PluginRequest]:
        """读取清单，版本号按原文保留，缺少 name 或重名的条目视为输入错误"""
        if not self.path.exists():
            raise ValidationError(f"插件清单不存在: {self.path}")

        try:
            data = load_yaml(self.path, loader=NumberAsTextLoader)
        except (yaml.YAMLError, ValueError) as e:
            raise ValidationError(f"插件清单无法解析: {self.path} - {e}") from e
        entries = data.get(SECTION_KEY) or []
        if not isinstance(entries, list):
            raise ValidationError(f"{SECTION_KEY} 必须是列表: {self.path}")

        requests: list[PluginRequest] = []
        errors: list[str] = []
        seen: set[str] = set()
        for i, entry in enumerate(entries):
            if not isinstance(entry, dict) or not entry.get("name"):
                errors.append(f"第 {i + 1} 项缺少 name")
                continue
            name = str(entry["name"]).strip()
            if name in seen:
                errors.append(f"插件重复声明: {name}")
                continue
            seen.add(name)
            requests.append(PluginRequest(
                name=name,
                declared_version=_text(entry.get("version")),
                locked=bool(entry.get("version_lock", False)),
                title=_text(entry.get("title")),
            ))
        if errors:
            raise ValidationError(f"插件清单无效: {self.path}", details=errors)

        logger.info("已加载 %d 个插件请求: %s", len(requests), self.path)
        return requests

    def save(self, plugins: list[dict[str, Any]]) -> None:
        save_yaml(self.path, {SECTION_KEY: plugins})
        logger.info("已写入 %d 个插件: %s", len(plugins), self.path)


def _text(value: Any) -> str:
    return "" if value is None else str(value).strip()
