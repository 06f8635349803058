"""集中配置管理

替代各模块散落的默认常量，提供统一的配置入口。
支持从 YAML 文件加载 + 命令行覆盖。
"""

from __future__ import annotations

import logging
import os
from dataclasses import asdict, dataclass, field, replace
from typing import Any

import yaml

from pluginsync.core.exceptions import ConfigError
from pluginsync.utils.yaml_io import load_yaml

logger = logging.getLogger(__name__)

DEPENDENCY_POLICIES = ("best_effort", "all_or_nothing")


def _default_workers() -> int:
    return (os.cpu_count() or 1) * 2


@dataclass
class Config:
    """解析运行配置"""

    # 目标平台
    jenkins_version: str = "2.222.2"
    runtime_baseline: str = "1.8"  # 占位记录的最低 Java 版本

    # 文件
    src: str = "jenkins_plugins_test.yml"
    dest: str = "jenkins_plugins_latest.yml"

    # 更新中心
    latest_url: str = "https://updates.jenkins-ci.org/latest"
    version_url: str = "https://updates.jenkins-ci.org/download/plugins"
    archive_ext: str = "hpi"

    # 执行
    max_workers: int = field(default_factory=_default_workers)
    dependency_policy: str = "best_effort"

    # 自定义扩展 (放不到字段里的配置项)
    extra: dict = field(default_factory=dict)

    def __post_init__(self) -> None:
        if self.dependency_policy not in DEPENDENCY_POLICIES:
            raise ConfigError(
                f"未知的依赖策略 '{self.dependency_policy}'，"
                f"可选: {', '.join(DEPENDENCY_POLICIES)}"
            )
        if int(self.max_workers) < 1:
            raise ConfigError(f"max_workers 必须 >= 1: {self.max_workers}")

    @classmethod
    def from_file(cls, path: str = "configs/pluginsync.yml") -> Config:
        """从 YAML 文件加载配置，不存在则返回默认"""
        try:
            data = load_yaml(path)
        except (yaml.YAMLError, ValueError) as e:
            raise ConfigError(f"配置文件无法解析: {path} - {e}") from e
        if not data:
            return cls()
        known = {f.name for f in cls.__dataclass_fields__.values()}
        matched = {k: v for k, v in data.items() if k in known and k != "extra"}
        extra = {k: v for k, v in data.items() if k not in known}
        try:
            cfg = cls(**matched)
        except TypeError as e:
            raise ConfigError(f"配置文件内容无效: {path} - {e}") from e
        cfg.extra = extra
        return cfg

    def override(self, **changes: Any) -> Config:
        """返回覆盖了非空字段的新配置（命令行参数优先）"""
        filtered = {k: v for k, v in changes.items() if v is not None}
        return replace(self, **filtered) if filtered else self

    def to_dict(self) -> dict:
        return asdict(self)


# 全局单例，首次 import 时不加载文件；由 CLI 入口显式初始化
_current: Config | None = None


def get_config() -> Config:
    """获取当前配置（未初始化则返回默认值）"""
    global _current  # noqa: PLW0603
    if _current is None:
        _current = Config()
    return _current


def init_config(path: str = "configs/pluginsync.yml") -> Config:
    """从文件初始化全局配置"""
    global _current  # noqa: PLW0603
    _current = Config.from_file(path)
    logger.info("配置已加载: %s", path)
    return _current
