"""YAML 文件统一读写工具

统一 encoding="utf-8"、空值保护、大小限制、原子写入。
"""

from __future__ import annotations

import logging
import os
import tempfile
from pathlib import Path
from typing import Any

import yaml

logger = logging.getLogger(__name__)

# YAML 文件最大大小限制 (10MB)，防止异常大文件导致内存耗尽
MAX_YAML_SIZE = 10 * 1024 * 1024


class ColonQuotingDumper(yaml.SafeDumper):
    """含冒号的字符串一律双引号输出

    插件标题常见 "Pipeline: Job" 这类写法，保持与下游 Ansible 角色的格式一致。
    """


def _represent_str(dumper: yaml.SafeDumper, value: str) -> yaml.ScalarNode:
    if ":" in value:
        return dumper.represent_scalar("tag:yaml.org,2002:str", value, style='"')
    return dumper.represent_str(value)


ColonQuotingDumper.add_representer(str, _represent_str)


class NumberAsTextLoader(yaml.SafeLoader):
    """未加引号的数字按原文读取为字符串

    版本号 2.80 / 1.10 若按浮点数解析会丢失末尾的 0。布尔值等其余类型照常解析。
    """


_NUMERIC_TAGS = ("tag:yaml.org,2002:int", "tag:yaml.org,2002:float")

NumberAsTextLoader.yaml_implicit_resolvers = {
    first: [(tag, regexp) for tag, regexp in resolvers if tag not in _NUMERIC_TAGS]
    for first, resolvers in yaml.SafeLoader.yaml_implicit_resolvers.items()
}


def atomic_write(path: Path, content: str) -> None:
    """原子写入文件：先写同目录临时文件再 rename，中途崩溃不会留下半个文件"""
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp = tempfile.mkstemp(dir=str(path.parent), suffix=".tmp")
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(content)
        os.replace(tmp, str(path))
    except Exception:
        try:
            os.unlink(tmp)
        except OSError:
            pass
        raise


def load_yaml(path: str | Path, loader: type = yaml.SafeLoader) -> dict[str, Any]:
    """安全读取 YAML 文件

    loader 须为 yaml.SafeLoader 或其子类。

    返回:
        dict: 解析后的字典。文件不存在、为空、或顶层不是字典时返回空字典

    异常:
        yaml.YAMLError: YAML 格式错误
        OSError: 读取失败
        ValueError: 文件过大（超过 MAX_YAML_SIZE）
    """
    p = Path(path)
    if not p.exists():
        return {}

    file_size = p.stat().st_size
    if file_size > MAX_YAML_SIZE:
        raise ValueError(
            f"YAML 文件过大: {p} ({file_size} 字节), "
            f"超过限制 {MAX_YAML_SIZE} 字节"
        )

    try:
        with open(p, encoding="utf-8") as f:
            result = yaml.load(f, Loader=loader)  # noqa: S506
    except yaml.YAMLError as e:
        logger.error("解析 YAML 文件失败: %s, 错误: %s", path, e)
        raise
    except OSError as e:
        logger.error("读取文件失败: %s, 错误: %s", path, e)
        raise

    if result is None:
        return {}
    if not isinstance(result, dict):
        logger.warning(
            "%s 内容不是字典类型 (实际类型: %s)，返回空字典",
            path, type(result).__name__,
        )
        return {}
    return result


def dump_yaml(data: Any) -> str:
    """序列化为 YAML 文本，保持键顺序，含冒号的字符串加引号"""
    return yaml.dump(
        data, Dumper=ColonQuotingDumper, default_flow_style=False,
        allow_unicode=True, sort_keys=False,
    )


def save_yaml(path: str | Path, data: Any) -> None:
    """原子写入 YAML 文件，自动创建父目录"""
    try:
        atomic_write(Path(path), dump_yaml(data))
    except yaml.YAMLError as e:
        logger.error("序列化 YAML 数据失败: %s, 错误: %s", path, e)
        raise
    except OSError as e:
        logger.error("写入文件失败: %s, 错误: %s", path, e)
        raise
