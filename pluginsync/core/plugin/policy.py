"""兼容性策略

纯函数，不修改已解析集合:
  1. 已解析集合中同名插件版本更高 → 拒绝（不降级）
  2. 目标平台版本低于候选的最低平台要求 → 拒绝
  3. 其余接受

依赖接受策略（DependencyPolicy）决定被拒绝的依赖是否连累父插件。
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Mapping

from pluginsync.core.models import PluginRecord
from pluginsync.core.versions import is_newer, parse_version


class Reason(str, Enum):
    ACCEPTED = "accepted"
    DOWNGRADE = "downgrade"
    PLATFORM = "platform"


class DependencyPolicy(str, Enum):
    """被拒绝的依赖如何影响父插件"""

    BEST_EFFORT = "best_effort"        # 跳过不兼容依赖，父插件照常安装
    ALL_OR_NOTHING = "all_or_nothing"  # 任一依赖平台不兼容，父插件回退到声明版本


@dataclass(frozen=True)
class Decision:
    accepted: bool
    reason: Reason

    def __bool__(self) -> bool:
        return self.accepted


def evaluate(
    candidate: PluginRecord,
    resolved: Mapping[str, PluginRecord],
    jenkins_version: str,
) -> Decision:
    """判定候选版本能否进入已解析集合，返回带原因的结论"""
    current = resolved.get(candidate.name)
    if current is not None and candidate.version and is_newer(
        current.version, candidate.version, context=candidate.name,
    ):
        return Decision(False, Reason.DOWNGRADE)

    required = parse_version(
        candidate.min_platform_version,
        context=f"{candidate.name} Jenkins-Version",
    )
    if parse_version(jenkins_version, context="target jenkins") < required:
        return Decision(False, Reason.PLATFORM)
    return Decision(True, Reason.ACCEPTED)


def accepts(
    candidate: PluginRecord,
    resolved: Mapping[str, PluginRecord],
    jenkins_version: str,
) -> bool:
    return evaluate(candidate, resolved, jenkins_version).accepted
