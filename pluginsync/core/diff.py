"""差异报告

对比原始请求清单与最终解析结果，按插件名升序输出:
  + x.y       - 作为依赖新增
  o x.y       - 版本锁定
  x.x -> y.y  - 已升级
  x.y         - 未变化

同时生成可作为下一次输入的声明式清单。
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping

from pluginsync.core.models import PluginRecord, PluginRequest

ADDED = "added"
UPGRADED = "upgraded"
LOCKED = "locked"
UNCHANGED = "unchanged"


@dataclass(frozen=True)
class DiffLine:
    name: str
    kind: str
    declared: str
    resolved: str

    def render(self) -> str:
        if self.kind == ADDED:
            return f"{self.name}: + {self.resolved}"
        if self.kind == UPGRADED:
            return f"{self.name}: {self.declared} -> {self.resolved}"
        if self.kind == LOCKED:
            return f"{self.name}: o {self.declared}"
        return f"{self.name}: {self.declared}"


def _index(requests: list[PluginRequest]) -> dict[str, PluginRequest]:
    index: dict[str, PluginRequest] = {}
    for req in requests:
        index.setdefault(req.name, req)
    return index


def build_diff(
    requests: list[PluginRequest],
    resolved: Mapping[str, PluginRecord],
) -> list[DiffLine]:
    """逐项分类，结果按插件名排序，与解析完成顺序无关"""
    index = _index(requests)
    lines: list[DiffLine] = []
    for name in sorted(resolved):
        version = resolved[name].version
        req = index.get(name)
        if req is None:
            lines.append(DiffLine(name, ADDED, "", version))
        elif req.declared_version != version:
            lines.append(DiffLine(name, UPGRADED, req.declared_version, version))
        elif req.locked:
            lines.append(DiffLine(name, LOCKED, req.declared_version, version))
        else:
            lines.append(DiffLine(name, UNCHANGED, req.declared_version, version))
    return lines


def summarize(lines: list[DiffLine]) -> dict[str, int]:
    """统计各类变化数量"""
    counts = {ADDED: 0, UPGRADED: 0, LOCKED: 0, UNCHANGED: 0}
    for line in lines:
        counts[line.kind] += 1
    counts["total"] = len(lines)
    return counts


def updated_plugins(
    requests: list[PluginRequest],
    resolved: Mapping[str, PluginRecord],
) -> list[dict[str, Any]]:
    """生成更新后的声明式清单，锁定标记沿用原请求，新增依赖不锁定"""
    index = _index(requests)
    plugins: list[dict[str, Any]] = []
    for name in sorted(resolved):
        record = resolved[name]
        entry: dict[str, Any] = {"name": name}
        if record.long_name:
            entry["title"] = record.long_name
        entry["version"] = record.version
        req = index.get(name)
        if req is not None and req.locked:
            entry["version_lock"] = True
        plugins.append(entry)
    return plugins
