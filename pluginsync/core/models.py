"""核心数据模型

所有跨模块共享的数据类集中定义，消除 fetcher ↔ resolver ↔ diff 的循环依赖。
记录一经创建即不可变，回填版本号通过 with_version() 生成新实例。
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace


@dataclass(frozen=True)
class PluginRequest:
    """声明式清单中的一项：期望安装的插件"""

    name: str
    declared_version: str = ""
    locked: bool = False
    title: str = ""


@dataclass(frozen=True)
class DependencyRef:
    """对另一插件的最低版本要求"""

    name: str
    min_version: str


@dataclass(frozen=True)
class PluginRecord:
    """单个插件版本的元信息（来自 MANIFEST.MF 或占位合成）"""

    name: str
    long_name: str
    version: str
    dependencies: tuple[DependencyRef, ...] = field(default_factory=tuple)
    min_platform_version: str = ""
    min_runtime_version: str = ""

    def with_version(self, version: str) -> PluginRecord:
        """版本号为空时用声明版本回填，返回新记录"""
        if self.version:
            return self
        return replace(self, version=version)
