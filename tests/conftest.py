"""共享 fixture - 内存插件目录替代更新中心"""

from __future__ import annotations

import threading
from typing import Callable

import pytest

from pluginsync.core.exceptions import PluginSyncError
from pluginsync.core.models import DependencyRef, PluginRecord
from pluginsync.core.plugin.cache import MetadataCache
from pluginsync.core.plugin.resolver import ResolverContext

JENKINS = "2.222.2"


def rec(
    name: str,
    version: str,
    deps: dict[str, str] | None = None,
    jenkins: str = "2.0",
    title: str = "",
) -> PluginRecord:
    """构造插件记录，deps 为 {依赖名: 最低版本}"""
    return PluginRecord(
        name=name,
        long_name=title or f"{name} plugin",
        version=version,
        dependencies=tuple(DependencyRef(n, v) for n, v in (deps or {}).items()),
        min_platform_version=jenkins,
        min_runtime_version="1.8",
    )


class StubFetcher:
    """按 (name, version) 查表的拉取器，未登记的键按 404 合成占位记录

    version 为空的键表示 latest。errors 中登记的键在拉取时抛出对应异常。
    """

    def __init__(
        self,
        records: dict[tuple[str, str], PluginRecord],
        jenkins_version: str = JENKINS,
        errors: dict[tuple[str, str], PluginSyncError] | None = None,
    ) -> None:
        self.records = records
        self.jenkins_version = jenkins_version
        self.errors = errors or {}
        self.cache = MetadataCache()
        self.calls: list[tuple[str, str]] = []
        self._lock = threading.Lock()

    def fetch(self, name: str, version: str = "") -> PluginRecord:
        with self._lock:
            self.calls.append((name, version))
        if (name, version) in self.errors:
            raise self.errors[(name, version)]
        record = self.records.get((name, version))
        if record is None:
            record = PluginRecord(
                name=name, long_name=name, version=version,
                min_platform_version=self.jenkins_version,
                min_runtime_version="1.8",
            )
        return self.cache.set(name, version, record)


ContextMaker = Callable[..., ResolverContext]


@pytest.fixture()
def make_context() -> ContextMaker:
    def _make(
        records: dict[tuple[str, str], PluginRecord],
        jenkins_version: str = JENKINS,
        errors: dict[tuple[str, str], PluginSyncError] | None = None,
    ) -> ResolverContext:
        fetcher = StubFetcher(records, jenkins_version, errors)
        return ResolverContext(jenkins_version, fetcher)  # type: ignore[arg-type]
    return _make
