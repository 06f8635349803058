"""插件版本解析引擎

每个请求插件一个任务，在有界线程池中执行:
  1. 拉取期望版本（锁定 → 声明版本，否则 latest），空版本号用声明版本回填
  2. 兼容性判定，不通过则强制回退到声明版本（不再二次判定）
  3. 递归遍历依赖，可接受的依赖先暂存在任务内
  4. 提交：暂存依赖 + 选定记录写入已解析集合

已知竞争: 兼容性判定（读）与提交（写）之间没有跨越两者的临界区，
两个共享依赖的插件并发解析时，最终写入的依赖版本与完成顺序有关。
差异报告只在所有任务结束后读取已解析集合。
"""

from __future__ import annotations

import logging
import threading
from collections import ChainMap
from collections.abc import Iterator, Mapping
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from pluginsync.core.exceptions import CycleError, ValidationError
from pluginsync.core.models import PluginRecord, PluginRequest
from pluginsync.core.plugin.cache import MetadataCache
from pluginsync.core.plugin.fetcher import ManifestReader, PluginFetcher
from pluginsync.core.plugin.policy import Decision, DependencyPolicy, Reason, evaluate
from pluginsync.core.versions import is_older

if TYPE_CHECKING:
    from pluginsync.core.config import Config

logger = logging.getLogger(__name__)


class ResolvedSet(Mapping[str, PluginRecord]):
    """已解析集合: 插件名 → 选定记录，读写各自加锁"""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._records: dict[str, PluginRecord] = {}

    def __getitem__(self, name: str) -> PluginRecord:
        with self._lock:
            return self._records[name]

    def __iter__(self) -> Iterator[str]:
        with self._lock:
            names = list(self._records)
        return iter(names)

    def __len__(self) -> int:
        with self._lock:
            return len(self._records)

    def set(self, name: str, record: PluginRecord) -> None:
        with self._lock:
            self._records[name] = record

    def snapshot(self) -> dict[str, PluginRecord]:
        """按插件名排序的副本"""
        with self._lock:
            return dict(sorted(self._records.items()))


@dataclass
class ResolverContext:
    """单次解析的共享状态，生命周期等于一次运行"""

    jenkins_version: str
    fetcher: PluginFetcher
    resolved: ResolvedSet = field(default_factory=ResolvedSet)

    @property
    def cache(self) -> MetadataCache:
        return self.fetcher.cache

    @classmethod
    def create(
        cls, config: Config, manifest_reader: ManifestReader | None = None,
    ) -> ResolverContext:
        fetcher = PluginFetcher.from_config(config, MetadataCache(), manifest_reader=manifest_reader)
        return cls(config.jenkins_version, fetcher)


@dataclass
class _Rejection:
    name: str
    version: str
    decision: Decision


class PluginResolver:
    """有界并发的插件版本解析器"""

    def __init__(
        self,
        context: ResolverContext,
        max_workers: int = 1,
        policy: DependencyPolicy = DependencyPolicy.BEST_EFFORT,
    ) -> None:
        self.ctx = context
        self.max_workers = max(1, max_workers)
        self.policy = DependencyPolicy(policy)
        self._locked: dict[str, str] = {}

    def resolve(self, requests: list[PluginRequest]) -> dict[str, PluginRecord]:
        """解析全部请求，返回按名称排序的已解析集合

        任一任务抛出致命异常时，取消尚未开始的任务并原样抛出，不返回部分结果。
        """
        self._locked = {r.name: r.declared_version for r in requests if r.locked}
        logger.info(
            "开始解析 %d 个插件 (jenkins=%s, 并发=%d, 依赖策略=%s)",
            len(requests), self.ctx.jenkins_version, self.max_workers, self.policy.value,
        )

        if self.max_workers == 1:
            for req in requests:
                self.resolve_one(req)
        else:
            with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
                futures = {executor.submit(self.resolve_one, r): r for r in requests}
                try:
                    for future in as_completed(futures):
                        future.result()
                except Exception:
                    for f in futures:
                        f.cancel()
                    raise

        result = self.ctx.resolved.snapshot()
        logger.info("解析完成: %d 个请求 -> %d 个插件", len(requests), len(result))
        return result

    def resolve_one(self, req: PluginRequest) -> PluginRecord:
        """单个请求的完整流程: 拉取 → 判定 → 依赖遍历 → 提交"""
        log_extra = {"plugin": req.name}
        desired = req.declared_version if req.locked else ""
        candidate = self._fetch_request(req, desired)

        staged: dict[str, PluginRecord] = {}
        chosen: PluginRecord | None = None
        decision = evaluate(candidate, self.ctx.resolved, self.ctx.jenkins_version)
        if decision:
            rejected = self._walk(candidate, [req.name], staged)
            blocking = [r for r in rejected if r.decision.reason is Reason.PLATFORM]
            if blocking and self.policy is DependencyPolicy.ALL_OR_NOTHING:
                logger.info(
                    "%s@%s 存在不兼容依赖 (%s)，回退到声明版本 %s",
                    req.name, candidate.version,
                    ", ".join(f"{r.name}@{r.version}" for r in blocking),
                    req.declared_version, extra=log_extra,
                )
                staged = {}
            else:
                chosen = candidate
        else:
            logger.info(
                "%s@%s 不可安装 (%s)，回退到声明版本 %s",
                req.name, candidate.version, decision.reason.value,
                req.declared_version, extra=log_extra,
            )

        if chosen is None:
            # 声明版本视为已知可用基线，不做二次判定
            chosen = self._fetch_request(req, req.declared_version)
            self._walk(chosen, [req.name], staged)

        for name, record in staged.items():
            self.ctx.resolved.set(name, record)
        self.ctx.resolved.set(req.name, chosen)
        logger.info("完成: %s -> %s", req.name, chosen.version, extra=log_extra)
        return chosen

    def _fetch_request(self, req: PluginRequest, version: str) -> PluginRecord:
        record = self.ctx.fetcher.fetch(req.name, version).with_version(req.declared_version)
        if not record.version:
            raise ValidationError(
                f"无法确定插件 '{req.name}' 的版本: 更新中心不存在且清单未声明 version"
            )
        return record

    def _walk(
        self,
        record: PluginRecord,
        path: list[str],
        staged: dict[str, PluginRecord],
    ) -> list[_Rejection]:
        """递归遍历依赖，可接受的依赖写入 staged，返回被拒绝的依赖

        path 为当前请求的解析路径，同名插件再次出现即为循环依赖。
        """
        rejected: list[_Rejection] = []
        for dep in record.dependencies:
            if dep.name in path:
                raise CycleError(path + [dep.name])

            locked_version = self._locked.get(dep.name)
            if locked_version is not None:
                # 锁定插件由自身任务提交，依赖遍历不得改写
                if locked_version and is_older(locked_version, dep.min_version, context=dep.name):
                    logger.warning(
                        "%s 要求 %s>=%s，但该插件已锁定在 %s",
                        record.name, dep.name, dep.min_version, locked_version,
                    )
                continue

            candidate = self.ctx.fetcher.fetch(dep.name, dep.min_version).with_version(dep.min_version)
            decision = evaluate(
                candidate, ChainMap(staged, self.ctx.resolved), self.ctx.jenkins_version,
            )
            if not decision:
                logger.info(
                    "依赖 %s@%s 不可安装 (%s, 来自 %s)",
                    dep.name, candidate.version, decision.reason.value, record.name,
                )
                rejected.append(_Rejection(dep.name, candidate.version, decision))
                continue

            previous = staged.get(dep.name)
            staged[dep.name] = candidate
            if previous is not None and previous.version == candidate.version:
                continue
            rejected.extend(self._walk(candidate, path + [dep.name], staged))
        return rejected
