"""升级服务 - CLI 和脚本共享的解析流程

将「读取清单 → 并发解析 → 差异报告 → 写回清单」的编排从 CLI 中提取出来，
每次执行新建 ResolverContext，缓存与已解析集合不跨运行复用。
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Callable

from pluginsync.core.config import Config
from pluginsync.core.diff import DiffLine, build_diff, summarize, updated_plugins
from pluginsync.core.models import PluginRecord, PluginRequest
from pluginsync.core.plugin.policy import DependencyPolicy
from pluginsync.core.plugin.resolver import PluginResolver, ResolverContext
from pluginsync.core.plugin_list import PluginList

logger = logging.getLogger(__name__)

ContextFactory = Callable[[Config], ResolverContext]


@dataclass
class UpdateRequest:
    """升级请求 DTO，字段为 None 时沿用配置"""

    src: str | None = None
    dest: str | None = None
    jenkins_version: str | None = None
    max_workers: int | None = None
    dependency_policy: str | None = None
    dry_run: bool = False


@dataclass
class UpdateResult:
    requests: list[PluginRequest]
    resolved: dict[str, PluginRecord]
    lines: list[DiffLine]
    plugins: list[dict] = field(default_factory=list)
    written: bool = False

    @property
    def summary(self) -> dict[str, int]:
        return summarize(self.lines)

    def render(self) -> list[str]:
        return [line.render() for line in self.lines]


class UpdateService:
    """插件升级服务

    只有解析完整成功才会写目标文件；任何致命异常原样抛给调用方。
    """

    def __init__(
        self,
        config: Config | None = None,
        context_factory: ContextFactory | None = None,
    ) -> None:
        self.config = config or Config()
        self._context_factory = context_factory or ResolverContext.create

    def execute(self, req: UpdateRequest) -> UpdateResult:
        cfg = self.config.override(
            src=req.src, dest=req.dest,
            jenkins_version=req.jenkins_version,
            max_workers=req.max_workers,
            dependency_policy=req.dependency_policy,
        )
        requests = PluginList(cfg.src).load()

        ctx = self._context_factory(cfg)
        resolver = PluginResolver(
            ctx,
            max_workers=cfg.max_workers,
            policy=DependencyPolicy(cfg.dependency_policy),
        )
        resolved = resolver.resolve(requests)
        logger.debug("解析完成: %d 个插件, 缓存 %d 条元数据", len(resolved), len(ctx.cache))

        result = UpdateResult(
            requests=requests,
            resolved=resolved,
            lines=build_diff(requests, resolved),
            plugins=updated_plugins(requests, resolved),
        )
        if req.dry_run:
            logger.info("dry-run: 跳过写入 %s", cfg.dest)
        else:
            PluginList(cfg.dest).save(result.plugins)
            result.written = True

        s = result.summary
        logger.info(
            "升级汇总: 共 %d, 升级 %d, 新增 %d, 锁定 %d, 未变 %d",
            s["total"], s["upgraded"], s["added"], s["locked"], s["unchanged"],
        )
        return result
