"""CLI - 单个插件元数据查询"""

from __future__ import annotations

import click

from pluginsync.cli import _fail, _load_config
from pluginsync.core.exceptions import PluginSyncError
from pluginsync.core.plugin.policy import accepts


def register(group: click.Group) -> None:
    group.add_command(info)


@click.command()
@click.argument("name")
@click.option("--version", "version", default="", help="指定版本（不指定则查询 latest）")
@click.option("--jenkins", "jenkins_version", default=None, help="用于兼容性判定的 Jenkins 版本")
@click.option("--config", "-c", "config_path", default=None, help="配置文件路径")
def info(name: str, version: str, jenkins_version: str | None, config_path: str | None) -> None:
    """查询插件元数据及其与目标 Jenkins 的兼容性"""
    from pluginsync.core.plugin.resolver import ResolverContext

    try:
        cfg = _load_config(config_path).override(jenkins_version=jenkins_version)
        ctx = ResolverContext.create(cfg)
        record = ctx.fetcher.fetch(name, version)
        compatible = accepts(record, ctx.resolved, cfg.jenkins_version)
    except PluginSyncError as e:
        raise _fail(e) from e

    click.echo(f"名称:     {record.name}")
    click.echo(f"标题:     {record.long_name}")
    click.echo(f"版本:     {record.version or '(未知)'}")
    click.echo(f"Jenkins:  >= {record.min_platform_version}")
    click.echo(f"Java:     >= {record.min_runtime_version or '(未声明)'}")
    mark = "兼容" if compatible else "不兼容"
    click.echo(f"兼容性:   {mark} (目标 Jenkins {cfg.jenkins_version})")
    if record.dependencies:
        click.echo("依赖:")
        for dep in record.dependencies:
            click.echo(f"  - {dep.name} >= {dep.min_version}")
