"""CLI - 插件升级命令"""

from __future__ import annotations

import click

from pluginsync.cli import _fail, _load_config
from pluginsync.core.config import DEPENDENCY_POLICIES
from pluginsync.core.exceptions import PluginSyncError


def register(group: click.Group) -> None:
    group.add_command(update)


@click.command()
@click.option("--jenkins", "jenkins_version", default=None, help="目标 Jenkins 版本 [默认: 2.222.2]")
@click.option("--src", default=None, help="插件清单 [默认: jenkins_plugins_test.yml]")
@click.option("--dest", default=None, help="更新后的清单 [默认: jenkins_plugins_latest.yml]")
@click.option("--parallel", "-p", type=int, default=None, help="并发解析数 [默认: CPU 数 x2]")
@click.option(
    "--policy", type=click.Choice(DEPENDENCY_POLICIES), default=None,
    help="依赖不兼容时的处理策略 [默认: best_effort]",
)
@click.option("--config", "-c", "config_path", default=None, help="配置文件路径")
@click.option("--dry-run", is_flag=True, help="只输出差异，不写目标文件")
def update(
    jenkins_version: str | None, src: str | None, dest: str | None,
    parallel: int | None, policy: str | None, config_path: str | None,
    dry_run: bool,
) -> None:
    """解析插件最新可用版本并输出差异

    \b
    差异标记:
      + x.y       作为依赖新增
      o x.y       版本锁定
      x.x -> y.y  已升级
    """
    from pluginsync.services.update_service import UpdateRequest, UpdateService

    try:
        svc = UpdateService(config=_load_config(config_path))
        result = svc.execute(UpdateRequest(
            src=src, dest=dest, jenkins_version=jenkins_version,
            max_workers=parallel, dependency_policy=policy, dry_run=dry_run,
        ))
    except PluginSyncError as e:
        raise _fail(e) from e

    for line in result.render():
        click.echo(line)
