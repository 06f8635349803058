"""pluginsync 命令行接口

CLI 按功能拆分为子模块，每个模块注册自己的命令到 main group。
核心层只抛 PluginSyncError，退出码在这里决定。
"""

from __future__ import annotations

import os

import click

from pluginsync import __buildstamp__, __githash__, __version__
from pluginsync.core.config import Config, get_config, init_config
from pluginsync.core.exceptions import PluginSyncError
from pluginsync.utils.logger import setup_logging

VERSION_MESSAGE = (
    "%(prog)s %(version)s\n"
    f"Git Commit Hash: {__githash__}\n"
    f"Build Time: {__buildstamp__}"
)


def _load_config(path: str | None) -> Config:
    """指定了配置文件则从文件初始化，否则使用当前全局配置"""
    return init_config(path) if path else get_config()


def _fail(exc: PluginSyncError) -> click.ClickException:
    """业务异常转换为 CLI 错误（退出码 1）"""
    details = getattr(exc, "details", None) or []
    message = f"[{exc.code}] {exc}"
    if details:
        message += "\n" + "\n".join(f"  - {d}" for d in details)
    return click.ClickException(message)


@click.group()
@click.version_option(version=__version__, message=VERSION_MESSAGE)
@click.option(
    "--log-level", default=lambda: os.getenv("PLUGINSYNC_LOG_LEVEL", "INFO"),
    show_default="INFO", help="日志级别",
)
@click.option(
    "--log-json", is_flag=True,
    default=lambda: os.getenv("PLUGINSYNC_LOG_JSON", "") == "1",
    help="JSON 格式日志（CI 使用）",
)
def main(log_level: str, log_json: bool) -> None:
    """pluginsync - Jenkins 插件版本解析与升级"""
    setup_logging(level=log_level, json_output=log_json)


# 注册各功能子命令
from pluginsync.cli.cmd_update import register as _reg_update  # noqa: E402
from pluginsync.cli.cmd_info import register as _reg_info  # noqa: E402

_reg_update(main)
_reg_info(main)
