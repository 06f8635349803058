"""pluginsync 日志配置

人类可读文本（本地执行）与结构化 JSON（CI 流水线）两种输出格式。
日志统一走 stderr，stdout 只留给差异报告。
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import datetime, timezone

HUMAN_FORMAT = "%(asctime)s [%(levelname)-7s] %(name)s: %(message)s"


class JSONFormatter(logging.Formatter):
    """结构化 JSON 日志格式器

    输出格式:
        {
            "timestamp": "2024-01-01T12:00:00+00:00",
            "level": "INFO",
            "logger": "pluginsync.core.plugin.resolver",
            "message": "log message",
            "thread": "ThreadPoolExecutor-0_1",
            "plugin": "git" (仅在 extra 中携带插件名时),
            "exception": "traceback..." (仅在有异常时)
        }
    """

    def format(self, record: logging.LogRecord) -> str:
        # 使用 record.created，记录事件发生时间而非格式化时间
        log_entry = {
            "timestamp": datetime.fromtimestamp(
                record.created, tz=timezone.utc
            ).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "thread": record.threadName,
        }
        plugin = getattr(record, "plugin", None)
        if plugin:
            log_entry["plugin"] = plugin
        if record.exc_info and record.exc_info[1]:
            log_entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(log_entry, ensure_ascii=False)


def setup_logging(level: str = "INFO", json_output: bool = False) -> None:
    """配置根日志器

    参数:
        level: 日志级别字符串（DEBUG, INFO, WARNING, ERROR, CRITICAL）
        json_output: 为 True 时使用 JSON 格式（适用于 CI）

    说明:
        - 自动清理已有 handlers，重复调用不会重复输出
        - 未知级别回退为 INFO
    """
    root = logging.getLogger()
    reset_logging()

    root.setLevel(getattr(logging, level.upper(), logging.INFO))

    handler = logging.StreamHandler(sys.stderr)
    if json_output:
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(logging.Formatter(HUMAN_FORMAT))
    root.addHandler(handler)


def reset_logging() -> None:
    """清理根日志器上所有 handlers，常用于测试环境"""
    root = logging.getLogger()
    for handler in root.handlers[:]:
        root.removeHandler(handler)
        handler.close()
