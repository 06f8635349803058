"""日志配置测试"""

from __future__ import annotations

import json
import logging

import pytest

from pluginsync.utils.logger import JSONFormatter, reset_logging, setup_logging


@pytest.fixture(autouse=True)
def _restore_logging():
    yield
    reset_logging()


class TestSetupLogging:
    def test_single_handler_after_repeated_setup(self) -> None:
        setup_logging("DEBUG")
        setup_logging("INFO")
        root = logging.getLogger()
        assert len(root.handlers) == 1
        assert root.level == logging.INFO

    def test_json_formatter_selected(self) -> None:
        setup_logging("INFO", json_output=True)
        assert isinstance(logging.getLogger().handlers[0].formatter, JSONFormatter)


class TestJSONFormatter:
    def test_plugin_extra_included(self) -> None:
        record = logging.LogRecord("pluginsync.x", logging.INFO, __file__, 1, "完成: %s", ("git",), None)
        record.plugin = "git"
        entry = json.loads(JSONFormatter().format(record))
        assert entry["message"] == "完成: git"
        assert entry["plugin"] == "git"
        assert entry["level"] == "INFO"
