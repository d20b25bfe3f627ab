"""Unit tests for logging helpers."""

import json
import logging

import pytest

from clusterpriv.config.settings import Settings
from clusterpriv.core import logging as logging_module
from clusterpriv.core.logging import (CustomJsonFormatter, LoggerAdapter,
                                      get_logger, get_logger_with_context,
                                      log_event, setup_logging)


@pytest.fixture
def restore_root_logger():
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield root
    for handler in list(root.handlers):
        root.removeHandler(handler)
    for handler in handlers:
        root.addHandler(handler)
    root.setLevel(level)


@pytest.mark.unit
class TestLogEvent:
    """Test structured event logging."""

    @pytest.mark.parametrize("level", ["debug", "info", "warning", "error", "critical"])
    def test_levels(self, caplog, level):
        logger = get_logger("clusterpriv.test")

        with caplog.at_level("DEBUG", logger="clusterpriv.test"):
            log_event(logger, level, "privilege_resolved", names=["monitor"])

        record = caplog.records[-1]
        assert record.levelname == level.upper()
        assert record.event == "privilege_resolved"
        assert "privilege_resolved" in record.message
        assert "monitor" in record.message

    def test_without_kwargs(self, caplog):
        logger = get_logger("clusterpriv.test")

        with caplog.at_level("INFO", logger="clusterpriv.test"):
            log_event(logger, "info", "catalog_built")

        assert caplog.records[-1].message == "catalog_built"

    def test_unknown_level(self):
        with pytest.raises(ValueError, match="unknown log level"):
            log_event(get_logger("clusterpriv.test"), "verbose", "privilege_resolved")

    def test_through_context_adapter(self, caplog):
        """Test bound names reach the record as the privilege field."""
        adapter = get_logger_with_context("clusterpriv.test", names=frozenset({"monitor", "all"}))

        with caplog.at_level("WARNING", logger="clusterpriv.test"):
            log_event(adapter, "warning", "privilege_resolution_failed", error="boom")

        record = caplog.records[-1]
        assert record.event == "privilege_resolution_failed"
        assert record.privilege == "all,monitor"
        assert record.error == "boom"


@pytest.mark.unit
class TestLoggerAdapter:
    def test_context_merged(self, caplog):
        adapter = get_logger_with_context("clusterpriv.test", names={"monitor", "manage_ilm"})

        with caplog.at_level("INFO", logger="clusterpriv.test"):
            adapter.info("resolved", extra={"duration_ms": 1.5})

        record = caplog.records[-1]
        assert isinstance(adapter, LoggerAdapter)
        assert record.privilege == "manage_ilm,monitor"
        assert record.duration_ms == 1.5


@pytest.mark.unit
class TestSetupLogging:
    def test_plain_formatter(self, restore_root_logger):
        setup_logging()

        handlers = restore_root_logger.handlers
        assert len(handlers) == 1
        assert not isinstance(handlers[0].formatter, CustomJsonFormatter)

    def test_json_formatter(self, restore_root_logger, monkeypatch):
        monkeypatch.setattr(logging_module.settings, "log_json", True)
        setup_logging()

        formatter = restore_root_logger.handlers[0].formatter
        assert isinstance(formatter, CustomJsonFormatter)

        record = logging.LogRecord("clusterpriv.test", logging.INFO, __file__, 1, "hello", None, None)
        record.privilege = "monitor"
        payload = json.loads(formatter.format(record))
        assert payload["message"] == "hello"
        assert payload["privilege"] == "monitor"
        assert payload["app_name"] == logging_module.settings.app_name
        assert payload["level"] == "INFO"

    def test_explicit_settings(self, restore_root_logger):
        setup_logging(Settings(log_json=True, log_level="DEBUG"))

        assert restore_root_logger.level == logging.DEBUG
        assert isinstance(restore_root_logger.handlers[0].formatter, CustomJsonFormatter)
