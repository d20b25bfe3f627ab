"""Logging configuration for cluster privilege resolution."""

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict, Optional, Union

from pythonjsonlogger.json import JsonFormatter

from clusterpriv.config.settings import Settings, settings


class CustomJsonFormatter(JsonFormatter):
    """Custom JSON formatter for structured logging."""

    def add_fields(
        self,
        log_record: Dict[str, Any],
        record: logging.LogRecord,
        message_dict: Dict[str, Any],
    ) -> None:
        """Add custom fields to log record."""
        super().add_fields(log_record, record, message_dict)

        log_record["timestamp"] = datetime.now(timezone.utc).isoformat()

        log_record["app_name"] = settings.app_name
        log_record["app_version"] = settings.app_version
        log_record["environment"] = settings.environment.value

        log_record["level"] = record.levelname
        log_record["logger"] = record.name

        if hasattr(record, "privilege"):
            log_record["privilege"] = record.privilege
        if hasattr(record, "event"):
            log_record["event"] = record.event


def setup_logging(config: Optional[Settings] = None) -> None:
    """Configure the root logger from ``config`` or the global settings."""
    config = config or settings
    level = config.log_level.value

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    for handler in list(root_logger.handlers):
        root_logger.removeHandler(handler)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(level)
    if config.log_json:
        console_handler.setFormatter(
            CustomJsonFormatter("%(timestamp)s %(level)s %(name)s %(message)s")
        )
    else:
        console_handler.setFormatter(logging.Formatter(config.log_format))
    root_logger.addHandler(console_handler)

    get_logger(__name__).debug(
        "Logging configured", extra={"log_level": level, "log_json": config.log_json}
    )


def get_logger(name: str) -> logging.Logger:
    """Get a logger instance with the given name."""
    return logging.getLogger(name)


class LoggerAdapter(logging.LoggerAdapter):
    """Logger adapter that merges bound context into every record."""

    def process(self, msg: str, kwargs: Dict[str, Any]) -> tuple:
        extra = dict(self.extra or {})
        extra.update(kwargs.get("extra", {}))
        if "names" in extra and "privilege" not in extra:
            extra["privilege"] = ",".join(sorted(extra["names"]))
        kwargs["extra"] = extra
        return msg, kwargs


def get_logger_with_context(name: str, **context) -> LoggerAdapter:
    """Get a logger with additional context."""
    logger = get_logger(name)
    return LoggerAdapter(logger, context)


def log_event(
    logger: Union[logging.Logger, logging.LoggerAdapter],
    level: str,
    event: str,
    **kwargs,
) -> None:
    """Log a structured event.

    ``logger`` may be a plain logger or a context adapter from
    :func:`get_logger_with_context`; the adapter's bound fields are merged
    into the record.
    """
    levelno = logging.getLevelName(level.upper())
    if not isinstance(levelno, int):
        raise ValueError(f"unknown log level [{level}]")

    message = f"{event}: {json.dumps(kwargs, default=str)}" if kwargs else event
    logger.log(levelno, message, extra={"event": event, **kwargs})
