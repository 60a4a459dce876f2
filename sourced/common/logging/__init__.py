"""JSON structured logging for sourced-core.

Log records carry the correlation ID of the resource initialization that
emitted them. Formatting is done by python-json-logger.
"""

import logging
import sys
from typing import Any

from pythonjsonlogger.json import JsonFormatter

from sourced.common.config import get_config


class CorrelationIdFilter(logging.Filter):
    """Logging filter that injects the correlation ID and initializing slot into records."""

    def filter(self, record: logging.LogRecord) -> bool:
        # Import here to avoid circular dependency
        from sourced.common.tracing import get_correlation_id, get_current_slot

        record.correlation_id = get_correlation_id()
        record.initializing_slot = get_current_slot()
        return True


class CustomJsonFormatter(JsonFormatter):
    """JSON formatter adding timestamp, level, module, function, line and correlation_id."""

    def add_fields(
        self,
        log_record: dict[str, Any],
        record: logging.LogRecord,
        message_dict: dict[str, Any],
    ) -> None:
        super().add_fields(log_record, record, message_dict)

        log_record["timestamp"] = record.created
        log_record["level"] = record.levelname
        log_record["module"] = record.module
        log_record["function"] = record.funcName
        log_record["line"] = record.lineno

        if hasattr(record, "correlation_id"):
            log_record["correlation_id"] = record.correlation_id
        if getattr(record, "initializing_slot", None):
            log_record["initializing_slot"] = record.initializing_slot


def setup_logging(level: str | None = None, stream: Any = None) -> None:
    """Configure JSON structured logging for the process.

    Args:
        level: Optional log level override (DEBUG, INFO, WARNING, ERROR, CRITICAL).
               If not provided, uses LOG_LEVEL from config.
        stream: Optional output stream, defaults to stderr so that command
                output on stdout stays machine-readable.

    Example:
        >>> setup_logging("DEBUG")
        >>> logger = get_logger(__name__)
        >>> logger.info("Temporary filesystem ready", extra={"root": "/tmp/sourced/x"})
    """
    config = get_config()
    log_level = (level or config.log_level).upper()

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)

    # Remove existing handlers to avoid duplicates
    root_logger.handlers.clear()

    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setLevel(log_level)
    handler.setFormatter(
        CustomJsonFormatter("%(timestamp)s %(level)s %(module)s %(function)s %(message)s")
    )
    handler.addFilter(CorrelationIdFilter())

    root_logger.addHandler(handler)


def get_logger(name: str) -> logging.Logger:
    """Get a logger instance for the given module name."""
    return logging.getLogger(name)


__all__ = ["CorrelationIdFilter", "CustomJsonFormatter", "get_logger", "setup_logging"]
