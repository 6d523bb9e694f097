"""Structured JSON logging with parse context."""
import logging
import sys
from typing import Any, TextIO

from pythonjsonlogger import jsonlogger

from dto_importer.config import get_settings

CONTEXT_FIELDS = ("parser", "record", "field", "ref", "depth")


class ParseContextFilter(logging.Filter):
    """Add parse context to log records."""

    def filter(self, record: logging.LogRecord) -> bool:
        """Add default parse context fields if not present."""
        for name in CONTEXT_FIELDS:
            if not hasattr(record, name):
                setattr(record, name, None)
        return True


class CustomJsonFormatter(jsonlogger.JsonFormatter):
    """Custom JSON formatter with standardized field names."""

    def add_fields(
        self,
        log_record: dict[str, Any],
        record: logging.LogRecord,
        message_dict: dict[str, Any],
    ) -> None:
        """Add custom fields to the log record."""
        super().add_fields(log_record, record, message_dict)

        if not log_record.get("timestamp"):
            log_record["timestamp"] = self.formatTime(record, self.datefmt)

        log_record["level"] = record.levelname
        log_record["logger"] = record.name

        for name in CONTEXT_FIELDS:
            value = getattr(record, name, None)
            if value is not None:
                log_record[name] = value


def setup_logging(stream: TextIO | None = None) -> None:
    """
    Configure logging for the importer according to settings.

    Args:
        stream: Output stream (default: stdout)
    """
    settings = get_settings()

    handler = logging.StreamHandler(stream or sys.stdout)

    if settings.log_format == "json":
        formatter: logging.Formatter = CustomJsonFormatter(
            "%(timestamp)s %(level)s %(name)s %(message)s",
            datefmt="%Y-%m-%dT%H:%M:%S",
        )
    else:
        formatter = logging.Formatter(
            "%(asctime)s %(levelname)s %(name)s: %(message)s",
            datefmt="%Y-%m-%dT%H:%M:%S",
        )
    handler.setFormatter(formatter)
    handler.addFilter(ParseContextFilter())

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(settings.log_level.upper())


def get_logger(name: str) -> logging.LoggerAdapter:
    """
    Get a logger with parse context support.

    Args:
        name: Logger name (typically __name__)

    Returns:
        LoggerAdapter that can accept parse context in extra dict
    """
    logger = logging.getLogger(name)
    return logging.LoggerAdapter(logger, extra={})


def with_parse_context(
    parser: str | None = None,
    record: str | None = None,
    field: str | None = None,
    ref: str | None = None,
    depth: int | None = None,
    **kwargs: Any,
) -> dict[str, Any]:
    """
    Create an extra dict with parse context for logging.

    Args:
        parser: Parser type name (Data or Schema)
        record: Record being built
        field: Field being classified
        ref: Reference pointer being followed
        depth: Inline nesting depth
        **kwargs: Additional context fields

    Returns:
        Dict to pass as extra parameter to logger methods
    """
    extra = kwargs.copy()
    if parser:
        extra["parser"] = parser
    if record:
        extra["record"] = record
    if field:
        extra["field"] = field
    if ref:
        extra["ref"] = ref
    if depth is not None:
        extra["depth"] = depth
    return extra
