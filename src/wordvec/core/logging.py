"""
Logging utilities for the wordvec package.

Provides human-readable and JSON-structured formatters that surface the
context fields attached to load and query log records.
"""

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Optional, TextIO


PACKAGE_LOGGER = "wordvec"

# Fields passed via ``extra=`` that the formatters know how to render
CONTEXT_FIELDS = ("source", "word_count", "vector_size", "query", "duration_ms")


class StructuredFormatter(logging.Formatter):
    """
    Formatter that outputs JSON-structured log lines.

    Each log line includes:
    - Standard log fields (timestamp, level, message, logger)
    - Context fields if present (source, word_count, vector_size, query)
    - Exception text if the record carries exc_info
    """

    def __init__(self, include_timestamp: bool = True):
        super().__init__()
        self.include_timestamp = include_timestamp

    def format(self, record: logging.LogRecord) -> str:
        """Format the log record as JSON."""
        log_entry = {
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        if self.include_timestamp:
            log_entry["timestamp"] = datetime.fromtimestamp(
                record.created, tz=timezone.utc
            ).isoformat()

        for field in CONTEXT_FIELDS:
            value = getattr(record, field, None)
            if value is not None:
                log_entry[field] = value

        if record.exc_info:
            log_entry["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_entry, default=str)


class HumanReadableFormatter(logging.Formatter):
    """
    Formatter that outputs human-readable log lines with context.

    Format: TIMESTAMP - LOGGER - LEVEL - MESSAGE [source=X word_count=Y]
    """

    def __init__(self, include_timestamp: bool = True):
        if include_timestamp:
            fmt = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
        else:
            fmt = "%(name)s - %(levelname)s - %(message)s"
        super().__init__(fmt)

    def format(self, record: logging.LogRecord) -> str:
        """Format the log record with context suffix."""
        base = super().format(record)

        context_parts = []
        for field in ("source", "word_count", "vector_size"):
            value = getattr(record, field, None)
            if value is not None:
                context_parts.append(f"{field}={value}")

        if context_parts:
            return f"{base} [{' '.join(context_parts)}]"
        return base


def get_logger(name: str, level: Optional[int] = None) -> logging.Logger:
    """
    Get a logger instance for the wordvec package.

    Args:
        name: Logger name (typically __name__ of the calling module)
        level: Optional logging level override

    Returns:
        Logger instance
    """
    logger = logging.getLogger(name)

    if level is not None:
        logger.setLevel(level)

    return logger


def configure_logging(
    level: int = logging.INFO,
    format_string: Optional[str] = None,
    include_timestamp: bool = True,
    structured: bool = False,
    stream: Optional[TextIO] = None,
) -> logging.Logger:
    """
    Configure the ``wordvec`` package logger.

    Attaches a single stream handler; calling it again only updates levels.

    Args:
        level: Logging level (default: INFO)
        format_string: Custom format string (ignored if structured=True)
        include_timestamp: Whether to include timestamp in log messages
        structured: If True, output JSON-structured logs; if False, human-readable
        stream: Output stream for the handler (default: sys.stdout)

    Returns:
        The configured package logger

    Example:
        >>> from wordvec.core.logging import configure_logging
        >>> configure_logging(level=logging.DEBUG, structured=True)
    """
    package_logger = logging.getLogger(PACKAGE_LOGGER)
    package_logger.setLevel(level)

    # Only add handler if none exist (avoid duplicate handlers)
    if not package_logger.handlers:
        handler = logging.StreamHandler(stream or sys.stdout)
        handler.setLevel(level)

        if structured:
            formatter = StructuredFormatter(include_timestamp=include_timestamp)
        elif format_string:
            formatter = logging.Formatter(format_string)
        else:
            formatter = HumanReadableFormatter(include_timestamp=include_timestamp)

        handler.setFormatter(formatter)
        package_logger.addHandler(handler)
    else:
        for handler in package_logger.handlers:
            handler.setLevel(level)

    return package_logger


def parse_level(value) -> int:
    """
    Convert a level name or number into a logging level.

    Raises:
        ValueError: If the name is not a known logging level
    """
    if isinstance(value, int):
        return value
    text = str(value).strip()
    if text.isdigit():
        return int(text)
    level = logging.getLevelName(text.upper())
    if not isinstance(level, int):
        raise ValueError(f"Unknown logging level: {value}")
    return level
