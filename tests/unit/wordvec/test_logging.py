"""
Unit tests for wordvec logging utilities.
"""

import io
import json
import logging

import pytest

from wordvec.core.logging import (
    HumanReadableFormatter,
    StructuredFormatter,
    configure_logging,
    get_logger,
    parse_level,
)


def _record(message="Loaded vectors", **extra):
    record = logging.LogRecord(
        name="wordvec.vocabulary",
        level=logging.INFO,
        pathname=__file__,
        lineno=1,
        msg=message,
        args=(),
        exc_info=None,
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


class TestStructuredFormatter:
    """Tests for JSON log output."""

    def test_standard_fields(self):
        """Test level, logger and message fields."""
        entry = json.loads(StructuredFormatter(include_timestamp=False).format(_record()))

        assert entry == {
            "level": "INFO",
            "logger": "wordvec.vocabulary",
            "message": "Loaded vectors",
        }

    def test_context_fields(self):
        """Test that extra context fields are included."""
        record = _record(source="vectors.bin", word_count=42, vector_size=300)

        entry = json.loads(StructuredFormatter().format(record))

        assert entry["source"] == "vectors.bin"
        assert entry["word_count"] == 42
        assert entry["vector_size"] == 300
        assert "timestamp" in entry


class TestHumanReadableFormatter:
    """Tests for plain text log output."""

    def test_context_suffix(self):
        """Test the bracketed context suffix."""
        formatter = HumanReadableFormatter(include_timestamp=False)

        line = formatter.format(_record(source="vectors.bin", word_count=42))

        assert line == "wordvec.vocabulary - INFO - Loaded vectors [source=vectors.bin word_count=42]"

    def test_no_context(self):
        """Test a record without context fields."""
        line = HumanReadableFormatter(include_timestamp=False).format(_record())

        assert line == "wordvec.vocabulary - INFO - Loaded vectors"


class TestConfigureLogging:
    """Tests for configure_logging."""

    def test_single_handler(self):
        """Test that repeated calls do not add duplicate handlers."""
        stream = io.StringIO()

        logger = configure_logging(level=logging.DEBUG, stream=stream)
        configure_logging(level=logging.WARNING, stream=stream)

        assert len(logger.handlers) == 1
        assert logger.level == logging.WARNING

    def test_writes_to_stream(self):
        """Test that package records reach the configured stream."""
        stream = io.StringIO()
        configure_logging(level=logging.INFO, structured=True, stream=stream)

        get_logger("wordvec.test").info("hello")

        entry = json.loads(stream.getvalue().strip())
        assert entry["message"] == "hello"
        assert entry["logger"] == "wordvec.test"


class TestParseLevel:
    """Tests for parse_level."""

    @pytest.mark.parametrize("value,expected", [
        ("info", logging.INFO),
        ("DEBUG", logging.DEBUG),
        ("30", logging.WARNING),
        (logging.ERROR, logging.ERROR),
    ])
    def test_valid_levels(self, value, expected):
        """Test names, numeric strings and integers."""
        assert parse_level(value) == expected

    def test_unknown_level(self):
        """Test that unknown names raise ValueError."""
        with pytest.raises(ValueError, match="Unknown logging level"):
            parse_level("chatty")
