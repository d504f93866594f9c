"""Tests for logging configuration."""

import json
import logging
import sys
from unittest.mock import patch

from keyword_rag.config import Environment, Settings
from keyword_rag.logging_config import (
    DevFormatter,
    JSONFormatter,
    get_logger,
    record_extras,
    setup_logging,
)


def make_record(
    msg: str = "Test message",
    level: int = logging.INFO,
    name: str = "test",
    exc_info=None,
    **extra: object,
) -> logging.LogRecord:
    record = logging.LogRecord(
        name=name,
        level=level,
        pathname="/app/module.py",
        lineno=42,
        msg=msg,
        args=(),
        exc_info=exc_info,
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


class TestRecordExtras:
    """Tests for extra field collection."""

    def test_standard_record_has_no_extras(self) -> None:
        """Built-in LogRecord attributes are not extras."""
        assert record_extras(make_record()) == {}

    def test_collects_extra_fields(self) -> None:
        """Fields passed via extra= are collected."""
        record = make_record(document_id="doc-1", chunks=3)
        assert record_extras(record) == {"document_id": "doc-1", "chunks": 3}


class TestJSONFormatter:
    """Tests for JSON log formatter."""

    def test_format_basic_message(self) -> None:
        """Basic log message is formatted as JSON."""
        data = json.loads(JSONFormatter().format(make_record()))

        assert data["level"] == "INFO"
        assert data["logger"] == "test"
        assert data["message"] == "Test message"
        assert "timestamp" in data
        assert "extra" not in data

    def test_format_includes_location(self) -> None:
        """Log includes file and line information."""
        data = json.loads(JSONFormatter().format(make_record(level=logging.ERROR)))
        assert data["location"] == "/app/module.py:42"

    def test_format_includes_extras(self) -> None:
        """Extra fields are nested under "extra"."""
        record = make_record(document_id="doc-1", chunks=2)
        data = json.loads(JSONFormatter().format(record))
        assert data["extra"] == {"document_id": "doc-1", "chunks": 2}

    def test_format_with_exception(self) -> None:
        """Exception info is included in output."""
        try:
            raise ValueError("test error")
        except ValueError:
            exc_info = sys.exc_info()

        data = json.loads(JSONFormatter().format(make_record(level=logging.ERROR, exc_info=exc_info)))

        assert "ValueError" in data["exception"]


class TestDevFormatter:
    """Tests for development formatter."""

    def test_format_includes_level(self) -> None:
        """Development format includes level, logger and message."""
        output = DevFormatter().format(
            make_record("Warning message", level=logging.WARNING, name="test.module")
        )

        assert "WARNING" in output
        assert "test.module" in output
        assert "Warning message" in output

    def test_format_appends_extras(self) -> None:
        """Extra fields are appended as key=value pairs."""
        output = DevFormatter().format(make_record("Added document", document_id="d1", chunks=4))
        assert output.endswith("| document_id=d1 chunks=4")


class TestSetupLogging:
    """Tests for logging setup."""

    def test_returns_root_logger(self) -> None:
        """setup_logging returns root logger."""
        assert setup_logging(level="INFO", json_output=False) is logging.getLogger()

    def test_uses_json_in_production(self) -> None:
        """JSON output is used in production environment."""
        mock_settings = Settings(environment=Environment.PRODUCTION)

        with patch("keyword_rag.logging_config.get_settings", return_value=mock_settings):
            setup_logging()

        root = logging.getLogger()
        assert len(root.handlers) == 1
        assert isinstance(root.handlers[0].formatter, JSONFormatter)

    def test_uses_dev_formatter_in_development(self) -> None:
        """Dev formatter is used in development environment."""
        mock_settings = Settings(environment=Environment.DEVELOPMENT)

        with patch("keyword_rag.logging_config.get_settings", return_value=mock_settings):
            setup_logging()

        root = logging.getLogger()
        assert len(root.handlers) == 1
        assert isinstance(root.handlers[0].formatter, DevFormatter)

    def test_level_override(self) -> None:
        """Log level can be overridden."""
        setup_logging(level="DEBUG", json_output=False)
        assert logging.getLogger().level == logging.DEBUG

    def test_quiets_http_clients(self) -> None:
        """HTTP client loggers are raised to WARNING."""
        setup_logging(level="DEBUG", json_output=False)
        assert logging.getLogger("httpx").level == logging.WARNING


class TestGetLogger:
    """Tests for named logger retrieval."""

    def test_returns_named_logger(self) -> None:
        """get_logger returns a logger with the given name."""
        assert get_logger("keyword_rag.module").name == "keyword_rag.module"

    def test_logger_hierarchy(self) -> None:
        """Child loggers inherit the root level."""
        setup_logging(level="WARNING", json_output=False)
        child = get_logger("keyword_rag.sub")
        assert child.getEffectiveLevel() == logging.WARNING
