"""Tests for structured logging."""

import json
import logging
import sys

from jsonpage.observability.logging import (
    JSONFormatter,
    ContextLogger,
    configure_logging,
    get_logger,
)


def make_record(msg: str = "Test") -> logging.LogRecord:
    return logging.LogRecord(
        name="test",
        level=logging.INFO,
        pathname="",
        lineno=0,
        msg=msg,
        args=(),
        exc_info=None,
    )


class TestJSONFormatter:
    """Tests for JSONFormatter."""

    def test_format_basic_message(self):
        """Formats basic log message as JSON."""
        data = json.loads(JSONFormatter().format(make_record("Test message")))

        assert data["message"] == "Test message"
        assert data["level"] == "INFO"
        assert data["logger"] == "test"
        assert "timestamp" in data

    def test_format_with_extra_fields(self):
        """Includes extra fields in JSON output."""
        record = make_record()
        record.request_id = "req-1"
        record.design_id = None
        record.templates = 3

        data = json.loads(JSONFormatter().format(record))

        assert data["request_id"] == "req-1"
        assert data["design_id"] is None
        assert data["templates"] == 3

    def test_non_scalar_extras_stringified(self):
        record = make_record()
        record.path = ["a", "b"]

        data = json.loads(JSONFormatter().format(record))

        assert data["path"] == "['a', 'b']"

    def test_exception_included(self):
        try:
            raise ValueError("boom")
        except ValueError:
            record = logging.LogRecord("test", logging.ERROR, "", 0, "failed", (), sys.exc_info())

        data = json.loads(JSONFormatter().format(record))

        assert "ValueError: boom" in data["exception"]


class TestContextLogger:
    """Tests for ContextLogger."""

    def test_with_context(self):
        """Can add context to logger."""
        logger = ContextLogger(logging.getLogger("test_context"))

        ctx_logger = logger.with_context(request_id="abc")

        assert ctx_logger is not logger
        assert ctx_logger._context == {"request_id": "abc"}
        assert logger._context == {}

    def test_context_chaining(self):
        """Can chain context additions."""
        ctx = ContextLogger(logging.getLogger("test_chain")).with_context(request_id="r").with_context(document="index")

        assert ctx._context == {"request_id": "r", "document": "index"}

    def test_context_reaches_records(self, caplog):
        ctx = get_logger("test_records").with_context(request_id="r-9")

        with caplog.at_level(logging.INFO, logger="test_records"):
            ctx.info("hello", design_id="d")

        record = caplog.records[-1]
        assert record.request_id == "r-9"
        assert record.design_id == "d"


class TestConfigureLogging:
    """Tests for configure_logging."""

    def test_configure_json_format(self):
        logger = configure_logging(log_format="json", log_level="INFO", logger_name="test_json")

        assert len(logger.handlers) == 1
        assert isinstance(logger.handlers[0].formatter, JSONFormatter)

    def test_configure_text_format(self):
        logger = configure_logging(log_format="text", log_level="DEBUG", logger_name="test_text")

        assert logger.level == logging.DEBUG
        assert not isinstance(logger.handlers[0].formatter, JSONFormatter)

    def test_reconfigure_replaces_handler(self):
        configure_logging(logger_name="test_again")
        logger = configure_logging(logger_name="test_again")

        assert len(logger.handlers) == 1


class TestGetLogger:

    def test_returns_context_logger(self):
        assert isinstance(get_logger("test"), ContextLogger)
