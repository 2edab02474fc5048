"""Tests for structured logging."""

import json
import logging
import sys

from neometing.infrastructure.observability.logging import (
    CompactExceptionFormatter,
    CorrelationIdFilter,
    CustomJsonFormatter,
    configure_logging,
    get_correlation_id,
    set_correlation_id,
)


class TestCorrelationId:
    """Test correlation ID functionality."""

    def test_set_and_get_correlation_id(self):
        """Test setting and getting correlation ID."""
        test_id = "test-123-abc"
        result = set_correlation_id(test_id)
        assert result == test_id
        assert get_correlation_id() == test_id

    def test_set_correlation_id_generates_uuid_when_none(self):
        """Test that setting None generates a UUID."""
        result = set_correlation_id(None)
        assert len(result) == 36
        assert get_correlation_id() == result

    def test_filter_adds_correlation_id(self):
        """Test the filter copies the context ID onto records."""
        set_correlation_id("req-42")
        record = logging.LogRecord("x", logging.INFO, __file__, 1, "msg", None, None)

        assert CorrelationIdFilter().filter(record) is True
        assert record.correlation_id == "req-42"  # type: ignore[attr-defined]


class TestLoggingConfiguration:
    """Test logging configuration."""

    def test_configure_logging_debug_level(self):
        """Test configuring logging with DEBUG level."""
        configure_logging(log_level="DEBUG", json_format=False, app_name="test-app")
        logger = logging.getLogger("test")
        assert logger.getEffectiveLevel() <= logging.DEBUG

    def test_configure_logging_info_level(self):
        """Test configuring logging with INFO level."""
        configure_logging(log_level="INFO", json_format=False, app_name="test-app")
        logger = logging.getLogger("test")
        assert logger.getEffectiveLevel() == logging.INFO

    def test_configure_logging_replaces_handlers(self):
        """Test repeated configuration leaves exactly one handler."""
        configure_logging(log_level="INFO", json_format=True)
        configure_logging(log_level="INFO", json_format=False)
        root_logger = logging.getLogger()
        assert len(root_logger.handlers) == 1
        assert isinstance(root_logger.handlers[0].formatter, CompactExceptionFormatter)

    def test_json_format_selects_json_formatter(self):
        """Test configuring logging with JSON format."""
        configure_logging(log_level="INFO", json_format=True, app_name="test-app")
        root_logger = logging.getLogger()
        assert isinstance(root_logger.handlers[0].formatter, CustomJsonFormatter)

    def test_http_client_loggers_quieted(self):
        """Test httpx request lines are not logged at INFO."""
        configure_logging(log_level="DEBUG")
        assert logging.getLogger("httpx").level == logging.WARNING
        assert logging.getLogger("httpcore").level == logging.WARNING


class TestFormatters:
    """Test log output."""

    def test_json_formatter_fields(self):
        """Test the JSON record carries level, logger and correlation ID."""
        formatter = CustomJsonFormatter("%(timestamp)s %(level)s %(name)s %(message)s")
        record = logging.LogRecord(
            "neometing.test", logging.WARNING, __file__, 10, "batch %d dropped", (2,), None
        )
        record.correlation_id = "abc"

        output = json.loads(formatter.format(record))

        assert output["message"] == "batch 2 dropped"
        assert output["level"] == "WARNING"
        assert output["logger"] == "neometing.test"
        assert output["correlation_id"] == "abc"

    def test_compact_exception_root_cause_first(self):
        """Test exception chains are printed root cause first."""
        formatter = CompactExceptionFormatter()
        try:
            try:
                raise ConnectionError("refused")
            except ConnectionError as e:
                raise RuntimeError("request failed") from e
        except RuntimeError:
            exc_info = sys.exc_info()

        text = formatter.formatException(exc_info)

        lines = [line for line in text.splitlines() if line.startswith("╰─►")]
        assert lines == [
            "╰─► ConnectionError: refused",
            "╰─► RuntimeError: request failed",
        ]
