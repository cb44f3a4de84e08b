"""Tests for logging configuration and formatters."""

import json
import logging

import pytest

from ats.logging import ComponentLoggerAdapter, get_logger
from ats.logging.config import (
    ContextualFilter,
    JSONFormatter,
    KeyValueFormatter,
    configure_logging,
)
from ats.logging.context import log_context


@pytest.fixture
def logger():
    """Create a test logger with no handlers."""
    test_logger = logging.getLogger("test_logger")
    test_logger.setLevel(logging.DEBUG)
    test_logger.handlers.clear()
    yield test_logger
    test_logger.handlers.clear()


@pytest.fixture
def restore_root_logger():
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield root
    root.handlers[:] = handlers
    root.setLevel(level)


def test_json_formatter_basic(logger):
    """Test JSONFormatter produces valid JSON with mandatory fields."""
    record = logger.makeRecord("ats.test", logging.INFO, "test.py", 1, "Test message", (), None)

    log_obj = json.loads(JSONFormatter().format(record))

    assert log_obj["level"] == "INFO"
    assert log_obj["message"] == "Test message"
    assert log_obj["logger"] == "ats.test"
    assert log_obj["timestamp"].endswith("Z")


def test_json_formatter_with_extra_fields(logger):
    record = logger.makeRecord(
        "test",
        logging.INFO,
        "test.py",
        1,
        "Email sent",
        (),
        None,
        extra={"event": "transport.send.success", "count": 2, "mocked": True},
    )

    log_obj = json.loads(JSONFormatter().format(record))

    assert log_obj["event"] == "transport.send.success"
    assert log_obj["count"] == 2
    assert log_obj["mocked"] is True


def test_json_formatter_redacts_secrets(logger):
    record = logger.makeRecord(
        "test",
        logging.INFO,
        "test.py",
        1,
        "Token refreshed",
        (),
        None,
        extra={"access_token": "ya29.secret", "api_key": "SG.secret"},
    )

    output = JSONFormatter().format(record)

    assert "ya29.secret" not in output
    assert "SG.secret" not in output
    assert json.loads(output)["access_token"] == "***"


def test_contextual_filter_adds_static_and_context_fields(logger):
    log_filter = ContextualFilter(service="test-service", environment="test")

    with log_context(application_id=42, transport="gmail"):
        record = logger.makeRecord("test", logging.INFO, "test.py", 1, "msg", (), None)
        log_filter.filter(record)

    assert record.service == "test-service"
    assert record.environment == "test"
    assert record.application_id == 42
    assert record.transport == "gmail"


def test_contextual_filter_prefers_explicit_extra(logger):
    log_filter = ContextualFilter()

    with log_context(application_id=42):
        record = logger.makeRecord(
            "test", logging.INFO, "test.py", 1, "msg", (), None, extra={"application_id": 7}
        )
        log_filter.filter(record)

    assert record.application_id == 7


def test_key_value_formatter_with_extras(logger):
    formatter = KeyValueFormatter(
        "%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    record = logger.makeRecord(
        "test",
        logging.INFO,
        "test.py",
        1,
        "Test message",
        (),
        None,
        extra={"event": "test.event", "count": 42, "mocked": False, "subject": "Job Offer: X"},
    )

    output = formatter.format(record)

    assert "[INFO]" in output
    assert "event=test.event" in output
    assert "count=42" in output
    assert "mocked=false" in output
    assert 'subject="Job Offer: X"' in output


def test_configure_logging_json(restore_root_logger):
    configure_logging(level="DEBUG", format_type="json", environment="test")

    root = restore_root_logger
    assert root.level == logging.DEBUG
    assert len(root.handlers) == 1
    assert isinstance(root.handlers[0].formatter, JSONFormatter)


def test_configure_logging_rejects_invalid_level(restore_root_logger):
    with pytest.raises(ValueError, match="Invalid log level"):
        configure_logging(level="LOUD")


def test_configure_logging_rejects_invalid_format(restore_root_logger):
    with pytest.raises(ValueError, match="Invalid log format"):
        configure_logging(format_type="xml")


def test_get_logger_with_component_injects_field():
    adapter = get_logger("ats.test", component="calendar")

    assert isinstance(adapter, ComponentLoggerAdapter)
    msg, kwargs = adapter.process("hello", {"extra": {"event": "x"}})
    assert kwargs["extra"] == {"component": "calendar", "event": "x"}


def test_get_logger_without_component_returns_plain_logger():
    assert isinstance(get_logger("ats.test"), logging.Logger)
