"""Unit tests for logging configuration."""

import json
import logging

from portfolio_manager.logging_config import (
    JsonFormatter,
    RequestIdFilter,
    bind_request_id,
    configure_logging,
    get_request_id,
)


def _record(message: str, **extra) -> logging.LogRecord:
    record = logging.LogRecord("portfolio_manager.audit", logging.WARNING, __file__, 1, message, None, None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


class TestRequestId:

    def test_bound_only_inside_block(self):
        """The request ID is visible inside the block and reset after it."""
        assert get_request_id() is None
        with bind_request_id("req-1"):
            assert get_request_id() == "req-1"
        assert get_request_id() is None

    def test_filter_injects_request_id(self):
        """The filter copies the bound ID onto the record."""
        record = _record("Access denied")
        with bind_request_id("req-2"):
            RequestIdFilter().filter(record)

        assert record.request_id == "req-2"

    def test_filter_marks_unbound(self):
        """Records logged outside a bound block get a placeholder."""
        record = _record("Entity created")
        RequestIdFilter().filter(record)

        assert record.request_id == "-"


class TestJsonFormatter:

    def test_extra_fields_are_included(self):
        """Structured extra= fields appear next to the envelope."""
        record = _record("Access denied", entity="category", entity_id=3, user_id="u2")
        record.request_id = "req-3"

        payload = json.loads(JsonFormatter().format(record))

        assert payload["message"] == "Access denied"
        assert payload["level"] == "WARNING"
        assert payload["request_id"] == "req-3"
        assert payload["entity"] == "category"
        assert payload["entity_id"] == 3
        assert payload["user_id"] == "u2"

    def test_unserializable_extra_is_stringified(self):
        """Values JSON cannot encode are written as their str()."""
        record = _record("Entity created", data=object())

        payload = json.loads(JsonFormatter().format(record))

        assert payload["data"].startswith("<object object")

    def test_placeholder_request_id_is_omitted(self):
        """An unbound request ID does not clutter the line."""
        record = _record("Entity deleted")
        record.request_id = "-"

        payload = json.loads(JsonFormatter().format(record))

        assert "request_id" not in payload


class TestConfigureLogging:

    def test_production_uses_json(self, restore_logging):
        """Production installs one JSON handler with the request ID filter."""
        handler = configure_logging(log_level="warning", environment="production")

        assert handler in logging.getLogger().handlers
        assert isinstance(handler.formatter, JsonFormatter)
        assert any(isinstance(f, RequestIdFilter) for f in handler.filters)
        assert logging.getLogger().level == logging.WARNING

    def test_reconfigure_replaces_own_handler_only(self, restore_logging):
        """A second call swaps the package handler and keeps foreign ones."""
        foreign = logging.NullHandler()
        logging.getLogger().addHandler(foreign)

        first = configure_logging()
        second = configure_logging(debug=True)

        handlers = logging.getLogger().handlers
        assert first not in handlers
        assert second in handlers
        assert foreign in handlers
        assert logging.getLogger().level == logging.DEBUG
        logging.getLogger().removeHandler(foreign)

    def test_audit_logger_level(self, restore_logging):
        """The audit logger can run at its own level."""
        configure_logging(log_level="INFO", audit_logger_name="pm.test.audit", audit_level="WARNING")

        assert logging.getLogger("pm.test.audit").level == logging.WARNING

    def test_unknown_level_falls_back_to_info(self, restore_logging):
        """A misspelt level name does not break startup."""
        configure_logging(log_level="chatty")

        assert logging.getLogger().level == logging.INFO
