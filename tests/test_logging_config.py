"""Tests for logging setup, record enrichment and formatting."""

import json
import logging
import sys
from datetime import date, datetime, timezone

import pytest

from emirimo.logging import ComponentLoggerAdapter, get_logger
from emirimo.logging.config import (
    SERVICE_NAME,
    ContextualFilter,
    JSONFormatter,
    KeyValueFormatter,
    configure_logging,
)
from emirimo.logging.context import LogContextVar, log_context

KEY_VALUE_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


@pytest.fixture(autouse=True)
def isolated_context():
    token = LogContextVar.set({})
    yield
    LogContextVar.reset(token)


@pytest.fixture
def root_logger():
    """Restore the root logger configuration after configure_logging runs."""
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield root
    root.handlers[:] = handlers
    root.setLevel(level)


def make_record(message="Notified seeker", level=logging.INFO, extra=None, exc_info=None):
    return logging.getLogger("emirimo.tests").makeRecord(
        "emirimo.notifications.service",
        level,
        "service.py",
        1,
        message,
        (),
        exc_info,
        extra=extra,
    )


class TestContextualFilter:
    def test_defaults_to_service_name(self):
        record = make_record()

        ContextualFilter().filter(record)

        assert record.service == SERVICE_NAME == "emirimo"
        assert record.environment == "local"

    def test_copies_fanout_context_onto_record(self):
        record = make_record()

        with log_context(job_id="job-42", batch_id="b-1", seeker_id="u-1001"):
            ContextualFilter(environment="staging").filter(record)

        assert (record.job_id, record.batch_id, record.seeker_id) == ("job-42", "b-1", "u-1001")
        assert record.environment == "staging"

    def test_record_extra_wins_over_context(self):
        record = make_record(extra={"job_id": "job-43"})

        with log_context(job_id="job-42"):
            ContextualFilter().filter(record)

        assert record.job_id == "job-43"

    def test_context_cannot_overwrite_standard_attributes(self):
        record = make_record()

        with log_context(levelname="SPOOFED", seeker_id="u-1"):
            ContextualFilter().filter(record)

        assert record.levelname == "INFO"
        assert record.seeker_id == "u-1"


class TestJSONFormatter:
    def test_extras_and_context_merged_without_standard_attributes(self):
        record = make_record(extra={"event": "fanout.recipient.sent", "score": 86})
        with log_context(batch_id="b-1"):
            ContextualFilter(environment="test").filter(record)

        payload = json.loads(JSONFormatter().format(record))

        assert payload["message"] == "Notified seeker"
        assert payload["level"] == "INFO"
        assert payload["event"] == "fanout.recipient.sent"
        assert payload["score"] == 86
        assert payload["batch_id"] == "b-1"
        assert payload["service"] == "emirimo"
        for standard in ("name", "msg", "args", "levelno", "pathname", "lineno", "thread"):
            assert standard not in payload

    def test_dates_and_datetimes_are_iso_formatted(self):
        record = make_record(
            extra={
                "since": datetime(2026, 10, 5, 8, 30, tzinfo=timezone.utc),
                "today": date(2026, 10, 19),
            }
        )

        payload = json.loads(JSONFormatter().format(record))

        assert payload["since"] == "2026-10-05T08:30:00+00:00"
        assert payload["today"] == "2026-10-19"

    def test_unserializable_values_fall_back_to_str(self):
        class JobRef:
            def __str__(self):
                return "job-42"

        record = make_record(extra={"job": JobRef(), "ids": ["u-1", JobRef()]})

        payload = json.loads(JSONFormatter().format(record))

        assert payload["job"] == "job-42"
        assert payload["ids"] == ["u-1", "job-42"]

    def test_exception_is_rendered(self):
        try:
            raise ValueError("template missing")
        except ValueError:
            record = make_record(level=logging.ERROR, exc_info=sys.exc_info())

        payload = json.loads(JSONFormatter().format(record))

        assert "ValueError: template missing" in payload["exc_info"]

    def test_timestamp_is_utc_milliseconds(self):
        record = make_record()
        record.created = datetime(2026, 10, 19, 7, 0, 0, 250000, tzinfo=timezone.utc).timestamp()

        payload = json.loads(JSONFormatter().format(record))

        assert payload["timestamp"] == "2026-10-19T07:00:00.250Z"


class TestKeyValueFormatter:
    def test_extras_sorted_and_service_labels_skipped(self):
        record = make_record(extra={"score": 86, "event": "fanout.recipient.sent"})
        ContextualFilter(environment="test").filter(record)

        output = KeyValueFormatter(KEY_VALUE_FORMAT).format(record)

        assert output.endswith("event=fanout.recipient.sent score=86")
        assert "service=" not in output
        assert "environment=" not in output

    def test_value_rendering(self):
        record = make_record(
            extra={
                "reason": "Matches 1 required skills: Python",
                "email_sent": False,
                "error": None,
                "today": date(2026, 10, 19),
            }
        )

        output = KeyValueFormatter(KEY_VALUE_FORMAT).format(record)

        assert 'reason="Matches 1 required skills: Python"' in output
        assert "email_sent=false" in output
        assert "error=null" in output
        assert "today=2026-10-19" in output


class TestConfigureLogging:
    def test_json_handler_carries_environment(self, root_logger, capsys):
        configure_logging(level="debug", format_type="json", environment="production")

        handler = root_logger.handlers[-1]
        assert isinstance(handler.formatter, JSONFormatter)
        assert root_logger.level == logging.DEBUG

        lines = capsys.readouterr().out.strip().splitlines()
        configured = json.loads(lines[-1])
        assert configured["event"] == "logging.configured"
        assert configured["environment"] == "production"
        assert configured["log_format"] == "json"

    def test_key_value_is_default(self, root_logger):
        configure_logging()

        assert len(root_logger.handlers) == 1
        assert isinstance(root_logger.handlers[0].formatter, KeyValueFormatter)

    @pytest.mark.parametrize(
        "kwargs,message",
        [({"level": "VERBOSE"}, "Invalid log level"), ({"format_type": "xml"}, "Invalid log format")],
    )
    def test_rejects_bad_settings(self, root_logger, kwargs, message):
        with pytest.raises(ValueError, match=message):
            configure_logging(**kwargs)


class TestGetLogger:
    def test_component_is_merged_into_extra(self):
        adapter = get_logger("emirimo.matching.ranker", component="ranker")

        assert isinstance(adapter, ComponentLoggerAdapter)
        _, kwargs = adapter.process("msg", {"extra": {"event": "ranker.completed"}})
        assert kwargs["extra"] == {"component": "ranker", "event": "ranker.completed"}

    def test_call_extra_overrides_component(self):
        adapter = get_logger("emirimo.main", component="cli")

        _, kwargs = adapter.process("msg", {"extra": {"component": "scheduler"}})

        assert kwargs["extra"]["component"] == "scheduler"

    def test_without_component_returns_plain_logger(self):
        assert isinstance(get_logger("emirimo.seed"), logging.Logger)
