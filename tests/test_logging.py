"""Tests for logging helpers."""

import json
import logging

from tunesearch.utils.logging import JSONFormatter, LogContext


def make_record(message="hello"):
    return logging.getLogger("tunesearch.test").makeRecord(
        "tunesearch.test", logging.INFO, __file__, 1, message, (), None
    )


class TestJSONFormatter:
    """Structured output."""

    def test_basic_fields(self):
        entry = json.loads(JSONFormatter().format(make_record("searching")))

        assert entry["level"] == "INFO"
        assert entry["logger"] == "tunesearch.test"
        assert entry["message"] == "searching"
        assert "query" not in entry

    def test_context_fields_are_included(self):
        with LogContext(query="jazz", provider="youtube"):
            record = logging.getLogRecordFactory()(
                "tunesearch.test", logging.INFO, __file__, 1, "searching", (), None
            )

        entry = json.loads(JSONFormatter().format(record))

        assert entry["query"] == "jazz"
        assert entry["provider"] == "youtube"


class TestLogContext:
    """Record factory restoration."""

    def test_factory_is_restored(self):
        before = logging.getLogRecordFactory()

        with LogContext(query="jazz"):
            assert logging.getLogRecordFactory() is not before

        assert logging.getLogRecordFactory() is before
