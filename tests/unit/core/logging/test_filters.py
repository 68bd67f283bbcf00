"""
Tests for log filters.

Tests CorrelationIdFilter, ExtraFieldsFilter and correlation ID management.
"""

import logging
import threading

from fluent_http.core.logging.filters import (
    CorrelationIdFilter,
    ExtraFieldsFilter,
    set_correlation_id,
    get_correlation_id,
    clear_correlation_id,
)


def make_record():
    return logging.LogRecord(
        name="test",
        level=logging.INFO,
        pathname="test.py",
        lineno=1,
        msg="message",
        args=(),
        exc_info=None
    )


class TestCorrelationIdFunctions:
    """Tests for correlation ID management functions."""

    def test_set_and_get_correlation_id(self):
        """set_correlation_id and get_correlation_id work."""
        set_correlation_id("test-123")
        assert get_correlation_id() == "test-123"

        # Cleanup
        clear_correlation_id()

    def test_get_correlation_id_when_not_set(self):
        clear_correlation_id()
        assert get_correlation_id() is None

    def test_clear_correlation_id_when_not_set(self):
        """clear_correlation_id works when ID is not set."""
        clear_correlation_id()
        clear_correlation_id()  # Should not raise
        assert get_correlation_id() is None

    def test_correlation_id_is_thread_local(self):
        """Correlation ID is thread-local (isolated per thread)."""
        set_correlation_id("main-thread")
        other_thread_value = []

        def other_thread_func():
            other_thread_value.append(get_correlation_id())

        thread = threading.Thread(target=other_thread_func)
        thread.start()
        thread.join()

        assert other_thread_value == [None]
        assert get_correlation_id() == "main-thread"
        clear_correlation_id()


class TestCorrelationIdFilter:

    def test_adds_correlation_id(self):
        set_correlation_id("req-1")
        record = make_record()

        assert CorrelationIdFilter().filter(record) is True
        assert record.correlation_id == "req-1"
        clear_correlation_id()

    def test_no_attribute_without_id(self):
        clear_correlation_id()
        record = make_record()

        CorrelationIdFilter().filter(record)

        assert not hasattr(record, "correlation_id")


class TestExtraFieldsFilter:

    def test_adds_fields(self):
        record = make_record()
        ExtraFieldsFilter({"service": "billing", "env": "prod"}).filter(record)

        assert record.service == "billing"
        assert record.env == "prod"

    def test_does_not_override_existing(self):
        record = make_record()
        record.service = "from-call"

        ExtraFieldsFilter({"service": "static"}).filter(record)

        assert record.service == "from-call"
