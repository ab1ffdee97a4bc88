"""Request/correlation id middleware helpers and the logging context filter."""

import logging

from drive.middleware.request_context import get_header, sanitize_id
from drive.shared.context import (
    RequestContextFilter,
    get_correlation_id,
    get_request_id,
    reset_request_ids,
    set_request_ids,
)


class TestSanitizeId:
    def test_valid_kept(self) -> None:
        assert sanitize_id(" abc-123_X ") == "abc-123_X"

    def test_injection_rejected(self) -> None:
        assert sanitize_id("abc\nINFO fake log line") is None
        assert sanitize_id("a" * 65) is None
        assert sanitize_id(None) is None


def test_get_header_case_insensitive() -> None:
    scope = {"headers": [(b"x-request-id", b"abc")]}
    assert get_header(scope, "X-Request-ID") == "abc"
    assert get_header(scope, "X-Other") is None


def test_ids_bound_and_reset() -> None:
    assert get_request_id() is None
    token = set_request_ids("req-1", "corr-1")
    try:
        assert get_request_id() == "req-1"
        assert get_correlation_id() == "corr-1"
    finally:
        reset_request_ids(token)
    assert get_correlation_id() is None


def test_filter_fills_record() -> None:
    record = logging.LogRecord("t", logging.INFO, __file__, 1, "msg", None, None)
    RequestContextFilter().filter(record)
    assert record.request_id == "-"
    token = set_request_ids("req-2", "req-2")
    try:
        RequestContextFilter().filter(record)
    finally:
        reset_request_ids(token)
    assert record.request_id == "req-2"
    assert record.correlation_id == "req-2"
