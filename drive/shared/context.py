"""Request context management using contextvars.

Holds the request and correlation ids of the request being served so log
records can carry them. Tasks created while serving a request (webhook
fan-out and deliveries) inherit a copy, so their log lines keep the ids of
the upload or delete that triggered them.

Usage:
    token = set_request_ids(request_id="abc", correlation_id="abc")
    ...
    reset_request_ids(token)
"""

import logging
from contextvars import ContextVar, Token

_request_ids: ContextVar[tuple[str, str] | None] = ContextVar(
    "request_ids", default=None
)


def set_request_ids(request_id: str, correlation_id: str) -> Token:
    """Bind ids to the current context; returns a token for reset_request_ids."""
    return _request_ids.set((request_id, correlation_id))


def reset_request_ids(token: Token) -> None:
    _request_ids.reset(token)


def get_request_id() -> str | None:
    ids = _request_ids.get()
    return ids[0] if ids else None


def get_correlation_id() -> str | None:
    ids = _request_ids.get()
    return ids[1] if ids else None


class RequestContextFilter(logging.Filter):
    """Adds request_id and correlation_id attributes ("-" outside a request) to every record."""

    def filter(self, record: logging.LogRecord) -> bool:
        ids = _request_ids.get()
        record.request_id = ids[0] if ids else "-"
        record.correlation_id = ids[1] if ids else "-"
        return True
