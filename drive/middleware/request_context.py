"""Request ID and correlation ID middleware.

RequestIDMiddleware generates or forwards X-Request-ID; CorrelationIDMiddleware
forwards X-Correlation-ID or falls back to the request id. Both echo the id
on the response, store it on scope state, and bind it to the logging context
(drive.shared.context) for the duration of the request.
Client-provided values are sanitized (length + character set) to prevent log injection.
Uses raw ASGI (no BaseHTTPMiddleware) for production-safe streaming.
"""

import re
import uuid
from typing import Callable

from drive.shared.context import reset_request_ids, set_request_ids

# Safe for logging: alphanumeric, hyphen, underscore; max length to avoid abuse.
ID_MAX_LENGTH = 64
ID_ALLOWED_PATTERN = re.compile(r"^[a-zA-Z0-9_-]{1," + str(ID_MAX_LENGTH) + r"}$")


def get_header(scope: dict, name: str) -> str | None:
    """Return first header value for name (case-insensitive). Headers are (bytes, bytes)."""
    want = name.lower().encode()
    for k, v in scope.get("headers", []):
        if k.lower() == want:
            return v.decode("utf-8", errors="replace")
    return None


def sanitize_id(raw: str | None) -> str | None:
    """Return raw stripped if valid and safe; otherwise None."""
    if not raw or not ID_ALLOWED_PATTERN.match(raw.strip()):
        return None
    return raw.strip()


def _with_response_header(send: Callable, name: str, value: str) -> Callable:
    header = (name.encode(), value.encode())

    async def send_wrapper(message: dict) -> None:
        if message["type"] == "http.response.start":
            message["headers"] = [*message.get("headers", []), header]
        await send(message)

    return send_wrapper


def RequestIDMiddleware(app: Callable, header_name: str = "X-Request-ID") -> Callable:
    """Add or forward X-Request-ID on each request and response. Raw ASGI."""

    async def asgi_app(scope: dict, receive: Callable, send: Callable) -> None:
        if scope["type"] != "http":
            await app(scope, receive, send)
            return
        request_id = sanitize_id(get_header(scope, header_name)) or str(uuid.uuid4())
        scope.setdefault("state", {})["request_id"] = request_id
        token = set_request_ids(request_id, request_id)
        try:
            await app(scope, receive, _with_response_header(send, header_name, request_id))
        finally:
            reset_request_ids(token)

    return asgi_app


def CorrelationIDMiddleware(
    app: Callable, header_name: str = "X-Correlation-ID"
) -> Callable:
    """Add or forward X-Correlation-ID; fall back to request_id if set on scope state. Raw ASGI.

    Must run inside RequestIDMiddleware (add it first so it is the inner one).
    """

    async def asgi_app(scope: dict, receive: Callable, send: Callable) -> None:
        if scope["type"] != "http":
            await app(scope, receive, send)
            return
        state = scope.setdefault("state", {})
        request_id = state.get("request_id") or str(uuid.uuid4())
        correlation_id = sanitize_id(get_header(scope, header_name)) or request_id
        state["correlation_id"] = correlation_id
        token = set_request_ids(request_id, correlation_id)
        try:
            await app(
                scope, receive, _with_response_header(send, header_name, correlation_id)
            )
        finally:
            reset_request_ids(token)

    return asgi_app
