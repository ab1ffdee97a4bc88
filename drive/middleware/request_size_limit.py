"""Upload size limit middleware.

Rejects requests that declare a Content-Length above the configured maximum
before any body is read. Bodies without a declared length are streamed and
the limit is enforced by the upload pipeline while hashing, so nothing is
buffered here.
Uses raw ASGI (no BaseHTTPMiddleware) for production-safe streaming.
"""

import json
from typing import Callable

from drive.middleware.request_context import get_header


async def _send_413(send: Callable, max_bytes: int, actual: int) -> None:
    """Send 413 Payload Too Large response."""
    body = json.dumps(
        {
            "error": "PAYLOAD_TOO_LARGE",
            "message": f"Upload exceeds maximum size of {max_bytes} bytes",
            "details": {"max_bytes": max_bytes, "content_length": actual},
        }
    ).encode()
    await send({
        "type": "http.response.start",
        "status": 413,
        "headers": [(b"content-type", b"application/json")],
    })
    await send({
        "type": "http.response.body",
        "body": body,
        "more_body": False,
    })


def RequestSizeLimitMiddleware(app: Callable, max_bytes: int, slack_bytes: int = 64 * 1024) -> Callable:
    """Reject requests whose Content-Length exceeds max_bytes + slack_bytes. Raw ASGI.

    slack_bytes leaves room for multipart framing around a file of exactly max_bytes.
    max_bytes == 0 disables the check.
    """
    limit = max_bytes + slack_bytes

    async def asgi_app(scope: dict, receive: Callable, send: Callable) -> None:
        if scope["type"] != "http" or not max_bytes:
            await app(scope, receive, send)
            return
        content_length = get_header(scope, "content-length")
        if content_length and content_length.isdigit() and int(content_length) > limit:
            await _send_413(send, max_bytes, int(content_length))
            return
        await app(scope, receive, send)

    return asgi_app
