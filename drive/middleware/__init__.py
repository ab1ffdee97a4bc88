"""HTTP middleware: upload size limit, request ID, correlation ID.

Applied in main app; order matters (last added = outermost).
Import and use from drive.main.
"""

from drive.middleware.request_context import (
    CorrelationIDMiddleware,
    RequestIDMiddleware,
)
from drive.middleware.request_size_limit import RequestSizeLimitMiddleware

__all__ = [
    "CorrelationIDMiddleware",
    "RequestIDMiddleware",
    "RequestSizeLimitMiddleware",
]
