"""Shared utilities: telemetry and cross-cutting helpers.

Used by domain, application, and infrastructure. No business logic.
"""

from drive.shared.utils import (
    ensure_utc,
    generate_cuid,
    to_rfc3339,
    utc_now,
)

__all__ = [
    "generate_cuid",
    "utc_now",
    "ensure_utc",
    "to_rfc3339",
]
