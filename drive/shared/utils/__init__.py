"""Shared utilities: datetime and generators."""

from drive.shared.utils.datetime import (
    ensure_utc,
    to_rfc3339,
    utc_now,
)
from drive.shared.utils.generators import generate_cuid

__all__ = [
    "generate_cuid",
    "utc_now",
    "ensure_utc",
    "to_rfc3339",
]
