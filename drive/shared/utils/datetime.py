"""
UTC datetime utilities for consistent timezone handling.

All datetime values in the system should be timezone-aware UTC.
Use these helpers instead of datetime.now() or datetime.utcnow().
"""

from datetime import UTC, datetime


def utc_now() -> datetime:
    """
    Return the current UTC datetime with timezone info.

    Returns:
        Timezone-aware datetime in UTC
    """
    return datetime.now(UTC)


def ensure_utc(dt: datetime | None) -> datetime | None:
    """
    Ensure a datetime is UTC-aware.

    - If None, returns None
    - If naive, assumes UTC and attaches timezone
    - If aware, converts to UTC

    SQLite hands back naive datetimes, so repositories normalize through this.

    Args:
        dt: A datetime that may be naive or aware

    Returns:
        UTC-aware datetime or None
    """
    if dt is None:
        return None

    if dt.tzinfo is None:
        return dt.replace(tzinfo=UTC)

    return dt.astimezone(UTC)


def to_rfc3339(dt: datetime) -> str:
    """
    Format a datetime as an RFC 3339 UTC string with a trailing "Z".

    Example: 2025-01-15T12:00:00.123456Z

    Args:
        dt: Naive (assumed UTC) or aware datetime

    Returns:
        RFC 3339 string in UTC
    """
    utc = ensure_utc(dt) or dt
    return utc.isoformat().replace("+00:00", "Z")
