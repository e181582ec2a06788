"""
UTC datetime utilities for consistent timezone handling.

All datetime values in the system should be timezone-aware UTC.
Stored timestamps are Unix milliseconds (the index format); use these
helpers instead of calling time.time() directly.
"""

from datetime import UTC, datetime


def utc_now() -> datetime:
    """
    Return the current UTC datetime with timezone info.

    Returns:
        Timezone-aware datetime in UTC
    """
    return datetime.now(UTC)


def now_ms() -> int:
    """
    Return the current Unix time in milliseconds.

    Used for generated file ids and the created-at field of index records.

    Returns:
        Milliseconds since epoch
    """
    return int(utc_now().timestamp() * 1000)


def utc_day_stamp() -> str:
    """Return the current UTC date as YYYY-MM-DD (guest quota buckets)."""
    return utc_now().strftime("%Y-%m-%d")
