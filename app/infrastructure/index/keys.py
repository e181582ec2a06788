"""Index key builders. Single place for key format (DRY).

Records are keyed by the file locator itself. A bare identifier is resolved
by probing INDEX_PROBE_PREFIXES in order; the type-specific prefixes come
from earlier versions and must keep resolving without a migration.
"""

from app.core.constants import (
    GUEST_COUNTER_PREFIX,
    INDEX_KEY_SEP,
    INDEX_PROBE_PREFIXES,
)


def record_key(locator: str) -> str:
    """Index key for a stored file's record (the locator string)."""
    if not locator:
        raise ValueError("Index key must be a non-empty locator")
    return locator


def candidate_keys(identifier: str) -> list[str]:
    """Keys checked for a bare identifier, highest priority first."""
    return [f"{prefix}{identifier}" for prefix in INDEX_PROBE_PREFIXES]


def guest_counter_key(client_id: str, day: str) -> str:
    """Daily guest upload counter for one client (IP) and UTC day."""
    return f"{GUEST_COUNTER_PREFIX}{INDEX_KEY_SEP}{day}{INDEX_KEY_SEP}{client_id}"
