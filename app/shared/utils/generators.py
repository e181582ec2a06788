"""ID and value generators (generated file ids)."""

import secrets
import string

from app.shared.utils.datetime import now_ms

_BASE36_ALPHABET = string.digits + string.ascii_lowercase
_RANDOM_SUFFIX_LENGTH = 6


def random_base36(length: int = _RANDOM_SUFFIX_LENGTH) -> str:
    """Return a random lowercase base36 string of the given length."""
    return "".join(secrets.choice(_BASE36_ALPHABET) for _ in range(length))


def generate_file_id(backend_tag: str, timestamp_ms: int | None = None) -> str:
    """Generate a locally unique file id: <backend_tag>_<unix_ms>_<6 base36 chars>.

    No uniqueness check is performed; wall-clock time plus randomness makes
    collisions negligible.

    Args:
        backend_tag: Short backend name (e.g. "r2", "s3", "discord", "hf").
        timestamp_ms: Optional fixed timestamp (defaults to now).

    Returns:
        The generated id (without extension).
    """
    ts = now_ms() if timestamp_ms is None else timestamp_ms
    return f"{backend_tag}_{ts}_{random_base36()}"
