"""Syntax and scheme check for caller-supplied URLs; no network access."""

from urllib.parse import SplitResult, urlsplit

from app.domain.exceptions import ValidationException

_ALLOWED_SCHEMES = ("http", "https")


def validate_remote_url(url: str) -> SplitResult:
    """Parse url and require an absolute http(s) URL.

    Raises:
        ValidationException: Malformed URL or unsupported scheme.
    """
    try:
        parsed = urlsplit(url.strip())
        # Accessing port validates it (raises ValueError when out of range).
        _ = parsed.port
    except ValueError as e:
        raise ValidationException("Invalid URL format", field="url") from e
    if not parsed.scheme:
        raise ValidationException("Invalid URL format", field="url")
    if parsed.scheme.lower() not in _ALLOWED_SCHEMES:
        raise ValidationException("Only HTTP/HTTPS URLs are supported", field="url")
    if not parsed.hostname:
        raise ValidationException("Invalid URL format", field="url")
    return parsed
