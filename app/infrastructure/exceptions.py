"""Infrastructure exceptions for remote fetch, storage backends and the metadata index.

All extend ImgBedException so presentation can map them to HTTP
responses consistently (see app.core.exception_handlers).
"""

from app.domain.exceptions import ImgBedException
from app.shared.utils.formatting import format_size


# ---- Remote fetch ----


class RemoteFetchError(ImgBedException):
    """Base exception for fetching a caller-supplied URL."""


class RemoteFetchTimeoutError(RemoteFetchError):
    """Origin did not answer within the fetch deadline."""

    def __init__(self, url: str, timeout_seconds: float) -> None:
        super().__init__(
            "Request timed out; the target server responded too slowly",
            "FETCH_TIMEOUT",
            {"url": url, "timeout_seconds": timeout_seconds},
        )


class UpstreamUnreachableError(RemoteFetchError):
    """Transport-level failure reaching the origin."""

    def __init__(self, url: str, reason: str) -> None:
        super().__init__(
            f"Unable to connect to the target URL: {reason}",
            "UPSTREAM_UNREACHABLE",
            {"url": url, "reason": reason},
        )


class UpstreamResponseError(RemoteFetchError):
    """Origin answered with a non-2xx status."""

    def __init__(self, url: str, status_code: int, reason_phrase: str) -> None:
        super().__init__(
            f"Target URL returned an error: {status_code} {reason_phrase}".rstrip(),
            "UPSTREAM_ERROR",
            {"url": url, "status_code": status_code},
        )


class EmptyPayloadError(RemoteFetchError):
    """Origin returned a zero-length body."""

    def __init__(self, url: str) -> None:
        super().__init__(
            "The target URL returned empty content",
            "EMPTY_PAYLOAD",
            {"url": url},
        )


class PayloadTooLargeError(RemoteFetchError):
    """Body exceeds the configured size cap."""

    def __init__(self, size: int, limit: int) -> None:
        super().__init__(
            f"File size ({format_size(size)}) exceeds the limit ({format_size(limit)})",
            "PAYLOAD_TOO_LARGE",
            {"size": size, "limit": limit},
        )


# ---- Storage backends ----


class StorageException(ImgBedException):
    """Base exception for storage backend operations."""


class StorageUploadError(StorageException):
    """Backend write failed; message names the backend and the reason."""

    def __init__(
        self,
        backend: str,
        reason: str,
        error_code: str = "STORAGE_UPLOAD_ERROR",
    ) -> None:
        super().__init__(
            f"{backend} upload failed: {reason}",
            error_code,
            {"backend": backend, "reason": reason},
        )
        self.reason = reason


class RelayRateLimitedError(StorageUploadError):
    """Relay kept answering 429 after all retries."""

    def __init__(self, retry_after: float) -> None:
        super().__init__(
            "Telegram",
            f"rate limited, retry after {retry_after:g} seconds",
            "RELAY_RATE_LIMITED",
        )
        self.details["retry_after"] = retry_after


class RelayPayloadRejectedError(StorageUploadError):
    """Relay rejected the payload as too large (413); never retried."""

    def __init__(self) -> None:
        super().__init__(
            "Telegram",
            "file size must not exceed 20MB",
            "RELAY_PAYLOAD_REJECTED",
        )


class RelayRejectedError(StorageUploadError):
    """Relay answered non-2xx and no retry ladder applies (or all were used)."""

    def __init__(self, status_code: int, description: str | None) -> None:
        super().__init__(
            "Telegram",
            description or "upload to Telegram failed",
            "RELAY_REJECTED",
        )
        self.details["status_code"] = status_code


class RelayTimeoutError(StorageUploadError):
    """Every attempt hit the per-call deadline."""

    def __init__(self) -> None:
        super().__init__("Telegram", "upload timed out, please retry", "RELAY_TIMEOUT")


class RelayNetworkError(StorageUploadError):
    """Every attempt failed at the transport level."""

    def __init__(self, reason: str) -> None:
        super().__init__(
            "Telegram",
            f"network error, check the connection and retry ({reason})",
            "RELAY_NETWORK_ERROR",
        )


class MissingFileIdError(StorageUploadError):
    """Relay reported success but the response holds no file identifier."""

    def __init__(self) -> None:
        super().__init__("Telegram", "failed to get file ID", "RELAY_MISSING_FILE_ID")


# ---- Metadata index ----


class MetadataIndexUnavailableError(ImgBedException):
    """Index store is disabled or not connected."""

    def __init__(self) -> None:
        super().__init__("Metadata index not available", "INDEX_UNAVAILABLE")


class MetadataIndexError(ImgBedException):
    """Index read or write failed."""

    def __init__(self, key: str, reason: str) -> None:
        super().__init__(
            f"Metadata index operation failed for {key}",
            "INDEX_ERROR",
            {"key": key, "reason": reason},
        )
