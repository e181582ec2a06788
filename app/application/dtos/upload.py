"""DTOs for URL ingestion and file-info lookups (no dependency on HTTP types)."""

from dataclasses import dataclass

from app.domain.entities import MetadataRecord


@dataclass(frozen=True)
class CallerContext:
    """What the ingestion pipeline knows about the caller.

    client_ip keys the guest quota; presented_code is the auth code the caller
    sent (Bearer token, X-Auth-Code header or authCode cookie), if any.
    """

    client_ip: str
    presented_code: str | None = None


@dataclass(frozen=True)
class GuestCheckResult:
    """Answer of the guest quota check. status is the HTTP status to deny with."""

    allowed: bool
    reason: str | None = None
    status: int | None = None


@dataclass(frozen=True)
class FileInfoResult:
    """Resolved metadata for a file identifier (read-model for file-info)."""

    file_id: str
    key: str
    record: MetadataRecord
