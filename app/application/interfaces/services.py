"""Service interfaces (ports) for the application layer.

Protocols define contracts for collaborators of the ingestion pipeline (DIP).
Concrete implementations live in app.infrastructure.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from app.application.dtos.upload import CallerContext, GuestCheckResult
    from app.domain.entities import FileLocator, IngestedPayload, MetadataRecord
    from app.infrastructure.external.fetch import FetchedContent
    from app.shared.enums import StorageMode, StorageType


# Authentication collaborator
class IAuthService(Protocol):
    """Protocol for deciding whether a caller is privileged."""

    def is_auth_required(self) -> bool:
        """Return True when an auth code is configured."""

    def check_authentication(self, caller: CallerContext) -> bool:
        """Return True if the caller presented the configured auth code."""


# Guest quota collaborator
class IGuestQuotaService(Protocol):
    """Protocol for limiting unauthenticated uploads."""

    async def check_guest_upload(self, client_ip: str, size: int) -> GuestCheckResult:
        """Return whether a guest may upload size bytes now."""

    async def increment_guest_count(self, client_ip: str) -> None:
        """Count one successful guest upload for today."""


# Remote fetcher
class IRemoteFetcher(Protocol):
    """Protocol for bounded fetch of a caller-supplied URL."""

    async def fetch(self, url: str) -> FetchedContent:
        """Return body and content type; raise RemoteFetchError subclasses on failure."""


# Storage adapter
class IStorageAdapter(Protocol):
    """Protocol for one storage backend (store bytes, return locator)."""

    storage_type: StorageType

    async def store(self, payload: IngestedPayload) -> FileLocator:
        """Persist payload, write its metadata record, return the locator."""


class IStorageAdapterProvider(Protocol):
    """Protocol for selecting the adapter of a storage mode."""

    def get_adapter(self, mode: StorageMode) -> IStorageAdapter:
        """Return the adapter; raise BackendNotConfiguredException if not configured."""


# Metadata index (read side)
class IMetadataIndex(Protocol):
    """Protocol for resolving identifiers against the metadata index."""

    def is_available(self) -> bool:
        """Return True if the index can be queried."""

    async def resolve(self, identifier: str) -> tuple[str, MetadataRecord] | None:
        """Return (key, record) of the first candidate key holding a record."""
