"""Metadata index protocol (DIP). Implementation: RedisMetadataIndex."""

from typing import Protocol

from app.domain.entities import MetadataRecord


class MetadataIndexProtocol(Protocol):
    """Key-value store of MetadataRecord, keyed by file locator."""

    def is_available(self) -> bool:
        """Return True if the index is connected and usable."""
        ...

    async def put(self, key: str, record: MetadataRecord) -> None:
        """Store record under key, replacing any existing record (no merge)."""
        ...

    async def get(self, key: str) -> MetadataRecord | None:
        """Return the record stored under key, or None."""
        ...

    async def resolve(self, identifier: str) -> tuple[str, MetadataRecord] | None:
        """Return (key, record) for the first candidate key holding a non-empty record."""
        ...
