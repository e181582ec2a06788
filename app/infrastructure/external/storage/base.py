"""Shared adapter behaviour: backend write followed by a best-effort index write."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, ClassVar

from app.domain.entities import FileLocator, IngestedPayload, MetadataRecord
from app.infrastructure.exceptions import (
    MetadataIndexError,
    MetadataIndexUnavailableError,
)
from app.infrastructure.index import MetadataIndexProtocol
from app.shared.enums import StorageType
from app.shared.telemetry.logging import get_logger
from app.shared.telemetry.tracing import add_span_attributes, traced

logger = get_logger(__name__)


class BaseStorageAdapter(ABC):
    """Template for backend adapters.

    Subclasses implement _write(); store() adds logging, tracing and the
    metadata write. The index write is not transactional with the backend
    write: if it fails the file stays stored and the locator is still
    returned (it will not resolve through file-info until reconciled).
    """

    storage_type: ClassVar[StorageType]

    def __init__(self, index: MetadataIndexProtocol | None = None) -> None:
        self.index = index

    @abstractmethod
    async def _write(self, payload: IngestedPayload) -> tuple[FileLocator, MetadataRecord]:
        """Write payload to the backend; return its locator and index record."""

    def _record_for(self, payload: IngestedPayload, **refs: Any) -> MetadataRecord:
        return MetadataRecord(
            file_name=payload.file_name,
            file_size=payload.size,
            storage_type=self.storage_type,
            **refs,
        )

    @traced("storage.store")
    async def store(self, payload: IngestedPayload) -> FileLocator:
        add_span_attributes(
            storage_type=self.storage_type.value,
            file_size=payload.size,
        )
        locator, record = await self._write(payload)
        logger.info(
            "Stored %s (%s bytes) in %s as %s",
            payload.file_name,
            payload.size,
            self.storage_type.value,
            locator,
        )
        await self._index_record(locator, record)
        return locator

    async def _index_record(self, locator: FileLocator, record: MetadataRecord) -> None:
        if self.index is None or not self.index.is_available():
            logger.warning("Metadata index unavailable; %s stored without a record", locator)
            return
        try:
            await self.index.put(str(locator), record)
        except (MetadataIndexError, MetadataIndexUnavailableError):
            logger.exception("Metadata write failed for %s; file stored without a record", locator)
