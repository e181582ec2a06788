"""File-info query: resolve an identifier to its metadata record."""

from __future__ import annotations

from app.application.dtos.upload import FileInfoResult
from app.application.interfaces.services import IMetadataIndex
from app.domain.exceptions import ValidationException
from app.infrastructure.exceptions import MetadataIndexUnavailableError
from app.shared.telemetry.logging import get_logger

logger = get_logger(__name__)


class FileInfoQueryService:
    """Read path over the metadata index only; never touches a storage backend."""

    def __init__(self, index: IMetadataIndex | None) -> None:
        self.index = index

    async def get_file_info(self, file_id: str) -> FileInfoResult | None:
        """Return resolved metadata for file_id, or None if no candidate key holds a record.

        Raises:
            ValidationException: Empty identifier.
            MetadataIndexUnavailableError: Index disabled or not connected.
            MetadataIndexError: Index read failed.
        """
        if not file_id:
            raise ValidationException("Missing file ID", field="file_id")
        if self.index is None or not self.index.is_available():
            raise MetadataIndexUnavailableError()
        found = await self.index.resolve(file_id)
        if found is None:
            logger.debug("No metadata for %s", file_id)
            return None
        key, record = found
        return FileInfoResult(file_id=file_id, key=key, record=record)
