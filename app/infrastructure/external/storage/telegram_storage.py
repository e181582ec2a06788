"""Telegram storage adapter. Locators carry no prefix (legacy scheme)."""

from __future__ import annotations

from app.domain.entities import FileLocator, IngestedPayload, MetadataRecord
from app.infrastructure.external.relays import TelegramUploader
from app.infrastructure.external.storage.base import BaseStorageAdapter
from app.infrastructure.index import MetadataIndexProtocol
from app.shared.enums import StorageType


class TelegramStorageAdapter(BaseStorageAdapter):
    """Send the payload to the configured chat; the relay's file id becomes the locator."""

    storage_type = StorageType.TELEGRAM

    def __init__(
        self,
        uploader: TelegramUploader,
        index: MetadataIndexProtocol | None = None,
    ) -> None:
        super().__init__(index)
        self.uploader = uploader

    async def _write(self, payload: IngestedPayload) -> tuple[FileLocator, MetadataRecord]:
        result = await self.uploader.send_file(
            payload.content, payload.file_name, payload.content_type
        )
        locator = FileLocator.for_backend(self.storage_type, result.file_id, payload.extension)
        return locator, self._record_for(payload, telegram_message_id=result.message_id)
