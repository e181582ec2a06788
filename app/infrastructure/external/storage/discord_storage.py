"""Discord storage adapter."""

from __future__ import annotations

from app.domain.entities import FileLocator, IngestedPayload, MetadataRecord
from app.infrastructure.external.relays import DiscordUploader
from app.infrastructure.external.storage.base import BaseStorageAdapter
from app.infrastructure.index import MetadataIndexProtocol
from app.shared.enums import StorageType
from app.shared.utils import generate_file_id


class DiscordStorageAdapter(BaseStorageAdapter):
    """Post the payload as an attachment; the record keeps the message references."""

    storage_type = StorageType.DISCORD

    def __init__(
        self,
        uploader: DiscordUploader,
        index: MetadataIndexProtocol | None = None,
    ) -> None:
        super().__init__(index)
        self.uploader = uploader

    async def _write(self, payload: IngestedPayload) -> tuple[FileLocator, MetadataRecord]:
        result = await self.uploader.upload(
            payload.content, payload.file_name, payload.content_type
        )
        locator = FileLocator.for_backend(
            self.storage_type, generate_file_id("discord"), payload.extension
        )
        record = self._record_for(
            payload,
            discord_channel_id=result.channel_id,
            discord_message_id=result.message_id,
            discord_attachment_id=result.attachment_id,
        )
        return locator, record
