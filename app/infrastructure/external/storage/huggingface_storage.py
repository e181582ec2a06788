"""Hugging Face Hub storage adapter. Files are committed under uploads/."""

from __future__ import annotations

from app.domain.entities import FileLocator, IngestedPayload, MetadataRecord
from app.infrastructure.external.relays import HuggingFaceUploader
from app.infrastructure.external.storage.base import BaseStorageAdapter
from app.infrastructure.index import MetadataIndexProtocol
from app.shared.enums import StorageType
from app.shared.utils import generate_file_id

HF_UPLOAD_DIR = "uploads"


class HuggingFaceStorageAdapter(BaseStorageAdapter):
    storage_type = StorageType.HUGGINGFACE

    def __init__(
        self,
        uploader: HuggingFaceUploader,
        index: MetadataIndexProtocol | None = None,
    ) -> None:
        super().__init__(index)
        self.uploader = uploader

    async def _write(self, payload: IngestedPayload) -> tuple[FileLocator, MetadataRecord]:
        locator = FileLocator.for_backend(
            self.storage_type, generate_file_id("hf"), payload.extension
        )
        hf_path = f"{HF_UPLOAD_DIR}/{locator.object_name}"
        result = await self.uploader.upload(payload.content, hf_path, payload.file_name)
        return locator, self._record_for(payload, hf_path=result.path)
