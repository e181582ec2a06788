"""Hugging Face Hub uploader.

HfApi is synchronous; calls run in a worker thread via asyncio.to_thread.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass

from huggingface_hub import HfApi

from app.core.storage_config import HuggingFaceConfig
from app.infrastructure.exceptions import StorageUploadError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class HuggingFaceUploadResult:
    path: str


class HuggingFaceUploader:
    """Commit a single file into the configured repository."""

    def __init__(self, config: HuggingFaceConfig, *, api: HfApi | None = None) -> None:
        """Initialize uploader.

        Args:
            config: Token, repo id and repo type.
            api: Optional HfApi (tests inject a mock).
        """
        self.config = config
        self._api = api or HfApi(token=config.token)

    async def upload(self, content: bytes, path_in_repo: str, file_name: str) -> HuggingFaceUploadResult:
        """Upload content to path_in_repo.

        Raises:
            StorageUploadError: The Hub rejected the commit or was unreachable.
        """
        def _upload():
            return self._api.upload_file(
                path_or_fileobj=content,
                path_in_repo=path_in_repo,
                repo_id=self.config.repo,
                repo_type=self.config.repo_type,
                commit_message=f"Upload {file_name}",
            )

        try:
            await asyncio.to_thread(_upload)
        except Exception as e:
            raise StorageUploadError("HuggingFace", str(e) or e.__class__.__name__) from e

        logger.info("HuggingFace upload ok: %s/%s", self.config.repo, path_in_repo)
        return HuggingFaceUploadResult(path=path_in_repo)
