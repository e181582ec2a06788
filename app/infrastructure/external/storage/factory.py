"""Storage adapter factory: one adapter per storage mode."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any, ClassVar

import httpx

from app.core.storage_config import StorageConfig
from app.infrastructure.external.relays import (
    DiscordUploader,
    HuggingFaceUploader,
    TelegramUploader,
)
from app.infrastructure.external.storage.discord_storage import DiscordStorageAdapter
from app.infrastructure.external.storage.huggingface_storage import (
    HuggingFaceStorageAdapter,
)
from app.infrastructure.external.storage.protocol import StorageAdapterProtocol
from app.infrastructure.external.storage.s3_storage import (
    R2StorageAdapter,
    S3StorageAdapter,
)
from app.infrastructure.external.storage.telegram_storage import TelegramStorageAdapter
from app.infrastructure.index import MetadataIndexProtocol
from app.shared.enums import StorageMode
from app.shared.telemetry.logging import get_logger

logger = get_logger(__name__)

# (section, index, http_client) -> adapter
AdapterBuilder = Callable[[Any, "MetadataIndexProtocol | None", "httpx.AsyncClient | None"], StorageAdapterProtocol]


def _telegram(section, index, http_client) -> StorageAdapterProtocol:
    return TelegramStorageAdapter(TelegramUploader(section, http_client=http_client), index)


def _r2(section, index, http_client) -> StorageAdapterProtocol:
    return R2StorageAdapter.from_config(section, index)


def _s3(section, index, http_client) -> StorageAdapterProtocol:
    return S3StorageAdapter.from_config(section, index)


def _discord(section, index, http_client) -> StorageAdapterProtocol:
    return DiscordStorageAdapter(DiscordUploader(section, http_client=http_client), index)


def _huggingface(section, index, http_client) -> StorageAdapterProtocol:
    return HuggingFaceStorageAdapter(HuggingFaceUploader(section), index)


class StorageFactory:
    """Factory for storage adapters by storage mode."""

    _builders: ClassVar[dict[StorageMode, AdapterBuilder]] = {
        StorageMode.TELEGRAM: _telegram,
        StorageMode.R2: _r2,
        StorageMode.S3: _s3,
        StorageMode.DISCORD: _discord,
        StorageMode.HUGGINGFACE: _huggingface,
    }

    @classmethod
    def create_adapter(
        cls,
        mode: StorageMode,
        storage_config: StorageConfig,
        *,
        index: MetadataIndexProtocol | None = None,
        http_client: httpx.AsyncClient | None = None,
    ) -> StorageAdapterProtocol:
        """Create the adapter for mode.

        Args:
            mode: Requested storage mode.
            storage_config: Backend configuration sections.
            index: Metadata index each adapter writes to.
            http_client: Optional shared httpx.AsyncClient (Telegram, Discord).

        Raises:
            BackendNotConfiguredException: The backend's configuration is absent.
        """
        section = storage_config.require(mode)
        builder = cls._builders[mode]
        logger.debug("Creating %s storage adapter", mode.value)
        return builder(section, index, http_client)


class StorageAdapterProvider:
    """Per-request adapter lookup bound to one StorageConfig, index and HTTP client."""

    def __init__(
        self,
        storage_config: StorageConfig,
        *,
        index: MetadataIndexProtocol | None = None,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        self.storage_config = storage_config
        self.index = index
        self.http_client = http_client

    def get_adapter(self, mode: StorageMode) -> StorageAdapterProtocol:
        return StorageFactory.create_adapter(
            mode,
            self.storage_config,
            index=self.index,
            http_client=self.http_client,
        )
