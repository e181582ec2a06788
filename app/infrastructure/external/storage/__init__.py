"""Storage adapters: Telegram, R2, S3, Discord, Hugging Face.

StorageFactory.create_adapter() selects the adapter for a storage mode.
Every adapter implements StorageAdapterProtocol.store(), which writes the
file and then its metadata record.
"""

from app.infrastructure.external.storage.base import BaseStorageAdapter
from app.infrastructure.external.storage.discord_storage import DiscordStorageAdapter
from app.infrastructure.external.storage.factory import (
    StorageAdapterProvider,
    StorageFactory,
)
from app.infrastructure.external.storage.huggingface_storage import (
    HuggingFaceStorageAdapter,
)
from app.infrastructure.external.storage.protocol import StorageAdapterProtocol
from app.infrastructure.external.storage.s3_storage import (
    R2StorageAdapter,
    S3CompatibleStorageAdapter,
    S3StorageAdapter,
)
from app.infrastructure.external.storage.telegram_storage import TelegramStorageAdapter

__all__ = [
    "BaseStorageAdapter",
    "DiscordStorageAdapter",
    "HuggingFaceStorageAdapter",
    "R2StorageAdapter",
    "S3CompatibleStorageAdapter",
    "S3StorageAdapter",
    "StorageAdapterProtocol",
    "StorageAdapterProvider",
    "StorageFactory",
    "TelegramStorageAdapter",
]
