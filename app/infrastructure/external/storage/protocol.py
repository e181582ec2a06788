"""Storage adapter protocol (DIP). One implementation per backend, see factory.py."""

from typing import Protocol

from app.domain.entities import FileLocator, IngestedPayload
from app.shared.enums import StorageType


class StorageAdapterProtocol(Protocol):
    """Uniform "store bytes, return locator" contract.

    A successful store() has written the file to its backend and attempted
    exactly one metadata index write for the returned locator.
    """

    storage_type: StorageType

    async def store(self, payload: IngestedPayload) -> FileLocator:
        """Persist payload and return its locator.

        Raises:
            StorageUploadError: Backend write failed (subclasses carry the cause).
        """
        ...
