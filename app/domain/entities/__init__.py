"""Domain entities for stored files."""

from app.domain.entities.file import (
    LOCATOR_PREFIXES,
    FileLocator,
    IngestedPayload,
    MetadataRecord,
)

__all__ = [
    "LOCATOR_PREFIXES",
    "FileLocator",
    "IngestedPayload",
    "MetadataRecord",
]
