"""Stored-file entities: locator, ingested payload, and index metadata record.

FileLocator is the opaque id handed to callers ("[prefix:]base[.ext]");
its prefix alone tells which backend holds the file. MetadataRecord is the
canonical index schema; from_dict() is the single place that understands
the legacy camel/Pascal-cased field names written by earlier versions.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from app.shared.enums import StorageType
from app.shared.utils.datetime import now_ms

# Locator prefix -> backend. The legacy chat-bot backend has no prefix.
LOCATOR_PREFIXES: dict[str, StorageType] = {
    "r2": StorageType.R2,
    "s3": StorageType.S3,
    "discord": StorageType.DISCORD,
    "hf": StorageType.HUGGINGFACE,
}

_PREFIX_BY_TYPE: dict[StorageType, str] = {v: k for k, v in LOCATOR_PREFIXES.items()}


@dataclass(frozen=True)
class FileLocator:
    """Opaque file identifier of the form [prefix:]base[.extension]."""

    base: str
    extension: str = ""
    prefix: str | None = None

    @classmethod
    def for_backend(
        cls, storage_type: StorageType, base: str, extension: str
    ) -> FileLocator:
        """Build the locator for a file stored in the given backend."""
        return cls(base=base, extension=extension, prefix=_PREFIX_BY_TYPE.get(storage_type))

    @classmethod
    def parse(cls, value: str) -> FileLocator:
        """Decode a locator string. Unknown prefixes are kept as part of the base."""
        prefix: str | None = None
        rest = value
        head, sep, tail = value.partition(":")
        if sep and head in LOCATOR_PREFIXES:
            prefix, rest = head, tail
        base, dot, ext = rest.rpartition(".")
        if not dot:
            return cls(base=rest, extension="", prefix=prefix)
        return cls(base=base, extension=ext, prefix=prefix)

    @property
    def storage_type(self) -> StorageType:
        """Backend holding the file, recovered from the prefix without a lookup."""
        if self.prefix is None:
            return StorageType.TELEGRAM
        return LOCATOR_PREFIXES[self.prefix]

    @property
    def object_name(self) -> str:
        """Locator without its prefix (base plus extension)."""
        return f"{self.base}.{self.extension}" if self.extension else self.base

    @property
    def src(self) -> str:
        """Public path returned to callers."""
        return f"/file/{self}"

    def __str__(self) -> str:
        name = self.object_name
        return f"{self.prefix}:{name}" if self.prefix else name


@dataclass(frozen=True)
class IngestedPayload:
    """Bytes fetched (or uploaded) once per request, plus naming and type.

    The same in-memory buffer is used for classification and the backend write.
    """

    content: bytes
    file_name: str
    extension: str
    content_type: str

    @property
    def size(self) -> int:
        """Payload length in bytes."""
        return len(self.content)


# Legacy field name -> canonical field name.
_LEGACY_FIELDS: dict[str, str] = {
    "TimeStamp": "created_at",
    "ListType": "list_type",
    "Label": "label",
    "fileName": "file_name",
    "fileSize": "file_size",
    "storageType": "storage_type",
    "storage": "storage_type",
    "telegramMessageId": "telegram_message_id",
    "r2Key": "r2_key",
    "s3Key": "s3_key",
    "discordChannelId": "discord_channel_id",
    "discordMessageId": "discord_message_id",
    "discordAttachmentId": "discord_attachment_id",
    "hfPath": "hf_path",
}

_REFERENCE_FIELDS = (
    "telegram_message_id",
    "r2_key",
    "s3_key",
    "discord_channel_id",
    "discord_message_id",
    "discord_attachment_id",
    "hf_path",
)


def _as_int(value: Any) -> int | None:
    """Lenient integer read for hand-edited records ("12.5", "", None)."""
    if value is None or isinstance(value, bool):
        return None
    try:
        return int(float(value))
    except (TypeError, ValueError, OverflowError):
        return None


def _as_bool(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in ("true", "1", "yes")
    return bool(value)


@dataclass(frozen=True)
class MetadataRecord:
    """Index record written once per successfully stored file.

    Classification (list_type, label) and liked are edited later by other
    tools; this service only creates records with their defaults.
    """

    file_name: str
    file_size: int
    storage_type: StorageType
    created_at: int | None = field(default_factory=now_ms)
    list_type: str = "None"
    label: str = "None"
    liked: bool = False
    telegram_message_id: int | None = None
    r2_key: str | None = None
    s3_key: str | None = None
    discord_channel_id: str | None = None
    discord_message_id: str | None = None
    discord_attachment_id: str | None = None
    hf_path: str | None = None

    def to_dict(self) -> dict[str, Any]:
        """Canonical serialized form; backend reference fields are omitted when unset."""
        data: dict[str, Any] = {
            "created_at": self.created_at,
            "file_name": self.file_name,
            "file_size": self.file_size,
            "storage_type": self.storage_type.value,
            "list_type": self.list_type,
            "label": self.label,
            "liked": self.liked,
        }
        for name in _REFERENCE_FIELDS:
            value = getattr(self, name)
            if value is not None:
                data[name] = value
        return data

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> MetadataRecord:
        """Decode a stored record written in either the canonical or the legacy schema."""
        # Canonical names win; legacy aliases fill gaps in _LEGACY_FIELDS order.
        data: dict[str, Any] = {k: v for k, v in raw.items() if k not in _LEGACY_FIELDS}
        for legacy, canonical in _LEGACY_FIELDS.items():
            if legacy in raw and not data.get(canonical):
                data[canonical] = raw[legacy]

        storage = data.get("storage_type") or StorageType.TELEGRAM.value
        try:
            storage_type = StorageType(storage)
        except ValueError:
            storage_type = StorageType.TELEGRAM

        refs = {name: data.get(name) for name in _REFERENCE_FIELDS}
        return cls(
            file_name=str(data.get("file_name") or ""),
            file_size=_as_int(data.get("file_size")) or 0,
            storage_type=storage_type,
            created_at=_as_int(data.get("created_at")) or None,
            list_type=str(data.get("list_type") or "None"),
            label=str(data.get("label") or "None"),
            liked=_as_bool(data.get("liked")),
            **refs,
        )
