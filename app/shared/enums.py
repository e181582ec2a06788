"""Shared enumerations.

Cross-cutting enums used by application and infrastructure: which storage
backend holds a file, and which backend a caller asked for.
"""

from enum import Enum


class _ValuesMixin:
    """Mixin that adds a values() classmethod to str Enums."""

    @classmethod
    def values(cls) -> list[str]:
        """Return all valid values as strings."""
        return [member.value for member in cls]


class StorageType(_ValuesMixin, str, Enum):
    """Storage-type discriminator written into every metadata record."""

    TELEGRAM = "telegram"
    R2 = "r2"
    S3 = "s3"
    DISCORD = "discord"
    HUGGINGFACE = "huggingface"


class StorageMode(_ValuesMixin, str, Enum):
    """Caller-selectable storage backend (request field storageMode)."""

    TELEGRAM = "telegram"
    R2 = "r2"
    S3 = "s3"
    DISCORD = "discord"
    HUGGINGFACE = "huggingface"

    @property
    def storage_type(self) -> StorageType:
        """Storage type recorded for files stored through this mode."""
        return StorageType(self.value)


class TelegramMethod(_ValuesMixin, str, Enum):
    """Bot API call variant used to send a file; value is the API method name."""

    PHOTO = "sendPhoto"
    AUDIO = "sendAudio"
    VIDEO = "sendVideo"
    DOCUMENT = "sendDocument"

    @property
    def field_name(self) -> str:
        """Multipart field that carries the file for this call."""
        return _TELEGRAM_FIELDS[self]

    @property
    def can_downgrade(self) -> bool:
        """Whether a rejected upload may be retried as a generic document."""
        return self in (TelegramMethod.PHOTO, TelegramMethod.AUDIO)

    @classmethod
    def for_content_type(cls, content_type: str) -> "TelegramMethod":
        """Select the call variant from a MIME type prefix."""
        ct = (content_type or "").lower()
        if ct.startswith("image/"):
            return cls.PHOTO
        if ct.startswith("audio/"):
            return cls.AUDIO
        if ct.startswith("video/"):
            return cls.VIDEO
        return cls.DOCUMENT


_TELEGRAM_FIELDS = {
    TelegramMethod.PHOTO: "photo",
    TelegramMethod.AUDIO: "audio",
    TelegramMethod.VIDEO: "video",
    TelegramMethod.DOCUMENT: "document",
}
