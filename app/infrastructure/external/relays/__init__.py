"""Outbound relay clients: Telegram Bot API, Discord, Hugging Face Hub.

Each client takes raw bytes plus naming and content-type metadata and
returns backend-specific reference fields, or raises StorageUploadError.
"""

from app.infrastructure.external.relays.discord import (
    DiscordUploader,
    DiscordUploadResult,
)
from app.infrastructure.external.relays.huggingface import (
    HuggingFaceUploader,
    HuggingFaceUploadResult,
)
from app.infrastructure.external.relays.telegram import (
    SendResult,
    SendState,
    Step,
    StepAction,
    TelegramUploader,
    TelegramUploadResult,
    extract_file_id,
    next_step,
)

__all__ = [
    "DiscordUploadResult",
    "DiscordUploader",
    "HuggingFaceUploadResult",
    "HuggingFaceUploader",
    "SendResult",
    "SendState",
    "Step",
    "StepAction",
    "TelegramUploadResult",
    "TelegramUploader",
    "extract_file_id",
    "next_step",
]
