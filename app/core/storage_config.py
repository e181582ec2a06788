"""Explicit storage configuration passed to backend adapters.

StorageConfig is built once from Settings. Each backend section is present
only when its required fields are set, so "is this backend usable" is a
typed question (section is None) rather than ad hoc env lookups.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from app.domain.exceptions import BackendNotConfiguredException
from app.shared.enums import StorageMode

if TYPE_CHECKING:
    from app.core.config import Settings


def _secret(value) -> str | None:
    """Unwrap an optional SecretStr; empty strings count as unset."""
    if value is None:
        return None
    raw = value.get_secret_value()
    return raw or None


@dataclass(frozen=True)
class TelegramConfig:
    bot_token: str
    chat_id: str
    api_base: str = "https://api.telegram.org"
    timeout_seconds: float = 30.0
    max_retries: int = 3


@dataclass(frozen=True)
class R2Config:
    bucket: str
    endpoint_url: str
    access_key_id: str
    secret_access_key: str


@dataclass(frozen=True)
class S3Config:
    endpoint_url: str
    access_key_id: str
    secret_access_key: str | None
    bucket: str
    region: str = "auto"


@dataclass(frozen=True)
class DiscordConfig:
    webhook_url: str | None = None
    bot_token: str | None = None
    channel_id: str | None = None
    api_base: str = "https://discord.com/api/v10"


@dataclass(frozen=True)
class HuggingFaceConfig:
    token: str
    repo: str
    repo_type: str = "dataset"


@dataclass(frozen=True)
class StorageConfig:
    """Per-backend configuration; a None section means the backend is not configured."""

    telegram: TelegramConfig | None = None
    r2: R2Config | None = None
    s3: S3Config | None = None
    discord: DiscordConfig | None = None
    huggingface: HuggingFaceConfig | None = None

    @classmethod
    def from_settings(cls, settings: "Settings") -> StorageConfig:
        """Build sections from settings, leaving out any backend with missing required fields."""
        telegram = None
        bot_token = _secret(settings.tg_bot_token)
        if bot_token and settings.tg_chat_id:
            telegram = TelegramConfig(
                bot_token=bot_token,
                chat_id=settings.tg_chat_id,
                api_base=settings.tg_api_base.rstrip("/"),
                timeout_seconds=settings.tg_timeout_seconds,
                max_retries=settings.tg_max_retries,
            )

        r2 = None
        r2_endpoint = settings.r2_endpoint_url or (
            f"https://{settings.r2_account_id}.r2.cloudflarestorage.com"
            if settings.r2_account_id
            else None
        )
        r2_secret = _secret(settings.r2_secret_access_key)
        if settings.r2_bucket and r2_endpoint and settings.r2_access_key_id and r2_secret:
            r2 = R2Config(
                bucket=settings.r2_bucket,
                endpoint_url=r2_endpoint,
                access_key_id=settings.r2_access_key_id,
                secret_access_key=r2_secret,
            )

        s3 = None
        if settings.s3_endpoint and settings.s3_access_key_id and settings.s3_bucket:
            s3 = S3Config(
                endpoint_url=settings.s3_endpoint,
                access_key_id=settings.s3_access_key_id,
                secret_access_key=_secret(settings.s3_secret_access_key),
                bucket=settings.s3_bucket,
                region=settings.s3_region,
            )

        discord = None
        webhook = _secret(settings.discord_webhook_url)
        discord_token = _secret(settings.discord_bot_token)
        if webhook or (discord_token and settings.discord_channel_id):
            discord = DiscordConfig(
                webhook_url=webhook,
                bot_token=discord_token,
                channel_id=settings.discord_channel_id,
                api_base=settings.discord_api_base.rstrip("/"),
            )

        huggingface = None
        hf_token = _secret(settings.hf_token)
        if hf_token and settings.hf_repo:
            huggingface = HuggingFaceConfig(
                token=hf_token,
                repo=settings.hf_repo,
                repo_type=settings.hf_repo_type,
            )

        return cls(
            telegram=telegram,
            r2=r2,
            s3=s3,
            discord=discord,
            huggingface=huggingface,
        )

    def require(self, mode: StorageMode):
        """Return the section for mode.

        Raises:
            BackendNotConfiguredException: The section is absent.
        """
        section = getattr(self, _SECTION_BY_MODE[mode])
        if section is None:
            raise BackendNotConfiguredException(mode.value, _REQUIRED_SETTINGS[mode])
        return section


_SECTION_BY_MODE: dict[StorageMode, str] = {
    StorageMode.TELEGRAM: "telegram",
    StorageMode.R2: "r2",
    StorageMode.S3: "s3",
    StorageMode.DISCORD: "discord",
    StorageMode.HUGGINGFACE: "huggingface",
}

_REQUIRED_SETTINGS: dict[StorageMode, list[str]] = {
    StorageMode.TELEGRAM: ["TG_BOT_TOKEN", "TG_CHAT_ID"],
    StorageMode.R2: [
        "R2_BUCKET",
        "R2_ENDPOINT_URL or R2_ACCOUNT_ID",
        "R2_ACCESS_KEY_ID",
        "R2_SECRET_ACCESS_KEY",
    ],
    StorageMode.S3: ["S3_ENDPOINT", "S3_ACCESS_KEY_ID", "S3_BUCKET"],
    StorageMode.DISCORD: ["DISCORD_WEBHOOK_URL or DISCORD_BOT_TOKEN + DISCORD_CHANNEL_ID"],
    StorageMode.HUGGINGFACE: ["HF_TOKEN", "HF_REPO"],
}
