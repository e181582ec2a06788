"""Application configuration (settings and environment).

Single source of truth for all configuration. Uses pydantic-settings
with .env support. Backend credentials are read here once; adapters get
them through StorageConfig (app.core.storage_config), never from the
environment directly.
"""

from functools import lru_cache

from pydantic import SecretStr, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from app.core.constants import FETCH_TIMEOUT_SECONDS, MAX_REMOTE_FILE_SIZE


class Settings(BaseSettings):
    """Application settings loaded from environment and .env.

    Every storage backend is optional; a backend whose required fields are
    missing is simply unavailable (requests for it fail with a configuration
    error, see StorageConfig.require).
    """

    # App
    app_name: str = "imgbed"
    app_version: str = "1.0.0"
    debug: bool = False

    # Request / middleware
    request_timeout_seconds: int = 300
    request_id_header: str = "X-Request-ID"

    # Remote fetch
    fetch_timeout_seconds: float = FETCH_TIMEOUT_SECONDS
    max_remote_file_size: int = MAX_REMOTE_FILE_SIZE

    # Metadata index (Redis)
    redis_enabled: bool = True
    redis_host: str = "localhost"
    redis_port: int = 6379
    redis_db: int = 0
    redis_password: SecretStr | None = None

    # Authentication: when set, callers presenting this code are privileged (no guest quota).
    auth_code: SecretStr | None = None

    # Guest quota
    guest_upload_enabled: bool = True
    guest_daily_limit: int = 10
    guest_max_file_size: int = 5 * 1024 * 1024

    # Telegram (default backend)
    tg_bot_token: SecretStr | None = None
    tg_chat_id: str | None = None
    tg_api_base: str = "https://api.telegram.org"
    tg_timeout_seconds: float = 30.0
    tg_max_retries: int = 3

    # Cloudflare R2 (S3-compatible endpoint)
    r2_bucket: str | None = None
    r2_account_id: str | None = None
    r2_endpoint_url: str | None = None
    r2_access_key_id: str | None = None
    r2_secret_access_key: SecretStr | None = None

    # Generic S3-compatible storage
    s3_endpoint: str | None = None
    s3_access_key_id: str | None = None
    s3_secret_access_key: SecretStr | None = None
    s3_bucket: str | None = None
    s3_region: str = "auto"

    # Discord: webhook, or bot token + channel
    discord_webhook_url: SecretStr | None = None
    discord_bot_token: SecretStr | None = None
    discord_channel_id: str | None = None
    discord_api_base: str = "https://discord.com/api/v10"

    # Hugging Face Hub
    hf_token: SecretStr | None = None
    hf_repo: str | None = None
    hf_repo_type: str = "dataset"

    # OpenTelemetry
    telemetry_enabled: bool = False
    telemetry_exporter: str = "console"
    telemetry_otlp_endpoint: str | None = None
    telemetry_sample_rate: float = 1.0
    telemetry_environment: str = "development"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    @model_validator(mode="after")
    def validate_limits(self) -> "Settings":
        """Validate numeric limits that would make every request fail."""
        if self.max_remote_file_size <= 0:
            raise ValueError("MAX_REMOTE_FILE_SIZE must be positive")
        if self.fetch_timeout_seconds <= 0:
            raise ValueError("FETCH_TIMEOUT_SECONDS must be positive")
        if self.tg_max_retries < 0:
            raise ValueError("TG_MAX_RETRIES must be zero or positive")
        if self.hf_repo_type not in ("dataset", "model", "space"):
            raise ValueError(
                f"HF_REPO_TYPE must be 'dataset', 'model' or 'space', got: {self.hf_repo_type!r}"
            )
        return self


@lru_cache
def get_settings() -> Settings:
    """Return cached application settings (single instance per process).

    Validation runs on first call, not at import time. In tests, call
    get_settings.cache_clear() before overriding env vars so the next
    get_settings() uses the new values.

    Returns:
        Loaded and validated Settings instance.
    """
    return Settings()
