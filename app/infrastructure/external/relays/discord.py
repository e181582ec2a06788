"""Discord attachment uploader (webhook or bot channel message)."""

from __future__ import annotations

import json
import logging
from contextlib import asynccontextmanager
from dataclasses import dataclass

import httpx

from app.core.storage_config import DiscordConfig
from app.infrastructure.exceptions import StorageUploadError

logger = logging.getLogger(__name__)

DISCORD_TIMEOUT_SECONDS = 30.0


@dataclass(frozen=True)
class DiscordUploadResult:
    channel_id: str | None
    message_id: str | None
    attachment_id: str | None


class DiscordUploader:
    """Post a file as a message attachment.

    A webhook URL takes precedence; otherwise the bot token posts into the
    configured channel.
    """

    def __init__(
        self,
        config: DiscordConfig,
        *,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        self.config = config
        self._shared_http = http_client

    @asynccontextmanager
    async def _http_cm(self):
        if self._shared_http is not None:
            yield self._shared_http
            return
        async with httpx.AsyncClient() as client:
            yield client

    def _target(self) -> tuple[str, dict[str, str], dict[str, str]]:
        """Return (url, params, headers) for the configured posting mode."""
        if self.config.webhook_url:
            return self.config.webhook_url, {"wait": "true"}, {}
        url = f"{self.config.api_base}/channels/{self.config.channel_id}/messages"
        return url, {}, {"Authorization": f"Bot {self.config.bot_token}"}

    async def upload(
        self,
        content: bytes,
        file_name: str,
        content_type: str,
    ) -> DiscordUploadResult:
        """Upload content and return channel, message and attachment ids.

        Raises:
            StorageUploadError: Transport failure or non-2xx answer.
        """
        url, params, headers = self._target()
        payload = {"attachments": [{"id": 0, "filename": file_name}]}
        try:
            async with self._http_cm() as client:
                response = await client.post(
                    url,
                    params=params,
                    headers=headers,
                    data={"payload_json": json.dumps(payload)},
                    files={"files[0]": (file_name, content, content_type)},
                    timeout=DISCORD_TIMEOUT_SECONDS,
                )
        except httpx.HTTPError as e:
            raise StorageUploadError("Discord", str(e) or e.__class__.__name__) from e

        if not response.is_success:
            try:
                message = response.json().get("message")
            except ValueError:
                message = None
            raise StorageUploadError(
                "Discord", f"HTTP {response.status_code} {message or response.reason_phrase}".rstrip()
            )

        try:
            body = response.json()
        except ValueError as e:
            raise StorageUploadError("Discord", "invalid JSON response") from e

        attachments = body.get("attachments") or []
        first = attachments[0] if attachments else {}
        result = DiscordUploadResult(
            channel_id=body.get("channel_id"),
            message_id=body.get("id"),
            attachment_id=first.get("id"),
        )
        logger.info("Discord upload ok: message %s", result.message_id)
        return result
