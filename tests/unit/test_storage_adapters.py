"""Storage adapters and factory: backend writes, locators, best-effort index writes."""

import json
import re
from unittest.mock import AsyncMock, MagicMock

import httpx
import pytest
from botocore.exceptions import ClientError

from app.core.storage_config import (
    DiscordConfig,
    HuggingFaceConfig,
    R2Config,
    StorageConfig,
    TelegramConfig,
)
from app.domain.entities import IngestedPayload, MetadataRecord
from app.domain.exceptions import BackendNotConfiguredException
from app.infrastructure.exceptions import MetadataIndexError, StorageUploadError
from app.infrastructure.external.relays import (
    DiscordUploader,
    HuggingFaceUploader,
    TelegramUploadResult,
)
from app.infrastructure.external.storage import (
    DiscordStorageAdapter,
    HuggingFaceStorageAdapter,
    R2StorageAdapter,
    S3StorageAdapter,
    StorageAdapterProvider,
    StorageFactory,
    TelegramStorageAdapter,
)
from app.infrastructure.index import RedisMetadataIndex
from app.shared.enums import StorageMode, StorageType, TelegramMethod

PAYLOAD = IngestedPayload(
    content=b"\x89PNG-data",
    file_name="日本 pic.png",
    extension="png",
    content_type="image/png",
)


class TestS3CompatibleAdapters:
    """R2 and S3 share the boto3 put_object path."""

    async def test_r2_put_object_and_record(self, metadata_index, fake_redis) -> None:
        boto_client = MagicMock()
        adapter = R2StorageAdapter("bucket-a", index=metadata_index, client=boto_client)

        locator = await adapter.store(PAYLOAD)

        assert locator.storage_type is StorageType.R2
        assert re.fullmatch(r"r2:r2_\d{13}_[0-9a-z]{6}\.png", str(locator))
        kwargs = boto_client.put_object.call_args.kwargs
        assert kwargs["Bucket"] == "bucket-a"
        assert kwargs["Key"] == locator.object_name
        assert kwargs["Body"] == PAYLOAD.content
        assert kwargs["ContentType"] == "image/png"
        assert kwargs["Metadata"]["filename"].isascii()

        stored = json.loads(fake_redis.store[str(locator)])
        assert stored["storage_type"] == "r2"
        assert stored["r2_key"] == locator.object_name
        assert stored["file_name"] == "日本 pic.png"
        assert stored["file_size"] == PAYLOAD.size

    async def test_s3_uses_its_own_prefix_and_key_field(self, metadata_index, fake_redis) -> None:
        adapter = S3StorageAdapter("bucket-b", index=metadata_index, client=MagicMock())
        locator = await adapter.store(PAYLOAD)

        assert str(locator).startswith("s3:s3_")
        stored = json.loads(fake_redis.store[str(locator)])
        assert stored["storage_type"] == "s3"
        assert stored["s3_key"] == locator.object_name

    async def test_backend_failure_writes_no_record(self, metadata_index, fake_redis) -> None:
        boto_client = MagicMock()
        boto_client.put_object.side_effect = RuntimeError("AccessDenied")
        adapter = S3StorageAdapter("bucket-b", index=metadata_index, client=boto_client)

        with pytest.raises(StorageUploadError) as exc_info:
            await adapter.store(PAYLOAD)
        assert exc_info.value.message == "S3 upload failed: AccessDenied"
        assert fake_redis.store == {}

    async def test_client_error_reports_code_and_message(self) -> None:
        boto_client = MagicMock()
        boto_client.put_object.side_effect = ClientError(
            {"Error": {"Code": "NoSuchBucket", "Message": "The specified bucket does not exist"}},
            "PutObject",
        )
        adapter = R2StorageAdapter("missing", client=boto_client)

        with pytest.raises(StorageUploadError) as exc_info:
            await adapter.store(PAYLOAD)
        assert exc_info.value.message == "R2 upload failed: NoSuchBucket The specified bucket does not exist"


class TestIndexWriteIsBestEffort:
    async def test_index_write_error_still_returns_locator(self) -> None:
        index = MagicMock()
        index.is_available.return_value = True
        index.put = AsyncMock(side_effect=MetadataIndexError("r2:x", "down"))
        adapter = R2StorageAdapter("bucket", index=index, client=MagicMock())

        locator = await adapter.store(PAYLOAD)

        assert str(locator).startswith("r2:")
        index.put.assert_awaited_once()
        key, record = index.put.await_args.args
        assert key == str(locator)
        assert isinstance(record, MetadataRecord)

    async def test_unavailable_index_is_skipped(self, settings) -> None:
        boto_client = MagicMock()
        adapter = R2StorageAdapter("bucket", index=RedisMetadataIndex(settings=settings), client=boto_client)

        locator = await adapter.store(PAYLOAD)

        assert str(locator).startswith("r2:")
        boto_client.put_object.assert_called_once()

    async def test_no_index(self) -> None:
        adapter = R2StorageAdapter("bucket", index=None, client=MagicMock())
        assert (await adapter.store(PAYLOAD)).storage_type is StorageType.R2


async def test_telegram_adapter_uses_relay_file_id(metadata_index, fake_redis) -> None:
    uploader = MagicMock()
    uploader.send_file = AsyncMock(
        return_value=TelegramUploadResult(
            file_id="AgACAgQAAx", message_id=99, method=TelegramMethod.PHOTO, attempts=1
        )
    )
    adapter = TelegramStorageAdapter(uploader, metadata_index)

    locator = await adapter.store(PAYLOAD)

    assert str(locator) == "AgACAgQAAx.png"
    assert locator.storage_type is StorageType.TELEGRAM
    uploader.send_file.assert_awaited_once_with(PAYLOAD.content, PAYLOAD.file_name, "image/png")
    stored = json.loads(fake_redis.store["AgACAgQAAx.png"])
    assert stored["storage_type"] == "telegram"
    assert stored["telegram_message_id"] == 99


async def test_discord_adapter_via_webhook(metadata_index, fake_redis) -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(
            200,
            json={
                "id": "m1",
                "channel_id": "c1",
                "attachments": [{"id": "a1", "url": "https://cdn.discordapp.com/a1/pic.png"}],
            },
        )

    config = DiscordConfig(webhook_url="https://discord.com/api/webhooks/1/tok")
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    adapter = DiscordStorageAdapter(DiscordUploader(config, http_client=client), metadata_index)

    locator = await adapter.store(PAYLOAD)

    assert str(locator).startswith("discord:discord_")
    assert seen[0].url.params["wait"] == "true"
    assert b'name="files[0]"' in seen[0].content
    stored = json.loads(fake_redis.store[str(locator)])
    assert stored["discord_channel_id"] == "c1"
    assert stored["discord_message_id"] == "m1"
    assert stored["discord_attachment_id"] == "a1"


async def test_discord_bot_mode_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.headers["Authorization"] == "Bot bot-token"
        assert request.url.path == "/api/v10/channels/555/messages"
        return httpx.Response(403, json={"message": "Missing Access"})

    config = DiscordConfig(bot_token="bot-token", channel_id="555")
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    adapter = DiscordStorageAdapter(DiscordUploader(config, http_client=client))

    with pytest.raises(StorageUploadError) as exc_info:
        await adapter.store(PAYLOAD)
    assert exc_info.value.message == "Discord upload failed: HTTP 403 Missing Access"


async def test_huggingface_adapter_commits_under_uploads(metadata_index, fake_redis) -> None:
    api = MagicMock()
    config = HuggingFaceConfig(token="hf_x", repo="me/bed")
    adapter = HuggingFaceStorageAdapter(HuggingFaceUploader(config, api=api), metadata_index)

    locator = await adapter.store(PAYLOAD)

    assert str(locator).startswith("hf:hf_")
    kwargs = api.upload_file.call_args.kwargs
    assert kwargs["path_in_repo"] == f"uploads/{locator.object_name}"
    assert kwargs["repo_id"] == "me/bed"
    assert kwargs["repo_type"] == "dataset"
    stored = json.loads(fake_redis.store[str(locator)])
    assert stored["storage_type"] == "huggingface"
    assert stored["hf_path"] == kwargs["path_in_repo"]


async def test_huggingface_failure_is_upload_error() -> None:
    api = MagicMock()
    api.upload_file.side_effect = RuntimeError("401 Unauthorized")
    adapter = HuggingFaceStorageAdapter(HuggingFaceUploader(HuggingFaceConfig(token="t", repo="r"), api=api))

    with pytest.raises(StorageUploadError) as exc_info:
        await adapter.store(PAYLOAD)
    assert exc_info.value.message == "HuggingFace upload failed: 401 Unauthorized"


class TestStorageFactory:
    def test_unconfigured_backend(self) -> None:
        with pytest.raises(BackendNotConfiguredException) as exc_info:
            StorageFactory.create_adapter(StorageMode.R2, StorageConfig())
        assert exc_info.value.details["backend"] == "r2"

    def test_builds_adapter_for_configured_backends(self) -> None:
        config = StorageConfig(
            telegram=TelegramConfig(bot_token="1:a", chat_id="2"),
            r2=R2Config(
                bucket="b",
                endpoint_url="https://acc.r2.cloudflarestorage.com",
                access_key_id="id",
                secret_access_key="secret",
            ),
            discord=DiscordConfig(webhook_url="https://discord.com/api/webhooks/1/t"),
        )
        provider = StorageAdapterProvider(config)

        assert isinstance(provider.get_adapter(StorageMode.TELEGRAM), TelegramStorageAdapter)
        assert isinstance(provider.get_adapter(StorageMode.R2), R2StorageAdapter)
        assert isinstance(provider.get_adapter(StorageMode.DISCORD), DiscordStorageAdapter)
        with pytest.raises(BackendNotConfiguredException):
            provider.get_adapter(StorageMode.S3)


def test_storage_config_from_settings(settings) -> None:
    config = StorageConfig.from_settings(settings)
    assert config.require(StorageMode.TELEGRAM).bot_token == "123:test-token"
    assert config.r2 is None
    assert config.huggingface is None
    with pytest.raises(BackendNotConfiguredException):
        config.require(StorageMode.R2)
