"""FileInfoQueryService over the metadata index."""

import json

import pytest

from app.application.use_cases.files import FileInfoQueryService
from app.domain.exceptions import ValidationException
from app.infrastructure.exceptions import MetadataIndexUnavailableError
from app.infrastructure.index import RedisMetadataIndex
from app.shared.enums import StorageType


async def test_resolves_record(metadata_index, fake_redis) -> None:
    fake_redis.store["r2:r2_1_abc.png"] = json.dumps(
        {"file_name": "a.png", "file_size": 3, "storage_type": "r2", "created_at": 5}
    )
    result = await FileInfoQueryService(metadata_index).get_file_info("r2_1_abc.png")

    assert result.file_id == "r2_1_abc.png"
    assert result.key == "r2:r2_1_abc.png"
    assert result.record.storage_type is StorageType.R2


async def test_miss_returns_none(metadata_index) -> None:
    assert await FileInfoQueryService(metadata_index).get_file_info("nope") is None


async def test_empty_id(metadata_index) -> None:
    with pytest.raises(ValidationException) as exc_info:
        await FileInfoQueryService(metadata_index).get_file_info("")
    assert exc_info.value.message == "Missing file ID"


@pytest.mark.parametrize("connected", [False, None])
async def test_unavailable_index(settings, connected) -> None:
    index = RedisMetadataIndex(settings=settings) if connected is False else None
    with pytest.raises(MetadataIndexUnavailableError):
        await FileInfoQueryService(index).get_file_info("abc")
