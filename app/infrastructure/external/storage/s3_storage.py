"""S3-compatible object storage adapters (Cloudflare R2, generic S3)."""

from __future__ import annotations

import asyncio
from typing import Any, ClassVar
from urllib.parse import quote

import boto3
from botocore.exceptions import ClientError

from app.core.storage_config import R2Config, S3Config
from app.domain.entities import FileLocator, IngestedPayload, MetadataRecord
from app.infrastructure.exceptions import StorageUploadError
from app.infrastructure.external.storage.base import BaseStorageAdapter
from app.infrastructure.index import MetadataIndexProtocol
from app.shared.enums import StorageType
from app.shared.utils import generate_file_id, now_ms


class S3CompatibleStorageAdapter(BaseStorageAdapter):
    """Put the payload as one object under a locally generated key.

    Uses boto3 (sync) via asyncio.to_thread. The object key is the locator
    without its prefix; the record keeps it in key_field.
    """

    id_tag: ClassVar[str]
    key_field: ClassVar[str]
    backend_label: ClassVar[str]

    def __init__(
        self,
        bucket: str,
        *,
        endpoint_url: str | None = None,
        access_key_id: str | None = None,
        secret_access_key: str | None = None,
        region: str = "auto",
        index: MetadataIndexProtocol | None = None,
        client: Any | None = None,
    ) -> None:
        """Initialize adapter.

        Args:
            bucket: Target bucket.
            endpoint_url: S3-compatible endpoint.
            access_key_id: Access key id.
            secret_access_key: Secret key; env/IAM credentials apply if None.
            region: Signing region ("auto" for R2).
            index: Metadata index written after each upload.
            client: Optional preconfigured boto3 client (tests inject a mock).
        """
        super().__init__(index)
        self.bucket = bucket
        extra = {} if endpoint_url is None else {"endpoint_url": endpoint_url}
        self._client = client or boto3.client(
            "s3",
            region_name=region,
            aws_access_key_id=access_key_id,
            aws_secret_access_key=secret_access_key,
            **extra,
        )

    async def _write(self, payload: IngestedPayload) -> tuple[FileLocator, MetadataRecord]:
        locator = FileLocator.for_backend(
            self.storage_type, generate_file_id(self.id_tag), payload.extension
        )
        object_key = locator.object_name
        metadata = {
            # S3 user metadata must be ASCII.
            "filename": quote(payload.file_name, safe=""),
            "uploadtime": str(now_ms()),
        }

        def _put() -> None:
            self._client.put_object(
                Bucket=self.bucket,
                Key=object_key,
                Body=payload.content,
                ContentType=payload.content_type,
                Metadata=metadata,
            )

        try:
            await asyncio.to_thread(_put)
        except ClientError as e:
            error = e.response.get("Error", {})
            reason = f"{error.get('Code', 'ClientError')} {error.get('Message', '')}".strip()
            raise StorageUploadError(self.backend_label, reason) from e
        except Exception as e:
            raise StorageUploadError(self.backend_label, str(e)) from e
        return locator, self._record_for(payload, **{self.key_field: object_key})


class R2StorageAdapter(S3CompatibleStorageAdapter):
    storage_type = StorageType.R2
    id_tag = "r2"
    key_field = "r2_key"
    backend_label = "R2"

    @classmethod
    def from_config(
        cls, config: R2Config, index: MetadataIndexProtocol | None = None
    ) -> R2StorageAdapter:
        return cls(
            config.bucket,
            endpoint_url=config.endpoint_url,
            access_key_id=config.access_key_id,
            secret_access_key=config.secret_access_key,
            region="auto",
            index=index,
        )


class S3StorageAdapter(S3CompatibleStorageAdapter):
    storage_type = StorageType.S3
    id_tag = "s3"
    key_field = "s3_key"
    backend_label = "S3"

    @classmethod
    def from_config(
        cls, config: S3Config, index: MetadataIndexProtocol | None = None
    ) -> S3StorageAdapter:
        return cls(
            config.bucket,
            endpoint_url=config.endpoint_url,
            access_key_id=config.access_key_id,
            secret_access_key=config.secret_access_key,
            region=config.region,
            index=index,
        )
