"""URL ingestion: fetch a remote file and store it in the selected backend."""

from __future__ import annotations

from typing import Any

from app.application.dtos.upload import CallerContext
from app.application.interfaces.services import (
    IAuthService,
    IGuestQuotaService,
    IRemoteFetcher,
    IStorageAdapterProvider,
)
from app.application.services.content_classifier import classify
from app.application.services.url_validation import validate_remote_url
from app.domain.entities import FileLocator, IngestedPayload
from app.domain.exceptions import GuestQuotaDeniedException, ValidationException
from app.shared.enums import StorageMode
from app.shared.telemetry.logging import get_logger
from app.shared.telemetry.tracing import add_span_attributes, traced

logger = get_logger(__name__)


def parse_storage_mode(value: Any) -> StorageMode:
    """Map the request's storageMode to a StorageMode; absent means telegram."""
    if value is None:
        return StorageMode.TELEGRAM
    if not isinstance(value, str) or value not in StorageMode.values():
        raise ValidationException(
            f"Unsupported storage mode: {value}. Supported: {', '.join(StorageMode.values())}",
            field="storageMode",
        )
    return StorageMode(value)


class UrlIngestionService:
    """Single responsibility: run the fetch, quota, classify, store pipeline for one URL.

    Steps are strictly sequential; no backend is contacted when the fetch or
    the guest quota check fails.
    """

    def __init__(
        self,
        fetcher: IRemoteFetcher,
        adapters: IStorageAdapterProvider,
        auth_service: IAuthService,
        quota_service: IGuestQuotaService,
    ) -> None:
        self.fetcher = fetcher
        self.adapters = adapters
        self.auth = auth_service
        self.quota = quota_service

    def _is_privileged(self, caller: CallerContext) -> bool:
        if not self.auth.is_auth_required():
            return True
        return self.auth.check_authentication(caller)

    @traced("ingestion.ingest_url")
    async def ingest(
        self,
        url: Any,
        storage_mode: Any,
        caller: CallerContext,
    ) -> FileLocator:
        """Ingest url into the backend named by storage_mode and return the locator.

        Raises:
            ValidationException: Missing or non-string url, unsupported storage mode,
                malformed or non-http(s) URL.
            RemoteFetchError: Fetch failed (timeout, unreachable, non-2xx, empty, too large).
            GuestQuotaDeniedException: Guest caller refused by the quota check.
            BackendNotConfiguredException: Selected backend lacks configuration.
            StorageUploadError: Backend write failed.
        """
        if not isinstance(url, str) or not url.strip():
            raise ValidationException("Please provide a valid URL", field="url")
        url = url.strip()
        mode = parse_storage_mode(storage_mode)
        validate_remote_url(url)
        add_span_attributes(storage_mode=mode.value)

        privileged = self._is_privileged(caller)
        fetched = await self.fetcher.fetch(url)

        if not privileged:
            check = await self.quota.check_guest_upload(caller.client_ip, fetched.size)
            if not check.allowed:
                logger.info(
                    "Guest upload denied for %s: %s", caller.client_ip, check.reason
                )
                raise GuestQuotaDeniedException(
                    check.reason or "Guest upload is not allowed", check.status
                )

        file_name, extension = classify(url, fetched.content_type)
        adapter = self.adapters.get_adapter(mode)
        locator = await adapter.store(
            IngestedPayload(
                content=fetched.content,
                file_name=file_name,
                extension=extension,
                content_type=fetched.content_type,
            )
        )

        if not privileged:
            await self.quota.increment_guest_count(caller.client_ip)
        logger.info("Ingested %s into %s as %s", url, mode.value, locator)
        return locator
