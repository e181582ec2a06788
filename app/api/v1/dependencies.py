"""Presentation-layer dependency injection (composition root).

Provides FastAPI Depends() for the application use cases. Use cases are
built here from infrastructure implementations and the objects created in
the lifespan (shared HTTP client, metadata index, storage config); routes
depend only on these dependencies, not on infra directly.
"""

from __future__ import annotations

from typing import Annotated

import httpx
from fastapi import Depends, Request

from app.application.dtos.upload import CallerContext
from app.application.use_cases.files import FileInfoQueryService
from app.application.use_cases.ingestion import UrlIngestionService
from app.core.config import Settings, get_settings
from app.core.storage_config import StorageConfig
from app.infrastructure.external.fetch import RemoteFetcher
from app.infrastructure.external.storage import StorageAdapterProvider
from app.infrastructure.index import RedisMetadataIndex
from app.infrastructure.services import AuthService, GuestQuotaService

AUTH_HEADER = "X-Auth-Code"
AUTH_COOKIE = "authCode"


def get_app_settings() -> Settings:
    """Settings dependency (override in tests)."""
    return get_settings()


def get_http_client(request: Request) -> httpx.AsyncClient | None:
    """Shared httpx client from lifespan; None outside a running app (short-lived clients are used)."""
    return getattr(request.app.state, "http_client", None)


def get_metadata_index(request: Request) -> RedisMetadataIndex | None:
    """Metadata index from lifespan; None when Redis is disabled."""
    return getattr(request.app.state, "metadata_index", None)


def get_storage_config(
    request: Request,
    settings: Annotated[Settings, Depends(get_app_settings)],
) -> StorageConfig:
    config = getattr(request.app.state, "storage_config", None)
    return config if config is not None else StorageConfig.from_settings(settings)


def presented_auth_code(request: Request) -> str | None:
    """Auth code sent by the caller: Bearer token, X-Auth-Code header, or authCode cookie."""
    authorization = request.headers.get("authorization") or ""
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() == "bearer" and token.strip():
        return token.strip()
    header = request.headers.get(AUTH_HEADER)
    if header:
        return header.strip()
    return request.cookies.get(AUTH_COOKIE) or None


def get_caller_context(request: Request) -> CallerContext:
    client_ip = request.client.host if request.client else "unknown"
    return CallerContext(client_ip=client_ip, presented_code=presented_auth_code(request))


def get_remote_fetcher(
    http_client: Annotated[httpx.AsyncClient | None, Depends(get_http_client)],
    settings: Annotated[Settings, Depends(get_app_settings)],
) -> RemoteFetcher:
    return RemoteFetcher(
        http_client=http_client,
        timeout_seconds=settings.fetch_timeout_seconds,
        max_size=settings.max_remote_file_size,
    )


def get_auth_service(
    settings: Annotated[Settings, Depends(get_app_settings)],
) -> AuthService:
    return AuthService(settings)


def get_guest_quota_service(
    index: Annotated[RedisMetadataIndex | None, Depends(get_metadata_index)],
    settings: Annotated[Settings, Depends(get_app_settings)],
) -> GuestQuotaService:
    return GuestQuotaService(index=index, settings=settings)


def get_storage_adapter_provider(
    storage_config: Annotated[StorageConfig, Depends(get_storage_config)],
    index: Annotated[RedisMetadataIndex | None, Depends(get_metadata_index)],
    http_client: Annotated[httpx.AsyncClient | None, Depends(get_http_client)],
) -> StorageAdapterProvider:
    return StorageAdapterProvider(storage_config, index=index, http_client=http_client)


def get_url_ingestion_service(
    fetcher: Annotated[RemoteFetcher, Depends(get_remote_fetcher)],
    adapters: Annotated[StorageAdapterProvider, Depends(get_storage_adapter_provider)],
    auth_service: Annotated[AuthService, Depends(get_auth_service)],
    quota_service: Annotated[GuestQuotaService, Depends(get_guest_quota_service)],
) -> UrlIngestionService:
    return UrlIngestionService(fetcher, adapters, auth_service, quota_service)


def get_file_info_service(
    index: Annotated[RedisMetadataIndex | None, Depends(get_metadata_index)],
) -> FileInfoQueryService:
    return FileInfoQueryService(index)
