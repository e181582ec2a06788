"""Application layer: interfaces, services, use cases.

Depends only on domain and protocol definitions (DIP).
Infrastructure implements the interfaces (fetcher, storage adapters, index, auth, quota).
"""

from app.application.interfaces import (
    IAuthService,
    IGuestQuotaService,
    IMetadataIndex,
    IRemoteFetcher,
    IStorageAdapter,
    IStorageAdapterProvider,
)
from app.application.use_cases import FileInfoQueryService, UrlIngestionService

__all__ = [
    "FileInfoQueryService",
    "IAuthService",
    "IGuestQuotaService",
    "IMetadataIndex",
    "IRemoteFetcher",
    "IStorageAdapter",
    "IStorageAdapterProvider",
    "UrlIngestionService",
]
