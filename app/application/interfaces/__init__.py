"""Application ports (Protocols) implemented by infrastructure."""

from app.application.interfaces.services import (
    IAuthService,
    IGuestQuotaService,
    IMetadataIndex,
    IRemoteFetcher,
    IStorageAdapter,
    IStorageAdapterProvider,
)

__all__ = [
    "IAuthService",
    "IGuestQuotaService",
    "IMetadataIndex",
    "IRemoteFetcher",
    "IStorageAdapter",
    "IStorageAdapterProvider",
]
