"""Infrastructure implementations of application service interfaces."""

from app.infrastructure.services.auth_service import AuthService
from app.infrastructure.services.guest_quota_service import GuestQuotaService

__all__ = [
    "AuthService",
    "GuestQuotaService",
]
