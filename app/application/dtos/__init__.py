"""Application DTOs (frozen dataclasses shared by use cases and API)."""

from app.application.dtos.upload import CallerContext, FileInfoResult, GuestCheckResult

__all__ = [
    "CallerContext",
    "FileInfoResult",
    "GuestCheckResult",
]
