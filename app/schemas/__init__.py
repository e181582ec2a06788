"""Pydantic request/response schemas for the API."""

from app.schemas.file_info import FileInfoResponse, FileNotFoundResponse
from app.schemas.health import (
    HealthResponse,
    ReadinessErrorResponse,
    ReadinessResponse,
)
from app.schemas.upload import UploadedFileItem, UploadFromUrlRequest

__all__ = [
    "FileInfoResponse",
    "FileNotFoundResponse",
    "HealthResponse",
    "ReadinessErrorResponse",
    "ReadinessResponse",
    "UploadFromUrlRequest",
    "UploadedFileItem",
]
