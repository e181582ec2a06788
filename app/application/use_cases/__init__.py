"""Application use cases: one entry point per workflow."""

from app.application.use_cases.files import FileInfoQueryService
from app.application.use_cases.ingestion import UrlIngestionService

__all__ = [
    "FileInfoQueryService",
    "UrlIngestionService",
]
