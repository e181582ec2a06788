"""URL ingestion use case."""

from app.application.use_cases.ingestion.url_ingestion import (
    UrlIngestionService,
    parse_storage_mode,
)

__all__ = ["UrlIngestionService", "parse_storage_mode"]
