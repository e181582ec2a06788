"""Bounded fetch of caller-supplied URLs (validation, deadline, size cap)."""

from app.application.services.url_validation import validate_remote_url
from app.infrastructure.external.fetch.remote_fetcher import (
    FetchedContent,
    RemoteFetcher,
)

__all__ = ["FetchedContent", "RemoteFetcher", "validate_remote_url"]
