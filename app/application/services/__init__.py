"""Application services: pure domain helpers used by use cases."""

from app.application.services.content_classifier import (
    classify,
    extension_for_mime_type,
)
from app.application.services.url_validation import validate_remote_url

__all__ = [
    "classify",
    "extension_for_mime_type",
    "validate_remote_url",
]
