"""File lookup use cases (read path over the metadata index)."""

from app.application.use_cases.files.file_info import FileInfoQueryService

__all__ = ["FileInfoQueryService"]
