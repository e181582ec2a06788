"""Core: config, constants, and application bootstrap.

Single place for settings and shared constants.
"""

from app.core.config import Settings, get_settings
from app.core.storage_config import StorageConfig

__all__ = ["Settings", "StorageConfig", "get_settings"]
