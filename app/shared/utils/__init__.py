"""Shared utilities: datetime, generators, formatting."""

from app.shared.utils.datetime import (
    now_ms,
    utc_day_stamp,
    utc_now,
)
from app.shared.utils.formatting import format_size
from app.shared.utils.generators import generate_file_id, random_base36

__all__ = [
    "format_size",
    "generate_file_id",
    "now_ms",
    "random_base36",
    "utc_day_stamp",
    "utc_now",
]
