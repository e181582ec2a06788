"""Metadata index: Redis-backed record store and key utilities.

Written by storage adapters after a successful backend write; read by the
file-info resolver. Key format is in keys.py (DRY).
"""

from app.infrastructure.index.index_protocol import MetadataIndexProtocol
from app.infrastructure.index.keys import (
    candidate_keys,
    guest_counter_key,
    record_key,
)
from app.infrastructure.index.redis_index import RedisMetadataIndex

__all__ = [
    "MetadataIndexProtocol",
    "RedisMetadataIndex",
    "candidate_keys",
    "guest_counter_key",
    "record_key",
]
