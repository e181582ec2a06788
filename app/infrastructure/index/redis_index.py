"""Redis-based metadata index.

Stores one JSON document per key (no TTL). Also hosts the small counter
operations used by the guest quota, since both live in the same
key-value store. Call connect() at startup and disconnect() at shutdown.
"""

from __future__ import annotations

import json
import logging
from typing import Any

import redis.asyncio as redis

from app.core.config import Settings, get_settings
from app.domain.entities import MetadataRecord
from app.infrastructure.exceptions import (
    MetadataIndexError,
    MetadataIndexUnavailableError,
)
from app.infrastructure.index.keys import candidate_keys, record_key

logger = logging.getLogger(__name__)


def _decode(raw: str | bytes | None) -> dict[str, Any] | None:
    """Parse a stored value; empty, non-JSON and non-object values count as no record."""
    if not raw:
        return None
    try:
        value = json.loads(raw)
    except (TypeError, ValueError):
        return None
    return value if isinstance(value, dict) and value else None


class RedisMetadataIndex:
    """Async Redis metadata index.

    Unlike a cache, failures here are reported to the caller: writers decide
    whether to swallow them (adapters log and continue), readers turn them
    into a 500.
    """

    def __init__(
        self,
        redis_client: redis.Redis | None = None,
        settings: Settings | None = None,
    ) -> None:
        """Initialize index.

        Args:
            redis_client: Optional Redis client for testing or DI; treated as connected.
            settings: Optional settings; defaults to get_settings().
        """
        self.redis = redis_client
        self.settings = settings or get_settings()
        self._connected = redis_client is not None

    async def connect(self) -> None:
        """Establish Redis connection. Call on app startup."""
        if self.redis is None:
            try:
                self.redis = redis.Redis(
                    host=self.settings.redis_host,
                    port=self.settings.redis_port,
                    db=self.settings.redis_db,
                    password=self.settings.redis_password.get_secret_value() if self.settings.redis_password else None,
                    decode_responses=True,
                    socket_connect_timeout=5,
                    socket_keepalive=True,
                )
                await self.redis.ping()
                self._connected = True
                logger.info(
                    "Metadata index connected: %s:%s",
                    self.settings.redis_host,
                    self.settings.redis_port,
                )
            except (redis.ConnectionError, redis.TimeoutError) as e:
                logger.warning(
                    "Redis connection failed: %s. Metadata index unavailable.",
                    e,
                )
                self._connected = False
                self.redis = None

    async def disconnect(self) -> None:
        """Close Redis connection. Call on app shutdown."""
        if self.redis:
            await self.redis.close()
            self.redis = None
            self._connected = False
            logger.info("Metadata index disconnected")

    def is_available(self) -> bool:
        """Return True if Redis is connected and usable."""
        return self._connected and self.redis is not None

    def _client(self) -> redis.Redis:
        if not self.is_available() or self.redis is None:
            raise MetadataIndexUnavailableError()
        return self.redis

    async def put(self, key: str, record: MetadataRecord) -> None:
        """Store record under key, overwriting any previous value.

        Raises:
            MetadataIndexUnavailableError: Index not connected.
            MetadataIndexError: Redis command failed.
        """
        client = self._client()
        key = record_key(key)
        try:
            await client.set(key, json.dumps(record.to_dict()))
            logger.debug("Index PUT: %s", key)
        except redis.RedisError as e:
            raise MetadataIndexError(key, str(e)) from e

    async def get(self, key: str) -> MetadataRecord | None:
        """Return the record stored under key, or None if absent or empty."""
        client = self._client()
        try:
            raw = await client.get(key)
        except redis.RedisError as e:
            raise MetadataIndexError(key, str(e)) from e
        data = _decode(raw)
        return MetadataRecord.from_dict(data) if data else None

    async def resolve(self, identifier: str) -> tuple[str, MetadataRecord] | None:
        """Return (key, record) for the first candidate key with a non-empty record.

        All candidates are read in one MGET; priority follows candidate_keys().
        """
        client = self._client()
        keys = candidate_keys(identifier)
        try:
            values = await client.mget(keys)
        except redis.RedisError as e:
            raise MetadataIndexError(identifier, str(e)) from e
        for key, raw in zip(keys, values):
            data = _decode(raw)
            if data:
                logger.debug("Index HIT: %s -> %s", identifier, key)
                return key, MetadataRecord.from_dict(data)
        logger.debug("Index MISS: %s", identifier)
        return None

    async def get_counter(self, key: str) -> int:
        """Return an integer counter (0 when absent)."""
        client = self._client()
        try:
            raw = await client.get(key)
        except redis.RedisError as e:
            raise MetadataIndexError(key, str(e)) from e
        try:
            return int(raw) if raw else 0
        except ValueError:
            return 0

    async def increment_counter(self, key: str, ttl: int) -> int:
        """Increment a counter and (re)set its expiry. Returns the new value."""
        client = self._client()
        try:
            async with client.pipeline(transaction=True) as pipe:
                pipe.incr(key)
                pipe.expire(key, ttl)
                results = await pipe.execute()
        except redis.RedisError as e:
            raise MetadataIndexError(key, str(e)) from e
        return int(results[0])
