"""Guest quota collaborator: per-IP daily upload counters in Redis."""

from __future__ import annotations

from app.application.dtos.upload import GuestCheckResult
from app.core.config import Settings, get_settings
from app.core.constants import GUEST_COUNTER_TTL_SECONDS
from app.infrastructure.exceptions import (
    MetadataIndexError,
    MetadataIndexUnavailableError,
)
from app.infrastructure.index import RedisMetadataIndex, guest_counter_key
from app.shared.telemetry.logging import get_logger
from app.shared.utils import format_size, utc_day_stamp

logger = get_logger(__name__)


class GuestQuotaService:
    """Limit unauthenticated uploads by size and by count per UTC day.

    Counters share the metadata index's Redis. When it is unavailable the
    count check is skipped (size and enablement are still enforced).
    """

    def __init__(
        self,
        index: RedisMetadataIndex | None = None,
        settings: Settings | None = None,
    ) -> None:
        self.index = index
        self.settings = settings or get_settings()

    def _counter_key(self, client_ip: str) -> str:
        return guest_counter_key(client_ip or "unknown", utc_day_stamp())

    def _counting(self) -> bool:
        return self.index is not None and self.index.is_available()

    async def check_guest_upload(self, client_ip: str, size: int) -> GuestCheckResult:
        s = self.settings
        if not s.guest_upload_enabled:
            return GuestCheckResult(
                allowed=False,
                reason="Guest upload is disabled; please log in",
                status=403,
            )
        if size > s.guest_max_file_size:
            return GuestCheckResult(
                allowed=False,
                reason=f"Guest uploads are limited to {format_size(s.guest_max_file_size)}",
                status=413,
            )
        if not self._counting():
            return GuestCheckResult(allowed=True)

        assert self.index is not None
        try:
            count = await self.index.get_counter(self._counter_key(client_ip))
        except (MetadataIndexError, MetadataIndexUnavailableError) as e:
            logger.warning("Guest counter read failed, skipping count check: %s", e)
            return GuestCheckResult(allowed=True)
        if count >= s.guest_daily_limit:
            return GuestCheckResult(
                allowed=False,
                reason=f"Daily guest upload limit reached ({s.guest_daily_limit})",
                status=429,
            )
        return GuestCheckResult(allowed=True)

    async def increment_guest_count(self, client_ip: str) -> None:
        if not self._counting():
            return
        assert self.index is not None
        key = self._counter_key(client_ip)
        try:
            await self.index.increment_counter(key, GUEST_COUNTER_TTL_SECONDS)
        except (MetadataIndexError, MetadataIndexUnavailableError):
            logger.exception("Guest counter increment failed for %s", key)
