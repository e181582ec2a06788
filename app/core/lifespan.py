"""Application lifespan: startup and shutdown.

Single place for all startup/shutdown logic (SRP). Used by main.py;
no business logic here, only wiring of infrastructure (shared HTTP
client, metadata index, telemetry).
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

import httpx
from fastapi import FastAPI

from app.core.config import get_settings
from app.core.storage_config import StorageConfig

logger = logging.getLogger(__name__)


@asynccontextmanager
async def create_lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Run startup then yield; on exit run shutdown.

    Startup order: shared HTTP client, storage config, metadata index (if
    enabled), telemetry (if enabled). A failed Redis connection leaves the
    index unavailable; the app still starts. Shutdown order: HTTP client
    close, index disconnect, telemetry shutdown.
    """
    settings = get_settings()

    # ---- Startup ----
    # Shared HTTP client for remote fetches and relay calls (connection reuse).
    app.state.http_client = httpx.AsyncClient(timeout=30.0)
    app.state.storage_config = StorageConfig.from_settings(settings)

    if settings.redis_enabled:
        from app.infrastructure.index import RedisMetadataIndex

        index = RedisMetadataIndex(settings=settings)
        await index.connect()
        app.state.metadata_index = index
    else:
        app.state.metadata_index = None

    if settings.telemetry_enabled:
        from app.shared.telemetry.telemetry import TelemetryConfig, set_telemetry

        telemetry = TelemetryConfig(
            service_name=settings.app_name,
            service_version=settings.app_version,
            enabled=True,
            environment=settings.telemetry_environment,
        )
        telemetry.setup_telemetry(
            exporter_type=settings.telemetry_exporter,
            otlp_endpoint=settings.telemetry_otlp_endpoint,
            sample_rate=settings.telemetry_sample_rate,
        )
        set_telemetry(telemetry)
        telemetry.instrument_fastapi(app)
        telemetry.instrument_redis()
        telemetry.instrument_logging()
        logger.info("Telemetry initialized")

    yield

    # ---- Shutdown ----
    if getattr(app.state, "http_client", None) is not None:
        await app.state.http_client.aclose()
        app.state.http_client = None
        logger.info("Shared HTTP client closed")

    if getattr(app.state, "metadata_index", None) is not None:
        await app.state.metadata_index.disconnect()
        logger.info("Metadata index disconnected")

    from app.shared.telemetry.telemetry import get_telemetry

    telemetry_instance = get_telemetry()
    if telemetry_instance is not None:
        telemetry_instance.shutdown()
        logger.info("Telemetry shutdown complete")
