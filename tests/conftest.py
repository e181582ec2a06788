"""Pytest configuration and fixtures for imgbed.

HTTP tests run app.main:app through httpx ASGITransport (no lifespan), with
dependencies overridden: settings, an in-memory Redis behind the metadata
index, and an httpx client whose MockTransport plays origin servers and
relays. All imports use app.*.
"""

import os
from collections.abc import Callable

import httpx
import pytest
from httpx import ASGITransport, AsyncClient

os.environ.setdefault("REDIS_ENABLED", "false")
os.environ.setdefault("TELEMETRY_ENABLED", "false")

from app.api.v1.dependencies import (  # noqa: E402
    get_app_settings,
    get_http_client,
    get_metadata_index,
)
from app.core.config import Settings, get_settings  # noqa: E402
from app.core.limiter import limiter  # noqa: E402
from app.infrastructure.index import RedisMetadataIndex  # noqa: E402
from app.main import app  # noqa: E402


class FakePipeline:
    """Queues incr/expire and applies them on execute(), like a MULTI block."""

    def __init__(self, redis: "FakeRedis") -> None:
        self.redis = redis
        self.ops: list[tuple[str, str, int | None]] = []

    async def __aenter__(self) -> "FakePipeline":
        return self

    async def __aexit__(self, *exc: object) -> None:
        return None

    def incr(self, key: str) -> "FakePipeline":
        self.ops.append(("incr", key, None))
        return self

    def expire(self, key: str, seconds: int) -> "FakePipeline":
        self.ops.append(("expire", key, seconds))
        return self

    async def execute(self) -> list:
        results: list = []
        for op, key, arg in self.ops:
            if op == "incr":
                value = int(self.redis.store.get(key) or 0) + 1
                self.redis.store[key] = str(value)
                results.append(value)
            else:
                self.redis.ttls[key] = arg
                results.append(True)
        self.ops.clear()
        return results


class FakeRedis:
    """Minimal async stand-in for redis.asyncio.Redis (decode_responses=True)."""

    def __init__(self) -> None:
        self.store: dict[str, str] = {}
        self.ttls: dict[str, int | None] = {}

    async def ping(self) -> bool:
        return True

    async def close(self) -> None:
        return None

    async def get(self, key: str) -> str | None:
        return self.store.get(key)

    async def set(self, key: str, value: str) -> bool:
        self.store[key] = value
        return True

    async def mget(self, keys: list[str]) -> list[str | None]:
        return [self.store.get(k) for k in keys]

    def pipeline(self, transaction: bool = True) -> FakePipeline:
        return FakePipeline(self)


@pytest.fixture
def settings() -> Settings:
    """Settings with the Telegram backend configured and no auth code (everyone privileged)."""
    return Settings(
        _env_file=None,
        redis_enabled=True,
        tg_bot_token="123:test-token",
        tg_chat_id="-1001",
        auth_code=None,
    )


@pytest.fixture
def fake_redis() -> FakeRedis:
    return FakeRedis()


@pytest.fixture
def metadata_index(fake_redis: FakeRedis, settings: Settings) -> RedisMetadataIndex:
    return RedisMetadataIndex(redis_client=fake_redis, settings=settings)


@pytest.fixture
def sleeps() -> list[float]:
    """Collects delays requested by code under test instead of sleeping."""
    return []


@pytest.fixture
def fake_sleep(sleeps: list[float]) -> Callable:
    async def _sleep(seconds: float) -> None:
        sleeps.append(seconds)

    return _sleep


@pytest.fixture
def outbound_handler() -> dict[str, Callable[[httpx.Request], httpx.Response]]:
    """Routes (host + path prefix) -> handler, used by the mock outbound transport.

    Tests register handlers, e.g. routes["example.com/pic.png"] = lambda r: httpx.Response(200).
    """
    return {}


@pytest.fixture
def outbound_calls() -> list[httpx.Request]:
    """Every request sent through outbound_client, in order."""
    return []


@pytest.fixture
async def outbound_client(outbound_handler, outbound_calls):
    """httpx client whose requests are answered by outbound_handler routes (404 otherwise)."""

    def handler(request: httpx.Request) -> httpx.Response:
        outbound_calls.append(request)
        target = f"{request.url.host}{request.url.path}"
        for prefix, route in outbound_handler.items():
            if target.startswith(prefix):
                return route(request)
        return httpx.Response(404)

    async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as http:
        yield http


@pytest.fixture
async def client(settings, metadata_index, outbound_client) -> AsyncClient:
    """Async HTTP client against the FastAPI app (ASGI) with infrastructure overridden."""
    app.dependency_overrides[get_app_settings] = lambda: settings
    app.dependency_overrides[get_metadata_index] = lambda: metadata_index
    app.dependency_overrides[get_http_client] = lambda: outbound_client
    limiter.enabled = False
    transport = ASGITransport(app=app)
    try:
        async with AsyncClient(transport=transport, base_url="http://test") as ac:
            yield ac
    finally:
        app.dependency_overrides.clear()
        limiter.enabled = True
        get_settings.cache_clear()
