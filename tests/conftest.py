"""Shared pytest fixtures for the store, service and API tests.

Redis is replaced by an ``AsyncMock(spec=redis.Redis)`` whose SET/GET calls are
backed by a dictionary and a manual clock, so TTL expiry can be exercised
without a running server.
"""

from typing import AsyncGenerator
from unittest.mock import AsyncMock

import pytest
import pytest_asyncio
import redis.asyncio as redis
from httpx import ASGITransport, AsyncClient

from shortener.config import Settings, get_settings
from shortener.dependencies import get_store
from shortener.main import app
from shortener.store import MappingStore


class ManualClock:
    def __init__(self, now: float = 0.0):
        self.now = now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def settings() -> Settings:
    return get_settings()


@pytest.fixture
def clock() -> ManualClock:
    return ManualClock()


@pytest.fixture
def mock_redis(clock: ManualClock) -> AsyncMock:
    """Redis client mock with expiring keys driven by ``clock``."""
    data: dict[str, tuple[str, float | None]] = {}

    async def fake_set(name, value, ex=None, **kwargs):
        data[name] = (value, clock.now + ex if ex is not None else None)
        return True

    async def fake_get(name):
        entry = data.get(name)
        if entry is None:
            return None
        value, expires_at = entry
        if expires_at is not None and clock.now >= expires_at:
            del data[name]
            return None
        return value

    redis_client = AsyncMock(spec=redis.Redis)
    redis_client.set = AsyncMock(side_effect=fake_set)
    redis_client.get = AsyncMock(side_effect=fake_get)
    redis_client.ping = AsyncMock(return_value=True)
    redis_client.aclose = AsyncMock(return_value=None)
    redis_client.data = data
    return redis_client


@pytest.fixture
def store(mock_redis: AsyncMock, settings: Settings) -> MappingStore:
    return MappingStore(
        mock_redis,
        ttl_seconds=settings.MAPPING_TTL_SECONDS,
        key_prefix=settings.MAPPING_KEY_PREFIX,
    )


@pytest_asyncio.fixture(scope="function")
async def client(store: MappingStore) -> AsyncGenerator[AsyncClient, None]:
    app.dependency_overrides[get_store] = lambda: store

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()
