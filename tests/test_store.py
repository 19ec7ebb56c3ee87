"""Mapping store tests against a mocked Redis client."""

import asyncio
from unittest.mock import patch

import pytest
from redis.exceptions import ConnectionError as RedisConnectionError
from redis.exceptions import TimeoutError as RedisTimeoutError

from shortener.config import Settings
from shortener.errors import NotFoundError, StoreUnavailableError
from shortener.store import MappingStore, _parse_addr

LONG_URL = "https://www.guru3d.com/news-story/spotted-ryzen-threadripper-pro-3995wx-processor-with-8-channel-ddr4,2.html"
USER_ID = "e0dba740-fc4b-4977-872c-d360239e6b1a"
SHORT_CODE = "Jsz4k57oAX"


# ============================================================================
# CONNECT / HEALTH CHECK
# ============================================================================


@pytest.mark.asyncio
async def test_connect_pings_redis(mock_redis) -> None:
    settings = Settings(REDIS_ADDR="cache:6380", REDIS_PASSWORD="secret", REDIS_DB=2, MAPPING_TTL_SECONDS=60)

    with patch("shortener.store.redis.Redis", return_value=mock_redis) as redis_cls:
        store = await MappingStore.connect(settings)

    redis_cls.assert_called_once()
    kwargs = redis_cls.call_args.kwargs
    assert kwargs["host"] == "cache"
    assert kwargs["port"] == 6380
    assert kwargs["password"] == "secret"
    assert kwargs["db"] == 2
    assert kwargs["decode_responses"] is True
    mock_redis.ping.assert_awaited_once()
    assert store.ttl_seconds == 60


@pytest.mark.asyncio
async def test_connect_without_password_sends_none(mock_redis) -> None:
    settings = Settings(REDIS_ADDR="localhost:6379", REDIS_PASSWORD="")

    with patch("shortener.store.redis.Redis", return_value=mock_redis) as redis_cls:
        await MappingStore.connect(settings)

    assert redis_cls.call_args.kwargs["password"] is None


@pytest.mark.asyncio
async def test_connect_failed_ping_raises_store_unavailable(mock_redis) -> None:
    mock_redis.ping.side_effect = RedisConnectionError("Connection refused")

    with patch("shortener.store.redis.Redis", return_value=mock_redis):
        with pytest.raises(StoreUnavailableError, match="unavailable"):
            await MappingStore.connect(Settings())

    mock_redis.aclose.assert_awaited_once()


@pytest.mark.asyncio
async def test_connect_rejects_malformed_address() -> None:
    with pytest.raises(StoreUnavailableError, match="Invalid Redis address"):
        await MappingStore.connect(Settings(REDIS_ADDR="localhost:notaport"))


def test_parse_addr() -> None:
    assert _parse_addr("localhost:6379") == ("localhost", 6379)
    assert _parse_addr("redis.internal:7000") == ("redis.internal", 7000)
    assert _parse_addr("redis") == ("redis", 6379)
    assert _parse_addr(":6380") == ("localhost", 6380)


@pytest.mark.asyncio
async def test_ping_reports_health(store, mock_redis) -> None:
    assert await store.ping() is True

    mock_redis.ping.side_effect = RedisConnectionError("down")
    assert await store.ping() is False


# ============================================================================
# PUT / GET
# ============================================================================


@pytest.mark.asyncio
async def test_insertion_and_retrieval(store) -> None:
    await store.put(SHORT_CODE, LONG_URL, USER_ID)

    assert await store.get(SHORT_CODE) == LONG_URL


@pytest.mark.asyncio
async def test_put_sets_ttl_and_prefix(store, mock_redis, settings) -> None:
    await store.put(SHORT_CODE, LONG_URL, USER_ID)

    mock_redis.set.assert_awaited_once_with(
        f"{settings.MAPPING_KEY_PREFIX}{SHORT_CODE}", LONG_URL, ex=settings.MAPPING_TTL_SECONDS
    )


def test_default_ttl_is_six_hours(settings) -> None:
    assert settings.MAPPING_TTL_SECONDS == 21600


@pytest.mark.asyncio
async def test_put_overwrites_existing_mapping(store) -> None:
    await store.put(SHORT_CODE, "https://example.com/old", USER_ID)
    await store.put(SHORT_CODE, "https://example.com/new", "another-user")

    assert await store.get(SHORT_CODE) == "https://example.com/new"


@pytest.mark.asyncio
async def test_get_unknown_code_raises_not_found(store) -> None:
    with pytest.raises(NotFoundError) as exc_info:
        await store.get("missing1")

    assert exc_info.value.short_code == "missing1"


@pytest.mark.asyncio
async def test_get_within_ttl(store, clock, settings) -> None:
    await store.put(SHORT_CODE, LONG_URL, USER_ID)
    clock.advance(settings.MAPPING_TTL_SECONDS - 1)

    assert await store.get(SHORT_CODE) == LONG_URL


@pytest.mark.asyncio
async def test_get_after_ttl_raises_not_found(store, clock, settings) -> None:
    await store.put(SHORT_CODE, LONG_URL, USER_ID)
    clock.advance(settings.MAPPING_TTL_SECONDS)

    with pytest.raises(NotFoundError):
        await store.get(SHORT_CODE)


@pytest.mark.asyncio
async def test_rewrite_refreshes_ttl(store, clock, settings) -> None:
    await store.put(SHORT_CODE, LONG_URL, USER_ID)
    clock.advance(settings.MAPPING_TTL_SECONDS - 10)
    await store.put(SHORT_CODE, LONG_URL, USER_ID)
    clock.advance(60)

    assert await store.get(SHORT_CODE) == LONG_URL


@pytest.mark.asyncio
async def test_put_redis_error_raises_store_unavailable(store, mock_redis) -> None:
    mock_redis.set.side_effect = RedisTimeoutError("Timeout writing to socket")

    with pytest.raises(StoreUnavailableError, match="Failed saving url mapping"):
        await store.put(SHORT_CODE, LONG_URL, USER_ID)


@pytest.mark.asyncio
async def test_get_redis_error_raises_store_unavailable(store, mock_redis) -> None:
    mock_redis.get.side_effect = RedisConnectionError("Connection reset by peer")

    with pytest.raises(StoreUnavailableError, match="Failed retrieving url mapping"):
        await store.get(SHORT_CODE)


@pytest.mark.asyncio
async def test_close_closes_client(store, mock_redis) -> None:
    await store.close()

    mock_redis.aclose.assert_awaited_once()


@pytest.mark.asyncio
async def test_store_is_shared_by_concurrent_tasks(store) -> None:
    codes = [f"code{i:04d}" for i in range(20)]
    await asyncio.gather(*(store.put(code, f"https://example.com/{code}", USER_ID) for code in codes))
    results = await asyncio.gather(*(store.get(code) for code in codes))

    assert results == [f"https://example.com/{code}" for code in codes]
