"""Redis-backed storage for short-code → long-URL mappings.

Every mapping is written with a fixed time-to-live and disappears on its own
when the TTL elapses; there is no delete operation and no secondary store.

Flow Diagram — MappingStore lifecycle
=====================================
::
    ┌─────────────┐
    │  lifespan   │
    │  startup    │
    └──────┬──────┘
           ▼
    ┌─────────────┐
    │ connect()   │
    │ build client│
    └──────┬──────┘
           ▼
    ┌─────────────┐
    │ PING        │──── fails ───► StoreUnavailableError
    └──────┬──────┘                (app does not start)
           ▼
    ┌─────────────┐
    │ put() / get()│──── miss ───► NotFoundError
    │ per request  │──── error ──► StoreUnavailableError
    └──────┬──────┘
           ▼
    ┌─────────────┐
    │ close()     │
    │ on shutdown │
    └─────────────┘

How to Use
===========
**Step 1 — Connect at startup**::
    store = await MappingStore.connect(get_settings())

**Step 2 — Save and read mappings**::
    await store.put("jTa4L57P", "https://www.guru3d.com/...", user_id)
    long_url = await store.get("jTa4L57P")

**Step 3 — Cleanup on shutdown**::
    await store.close()

Key Behaviours
===============
- One client per process; redis.asyncio pools connections internally so the
  store is shared by all request tasks without locking.
- ``put`` overwrites any existing mapping at the same code and resets its TTL.
- Redis failures are never retried; they surface as StoreUnavailableError.
"""

import logging

import redis.asyncio as redis
from redis.exceptions import RedisError

from shortener.config import Settings
from shortener.errors import NotFoundError, StoreUnavailableError

__all__ = ["DEFAULT_REDIS_PORT", "MappingStore"]

DEFAULT_REDIS_PORT = 6379

logger = logging.getLogger("urlshortener.store")


def _parse_addr(addr: str) -> tuple[str, int]:
    host, sep, port = addr.rpartition(":")
    if not sep:
        return addr, DEFAULT_REDIS_PORT
    try:
        return host or "localhost", int(port)
    except ValueError as exc:
        raise StoreUnavailableError(f"Invalid Redis address: {addr!r}") from exc


class MappingStore:
    """Thin wrapper around a Redis client that stores URL mappings with a TTL.

    Attributes:
        ttl_seconds: Lifetime of every mapping written by :meth:`put`.
        key_prefix: Namespace prepended to short codes to build Redis keys.
    """

    def __init__(self, client: redis.Redis, ttl_seconds: int, key_prefix: str = "url:"):
        self._client = client
        self.ttl_seconds = ttl_seconds
        self.key_prefix = key_prefix

    @classmethod
    async def connect(cls, settings: Settings) -> "MappingStore":
        """Open a Redis client and verify it with a round-trip PING.

        Args:
            settings: Application settings carrying the Redis address,
                password, database index and mapping TTL.

        Returns:
            MappingStore: Store bound to a live Redis connection pool.

        Raises:
            StoreUnavailableError: If the address is malformed or Redis does
                not answer the health check.
        """
        host, port = _parse_addr(settings.REDIS_ADDR)
        client = redis.Redis(
            host=host,
            port=port,
            password=settings.REDIS_PASSWORD or None,
            db=settings.REDIS_DB,
            socket_timeout=settings.REDIS_SOCKET_TIMEOUT,
            socket_connect_timeout=settings.REDIS_SOCKET_TIMEOUT,
            encoding="utf-8",
            decode_responses=True,
        )

        try:
            pong = await client.ping()
        except RedisError as exc:
            await client.aclose()
            logger.error(f"Error init Redis at {settings.REDIS_ADDR}: {exc}")
            raise StoreUnavailableError(f"Redis at {settings.REDIS_ADDR} is unavailable: {exc}") from exc

        logger.info(f"Redis started successfully at {settings.REDIS_ADDR} (db={settings.REDIS_DB}): ping={pong}")
        return cls(client, ttl_seconds=settings.MAPPING_TTL_SECONDS, key_prefix=settings.MAPPING_KEY_PREFIX)

    def _key(self, short_code: str) -> str:
        return f"{self.key_prefix}{short_code}"

    async def put(self, short_code: str, long_url: str, owner_id: str) -> None:
        """Save the mapping ``short_code`` → ``long_url`` for ``ttl_seconds``.

        Args:
            short_code: Generated short code.
            long_url: Original URL to redirect to.
            owner_id: Requesting user; folded into the code, only logged here.

        Raises:
            StoreUnavailableError: If the SET command fails.
        """
        try:
            await self._client.set(self._key(short_code), long_url, ex=self.ttl_seconds)
        except RedisError as exc:
            logger.error(f"Failed saving url mapping for {short_code}: {exc}")
            raise StoreUnavailableError(f"Failed saving url mapping: {exc}") from exc

        logger.debug(f"Saved mapping {short_code} -> {long_url} for user {owner_id} (ttl={self.ttl_seconds}s)")

    async def get(self, short_code: str) -> str:
        """Return the long URL stored for ``short_code``.

        Raises:
            NotFoundError: If the code was never stored or its TTL has elapsed.
            StoreUnavailableError: If the GET command fails.
        """
        try:
            long_url = await self._client.get(self._key(short_code))
        except RedisError as exc:
            logger.error(f"Failed retrieving url mapping for {short_code}: {exc}")
            raise StoreUnavailableError(f"Failed retrieving url mapping: {exc}") from exc

        if long_url is None:
            raise NotFoundError(short_code)
        return long_url

    async def ping(self) -> bool:
        """Health probe; returns False instead of raising when Redis is down."""
        try:
            return bool(await self._client.ping())
        except RedisError as exc:
            logger.warning(f"Redis health check failed: {exc}")
            return False

    async def close(self) -> None:
        await self._client.aclose()
