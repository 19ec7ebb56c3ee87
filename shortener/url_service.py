"""URL Shortener Service Layer - Core Business Logic

This module ties the short-code generator to the mapping store for a single
request and records the Prometheus metrics for both operations.

Request Flow Diagrams
=====================

Short URL Creation Flow
-----------------------
::
    ┌──────────────────┐
    │ POST             │
    │ /create-short-url│
    └────────┬─────────┘
             ▼
    ┌─────────────┐
    │ Validate    │
    │ (Pydantic)  │
    └──────┬──────┘
           ▼
    ┌─────────────┐
    │ Generate    │
    │ code (SHA-  │
    │ 256+base58) │
    └──────┬──────┘
           ▼
    ┌─────────────┐
    │ SET code    │
    │ EX 6h       │
    └──────┬──────┘
           ▼
    ┌─────────────┐
    │ Return      │
    │ short_url   │
    └─────────────┘

Redirect Flow
-------------
::
    ┌─────────────┐
    │  GET /:code │
    └──────┬──────┘
           ▼
    ┌─────────────┐
    │ GET code    │
    └──────┬──────┘
    FOUND? │
    ┌──────┴─────┐
    │ NO         │ YES
    ▼            ▼
┌─────────┐  ┌─────────┐
│  404    │  │  302    │
└─────────┘  └─────────┘

Usage Examples
=============
```python
@router.post("/create-short-url")
async def create_short_url(
    payload: ShortURLCreate,
    service: URLShorteningService = Depends(get_url_service),
) -> ShortURLResponse:
    short_code = await service.create_short_url(payload)
    ...
```
"""

import time
from typing import TYPE_CHECKING

from prometheus_client import Counter, Histogram

from shortener.enums import RequestStatus
from shortener.errors import NotFoundError, StoreUnavailableError
from shortener.schemas import ShortURLCreate
from shortener.shortcode import generate_short_code

if TYPE_CHECKING:
    from shortener.dependencies import RequestContext

__all__ = ["URLShorteningService"]


# ============================================================================
# PROMETHEUS METRICS
# ============================================================================

URL_CREATION_REQUESTS_TOTAL = Counter(
    "url_shortener_creation_requests_total",
    "Total URL creation requests",
    ["status"]
)
URL_LOOKUP_REQUESTS_TOTAL = Counter(
    "url_shortener_lookup_requests_total",
    "Total URL lookup requests",
    ["status"]
)

URL_CREATION_DURATION = Histogram(
    "url_shortener_creation_duration_seconds",
    "Time taken to create short URLs",
    buckets=[0.001, 0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0]
)
URL_LOOKUP_DURATION = Histogram(
    "url_shortener_lookup_duration_seconds",
    "Time taken to lookup URLs",
    buckets=[0.001, 0.005, 0.01, 0.025, 0.05, 0.1, 0.25]
)


def _status_for(exc: Exception) -> RequestStatus:
    if isinstance(exc, NotFoundError):
        return RequestStatus.NOT_FOUND
    if isinstance(exc, StoreUnavailableError):
        return RequestStatus.UNAVAILABLE
    return RequestStatus.ERROR


# ============================================================================
# CORE SERVICE CLASS
# ============================================================================

class URLShorteningService:
    """Service class for creating and resolving short URLs.

    The service holds no state of its own; the mapping store it receives is
    shared across requests.

    Example:
        >>> service = URLShorteningService.from_context(ctx)
        >>> code = await service.create_short_url(payload)
        >>> await service.resolve(code)
        'https://www.guru3d.com/...'
    """

    def __init__(self, ctx: "RequestContext"):
        self._store = ctx.store
        self._logger = ctx.logger
        self._settings = ctx.settings

    @classmethod
    def from_context(cls, ctx: "RequestContext") -> "URLShorteningService":
        return cls(ctx)

    async def create_short_url(self, payload: ShortURLCreate) -> str:
        """Generate the short code for ``payload`` and persist the mapping.

        Args:
            payload: Validated creation request with ``long_url`` and ``user_id``.

        Returns:
            str: The short code (without the base URL).

        Raises:
            EncodingError: If the code cannot be encoded.
            StoreUnavailableError: If Redis rejects the write.
        """
        start_time = time.perf_counter()

        try:
            short_code = generate_short_code(
                payload.long_url,
                payload.user_id,
                length=self._settings.SHORT_CODE_LENGTH,
            )
            await self._store.put(short_code, payload.long_url, payload.user_id)
        except Exception as exc:
            URL_CREATION_DURATION.observe(time.perf_counter() - start_time)
            URL_CREATION_REQUESTS_TOTAL.labels(status=_status_for(exc)).inc()
            self._logger.error(f"URL creation error for {payload.long_url}: {exc}")
            raise

        duration = time.perf_counter() - start_time
        URL_CREATION_DURATION.observe(duration)
        URL_CREATION_REQUESTS_TOTAL.labels(status=RequestStatus.SUCCESS).inc()
        self._logger.info(f"URL created successfully: {short_code} in {duration:.3f}s")
        return short_code

    async def resolve(self, short_code: str) -> str:
        """Return the long URL behind ``short_code``.

        Raises:
            NotFoundError: If the code is unknown or expired.
            StoreUnavailableError: If Redis cannot be read.
        """
        start_time = time.perf_counter()

        try:
            long_url = await self._store.get(short_code)
        except NotFoundError:
            URL_LOOKUP_DURATION.observe(time.perf_counter() - start_time)
            URL_LOOKUP_REQUESTS_TOTAL.labels(status=RequestStatus.NOT_FOUND).inc()
            self._logger.debug(f"No mapping for code: {short_code}")
            raise
        except Exception as exc:
            URL_LOOKUP_DURATION.observe(time.perf_counter() - start_time)
            URL_LOOKUP_REQUESTS_TOTAL.labels(status=_status_for(exc)).inc()
            self._logger.error(f"URL lookup error for {short_code}: {exc}")
            raise

        URL_LOOKUP_DURATION.observe(time.perf_counter() - start_time)
        URL_LOOKUP_REQUESTS_TOTAL.labels(status=RequestStatus.SUCCESS).inc()
        return long_url
