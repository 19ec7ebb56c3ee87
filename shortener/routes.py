"""FastAPI route definitions for the URL shortener REST API.

API Endpoint Overview
=====================
::
    GET  /
        └─ MessageResponse (200)

    GET  /health
        └─ HealthResponse (200)

    POST /create-short-url
        ├─ ShortURLCreate (request body)
        └─ ShortURLResponse (200) or 422/500/503

    GET  /:short_code
        └─ 302 Redirect or 404/503

How to Use
===========
**Step 1 — Include router**::
    from shortener.routes import router
    app.include_router(router)

**Step 2 — Call the endpoints**::
    curl -X POST http://localhost:9808/create-short-url \
         -H "Content-Type: application/json" \
         -d '{"long_url": "https://example.com", "user_id": "e0dba740-fc4b-4977-872c-d360239e6b1a"}'

    curl -i http://localhost:9808/<short_code>

Key Behaviours
===============
- The redirect route is registered last so it never shadows /health.
- Store and encoding failures propagate to the exception handlers in
  shortener.main and become 503/500 responses.
- 302 redirects, matching a plain "Found" for browsers and curl.
"""

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import RedirectResponse

from shortener.dependencies import RequestContext, get_request_context, get_url_service
from shortener.enums import HealthStatus
from shortener.errors import NotFoundError
from shortener.schemas import HealthResponse, MessageResponse, ShortURLCreate, ShortURLResponse
from shortener.url_service import URLShorteningService

__all__ = ["router"]

router = APIRouter()


@router.get("/", response_model=MessageResponse, tags=["health"])
async def index() -> MessageResponse:
    return MessageResponse(message="Welcome to the URL shortener API")


@router.get("/health", response_model=HealthResponse, tags=["health"])
async def health_check(ctx: RequestContext = Depends(get_request_context)) -> HealthResponse:
    cache_status = HealthStatus.HEALTHY if await ctx.store.ping() else HealthStatus.UNHEALTHY
    if cache_status is HealthStatus.UNHEALTHY:
        ctx.logger.error("Cache health check failed")

    return HealthResponse(status=cache_status, cache=cache_status)


@router.post("/create-short-url", response_model=ShortURLResponse, tags=["urls"])
async def create_short_url(
    payload: ShortURLCreate,
    ctx: RequestContext = Depends(get_request_context),
    service: URLShorteningService = Depends(get_url_service),
) -> ShortURLResponse:
    ctx.add_tag("url_creation")
    ctx.logger.info(
        f"URL shortening requested: {payload.long_url}",
        extra={"operation": "create_short_url", "target_url": payload.long_url, "user_id": payload.user_id},
    )

    short_code = await service.create_short_url(payload)

    return ShortURLResponse(
        message="short url created successfully",
        short_url=f"{ctx.settings.BASE_URL.rstrip('/')}/{short_code}",
    )


@router.get("/{short_code}", tags=["redirect"])
async def redirect_to_url(
    short_code: str,
    ctx: RequestContext = Depends(get_request_context),
    service: URLShorteningService = Depends(get_url_service),
) -> RedirectResponse:
    ctx.add_tag("redirect")

    try:
        long_url = await service.resolve(short_code)
    except NotFoundError as exc:
        ctx.logger.warning(
            f"Redirect failed - short code not found: {short_code}",
            extra={"operation": "redirect", "short_code": short_code, "duration_ms": ctx.get_duration()},
        )
        raise HTTPException(status_code=404, detail="Short URL not found") from exc

    ctx.logger.info(
        f"Redirect successful: {short_code} -> {long_url}",
        extra={"operation": "redirect", "short_code": short_code, "duration_ms": ctx.get_duration()},
    )
    return RedirectResponse(url=long_url, status_code=302)
