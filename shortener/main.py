"""FastAPI application entry point for the URL shortener service.

Application Lifecycle Diagram
===========================
::
    ┌─────────────┐
    │  uvicorn    │
    │  startup    │
    └──────┬──────┘
           ▼
    ┌─────────────┐
    │ lifespan()  │
    │ startup:    │
    │ setup logger│
    │ connect +   │
    │ PING Redis  │──── fails ───► startup aborted
    └──────┬──────┘
           ▼
    ┌─────────────┐
    │ Serve HTTP  │
    │ requests    │
    └──────┬──────┘
           ▼
    ┌─────────────┐
    │ lifespan()  │
    │ shutdown:   │
    │ close store │
    └─────────────┘

How to Use
===========
**Step 1 — Run with uvicorn**::
    uvicorn shortener.main:app --host 0.0.0.0 --port 9808

    # or, using HOST/PORT from the environment
    url-shortener

**Step 2 — Access interactive docs**::
    http://localhost:9808/docs

Key Behaviours
===============
- Redis is connected and health-checked before the first request is served;
  an unreachable Redis prevents the process from starting.
- Shortener errors raised while handling a request become JSON error
  responses (500/503) instead of crashing the worker.
- The redirect route answers an unknown or expired code with a 404.
- Prometheus metrics are exposed on /metrics.
"""

__all__ = ["app", "run"]

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from prometheus_fastapi_instrumentator import Instrumentator

from shortener.config import get_settings
from shortener.dependencies import setup_logger
from shortener.errors import EncodingError, StoreUnavailableError
from shortener.routes import router
from shortener.store import MappingStore

settings = get_settings()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    logger = setup_logger(settings)
    # Startup
    app.state.store = await MappingStore.connect(settings)
    logger.info(f"{settings.APP_NAME} started in {settings.APP_ENV} mode")
    yield
    # Shutdown
    await app.state.store.close()


app = FastAPI(
    title=settings.APP_NAME,
    version=settings.VERSION,
    description="Shortens long URLs into 8-character codes and redirects them back",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(StoreUnavailableError)
async def store_unavailable_handler(request: Request, exc: StoreUnavailableError) -> JSONResponse:
    return JSONResponse(status_code=503, content={"detail": "URL store is unavailable"})


@app.exception_handler(EncodingError)
async def encoding_error_handler(request: Request, exc: EncodingError) -> JSONResponse:
    return JSONResponse(status_code=500, content={"detail": "Failed to generate short code"})


Instrumentator(
    should_group_status_codes=True,
    should_ignore_untemplated=False,
    should_respect_env_var=False,
).instrument(app).expose(app)

app.include_router(router)


def run() -> None:
    uvicorn.run(app, host=settings.HOST, port=settings.PORT)


if __name__ == "__main__":
    run()
