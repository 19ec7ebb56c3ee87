"""Dependency injection for the URL shortener endpoints.

The mapping store is created once by the application lifespan and kept on
``app.state``; every request reaches it through :func:`get_store`, so tests
can swap it with ``app.dependency_overrides``.
"""

import logging
import time
import uuid
from dataclasses import dataclass, field
from typing import Optional

from fastapi import Depends, Request

from shortener.config import Settings, get_settings
from shortener.store import MappingStore
from shortener.url_service import URLShorteningService

LOGGER_NAME = "urlshortener"


def setup_logger(settings: Settings) -> logging.Logger:
    """Setup the application logger once."""
    logger = logging.getLogger(LOGGER_NAME)
    if not logger.handlers:
        handler = logging.StreamHandler()
        formatter = logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")
        handler.setFormatter(formatter)
        logger.addHandler(handler)
    logger.setLevel(settings.LOG_LEVEL.upper())
    return logger


# ============================================================================
# REQUEST CONTEXT
# ============================================================================


@dataclass
class RequestContext:
    """Per-request view over the shared resources.

    Attributes:
        store: Shared mapping store
        settings: Application settings
        request_id: Unique identifier for this request
        user_agent: Client user agent string
        client_ip: Client IP address
        start_time: Request start timestamp
        tags: Request tags for categorization
    """

    store: MappingStore
    settings: Settings
    request_id: str = field(default_factory=lambda: str(uuid.uuid4()))
    user_agent: Optional[str] = None
    client_ip: Optional[str] = None
    start_time: float = field(default_factory=lambda: time.time())
    tags: list[str] = field(default_factory=list)

    @property
    def logger(self) -> logging.LoggerAdapter:
        """Get the shared logger with request context."""
        return logging.LoggerAdapter(
            logging.getLogger(LOGGER_NAME),
            {
                "request_id": self.request_id,
                "client_ip": self.client_ip,
                "user_agent": self.user_agent,
                "tags": ",".join(self.tags),
            },
        )

    def add_tag(self, tag: str) -> None:
        if tag not in self.tags:
            self.tags.append(tag)

    def get_duration(self) -> float:
        """Get request duration in milliseconds."""
        return (time.time() - self.start_time) * 1000


# ============================================================================
# DEPENDENCY FUNCTIONS
# ============================================================================


def get_store(request: Request) -> MappingStore:
    """Return the mapping store opened by the application lifespan."""
    return request.app.state.store


def get_request_context(
    request: Request,
    store: MappingStore = Depends(get_store),
    settings: Settings = Depends(get_settings),
) -> RequestContext:
    """Build the request context from the shared store and client info.

    Args:
        request: FastAPI Request object for extracting client info
        store: Shared mapping store
        settings: Application settings

    Returns:
        RequestContext: Context for the request
    """
    return RequestContext(
        store=store,
        settings=settings,
        request_id=request.headers.get("x-request-id") or str(uuid.uuid4()),
        user_agent=request.headers.get("user-agent"),
        client_ip=request.client.host if request.client else None,
    )


def get_url_service(ctx: RequestContext = Depends(get_request_context)) -> URLShorteningService:
    return URLShorteningService.from_context(ctx)
