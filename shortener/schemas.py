"""Pydantic schemas for request/response validation in the URL shortener.

This module defines Pydantic models for API input validation and output serialization,
ensuring type safety and automatic OpenAPI documentation generation.

Schema Hierarchy
=================
::
    ShortURLCreate (Input)
    ├─ long_url: str (validated URL)
    └─ user_id: str (non-empty)

    ShortURLResponse (Output)
    ├─ message: str
    └─ short_url: str (BASE_URL + "/" + code)

    MessageResponse (Output)
    └─ message: str

    HealthResponse (Output)
    ├─ status: HealthStatus
    └─ cache: HealthStatus

How to Use
===========
**Step 1 — Input validation**::
    @router.post("/create-short-url")
    async def create_short_url(payload: ShortURLCreate):
        # payload is already validated
        ...

**Step 2 — Response serialization**::
    return ShortURLResponse(
        message="short url created successfully",
        short_url=f"{settings.BASE_URL}/{short_code}",
    )

Key Behaviours
===============
- URL validation uses the validators library; single-label hosts such as
  ``localhost:8000`` or ``intranet`` and queries without ``=`` are accepted.
- Both request fields are required; a missing field is a 422.
- FastAPI automatically generates OpenAPI docs from these schemas.
"""

import validators
from pydantic import BaseModel, Field, field_validator

from shortener.enums import HealthStatus

__all__ = [
    "ShortURLCreate",
    "ShortURLResponse",
    "MessageResponse",
    "HealthResponse",
]


class ShortURLCreate(BaseModel):
    long_url: str = Field(..., description="URL to shorten, e.g. 'https://example.com/some/long/path'")
    user_id: str = Field(..., min_length=1, description="Identifier of the requesting user")

    @field_validator("long_url")
    @classmethod
    def validate_long_url(cls, v: str) -> str:
        if not validators.url(v, simple_host=True, strict_query=False):
            raise ValueError("Invalid URL provided")
        return v


class ShortURLResponse(BaseModel):
    message: str
    short_url: str


class MessageResponse(BaseModel):
    message: str


class HealthResponse(BaseModel):
    status: HealthStatus
    cache: HealthStatus
