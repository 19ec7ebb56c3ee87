"""Settings for the URL shortener, read from the environment or a .env file.

Every knob the service needs lives on one pydantic-settings model: where Redis
is, how long a mapping survives and how short codes and their keys are shaped.

Settings Groups
===============
::
    Server       HOST, PORT, BASE_URL (prefix of every returned short_url)
    Redis        REDIS_ADDR ("host:port"), REDIS_PASSWORD, REDIS_DB,
                 REDIS_SOCKET_TIMEOUT
    Mappings     MAPPING_TTL_SECONDS, MAPPING_KEY_PREFIX, SHORT_CODE_LENGTH
    Logging      LOG_LEVEL

How to Use
===========
::
    from shortener.config import get_settings

    settings = get_settings()
    ttl = settings.MAPPING_TTL_SECONDS

    # override from the shell
    REDIS_ADDR=redis:6379 REDIS_DB=2 MAPPING_TTL_SECONDS=600 url-shortener

Key Behaviours
===============
- REDIS_ADDR is a single "host:port" string; MappingStore.connect splits it,
  falls back to port 6379 when no port is given and refuses a non-numeric
  port. An empty REDIS_PASSWORD means no AUTH.
- MAPPING_TTL_SECONDS defaults to 6 hours and is applied to every write, so a
  repeated create refreshes the expiry.
- Mappings are stored under MAPPING_KEY_PREFIX + short code ("url:jTa4L57P").
- get_settings() is cached; build Settings(...) directly for one-off overrides.
"""

__all__ = ["Settings", "get_settings"]

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    APP_NAME: str = "url-shortener"
    APP_ENV: str = "development"
    VERSION: str = "1.0.0"
    LOG_LEVEL: str = "INFO"

    # Server
    HOST: str = "0.0.0.0"
    PORT: int = 9808
    BASE_URL: str = "http://localhost:9808"

    # Redis
    REDIS_ADDR: str = "localhost:6379"
    REDIS_PASSWORD: str = ""
    REDIS_DB: int = 0
    REDIS_SOCKET_TIMEOUT: float = 5.0

    # Short URL config
    SHORT_CODE_LENGTH: int = 8
    MAPPING_KEY_PREFIX: str = "url:"
    # 6 hours
    MAPPING_TTL_SECONDS: int = 6 * 60 * 60

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=True,
        extra="ignore",
    )


@lru_cache()
def get_settings() -> Settings:
    return Settings()
