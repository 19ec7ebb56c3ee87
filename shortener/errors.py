"""Exception types raised by the short-code generator and the mapping store.

Every error derives from :class:`ShortenerError` so the application layer can
map the whole family to HTTP responses in one place.
"""

__all__ = ["ShortenerError", "StoreUnavailableError", "EncodingError", "NotFoundError"]


class ShortenerError(Exception):
    """Base class for URL shortener errors."""


class StoreUnavailableError(ShortenerError):
    """Raised when Redis cannot be reached or a command against it fails."""


class EncodingError(ShortenerError, ValueError):
    """Raised when a value cannot be rendered as a base58 short code."""


class NotFoundError(ShortenerError):
    """Raised when a short code does not exist or its mapping has expired."""

    def __init__(self, short_code: str):
        super().__init__(f"Short code '{short_code}' not found")
        self.short_code = short_code
