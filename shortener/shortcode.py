"""Deterministic short-code generation.

A short code is derived from the long URL and the id of the user asking for it,
so the same pair always maps to the same code and two users shortening the same
URL get different codes.

Flow Diagram — generate_short_code()
====================================
::
    ┌──────────────────┐
    │ long_url + owner │
    └────────┬─────────┘
             ▼
    ┌──────────────────┐
    │ SHA-256 digest   │
    │ (32 bytes)       │
    └────────┬─────────┘
             ▼
    ┌──────────────────┐
    │ last 8 bytes as  │
    │ unsigned 64-bit  │
    └────────┬─────────┘
             ▼
    ┌──────────────────┐
    │ decimal string → │
    │ base58 (bitcoin) │
    └────────┬─────────┘
             ▼
    ┌──────────────────┐
    │ pad / truncate   │
    │ to 8 characters  │
    └──────────────────┘

How to Use
===========
::
    from shortener.shortcode import generate_short_code

    code = generate_short_code(
        "https://www.eddywm.com/lets-build-a-url-shortener-in-go-with-redis-part-2-storage-layer/",
        "e0dba740-fc4b-4977-872c-d360239e6b1a",
    )
    assert code == "d66yfx7N"

Key Behaviours
===============
- Pure function: no I/O, no randomness, safe to call from any task or thread.
- No uniqueness guarantee. Two different inputs may produce the same code and
  the later write wins in the store.
- Codes shorter than the target length are left-padded with ``"1"``, the zero
  symbol of the alphabet, so every code has the same length.
"""

import hashlib

from shortener.errors import EncodingError

__all__ = ["BASE58_ALPHABET", "SHORT_CODE_LENGTH", "generate_short_code"]

# Bitcoin alphabet: no 0, O, I or l.
BASE58_ALPHABET = "123456789ABCDEFGHJKLMNPQRSTUVWXYZabcdefghijkmnopqrstuvwxyz"
SHORT_CODE_LENGTH = 8


def generate_short_code(long_url: str, owner_id: str, length: int = SHORT_CODE_LENGTH) -> str:
    """Derive the short code for ``long_url`` requested by ``owner_id``.

    Args:
        long_url: URL being shortened, used verbatim.
        owner_id: Identifier of the requesting user, appended after the URL.
        length: Number of characters in the resulting code.

    Returns:
        str: Base58 short code of exactly ``length`` characters.

    Raises:
        EncodingError: If the intermediate value cannot be base58 encoded.

    Example:
        >>> generate_short_code(
        ...     "https://spectrum.ieee.org/automaton/robotics/humanoids/"
        ...     "boston-dynamics-handle-robot-recognizing-objects",
        ...     "e0dba740-fc4b-4977-872c-d360239e6b1a",
        ... )
        'SNCCGr1W'
    """
    digest = _sha256_of(long_url + owner_id)
    number = _trailing_uint64(digest)
    encoded = _base58_encode(str(number))
    return encoded.rjust(length, BASE58_ALPHABET[0])[:length]


def _sha256_of(value: str) -> bytes:
    return hashlib.sha256(value.encode("utf-8")).digest()


def _trailing_uint64(digest: bytes) -> int:
    """Interpret the last 8 bytes of ``digest`` as a big-endian unsigned integer."""
    return int.from_bytes(digest[-8:], "big")


def _base58_encode(decimal: str) -> str:
    """Encode the number written in ``decimal`` as a base58 string.

    Args:
        decimal: Non-negative integer in base-10 ASCII digits, e.g. ``"100"``.

    Returns:
        str: Base58 representation, most significant symbol first.

    Raises:
        EncodingError: If ``decimal`` is empty or holds anything but 0-9.

    Example:
        >>> _base58_encode("57")
        'z'
        >>> _base58_encode("58")
        '21'
    """
    if not decimal or not (decimal.isascii() and decimal.isdigit()):
        raise EncodingError(f"Invalid decimal input for base58 encoding: {decimal!r}")

    number = int(decimal)
    if number == 0:
        return BASE58_ALPHABET[0]

    base = len(BASE58_ALPHABET)
    result = []

    while number > 0:
        number, remainder = divmod(number, base)
        result.append(BASE58_ALPHABET[remainder])

    return "".join(result[::-1])
