"""Derivation of the AES-256 key used for the annotation dataset.

The secret comes from ``ANNOTATION_ENCRYPTION_KEY`` and may be given either as
32 raw UTF-8 characters or as base64 / base64url text encoding 32 bytes.
"""

from __future__ import annotations

import base64
import binascii

from .errors import KeyLengthError


KEY_LENGTH = 32

# Development-only fallback. Deployments must override it.
DEFAULT_KEY = b"0123456789abcdef0123456789abcdef"


def derive_key(secret: str | bytes | None = None) -> bytes:
    """Return the 32-byte key for *secret*.

    Raw bytes are only length-checked. A non-empty string is first taken as
    UTF-8; if that is not exactly 32 bytes it is decoded as base64url /
    base64. A missing or blank secret falls back to :data:`DEFAULT_KEY`.

    Raises
    ------
    KeyLengthError
        If no interpretation yields exactly 32 bytes.
    """

    if isinstance(secret, (bytes, bytearray)):
        return _validate(bytes(secret))

    if isinstance(secret, str) and secret.strip():
        return _validate(_parse_key(secret.strip()))

    return _validate(DEFAULT_KEY)


def _validate(key: bytes) -> bytes:
    if len(key) != KEY_LENGTH:
        raise KeyLengthError("ANNOTATION_ENCRYPTION_KEY must be 32 bytes")
    return key


def _parse_key(raw: str) -> bytes:
    utf8 = raw.encode("utf-8")
    if len(utf8) == KEY_LENGTH:
        return utf8

    normalized = raw.replace("-", "+").replace("_", "/")
    padding = "=" * (-len(normalized) % 4)
    try:
        decoded = base64.b64decode(normalized + padding, validate=True)
    except (binascii.Error, ValueError):
        decoded = b""
    if len(decoded) == KEY_LENGTH:
        return decoded

    raise KeyLengthError("ANNOTATION_ENCRYPTION_KEY must resolve to 32 bytes")
