"""Exception hierarchy for the encrypted annotation dataset."""

from __future__ import annotations

from pathlib import Path
from typing import Sequence


class AnnotationError(Exception):
    """Base class for every failure raised by the annotation core."""


class KeyLengthError(AnnotationError):
    """Raised when the configured secret does not resolve to 32 bytes."""


class PayloadTooShortError(AnnotationError):
    """Raised when the encrypted payload has no room for IV and ciphertext."""


class DecryptionError(AnnotationError):
    """Raised when the ciphertext cannot be decrypted or unpadded."""


class DatasetNotFoundError(AnnotationError):
    """Raised when none of the candidate dataset paths exist."""

    def __init__(self, candidates: Sequence[Path]):
        self.candidates = list(candidates)
        super().__init__(
            "Encrypted annotation file was not found in known locations"
        )


class DatasetInvalidError(AnnotationError):
    """Raised when decrypted content is not a usable annotation dataset."""


class DatasetUnreadableError(AnnotationError):
    """Raised when a candidate dataset path exists but cannot be read."""

    def __init__(self, path: Path, reason: str):
        self.path = path
        super().__init__(f"Encrypted annotation file could not be read ({path}): {reason}")
