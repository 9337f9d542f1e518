"""Locate, decrypt and parse the encrypted annotation dataset.

Nothing is cached: every call re-reads and re-decrypts the file so that a
re-encrypted dataset is picked up without a restart. The disabled-region
state lives elsewhere and is joined with the dataset at render time.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Iterable

from pydantic import ValidationError

from src.core.config import settings

from .crypto import decrypt_payload
from .errors import (
    DatasetInvalidError,
    DatasetNotFoundError,
    DatasetUnreadableError,
    DecryptionError,
    PayloadTooShortError,
)
from .keys import derive_key
from .models import AnnotationDataset

logger = logging.getLogger(__name__)


def read_encrypted_dataset(candidates: Iterable[Path]) -> tuple[Path, bytes]:
    """Return ``(path, bytes)`` of the first candidate file that exists."""

    tried: list[Path] = []
    for candidate in candidates:
        path = Path(candidate)
        tried.append(path)
        try:
            data = path.read_bytes()
        except (FileNotFoundError, IsADirectoryError, NotADirectoryError):
            continue
        except OSError as exc:
            raise DatasetUnreadableError(path, exc.strerror or str(exc)) from exc
        logger.info("Loaded encrypted annotation dataset from %s", path)
        return path, data

    raise DatasetNotFoundError(tried)


def parse_dataset(plaintext: bytes) -> AnnotationDataset:
    """Decode UTF-8 JSON into a validated :class:`AnnotationDataset`."""

    try:
        raw = json.loads(plaintext.decode("utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError) as exc:
        raise DatasetInvalidError(f"Decrypted dataset is not valid JSON: {exc}") from exc

    if not isinstance(raw, dict) or not isinstance(raw.get("boundaries"), list):
        raise DatasetInvalidError("Annotation dataset is missing boundaries")

    try:
        return AnnotationDataset.model_validate(raw)
    except ValidationError as exc:
        raise DatasetInvalidError(
            f"Annotation dataset failed validation ({exc.error_count()} errors)"
        ) from exc


def load_annotation_dataset(
    secret: str | bytes | None = None,
    candidates: Iterable[Path] | None = None,
) -> AnnotationDataset:
    """Load the dataset using *secret* and *candidates*, defaulting to settings.

    Raises
    ------
    DatasetNotFoundError, KeyLengthError, PayloadTooShortError,
    DecryptionError, DatasetInvalidError
    """

    if candidates is None:
        candidates = settings.candidate_dataset_paths
    if secret is None:
        secret = settings.annotation_encryption_key
        if not secret:
            logger.warning(
                "ANNOTATION_ENCRYPTION_KEY is not set; using the insecure development key"
            )

    source, encrypted = read_encrypted_dataset(candidates)
    key = derive_key(secret)

    try:
        plaintext = decrypt_payload(encrypted, key)
    except (DecryptionError, PayloadTooShortError) as exc:
        raise type(exc)(
            f"Failed to decrypt annotation dataset ({source}): {exc}. "
            "Confirm ANNOTATION_ENCRYPTION_KEY matches the 32-byte key used at "
            "encryption time."
        ) from exc

    dataset = parse_dataset(plaintext)
    logger.debug("Annotation dataset has %d boundaries", len(dataset.boundaries))
    return dataset
