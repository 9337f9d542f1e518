"""Shared fixtures: plaintext datasets and their encrypted files."""
import json
from pathlib import Path

import pytest

from src.annotation.crypto import encrypt_payload
from src.annotation.models import AnnotationDataset

TEST_SECRET = "test-secret-key-of-32-characters"  # 32 ASCII bytes
TEST_KEY = TEST_SECRET.encode("utf-8")


def square(x0, y0, size):
    return {
        "polygon": {
            "vertices": [
                {"x": x0, "y": y0},
                {"x": x0 + size, "y": y0},
                {"x": x0 + size, "y": y0 + size},
                {"x": x0, "y": y0 + size},
            ]
        },
        "bbox": [x0, y0, x0 + size, y0 + size],
        "score": 0.9,
        "iou": 0.8,
    }


@pytest.fixture
def two_squares_raw():
    """Two disjoint 100px squares: region-1 at the origin, region-2 at (200, 200)."""
    return {"boundaries": [square(0, 0, 100), square(200, 200, 100)]}


@pytest.fixture
def two_squares(two_squares_raw):
    return AnnotationDataset.model_validate(two_squares_raw)


@pytest.fixture
def write_encrypted(tmp_path):
    """Return a helper that encrypts a dataset dict (or raw bytes) into tmp_path."""

    def _write(content, key=TEST_KEY, name="annotation.json.enc") -> Path:
        if isinstance(content, bytes):
            plaintext = content
        else:
            plaintext = json.dumps(content, ensure_ascii=False).encode("utf-8")
        path = tmp_path / name
        path.write_bytes(encrypt_payload(plaintext, key))
        return path

    return _write


@pytest.fixture
def secret():
    return TEST_SECRET


@pytest.fixture
def key():
    return TEST_KEY
