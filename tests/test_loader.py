"""Tests for locating, decrypting and validating the annotation dataset."""
import json
from pathlib import Path

import pytest

from src.annotation.errors import (
    DatasetInvalidError,
    DatasetNotFoundError,
    DatasetUnreadableError,
    DecryptionError,
    KeyLengthError,
    PayloadTooShortError,
)
from src.annotation.keys import DEFAULT_KEY
from src.annotation.loader import load_annotation_dataset, read_encrypted_dataset


class TestReadEncryptedDataset:

    def test_first_existing_candidate_wins(self, tmp_path):
        first = tmp_path / "a.enc"
        second = tmp_path / "b.enc"
        first.write_bytes(b"first")
        second.write_bytes(b"second")
        path, data = read_encrypted_dataset([tmp_path / "missing.enc", first, second])
        assert path == first
        assert data == b"first"

    def test_no_candidate_raises_with_paths(self, tmp_path):
        candidates = [tmp_path / "one.enc", tmp_path / "two.enc"]
        with pytest.raises(DatasetNotFoundError) as excinfo:
            read_encrypted_dataset(candidates)
        assert excinfo.value.candidates == candidates
        # no path disclosure in the message itself
        assert str(tmp_path) not in str(excinfo.value)

    def test_directories_are_skipped(self, tmp_path):
        (tmp_path / "dir.enc").mkdir()
        with pytest.raises(DatasetNotFoundError):
            read_encrypted_dataset([tmp_path / "dir.enc"])

    def test_parent_that_is_a_file_is_skipped(self, tmp_path):
        (tmp_path / "input").write_bytes(b"")
        fallback = tmp_path / "fallback.enc"
        fallback.write_bytes(b"payload")
        path, data = read_encrypted_dataset([tmp_path / "input" / "annotation.json.enc", fallback])
        assert path == fallback
        assert data == b"payload"

    def test_unreadable_file_is_reported(self, tmp_path, monkeypatch):
        locked = tmp_path / "locked.enc"
        locked.write_bytes(b"payload")

        def deny(self):
            raise PermissionError(13, "Permission denied", str(self))

        monkeypatch.setattr(Path, "read_bytes", deny)
        with pytest.raises(DatasetUnreadableError) as excinfo:
            read_encrypted_dataset([locked, tmp_path / "other.enc"])
        assert excinfo.value.path == locked
        assert "Permission denied" in str(excinfo.value)
        assert isinstance(excinfo.value.__cause__, PermissionError)


class TestLoadAnnotationDataset:

    def test_loads_and_validates(self, write_encrypted, two_squares_raw, secret):
        path = write_encrypted(two_squares_raw)
        dataset = load_annotation_dataset(secret=secret, candidates=[path])
        assert len(dataset.boundaries) == 2
        first = dataset.boundaries[0]
        assert first.vertices[2].x == 100
        assert first.score == 0.9
        assert first.bbox == (0, 0, 100, 100)

    def test_base64_secret_opens_same_file(self, write_encrypted, two_squares_raw, key):
        import base64

        path = write_encrypted(two_squares_raw)
        encoded = base64.urlsafe_b64encode(key).decode().rstrip("=")
        dataset = load_annotation_dataset(secret=encoded, candidates=[path])
        assert len(dataset.boundaries) == 2

    def test_blank_secret_uses_development_key(self, write_encrypted, two_squares_raw):
        path = write_encrypted(two_squares_raw, key=DEFAULT_KEY)
        dataset = load_annotation_dataset(secret="", candidates=[path])
        assert len(dataset.boundaries) == 2

    def test_missing_file(self, tmp_path, secret):
        with pytest.raises(DatasetNotFoundError):
            load_annotation_dataset(secret=secret, candidates=[tmp_path / "nope.enc"])

    def test_bad_secret(self, write_encrypted, two_squares_raw):
        path = write_encrypted(two_squares_raw)
        with pytest.raises(KeyLengthError):
            load_annotation_dataset(secret="too-short", candidates=[path])

    def test_wrong_key_is_reported_with_path(self, write_encrypted, two_squares_raw):
        path = write_encrypted(two_squares_raw)
        # A wrong key almost always fails unpadding; if the padding happens to
        # be valid the garbage plaintext is rejected as invalid JSON instead.
        with pytest.raises((DecryptionError, DatasetInvalidError)) as excinfo:
            load_annotation_dataset(secret=bytes(32), candidates=[path])
        if isinstance(excinfo.value, DecryptionError):
            assert str(path) in str(excinfo.value)
            assert "ANNOTATION_ENCRYPTION_KEY" in str(excinfo.value)

    def test_truncated_file(self, tmp_path, secret):
        path = tmp_path / "annotation.json.enc"
        path.write_bytes(b"\0" * 16)
        with pytest.raises(PayloadTooShortError) as excinfo:
            load_annotation_dataset(secret=secret, candidates=[path])
        assert str(path) in str(excinfo.value)

    def test_not_json(self, write_encrypted, secret):
        path = write_encrypted(b"this is not json")
        with pytest.raises(DatasetInvalidError):
            load_annotation_dataset(secret=secret, candidates=[path])

    @pytest.mark.parametrize("content", [{}, {"boundaries": {}}, [], {"boundaries": None}])
    def test_missing_boundaries(self, write_encrypted, secret, content):
        path = write_encrypted(content)
        with pytest.raises(DatasetInvalidError):
            load_annotation_dataset(secret=secret, candidates=[path])

    def test_non_finite_coordinates_are_rejected(self, write_encrypted, secret):
        raw = json.dumps(
            {"boundaries": [{"polygon": {"vertices": [{"x": "NaN", "y": 1}]}}]}
        ).encode()
        path = write_encrypted(raw)
        with pytest.raises(DatasetInvalidError):
            load_annotation_dataset(secret=secret, candidates=[path])

    def test_degenerate_polygons_are_kept(self, write_encrypted, secret):
        content = {
            "boundaries": [
                {"polygon": {"vertices": []}},
                {"polygon": {"vertices": [{"x": 1, "y": 1}]}, "score": 0.5},
            ]
        }
        path = write_encrypted(content)
        dataset = load_annotation_dataset(secret=secret, candidates=[path])
        assert len(dataset.boundaries) == 2
        assert dataset.boundaries[1].score == 0.5

    def test_empty_dataset(self, write_encrypted, secret):
        path = write_encrypted({"boundaries": []})
        dataset = load_annotation_dataset(secret=secret, candidates=[path])
        assert dataset.boundaries == []
