"""Tests for key derivation and the AES-256-CBC dataset codec."""
import base64
import os

import pytest

from src.annotation.crypto import IV_LENGTH, decrypt_payload, encrypt_payload
from src.annotation.errors import DecryptionError, KeyLengthError, PayloadTooShortError
from src.annotation.keys import DEFAULT_KEY, derive_key


class TestDeriveKey:
    """Secret → 32-byte key resolution."""

    def test_bytes_are_returned_unchanged(self):
        raw = os.urandom(32)
        assert derive_key(raw) == raw

    def test_bytes_of_wrong_length_are_rejected(self):
        with pytest.raises(KeyLengthError):
            derive_key(b"short")

    def test_utf8_string_of_32_bytes(self):
        secret = "abcdefghijklmnopqrstuvwxyz012345"
        assert derive_key(secret) == secret.encode("utf-8")

    def test_surrounding_whitespace_is_ignored(self):
        secret = "abcdefghijklmnopqrstuvwxyz012345"
        assert derive_key(f"  {secret}\n") == secret.encode("utf-8")

    def test_base64_string(self):
        raw = bytes(range(32))
        assert derive_key(base64.b64encode(raw).decode()) == raw

    def test_base64url_without_padding(self):
        # 0xfb / 0xff bytes force '-' and '_' in the url-safe alphabet
        raw = bytes([0xFB, 0xFF] * 16)
        encoded = base64.urlsafe_b64encode(raw).decode().rstrip("=")
        assert "-" in encoded or "_" in encoded
        assert derive_key(encoded) == raw

    def test_base64_of_wrong_length_is_rejected(self):
        with pytest.raises(KeyLengthError):
            derive_key(base64.b64encode(os.urandom(16)).decode())

    def test_garbage_string_is_rejected(self):
        with pytest.raises(KeyLengthError):
            derive_key("not a key!")

    @pytest.mark.parametrize("secret", [None, "", "   "])
    def test_missing_secret_falls_back_to_development_key(self, secret):
        assert derive_key(secret) == DEFAULT_KEY
        assert len(DEFAULT_KEY) == 32


class TestDatasetCodec:
    """IV-prefixed AES-256-CBC round trips and failure modes."""

    def test_round_trip(self, key):
        plaintext = '{"boundaries": []}'.encode("utf-8")
        payload = encrypt_payload(plaintext, key)
        assert len(payload) > IV_LENGTH
        assert decrypt_payload(payload, key) == plaintext

    def test_fixed_iv_is_prepended(self, key):
        iv = bytes(range(16))
        payload = encrypt_payload(b"hello", key, iv=iv)
        assert payload[:IV_LENGTH] == iv
        assert decrypt_payload(payload, key) == b"hello"

    def test_random_iv_differs_between_calls(self, key):
        assert encrypt_payload(b"same", key) != encrypt_payload(b"same", key)

    @pytest.mark.parametrize("length", [0, 1, 16])
    def test_payload_too_short(self, key, length):
        with pytest.raises(PayloadTooShortError):
            decrypt_payload(b"\0" * length, key)

    def test_tampered_padding_raises_decryption_error(self, key):
        # 64 bytes of plaintext end in a full block of 0x10 padding; flipping
        # a bit in the previous ciphertext block turns the last pad byte into 0x11
        payload = bytearray(encrypt_payload(b"x" * 64, key, iv=bytes(16)))
        payload[-17] ^= 0x01
        with pytest.raises(DecryptionError) as excinfo:
            decrypt_payload(bytes(payload), key)
        assert "key" in str(excinfo.value)
        assert isinstance(excinfo.value.__cause__, ValueError)

    def test_truncated_ciphertext_raises_decryption_error(self, key):
        payload = encrypt_payload(b"y" * 64, key)
        with pytest.raises(DecryptionError):
            decrypt_payload(payload[:-5], key)
