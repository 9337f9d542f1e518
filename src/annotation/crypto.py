"""AES-256-CBC codec for the encrypted annotation dataset.

File layout::

    IV (16 bytes) || AES-256-CBC ciphertext (PKCS#7 padded)

The whole payload is handled in memory; datasets are KB to MB in size.
"""

from __future__ import annotations

import os

from cryptography.hazmat.primitives import padding
from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes

from .errors import DecryptionError, PayloadTooShortError
from .keys import KEY_LENGTH

IV_LENGTH = 16
_BLOCK_BITS = algorithms.AES.block_size


def decrypt_payload(payload: bytes, key: bytes) -> bytes:
    """Strip the leading IV from *payload* and return the decrypted plaintext."""

    if len(payload) <= IV_LENGTH:
        raise PayloadTooShortError("Encrypted annotation payload is too short")
    if len(key) != KEY_LENGTH:
        raise DecryptionError(f"Decryption key must be {KEY_LENGTH} bytes")

    iv, ciphertext = payload[:IV_LENGTH], payload[IV_LENGTH:]
    decryptor = Cipher(algorithms.AES(key), modes.CBC(iv)).decryptor()
    unpadder = padding.PKCS7(_BLOCK_BITS).unpadder()
    try:
        padded = decryptor.update(ciphertext) + decryptor.finalize()
        return unpadder.update(padded) + unpadder.finalize()
    except ValueError as exc:
        raise DecryptionError(
            f"bad decrypt ({exc}); check that the key matches the one used "
            "when the dataset was encrypted"
        ) from exc


def encrypt_payload(plaintext: bytes, key: bytes, iv: bytes | None = None) -> bytes:
    """Return ``IV || ciphertext`` for *plaintext*.

    A random IV is generated unless one is supplied (tests pin it).
    """

    if len(key) != KEY_LENGTH:
        raise ValueError(f"Encryption key must be {KEY_LENGTH} bytes")
    if iv is None:
        iv = os.urandom(IV_LENGTH)
    elif len(iv) != IV_LENGTH:
        raise ValueError(f"IV must be {IV_LENGTH} bytes")

    padder = padding.PKCS7(_BLOCK_BITS).padder()
    padded = padder.update(plaintext) + padder.finalize()
    encryptor = Cipher(algorithms.AES(key), modes.CBC(iv)).encryptor()
    return iv + encryptor.update(padded) + encryptor.finalize()
