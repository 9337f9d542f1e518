#!/usr/bin/env python3
"""CLI for producing an encrypted annotation dataset.

The output layout is ``IV || AES-256-CBC(PKCS#7)``, the same layout the
gateway decrypts. The plaintext is validated first so a broken file is never
shipped.
"""

from pathlib import Path

from src.annotation.crypto import encrypt_payload
from src.annotation.errors import AnnotationError
from src.annotation.keys import derive_key
from src.annotation.loader import parse_dataset
from src.core.config import settings


def main(source: str, output: str, key: str | None = None) -> int:
    """Encrypt *source* into *output*. Returns a process exit code."""
    plaintext = Path(source).read_bytes()

    try:
        dataset = parse_dataset(plaintext)
        secret = key if key is not None else settings.annotation_encryption_key
        if not secret:
            print("Warning: no key given, using the insecure development key")
        payload = encrypt_payload(plaintext, derive_key(secret))
    except AnnotationError as exc:
        print(f"Error: {exc}")
        return 1

    out = Path(output)
    out.parent.mkdir(parents=True, exist_ok=True)
    out.write_bytes(payload)
    print(f"✓ Wrote {out} ({len(dataset.boundaries)} regions, {len(payload)} bytes)")
    return 0
