"""SHA-256 helpers for bottle verification."""

from __future__ import annotations

import hashlib
from pathlib import Path

_READ_CHUNK = 1024 * 1024


def sha256_hex(data: bytes) -> str:
    """Return the SHA-256 hex digest of raw bytes."""
    return hashlib.sha256(data).hexdigest()


def sha256_file(path: Path) -> str:
    """Return the SHA-256 hex digest of a file, read in chunks."""
    digest = hashlib.sha256()
    with open(path, "rb") as fh:
        for chunk in iter(lambda: fh.read(_READ_CHUNK), b""):
            digest.update(chunk)
    return digest.hexdigest()


def digests_equal(actual: str, expected: str) -> bool:
    """Case-insensitive comparison of two hex digests."""
    return actual.strip().lower() == expected.strip().lower()
