# src/manifest/digest.py — v1
"""File digests for checksum manifests."""

from __future__ import annotations

import hashlib
from pathlib import Path
from typing import Any

SUPPORTED_ALGORITHMS: tuple[str, ...] = ("md5", "sha1", "sha256", "sha384", "sha512")
DEFAULT_ALGORITHM = "sha256"

_CHUNK_SIZE = 1024 * 1024


def new_hasher(algorithm: str) -> Any:
    """Return a fresh hash object, rejecting algorithms outside the fixed set."""
    name = algorithm.lower()
    if name not in SUPPORTED_ALGORITHMS:
        raise ValueError(
            f"Unsupported checksum algorithm: {algorithm!r}. "
            f"Choose one of {', '.join(SUPPORTED_ALGORITHMS)}."
        )
    return hashlib.new(name)


def file_digest(path: Path, algorithm: str = DEFAULT_ALGORITHM) -> str:
    """Hash a file in 1 MiB chunks and return the upper-case hex digest.

    Raises:
        OSError: If the file cannot be opened or read.
    """
    h = new_hasher(algorithm)
    with Path(path).open("rb") as f:
        for chunk in iter(lambda: f.read(_CHUNK_SIZE), b""):
            h.update(chunk)
    return h.hexdigest().upper()


def manifest_suffix(algorithm: str) -> str:
    """File suffix naming the algorithm, e.g. ``.sha256``."""
    return f".{algorithm.lower()}"
