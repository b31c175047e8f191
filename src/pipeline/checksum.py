# src/pipeline/checksum.py — v1
"""Checksum generator: one-line manifest for the run archive."""

from __future__ import annotations

import logging
from pathlib import Path

from confvault.core.errors import ChecksumError
from confvault.manifest.digest import file_digest
from confvault.manifest.format import format_entry
from confvault.storage import layout

logger = logging.getLogger(__name__)


def write_checksum(
    archive_path: Path,
    algorithm: str,
    manifest_dir: Path,
) -> tuple[Path, str]:
    """Hash the archive and write ``<HASH> *<archive name>`` next to the run.

    Args:
        archive_path: Archive to hash.
        algorithm: Digest algorithm (e.g. "sha256").
        manifest_dir: Directory for the manifest file, normally the staging
            directory so a copy stays with the run.

    Returns:
        Tuple of (manifest_path, upper-case hex digest).

    Raises:
        ChecksumError: If the archive cannot be hashed or the manifest
            cannot be written.
    """
    try:
        digest = file_digest(archive_path, algorithm)
    except (OSError, ValueError) as exc:
        raise ChecksumError(f"Cannot hash {archive_path}: {exc}") from exc

    manifest_path = layout.checksum_path(manifest_dir, archive_path.name, algorithm)
    try:
        manifest_path.write_text(
            format_entry(digest, archive_path.name) + "\n", encoding="utf-8"
        )
    except OSError as exc:
        raise ChecksumError(f"Cannot write manifest {manifest_path}: {exc}") from exc

    logger.info("%s %s: %s", algorithm.upper(), archive_path.name, digest)
    return manifest_path, digest
