# src/pipeline/archiver.py — v1
"""Compress a run's staging directory into a single zip archive."""

from __future__ import annotations

import logging
import zipfile
from datetime import datetime
from pathlib import Path

from confvault.core.errors import ArchiveError
from confvault.core.models import ArchiveInfo

logger = logging.getLogger(__name__)

COMPRESS_LEVEL = 6


def create_archive(staging_dir: Path, archive_path: Path) -> ArchiveInfo:
    """Zip ``staging_dir`` (entries rooted at its own name) into ``archive_path``.

    An existing file at ``archive_path`` is overwritten. On any failure the
    partial archive is removed.

    Raises:
        ArchiveError: If the staging directory is missing, the archive would
            land inside it, or compression fails.
    """
    staging_dir = Path(staging_dir)
    archive_path = Path(archive_path)

    if not staging_dir.is_dir():
        raise ArchiveError(f"Staging directory does not exist: {staging_dir}")
    if archive_path.resolve().is_relative_to(staging_dir.resolve()):
        raise ArchiveError(f"Archive {archive_path} must not be inside {staging_dir}")

    base = staging_dir.parent
    try:
        archive_path.parent.mkdir(parents=True, exist_ok=True)
        archive_path.unlink(missing_ok=True)
        with zipfile.ZipFile(
            archive_path, "w", compression=zipfile.ZIP_DEFLATED, compresslevel=COMPRESS_LEVEL
        ) as zf:
            for path in sorted(staging_dir.rglob("*")):
                arcname = path.relative_to(base).as_posix()
                if path.is_dir():
                    if not any(path.iterdir()):
                        zf.write(path, arcname)
                    continue
                zf.write(path, arcname)
    except (OSError, ValueError, zipfile.LargeZipFile) as exc:
        archive_path.unlink(missing_ok=True)
        raise ArchiveError(f"Failed to compress {staging_dir}: {exc}") from exc

    info = ArchiveInfo(
        path=archive_path,
        size_bytes=archive_path.stat().st_size,
        created_at=datetime.now().astimezone(),
    )
    logger.info("Archive written: %s (%d bytes)", info.path, info.size_bytes)
    return info
