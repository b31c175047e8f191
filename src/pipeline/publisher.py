# src/pipeline/publisher.py — v1
"""Remote publisher: copy archive and manifest to the destination.

The local archive is deleted only after both copies have succeeded, so a
failed transfer always leaves a recoverable copy on this host.
"""

from __future__ import annotations

import logging
from pathlib import Path

from confvault.core.errors import TransferError
from confvault.storage.base_destination import BaseDestination

logger = logging.getLogger(__name__)


class RemotePublisher:
    """Publish one archive and its manifest to a destination."""

    def __init__(self, destination: BaseDestination) -> None:
        self._destination = destination

    @property
    def destination(self) -> BaseDestination:
        return self._destination

    def publish(self, archive_path: Path, manifest_path: Path) -> list[str]:
        """Copy both files, confirm they landed, then remove the local archive.

        Returns:
            Remote locations of the archive and the manifest.

        Raises:
            TransferError: If the destination cannot be prepared, either
                copy fails, or a copy is not found afterwards. The local
                archive is left in place.
        """
        dest = self._destination
        try:
            dest.ensure_directory()
        except Exception as exc:
            raise TransferError(f"Cannot prepare destination {dest.location}: {exc}") from exc

        locations: list[str] = []
        for path in (archive_path, manifest_path):
            try:
                locations.append(dest.upload(path, path.name))
            except Exception as exc:
                raise TransferError(
                    f"Failed to copy {path.name} to {dest.location}: {exc}"
                ) from exc
            if not dest.exists(path.name):
                raise TransferError(
                    f"{path.name} is missing at {dest.location} after upload"
                )
            logger.info("Published %s to %s", path.name, dest.location)

        try:
            archive_path.unlink()
        except OSError as exc:
            logger.warning("Published, but could not remove local archive %s: %s", archive_path, exc)

        return locations
