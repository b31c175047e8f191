# src/storage/local_destination.py — v1
"""Filesystem destination: local directory or UNC network share."""

from __future__ import annotations

import logging
import os
import shutil
from pathlib import Path

from confvault.host.probes import is_remote_path, unc_share_root
from confvault.storage.base_destination import BaseDestination

logger = logging.getLogger(__name__)


class LocalDestination(BaseDestination):
    """Copy files into a directory reachable through the filesystem."""

    def __init__(self, root: str) -> None:
        self._raw = root
        self._root = Path(root).expanduser()

    @property
    def location(self) -> str:
        return self._raw

    @property
    def is_remote(self) -> bool:
        return is_remote_path(self._raw)

    def is_reachable(self) -> bool:
        """A local directory is always reachable (it can be created).

        A network path is reachable when its share root exists.
        """
        if not self.is_remote:
            return True
        share = unc_share_root(self._raw)
        probe = share if share is not None else self._raw
        return os.path.exists(probe)

    def ensure_directory(self) -> None:
        self._root.mkdir(parents=True, exist_ok=True)

    def upload(self, local_path: Path, name: str) -> str:
        target = self._root / name
        shutil.copy2(str(local_path), str(target))
        logger.debug("Copied %s -> %s", local_path, target)
        return str(target)

    def exists(self, name: str) -> bool:
        return (self._root / name).exists()
