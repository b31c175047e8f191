# src/verify/scanner.py — v1
"""Manifest discovery — one explicit file, or every manifest under a directory."""

from __future__ import annotations

import logging
from pathlib import Path

from confvault.core.errors import DiscoveryError
from confvault.manifest.digest import DEFAULT_ALGORITHM, manifest_suffix

logger = logging.getLogger(__name__)


class ManifestScanner:
    """Find manifest files named ``*.<algorithm>``."""

    def __init__(self, algorithm: str = DEFAULT_ALGORITHM) -> None:
        self._suffix = manifest_suffix(algorithm)

    @property
    def suffix(self) -> str:
        return self._suffix

    def discover(self, target: Path, recursive: bool = False) -> list[Path]:
        """Return the manifests to verify.

        Args:
            target: A manifest file (returned as-is, whatever its name) or a
                directory to search.
            recursive: Search subdirectories too.

        Raises:
            DiscoveryError: If ``target`` does not exist or a directory
                search finds no manifest.
        """
        target = Path(target)
        if target.is_file():
            return [target]
        if not target.is_dir():
            raise DiscoveryError(f"No such file or directory: {target}")

        pattern_fn = target.rglob if recursive else target.glob
        manifests = sorted(
            p for p in pattern_fn(f"*{self._suffix}")
            if p.is_file()
        )

        logger.info(
            "Scanned %s: found %d manifest(s) (recursive=%s)",
            target, len(manifests), recursive,
        )
        if not manifests:
            raise DiscoveryError(
                f"No *{self._suffix} manifest files found under {target}"
                + (" (recursive)" if recursive else "")
            )
        return manifests
