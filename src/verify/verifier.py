# src/verify/verifier.py — v1
"""Manifest verifier — recompute digests and classify every entry.

Each entry resolves relative to its manifest's directory and ends up as
exactly one of:

    success   file hashed and the digest matches
    mismatch  file hashed but the digest differs (content fault)
    error     file missing or unreadable (operational fault)

A malformed manifest is reported on its own ManifestReport and does not stop
the remaining manifests.
"""

from __future__ import annotations

import logging
from pathlib import Path, PurePosixPath, PureWindowsPath

from confvault.core.errors import ManifestFormatError
from confvault.core.models import (
    ManifestEntry,
    ManifestReport,
    VerificationReport,
    VerificationResult,
)
from confvault.manifest.digest import DEFAULT_ALGORITHM, file_digest, new_hasher
from confvault.manifest.format import read_manifest
from confvault.verify.scanner import ManifestScanner

logger = logging.getLogger(__name__)


def resolve_entry_path(manifest_path: Path, file_name: str) -> Path | None:
    """Resolve a manifest file name against the manifest's directory.

    Backslash separators are accepted. Returns None for absolute names,
    which manifests never carry.
    """
    normalized = file_name.replace("\\", "/")
    if PurePosixPath(normalized).is_absolute() or PureWindowsPath(file_name).drive:
        return None
    return manifest_path.parent.joinpath(*PurePosixPath(normalized).parts)


def verify_entry(entry: ManifestEntry, manifest_path: Path) -> VerificationResult:
    """Recompute one entry's digest and classify it."""
    resolved = resolve_entry_path(manifest_path, entry.file_name)

    def _error(path: Path, message: str) -> VerificationResult:
        return VerificationResult(
            manifest_path=manifest_path,
            archive_path=path,
            algorithm=entry.algorithm,
            expected_hash=entry.expected_hash,
            actual_hash=None,
            match=False,
            status="error",
            message=message,
        )

    if resolved is None:
        return _error(Path(entry.file_name), f"Absolute path not allowed: {entry.file_name}")
    if not resolved.is_file():
        return _error(resolved, f"File not found: {resolved}")

    try:
        actual = file_digest(resolved, entry.algorithm)
    except OSError as exc:
        return _error(resolved, f"Cannot read {resolved}: {exc}")

    if actual.upper() != entry.expected_hash.upper():
        return VerificationResult(
            manifest_path=manifest_path,
            archive_path=resolved,
            algorithm=entry.algorithm,
            expected_hash=entry.expected_hash,
            actual_hash=actual,
            match=False,
            status="mismatch",
            message="Digest does not match manifest",
        )

    return VerificationResult(
        manifest_path=manifest_path,
        archive_path=resolved,
        algorithm=entry.algorithm,
        expected_hash=entry.expected_hash,
        actual_hash=actual,
        match=True,
        status="success",
        message="OK",
    )


def verify_manifest(manifest_path: Path, algorithm: str = DEFAULT_ALGORITHM) -> list[VerificationResult]:
    """Parse one manifest and verify all its entries.

    Raises:
        ManifestFormatError: If any line of the manifest is malformed.
        UnicodeDecodeError: If the manifest is not UTF-8 text.
        OSError: If the manifest itself cannot be read.
    """
    entries = read_manifest(manifest_path, algorithm)
    results = [verify_entry(entry, manifest_path) for entry in entries]
    for r in results:
        log = logger.info if r.status == "success" else logger.warning
        log("%s: %s (%s)", r.status.upper(), r.archive_path, r.message)
    return results


class ManifestVerifier:
    """Verify every manifest found at a file or directory target."""

    def __init__(self, algorithm: str = DEFAULT_ALGORITHM) -> None:
        new_hasher(algorithm)  # rejects unsupported algorithms up front
        self._algorithm = algorithm.lower()
        self._scanner = ManifestScanner(algorithm)

    def verify_paths(self, target: Path, recursive: bool = False) -> VerificationReport:
        """Discover manifests under ``target`` and verify each one.

        Raises:
            DiscoveryError: If no manifest is found.
        """
        manifests = self._scanner.discover(target, recursive=recursive)
        report = VerificationReport(algorithm=self._algorithm)
        for manifest_path in manifests:
            report.manifests.append(self.verify_one(manifest_path))
        return report

    def verify_one(self, manifest_path: Path) -> ManifestReport:
        """Verify one manifest, capturing parse and read faults on the report."""
        try:
            results = verify_manifest(manifest_path, self._algorithm)
        except ManifestFormatError as exc:
            logger.error("%s", exc)
            return ManifestReport(manifest_path=manifest_path, parse_error=str(exc))
        except UnicodeDecodeError as exc:
            logger.error("Manifest %s is not valid UTF-8: %s", manifest_path, exc)
            return ManifestReport(
                manifest_path=manifest_path,
                parse_error=f"Manifest is not valid UTF-8: {exc}",
            )
        except OSError as exc:
            logger.error("Cannot read manifest %s: %s", manifest_path, exc)
            return ManifestReport(
                manifest_path=manifest_path,
                parse_error=f"Cannot read manifest: {exc}",
            )
        return ManifestReport(manifest_path=manifest_path, results=results)
