# src/core/errors.py — v1
"""Exception hierarchy for backup runs and manifest verification.

Preflight, archive, checksum and transfer errors are fatal to a backup run.
Command errors stay inside a single capture task. Manifest errors are scoped
to one manifest file.
"""

from __future__ import annotations

from pathlib import Path


class ConfVaultError(Exception):
    """Base class for all confvault errors."""


class ConfigurationError(ConfVaultError):
    """Raised when configuration is missing or internally inconsistent."""


# === PREFLIGHT ===


class PreflightError(ConfVaultError):
    """Base class for failures detected before any capture work starts."""


class PrivilegeError(PreflightError, PermissionError):
    """The invoking identity lacks administrative privileges."""


class StagingError(PreflightError, OSError):
    """The backup root or run directory could not be created."""


class ResourceError(PreflightError):
    """Not enough free space on the staging volume."""

    def __init__(self, path: Path, free_bytes: int, required_bytes: int) -> None:
        self.path = path
        self.free_bytes = free_bytes
        self.required_bytes = required_bytes
        super().__init__(
            f"Insufficient free space on {path}: "
            f"{free_bytes / 1024**3:.2f} GiB free, "
            f"{required_bytes / 1024**3:.2f} GiB required"
        )


class UnreachableDestinationError(PreflightError):
    """A remote destination is not reachable right now."""


# === CAPTURE ===


class CommandError(ConfVaultError):
    """A host command exited non-zero or timed out."""

    def __init__(
        self,
        args: list[str],
        returncode: int | None,
        stderr: str = "",
        message: str | None = None,
    ) -> None:
        self.command = list(args)
        self.returncode = returncode
        self.stderr = stderr
        if message is None:
            detail = stderr.strip() or "no error output"
            if returncode is None:
                message = f"Command timed out: {args[0]} ({detail})"
            else:
                message = f"Command failed with exit code {returncode}: {args[0]} ({detail})"
        super().__init__(message)


class CommandNotFoundError(CommandError):
    """The executable for a host command is not available."""

    def __init__(self, args: list[str]) -> None:
        super().__init__(args, None, message=f"Command not found: {args[0]}")


class TaskStateError(ConfVaultError):
    """A capture task was moved out of a terminal state."""


# === ARCHIVE / PUBLISH ===


class ArchiveError(ConfVaultError):
    """Compressing the staging directory failed."""


class ChecksumError(ConfVaultError):
    """Computing or writing the archive checksum failed."""


class TransferError(ConfVaultError):
    """Copying the archive or its manifest to the destination failed."""


# === VERIFY ===


class ManifestFormatError(ConfVaultError):
    """A manifest line does not have the ``HASH [*]NAME`` shape."""

    def __init__(self, raw_line: str, line_number: int, source: Path | None = None) -> None:
        self.raw_line = raw_line
        self.line_number = line_number
        self.source = source
        where = f"{source}:{line_number}" if source is not None else f"line {line_number}"
        super().__init__(f"Malformed manifest line at {where}: {raw_line!r}")


class DiscoveryError(ConfVaultError):
    """No manifest files were found under the requested directory."""
