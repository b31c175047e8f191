# src/host/probes.py — v1
"""Host environment probes used by preflight: identity, privileges, disk, paths."""

from __future__ import annotations

import logging
import os
import shutil
import socket
from pathlib import Path

logger = logging.getLogger(__name__)


def host_name() -> str:
    """Short host name (first DNS label)."""
    return socket.gethostname().split(".")[0] or "localhost"


def is_elevated() -> bool:
    """True when running as root (POSIX) or as an administrator (Windows)."""
    if os.name == "nt":
        import ctypes

        try:
            return bool(ctypes.windll.shell32.IsUserAnAdmin())  # type: ignore[attr-defined]
        except (AttributeError, OSError) as exc:
            logger.warning("Could not determine administrator status: %s", exc)
            return False
    return os.geteuid() == 0


def free_bytes(path: Path) -> int:
    """Free space on the volume holding ``path`` (or its nearest existing parent)."""
    probe = Path(path).absolute()
    while not probe.exists() and probe != probe.parent:
        probe = probe.parent
    return shutil.disk_usage(probe).free


def is_remote_path(location: str) -> bool:
    """True for UNC paths (``\\\\host\\share``, ``//host/share``) and ``s3://`` URIs."""
    return (
        location.startswith("\\\\")
        or location.startswith("//")
        or location.lower().startswith("s3://")
    )


def unc_share_root(location: str) -> str | None:
    """Return ``\\\\host\\share`` for a UNC path, or None for anything else."""
    if not (location.startswith("\\\\") or location.startswith("//")):
        return None
    parts = [p for p in location.replace("/", "\\").split("\\") if p]
    if len(parts) < 2:
        return None
    return "\\\\" + parts[0] + "\\" + parts[1]
