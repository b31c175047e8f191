# src/storage/base_destination.py — v1
"""Abstract publish destination interface."""

from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path


class BaseDestination(ABC):
    """Durable location that receives the archive and its manifest."""

    @property
    @abstractmethod
    def location(self) -> str:
        """Human-readable destination (path or URI)."""

    @property
    @abstractmethod
    def is_remote(self) -> bool:
        """True when the destination lives on another host."""

    @abstractmethod
    def is_reachable(self) -> bool:
        """Probe the destination without writing to it."""

    @abstractmethod
    def ensure_directory(self) -> None:
        """Create the destination directory if needed."""

    @abstractmethod
    def upload(self, local_path: Path, name: str) -> str:
        """Copy a local file to the destination; return its remote location."""

    @abstractmethod
    def exists(self, name: str) -> bool:
        """Check if a file of that name exists at the destination."""
