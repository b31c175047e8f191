# src/__init__.py — v1
"""confvault — server configuration backup and checksum verification."""

from confvault.version import __version__

__all__ = ["__version__"]
