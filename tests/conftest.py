# tests/conftest.py — v1
"""Shared test fixtures for all unit and integration tests.

Provides settings pointing into tmp_path, a fixed run context, an audit log,
and helpers for writing archives with manifests.
No external dependencies — host commands and S3 are mocked.
"""

from __future__ import annotations

import hashlib
import logging
import tempfile
from datetime import datetime, timezone
from pathlib import Path
from typing import Callable

import pytest

from confvault.config.settings import Settings
from confvault.core.models import RunContext
from confvault.logging.audit import AuditLogger
from confvault.logging.context import clear_context
from confvault.storage.run_context import build_run_context

FIXED_TIME = datetime(2026, 10, 17, 4, 0, 0, tzinfo=timezone.utc)
HOST = "WEB01"
RUN_ID = "WEB01_20261017_040000"


# === FIXTURES: Isolation ===


@pytest.fixture(autouse=True)
def _isolated_tempdir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point tempfile.gettempdir() at a per-test directory."""
    tmp = tmp_path / "_systmp"
    tmp.mkdir()
    monkeypatch.setattr(tempfile, "tempdir", str(tmp))
    return tmp


@pytest.fixture(autouse=True)
def _reset_confvault_logging():
    """Undo logger configuration done by a test."""
    yield
    clear_context()
    root = logging.getLogger("confvault")
    for handler in list(root.handlers):
        root.removeHandler(handler)
        handler.close()
    root.propagate = True
    root.setLevel(logging.NOTSET)


# === FIXTURES: Settings and run context ===


@pytest.fixture
def config_file(tmp_path: Path) -> Path:
    path = tmp_path / "source" / "web.config"
    path.parent.mkdir(parents=True)
    path.write_text('<configuration><appSettings /></configuration>\n', encoding="utf-8")
    return path


@pytest.fixture
def settings(tmp_path: Path, config_file: Path) -> Settings:
    """Settings with every required backup parameter set under tmp_path."""
    return Settings(
        _env_file=None,
        backup_root=str(tmp_path / "backups"),
        rule_module_path=str(tmp_path / "modules" / "FirewallManager.psm1"),
        config_file_path=str(config_file),
        network_destination=str(tmp_path / "remote"),
        archive_dir=str(tmp_path / "archives"),
        web_state_backup_root=str(tmp_path / "inetsrv" / "backup"),
    )


@pytest.fixture
def run_context(settings: Settings) -> RunContext:
    return build_run_context(settings, host=HOST, now=FIXED_TIME)


@pytest.fixture
def audit(run_context: RunContext):
    logger = AuditLogger(run_context)
    yield logger
    logger.close()


# === FIXTURES: Manifests ===


def sha256_upper(data: bytes) -> str:
    return hashlib.sha256(data).hexdigest().upper()


@pytest.fixture
def write_archive() -> Callable[..., tuple[Path, Path]]:
    """Factory: write an archive file plus a one-line sha256 manifest next to it."""

    def _write(
        directory: Path,
        name: str = "WEB01_20261017_040000.zip",
        content: bytes = b"PK\x03\x04 fake archive bytes",
        manifest_line: str | None = None,
    ) -> tuple[Path, Path]:
        directory.mkdir(parents=True, exist_ok=True)
        archive = directory / name
        archive.write_bytes(content)
        manifest = directory / f"{name}.sha256"
        line = manifest_line if manifest_line is not None else f"{sha256_upper(content)} *{name}"
        manifest.write_text(line + "\n", encoding="utf-8")
        return archive, manifest

    return _write
