# src/pipeline/preflight.py — v1
"""Preflight checks run before any capture work.

Order: required parameters, privileges, staging directories, free space,
destination reachability. The first failing check raises; every failure is
fatal to the run.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING, Callable

from confvault.core.errors import (
    ConfigurationError,
    PrivilegeError,
    ResourceError,
    StagingError,
    UnreachableDestinationError,
)
from confvault.host.probes import free_bytes, is_elevated
from confvault.storage import layout
from confvault.storage.destination_factory import create_destination

if TYPE_CHECKING:
    from confvault.config.settings import Settings
    from confvault.core.models import RunContext
    from confvault.logging.audit import AuditLogger
    from confvault.storage.base_destination import BaseDestination

logger = logging.getLogger(__name__)


class Preflight:
    """Validate the environment for one backup run.

    Args:
        settings: Loaded settings.
        context: The run's context (paths are not created yet).
        audit: Run audit log.
        subdirs: Task output subdirectories to create in staging.
        destination: Pre-built destination; built from settings when None.
        privilege_check: Returns True when the process is elevated.
        disk_free: Returns free bytes for a path.
    """

    def __init__(
        self,
        settings: Settings,
        context: RunContext,
        audit: AuditLogger,
        subdirs: list[str] | None = None,
        destination: BaseDestination | None = None,
        privilege_check: Callable[[], bool] = is_elevated,
        disk_free: Callable[[Path], int] = free_bytes,
    ) -> None:
        self._settings = settings
        self._context = context
        self._audit = audit
        self._subdirs = subdirs or []
        self._destination = destination
        self._privilege_check = privilege_check
        self._disk_free = disk_free

    def run(self) -> BaseDestination:
        """Run all checks; return the validated destination."""
        self.check_required_parameters()
        self.check_privileges()
        self.prepare_staging()
        self.check_free_space()
        return self.check_destination()

    def check_required_parameters(self) -> None:
        missing = self._settings.missing_backup_fields
        if missing:
            names = ", ".join(name.upper() for name in missing)
            raise ConfigurationError(f"Required parameters missing or empty: {names}")
        self._audit.info("Parameters validated")

    def check_privileges(self) -> None:
        if not self._privilege_check():
            raise PrivilegeError(
                "Administrative privileges are required to capture host state"
            )
        self._audit.info("Running with administrative privileges")

    def prepare_staging(self) -> None:
        ctx = self._context
        try:
            ctx.backup_root.mkdir(parents=True, exist_ok=True)
            layout.ensure_run_directories(ctx.staging_dir, self._subdirs)
        except OSError as exc:
            raise StagingError(
                f"Cannot create staging directory {ctx.staging_dir}: {exc}"
            ) from exc
        self._audit.info(f"Staging directory ready: {ctx.staging_dir}")

    def check_free_space(self) -> None:
        required = self._settings.min_free_bytes
        available = self._disk_free(self._context.staging_dir)
        if available < required:
            raise ResourceError(self._context.staging_dir, available, required)
        self._audit.info(
            f"Free space on staging volume: {available / 1024**3:.2f} GiB"
        )

    def check_destination(self) -> BaseDestination:
        destination = self._destination or create_destination(self._settings)
        if destination.is_remote and not destination.is_reachable():
            raise UnreachableDestinationError(
                f"Network destination is not reachable: {destination.location}"
            )
        self._audit.info(f"Destination available: {destination.location}")
        return destination
