# src/pipeline/orchestrator.py — v1
"""Backup run orchestrator.

Control flow for one run:

    build RunContext -> preflight -> relocate audit log -> start transcript
    -> capture tasks -> run summary -> stop transcript, release audit log
    -> archive -> checksum -> publish -> final log entry

Capture task failures are isolated by the runner. Every other failure is
fatal: it is logged at FAILED and re-raised to the caller. The transcript is
stopped and the audit log closed on every exit path.
"""

from __future__ import annotations

import logging
import tempfile
from datetime import datetime
from pathlib import Path
from typing import Callable

from confvault.config.settings import Settings
from confvault.core.models import BackupRunResult, CaptureTask
from confvault.host.commands import CommandRunner
from confvault.host.probes import free_bytes, is_elevated
from confvault.logging.audit import AuditLogger
from confvault.logging.context import clear_context, set_run_context
from confvault.logging.transcript import Transcript
from confvault.pipeline.archiver import create_archive
from confvault.pipeline.capture import CaptureTaskRunner, CaptureTaskSpec, load_capture_tasks
from confvault.pipeline.checksum import write_checksum
from confvault.pipeline.preflight import Preflight
from confvault.pipeline.publisher import RemotePublisher
from confvault.storage import layout
from confvault.storage.base_destination import BaseDestination
from confvault.storage.run_context import build_run_context

logger = logging.getLogger(__name__)


def _now() -> datetime:
    return datetime.now().astimezone()


def write_run_summary(result: BackupRunResult) -> Path:
    """Write task statuses into the staging directory (archived with the run)."""
    path = layout.summary_path(result.context.staging_dir)
    path.write_text(
        result.model_dump_json(indent=2, include={"context", "tasks"}),
        encoding="utf-8",
    )
    return path


class BackupOrchestrator:
    """Run one capture-archive-checksum-publish cycle.

    Args:
        settings: Loaded settings.
        tasks: Capture task table (defaults to config/tasks.py).
        destination: Publish destination (defaults to NETWORK_DESTINATION).
        commands: Host command runner.
        host: Host name override.
        clock: Time source.
        privilege_check: Elevation probe used by preflight.
        disk_free: Free-space probe used by preflight.
    """

    def __init__(
        self,
        settings: Settings,
        tasks: list[CaptureTaskSpec] | None = None,
        destination: BaseDestination | None = None,
        commands: CommandRunner | None = None,
        host: str | None = None,
        clock: Callable[[], datetime] = _now,
        privilege_check: Callable[[], bool] = is_elevated,
        disk_free: Callable[[Path], int] = free_bytes,
    ) -> None:
        self._settings = settings
        self._tasks = tasks if tasks is not None else load_capture_tasks()
        self._destination = destination
        self._commands = commands or CommandRunner(
            timeout_seconds=settings.command_timeout_seconds
        )
        self._host = host
        self._clock = clock
        self._privilege_check = privilege_check
        self._disk_free = disk_free

    def run(self) -> BackupRunResult:
        """Execute the run.

        Returns:
            BackupRunResult with status "completed".

        Raises:
            ConfVaultError: Any fatal failure (preflight, archive, checksum,
                transfer), after it has been written to the audit log.
        """
        context = build_run_context(self._settings, host=self._host, now=self._clock())
        set_run_context(context.run_id, context.host)

        audit = AuditLogger(context)
        transcript = Transcript(context.transcript_path)
        result = BackupRunResult(context=context, tasks=[])

        try:
            audit.info(f"Backup run {context.run_id} started on {context.host}")

            destination = Preflight(
                self._settings,
                context,
                audit,
                subdirs=[spec.output_subdir for spec in self._tasks],
                destination=self._destination,
                privilege_check=self._privilege_check,
                disk_free=self._disk_free,
            ).run()

            audit.relocate(context.log_path)
            transcript.start()
            self._commands.attach_transcript(transcript)
            audit.info(f"Transcript started: {context.transcript_path}")

            runner = CaptureTaskRunner(
                self._tasks, self._settings, self._commands, audit, clock=self._clock,
            )
            result.tasks = runner.run(context)
            write_run_summary(result)
            audit.info(_capture_summary(result.tasks))

            audit.info("Stopping transcript and releasing log before archiving")
            self._commands.attach_transcript(None)
            transcript.stop()
            audit.release()

            archive_root = self._settings.archive_path_root or Path(tempfile.gettempdir())
            result.archive = create_archive(
                context.staging_dir, layout.archive_path(archive_root, context.run_id),
            )
            audit.resume()
            audit.success(
                f"Archive created: {result.archive.path} ({result.archive.size_bytes} bytes)"
            )

            algorithm = self._settings.checksum_algorithm
            manifest_path, digest = write_checksum(
                result.archive.path, algorithm, context.staging_dir,
            )
            result.manifest_path = manifest_path
            audit.success(f"{algorithm.upper()} checksum {digest} written to {manifest_path}")

            result.published = RemotePublisher(destination).publish(
                result.archive.path, manifest_path,
            )
            audit.success(f"Published to {destination.location}: {', '.join(result.published)}")

            result.status = "completed"
            result.completed_at = self._clock()
            audit.info(f"Backup run {context.run_id} completed")
            return result

        except Exception as exc:
            result.status = "failed"
            result.error = str(exc)
            audit.resume()
            audit.failed(f"{type(exc).__name__}: {exc}")
            logger.error("Backup run failed; audit log at %s", audit.path)
            raise

        finally:
            self._commands.attach_transcript(None)
            transcript.stop()
            audit.close()
            clear_context()


def _capture_summary(tasks: list[CaptureTask]) -> str:
    failed = [t.name for t in tasks if t.status == "failed"]
    ok = len(tasks) - len(failed)
    if failed:
        return f"Capture finished: {ok}/{len(tasks)} succeeded, failed: {', '.join(failed)}"
    return f"Capture finished: {ok}/{len(tasks)} succeeded"
