# src/pipeline/capture.py — v1
"""Capture task runner — execute the ordered capture task table.

Each task runs inside a wrapper that turns any exception into a TaskFailed
outcome, logged at FAILED severity. A failing task never stops the tasks
after it, and the runner itself never raises: a run with some artifacts
missing still goes on to archive what was captured.
"""

from __future__ import annotations

import importlib
import logging
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import TYPE_CHECKING, Callable

from confvault.config.tasks import DEFAULT_CAPTURE_TASKS
from confvault.core.models import CaptureTask, TaskFailed, TaskOutcome, TaskSucceeded
from confvault.logging.context import set_task_context
from confvault.storage import layout

if TYPE_CHECKING:
    from confvault.config.settings import Settings
    from confvault.core.models import RunContext
    from confvault.host.commands import CommandRunner
    from confvault.logging.audit import AuditLogger

logger = logging.getLogger(__name__)


@dataclass
class CaptureEnv:
    """Everything a capture action may use."""

    context: RunContext
    settings: Settings
    commands: CommandRunner
    output_dir: Path


CaptureAction = Callable[[CaptureEnv], list[Path]]


@dataclass(frozen=True)
class CaptureTaskSpec:
    """One row of the capture task table."""

    name: str
    action: CaptureAction
    output_subdir: str


def _import_action(dotted_path: str) -> CaptureAction:
    module_path, _, attr = dotted_path.rpartition(".")
    module = importlib.import_module(module_path)
    return getattr(module, attr)


def load_capture_tasks(
    table: list[tuple[str, str, str]] | None = None,
) -> list[CaptureTaskSpec]:
    """Resolve a (name, dotted action path, output subdir) table."""
    rows = DEFAULT_CAPTURE_TASKS if table is None else table
    return [
        CaptureTaskSpec(name=name, action=_import_action(path), output_subdir=subdir)
        for name, path, subdir in rows
    ]


def _now() -> datetime:
    return datetime.now().astimezone()


class CaptureTaskRunner:
    """Run capture tasks sequentially against a staging directory.

    Args:
        specs: Ordered task table.
        settings: Loaded settings, passed through to actions.
        commands: Host command runner, passed through to actions.
        audit: Run audit log; receives one SUCCESS or FAILED line per task.
        clock: Time source for task timestamps.
    """

    def __init__(
        self,
        specs: list[CaptureTaskSpec],
        settings: Settings,
        commands: CommandRunner,
        audit: AuditLogger,
        clock: Callable[[], datetime] = _now,
    ) -> None:
        self._specs = specs
        self._settings = settings
        self._commands = commands
        self._audit = audit
        self._clock = clock

    def run(self, context: RunContext) -> list[CaptureTask]:
        """Execute every task in order; return their terminal records."""
        tasks: list[CaptureTask] = []
        for index, spec in enumerate(self._specs, start=1):
            task = CaptureTask(
                name=spec.name,
                output_dir=layout.task_output_dir(context.staging_dir, spec.output_subdir),
                started_at=self._clock(),
            )
            logger.info("Task %d/%d: %s", index, len(self._specs), spec.name)
            outcome = self._execute(spec, task, context)
            self._apply(task, outcome)
            tasks.append(task)

        failed = sum(1 for t in tasks if t.status == "failed")
        logger.info(
            "Capture complete: %d tasks, %d succeeded, %d failed",
            len(tasks), len(tasks) - failed, failed,
        )
        return tasks

    def _execute(
        self, spec: CaptureTaskSpec, task: CaptureTask, context: RunContext,
    ) -> TaskOutcome:
        set_task_context(spec.name)
        try:
            task.output_dir.mkdir(parents=True, exist_ok=True)
            env = CaptureEnv(
                context=context,
                settings=self._settings,
                commands=self._commands,
                output_dir=task.output_dir,
            )
            outcome = TaskSucceeded(task=spec.name, outputs=list(spec.action(env) or []))
        except Exception as exc:
            logger.debug("Task '%s' raised", spec.name, exc_info=True)
            return TaskFailed(task=spec.name, error=str(exc) or type(exc).__name__)
        finally:
            set_task_context(None)
        return outcome

    def _apply(self, task: CaptureTask, outcome: TaskOutcome) -> None:
        if isinstance(outcome, TaskSucceeded):
            task.mark_succeeded(outcome.outputs, self._clock())
            targets = ", ".join(str(p) for p in outcome.outputs) or str(task.output_dir)
            self._audit.success(f"{task.name}: captured to {targets}")
        else:
            task.mark_failed(outcome.error, self._clock())
            self._audit.failed(f"{task.name}: {outcome.error}")
