# src/logging/audit.py — v1
"""Per-run audit log: one durable line per call.

Line format::

    2026-10-17 04:00:01 - [WEB01] - [SUCCESS] - Firewall rules exported to ...

Severity is one of INFO, SUCCESS, FAILED. The log starts in a temporary file
so preflight failures are recorded somewhere durable, and is relocated into
the staging directory once that exists.
"""

from __future__ import annotations

import logging
import tempfile
from datetime import datetime
from pathlib import Path

from confvault.core.models import RunContext
from confvault.logging.handlers import DurableFileHandler
from confvault.logging.logger import ROOT_LOGGER

SUCCESS = 25
logging.addLevelName(SUCCESS, "SUCCESS")

SEVERITY_LABELS: dict[int, str] = {
    logging.INFO: "INFO",
    SUCCESS: "SUCCESS",
    logging.ERROR: "FAILED",
}


class AuditFormatter(logging.Formatter):
    """Render ``timestamp - [host] - [severity] - message``."""

    def __init__(self, host: str) -> None:
        super().__init__()
        self._host = host

    def format(self, record: logging.LogRecord) -> str:
        ts = datetime.fromtimestamp(record.created).strftime("%Y-%m-%d %H:%M:%S")
        severity = SEVERITY_LABELS.get(record.levelno, record.levelname)
        return f"{ts} - [{self._host}] - [{severity}] - {record.getMessage()}"


def temporary_log_path(run_id: str) -> Path:
    """Location of the audit log before the staging directory exists."""
    return Path(tempfile.gettempdir()) / f"confvault_{run_id}.log"


class AuditLogger:
    """Append-only, single-writer audit log for one backup run.

    Records also propagate to the ``confvault`` logger, so they reach the
    console and the run transcript.
    """

    def __init__(self, context: RunContext, path: Path | None = None) -> None:
        self._host = context.host
        self._path = path or temporary_log_path(context.run_id)
        self._logger = logging.getLogger(f"{ROOT_LOGGER}.audit.{context.run_id}")
        self._logger.setLevel(logging.INFO)
        self._handler: DurableFileHandler | None = None
        self._open()

    @property
    def path(self) -> Path:
        return self._path

    @property
    def is_open(self) -> bool:
        return self._handler is not None

    # --- Writing ---

    def info(self, message: str) -> None:
        self._logger.log(logging.INFO, message)

    def success(self, message: str) -> None:
        self._logger.log(SUCCESS, message)

    def failed(self, message: str) -> None:
        self._logger.log(logging.ERROR, message)

    # --- Handle lifecycle ---

    def relocate(self, new_path: Path) -> None:
        """Move the log to ``new_path``, keeping every line written so far."""
        new_path = Path(new_path)
        if new_path == self._path:
            return
        was_open = self.is_open
        self.release()
        new_path.parent.mkdir(parents=True, exist_ok=True)
        if self._path.exists():
            with self._path.open("rb") as src, new_path.open("ab") as dst:
                dst.write(src.read())
            self._path.unlink()
        self._path = new_path
        if was_open:
            self._open()

    def release(self) -> None:
        """Close the file handle. Safe to call repeatedly."""
        if self._handler is None:
            return
        self._logger.removeHandler(self._handler)
        self._handler.close()
        self._handler = None

    def resume(self) -> None:
        """Reopen the file for append after release()."""
        if self._handler is None:
            self._open()

    def close(self) -> None:
        self.release()

    def _open(self) -> None:
        handler = DurableFileHandler(self._path)
        handler.setFormatter(AuditFormatter(self._host))
        self._logger.addHandler(handler)
        self._handler = handler
