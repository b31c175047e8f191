# src/logging/transcript.py — v1
"""Run transcript: full capture of log output and host command output.

Start-once, stop-once. stop() is idempotent because both the success and
the failure path of a run call it, and it must complete before the staging
directory is archived.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import IO, Sequence

from confvault.logging.logger import ROOT_LOGGER, TextFormatter

logger = logging.getLogger(__name__)


class Transcript:
    """Mirror everything logged under ``confvault`` plus command output to a file."""

    def __init__(self, path: Path, logger_name: str = ROOT_LOGGER) -> None:
        self._path = Path(path)
        self._logger_name = logger_name
        self._stream: IO[str] | None = None
        self._handler: logging.Handler | None = None
        self._stopped = False

    @property
    def path(self) -> Path:
        return self._path

    @property
    def active(self) -> bool:
        return self._stream is not None

    @property
    def stopped(self) -> bool:
        return self._stopped

    def start(self) -> None:
        """Open the transcript file and attach it to the confvault logger."""
        if self._stopped or self._stream is not None:
            raise RuntimeError(f"Transcript {self._path} can only be started once")

        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._stream = self._path.open("a", encoding="utf-8")
        self._write_banner("Transcript started")

        handler = logging.StreamHandler(self._stream)
        handler.setFormatter(TextFormatter())
        logging.getLogger(self._logger_name).addHandler(handler)
        self._handler = handler

    def record_command(
        self,
        args: Sequence[str],
        returncode: int | None,
        stdout: str = "",
        stderr: str = "",
    ) -> None:
        """Append the full output of one host command."""
        if self._stream is None:
            return
        self._stream.write(f"\n>>> {' '.join(args)}\n")
        if stdout:
            self._stream.write(stdout if stdout.endswith("\n") else stdout + "\n")
        if stderr:
            self._stream.write("[stderr]\n")
            self._stream.write(stderr if stderr.endswith("\n") else stderr + "\n")
        self._stream.write(f"<<< exit code: {returncode}\n")
        self._stream.flush()

    def stop(self) -> bool:
        """Flush and close. Returns False when already stopped (no-op)."""
        if self._stream is None:
            self._stopped = True
            return False

        if self._handler is not None:
            logging.getLogger(self._logger_name).removeHandler(self._handler)
            self._handler = None

        self._write_banner("Transcript stopped")
        self._stream.flush()
        self._stream.close()
        self._stream = None
        self._stopped = True
        logger.debug("Transcript closed: %s", self._path)
        return True

    def _write_banner(self, text: str) -> None:
        assert self._stream is not None
        ts = datetime.now(timezone.utc).strftime("%Y-%m-%d %H:%M:%S")
        self._stream.write(f"**********************\n{text}: {ts} UTC\n**********************\n")
        self._stream.flush()
