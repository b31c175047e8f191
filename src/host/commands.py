# src/host/commands.py — v1
"""Blocking host command execution with transcript capture.

Every command's full output is appended to the run transcript when one is
attached. A missing executable raises CommandNotFoundError, a non-zero exit
or timeout raises CommandError; capture tasks treat both as task failures.
"""

from __future__ import annotations

import logging
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Sequence

from confvault.core.errors import CommandError, CommandNotFoundError

if TYPE_CHECKING:
    from confvault.logging.transcript import Transcript

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_S = 600


@dataclass
class CommandResult:
    """Captured output of a completed host command."""

    args: list[str]
    returncode: int
    stdout: str
    stderr: str


def powershell_command(executable: str, script: str) -> list[str]:
    """Build the argv for a non-interactive PowerShell invocation."""
    return [
        executable,
        "-NoProfile",
        "-NonInteractive",
        "-ExecutionPolicy", "Bypass",
        "-Command", script,
    ]


def ps_quote(value: str | Path) -> str:
    """Quote a value as a PowerShell single-quoted string literal."""
    return "'" + str(value).replace("'", "''") + "'"


def _as_text(data: str | bytes | None) -> str:
    if data is None:
        return ""
    if isinstance(data, bytes):
        return data.decode("utf-8", errors="replace")
    return data


class CommandRunner:
    """Run host commands one at a time, blocking until exit or timeout."""

    def __init__(
        self,
        timeout_seconds: int = DEFAULT_TIMEOUT_S,
        transcript: Transcript | None = None,
    ) -> None:
        self._timeout = timeout_seconds
        self._transcript = transcript

    def attach_transcript(self, transcript: Transcript | None) -> None:
        self._transcript = transcript

    def run(
        self,
        args: Sequence[str | Path],
        cwd: Path | None = None,
        check: bool = True,
    ) -> CommandResult:
        """Run a command and return its captured output.

        Raises:
            CommandNotFoundError: The executable does not exist.
            CommandError: Non-zero exit (when ``check``) or timeout.
        """
        argv = [str(a) for a in args]
        logger.debug("Running command: %s", " ".join(argv))

        try:
            cp = subprocess.run(
                argv,
                cwd=cwd,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                text=True,
                timeout=self._timeout,
            )
        except FileNotFoundError as exc:
            self._record(argv, None, "", str(exc))
            raise CommandNotFoundError(argv) from exc
        except subprocess.TimeoutExpired as exc:
            stderr = _as_text(exc.stderr)
            self._record(argv, None, _as_text(exc.stdout), stderr)
            raise CommandError(
                argv, None, stderr or f"no exit after {self._timeout}s"
            ) from exc

        self._record(argv, cp.returncode, cp.stdout, cp.stderr)
        if check and cp.returncode != 0:
            raise CommandError(argv, cp.returncode, cp.stderr)

        return CommandResult(
            args=argv,
            returncode=cp.returncode,
            stdout=cp.stdout,
            stderr=cp.stderr,
        )

    def _record(
        self, argv: list[str], returncode: int | None, stdout: str, stderr: str,
    ) -> None:
        if self._transcript is not None:
            self._transcript.record_command(argv, returncode, stdout, stderr)
