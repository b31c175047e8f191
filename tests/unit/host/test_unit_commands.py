# tests/unit/host/test_unit_commands.py — v1
"""Tests for host/commands.py — blocking command runner."""

from __future__ import annotations

import subprocess
from unittest.mock import MagicMock, patch

import pytest

from confvault.core.errors import CommandError, CommandNotFoundError
from confvault.host.commands import CommandRunner, powershell_command, ps_quote

RUN = "confvault.host.commands.subprocess.run"


def _completed(returncode=0, stdout="ok\n", stderr=""):
    return subprocess.CompletedProcess(args=[], returncode=returncode, stdout=stdout, stderr=stderr)


class TestHelpers:
    def test_powershell_command(self):
        argv = powershell_command("pwsh", "Get-Service")
        assert argv[0] == "pwsh"
        assert "-NonInteractive" in argv
        assert argv[-2:] == ["-Command", "Get-Service"]

    def test_ps_quote_escapes_single_quotes(self):
        assert ps_quote("C:\\it's here") == "'C:\\it''s here'"


class TestCommandRunner:
    def test_success(self):
        with patch(RUN, return_value=_completed(stdout="<xml/>")) as run:
            result = CommandRunner(timeout_seconds=5).run(["appcmd.exe", "list", "site"])
        assert result.returncode == 0
        assert result.stdout == "<xml/>"
        assert run.call_args.kwargs["timeout"] == 5
        assert run.call_args.args[0] == ["appcmd.exe", "list", "site"]

    def test_non_zero_exit_raises(self):
        with patch(RUN, return_value=_completed(returncode=5, stderr="access denied")):
            with pytest.raises(CommandError) as exc_info:
                CommandRunner().run(["appcmd.exe"])
        assert exc_info.value.returncode == 5
        assert "access denied" in str(exc_info.value)

    def test_non_zero_exit_unchecked(self):
        with patch(RUN, return_value=_completed(returncode=1)):
            result = CommandRunner().run(["x"], check=False)
        assert result.returncode == 1

    def test_missing_executable(self):
        with patch(RUN, side_effect=FileNotFoundError("no such file")):
            with pytest.raises(CommandNotFoundError, match="Command not found: appcmd.exe"):
                CommandRunner().run(["appcmd.exe"])

    def test_missing_executable_is_command_error(self):
        with patch(RUN, side_effect=FileNotFoundError()):
            with pytest.raises(CommandError):
                CommandRunner().run(["x"])

    def test_timeout(self):
        exc = subprocess.TimeoutExpired(cmd=["x"], timeout=3)
        with patch(RUN, side_effect=exc):
            with pytest.raises(CommandError, match="timed out") as exc_info:
                CommandRunner(timeout_seconds=3).run(["x"])
        assert exc_info.value.returncode is None

    def test_records_to_transcript(self):
        transcript = MagicMock()
        runner = CommandRunner(transcript=transcript)
        with patch(RUN, return_value=_completed(returncode=0, stdout="out", stderr="err")):
            runner.run(["cmd", "arg"])
        transcript.record_command.assert_called_once_with(["cmd", "arg"], 0, "out", "err")

    def test_records_failure_before_raising(self):
        transcript = MagicMock()
        runner = CommandRunner(transcript=transcript)
        with patch(RUN, return_value=_completed(returncode=2, stderr="boom")):
            with pytest.raises(CommandError):
                runner.run(["cmd"])
        transcript.record_command.assert_called_once()

    def test_detached_transcript_not_called(self):
        transcript = MagicMock()
        runner = CommandRunner(transcript=transcript)
        runner.attach_transcript(None)
        with patch(RUN, return_value=_completed()):
            runner.run(["cmd"])
        transcript.record_command.assert_not_called()
