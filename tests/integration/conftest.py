# tests/integration/conftest.py — v1
"""Shared fixtures for integration tests.

FakeHostCommands stands in for the Windows host: it answers the PowerShell
and appcmd invocations made by the default capture task table, producing
the same files and output shapes the real tools do. No external services
or elevated privileges are required.
"""

from __future__ import annotations

import json
import re
from pathlib import Path
from typing import Sequence

import pytest

from confvault.core.errors import CommandError
from confvault.host.commands import CommandResult

_CSV_TARGET = re.compile(r"-CSVFile '((?:[^']|'')*)'")

SERVICES = [
    {
        "Name": "W3SVC", "DisplayName": "World Wide Web Publishing Service",
        "Description": "Provides Web connectivity", "State": "Running",
        "StartMode": "Auto", "StartName": "LocalSystem",
        "PathName": "C:\\Windows\\system32\\svchost.exe -k iissvcs",
        "ProcessId": 4120, "ExitCode": 0,
    },
    {
        "Name": "AppHostSvc", "DisplayName": "Application Host Helper Service",
        "Description": None, "State": "Running", "StartMode": "Auto",
        "StartName": "LocalSystem", "PathName": "C:\\Windows\\system32\\svchost.exe",
        "ProcessId": 3300, "ExitCode": 0,
    },
]


class FakeHostCommands:
    """Scriptable replacement for CommandRunner."""

    def __init__(self, web_state_root: Path, fail: set[str] | None = None) -> None:
        self.web_state_root = web_state_root
        self.fail = fail or set()
        self.calls: list[list[str]] = []
        self.transcript = None

    def attach_transcript(self, transcript) -> None:
        self.transcript = transcript

    def run(self, args: Sequence[str | Path], cwd=None, check: bool = True) -> CommandResult:
        argv = [str(a) for a in args]
        self.calls.append(argv)
        stdout = self._respond(argv)
        if self.transcript is not None:
            self.transcript.record_command(argv, 0, stdout, "")
        return CommandResult(args=argv, returncode=0, stdout=stdout, stderr="")

    def _respond(self, argv: list[str]) -> str:
        joined = " ".join(argv)
        for key in self.fail:
            if key in joined:
                raise CommandError(argv, 1, f"simulated failure for {key}")

        if "Win32_Service" in joined:
            return json.dumps(SERVICES)
        if "-CSVFile" in joined:
            target = _CSV_TARGET.search(argv[-1]).group(1).replace("''", "'")
            Path(target).write_text(
                "Name,Direction,Action,LocalPort\nWeb-HTTP,Inbound,Allow,80\n",
                encoding="utf-8",
            )
            return ""
        if argv[1:3] == ["add", "backup"]:
            folder = self.web_state_root / argv[3]
            folder.mkdir(parents=True)
            (folder / "applicationHost.config").write_text("<configuration/>", encoding="utf-8")
            return f'BACKUP object "{argv[3]}" added'
        if argv[1] == "list":
            return f'<?xml version="1.0"?><appcmd><{argv[2].upper()} /></appcmd>'
        raise CommandError(argv, 1, "unexpected command")


@pytest.fixture
def fake_host(settings) -> FakeHostCommands:
    return FakeHostCommands(Path(settings.web_state_backup_root))


@pytest.fixture
def fake_host_factory(settings):
    def _make(fail: set[str] | None = None) -> FakeHostCommands:
        return FakeHostCommands(Path(settings.web_state_backup_root), fail=fail)
    return _make
