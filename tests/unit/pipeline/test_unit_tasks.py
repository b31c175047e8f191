# tests/unit/pipeline/test_unit_tasks.py — v1
"""Tests for pipeline/tasks.py — capture actions with a mocked command runner."""

from __future__ import annotations

import json
from pathlib import Path
from unittest.mock import MagicMock

import pytest

from confvault.core.errors import CommandError
from confvault.host.commands import CommandResult
from confvault.pipeline.capture import CaptureEnv
from confvault.pipeline.tasks import (
    backup_web_state,
    copy_config_file,
    export_firewall_rules,
    export_service_inventory,
    export_web_config,
)


def _result(stdout: str = "", returncode: int = 0) -> CommandResult:
    return CommandResult(args=[], returncode=returncode, stdout=stdout, stderr="")


@pytest.fixture
def commands():
    return MagicMock()


@pytest.fixture
def env(settings, run_context, commands, tmp_path):
    out = tmp_path / "out"
    out.mkdir()
    return CaptureEnv(context=run_context, settings=settings, commands=commands, output_dir=out)


class TestExportFirewallRules:
    def test_runs_module_and_requires_output(self, env, commands):
        def fake_run(argv):
            (env.output_dir / "firewall_rules.csv").write_text("Name\n", encoding="utf-8")
            return _result()

        commands.run.side_effect = fake_run
        outputs = export_firewall_rules(env)
        assert outputs == [env.output_dir / "firewall_rules.csv"]
        argv = commands.run.call_args.args[0]
        assert argv[0] == env.settings.powershell_executable
        assert "Import-Module" in argv[-1]
        assert "FirewallManager.psm1" in argv[-1]
        assert env.settings.rule_export_cmdlet in argv[-1]

    def test_no_output_file(self, env, commands):
        commands.run.return_value = _result()
        with pytest.raises(FileNotFoundError):
            export_firewall_rules(env)

    def test_command_failure_propagates(self, env, commands):
        commands.run.side_effect = CommandError(["powershell.exe"], 1, "module not found")
        with pytest.raises(CommandError):
            export_firewall_rules(env)


class TestExportWebConfig:
    def test_one_file_per_category(self, env, commands):
        commands.run.return_value = _result("<appcmd><SITE /></appcmd>")
        outputs = export_web_config(env)
        assert [p.name for p in outputs] == ["sites.xml", "apppools.xml"]
        assert (env.output_dir / "sites.xml").read_text(encoding="utf-8").startswith("<appcmd>")
        first = commands.run.call_args_list[0].args[0]
        assert first[1:] == ["list", "site", "/config", "/xml"]

    def test_invalid_xml(self, env, commands):
        commands.run.return_value = _result("ERROR ( message:not xml )")
        with pytest.raises(ValueError, match="invalid XML"):
            export_web_config(env)


class TestBackupWebState:
    def test_copies_backup_folder(self, env, commands):
        source = Path(env.settings.web_state_backup_root) / env.context.run_id
        source.mkdir(parents=True)
        (source / "applicationHost.config").write_text("<configuration/>", encoding="utf-8")
        commands.run.return_value = _result()

        outputs = backup_web_state(env)

        assert outputs == [env.output_dir]
        assert (env.output_dir / "applicationHost.config").exists()
        assert commands.run.call_args.args[0][1:] == ["add", "backup", env.context.run_id]

    def test_missing_backup_folder(self, env, commands):
        commands.run.return_value = _result()
        with pytest.raises(FileNotFoundError, match="Web-tier backup folder"):
            backup_web_state(env)


class TestExportServiceInventory:
    def test_writes_csv(self, env, commands):
        commands.run.return_value = _result(json.dumps([
            {"Name": "W3SVC", "DisplayName": "World Wide Web Publishing Service",
             "State": "Running", "StartMode": "Auto", "StartName": "LocalSystem",
             "PathName": "C:\\Windows\\system32\\svchost.exe", "ProcessId": 1234, "ExitCode": 0},
        ]))
        outputs = export_service_inventory(env)
        text = outputs[0].read_text(encoding="utf-8")
        assert text.splitlines()[0].startswith("Name,DisplayName")
        assert "W3SVC" in text


class TestCopyConfigFile:
    def test_copies(self, env):
        outputs = copy_config_file(env)
        assert outputs == [env.output_dir / "web.config"]
        assert outputs[0].read_text(encoding="utf-8").startswith("<configuration>")

    def test_missing_source(self, env, tmp_path):
        env.settings = env.settings.model_copy(update={"config_file_path": str(tmp_path / "gone")})
        with pytest.raises(FileNotFoundError):
            copy_config_file(env)
