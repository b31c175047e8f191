# src/pipeline/tasks.py — v1
"""Capture actions for the default task table (see config/tasks.py).

Each action receives a CaptureEnv, writes under ``env.output_dir`` and
returns the paths it produced. Actions raise on any failure; the runner
isolates it.
"""

from __future__ import annotations

import logging
import shutil
import xml.etree.ElementTree as ET
from pathlib import Path

from confvault.host.commands import powershell_command, ps_quote
from confvault.pipeline.capture import CaptureEnv
from confvault.pipeline.inventory import (
    parse_service_inventory,
    service_query_script,
    write_service_csv,
)

logger = logging.getLogger(__name__)

FIREWALL_RULES_FILE = "firewall_rules.csv"
SERVICES_FILE = "services.csv"


def _require_file(path: Path) -> Path:
    if not path.is_file():
        raise FileNotFoundError(f"Expected output was not produced: {path}")
    return path


def export_firewall_rules(env: CaptureEnv) -> list[Path]:
    """Load the rule-export module and export the firewall rule collection."""
    settings = env.settings
    out = env.output_dir / FIREWALL_RULES_FILE
    script = (
        f"Import-Module -Name {ps_quote(settings.rule_module_path)} -ErrorAction Stop; "
        f"{settings.rule_export_cmdlet} -CSVFile {ps_quote(out)}"
    )
    env.commands.run(powershell_command(settings.powershell_executable, script))
    return [_require_file(out)]


def export_web_config(env: CaptureEnv) -> list[Path]:
    """Export each configured web-tier configuration category to XML."""
    outputs: list[Path] = []
    for category in env.settings.web_config_categories_list:
        result = env.commands.run(
            [env.settings.appcmd_path, "list", category, "/config", "/xml"]
        )
        try:
            ET.fromstring(result.stdout)
        except ET.ParseError as exc:
            raise ValueError(f"appcmd returned invalid XML for '{category}': {exc}") from exc

        out = env.output_dir / f"{category}s.xml"
        out.write_text(result.stdout, encoding="utf-8")
        outputs.append(out)
    return outputs


def backup_web_state(env: CaptureEnv) -> list[Path]:
    """Trigger a full web-tier backup and copy its folder into staging."""
    name = env.context.run_id
    env.commands.run([env.settings.appcmd_path, "add", "backup", name])

    source = Path(env.settings.web_state_backup_root) / name
    if not source.is_dir():
        raise FileNotFoundError(f"Web-tier backup folder not found: {source}")

    shutil.copytree(str(source), str(env.output_dir), dirs_exist_ok=True)
    return [env.output_dir]


def export_service_inventory(env: CaptureEnv) -> list[Path]:
    """Enumerate every host service with its metadata into a CSV file."""
    result = env.commands.run(
        powershell_command(env.settings.powershell_executable, service_query_script())
    )
    records = parse_service_inventory(result.stdout)
    logger.info("Service inventory: %d services", len(records))
    return [write_service_csv(records, env.output_dir / SERVICES_FILE)]


def copy_config_file(env: CaptureEnv) -> list[Path]:
    """Copy the designated configuration file into staging."""
    source = Path(env.settings.config_file_path).expanduser()
    if not source.is_file():
        raise FileNotFoundError(f"Configuration file not found: {source}")
    target = env.output_dir / source.name
    shutil.copy2(str(source), str(target))
    return [target]
