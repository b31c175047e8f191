# src/config/tasks.py — v1
"""Declarative capture task table.

Each row is (task name, dotted path of the capture action, output subdirectory
under the run's staging directory). Tasks run in this order, one at a time.
"""

from __future__ import annotations

DEFAULT_CAPTURE_TASKS: list[tuple[str, str, str]] = [
    ("firewall_rules", "confvault.pipeline.tasks.export_firewall_rules", "firewall"),
    ("web_config", "confvault.pipeline.tasks.export_web_config", "webtier"),
    ("web_state_backup", "confvault.pipeline.tasks.backup_web_state", "webtier/state_backup"),
    ("service_inventory", "confvault.pipeline.tasks.export_service_inventory", "services"),
    ("config_file", "confvault.pipeline.tasks.copy_config_file", "config"),
]
