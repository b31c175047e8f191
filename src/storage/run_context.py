# src/storage/run_context.py — v1
"""Run identity: run_id generation and RunContext construction."""

from __future__ import annotations

from datetime import datetime
from pathlib import Path

from confvault.config.settings import Settings
from confvault.core.models import RunContext
from confvault.host.probes import host_name
from confvault.storage import layout


def generate_run_id(host: str, timestamp: datetime | None = None) -> str:
    """Generate a run_id: {host}_yyyymmdd_hhmmss.

    Second granularity; two runs on the same host in the same second would
    collide, which the one-shot invocation model does not produce.
    """
    ts = timestamp or datetime.now().astimezone()
    return f"{host}_{ts.strftime('%Y%m%d_%H%M%S')}"


def build_run_context(
    settings: Settings,
    host: str | None = None,
    now: datetime | None = None,
) -> RunContext:
    """Derive the RunContext for a new run. Creates nothing on disk.

    Args:
        settings: Loaded settings (backup_root may still be empty; preflight
            reports that).
        host: Host name override (defaults to this machine).
        now: Run start time (defaults to local now).
    """
    host = host or host_name()
    created_at = now or datetime.now().astimezone()
    run_id = generate_run_id(host, created_at)

    backup_root = Path(settings.backup_root).expanduser()
    run_path = layout.run_dir(backup_root, run_id)

    return RunContext(
        run_id=run_id,
        host=host,
        backup_root=backup_root,
        staging_dir=run_path,
        log_path=layout.log_path(run_path, run_id),
        transcript_path=layout.transcript_path(run_path, run_id),
        created_at=created_at,
    )
