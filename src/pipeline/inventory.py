# src/pipeline/inventory.py — v1
"""Service inventory: parse Win32_Service JSON and write it as CSV."""

from __future__ import annotations

import csv
import json
from pathlib import Path
from typing import Any

from confvault.core.models import ServiceRecord

# Win32_Service properties requested from the host, in query order.
SERVICE_PROPERTIES: tuple[str, ...] = (
    "Name",
    "DisplayName",
    "Description",
    "State",
    "StartMode",
    "StartName",
    "PathName",
    "ProcessId",
    "ExitCode",
)

CSV_COLUMNS: tuple[str, ...] = (
    "Name",
    "DisplayName",
    "Description",
    "State",
    "StartMode",
    "Account",
    "ExecutablePath",
    "ProcessId",
    "ExitCode",
)


def service_query_script() -> str:
    """PowerShell pipeline emitting every service as compressed JSON."""
    props = ",".join(SERVICE_PROPERTIES)
    return (
        "Get-CimInstance -ClassName Win32_Service | "
        f"Select-Object {props} | ConvertTo-Json -Depth 2 -Compress"
    )


def _text(item: dict[str, Any], key: str) -> str:
    value = item.get(key)
    return "" if value is None else str(value)


def _int_or_none(value: Any) -> int | None:
    if value is None or value == "":
        return None
    return int(value)


def parse_service_inventory(payload: str) -> list[ServiceRecord]:
    """Parse ConvertTo-Json output into records, sorted by service name.

    ConvertTo-Json emits a bare object instead of a one-element array when
    exactly one service is returned.

    Raises:
        ValueError: If the payload is not JSON or an entry has no Name.
    """
    payload = payload.strip()
    if not payload:
        return []

    data = json.loads(payload)
    if isinstance(data, dict):
        data = [data]
    if not isinstance(data, list):
        raise ValueError(f"Unexpected service inventory payload type: {type(data).__name__}")

    records: list[ServiceRecord] = []
    for item in data:
        name = _text(item, "Name")
        if not name:
            raise ValueError(f"Service entry without Name: {item!r}")
        records.append(
            ServiceRecord(
                name=name,
                display_name=_text(item, "DisplayName"),
                description=_text(item, "Description"),
                state=_text(item, "State"),
                start_mode=_text(item, "StartMode"),
                account=_text(item, "StartName"),
                executable_path=_text(item, "PathName"),
                process_id=_int_or_none(item.get("ProcessId")),
                exit_code=_int_or_none(item.get("ExitCode")),
            )
        )
    records.sort(key=lambda r: r.name.lower())
    return records


def write_service_csv(records: list[ServiceRecord], path: Path) -> Path:
    """Write the inventory as UTF-8 CSV with a header row."""
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8", newline="") as f:
        writer = csv.writer(f)
        writer.writerow(CSV_COLUMNS)
        for r in records:
            writer.writerow([
                r.name,
                r.display_name,
                r.description,
                r.state,
                r.start_mode,
                r.account,
                r.executable_path,
                "" if r.process_id is None else r.process_id,
                "" if r.exit_code is None else r.exit_code,
            ])
    return path
