# tests/unit/pipeline/test_unit_inventory.py — v1
"""Tests for pipeline/inventory.py — service inventory parsing and CSV."""

from __future__ import annotations

import csv
import json

import pytest

from confvault.pipeline.inventory import (
    CSV_COLUMNS,
    parse_service_inventory,
    service_query_script,
    write_service_csv,
)


class TestQueryScript:
    def test_selects_properties(self):
        script = service_query_script()
        assert "Win32_Service" in script
        assert "StartName" in script
        assert "ConvertTo-Json" in script


class TestParseServiceInventory:
    def test_list_sorted_by_name(self):
        payload = json.dumps([
            {"Name": "w3svc", "State": "Running", "ProcessId": 10},
            {"Name": "AppHostSvc", "State": "Stopped", "ProcessId": 0},
        ])
        records = parse_service_inventory(payload)
        assert [r.name for r in records] == ["AppHostSvc", "w3svc"]
        assert records[1].process_id == 10

    def test_single_object(self):
        records = parse_service_inventory(json.dumps({"Name": "W3SVC", "ExitCode": None}))
        assert len(records) == 1
        assert records[0].exit_code is None
        assert records[0].description == ""

    def test_empty_payload(self):
        assert parse_service_inventory("  \n") == []

    def test_missing_name(self):
        with pytest.raises(ValueError, match="without Name"):
            parse_service_inventory(json.dumps([{"State": "Running"}]))

    def test_not_json(self):
        with pytest.raises(ValueError):
            parse_service_inventory("Get-CimInstance : Access denied")

    def test_unexpected_type(self):
        with pytest.raises(ValueError, match="Unexpected"):
            parse_service_inventory("42")


class TestWriteServiceCsv:
    def test_header_and_rows(self, tmp_path):
        records = parse_service_inventory(json.dumps([
            {"Name": "W3SVC", "DisplayName": "Web, Publishing", "StartName": "LocalSystem"},
        ]))
        path = write_service_csv(records, tmp_path / "services" / "services.csv")
        with path.open(encoding="utf-8", newline="") as f:
            rows = list(csv.reader(f))
        assert tuple(rows[0]) == CSV_COLUMNS
        assert rows[1][0] == "W3SVC"
        assert rows[1][1] == "Web, Publishing"
        assert rows[1][5] == "LocalSystem"
        assert rows[1][7] == ""
