# tests/unit/logging/test_unit_handlers.py — v1
"""Tests for logging/handlers.py — durable audit handler and rotating handler."""

from __future__ import annotations

import logging
from unittest.mock import patch

import pytest

from confvault.logging.handlers import DurableFileHandler, _parse_size, create_rotating_handler


class TestParseSize:
    def test_mb(self):
        assert _parse_size("10MB") == 10 * 1024 * 1024

    def test_kb(self):
        assert _parse_size("512KB") == 512 * 1024

    def test_case_insensitive(self):
        assert _parse_size("1gb") == 1024**3

    def test_invalid_format(self):
        with pytest.raises(ValueError, match="Invalid size"):
            _parse_size("10bytes")


class TestCreateRotatingHandler:
    def test_creates_handler(self, tmp_path):
        handler = create_rotating_handler(str(tmp_path / "app.log"), rotation="1MB", retention=5)
        try:
            assert handler.maxBytes == 1024 * 1024
            assert handler.backupCount == 5
        finally:
            handler.close()


class TestDurableFileHandler:
    def test_creates_parent_and_appends(self, tmp_path):
        path = tmp_path / "nested" / "audit.log"
        path.parent.mkdir()
        path.write_text("existing\n", encoding="utf-8")
        handler = DurableFileHandler(path)
        handler.setFormatter(logging.Formatter("%(message)s"))
        try:
            handler.emit(logging.makeLogRecord({"msg": "line", "levelno": logging.INFO}))
        finally:
            handler.close()
        assert path.read_text(encoding="utf-8") == "existing\nline\n"

    def test_fsync_per_record(self, tmp_path):
        handler = DurableFileHandler(tmp_path / "audit.log")
        try:
            with patch("confvault.logging.handlers.os.fsync") as fsync:
                handler.emit(logging.makeLogRecord({"msg": "a"}))
                handler.emit(logging.makeLogRecord({"msg": "b"}))
            assert fsync.call_count == 2
        finally:
            handler.close()
