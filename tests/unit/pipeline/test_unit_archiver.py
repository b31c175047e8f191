# tests/unit/pipeline/test_unit_archiver.py — v1
"""Tests for pipeline/archiver.py."""

from __future__ import annotations

import zipfile
from unittest.mock import patch

import pytest

from confvault.core.errors import ArchiveError
from confvault.pipeline.archiver import create_archive

RUN_ID = "WEB01_20261017_040000"


@pytest.fixture
def staging(tmp_path):
    run = tmp_path / "backups" / RUN_ID
    (run / "firewall").mkdir(parents=True)
    (run / "firewall" / "firewall_rules.csv").write_text("Name\nAllow80\n", encoding="utf-8")
    (run / "webtier" / "state_backup").mkdir(parents=True)
    (run / f"{RUN_ID}.log").write_text("log\n", encoding="utf-8")
    return run


class TestCreateArchive:
    def test_entries_rooted_at_run_dir(self, staging, tmp_path):
        info = create_archive(staging, tmp_path / "archives" / f"{RUN_ID}.zip")
        assert info.path.exists()
        assert info.size_bytes == info.path.stat().st_size
        with zipfile.ZipFile(info.path) as zf:
            names = zf.namelist()
            assert f"{RUN_ID}/firewall/firewall_rules.csv" in names
            assert f"{RUN_ID}/{RUN_ID}.log" in names
            assert f"{RUN_ID}/webtier/state_backup/" in names
            assert zf.read(f"{RUN_ID}/firewall/firewall_rules.csv") == b"Name\nAllow80\n"
            assert zf.getinfo(f"{RUN_ID}/{RUN_ID}.log").compress_type == zipfile.ZIP_DEFLATED

    def test_overwrites_existing(self, staging, tmp_path):
        target = tmp_path / f"{RUN_ID}.zip"
        target.write_bytes(b"stale")
        create_archive(staging, target)
        assert zipfile.is_zipfile(target)

    def test_missing_staging(self, tmp_path):
        with pytest.raises(ArchiveError, match="does not exist"):
            create_archive(tmp_path / "missing", tmp_path / "a.zip")

    def test_archive_inside_staging(self, staging):
        with pytest.raises(ArchiveError, match="must not be inside"):
            create_archive(staging, staging / "self.zip")

    def test_failure_removes_partial(self, staging, tmp_path):
        target = tmp_path / f"{RUN_ID}.zip"
        with patch("zipfile.ZipFile.write", side_effect=OSError("disk full")):
            with pytest.raises(ArchiveError, match="disk full"):
                create_archive(staging, target)
        assert not target.exists()
