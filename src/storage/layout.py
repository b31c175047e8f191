# src/storage/layout.py — v1
"""Run directory structure definition.

    {backup_root}/
        {run_id}/                      staging directory, one per run
            {run_id}.log               audit log
            {run_id}_transcript.log    transcript
            run_summary.json           capture task statuses
            {task output subdir}/...   one subdirectory per capture task
            {run_id}.zip.{algorithm}   checksum manifest (after archiving)

    {archive_dir}/{run_id}.zip         transient archive, removed after publish
"""

from __future__ import annotations

from pathlib import Path

SUMMARY_FILE = "run_summary.json"
TRANSCRIPT_SUFFIX = "_transcript.log"
ARCHIVE_SUFFIX = ".zip"


def run_dir(backup_root: Path, run_id: str) -> Path:
    """Return the staging directory of a run."""
    return backup_root / run_id


def log_path(run_path: Path, run_id: str) -> Path:
    return run_path / f"{run_id}.log"


def transcript_path(run_path: Path, run_id: str) -> Path:
    return run_path / f"{run_id}{TRANSCRIPT_SUFFIX}"


def summary_path(run_path: Path) -> Path:
    return run_path / SUMMARY_FILE


def task_output_dir(run_path: Path, subdir: str) -> Path:
    return run_path.joinpath(*subdir.split("/"))


def archive_path(archive_root: Path, run_id: str) -> Path:
    return archive_root / f"{run_id}{ARCHIVE_SUFFIX}"


def checksum_path(directory: Path, archive_name: str, algorithm: str) -> Path:
    """Manifest file for an archive: ``<archive name>.<algorithm>``."""
    return directory / f"{archive_name}.{algorithm.lower()}"


def ensure_run_directories(run_path: Path, subdirs: list[str]) -> None:
    """Create the staging directory and every task output subdirectory."""
    run_path.mkdir(parents=True, exist_ok=True)
    for subdir in subdirs:
        task_output_dir(run_path, subdir).mkdir(parents=True, exist_ok=True)
