# src/core/models.py — v1
"""Shared Pydantic domain models used across modules.

No module redefines these types — all imports come from core.models.
"""

from __future__ import annotations

from datetime import datetime
from pathlib import Path
from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from confvault.core.errors import TaskStateError


# === RUN CONTEXT ===


class RunContext(BaseModel):
    """Identity and paths of one backup run. Immutable once built."""

    model_config = ConfigDict(frozen=True)

    run_id: str
    host: str
    backup_root: Path
    staging_dir: Path
    log_path: Path
    transcript_path: Path
    created_at: datetime

    @property
    def archive_name(self) -> str:
        return f"{self.run_id}.zip"


# === CAPTURE TASKS ===

TaskStatus = Literal["pending", "succeeded", "failed"]


class CaptureTask(BaseModel):
    """One unit of artifact collection. Terminal status is write-once."""

    name: str
    output_dir: Path
    status: TaskStatus = "pending"
    outputs: list[Path] = Field(default_factory=list)
    error: str | None = None
    started_at: datetime | None = None
    completed_at: datetime | None = None

    @property
    def is_terminal(self) -> bool:
        return self.status != "pending"

    def mark_succeeded(self, outputs: list[Path], at: datetime) -> None:
        self._ensure_pending()
        self.outputs = list(outputs)
        self.status = "succeeded"
        self.completed_at = at

    def mark_failed(self, error: str, at: datetime) -> None:
        self._ensure_pending()
        self.error = error
        self.status = "failed"
        self.completed_at = at

    def _ensure_pending(self) -> None:
        if self.is_terminal:
            raise TaskStateError(
                f"Task '{self.name}' already {self.status}; terminal status is write-once"
            )


class TaskSucceeded(BaseModel):
    """A capture action finished and produced ``outputs``."""

    kind: Literal["succeeded"] = "succeeded"
    task: str
    outputs: list[Path]


class TaskFailed(BaseModel):
    """A capture action raised; ``error`` carries the underlying message."""

    kind: Literal["failed"] = "failed"
    task: str
    error: str


TaskOutcome = Annotated[Union[TaskSucceeded, TaskFailed], Field(discriminator="kind")]


class ServiceRecord(BaseModel):
    """One row of the host service inventory."""

    name: str
    display_name: str = ""
    description: str = ""
    state: str = ""
    start_mode: str = ""
    account: str = ""
    executable_path: str = ""
    process_id: int | None = None
    exit_code: int | None = None


# === ARCHIVE / RUN RESULT ===


class ArchiveInfo(BaseModel):
    """The compressed artifact built from a run's staging directory."""

    path: Path
    size_bytes: int
    created_at: datetime


class BackupRunResult(BaseModel):
    """Summary of one backup run, returned by the orchestrator."""

    context: RunContext
    tasks: list[CaptureTask]
    archive: ArchiveInfo | None = None
    manifest_path: Path | None = None
    published: list[str] = Field(default_factory=list)
    status: Literal["completed", "failed"] = "completed"
    error: str | None = None
    completed_at: datetime | None = None

    @property
    def succeeded_tasks(self) -> list[str]:
        return [t.name for t in self.tasks if t.status == "succeeded"]

    @property
    def failed_tasks(self) -> list[str]:
        return [t.name for t in self.tasks if t.status == "failed"]


# === VERIFICATION ===

VerificationStatus = Literal["success", "mismatch", "error"]


class ManifestEntry(BaseModel):
    """One parsed line of a checksum manifest."""

    model_config = ConfigDict(frozen=True)

    expected_hash: str
    algorithm: str
    file_name: str
    line_number: int = 0

    @field_validator("expected_hash")
    @classmethod
    def _normalize_hash(cls, v: str) -> str:
        return v.upper()


class VerificationResult(BaseModel):
    """Outcome of checking one manifest entry."""

    manifest_path: Path
    archive_path: Path
    algorithm: str
    expected_hash: str
    actual_hash: str | None = None
    match: bool
    status: VerificationStatus
    message: str = ""

    @model_validator(mode="after")
    def _match_iff_success(self) -> VerificationResult:
        if self.match != (self.status == "success"):
            raise ValueError(
                f"match={self.match} is inconsistent with status={self.status!r}"
            )
        return self


class ManifestReport(BaseModel):
    """All results for one manifest file, or the reason it could not be parsed."""

    manifest_path: Path
    results: list[VerificationResult] = Field(default_factory=list)
    parse_error: str | None = None

    @property
    def ok(self) -> bool:
        return (
            self.parse_error is None
            and bool(self.results)
            and all(r.status == "success" for r in self.results)
        )


class VerificationReport(BaseModel):
    """Aggregated verification across every discovered manifest."""

    algorithm: str
    manifests: list[ManifestReport] = Field(default_factory=list)

    @property
    def results(self) -> list[VerificationResult]:
        return [r for m in self.manifests for r in m.results]

    def count(self, status: VerificationStatus) -> int:
        return sum(1 for r in self.results if r.status == status)

    @property
    def parse_errors(self) -> int:
        return sum(1 for m in self.manifests if m.parse_error is not None)

    @property
    def exit_code(self) -> int:
        """0 iff there is at least one result, no manifest failed to parse,
        and every result is a success."""
        results = self.results
        if not results or self.parse_errors:
            return 1
        return 0 if all(r.status == "success" for r in results) else 1
