# src/config/settings.py — v1
"""Typed configuration loaded from .env via pydantic-settings.

Single source of truth for all deployment-specific settings. Backup-run
parameters default to empty so the verify command can load settings without
them; preflight rejects empty ones before a run starts.
"""

from __future__ import annotations

from pathlib import Path
from typing import Literal

from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from confvault.core.errors import ConfigurationError
from confvault.manifest.digest import DEFAULT_ALGORITHM, SUPPORTED_ALGORITHMS

# Parameters every backup run needs; checked by preflight.
REQUIRED_BACKUP_FIELDS: tuple[str, ...] = (
    "backup_root",
    "rule_module_path",
    "config_file_path",
    "network_destination",
)


class Settings(BaseSettings):
    """Application settings loaded from .env file."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # === Backup run parameters ===
    backup_root: str = ""
    rule_module_path: str = ""
    config_file_path: str = ""
    network_destination: str = ""

    # === Staging / archive ===
    archive_dir: str = ""
    min_free_bytes: int = 2 * 1024**3
    checksum_algorithm: str = DEFAULT_ALGORITHM

    # === Host commands ===
    command_timeout_seconds: int = 600
    powershell_executable: str = "powershell.exe"
    rule_export_cmdlet: str = "Export-FirewallRules"
    appcmd_path: str = r"C:\Windows\System32\inetsrv\appcmd.exe"
    web_config_categories: str = "site,apppool"
    web_state_backup_root: str = r"C:\Windows\System32\inetsrv\backup"

    # === S3 destination (NETWORK_DESTINATION=s3://bucket/prefix) ===
    destination_s3_region: str = ""
    destination_s3_endpoint_url: str = ""

    # === Logging ===
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    log_format: Literal["json", "text"] = "text"
    log_file: str = ""
    log_rotation: str = "10MB"
    log_retention: int = 30

    # --- Validators ---

    @field_validator(
        "backup_root", "rule_module_path", "config_file_path", "network_destination",
    )
    @classmethod
    def strip_paths(cls, v: str) -> str:
        return v.strip()

    @field_validator("checksum_algorithm")
    @classmethod
    def check_algorithm(cls, v: str) -> str:
        name = v.strip().lower()
        if name not in SUPPORTED_ALGORITHMS:
            raise ValueError(f"must be one of {', '.join(SUPPORTED_ALGORITHMS)}")
        return name

    @model_validator(mode="after")
    def validate_config_consistency(self) -> Settings:
        """Validate numeric bounds and list fields."""
        errors: list[str] = []

        if self.min_free_bytes <= 0:
            errors.append("MIN_FREE_BYTES must be > 0")

        if self.command_timeout_seconds <= 0:
            errors.append("COMMAND_TIMEOUT_SECONDS must be > 0")

        if not self.web_config_categories_list:
            errors.append("WEB_CONFIG_CATEGORIES must name at least one category")

        if errors:
            raise ConfigurationError("; ".join(errors))

        return self

    # --- Helpers ---

    @property
    def web_config_categories_list(self) -> list[str]:
        """Parse comma-separated web-tier configuration categories."""
        return [c.strip() for c in self.web_config_categories.split(",") if c.strip()]

    @property
    def missing_backup_fields(self) -> list[str]:
        """Names of required backup parameters that are empty."""
        return [name for name in REQUIRED_BACKUP_FIELDS if not getattr(self, name)]

    @property
    def archive_path_root(self) -> Path | None:
        return Path(self.archive_dir).expanduser() if self.archive_dir else None


def load_settings(**overrides: object) -> Settings:
    """Load settings from .env with optional overrides.

    Args:
        **overrides: Field-level overrides (for testing or CLI flags).

    Returns:
        Validated Settings instance.

    Raises:
        ConfigurationError: If configuration is internally inconsistent.
    """
    return Settings(**overrides)  # type: ignore[arg-type]
