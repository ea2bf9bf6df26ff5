"""
Application settings domain model.

This module defines the settings that locate local storage, the remote
snapshot document and control logging and export defaults.
"""

from pathlib import Path
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from netcustomers.domain.models import HeaderStyle


class AppSettings(BaseModel):
    """
    Domain model for application settings.

    Loaded from netcustomers.json by the ConfigRepository; every value
    has a default so a missing file is a valid configuration.
    """

    model_config = ConfigDict(extra="ignore")

    data_dir: Path = Field(
        default=Path("data"),
        description="Directory holding the local SQLite document store"
    )
    database_name: str = Field(
        default="netcustomers.db",
        description="File name of the local SQLite document store"
    )
    remote_dir: Optional[Path] = Field(
        None,
        description="Directory used as the remote snapshot store (sync disabled when unset)"
    )
    remote_document_name: str = Field(
        default="net_customers_snapshot.json",
        description="Stable name of the remote snapshot document"
    )
    header_style: HeaderStyle = Field(
        default=HeaderStyle.PRIMARY,
        description="Column labels used for exports (primary, secondary or key)"
    )
    log_level: str = Field(default="INFO", description="Console log level")
    log_file: Optional[Path] = Field(None, description="Optional log file path")

    @field_validator("remote_document_name", "database_name")
    @classmethod
    def validate_file_name(cls, v: str) -> str:
        """File names must be plain names, not paths."""
        v = v.strip()
        if not v or "/" in v or "\\" in v:
            raise ValueError(f"Invalid file name: {v!r}")
        return v

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Normalize and check the logging level name."""
        level = v.strip().upper()
        if level not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ValueError(f"Unknown log level: {v}")
        return level

    @property
    def database_path(self) -> Path:
        """Full path of the local SQLite document store."""
        return self.data_dir / self.database_name
