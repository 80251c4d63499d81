"""Pydantic models for validating the TOML config file.

Unknown keys are rejected so that typos in the config file surface as
errors rather than being silently ignored.
"""

from pathlib import Path
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

from venv_cleaner.domain import SortKey


class LoggingSectionModel(BaseModel):
    """Pydantic model for the [logging] section."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    level: Literal["debug", "info", "warning", "error"] | None = None
    file: Path | None = None
    format: Literal["text", "json"] | None = None
    include_stderr: bool | None = None
    max_bytes: int | None = Field(default=None, gt=0)
    backup_count: int | None = Field(default=None, ge=0)

    @field_validator("level", "format", mode="before")
    @classmethod
    def normalize_case(cls, v: object) -> object:
        """Accept level and format names in any case."""
        if isinstance(v, str):
            return v.casefold()
        return v

    @field_validator("file")
    @classmethod
    def expand_file(cls, v: Path | None) -> Path | None:
        """Expand ~ in the log file path."""
        if v is not None:
            return v.expanduser()
        return v


class ScanSectionModel(BaseModel):
    """Pydantic model for the [scan] section."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    recursive: bool | None = None
    sort: SortKey | None = None
    reverse: bool | None = None


class ConfigFileModel(BaseModel):
    """Pydantic model for the whole config file."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    logging: LoggingSectionModel = Field(default_factory=LoggingSectionModel)
    scan: ScanSectionModel = Field(default_factory=ScanSectionModel)
