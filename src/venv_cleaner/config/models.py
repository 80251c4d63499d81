"""Configuration data models for venv-cleaner.

These dataclasses hold the effective configuration after the config file
and CLI overrides have been merged.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from venv_cleaner.domain import SortKey

VALID_LOG_LEVELS = frozenset({"debug", "info", "warning", "error"})
VALID_LOG_FORMATS = frozenset({"text", "json"})


@dataclass
class LoggingConfig:
    """Configuration for structured logging."""

    # Log level: debug, info, warning, error
    level: str = "warning"

    # Log file path (None = stderr only)
    file: Path | None = None

    # Log format: text or json
    format: str = "text"

    # Also log to stderr when file is set
    include_stderr: bool = False

    # Rotation threshold in bytes (default 10MB)
    max_bytes: int = 10_485_760

    # Number of rotated files to keep
    backup_count: int = 5

    def __post_init__(self) -> None:
        """Validate configuration."""
        if self.level.lower() not in VALID_LOG_LEVELS:
            raise ValueError(
                f"level must be one of {sorted(VALID_LOG_LEVELS)}, got {self.level}"
            )
        if self.format.lower() not in VALID_LOG_FORMATS:
            raise ValueError(
                f"format must be one of {sorted(VALID_LOG_FORMATS)}, "
                f"got {self.format}"
            )
        if self.max_bytes <= 0:
            raise ValueError(f"max_bytes must be positive, got {self.max_bytes}")
        if self.backup_count < 0:
            raise ValueError(
                f"backup_count must be non-negative, got {self.backup_count}"
            )


@dataclass(frozen=True)
class ScanDefaults:
    """Front-end defaults for the scan command."""

    recursive: bool = False
    sort: SortKey = SortKey.SIZE
    reverse: bool = False


@dataclass
class CleanerConfig:
    """Main configuration container."""

    logging: LoggingConfig = field(default_factory=LoggingConfig)
    scan: ScanDefaults = field(default_factory=ScanDefaults)
