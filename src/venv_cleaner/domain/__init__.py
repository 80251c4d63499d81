"""Domain models, enums and exceptions for venv-cleaner.

This package contains the types shared by every stage of the pipeline:

- Domain models: TargetRecord, ScanConfig, ClassificationTier,
  DeletionOutcome, ReportEntry, RunSummary, PipelineResult
- Domain enums: ScanMode, SizeTier, RecencyTier, DeletionStatus, RunStatus,
  SortKey, PipelineState
- Exceptions: InvalidStartPathError, InvalidConfigurationError,
  MetadataUnavailableError, TraversalError

Usage:
    from venv_cleaner.domain import ScanConfig, TargetRecord
    from venv_cleaner.domain import ScanMode, DeletionStatus
"""

from .enums import (
    ISSUE_STATUSES,
    DeletionStatus,
    PipelineState,
    RecencyTier,
    RunStatus,
    ScanMode,
    SizeTier,
    SortKey,
)
from .exceptions import (
    InvalidConfigurationError,
    InvalidStartPathError,
    MetadataUnavailableError,
    TraversalError,
    VenvCleanerError,
)
from .models import (
    ClassificationTier,
    DeletionOutcome,
    PipelineResult,
    ReportEntry,
    RunSummary,
    ScanConfig,
    TargetRecord,
    resolve_mode,
    validate_start_path,
)

__all__ = [
    # Models
    "ClassificationTier",
    "DeletionOutcome",
    "PipelineResult",
    "ReportEntry",
    "RunSummary",
    "ScanConfig",
    "TargetRecord",
    "resolve_mode",
    "validate_start_path",
    # Enums
    "ISSUE_STATUSES",
    "DeletionStatus",
    "PipelineState",
    "RecencyTier",
    "RunStatus",
    "ScanMode",
    "SizeTier",
    "SortKey",
    # Exceptions
    "InvalidConfigurationError",
    "InvalidStartPathError",
    "MetadataUnavailableError",
    "TraversalError",
    "VenvCleanerError",
]
