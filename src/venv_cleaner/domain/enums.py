"""Domain enums for venv-cleaner.

This module contains the enums shared by the scanner, classifier, deletion
gate and pipeline orchestrator.
"""

from enum import Enum


class ScanMode(Enum):
    """How a pipeline run treats the targets it discovers.

    Exactly one mode applies per run:
    1. QUERY: report only, never touches the filesystem
    2. INTERACTIVE: ask for confirmation before each deletion (default)
    3. FORCE: delete every target without asking
    4. DRY_RUN: report what would be deleted without deleting
    """

    QUERY = "query"
    INTERACTIVE = "interactive"
    FORCE = "force"
    DRY_RUN = "dry_run"

    @property
    def acts(self) -> bool:
        """True if this mode reaches the deletion gate."""
        return self is not ScanMode.QUERY


class SizeTier(Enum):
    """Size bucket of a target directory."""

    SMALL = "small"  # < 100 MiB
    MEDIUM = "medium"  # 100 MiB .. 1 GiB
    LARGE = "large"  # > 1 GiB


class RecencyTier(Enum):
    """Recency bucket based on time since the last modification."""

    RECENT = "recent"  # <= 30 days
    STALE = "stale"  # 30 .. 90 days
    ABANDONED = "abandoned"  # > 90 days


class DeletionStatus(Enum):
    """Outcome of offering a target to the deletion gate."""

    SIMULATED = "simulated"  # dry-run, nothing touched
    DELETED = "deleted"
    DECLINED = "declined"  # user answered no
    PERMISSION_DENIED = "permission_denied"
    VANISHED = "vanished"  # removed or altered between scan and action
    PARTIAL = "partial"  # removal interrupted part way, needs manual check
    FAILED = "failed"  # removal failed before anything was removed


# Outcomes that must be named in the run summary
ISSUE_STATUSES = frozenset(
    {
        DeletionStatus.PERMISSION_DENIED,
        DeletionStatus.VANISHED,
        DeletionStatus.PARTIAL,
        DeletionStatus.FAILED,
    }
)


class RunStatus(Enum):
    """Overall result of a pipeline run, mapped to exit codes by the CLI."""

    SUCCESS = "success"
    WARNINGS = "warnings"
    FATAL = "fatal"


class SortKey(Enum):
    """Presentation sort order for report entries."""

    PATH = "path"
    SIZE = "size"
    CREATED = "created"
    LAST_USED = "last_used"


class PipelineState(Enum):
    """States of the pipeline orchestrator."""

    IDLE = "idle"
    SCANNING = "scanning"
    CLASSIFYING = "classifying"
    REPORTING = "reporting"
    AWAITING_CONFIRMATION = "awaiting_confirmation"
    ACTING = "acting"
    DONE = "done"
