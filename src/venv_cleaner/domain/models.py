"""Domain models for venv-cleaner.

This module contains the records that flow through the pipeline: discovered
targets, their classification, deletion outcomes and the run summary.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path

from .enums import (
    ISSUE_STATUSES,
    DeletionStatus,
    RecencyTier,
    RunStatus,
    ScanMode,
    SizeTier,
)
from .exceptions import InvalidConfigurationError, InvalidStartPathError

SECONDS_PER_DAY = 24 * 60 * 60


@dataclass(frozen=True)
class TargetRecord:
    """A discovered virtual environment directory.

    ``last_used_at`` is the newest modification time seen while measuring
    the directory. It is a proxy for use, not an activation signal, and is
    not guaranteed to be later than ``created_at``.
    """

    path: Path
    size_bytes: int
    created_at: datetime
    last_used_at: datetime
    created_is_approximate: bool = False
    unreadable_entries: int = 0
    has_venv_markers: bool = False

    @property
    def location(self) -> Path:
        """Directory that contains the virtual environment."""
        return self.path.parent

    @property
    def project_name(self) -> str:
        """Name of the project directory holding the virtual environment."""
        return self.path.parent.name

    def age_days(self, now: datetime) -> int:
        """Whole days since last use, clamped at zero."""
        elapsed = (now - self.last_used_at).total_seconds()
        return max(0, int(elapsed // SECONDS_PER_DAY))


@dataclass(frozen=True)
class ClassificationTier:
    """Display tier and recommendation derived from a TargetRecord."""

    size_tier: SizeTier
    recency_tier: RecencyTier
    recommend_cleanup: bool
    age_days: int


@dataclass(frozen=True)
class DeletionOutcome:
    """Result of offering one target to the deletion gate."""

    path: Path
    status: DeletionStatus
    bytes_reclaimed: int = 0
    message: str = ""

    @property
    def is_issue(self) -> bool:
        """True if the outcome needs the user's attention."""
        return self.status in ISSUE_STATUSES


@dataclass(frozen=True)
class ReportEntry:
    """One row of pipeline output handed to front ends."""

    record: TargetRecord
    tier: ClassificationTier
    outcome: DeletionOutcome | None = None


def resolve_mode(
    *, query: bool = False, force: bool = False, dry_run: bool = False
) -> ScanMode:
    """Resolve CLI-style mode flags into a single ScanMode.

    Args:
        query: Report only.
        force: Delete without confirmation.
        dry_run: Simulate deletions.

    Returns:
        The resolved mode. ``force`` together with ``dry_run`` resolves to
        DRY_RUN so that a dry run never deletes anything.

    Raises:
        InvalidConfigurationError: If ``query`` is combined with a flag
            that implies deletion.
    """
    if query and force:
        raise InvalidConfigurationError("--query cannot be combined with --force")
    if query and dry_run:
        raise InvalidConfigurationError("--query cannot be combined with --dry-run")
    if dry_run:
        return ScanMode.DRY_RUN
    if force:
        return ScanMode.FORCE
    if query:
        return ScanMode.QUERY
    return ScanMode.INTERACTIVE


def validate_start_path(path: Path) -> Path:
    """Check that a starting path can be scanned.

    Args:
        path: Candidate starting directory.

    Returns:
        The absolute, resolved path.

    Raises:
        InvalidStartPathError: If the path is missing, not a directory,
            or not readable.
    """
    if not path.exists():
        raise InvalidStartPathError(path, "directory does not exist")
    if not path.is_dir():
        raise InvalidStartPathError(path, "path is not a directory")
    if not os.access(path, os.R_OK | os.X_OK):
        raise InvalidStartPathError(path, "directory is not readable")
    return path.resolve()


@dataclass(frozen=True)
class ScanConfig:
    """Immutable parameters for one pipeline run."""

    start_path: Path
    recursive: bool = False
    mode: ScanMode = ScanMode.INTERACTIVE
    verbosity: int = 0

    @classmethod
    def create(
        cls,
        start_path: Path | str | None = None,
        *,
        recursive: bool = False,
        query: bool = False,
        force: bool = False,
        dry_run: bool = False,
        verbosity: int = 0,
    ) -> ScanConfig:
        """Build a validated ScanConfig from front-end flags.

        Flag consistency is checked before the filesystem is touched.

        Args:
            start_path: Directory to search (current directory if None).
            recursive: Descend into subdirectories.
            query: Report only.
            force: Delete without confirmation.
            dry_run: Simulate deletions.
            verbosity: Verbosity level (0 = normal).

        Raises:
            InvalidConfigurationError: For inconsistent flags.
            InvalidStartPathError: If the start path cannot be scanned.
        """
        mode = resolve_mode(query=query, force=force, dry_run=dry_run)
        if verbosity < 0:
            raise InvalidConfigurationError(
                f"verbosity must be >= 0, got {verbosity}"
            )
        path = Path(start_path) if start_path is not None else Path.cwd()
        return cls(
            start_path=validate_start_path(path.expanduser()),
            recursive=recursive,
            mode=mode,
            verbosity=verbosity,
        )


@dataclass
class RunSummary:
    """Aggregate result of a pipeline run."""

    mode: ScanMode
    start_path: Path
    targets_found: int = 0
    total_bytes: int = 0
    recommended: int = 0
    deleted: int = 0
    simulated: int = 0
    declined: int = 0
    permission_denied: int = 0
    vanished: int = 0
    partial: int = 0
    failed: int = 0
    bytes_reclaimed: int = 0
    bytes_simulated: int = 0
    walk_warnings: list[tuple[str, str]] = field(default_factory=list)
    issues: list[DeletionOutcome] = field(default_factory=list)
    fatal_error: str | None = None
    interrupted: bool = False
    elapsed_seconds: float = 0.0

    def record_outcome(self, outcome: DeletionOutcome) -> None:
        """Count a deletion outcome."""
        status = outcome.status
        if status is DeletionStatus.DELETED:
            self.deleted += 1
            self.bytes_reclaimed += outcome.bytes_reclaimed
        elif status is DeletionStatus.SIMULATED:
            self.simulated += 1
            self.bytes_simulated += outcome.bytes_reclaimed
        elif status is DeletionStatus.DECLINED:
            self.declined += 1
        elif status is DeletionStatus.PERMISSION_DENIED:
            self.permission_denied += 1
        elif status is DeletionStatus.VANISHED:
            self.vanished += 1
        elif status is DeletionStatus.PARTIAL:
            self.partial += 1
        elif status is DeletionStatus.FAILED:
            self.failed += 1

        if outcome.is_issue:
            self.issues.append(outcome)

    @property
    def status(self) -> RunStatus:
        """Overall status: fatal, completed with warnings, or success."""
        if self.fatal_error:
            return RunStatus.FATAL
        if self.walk_warnings or self.issues:
            return RunStatus.WARNINGS
        return RunStatus.SUCCESS


@dataclass
class PipelineResult:
    """Ordered report entries plus the final summary."""

    entries: list[ReportEntry]
    summary: RunSummary
