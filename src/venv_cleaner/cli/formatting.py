"""Display utilities for consistent coloring in CLI output.

These are CLI-specific and map classification tiers and deletion
statuses to terminal colors understood by click.style().
"""

import click

from venv_cleaner.domain import DeletionStatus, RecencyTier, SizeTier

SIZE_TIER_COLORS: dict[SizeTier, str | None] = {
    SizeTier.SMALL: None,
    SizeTier.MEDIUM: "yellow",
    SizeTier.LARGE: "red",
}

RECENCY_TIER_COLORS: dict[RecencyTier, str | None] = {
    RecencyTier.RECENT: "green",
    RecencyTier.STALE: None,
    RecencyTier.ABANDONED: "red",
}

DELETION_STATUS_COLORS: dict[DeletionStatus, str] = {
    DeletionStatus.DELETED: "green",
    DeletionStatus.SIMULATED: "cyan",
    DeletionStatus.DECLINED: "bright_black",
    DeletionStatus.PERMISSION_DENIED: "red",
    DeletionStatus.VANISHED: "yellow",
    DeletionStatus.PARTIAL: "red",
    DeletionStatus.FAILED: "red",
}

DELETION_STATUS_LABELS: dict[DeletionStatus, str] = {
    DeletionStatus.DELETED: "Deleted",
    DeletionStatus.SIMULATED: "Would delete",
    DeletionStatus.DECLINED: "Skipped",
    DeletionStatus.PERMISSION_DENIED: "Permission denied",
    DeletionStatus.VANISHED: "Vanished",
    DeletionStatus.PARTIAL: "Partially deleted",
    DeletionStatus.FAILED: "Failed",
}


def style_size(text: str, tier: SizeTier) -> str:
    """Color a size string by its size tier."""
    return click_style(text, SIZE_TIER_COLORS.get(tier))


def style_recency(text: str, tier: RecencyTier) -> str:
    """Color a timestamp or age string by its recency tier."""
    return click_style(text, RECENCY_TIER_COLORS.get(tier))


def format_deletion_status(status: DeletionStatus) -> str:
    """Return the colored display label for a deletion status."""
    return click_style(
        DELETION_STATUS_LABELS.get(status, status.value),
        DELETION_STATUS_COLORS.get(status),
    )


def click_style(text: str, color: str | None) -> str:
    """Apply a foreground color, or return text unchanged for None."""
    if color is None:
        return text
    return click.style(text, fg=color)
