"""Size and recency classification of target directories.

Thresholds are fixed. Recency is measured against "now" at the moment of
classification, not at scan time.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

from venv_cleaner.domain import (
    ClassificationTier,
    RecencyTier,
    SizeTier,
    TargetRecord,
)

MIB = 1024 * 1024
GIB = 1024 * MIB

# Below this a target is small
SMALL_SIZE_LIMIT = 100 * MIB

# Above this a target is large; exactly 1 GiB is still medium
LARGE_SIZE_LIMIT = GIB

# Elapsed days up to and including this value are recent
RECENT_DAYS = 30

# Elapsed days beyond this value are abandoned
ABANDONED_DAYS = 90


def size_tier(size_bytes: int) -> SizeTier:
    """Map a size in bytes to its size tier."""
    if size_bytes < SMALL_SIZE_LIMIT:
        return SizeTier.SMALL
    if size_bytes <= LARGE_SIZE_LIMIT:
        return SizeTier.MEDIUM
    return SizeTier.LARGE


def recency_tier(last_used_at: datetime, now: datetime) -> RecencyTier:
    """Map the time since last use to its recency tier.

    Timestamps in the future (clock skew) count as recent.
    """
    elapsed = now - last_used_at
    if elapsed <= timedelta(days=RECENT_DAYS):
        return RecencyTier.RECENT
    if elapsed <= timedelta(days=ABANDONED_DAYS):
        return RecencyTier.STALE
    return RecencyTier.ABANDONED


def _now_or_default(now: datetime | None) -> datetime:
    return now if now is not None else datetime.now(timezone.utc)


def classify(record: TargetRecord, now: datetime | None = None) -> ClassificationTier:
    """Classify a target by size and recency.

    Args:
        record: The target to classify.
        now: Reference time (defaults to the current UTC time).

    Returns:
        ClassificationTier with both tiers, the cleanup recommendation and
        the age in days.
    """
    now = _now_or_default(now)
    size = size_tier(record.size_bytes)
    recency = recency_tier(record.last_used_at, now)
    return ClassificationTier(
        size_tier=size,
        recency_tier=recency,
        recommend_cleanup=_recommend(size, recency),
        age_days=record.age_days(now),
    )


def _recommend(size: SizeTier, recency: RecencyTier) -> bool:
    return recency is RecencyTier.ABANDONED or size is SizeTier.LARGE


def recommend_cleanup(record: TargetRecord, now: datetime | None = None) -> bool:
    """True iff the target is abandoned or large."""
    return classify(record, now).recommend_cleanup
