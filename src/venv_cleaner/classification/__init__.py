"""Target classification module.

Buckets discovered virtual environments by size and recency and flags the
ones worth cleaning up.
"""

from .classifier import (
    ABANDONED_DAYS,
    LARGE_SIZE_LIMIT,
    RECENT_DAYS,
    SMALL_SIZE_LIMIT,
    classify,
    recency_tier,
    recommend_cleanup,
    size_tier,
)

__all__ = [
    # Thresholds
    "SMALL_SIZE_LIMIT",
    "LARGE_SIZE_LIMIT",
    "RECENT_DAYS",
    "ABANDONED_DAYS",
    # Functions
    "classify",
    "recency_tier",
    "recommend_cleanup",
    "size_tier",
]
