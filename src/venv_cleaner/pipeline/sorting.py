"""Presentation ordering for report entries."""

from __future__ import annotations

from collections.abc import Callable, Iterable
from typing import Any

from venv_cleaner.domain import ReportEntry, SortKey

# (key function, natural direction is descending)
_SORT_FIELDS: dict[SortKey, tuple[Callable[[ReportEntry], Any], bool]] = {
    SortKey.PATH: (lambda e: str(e.record.path), False),
    SortKey.SIZE: (lambda e: e.record.size_bytes, True),
    SortKey.CREATED: (lambda e: e.record.created_at, True),
    SortKey.LAST_USED: (lambda e: e.record.last_used_at, True),
}


def sort_entries(
    entries: Iterable[ReportEntry], key: SortKey, reverse: bool = False
) -> list[ReportEntry]:
    """Return entries in display order.

    Size sorts largest first, created and last used sort newest first, and
    path sorts alphabetically. ``reverse`` flips the natural direction.
    The sort is stable, so ties keep traversal order.
    """
    key_func, descending = _SORT_FIELDS[key]
    return sorted(entries, key=key_func, reverse=descending != reverse)
