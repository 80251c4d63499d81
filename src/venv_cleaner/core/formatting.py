"""Formatting utilities.

This module provides pure functions for formatting data for display.
These utilities are used across the front end for consistent presentation.
"""

from __future__ import annotations

from datetime import datetime

_KB = 1024
_MB = _KB * 1024
_GB = _MB * 1024


def format_file_size(size_bytes: int) -> str:
    """Format a size in bytes in human-readable form.

    Args:
        size_bytes: Size in bytes.

    Returns:
        Formatted string (e.g., "512 bytes", "1.50 KB", "2.00 MB", "1.00 GB").
    """
    if size_bytes >= _GB:
        return f"{size_bytes / _GB:.2f} GB"
    elif size_bytes >= _MB:
        return f"{size_bytes / _MB:.2f} MB"
    elif size_bytes >= _KB:
        return f"{size_bytes / _KB:.2f} KB"
    else:
        return f"{size_bytes} bytes"


def format_path_for_display(path: str, max_length: int = 60) -> str:
    """Shorten a path from the left so it fits in max_length characters.

    Args:
        path: Path to display.
        max_length: Maximum length of the result, including the "..."
            prefix.

    Returns:
        The path unchanged if it fits, else "..." followed by its tail
        (e.g., "very/long/path/here" at 10 becomes "...th/here").
    """
    if len(path) <= max_length:
        return path
    keep = max(max_length - 3, 0)
    return "..." + (path[-keep:] if keep else "")


def format_timestamp(value: datetime) -> str:
    """Format a timestamp in local time as "YYYY-MM-DD HH:MM:SS"."""
    return value.astimezone().strftime("%Y-%m-%d %H:%M:%S")


def format_age(days: int) -> str:
    """Format an age in whole days (e.g., "today", "1 day ago", "45 days ago")."""
    if days <= 0:
        return "today"
    if days == 1:
        return "1 day ago"
    return f"{days} days ago"
