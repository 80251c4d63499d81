"""Core utilities package.

This package contains pure utility functions with no external dependencies,
used by the front end for presenting sizes, paths, timestamps and ages.
"""

from venv_cleaner.core.formatting import (
    format_age,
    format_file_size,
    format_path_for_display,
    format_timestamp,
)

__all__ = [
    "format_age",
    "format_file_size",
    "format_path_for_display",
    "format_timestamp",
]
