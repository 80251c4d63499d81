"""Tests for core formatting utilities."""

import re
from datetime import datetime, timezone

import pytest

from venv_cleaner.core import (
    format_age,
    format_file_size,
    format_path_for_display,
    format_timestamp,
)


class TestFormatFileSize:
    """Tests for format_file_size."""

    @pytest.mark.parametrize(
        ("size_bytes", "expected"),
        [
            (0, "0 bytes"),
            (512, "512 bytes"),
            (1023, "1023 bytes"),
            (1024, "1.00 KB"),
            (1536, "1.50 KB"),
            (2 * 1024 * 1024, "2.00 MB"),
            (1024 * 1024 * 1024, "1.00 GB"),
            (int(2.5 * 1024**3), "2.50 GB"),
        ],
    )
    def test_units(self, size_bytes: int, expected: str) -> None:
        """Sizes use binary units with two decimals."""
        assert format_file_size(size_bytes) == expected


class TestFormatPathForDisplay:
    """Tests for format_path_for_display."""

    def test_short_path_unchanged(self) -> None:
        """Paths that fit are returned as is."""
        assert format_path_for_display("short", 10) == "short"

    def test_long_path_keeps_tail(self) -> None:
        """Long paths keep their end behind an ellipsis."""
        assert format_path_for_display("very/long/path/here", 10) == "...th/here"

    def test_result_fits(self) -> None:
        """The shortened path is exactly max_length long."""
        path = "/home/someone/projects/" + "x" * 80
        assert len(format_path_for_display(path, 40)) == 40

    def test_tiny_limit(self) -> None:
        """A limit too small for any tail gives just the ellipsis."""
        assert format_path_for_display("abcdefgh", 3) == "..."


class TestFormatTimestamp:
    """Tests for format_timestamp."""

    def test_local_time_format(self) -> None:
        """Timestamps are shown in local time without a zone."""
        value = datetime(2025, 7, 4, 15, 30, 5, tzinfo=timezone.utc)
        formatted = format_timestamp(value)

        assert re.fullmatch(r"\d{4}-\d{2}-\d{2} \d{2}:\d{2}:\d{2}", formatted)
        assert formatted == value.astimezone().strftime("%Y-%m-%d %H:%M:%S")


class TestFormatAge:
    """Tests for format_age."""

    @pytest.mark.parametrize(
        ("days", "expected"),
        [(0, "today"), (1, "1 day ago"), (2, "2 days ago"), (120, "120 days ago")],
    )
    def test_ages(self, days: int, expected: str) -> None:
        """Ages read naturally."""
        assert format_age(days) == expected
