"""Filesystem probe for virtual environment directories.

Answers three questions about a path: is it a target directory, how big is
it and when was it last touched, and when was it created. Symbolic links are
never followed.
"""

from __future__ import annotations

import logging
import os
import stat
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path

from venv_cleaner.domain import MetadataUnavailableError, TargetRecord

logger = logging.getLogger(__name__)

# Reserved directory name that marks a virtual environment
VENV_DIR_NAME = ".venv"

# Entries commonly found inside a virtual environment
VENV_MARKERS = ("bin", "Scripts", "lib", "include", "pyvenv.cfg")
MIN_VENV_MARKERS = 2


@dataclass(frozen=True)
class Measurement:
    """Result of measuring a directory tree."""

    size_bytes: int
    latest_mtime: float
    oldest_mtime: float
    unreadable_entries: int = 0


def is_target(entry: os.DirEntry | Path) -> bool:
    """Check whether an entry is a virtual environment directory.

    Args:
        entry: Directory entry from os.scandir() or a Path.

    Returns:
        True iff the entry is a real directory (not a symlink) whose name
        is exactly ``.venv``.
    """
    if entry.name != VENV_DIR_NAME:
        return False
    try:
        if isinstance(entry, Path):
            return stat.S_ISDIR(entry.lstat().st_mode)
        return entry.is_dir(follow_symlinks=False)
    except OSError:
        return False


def measure(path: Path) -> Measurement:
    """Walk a directory tree and total its size.

    Sizes of regular files are summed; symlinks are neither followed nor
    counted. Modification times of the directory itself, its subdirectories
    and its files all contribute to the newest/oldest timestamps.

    Args:
        path: Directory to measure.

    Returns:
        Measurement with size, newest and oldest mtime, and the number of
        entries that could not be read.

    Raises:
        OSError: If ``path`` itself cannot be stat'ed.
    """
    root_stat = os.stat(path, follow_symlinks=False)
    total_size = 0
    latest = root_stat.st_mtime
    oldest = root_stat.st_mtime
    unreadable = 0

    stack = [os.fspath(path)]
    while stack:
        current = stack.pop()
        try:
            with os.scandir(current) as it:
                entries = list(it)
        except OSError as e:
            logger.warning("Skipping unreadable directory %s: %s", current, e)
            unreadable += 1
            continue

        for entry in entries:
            try:
                entry_stat = entry.stat(follow_symlinks=False)
            except OSError as e:
                logger.warning("Skipping unreadable entry %s: %s", entry.path, e)
                unreadable += 1
                continue

            mode = entry_stat.st_mode
            if stat.S_ISLNK(mode):
                continue

            mtime = entry_stat.st_mtime
            if mtime > latest:
                latest = mtime
            if mtime < oldest:
                oldest = mtime

            if stat.S_ISDIR(mode):
                stack.append(entry.path)
            elif stat.S_ISREG(mode):
                total_size += entry_stat.st_size

    if unreadable:
        logger.debug("%d unreadable entries under %s", unreadable, path)

    return Measurement(
        size_bytes=total_size,
        latest_mtime=latest,
        oldest_mtime=oldest,
        unreadable_entries=unreadable,
    )


def creation_time(path: Path) -> float:
    """Get the creation time of a path as a Unix timestamp.

    Raises:
        MetadataUnavailableError: If the platform or filesystem does not
            expose a birth time (for example most Linux setups).
        OSError: If the path cannot be stat'ed.
    """
    path_stat = os.stat(path, follow_symlinks=False)
    birthtime = getattr(path_stat, "st_birthtime", None)
    if birthtime is None:
        raise MetadataUnavailableError(path)
    return birthtime


def has_venv_markers(path: Path) -> bool:
    """Check for the usual layout of a virtual environment.

    Returns:
        True if at least two of bin, Scripts, lib, include and pyvenv.cfg
        exist inside ``path``.
    """
    found = sum(1 for name in VENV_MARKERS if (path / name).exists())
    return found >= MIN_VENV_MARKERS


def _to_datetime(timestamp: float) -> datetime:
    return datetime.fromtimestamp(timestamp, tz=timezone.utc)


def probe_target(path: Path) -> TargetRecord:
    """Build a TargetRecord for a virtual environment directory.

    When creation time is unavailable, the oldest modification time seen
    during measurement is used and the record is flagged as approximate.

    Args:
        path: Path to the ``.venv`` directory.

    Returns:
        TargetRecord with size and timestamps.

    Raises:
        OSError: If the directory itself cannot be stat'ed.
    """
    path = Path(os.path.abspath(path))
    measurement = measure(path)

    try:
        created = creation_time(path)
        approximate = False
    except MetadataUnavailableError:
        logger.debug("No birth time for %s, using oldest mtime", path)
        created = measurement.oldest_mtime
        approximate = True

    return TargetRecord(
        path=path,
        size_bytes=measurement.size_bytes,
        created_at=_to_datetime(created),
        last_used_at=_to_datetime(measurement.latest_mtime),
        created_is_approximate=approximate,
        unreadable_entries=measurement.unreadable_entries,
        has_venv_markers=has_venv_markers(path),
    )
