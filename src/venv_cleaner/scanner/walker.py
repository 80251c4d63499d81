"""Directory walker that discovers virtual environment directories."""

from __future__ import annotations

import logging
import os
from collections.abc import Callable, Iterator
from pathlib import Path

from venv_cleaner.domain import TargetRecord, TraversalError
from venv_cleaner.scanner.probe import VENV_DIR_NAME, is_target, probe_target

logger = logging.getLogger(__name__)


class DirectoryWalker:
    """Finds ``.venv`` directories beneath a starting path.

    Each call to walk() is an independent traversal. Non-fatal problems
    (unreadable or vanished subdirectories, targets that cannot be measured)
    are collected in ``warnings`` as (path, message) tuples, which are reset
    at the start of every walk.
    """

    def __init__(self, on_directory: Callable[[int], None] | None = None) -> None:
        """Initialize the walker.

        Args:
            on_directory: Optional callback receiving the number of
                directories visited so far, for progress display.
        """
        self.on_directory = on_directory
        self.warnings: list[tuple[str, str]] = []
        self.directories_visited = 0

    def walk(self, start_path: Path, recursive: bool) -> Iterator[TargetRecord]:
        """Yield a TargetRecord for each target directory found.

        Args:
            start_path: Directory to search from.
            recursive: If False, only ``start_path/.venv`` is considered.
                If True, every subdirectory is searched, but a matched
                ``.venv`` is never descended into.

        Returns:
            Iterator of TargetRecord in filesystem traversal order.

        Raises:
            TraversalError: (while iterating) if the starting directory
                cannot be read, including if it becomes unreadable part way
                through the walk.
        """
        self.warnings = []
        self.directories_visited = 0
        start = Path(os.path.abspath(start_path))
        logger.info("Searching for %s directories in: %s", VENV_DIR_NAME, start)
        if recursive:
            return self._walk_recursive(start)
        return self._walk_single(start)

    def _warn(self, path: str, message: str) -> None:
        logger.warning("%s: %s", path, message)
        self.warnings.append((path, message))

    def _visited(self) -> None:
        self.directories_visited += 1
        if self.on_directory is None:
            return
        try:
            self.on_directory(self.directories_visited)
        except Exception as e:
            logger.warning("Progress callback raised exception: %s", e)

    def _probe(self, path: Path | str) -> TargetRecord | None:
        try:
            record = probe_target(Path(path))
        except OSError as e:
            self._warn(os.fspath(path), f"could not be measured: {e}")
            return None
        logger.debug("Found %s at: %s", VENV_DIR_NAME, record.path)
        return record

    def _walk_single(self, start: Path) -> Iterator[TargetRecord]:
        try:
            os.stat(start)
        except OSError as e:
            raise TraversalError(start, str(e)) from e
        self._visited()

        candidate = start / VENV_DIR_NAME
        if is_target(candidate):
            record = self._probe(candidate)
            if record is not None:
                yield record

    def _walk_recursive(self, start: Path) -> Iterator[TargetRecord]:
        # A start path that is itself a target is reported on its own
        if is_target(start):
            record = self._probe(start)
            if record is not None:
                yield record
            return

        root = os.fspath(start)
        stack = [root]
        while stack:
            current = stack.pop()
            try:
                with os.scandir(current) as it:
                    entries = list(it)
            except OSError as e:
                if current == root or _root_lost(root):
                    raise TraversalError(root, str(e)) from e
                self._warn(current, f"skipped: {e}")
                continue

            self._visited()

            subdirs: list[str] = []
            for entry in entries:
                try:
                    is_dir = entry.is_dir(follow_symlinks=False)
                except OSError as e:
                    self._warn(entry.path, f"skipped: {e}")
                    continue
                if not is_dir:
                    continue
                if entry.name == VENV_DIR_NAME:
                    record = self._probe(entry.path)
                    if record is not None:
                        yield record
                else:
                    subdirs.append(entry.path)

            # Reverse so subdirectories are visited in scandir order
            stack.extend(reversed(subdirs))


def _root_lost(root: str) -> bool:
    """True if the starting directory is no longer a readable directory."""
    return not (os.path.isdir(root) and os.access(root, os.R_OK | os.X_OK))
