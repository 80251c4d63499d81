"""Deletion gate for virtual environment directories.

The gate re-checks a target immediately before acting on it, because the
filesystem may have changed since the scan. Every call returns a
DeletionOutcome; per-target problems are never raised.

Preconditions, in order:
    (a) the path still exists, is a directory and is not a symlink
    (b) the process may write to the parent and to the directory itself
    (c) the mode is not dry-run (otherwise the deletion is only simulated)

Confirmation is the caller's concern: in interactive mode the gate is only
invoked after the user has said yes.
"""

from __future__ import annotations

import logging
import os
import shutil
import stat
from collections.abc import Callable
from typing import Any

from venv_cleaner.domain import (
    DeletionOutcome,
    DeletionStatus,
    ScanMode,
    TargetRecord,
)

logger = logging.getLogger(__name__)

# rmtree calls that fail on the top-level directory before anything is removed
_PRE_REMOVAL_FUNCS: frozenset[Callable[..., Any]] = frozenset(
    {os.lstat, os.stat, os.open, os.scandir}
)


class DeletionGate:
    """Validates and performs removal of target directories."""

    def check(self, record: TargetRecord) -> DeletionOutcome | None:
        """Check preconditions (a) and (b) for deleting a target.

        Args:
            record: The target to check.

        Returns:
            A VANISHED or PERMISSION_DENIED outcome if a precondition fails,
            None if the target may be deleted.
        """
        path = record.path

        try:
            path_stat = os.lstat(path)
        except FileNotFoundError:
            return self._rejected(record, DeletionStatus.VANISHED, "no longer exists")
        except PermissionError as e:
            return self._rejected(
                record, DeletionStatus.PERMISSION_DENIED, f"cannot be inspected: {e}"
            )
        except OSError as e:
            return self._rejected(record, DeletionStatus.VANISHED, str(e))

        if stat.S_ISLNK(path_stat.st_mode):
            return self._rejected(
                record, DeletionStatus.VANISHED, "was replaced by a symbolic link"
            )
        if not stat.S_ISDIR(path_stat.st_mode):
            return self._rejected(
                record, DeletionStatus.VANISHED, "is no longer a directory"
            )

        if not os.access(path.parent, os.W_OK | os.X_OK):
            return self._rejected(
                record,
                DeletionStatus.PERMISSION_DENIED,
                f"no write permission on parent directory {path.parent}",
            )
        if not os.access(path, os.R_OK | os.W_OK | os.X_OK):
            return self._rejected(
                record,
                DeletionStatus.PERMISSION_DENIED,
                "no write permission on directory",
            )

        return None

    def delete(self, record: TargetRecord, mode: ScanMode) -> DeletionOutcome:
        """Delete a target directory, or simulate it in dry-run mode.

        Args:
            record: The target to delete.
            mode: The run mode. FORCE and INTERACTIVE delete, DRY_RUN
                simulates.

        Returns:
            DeletionOutcome describing what happened.

        Raises:
            ValueError: If called in QUERY mode, which never acts.
        """
        if mode is ScanMode.QUERY:
            raise ValueError("Deletion gate cannot be invoked in query mode")

        rejected = self.check(record)
        if rejected is not None:
            return rejected

        if mode is ScanMode.DRY_RUN:
            logger.info("DRY RUN: would delete %s", record.path)
            return DeletionOutcome(
                path=record.path,
                status=DeletionStatus.SIMULATED,
                bytes_reclaimed=record.size_bytes,
                message="would be deleted",
            )

        logger.info("Deleting directory: %s", record.path)
        failures: list[tuple[Callable[..., Any], str]] = []

        def on_error(
            func: Callable[..., Any], failed_path: Any, exc: BaseException
        ) -> None:
            failures.append((func, os.fspath(failed_path)))
            raise exc

        try:
            shutil.rmtree(record.path, onexc=on_error)
        except OSError as e:
            return self._removal_failed(record, e, failures)

        logger.info("Successfully deleted: %s", record.path)
        return DeletionOutcome(
            path=record.path,
            status=DeletionStatus.DELETED,
            bytes_reclaimed=record.size_bytes,
            message="deleted",
        )

    def _rejected(
        self, record: TargetRecord, status: DeletionStatus, message: str
    ) -> DeletionOutcome:
        logger.warning("Not deleting %s (%s): %s", record.path, status.value, message)
        return DeletionOutcome(path=record.path, status=status, message=message)

    def _removal_failed(
        self,
        record: TargetRecord,
        error: OSError,
        failures: list[tuple[Callable[..., Any], str]],
    ) -> DeletionOutcome:
        """Categorize an error raised while removing a directory tree."""
        path = record.path

        if not os.path.lexists(path):
            logger.warning("Removal of %s reported %s but it is gone", path, error)
            return DeletionOutcome(
                path=path,
                status=DeletionStatus.DELETED,
                bytes_reclaimed=record.size_bytes,
                message="deleted",
            )

        untouched = bool(failures) and (
            failures[0][0] in _PRE_REMOVAL_FUNCS and failures[0][1] == os.fspath(path)
        )
        if untouched:
            status = (
                DeletionStatus.PERMISSION_DENIED
                if isinstance(error, PermissionError)
                else DeletionStatus.FAILED
            )
            logger.error("Could not delete %s (%s): %s", path, status.value, error)
            return DeletionOutcome(path=path, status=status, message=str(error))

        logger.error("Deletion of %s was interrupted part way: %s", path, error)
        return DeletionOutcome(
            path=path,
            status=DeletionStatus.PARTIAL,
            message=f"partially deleted, verify manually: {error}",
        )
