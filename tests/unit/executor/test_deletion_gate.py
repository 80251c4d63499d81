"""Unit tests for the deletion gate."""

import errno
import os
import shutil
import stat
from datetime import datetime, timezone
from pathlib import Path
from unittest.mock import patch

import pytest

from venv_cleaner.domain import DeletionStatus, ScanMode, TargetRecord
from venv_cleaner.executor import DeletionGate
from venv_cleaner.executor import deletion as deletion_module

_real_rmtree = shutil.rmtree


def _record(path: Path, size_bytes: int = 4096) -> TargetRecord:
    now = datetime(2026, 1, 1, tzinfo=timezone.utc)
    return TargetRecord(
        path=path, size_bytes=size_bytes, created_at=now, last_used_at=now
    )


class TestDeleteModes:
    """Tests for delete() in each mode."""

    def test_dry_run_simulates(self, tmp_path: Path, venv_factory) -> None:
        """Dry run reports what would be reclaimed and touches nothing."""
        venv = venv_factory(tmp_path, {"lib/a.py": 100})
        before = sorted(p.relative_to(venv) for p in venv.rglob("*"))

        outcome = DeletionGate().delete(_record(venv, 1234), ScanMode.DRY_RUN)

        assert outcome.status is DeletionStatus.SIMULATED
        assert outcome.bytes_reclaimed == 1234
        assert sorted(p.relative_to(venv) for p in venv.rglob("*")) == before

    def test_force_deletes(self, tmp_path: Path, venv_factory) -> None:
        """Force mode removes the whole directory."""
        venv = venv_factory(tmp_path, {"lib/site-packages/x.py": 100})

        outcome = DeletionGate().delete(_record(venv, 100), ScanMode.FORCE)

        assert outcome.status is DeletionStatus.DELETED
        assert outcome.bytes_reclaimed == 100
        assert not venv.exists()
        assert tmp_path.exists()

    def test_interactive_deletes_after_confirmation(
        self, tmp_path: Path, venv_factory
    ) -> None:
        """The gate deletes in interactive mode; asking is the caller's job."""
        venv = venv_factory(tmp_path)
        outcome = DeletionGate().delete(_record(venv), ScanMode.INTERACTIVE)

        assert outcome.status is DeletionStatus.DELETED
        assert not venv.exists()

    def test_query_mode_is_rejected(self, tmp_path: Path, venv_factory) -> None:
        """Query mode never reaches the gate."""
        venv = venv_factory(tmp_path)
        with pytest.raises(ValueError):
            DeletionGate().delete(_record(venv), ScanMode.QUERY)
        assert venv.exists()


class TestPreconditions:
    """Tests for the checks made immediately before acting."""

    @pytest.mark.parametrize("mode", [ScanMode.FORCE, ScanMode.DRY_RUN])
    def test_vanished_directory(self, tmp_path: Path, mode: ScanMode) -> None:
        """A target removed since the scan is reported as vanished."""
        outcome = DeletionGate().delete(_record(tmp_path / ".venv"), mode)

        assert outcome.status is DeletionStatus.VANISHED
        assert outcome.bytes_reclaimed == 0
        assert outcome.is_issue

    def test_replaced_by_symlink(self, tmp_path: Path, venv_factory) -> None:
        """A target swapped for a symlink is not followed or deleted."""
        real = venv_factory(tmp_path / "real")
        project = tmp_path / "project"
        project.mkdir()
        link = project / ".venv"
        link.symlink_to(real, target_is_directory=True)

        outcome = DeletionGate().delete(_record(link), ScanMode.FORCE)

        assert outcome.status is DeletionStatus.VANISHED
        assert link.is_symlink()
        assert real.exists()

    def test_replaced_by_file(self, tmp_path: Path) -> None:
        """A target that is now a regular file is left alone."""
        target = tmp_path / ".venv"
        target.write_text("not a directory")

        outcome = DeletionGate().delete(_record(target), ScanMode.FORCE)

        assert outcome.status is DeletionStatus.VANISHED
        assert target.read_text() == "not a directory"

    def test_read_only_parent(
        self, tmp_path: Path, venv_factory, running_as_root: bool
    ) -> None:
        """Without write permission on the parent nothing is removed."""
        if running_as_root:
            pytest.skip("permission checks are bypassed for root")
        project = tmp_path / "project"
        venv = venv_factory(project, {"lib/a.py": 10})
        project.chmod(stat.S_IRUSR | stat.S_IXUSR)
        try:
            outcome = DeletionGate().delete(_record(venv), ScanMode.FORCE)
            still_there = venv.exists() and (venv / "lib" / "a.py").exists()
        finally:
            project.chmod(stat.S_IRWXU)

        assert outcome.status is DeletionStatus.PERMISSION_DENIED
        assert still_there

    @pytest.mark.parametrize("mode", [ScanMode.FORCE, ScanMode.INTERACTIVE])
    def test_access_denied_leaves_directory(
        self, tmp_path: Path, venv_factory, mode: ScanMode
    ) -> None:
        """When access checks fail the target is reported and kept."""
        venv = venv_factory(tmp_path / "project", {"lib/a.py": 10})

        with patch.object(deletion_module.os, "access", return_value=False):
            outcome = DeletionGate().delete(_record(venv), mode)

        assert outcome.status is DeletionStatus.PERMISSION_DENIED
        assert outcome.bytes_reclaimed == 0
        assert outcome.is_issue
        assert (venv / "lib" / "a.py").exists()

    def test_directory_not_writable(self, tmp_path: Path, venv_factory) -> None:
        """A writable parent is not enough; the target must be writable too."""
        venv = venv_factory(tmp_path / "project")

        def access(path, mode):
            return Path(path) != venv

        with patch.object(deletion_module.os, "access", side_effect=access):
            outcome = DeletionGate().delete(_record(venv), ScanMode.FORCE)

        assert outcome.status is DeletionStatus.PERMISSION_DENIED
        assert outcome.message == "no write permission on directory"
        assert venv.exists()

    def test_check_passes_for_deletable_target(
        self, tmp_path: Path, venv_factory
    ) -> None:
        """check() returns None when the target may be deleted."""
        venv = venv_factory(tmp_path)
        assert DeletionGate().check(_record(venv)) is None


class TestRemovalFailures:
    """Tests for errors raised part way through removal."""

    def test_failure_after_removal_started_is_partial(
        self, tmp_path: Path, venv_factory
    ) -> None:
        """An error on a child entry leaves a partial deletion."""
        venv = venv_factory(tmp_path, {"lib/a.py": 10})

        def fake_rmtree(path, onexc):
            onexc(
                os.unlink,
                os.path.join(path, "lib", "a.py"),
                PermissionError(errno.EACCES, "Permission denied"),
            )

        with patch.object(deletion_module.shutil, "rmtree", side_effect=fake_rmtree):
            outcome = DeletionGate().delete(_record(venv), ScanMode.FORCE)

        assert outcome.status is DeletionStatus.PARTIAL
        assert "verify manually" in outcome.message
        assert outcome.bytes_reclaimed == 0

    def test_permission_error_before_removal(
        self, tmp_path: Path, venv_factory
    ) -> None:
        """Failing to open the target itself is permission denied."""
        venv = venv_factory(tmp_path)

        def fake_rmtree(path, onexc):
            onexc(os.open, path, PermissionError(errno.EACCES, "Permission denied"))

        with patch.object(deletion_module.shutil, "rmtree", side_effect=fake_rmtree):
            outcome = DeletionGate().delete(_record(venv), ScanMode.FORCE)

        assert outcome.status is DeletionStatus.PERMISSION_DENIED

    def test_other_error_before_removal_is_failed(
        self, tmp_path: Path, venv_factory
    ) -> None:
        """An untouched target with a non-permission error is failed."""
        venv = venv_factory(tmp_path)

        def fake_rmtree(path, onexc):
            onexc(os.scandir, path, OSError(errno.EIO, "Input/output error"))

        with patch.object(deletion_module.shutil, "rmtree", side_effect=fake_rmtree):
            outcome = DeletionGate().delete(_record(venv), ScanMode.FORCE)

        assert outcome.status is DeletionStatus.FAILED
        assert outcome.is_issue

    def test_error_but_directory_gone_is_deleted(
        self, tmp_path: Path, venv_factory
    ) -> None:
        """If the directory is gone despite an error, it counts as deleted."""
        venv = venv_factory(tmp_path)

        def fake_rmtree(path, onexc):
            _real_rmtree(path)
            raise FileNotFoundError(errno.ENOENT, "No such file or directory")

        with patch.object(deletion_module.shutil, "rmtree", side_effect=fake_rmtree):
            outcome = DeletionGate().delete(_record(venv, 77), ScanMode.FORCE)

        assert outcome.status is DeletionStatus.DELETED
        assert outcome.bytes_reclaimed == 77
