"""Unit tests for domain models and mode resolution."""

from datetime import timedelta
from pathlib import Path

import pytest

from venv_cleaner.domain import (
    DeletionOutcome,
    DeletionStatus,
    InvalidConfigurationError,
    InvalidStartPathError,
    RunStatus,
    RunSummary,
    ScanConfig,
    ScanMode,
    resolve_mode,
)


class TestResolveMode:
    """Tests for resolve_mode()."""

    def test_default_is_interactive(self) -> None:
        """No flags means interactive."""
        assert resolve_mode() is ScanMode.INTERACTIVE

    @pytest.mark.parametrize(
        ("flags", "expected"),
        [
            ({"query": True}, ScanMode.QUERY),
            ({"force": True}, ScanMode.FORCE),
            ({"dry_run": True}, ScanMode.DRY_RUN),
            ({"force": True, "dry_run": True}, ScanMode.DRY_RUN),
        ],
    )
    def test_single_mode(self, flags: dict, expected: ScanMode) -> None:
        """Each flag selects its mode; dry run wins over force."""
        assert resolve_mode(**flags) is expected

    @pytest.mark.parametrize(
        "flags",
        [
            {"query": True, "force": True},
            {"query": True, "dry_run": True},
            {"query": True, "force": True, "dry_run": True},
        ],
    )
    def test_query_conflicts(self, flags: dict) -> None:
        """Query cannot be combined with flags that imply deletion."""
        with pytest.raises(InvalidConfigurationError):
            resolve_mode(**flags)

    def test_only_query_never_acts(self) -> None:
        """Only query mode stays away from the deletion gate."""
        assert [m for m in ScanMode if not m.acts] == [ScanMode.QUERY]


class TestScanConfigCreate:
    """Tests for ScanConfig.create()."""

    def test_valid_directory(self, tmp_path: Path) -> None:
        """A readable directory builds a config with a resolved path."""
        config = ScanConfig.create(tmp_path, recursive=True, dry_run=True)

        assert config.start_path == tmp_path.resolve()
        assert config.recursive is True
        assert config.mode is ScanMode.DRY_RUN
        assert config.verbosity == 0

    def test_defaults_to_current_directory(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """Without a path the current directory is used."""
        monkeypatch.chdir(tmp_path)
        assert ScanConfig.create().start_path == tmp_path.resolve()

    def test_missing_directory(self, tmp_path: Path) -> None:
        """A missing start path is rejected."""
        with pytest.raises(InvalidStartPathError) as exc_info:
            ScanConfig.create(tmp_path / "missing")
        assert "does not exist" in str(exc_info.value)

    def test_file_is_rejected(self, tmp_path: Path) -> None:
        """A regular file is not a valid start path."""
        target = tmp_path / "file.txt"
        target.write_text("")
        with pytest.raises(InvalidStartPathError) as exc_info:
            ScanConfig.create(target)
        assert "not a directory" in str(exc_info.value)

    def test_flags_checked_before_path(self, tmp_path: Path) -> None:
        """Inconsistent flags are reported before the path is looked at."""
        with pytest.raises(InvalidConfigurationError):
            ScanConfig.create(tmp_path / "missing", query=True, force=True)

    def test_negative_verbosity(self, tmp_path: Path) -> None:
        """Verbosity cannot be negative."""
        with pytest.raises(InvalidConfigurationError):
            ScanConfig.create(tmp_path, verbosity=-1)

    def test_config_is_immutable(self, tmp_path: Path) -> None:
        """ScanConfig is frozen."""
        config = ScanConfig.create(tmp_path)
        with pytest.raises(AttributeError):
            config.recursive = True


class TestTargetRecord:
    """Tests for TargetRecord derived values."""

    def test_location_and_project_name(self, record_factory) -> None:
        """The containing directory is the project."""
        record = record_factory("/home/me/code/webapp/.venv")

        assert record.location == Path("/home/me/code/webapp")
        assert record.project_name == "webapp"

    def test_age_days(self, record_factory, fixed_now) -> None:
        """Age counts whole days since last use."""
        record = record_factory(days_since_use=45.5)
        assert record.age_days(fixed_now) == 45

    def test_age_is_never_negative(self, record_factory, fixed_now) -> None:
        """Timestamps in the future give an age of zero."""
        record = record_factory()
        assert record.age_days(fixed_now - timedelta(days=3)) == 0


class TestRunSummary:
    """Tests for RunSummary accounting."""

    def _summary(self) -> RunSummary:
        return RunSummary(mode=ScanMode.FORCE, start_path=Path("/work"))

    def test_counts_each_status(self) -> None:
        """Outcomes are counted by status and bytes are totalled."""
        summary = self._summary()
        outcomes = [
            DeletionOutcome(Path("/a/.venv"), DeletionStatus.DELETED, 100),
            DeletionOutcome(Path("/b/.venv"), DeletionStatus.DELETED, 50),
            DeletionOutcome(Path("/c/.venv"), DeletionStatus.DECLINED),
            DeletionOutcome(Path("/d/.venv"), DeletionStatus.VANISHED),
            DeletionOutcome(Path("/e/.venv"), DeletionStatus.SIMULATED, 7),
        ]
        for outcome in outcomes:
            summary.record_outcome(outcome)

        assert summary.deleted == 2
        assert summary.bytes_reclaimed == 150
        assert summary.declined == 1
        assert summary.vanished == 1
        assert summary.simulated == 1
        assert summary.bytes_simulated == 7
        assert [o.path for o in summary.issues] == [Path("/d/.venv")]

    @pytest.mark.parametrize(
        "status",
        [
            DeletionStatus.PERMISSION_DENIED,
            DeletionStatus.VANISHED,
            DeletionStatus.PARTIAL,
            DeletionStatus.FAILED,
        ],
    )
    def test_issues_give_warnings(self, status: DeletionStatus) -> None:
        """Any problem outcome makes the run finish with warnings."""
        summary = self._summary()
        summary.record_outcome(DeletionOutcome(Path("/x/.venv"), status))

        assert summary.issues
        assert summary.status is RunStatus.WARNINGS

    def test_declined_is_not_an_issue(self) -> None:
        """Answering no is a normal outcome."""
        summary = self._summary()
        summary.record_outcome(
            DeletionOutcome(Path("/x/.venv"), DeletionStatus.DECLINED)
        )
        assert summary.status is RunStatus.SUCCESS

    def test_walk_warnings_give_warnings(self) -> None:
        """Skipped directories make the run finish with warnings."""
        summary = self._summary()
        summary.walk_warnings.append(("/work/locked", "skipped"))
        assert summary.status is RunStatus.WARNINGS

    def test_fatal_error_wins(self) -> None:
        """A fatal error outranks warnings."""
        summary = self._summary()
        summary.walk_warnings.append(("/work/locked", "skipped"))
        summary.fatal_error = "Cannot traverse /work"
        assert summary.status is RunStatus.FATAL
