"""Shared test fixtures for venv-cleaner."""

import errno
import logging
import os
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Any
from unittest.mock import patch

import pytest
from click.testing import CliRunner

from venv_cleaner.config import CONFIG_PATH_ENV_VAR, clear_config_cache
from venv_cleaner.domain import TargetRecord
from venv_cleaner.logging import clear_target_context, set_pipeline_state

# Reference "now" used by classification tests
FIXED_NOW = datetime(2026, 6, 1, 12, 0, 0, tzinfo=timezone.utc)


def set_tree_mtime(path: Path, when: datetime) -> None:
    """Set the mtime of a directory and everything below it."""
    timestamp = when.timestamp()
    for dirpath, dirnames, filenames in os.walk(path, topdown=False):
        for name in filenames:
            os.utime(os.path.join(dirpath, name), (timestamp, timestamp))
        for name in dirnames:
            os.utime(os.path.join(dirpath, name), (timestamp, timestamp))
    os.utime(path, (timestamp, timestamp))


def build_venv(
    project_dir: Path,
    files: dict[str, int] | None = None,
    *,
    markers: bool = True,
) -> Path:
    """Create a fake virtual environment inside project_dir.

    Args:
        project_dir: Directory that will hold the ``.venv``.
        files: Relative file paths mapped to their size in bytes.
        markers: Create bin/, lib/ and pyvenv.cfg like a real venv.

    Returns:
        Path to the created ``.venv`` directory.
    """
    venv = project_dir / ".venv"
    venv.mkdir(parents=True)
    if markers:
        (venv / "bin").mkdir()
        (venv / "lib").mkdir()
        (venv / "pyvenv.cfg").write_text("home = /usr/bin\n")
    for relative, size in (files or {}).items():
        file_path = venv / relative
        file_path.parent.mkdir(parents=True, exist_ok=True)
        file_path.write_bytes(b"x" * size)
    return venv


@pytest.fixture
def fixed_now() -> datetime:
    """Return a fixed, timezone-aware reference time."""
    return FIXED_NOW


@pytest.fixture
def venv_factory() -> Callable[..., Path]:
    """Return the build_venv helper."""
    return build_venv


@pytest.fixture
def set_mtime() -> Callable[[Path, datetime], None]:
    """Return the set_tree_mtime helper."""
    return set_tree_mtime


@pytest.fixture
def record_factory() -> Callable[..., TargetRecord]:
    """Return a helper that builds TargetRecords without touching disk."""

    def make(
        path: str | Path = "/projects/app/.venv",
        size_bytes: int = 1024,
        *,
        days_since_use: float = 0,
        days_since_creation: float | None = None,
        now: datetime = FIXED_NOW,
    ) -> TargetRecord:
        last_used = now - timedelta(days=days_since_use)
        if days_since_creation is None:
            days_since_creation = days_since_use
        return TargetRecord(
            path=Path(path),
            size_bytes=size_bytes,
            created_at=now - timedelta(days=days_since_creation),
            last_used_at=last_used,
        )

    return make


@pytest.fixture
def running_as_root() -> bool:
    """True if permission checks are bypassed for the current user."""
    return hasattr(os, "geteuid") and os.geteuid() == 0


@pytest.fixture(autouse=True)
def isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    """Point the config loader at a file that does not exist.

    Keeps a developer's own config file out of the tests and clears the
    loader cache around each test.
    """
    monkeypatch.setenv(CONFIG_PATH_ENV_VAR, str(tmp_path / "no-config.toml"))
    clear_config_cache()
    yield
    clear_config_cache()


@pytest.fixture(autouse=True)
def restore_root_logger():
    """Undo logging configuration and log context left by a test."""
    root = logging.getLogger()
    handlers = root.handlers[:]
    level = root.level
    yield
    for handler in root.handlers:
        if handler not in handlers:
            handler.close()
    root.handlers[:] = handlers
    root.setLevel(level)
    clear_target_context()
    set_pipeline_state(None)


@pytest.fixture
def runner() -> CliRunner:
    """Return a Click test runner."""
    return CliRunner()


@pytest.fixture
def deny_scandir() -> Callable[..., Any]:
    """Return a helper that makes os.scandir fail for some directories.

    Unlike chmod, this also denies access when the tests run as root.
    """
    real_scandir = os.scandir

    @contextmanager
    def deny(*paths: Path) -> Iterator[None]:
        denied = {os.fspath(p) for p in paths}

        def fake_scandir(path="."):
            if os.fspath(path) in denied:
                raise PermissionError(
                    errno.EACCES, "Permission denied", os.fspath(path)
                )
            return real_scandir(path)

        with patch("os.scandir", side_effect=fake_scandir):
            yield

    return deny
