"""Exceptions for venv-cleaner.

Only configuration-level and catastrophic conditions are raised. Problems
with a single target (permission denied, vanished, partial removal) are
reported as DeletionStatus values on a DeletionOutcome instead.
"""

from __future__ import annotations

from pathlib import Path


class VenvCleanerError(Exception):
    """Base exception for venv-cleaner errors.

    All venv-cleaner exceptions inherit from this class, allowing callers
    to catch all of them with a single except clause if desired.
    """


class InvalidStartPathError(VenvCleanerError):
    """Raised when the starting path cannot be scanned.

    Attributes:
        path: The rejected starting path.
        reason: Why the path was rejected.
    """

    def __init__(self, path: Path | str, reason: str) -> None:
        self.path = Path(path)
        self.reason = reason
        super().__init__(f"Invalid start path {self.path}: {reason}")


class InvalidConfigurationError(VenvCleanerError):
    """Raised for inconsistent mode flags or an invalid configuration."""


class MetadataUnavailableError(VenvCleanerError):
    """Raised when the filesystem does not expose a creation time.

    Attributes:
        path: The path whose creation time was requested.
    """

    def __init__(self, path: Path | str) -> None:
        self.path = Path(path)
        super().__init__(f"Creation time not available for {self.path}")


class TraversalError(VenvCleanerError):
    """Raised when the walk cannot continue at all.

    Covers the starting directory being unreadable, including when it
    becomes unreadable part way through a walk.

    Attributes:
        path: The directory that could not be read.
        reason: The underlying error message.
    """

    def __init__(self, path: Path | str, reason: str) -> None:
        self.path = Path(path)
        self.reason = reason
        super().__init__(f"Cannot traverse {self.path}: {reason}")
