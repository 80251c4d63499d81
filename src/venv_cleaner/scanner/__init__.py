"""Scanner module for venv-cleaner.

This module provides functionality for discovering virtual environment
directories and measuring their size and timestamps.

Public API:
    - DirectoryWalker: Finds target directories beneath a starting path
    - Measurement: Result of measuring a directory tree
    - VENV_DIR_NAME: The reserved directory name that marks a target
    - is_target: Check whether an entry is a target directory
    - measure: Total size and newest/oldest mtime of a directory tree
    - creation_time: Platform creation time of a path
    - has_venv_markers: Check for the usual virtual environment layout
    - probe_target: Build a TargetRecord for a target directory
"""

from venv_cleaner.scanner.probe import (
    VENV_DIR_NAME,
    Measurement,
    creation_time,
    has_venv_markers,
    is_target,
    measure,
    probe_target,
)
from venv_cleaner.scanner.walker import DirectoryWalker

__all__ = [
    "VENV_DIR_NAME",
    "DirectoryWalker",
    "Measurement",
    "creation_time",
    "has_venv_markers",
    "is_target",
    "measure",
    "probe_target",
]
