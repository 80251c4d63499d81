"""Executor module for venv-cleaner.

Provides the deletion gate that removes (or simulates removing) target
directories after re-checking that they still exist and may be deleted.
"""

from venv_cleaner.executor.deletion import DeletionGate

__all__ = [
    "DeletionGate",
]
