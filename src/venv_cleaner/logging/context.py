"""Run context for structured logging.

Two context variables describe where a log line comes from: the target
directory being processed and the state the pipeline is in. RunContextFilter
copies both onto every record so formatters can emit them as fields.
"""

from __future__ import annotations

import contextvars
import logging
from contextlib import contextmanager
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Generator

_target_path: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "target_path", default=None
)
_pipeline_state: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "pipeline_state", default=None
)


def set_target_context(target_path: Path | str | None) -> None:
    """Set the target currently being processed."""
    _target_path.set(str(target_path) if target_path is not None else None)


def clear_target_context() -> None:
    """Clear the current target context."""
    _target_path.set(None)


def get_target_context() -> str | None:
    """Get the target currently being processed, if any."""
    return _target_path.get()


@contextmanager
def target_context(target_path: Path | str) -> Generator[None, None, None]:
    """Context manager for per-target processing.

    Sets the target on entry and restores the previous value on exit.

    Example:
        with target_context("/home/me/project/.venv"):
            logger.info("Deleting")  # Record carries target_path
    """
    token = _target_path.set(str(target_path))
    try:
        yield
    finally:
        _target_path.reset(token)


def set_pipeline_state(state: str | None) -> None:
    """Record the pipeline state (e.g. "scanning") for later log lines."""
    _pipeline_state.set(state)


def get_pipeline_state() -> str | None:
    """Get the current pipeline state, if a run is in progress."""
    return _pipeline_state.get()


class RunContextFilter(logging.Filter):
    """Logging filter that injects the run context into log records.

    Adds ``target_path`` and ``pipeline_state`` (None when unset) for JSON
    output, and ``target_tag`` for compact text output like
    ``[/home/me/project/.venv] ``.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        """Enrich the record; never drops it."""
        target_path = get_target_context()
        record.target_path = target_path
        record.target_tag = f"[{target_path}] " if target_path else ""
        record.pipeline_state = get_pipeline_state()
        return True
