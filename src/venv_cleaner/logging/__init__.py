"""Structured logging module for venv-cleaner.

Provides configurable logging with JSON format support and file rotation.
Log records carry the target being processed and the pipeline state.
"""

from venv_cleaner.logging.config import configure_logging, log_level_number
from venv_cleaner.logging.context import (
    RunContextFilter,
    clear_target_context,
    get_pipeline_state,
    get_target_context,
    set_pipeline_state,
    set_target_context,
    target_context,
)
from venv_cleaner.logging.handlers import JSONFormatter

__all__ = [
    "JSONFormatter",
    "RunContextFilter",
    "clear_target_context",
    "configure_logging",
    "get_pipeline_state",
    "get_target_context",
    "log_level_number",
    "set_pipeline_state",
    "set_target_context",
    "target_context",
]
