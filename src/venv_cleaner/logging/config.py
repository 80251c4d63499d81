"""Root logger setup for venv-cleaner.

configure_logging() may be called more than once per process (the CLI
reconfigures when a subcommand raises verbosity). Each call replaces the
root handlers and closes the ones an earlier call opened.
"""

from __future__ import annotations

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import TYPE_CHECKING

from venv_cleaner.logging.context import RunContextFilter
from venv_cleaner.logging.handlers import JSONFormatter

if TYPE_CHECKING:
    from venv_cleaner.config.models import LoggingConfig

# Handler names mark the handlers this module owns
_FILE_HANDLER_NAME = "venv_cleaner.file"
_STDERR_HANDLER_NAME = "venv_cleaner.stderr"

_TEXT_FORMAT = "%(asctime)s - %(target_tag)s%(name)s - %(levelname)s - %(message)s"
_TEXT_DATEFMT = "%Y-%m-%dT%H:%M:%S%z"


def log_level_number(name: str) -> int:
    """Map a configured level name (any case) to its logging constant."""
    level = logging.getLevelName(name.upper())
    return level if isinstance(level, int) else logging.WARNING


def _build_formatter(format_name: str) -> logging.Formatter:
    if format_name.casefold() == "json":
        return JSONFormatter()
    return logging.Formatter(_TEXT_FORMAT, datefmt=_TEXT_DATEFMT)


def _open_file_handler(
    file: Path, config: LoggingConfig
) -> logging.Handler | None:
    """Open the rotating log file, or warn on stderr and return None."""
    file_path = Path(file).expanduser()
    try:
        file_path.parent.mkdir(parents=True, exist_ok=True)
        handler = RotatingFileHandler(
            file_path,
            maxBytes=config.max_bytes,
            backupCount=config.backup_count,
            encoding="utf-8",
        )
    except OSError as e:
        sys.stderr.write(f"Warning: Could not open log file {file}: {e}\n")
        return None
    handler.set_name(_FILE_HANDLER_NAME)
    return handler


def _stderr_handler() -> logging.Handler:
    handler = logging.StreamHandler(sys.stderr)
    handler.set_name(_STDERR_HANDLER_NAME)
    return handler


def _detach_handlers(root: logging.Logger) -> None:
    for handler in root.handlers[:]:
        root.removeHandler(handler)
        if handler.get_name() in (_FILE_HANDLER_NAME, _STDERR_HANDLER_NAME):
            handler.close()


def configure_logging(config: LoggingConfig) -> None:
    """Configure the root logger from a LoggingConfig.

    Logs go to the configured file, to stderr, or both. If no file is set,
    or it cannot be opened, stderr is used.
    """
    level = log_level_number(config.level)
    root = logging.getLogger()
    _detach_handlers(root)
    root.setLevel(level)

    handlers: list[logging.Handler] = []
    if config.file:
        file_handler = _open_file_handler(config.file, config)
        if file_handler is not None:
            handlers.append(file_handler)
    if config.include_stderr or not handlers:
        handlers.append(_stderr_handler())

    formatter = _build_formatter(config.format)
    context_filter = RunContextFilter()
    for handler in handlers:
        handler.setLevel(level)
        handler.setFormatter(formatter)
        handler.addFilter(context_filter)
        root.addHandler(handler)
