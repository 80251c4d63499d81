"""Logging setup for the command line.

The effective logging configuration is the config file's [logging] section
with the global --log-* options on top. A subcommand's -v count can then
lower the threshold: -v shows info, -vv shows debug. An explicit
--log-level always wins over -v.
"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from pathlib import Path

from venv_cleaner.config.models import LoggingConfig
from venv_cleaner.logging import configure_logging, log_level_number

# Threshold reached with 0, 1 and 2+ -v flags
_VERBOSITY_LEVELS = ("warning", "info", "debug")


@dataclass(frozen=True)
class LogOptions:
    """Logging options given on the command line (None means not given)."""

    level: str | None = None
    file: Path | None = None
    json: bool = False


def effective_log_level(
    configured: str, explicit: str | None = None, verbosity: int = 0
) -> str:
    """Pick the log level from the config, --log-level and -v count.

    -v never makes logging quieter than the configured level.
    """
    if explicit is not None:
        return explicit.lower()
    if verbosity <= 0:
        return configured
    index = min(verbosity, len(_VERBOSITY_LEVELS) - 1)
    requested = _VERBOSITY_LEVELS[index]
    return min(configured, requested, key=log_level_number)


def resolve_logging_config(
    base: LoggingConfig, options: LogOptions, verbosity: int = 0
) -> LoggingConfig:
    """Apply command line options to the configured logging settings.

    Raises:
        ValueError: If the resulting configuration is invalid.
    """
    return dataclasses.replace(
        base,
        level=effective_log_level(base.level, options.level, verbosity),
        file=options.file if options.file is not None else base.file,
        format="json" if options.json else base.format,
    )


def setup_logging(
    base: LoggingConfig, options: LogOptions, verbosity: int = 0
) -> LoggingConfig:
    """Resolve the logging configuration and apply it to the root logger.

    Returns:
        The LoggingConfig that was applied.
    """
    config = resolve_logging_config(base, options, verbosity)
    configure_logging(config)
    return config
