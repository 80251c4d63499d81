"""CLI module for venv-cleaner."""

import logging
from pathlib import Path

import click

from venv_cleaner.cli.exit_codes import ExitCode
from venv_cleaner.cli.logging_setup import LogOptions, setup_logging
from venv_cleaner.cli.output import error_exit
from venv_cleaner.config import ConfigError, get_config

logger = logging.getLogger(__name__)


@click.group()
@click.version_option(package_name="venv-cleaner")
@click.option(
    "--log-level",
    type=click.Choice(["debug", "info", "warning", "error"], case_sensitive=False),
    default=None,
    help="Override log level (default: warning).",
)
@click.option(
    "--log-file",
    type=click.Path(path_type=Path, dir_okay=False),
    default=None,
    help="Override log file path.",
)
@click.option(
    "--log-json",
    is_flag=True,
    default=False,
    help="Use JSON log format.",
)
@click.option(
    "--config",
    "config_path",
    type=click.Path(path_type=Path, dir_okay=False),
    default=None,
    help="Config file path. Default: ~/.config/venv-cleaner/config.toml",
)
@click.pass_context
def main(
    ctx: click.Context,
    log_level: str | None,
    log_file: Path | None,
    log_json: bool,
    config_path: Path | None,
) -> None:
    """venv-cleaner - Find and clean up Python .venv directories."""
    ctx.ensure_object(dict)

    # An explicitly named config file must be valid; the default one is
    # allowed to be missing or broken.
    try:
        config = get_config(config_path, strict=config_path is not None)
    except ConfigError as e:
        error_exit(str(e), ExitCode.CONFIG_ERROR)

    log_options = LogOptions(level=log_level, file=log_file, json=log_json)
    ctx.obj["config"] = config
    ctx.obj["log_options"] = log_options
    setup_logging(config.logging, log_options)
    logger.debug(
        "venv-cleaner starting: log_level=%s, config=%s",
        log_level or config.logging.level,
        config_path or "default",
    )


# Defer import to avoid circular dependency
def _register_commands() -> None:
    from venv_cleaner.cli.scan import scan

    main.add_command(scan)


_register_commands()
