"""Configuration loader with precedence handling.

Configuration is loaded with the following precedence (highest to lowest):
1. CLI arguments (applied by the front end)
2. Config file (~/.config/venv-cleaner/config.toml)
3. Default values

Environment variables:
- VENV_CLEANER_CONFIG_PATH: Path to config file (overrides default location)
"""

from __future__ import annotations

import logging
import os
import threading
import tomllib
from pathlib import Path
from typing import Any

from pydantic import ValidationError as PydanticValidationError

from venv_cleaner.config.file_models import ConfigFileModel
from venv_cleaner.config.models import CleanerConfig, LoggingConfig, ScanDefaults

logger = logging.getLogger(__name__)

CONFIG_PATH_ENV_VAR = "VENV_CLEANER_CONFIG_PATH"

# Default config location
DEFAULT_CONFIG_DIR = Path.home() / ".config" / "venv-cleaner"
DEFAULT_CONFIG_FILE = DEFAULT_CONFIG_DIR / "config.toml"

# Cache for loaded config files (path -> (parsed dict, mtime))
_config_cache: dict[Path, tuple[dict[str, Any], float]] = {}
_config_cache_lock = threading.Lock()


class ConfigError(Exception):
    """Raised when the config file cannot be read, parsed or validated."""

    def __init__(self, path: Path, message: str) -> None:
        self.path = path
        super().__init__(f"Invalid config file {path}: {message}")


def get_default_config_path() -> Path:
    """Get the default config file path.

    Can be overridden by the VENV_CLEANER_CONFIG_PATH environment variable.

    Returns:
        Path to config file.
    """
    env_path = os.environ.get(CONFIG_PATH_ENV_VAR)
    if env_path:
        return Path(env_path).expanduser()
    return DEFAULT_CONFIG_FILE


def _read_toml(path: Path) -> dict[str, Any]:
    """Parse a config file; a missing file reads as empty."""
    if not path.exists():
        logger.debug("Config file not found: %s", path)
        return {}

    with path.open("rb") as f:
        data = tomllib.load(f)
    logger.debug("Loaded config from %s", path)
    return data


def load_config_file(
    path: Path | None = None, *, strict: bool = False
) -> dict[str, Any]:
    """Load configuration from a TOML file.

    Successful reads are cached with mtime-based invalidation. The cache
    reloads the file if it has been modified since the last read. Failed
    reads are never cached. Use clear_config_cache() to force a reload
    regardless of mtime.

    Args:
        path: Path to config file. If None, uses default location.
        strict: If True, raise ConfigError on read or parse failures.
            If False (default), return empty dict on errors.

    Returns:
        Parsed configuration dict. Empty dict if file doesn't exist.

    Raises:
        ConfigError: When strict=True and the file cannot be parsed.
    """
    if path is None:
        path = get_default_config_path()

    try:
        current_mtime = path.stat().st_mtime
    except OSError:
        current_mtime = 0.0

    with _config_cache_lock:
        cached = _config_cache.get(path)
        if cached is not None and cached[1] == current_mtime:
            return cached[0]

        try:
            result = _read_toml(path)
        except (OSError, tomllib.TOMLDecodeError) as e:
            # Failures are not cached so a later strict load still raises
            if strict:
                raise ConfigError(path, str(e)) from e
            logger.warning("Failed to load config file %s: %s", path, e)
            return {}

        _config_cache[path] = (result, current_mtime)
        return result


def clear_config_cache() -> None:
    """Clear the config file cache.

    Primarily useful for testing.
    """
    with _config_cache_lock:
        _config_cache.clear()


def _format_validation_error(error: PydanticValidationError) -> str:
    """Render pydantic errors as "section.key: message" pairs."""
    messages = []
    for item in error.errors():
        location = ".".join(str(part) for part in item.get("loc", ())) or "root"
        messages.append(f"{location}: {item.get('msg', 'invalid value')}")
    return "; ".join(messages)


def get_config(
    config_path: Path | None = None, *, strict: bool = False
) -> CleanerConfig:
    """Get venv-cleaner configuration from the config file and defaults.

    Args:
        config_path: Path to config file (overrides VENV_CLEANER_CONFIG_PATH).
        strict: If True, raise ConfigError for an unreadable or invalid
            config file. If False (default), log a warning and use defaults.

    Returns:
        CleanerConfig with file values applied over defaults.

    Raises:
        ConfigError: When strict=True and the config file is invalid.
    """
    path = config_path if config_path is not None else get_default_config_path()
    data = load_config_file(path, strict=strict)

    try:
        model = ConfigFileModel.model_validate(data)
    except PydanticValidationError as e:
        message = _format_validation_error(e)
        if strict:
            raise ConfigError(path, message) from e
        logger.warning("Ignoring invalid config file %s: %s", path, message)
        return CleanerConfig()

    defaults = CleanerConfig()
    log_section = model.logging
    scan_section = model.scan

    logging_config = LoggingConfig(
        level=log_section.level or defaults.logging.level,
        file=log_section.file,
        format=log_section.format or defaults.logging.format,
        include_stderr=(
            log_section.include_stderr
            if log_section.include_stderr is not None
            else defaults.logging.include_stderr
        ),
        max_bytes=log_section.max_bytes or defaults.logging.max_bytes,
        backup_count=(
            log_section.backup_count
            if log_section.backup_count is not None
            else defaults.logging.backup_count
        ),
    )
    scan_defaults = ScanDefaults(
        recursive=(
            scan_section.recursive
            if scan_section.recursive is not None
            else defaults.scan.recursive
        ),
        sort=scan_section.sort or defaults.scan.sort,
        reverse=(
            scan_section.reverse
            if scan_section.reverse is not None
            else defaults.scan.reverse
        ),
    )
    return CleanerConfig(logging=logging_config, scan=scan_defaults)
