"""Configuration module for venv-cleaner.

Provides the config file loader and the effective configuration models.
"""

from venv_cleaner.config.loader import (
    CONFIG_PATH_ENV_VAR,
    DEFAULT_CONFIG_FILE,
    ConfigError,
    clear_config_cache,
    get_config,
    get_default_config_path,
    load_config_file,
)
from venv_cleaner.config.models import CleanerConfig, LoggingConfig, ScanDefaults

__all__ = [
    "CONFIG_PATH_ENV_VAR",
    "DEFAULT_CONFIG_FILE",
    "CleanerConfig",
    "ConfigError",
    "LoggingConfig",
    "ScanDefaults",
    "clear_config_cache",
    "get_config",
    "get_default_config_path",
    "load_config_file",
]
