"""docweave configuration.

Example:
    >>> from docweave.config import load_config
    >>> config = load_config()
    >>> config.engine.max_heading_level
    6
"""

from pathlib import Path

from docweave.exceptions import ConfigError, ConfigLoadError

from ._loader import (
    deep_merge,
    parse_env_vars,
    parse_string_value,
    read_toml_file,
    set_nested_key,
)
from ._models import (
    Config,
    EngineSettings,
    HelperSettings,
    LoaderSettings,
    LogFormat,
    LoggingConfig,
    LogLevel,
)


def load_config(path: Path | None = None, *, include_env: bool = True) -> Config:
    """Load configuration from an optional TOML file and the environment."""
    return Config.load(path, include_env=include_env)


__all__ = [
    "Config",
    "ConfigError",
    "ConfigLoadError",
    "EngineSettings",
    "HelperSettings",
    "LoaderSettings",
    "LogFormat",
    "LogLevel",
    "LoggingConfig",
    "deep_merge",
    "load_config",
    "parse_env_vars",
    "parse_string_value",
    "read_toml_file",
    "set_nested_key",
]
