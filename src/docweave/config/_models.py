# pyright: reportExplicitAny=false, reportAny=false
"""Configuration models.

This module provides the frozen Pydantic models describing every docweave
configuration section and the top-level Config container.
"""

from enum import StrEnum
from pathlib import Path
from typing import Any, ClassVar, Self

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from docweave.exceptions import ConfigError

from ._loader import deep_merge, parse_env_vars, read_toml_file


class LogLevel(StrEnum):
    """Log level threshold values.

    Values are ordered from most verbose (debug) to least verbose (error).
    """

    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


class LogFormat(StrEnum):
    """Log output format values."""

    JSON = "json"
    TEXT = "text"


class EngineSettings(BaseModel):
    """Compilation and rendering settings.

    Attributes:
        max_heading_level: Deepest Markdown heading level the renderer emits.
        detect_cycles: Reject cyclic ``extends`` chains instead of recursing.
    """

    model_config: ClassVar[ConfigDict] = ConfigDict(frozen=True, extra="ignore")

    max_heading_level: int = Field(default=6, ge=1, le=6)
    detect_cycles: bool = True


class HelperSettings(BaseModel):
    """Defaults used by the built-in interpolation helpers."""

    model_config: ClassVar[ConfigDict] = ConfigDict(frozen=True, extra="ignore")

    date_format: str = "YYYY-MM-DD"
    join_separator: str = ", "
    truncate_length: int = Field(default=100, ge=1)


class LoaderSettings(BaseModel):
    """Template file discovery settings.

    Attributes:
        extensions: File suffixes treated as template definitions.
        library_manifest: File name of a library manifest inside a directory.
    """

    model_config: ClassVar[ConfigDict] = ConfigDict(frozen=True, extra="ignore")

    extensions: tuple[str, ...] = (".yaml", ".yml")
    library_manifest: str = "library.yaml"


class LoggingConfig(BaseModel):
    """Logging configuration section.

    Attributes:
        level: Log level threshold.
        format: Log output format.
        file: Path to log file (empty logs to stderr).
    """

    model_config: ClassVar[ConfigDict] = ConfigDict(frozen=True, extra="ignore")

    level: LogLevel = LogLevel.WARNING
    format: LogFormat = LogFormat.TEXT
    file: str = ""


class Config(BaseModel):
    """Configuration container with typed access.

    Use the factory methods rather than the constructor when reading
    configuration from files or the environment.

    Example:
        >>> config = Config.from_dict({"engine": {"max_heading_level": 4}})
        >>> config.engine.max_heading_level
        4
    """

    model_config: ClassVar[ConfigDict] = ConfigDict(frozen=True, extra="ignore")

    engine: EngineSettings = Field(default_factory=EngineSettings)
    helpers: HelperSettings = Field(default_factory=HelperSettings)
    loader: LoaderSettings = Field(default_factory=LoaderSettings)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Self:
        """Create configuration from a dictionary.

        Raises:
            ConfigError: If a value has the wrong type or is out of range.
        """
        try:
            return cls.model_validate(data)
        except ValidationError as e:
            msg = f"Invalid configuration: {e}"
            raise ConfigError(msg) from e

    @classmethod
    def from_file(cls, path: Path) -> Self:
        """Create configuration from a TOML file.

        Raises:
            FileNotFoundError: If the file does not exist.
            ConfigLoadError: If the file is not valid TOML.
            ConfigError: If a value is invalid.
        """
        return cls.from_dict(read_toml_file(path))

    @classmethod
    def load(
        cls,
        path: Path | None = None,
        *,
        include_env: bool = True,
        environ: dict[str, str] | None = None,
    ) -> Self:
        """Load configuration from defaults, an optional file and the environment.

        Precedence (highest first): environment, file, built-in defaults.

        Args:
            path: Optional TOML file. A missing file is an error only when
                given explicitly.
            include_env: Whether to apply ``DOCWEAVE_`` environment overrides.
            environ: Mapping to read instead of ``os.environ``.

        Returns:
            The merged configuration.
        """
        data: dict[str, Any] = {}
        if path is not None:
            data = read_toml_file(path)
        if include_env:
            data = deep_merge(data, parse_env_vars(environ=environ))
        return cls.from_dict(data)
