from pathlib import Path
from typing import TYPE_CHECKING

import pytest

from docweave.config import (
    Config,
    ConfigError,
    ConfigLoadError,
    LogFormat,
    LogLevel,
    deep_merge,
    load_config,
    parse_env_vars,
    parse_string_value,
    read_toml_file,
    set_nested_key,
)

if TYPE_CHECKING:
    from pyfakefs.fake_filesystem import FakeFilesystem


class TestParseStringValue:
    @pytest.mark.parametrize(
        ("raw", "expected"),
        [
            ("true", True),
            ("FALSE", False),
            ("42", 42),
            ("-3", -3),
            ("2.5", 2.5),
            ('[".tpl", ".yaml"]', [".tpl", ".yaml"]),
            ('{"a": 1}', {"a": 1}),
            ("[not json", "[not json"),
            ("1.2.3", "1.2.3"),
            ("hello", "hello"),
        ],
    )
    def test_infers_type(self, raw: str, expected: object) -> None:
        assert parse_string_value(raw) == expected


class TestDeepMerge:
    def test_merges_nested_dicts(self) -> None:
        base = {"engine": {"max_heading_level": 6, "detect_cycles": True}}
        override = {"engine": {"max_heading_level": 3}}

        assert deep_merge(base, override) == {
            "engine": {"max_heading_level": 3, "detect_cycles": True}
        }

    def test_lists_are_replaced(self) -> None:
        merged = deep_merge({"loader": {"extensions": [".yaml"]}}, {"loader": {"extensions": [".tpl"]}})

        assert merged == {"loader": {"extensions": [".tpl"]}}

    def test_inputs_are_not_modified(self) -> None:
        base = {"a": {"b": [1]}}
        override = {"a": {"c": 2}}

        merged = deep_merge(base, override)
        merged["a"]["b"].append(3)

        assert base == {"a": {"b": [1]}}
        assert override == {"a": {"c": 2}}


class TestSetNestedKey:
    def test_creates_intermediate_dicts(self) -> None:
        data: dict[str, object] = {}

        set_nested_key(data, "helpers.join_separator", " | ")

        assert data == {"helpers": {"join_separator": " | "}}

    def test_replaces_scalar_on_the_path(self) -> None:
        data: dict[str, object] = {"helpers": "oops"}

        set_nested_key(data, "helpers.truncate_length", 10)

        assert data == {"helpers": {"truncate_length": 10}}


class TestParseEnvVars:
    def test_maps_double_underscores_to_sections(self) -> None:
        environ = {
            "DOCWEAVE_ENGINE__MAX_HEADING_LEVEL": "4",
            "DOCWEAVE_HELPERS__JOIN_SEPARATOR": " / ",
            "OTHER_VALUE": "ignored",
        }

        assert parse_env_vars(environ=environ) == {
            "engine": {"max_heading_level": 4},
            "helpers": {"join_separator": " / "},
        }

    def test_skips_logger_variables(self) -> None:
        environ = {"DOCWEAVE_DEBUG": "1", "DOCWEAVE_LOG_LEVEL": "info", "DOCWEAVE_": "x"}

        assert parse_env_vars(environ=environ) == {}


class TestReadTomlFile:
    def test_reads_file(self, fs: "FakeFilesystem") -> None:
        fs.create_file("/cfg/docweave.toml", contents='[engine]\nmax_heading_level = 3\n')

        assert read_toml_file(Path("/cfg/docweave.toml")) == {"engine": {"max_heading_level": 3}}

    def test_invalid_toml(self, fs: "FakeFilesystem") -> None:
        fs.create_file("/cfg/docweave.toml", contents="[engine\n")

        with pytest.raises(ConfigLoadError) as exc_info:
            read_toml_file(Path("/cfg/docweave.toml"))

        assert exc_info.value.path == Path("/cfg/docweave.toml")

    def test_missing_file(self, fs: "FakeFilesystem") -> None:
        with pytest.raises(FileNotFoundError):
            read_toml_file(Path("/cfg/missing.toml"))


class TestConfig:
    def test_defaults(self) -> None:
        config = Config()

        assert config.engine.max_heading_level == 6
        assert config.engine.detect_cycles is True
        assert config.helpers.date_format == "YYYY-MM-DD"
        assert config.helpers.join_separator == ", "
        assert config.helpers.truncate_length == 100
        assert config.loader.extensions == (".yaml", ".yml")
        assert config.loader.library_manifest == "library.yaml"
        assert config.logging.level is LogLevel.WARNING
        assert config.logging.format is LogFormat.TEXT

    def test_from_dict(self) -> None:
        config = Config.from_dict({"logging": {"level": "debug", "format": "json"}})

        assert config.logging.level is LogLevel.DEBUG
        assert config.logging.format is LogFormat.JSON

    @pytest.mark.parametrize(
        "data",
        [
            {"engine": {"max_heading_level": 0}},
            {"engine": {"max_heading_level": 7}},
            {"helpers": {"truncate_length": 0}},
            {"logging": {"level": "loud"}},
        ],
    )
    def test_invalid_values(self, data: dict[str, object]) -> None:
        with pytest.raises(ConfigError, match="Invalid configuration"):
            _ = Config.from_dict(data)

    def test_unknown_keys_are_ignored(self) -> None:
        config = Config.from_dict({"engine": {"colour": "blue"}, "extra": 1})

        assert config == Config()

    def test_load_without_sources(self) -> None:
        assert Config.load(environ={}) == Config()

    def test_load_file(self, fs: "FakeFilesystem") -> None:
        fs.create_file("/cfg/docweave.toml", contents='[helpers]\njoin_separator = " | "\n')

        config = Config.load(Path("/cfg/docweave.toml"), include_env=False)

        assert config.helpers.join_separator == " | "

    def test_environment_overrides_file(self, fs: "FakeFilesystem") -> None:
        fs.create_file(
            "/cfg/docweave.toml",
            contents="[engine]\nmax_heading_level = 3\ndetect_cycles = false\n",
        )
        environ = {
            "DOCWEAVE_ENGINE__MAX_HEADING_LEVEL": "2",
            "DOCWEAVE_LOADER__EXTENSIONS": '[".tpl"]',
        }

        config = Config.load(Path("/cfg/docweave.toml"), environ=environ)

        assert config.engine.max_heading_level == 2
        assert config.engine.detect_cycles is False
        assert config.loader.extensions == (".tpl",)

    def test_environment_ignored_when_disabled(self) -> None:
        environ = {"DOCWEAVE_ENGINE__MAX_HEADING_LEVEL": "2"}

        config = Config.load(include_env=False, environ=environ)

        assert config.engine.max_heading_level == 6

    def test_invalid_environment_value(self) -> None:
        with pytest.raises(ConfigError):
            _ = Config.load(environ={"DOCWEAVE_ENGINE__MAX_HEADING_LEVEL": "deep"})

    def test_is_frozen(self) -> None:
        config = Config()

        with pytest.raises(ValueError, match="frozen"):
            config.engine = config.engine  # pyright: ignore[reportAttributeAccessIssue]


class TestLoadConfig:
    def test_reads_environment(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("DOCWEAVE_HELPERS__TRUNCATE_LENGTH", "20")

        assert load_config().helpers.truncate_length == 20

    def test_environment_can_be_skipped(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("DOCWEAVE_HELPERS__TRUNCATE_LENGTH", "20")

        assert load_config(include_env=False).helpers.truncate_length == 100
