# pyright: reportExplicitAny=false, reportAny=false
"""Loading and validation of YAML template definitions.

This module provides the TemplateLoader class, which reads template
definitions and library manifests from YAML files and validates them into
``CustomTemplate`` and ``TemplateLibrary`` models.

A template file looks like::

    meta:
      id: prd
      name: Product Requirements
      description: Requirements document
      version: 1.0.0
      category: product
      scope: standard
    variables:
      - name: projectName
        required: true
    sections:
      - id: overview
        title: Overview
        content: "{{projectName}} overview"
"""

from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import Any, Final

import yaml
from pydantic import BaseModel, ValidationError
from structlog.typing import FilteringBoundLogger

from docweave.config import Config, LoaderSettings
from docweave.exceptions import (
    MissingRequiredFieldError,
    TemplateIOError,
    TemplateParseError,
    TemplateValidationError,
)
from docweave.utils import create_configured_logger

from ._defaults import TEMPLATE_CATEGORIES, create_blank_template
from ._models import CustomTemplate, TemplateLibrary

_META_REQUIRED: Final = ("id", "name", "description", "version", "category", "scope")
_VARIABLE_REQUIRED: Final = ("name",)
_SECTION_REQUIRED: Final = ("id", "title")
_PROMPT_REQUIRED: Final = ("id", "section", "user")
_LIBRARY_REQUIRED: Final = ("name", "version", "templates")


# =============================================================================
# Parsing Helpers
# =============================================================================


def _where(source: str | None) -> str:
    return f" in {source}" if source else ""


def _load_yaml_mapping(content: str, source: str | None) -> dict[str, Any]:
    """Parse YAML text that must hold a mapping at the top level.

    Raises:
        TemplateParseError: If the text is not valid YAML or not a mapping.
    """
    try:
        data = yaml.safe_load(content)
    except yaml.YAMLError as e:
        mark = getattr(e, "problem_mark", None)
        line = mark.line + 1 if mark is not None else None
        msg = f"Invalid YAML{_where(source)}: {e}"
        raise TemplateParseError(msg, source=source, line=line, cause=e) from e

    if not isinstance(data, dict):
        actual_type = type(data).__name__
        msg = f"Expected a YAML mapping{_where(source)}, got {actual_type}"
        raise TemplateParseError(msg, source=source)

    return data


def _require(
    record: Mapping[str, Any],
    fields: Sequence[str],
    *,
    entity: str,
    path: str,
    source: str | None,
    index: int | None = None,
) -> None:
    """Check that every field is present and not empty."""
    for field in fields:
        if not record.get(field):
            location = f"{path}.{field}" if path else field
            msg = f"Invalid {entity}: missing {location}{_where(source)}"
            raise MissingRequiredFieldError(
                msg, field=field, entity=entity, source=source, index=index
            )


def _records(
    data: Mapping[str, Any],
    key: str,
    *,
    path: str,
    source: str | None,
) -> list[Any]:
    """Return ``data[key]`` as a list of mappings (empty if absent)."""
    value = data.get(key)
    if value is None:
        return []
    location = f"{path}.{key}" if path else key
    if not isinstance(value, list):
        msg = f"Expected a list for {location}{_where(source)}"
        raise TemplateValidationError(msg, source=source, field=location)
    for index, item in enumerate(value):
        if not isinstance(item, dict):
            msg = f"Expected a mapping at {location}[{index}]{_where(source)}"
            raise TemplateValidationError(msg, source=source, field=f"{location}[{index}]")
    return value


def _check_sections(data: Mapping[str, Any], *, path: str, source: str | None) -> None:
    for index, section in enumerate(_records(data, "sections", path=path, source=source)):
        location = f"{path}.sections[{index}]" if path else f"sections[{index}]"
        _require(
            section, _SECTION_REQUIRED, entity="section", path=location, source=source, index=index
        )
        _check_sections(section, path=location, source=source)


def _model_validate[T: BaseModel](model: type[T], data: Mapping[str, Any], source: str | None) -> T:
    """Validate with pydantic, reporting the first failing field."""
    try:
        return model.model_validate(data)
    except ValidationError as e:
        first = e.errors()[0]
        field = ".".join(str(part) for part in first["loc"])
        msg = f"Invalid value for {field}{_where(source)}: {first['msg']}"
        raise TemplateValidationError(msg, source=source, field=field) from e


# =============================================================================
# Loader
# =============================================================================


class TemplateLoader:
    """Loads template definitions from YAML text, files and directories.

    Relative paths are resolved against ``base_path`` (the working
    directory at construction when omitted).

    Example:
        >>> loader = TemplateLoader("/srv/templates")
        >>> template = loader.load_file("prd.yaml")  # doctest: +SKIP
    """

    __slots__ = ("_base_path", "_logger", "_settings")

    def __init__(
        self,
        base_path: Path | str | None = None,
        *,
        config: Config | None = None,
        logger: FilteringBoundLogger | None = None,
    ) -> None:
        config = config if config is not None else Config()
        self._base_path: Path = Path(base_path) if base_path is not None else Path.cwd()
        self._settings: LoaderSettings = config.loader
        self._logger: FilteringBoundLogger = (
            logger
            if logger is not None
            else create_configured_logger(config.logging, component="loader")
        )

    @property
    def base_path(self) -> Path:
        return self._base_path

    def _resolve_path(self, path: Path | str) -> Path:
        path = Path(path)
        return path if path.is_absolute() else self._base_path / path

    def _is_template_file(self, path: Path) -> bool:
        return (
            path.suffix.lower() in self._settings.extensions
            and path.name != self._settings.library_manifest
        )

    def _read(self, path: Path) -> str:
        try:
            return path.read_text(encoding="utf-8")
        except OSError as e:
            msg = f"Failed to read template file {path}: {e}"
            raise TemplateIOError(msg, path=path, operation="read", cause=e) from e

    # -------------------------------------------------------------------------
    # Parsing and validation
    # -------------------------------------------------------------------------

    def parse(self, content: str, source: str | None = None) -> CustomTemplate:
        """Parse YAML text into a template.

        Args:
            content: YAML text of one template definition.
            source: File name or label used in error messages.

        Raises:
            TemplateParseError: If the text is not valid YAML or not a mapping.
            TemplateValidationError: If the definition is invalid.
        """
        return self.validate(_load_yaml_mapping(content, source), source)

    def validate(self, data: Mapping[str, Any], source: str | None = None) -> CustomTemplate:
        """Validate a raw mapping into a template.

        Mandatory fields (all six meta fields, variable ``name``, section
        ``id`` and ``title`` at every depth, prompt ``id``, ``section`` and
        ``user``) must be present and non-empty. Only keys present in
        ``data`` are set on the models, so inheritance later overrides
        exactly what a child template declares.

        Raises:
            MissingRequiredFieldError: If a mandatory field is absent or empty.
            TemplateValidationError: If a value has the wrong type or is
                outside its allowed set.
        """
        meta = data.get("meta")
        if not isinstance(meta, dict) or not meta:
            msg = f"Invalid template: missing meta section{_where(source)}"
            raise MissingRequiredFieldError(msg, field="meta", entity="template", source=source)
        _require(meta, _META_REQUIRED, entity="meta", path="meta", source=source)

        for index, variable in enumerate(_records(data, "variables", path="", source=source)):
            _require(
                variable,
                _VARIABLE_REQUIRED,
                entity="variable",
                path=f"variables[{index}]",
                source=source,
                index=index,
            )
        _check_sections(data, path="", source=source)
        for index, prompt in enumerate(_records(data, "prompts", path="", source=source)):
            _require(
                prompt,
                _PROMPT_REQUIRED,
                entity="prompt",
                path=f"prompts[{index}]",
                source=source,
                index=index,
            )

        template = _model_validate(CustomTemplate, data, source)

        if template.meta.category not in TEMPLATE_CATEGORIES:
            self._logger.debug(
                "nonstandard_category",
                template_id=template.id,
                category=template.meta.category,
                source=source,
            )
        return template

    # -------------------------------------------------------------------------
    # Files
    # -------------------------------------------------------------------------

    def load_file(self, path: Path | str) -> CustomTemplate:
        """Load one template file.

        Raises:
            TemplateIOError: If the file cannot be read.
            TemplateParseError: If the file is not valid YAML.
            TemplateValidationError: If the definition is invalid.
        """
        full_path = self._resolve_path(path)
        template = self.parse(self._read(full_path), str(full_path))
        self._logger.debug("template_loaded", template_id=template.id, path=str(full_path))
        return template

    def load_directory(self, path: Path | str) -> list[CustomTemplate]:
        """Load every template file under a directory, recursively.

        Files are visited in sorted path order. Library manifests and files
        with other extensions are skipped. The first invalid file aborts the
        whole load.

        Raises:
            TemplateIOError: If the directory does not exist or a file cannot
                be read.
            TemplateParseError: If a file is not valid YAML.
            TemplateValidationError: If a definition is invalid.
        """
        directory = self._resolve_path(path)
        if not directory.is_dir():
            msg = f"Template directory not found: {directory}"
            raise TemplateIOError(msg, path=directory, operation="list")

        return [
            self.load_file(file_path)
            for file_path in sorted(directory.rglob("*"))
            if file_path.is_file() and self._is_template_file(file_path)
        ]

    def load_library(self, path: Path | str) -> tuple[TemplateLibrary, list[CustomTemplate]]:
        """Load a template library directory.

        The directory must hold a manifest (``library.yaml`` by default)
        naming the library and listing its template files, relative to the
        manifest's ``basePath`` when given, else to the directory.

        Returns:
            The library manifest and its templates, in manifest order.

        Raises:
            TemplateIOError: If the manifest or a template cannot be read.
            TemplateParseError: If a file is not valid YAML.
            TemplateValidationError: If the manifest or a template is invalid.
        """
        directory = self._resolve_path(path)
        manifest_path = directory / self._settings.library_manifest
        source = str(manifest_path)

        data = _load_yaml_mapping(self._read(manifest_path), source)
        _require(data, _LIBRARY_REQUIRED, entity="library", path="", source=source)
        library = _model_validate(TemplateLibrary, data, source)

        root = directory / library.base_path if library.base_path else directory
        templates = [self.load_file(root / entry) for entry in library.templates]

        self._logger.info(
            "library_loaded",
            library=library.name,
            version=library.version,
            template_count=len(templates),
        )
        return library, templates

    # -------------------------------------------------------------------------
    # Authoring
    # -------------------------------------------------------------------------

    @staticmethod
    def to_yaml(template: CustomTemplate) -> str:
        """Serialize a template to YAML.

        Only fields set on the models are written, so parsing the output
        yields the same explicit fields and inheritance merges behave the
        same as with the original template.
        """
        data = template.model_dump(mode="json", by_alias=True, exclude_unset=True)
        return yaml.safe_dump(data, default_flow_style=False, allow_unicode=True, sort_keys=False)

    @staticmethod
    def create_blank_template(template_id: str, name: str) -> CustomTemplate:
        """Create a minimal template scaffold (see ``create_blank_template``)."""
        return create_blank_template(template_id, name)
