"""Template engine facade.

The engine ties the pieces together: it looks templates up in a registry,
flattens inheritance, resolves variables, compiles the section tree and
renders Markdown.

Example:
    >>> from docweave.templates import TemplateEngine, create_blank_template
    >>> engine = TemplateEngine()
    >>> engine.register_template(create_blank_template("prd", "PRD"))
    >>> markdown = engine.process(
    ...     "prd", {"projectName": "Atlas", "projectDescription": "Maps."}
    ... )
"""

from collections.abc import Callable, Iterable, Mapping
from datetime import datetime

from structlog.typing import FilteringBoundLogger

from docweave.config import Config
from docweave.utils import create_configured_logger

from ._compiler import compile_sections
from ._helpers import HelperRegistry, TemplateHelper, create_helper_registry
from ._inheritance import resolve_inheritance
from ._interpolation import Interpolator
from ._models import CompiledTemplate, CustomTemplate
from ._registry import TemplateRegistry
from ._renderer import render
from ._variables import resolve_variables


class TemplateEngine:
    """Compiles and renders templates held in a registry.

    The engine owns its helper registry; ``register_helper`` affects only
    this engine. Compilation is pure: the same template and variables always
    yield the same output (the ``date`` helper aside).
    """

    __slots__ = ("_config", "_helpers", "_interpolator", "_logger", "_registry")

    def __init__(
        self,
        registry: TemplateRegistry | None = None,
        *,
        config: Config | None = None,
        logger: FilteringBoundLogger | None = None,
        helpers: HelperRegistry | None = None,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        """Initialize the engine.

        Args:
            registry: Templates to compile; a new empty registry if omitted.
            config: Engine, helper and logging settings; defaults if omitted.
            logger: Logger for engine events; built from ``config`` if omitted.
            helpers: Helper registry to use instead of the built-ins.
            clock: Source of "now" for the built-in ``date`` helper.
        """
        self._config: Config = config if config is not None else Config()
        self._registry: TemplateRegistry = (
            registry if registry is not None else TemplateRegistry()
        )
        self._logger: FilteringBoundLogger = (
            logger
            if logger is not None
            else create_configured_logger(self._config.logging, component="engine")
        )
        if helpers is None:
            settings = self._config.helpers
            helpers = create_helper_registry(
                date_format=settings.date_format,
                join_separator=settings.join_separator,
                truncate_length=settings.truncate_length,
                clock=clock,
            )
        self._helpers: HelperRegistry = helpers
        self._interpolator: Interpolator = Interpolator(helpers)

    @property
    def registry(self) -> TemplateRegistry:
        return self._registry

    @property
    def helpers(self) -> HelperRegistry:
        return self._helpers

    @property
    def config(self) -> Config:
        return self._config

    # -------------------------------------------------------------------------
    # Registry
    # -------------------------------------------------------------------------

    def register_template(self, template: CustomTemplate) -> None:
        """Register a template, replacing any with the same id."""
        self._registry.register(template)
        self._logger.debug(
            "template_registered",
            template_id=template.id,
            extends=template.extends,
        )

    def get_template(self, template_id: str) -> CustomTemplate | None:
        """Get a registered template by id, or None."""
        return self._registry.get(template_id)

    def list_templates(self) -> list[CustomTemplate]:
        """All registered templates, in registration order."""
        return self._registry.list()

    def register_helper(self, name: str, helper: TemplateHelper) -> None:
        """Register or replace an interpolation helper on this engine."""
        self._helpers.register(name, helper)

    # -------------------------------------------------------------------------
    # Compilation
    # -------------------------------------------------------------------------

    def _lookup(self, template_or_id: CustomTemplate | str) -> CustomTemplate:
        if isinstance(template_or_id, str):
            return self._registry.get_or_raise(template_or_id)
        return template_or_id

    def resolve(self, template_or_id: CustomTemplate | str) -> CustomTemplate:
        """Flatten a template's inheritance chain.

        Raises:
            TemplateNotFoundError: If an id is given that is not registered.
            ParentNotFoundError: If a parent is not registered.
            InheritanceCycleError: If the ``extends`` chain loops.
        """
        return resolve_inheritance(
            self._lookup(template_or_id),
            self._registry,
            detect_cycles=self._config.engine.detect_cycles,
            logger=self._logger,
        )

    def compile(
        self,
        template_or_id: CustomTemplate | str,
        variables: Mapping[str, object] | None = None,
    ) -> CompiledTemplate:
        """Compile a template with the given variable values.

        Args:
            template_or_id: Template, or id of a registered template. The
                template itself need not be registered; its parents must be.
            variables: Caller-supplied variable values.

        Returns:
            The compiled template.

        Raises:
            TemplateNotFoundError: If an id is given that is not registered.
            ParentNotFoundError: If a parent is not registered.
            InheritanceCycleError: If the ``extends`` chain loops.
            MissingRequiredVariableError: If a required variable has no value.
            HelperError: If a helper fails.
        """
        resolved = self.resolve(template_or_id)
        values = resolve_variables(resolved.variables, variables, template_id=resolved.id)
        sections = compile_sections(
            resolved.sections, values, self._interpolator, logger=self._logger
        )
        self._logger.debug(
            "template_compiled",
            template_id=resolved.id,
            section_count=len(sections),
            variable_count=len(values),
        )
        return CompiledTemplate(template=resolved, sections=sections, variables=values)

    def render(self, compiled: CompiledTemplate) -> str:
        """Render a compiled template as Markdown."""
        return render(
            compiled,
            self._interpolator,
            max_heading_level=self._config.engine.max_heading_level,
        )

    def process(
        self,
        template_or_id: CustomTemplate | str,
        variables: Mapping[str, object] | None = None,
    ) -> str:
        """Compile and render in one step."""
        return self.render(self.compile(template_or_id, variables))

    def interpolate(self, text: str, variables: Mapping[str, object]) -> str:
        """Apply the interpolation language to arbitrary text."""
        return self._interpolator.interpolate(text, variables)


def create_template_engine(
    templates: Iterable[CustomTemplate] = (),
    *,
    config: Config | None = None,
    logger: FilteringBoundLogger | None = None,
) -> TemplateEngine:
    """Create an engine with a fresh registry holding ``templates``.

    Raises:
        TemplateValidationError: If ``templates`` holds the same id twice.
    """
    return TemplateEngine(
        TemplateRegistry(templates),
        config=config,
        logger=logger,
    )
