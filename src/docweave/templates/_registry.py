"""Template registry.

This module provides the TemplateRegistry class, an in-memory mapping of
template ids to definitions. A registry is an ordinary value owned by the
caller and handed to the engine; there is no process-wide instance.

Example:
    >>> from docweave.templates import TemplateRegistry, create_blank_template
    >>> registry = TemplateRegistry()
    >>> registry.register(create_blank_template("prd", "PRD"))
    >>> "prd" in registry
    True
"""

import builtins
from collections.abc import Iterable, Iterator

from docweave.exceptions import TemplateNotFoundError, TemplateValidationError

from ._models import CustomTemplate


class TemplateRegistry:
    """Mapping of template ids to template definitions.

    Re-registering an id replaces the previous definition. Mutation is not
    synchronized; a host sharing one registry between threads serializes
    its own ``register`` calls.
    """

    __slots__ = ("_templates",)

    def __init__(self, templates: Iterable[CustomTemplate] = ()) -> None:
        self._templates: dict[str, CustomTemplate] = {}
        self.register_all(templates)

    def register(self, template: CustomTemplate) -> None:
        """Register a template under ``template.meta.id``."""
        self._templates[template.meta.id] = template

    def register_all(self, templates: Iterable[CustomTemplate]) -> None:
        """Register a batch of templates, all or nothing.

        Raises:
            TemplateValidationError: If the batch holds the same id twice.
                Nothing is registered in that case.
        """
        batch = list(templates)
        seen: set[str] = set()
        for template in batch:
            if template.meta.id in seen:
                msg = f"Duplicate template id in batch: {template.meta.id}"
                raise TemplateValidationError(msg, field="meta.id")
            seen.add(template.meta.id)
        for template in batch:
            self.register(template)

    def unregister(self, template_id: str) -> CustomTemplate | None:
        """Remove a template, returning it (or None if it was absent)."""
        return self._templates.pop(template_id, None)

    def get(self, template_id: str) -> CustomTemplate | None:
        """Get a template by id, or None if not registered."""
        return self._templates.get(template_id)

    def get_or_raise(self, template_id: str) -> CustomTemplate:
        """Get a template by id.

        Raises:
            TemplateNotFoundError: If the id is not registered.
        """
        template = self._templates.get(template_id)
        if template is None:
            msg = f"Template not found: {template_id}"
            raise TemplateNotFoundError(msg, template_id=template_id)
        return template

    def list(self) -> builtins.list[CustomTemplate]:
        """All templates, in registration order."""
        return list(self._templates.values())

    def ids(self) -> builtins.list[str]:
        """All registered ids, in registration order."""
        return list(self._templates)

    def __contains__(self, template_id: object) -> bool:
        return template_id in self._templates

    def __len__(self) -> int:
        return len(self._templates)

    def __iter__(self) -> Iterator[CustomTemplate]:
        return iter(self._templates.values())
