"""Template inheritance resolution."""

from typing import Protocol

from structlog.typing import FilteringBoundLogger

from docweave.exceptions import InheritanceCycleError, ParentNotFoundError

from ._merge import merge_meta, merge_prompts, merge_sections, merge_variables
from ._models import CustomTemplate


class TemplateLookup(Protocol):
    """Anything that can look a template up by id."""

    def get(self, template_id: str, /) -> CustomTemplate | None: ...


def resolve_inheritance(
    template: CustomTemplate,
    registry: TemplateLookup,
    *,
    detect_cycles: bool = True,
    logger: FilteringBoundLogger | None = None,
) -> CustomTemplate:
    """Flatten a template's ``extends`` chain into a single template.

    The parent is resolved first, so chains of any depth collapse from the
    root down. A template without ``extends`` is returned unchanged (the
    same object). The result never has ``extends`` set.

    Args:
        template: Template to resolve.
        registry: Source of parent templates.
        detect_cycles: Raise on ``extends`` cycles instead of recursing.
        logger: Receives an ``inheritance_resolved`` debug event.

    Returns:
        The flattened template.

    Raises:
        ParentNotFoundError: If a parent id is not in the registry.
        InheritanceCycleError: If ``detect_cycles`` is set and the chain loops.
    """
    if template.extends is None:
        return template

    resolved, chain = _resolve(template, registry, (), detect_cycles=detect_cycles)
    if logger is not None:
        logger.debug("inheritance_resolved", template_id=template.id, chain=list(chain))
    return resolved


def _resolve(
    template: CustomTemplate,
    registry: TemplateLookup,
    seen: tuple[str, ...],
    *,
    detect_cycles: bool,
) -> tuple[CustomTemplate, tuple[str, ...]]:
    chain = (*seen, template.id)
    parent_id = template.extends
    if parent_id is None:
        return template, chain

    if detect_cycles and parent_id in chain:
        loop = (*chain, parent_id)
        msg = f"Inheritance cycle: {' -> '.join(loop)}"
        raise InheritanceCycleError(msg, chain=loop)

    parent = registry.get(parent_id)
    if parent is None:
        msg = f"Parent template not found: {parent_id} (extended by {template.id})"
        raise ParentNotFoundError(msg, template_id=parent_id, child_id=template.id)

    base, chain = _resolve(parent, registry, chain, detect_cycles=detect_cycles)
    merged = CustomTemplate(
        meta=merge_meta(base.meta, template.meta),
        variables=merge_variables(base.variables, template.variables),
        sections=merge_sections(base.sections, template.sections),
        prompts=merge_prompts(base.prompts, template.prompts),
    )
    return merged, chain
