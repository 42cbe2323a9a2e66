"""Section tree compilation."""

from collections.abc import Iterable, Mapping

from structlog.typing import FilteringBoundLogger

from ._conditions import evaluate_condition
from ._interpolation import Interpolator
from ._models import CompiledSection, TemplateSection


def compile_sections(
    sections: Iterable[TemplateSection],
    variables: Mapping[str, object],
    interpolator: Interpolator,
    *,
    logger: FilteringBoundLogger | None = None,
) -> tuple[CompiledSection, ...]:
    """Compile sections in declared order.

    A section whose condition is false is dropped together with its whole
    subtree. Titles and content of the remaining sections are interpolated
    and children compiled recursively.

    Args:
        sections: Sections to compile.
        variables: Resolved variables.
        interpolator: Interpolator applied to titles and content.
        logger: Passed to condition evaluation.

    Returns:
        The compiled sections.
    """
    compiled: list[CompiledSection] = []

    for section in sections:
        if section.condition is not None and not evaluate_condition(
            section.condition, variables, logger=logger
        ):
            continue

        children: tuple[CompiledSection, ...] = ()
        if section.sections:
            children = compile_sections(
                section.sections, variables, interpolator, logger=logger
            )

        compiled.append(
            CompiledSection(
                id=section.id,
                title=interpolator.interpolate(section.title, variables),
                content=interpolator.interpolate(section.content, variables),
                sections=children,
                prompt=section.prompt,
            )
        )

    return tuple(compiled)
