"""Markdown rendering of compiled templates."""

from ._interpolation import Interpolator
from ._models import CompiledSection, CompiledTemplate

DEFAULT_MAX_HEADING_LEVEL = 6


def render(
    compiled: CompiledTemplate,
    interpolator: Interpolator,
    *,
    max_heading_level: int = DEFAULT_MAX_HEADING_LEVEL,
) -> str:
    """Render a compiled template as a Markdown document.

    The document starts with the template name as a level-one heading.
    Root sections are level two and every nesting step adds one level, up
    to ``max_heading_level``. A section contributes its heading, a blank
    line, and then its stripped content followed by a blank line when the
    content is not blank.

    Args:
        compiled: The compiled template.
        interpolator: Applied to the template name (section text is
            already interpolated).
        max_heading_level: Deepest heading level emitted.

    Returns:
        The Markdown text, lines joined with ``\\n``.
    """
    name = interpolator.interpolate(compiled.template.meta.name, compiled.variables)
    lines = [f"# {name}", ""]
    for section in compiled.sections:
        _render_section(section, 2, max_heading_level, lines)
    return "\n".join(lines)


def _render_section(
    section: CompiledSection,
    level: int,
    max_heading_level: int,
    lines: list[str],
) -> None:
    heading = "#" * min(level, max_heading_level)
    lines.extend((f"{heading} {section.title}", ""))

    content = section.content.strip()
    if content:
        lines.extend((content, ""))

    for child in section.sections:
        _render_section(child, level + 1, max_heading_level, lines)
