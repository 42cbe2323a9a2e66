# pyright: reportExplicitAny=false, reportAny=false
"""Data models for document templates.

Template definitions and compiled output are frozen Pydantic models. Every
model remembers which fields were supplied explicitly (``model_fields_set``);
inheritance relies on that to let a child override only what it declares.
"""

from enum import StrEnum
from typing import Any, ClassVar, Self

from pydantic import BaseModel, ConfigDict, Field

from docweave.exceptions import SectionNotFoundError

_MODEL_CONFIG = ConfigDict(
    frozen=True,
    extra="ignore",
    populate_by_name=True,
    coerce_numbers_to_str=True,
)

# =============================================================================
# Enums
# =============================================================================


class TemplateScope(StrEnum):
    """Documentation scope a template targets."""

    MVP = "mvp"
    STANDARD = "standard"
    COMPREHENSIVE = "comprehensive"
    ENTERPRISE = "enterprise"


class TemplateAudience(StrEnum):
    """Organisation size a template is written for."""

    STARTUP = "startup"
    BUSINESS = "business"
    ENTERPRISE = "enterprise"


class VariableType(StrEnum):
    """Input types a template variable can declare."""

    STRING = "string"
    NUMBER = "number"
    BOOLEAN = "boolean"
    SELECT = "select"
    MULTISELECT = "multiselect"
    TEXT = "text"
    DATE = "date"


class ConditionOperator(StrEnum):
    """Comparison operators for section visibility conditions."""

    EQUALS = "equals"
    NOT_EQUALS = "not_equals"
    CONTAINS = "contains"
    NOT_CONTAINS = "not_contains"
    GREATER_THAN = "greater_than"
    LESS_THAN = "less_than"
    EXISTS = "exists"
    NOT_EXISTS = "not_exists"


class PromptModel(StrEnum):
    """Text-completion provider preference for a prompt."""

    CLAUDE = "claude"
    GPT_4 = "gpt-4"
    GEMINI = "gemini"
    OLLAMA = "ollama"
    AUTO = "auto"


# =============================================================================
# Template Definition
# =============================================================================


class TemplateMeta(BaseModel):
    """Identifying metadata of a template.

    Attributes:
        id: Unique, stable template identifier (registry key).
        name: Display name, rendered as the document heading.
        description: What the template produces.
        version: Template version string.
        category: Discovery category (see ``TEMPLATE_CATEGORIES``).
        scope: Documentation scope level.
        author: Template author.
        audience: Target audience.
        tags: Free-form discovery tags.
        license: License identifier.
    """

    model_config: ClassVar[ConfigDict] = _MODEL_CONFIG

    id: str
    name: str
    description: str
    version: str
    category: str
    scope: TemplateScope
    author: str | None = None
    audience: TemplateAudience | None = None
    tags: tuple[str, ...] = ()
    license: str | None = None


class VariableOption(BaseModel):
    """A choice offered by a select or multiselect variable."""

    model_config: ClassVar[ConfigDict] = _MODEL_CONFIG

    label: str
    value: str


class TemplateVariable(BaseModel):
    """A typed input the template interpolates.

    Attributes:
        name: Interpolation key, unique within a template.
        label: Display label; ``display_label`` falls back to ``name``.
        type: Input type.
        default: Value used when the caller supplies none.
        required: Whether compilation fails without a value or default.
        description: Help text.
        options: Choices for select types.
        pattern: Validation regex for intake flows.
        min: Lower bound for numbers.
        max: Upper bound for numbers.
    """

    model_config: ClassVar[ConfigDict] = _MODEL_CONFIG

    name: str
    label: str | None = None
    type: VariableType = VariableType.STRING
    default: Any = None
    required: bool = False
    description: str | None = None
    options: tuple[VariableOption, ...] | None = None
    pattern: str | None = None
    min: int | float | None = None
    max: int | float | None = None

    @property
    def display_label(self) -> str:
        """Label shown to users, defaulting to the variable name."""
        return self.label or self.name


class SectionCondition(BaseModel):
    """Visibility rule evaluated against the resolved variables.

    ``operator`` keeps values outside ``ConditionOperator`` as plain strings;
    such conditions always pass.
    """

    model_config: ClassVar[ConfigDict] = _MODEL_CONFIG

    variable: str
    operator: ConditionOperator | str = Field(union_mode="left_to_right")
    value: Any = None


class TemplateSection(BaseModel):
    """A titled, conditionally visible node of the document tree.

    Attributes:
        id: Identifier, unique among siblings.
        title: Heading text (interpolated).
        content: Body source in the interpolation language.
        order: Sort weight applied when merging inherited sections.
        collapsible: Presentation hint for downstream exporters.
        sections: Nested child sections.
        condition: Visibility rule; the whole subtree is dropped when false.
        prompt: Id of a ``TemplatePrompt`` that generates this section.
    """

    model_config: ClassVar[ConfigDict] = _MODEL_CONFIG

    id: str
    title: str
    content: str = ""
    order: int | float | None = None
    collapsible: bool | None = None
    sections: "tuple[TemplateSection, ...] | None" = None
    condition: SectionCondition | None = None
    prompt: str | None = None

    @property
    def sort_key(self) -> float:
        """Order weight, treating a missing order as zero."""
        return self.order if self.order is not None else 0


class TemplatePrompt(BaseModel):
    """AI-generation directive for one section, fulfilled by the host."""

    model_config: ClassVar[ConfigDict] = _MODEL_CONFIG

    id: str
    section: str
    user: str
    system: str | None = None
    model: PromptModel | None = None
    temperature: float | None = None
    max_tokens: int | None = Field(default=None, alias="maxTokens")


class CustomTemplate(BaseModel):
    """A complete template definition.

    Attributes:
        meta: Identifying metadata.
        variables: Variable schema, in declaration order.
        sections: Root sections of the document tree.
        extends: Id of a registered parent template.
        prompts: AI-generation directives consumed by the host.
    """

    model_config: ClassVar[ConfigDict] = _MODEL_CONFIG

    meta: TemplateMeta
    variables: tuple[TemplateVariable, ...] = ()
    sections: tuple[TemplateSection, ...] = ()
    extends: str | None = None
    prompts: tuple[TemplatePrompt, ...] = ()

    @property
    def id(self) -> str:
        """Shortcut for ``meta.id``."""
        return self.meta.id


class TemplateLibrary(BaseModel):
    """Manifest grouping template files into a versioned library."""

    model_config: ClassVar[ConfigDict] = _MODEL_CONFIG

    name: str
    version: str
    templates: tuple[str, ...]
    description: str | None = None
    base_path: str | None = Field(default=None, alias="basePath")
    remote: str | None = None


# =============================================================================
# Compiled Output
# =============================================================================


class CompiledSection(BaseModel):
    """A section after condition pruning and interpolation.

    Attributes:
        id: Source section id.
        title: Interpolated title.
        content: Interpolated content.
        sections: Compiled children.
        prompt: Prompt id carried over from the source section.
        ai_generated: Whether ``content`` was supplied by a text-completion host.
    """

    model_config: ClassVar[ConfigDict] = _MODEL_CONFIG

    id: str
    title: str
    content: str
    sections: "tuple[CompiledSection, ...]" = ()
    prompt: str | None = None
    ai_generated: bool = False

    def iter_tree(self) -> "list[CompiledSection]":
        """Return this section and all descendants, depth-first."""
        result = [self]
        for child in self.sections:
            result.extend(child.iter_tree())
        return result


def _replace_section(
    sections: tuple[CompiledSection, ...],
    section_id: str,
    content: str,
) -> tuple[tuple[CompiledSection, ...], bool]:
    """Replace the first section with ``section_id`` (depth-first)."""
    updated: list[CompiledSection] = []
    found = False
    for section in sections:
        if found:
            updated.append(section)
        elif section.id == section_id:
            updated.append(
                section.model_copy(update={"content": content, "ai_generated": True})
            )
            found = True
        else:
            children, found = _replace_section(section.sections, section_id, content)
            updated.append(
                section.model_copy(update={"sections": children}) if found else section
            )
    return tuple(updated), found


class CompiledTemplate(BaseModel):
    """Fully resolved, pruned and interpolated template ready for rendering.

    Attributes:
        template: The inheritance-resolved template definition.
        sections: Compiled root sections.
        variables: Resolved variable mapping used for compilation.
    """

    model_config: ClassVar[ConfigDict] = _MODEL_CONFIG

    template: CustomTemplate
    sections: tuple[CompiledSection, ...]
    variables: dict[str, Any]

    def iter_sections(self) -> list[CompiledSection]:
        """Return every compiled section, depth-first."""
        result: list[CompiledSection] = []
        for section in self.sections:
            result.extend(section.iter_tree())
        return result

    def find_section(self, section_id: str) -> CompiledSection | None:
        """Find a compiled section by id, depth-first."""
        for section in self.iter_sections():
            if section.id == section_id:
                return section
        return None

    def pending_prompts(self) -> tuple[TemplatePrompt, ...]:
        """Prompts whose target section survived condition pruning."""
        present = {section.id for section in self.iter_sections()}
        return tuple(p for p in self.template.prompts if p.section in present)

    def with_generated_content(self, section_id: str, content: str) -> Self:
        """Return a copy with one section's content supplied by a host.

        The section is marked ``ai_generated``. This instance is not modified.

        Raises:
            SectionNotFoundError: If no compiled section has ``section_id``.
        """
        sections, found = _replace_section(self.sections, section_id, content)
        if not found:
            msg = f"Section not found in compiled template: {section_id}"
            raise SectionNotFoundError(msg, section_id=section_id)
        return self.model_copy(update={"sections": sections})
