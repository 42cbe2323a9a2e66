"""Built-in categories, standard variables and the blank template scaffold."""

from types import MappingProxyType
from typing import Final

from ._models import (
    CustomTemplate,
    TemplateMeta,
    TemplateScope,
    TemplateSection,
    TemplateVariable,
    VariableOption,
    VariableType,
)

TEMPLATE_CATEGORIES: Final[tuple[str, ...]] = (
    "product",
    "technical",
    "design",
    "testing",
    "operations",
    "compliance",
    "business",
    "custom",
)

STANDARD_VARIABLES: Final = MappingProxyType(
    {
        "projectName": TemplateVariable(
            name="projectName",
            label="Project Name",
            type=VariableType.STRING,
            required=True,
            description="The name of your project",
        ),
        "projectDescription": TemplateVariable(
            name="projectDescription",
            label="Project Description",
            type=VariableType.TEXT,
            required=True,
            description="A detailed description of your project",
        ),
        "scope": TemplateVariable(
            name="scope",
            label="Documentation Scope",
            type=VariableType.SELECT,
            options=(
                VariableOption(label="MVP (4 docs)", value="mvp"),
                VariableOption(label="Standard (12 docs)", value="standard"),
                VariableOption(label="Comprehensive (22 docs)", value="comprehensive"),
            ),
            default="standard",
        ),
        "audience": TemplateVariable(
            name="audience",
            label="Target Audience",
            type=VariableType.SELECT,
            options=(
                VariableOption(label="Startup", value="startup"),
                VariableOption(label="Business", value="business"),
                VariableOption(label="Enterprise", value="enterprise"),
            ),
            default="business",
        ),
    }
)
"""Reusable definitions for variables most templates declare, by name."""


def create_blank_template(template_id: str, name: str) -> CustomTemplate:
    """Create a minimal template to start authoring from.

    The scaffold declares ``projectName`` and ``projectDescription`` and has
    an "Overview" section showing the description and a "Details" section
    with placeholder text.

    Args:
        template_id: Id of the new template.
        name: Display name of the new template.

    Returns:
        The scaffold template.

    Example:
        >>> template = create_blank_template("my-prd", "My PRD")
        >>> [section.id for section in template.sections]
        ['overview', 'details']
    """
    return CustomTemplate(
        meta=TemplateMeta(
            id=template_id,
            name=name,
            description="A custom template",
            version="1.0.0",
            category="custom",
            scope=TemplateScope.STANDARD,
        ),
        variables=(
            STANDARD_VARIABLES["projectName"],
            STANDARD_VARIABLES["projectDescription"],
        ),
        sections=(
            TemplateSection(
                id="overview",
                title="Overview",
                content="{{projectDescription}}",
                order=1,
            ),
            TemplateSection(
                id="details",
                title="Details",
                content="Add your content here.",
                order=2,
            ),
        ),
    )
