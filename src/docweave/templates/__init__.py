r"""docweave template compilation.

Declarative document templates (metadata, typed variables, a tree of
conditional sections and optional inheritance) compiled into Markdown.

Basic usage:
    from docweave.templates import TemplateEngine, TemplateLoader

    loader = TemplateLoader("templates")
    engine = TemplateEngine()
    for template in loader.load_directory("."):
        engine.register_template(template)

    markdown = engine.process("prd", {"projectName": "Atlas"})

Interpolation language:
    {{name}}                          variable substitution
    {{#if flag}}...{{else}}...{{/if}} conditional (also {{#unless}})
    {{#each items}}{{this}}{{/each}}  loop with this, @index, @first, @last
    {{uppercase name}}                helper call
    {{join (uppercase tags) " / "}}   nested helper call

Names that are neither variables nor helpers are left exactly as written.

Inheritance:
    A template with ``extends`` is merged onto its (recursively resolved)
    parent. Child records override only the fields they declare; variables
    merge by name, sections by id, prompts concatenate.

Prompt hand-off:
    compiled = engine.compile("prd", variables)
    for prompt in compiled.pending_prompts():
        text = my_model.complete(prompt.user)
        compiled = compiled.with_generated_content(prompt.section, text)
    markdown = engine.render(compiled)
"""

from ._compiler import compile_sections
from ._conditions import evaluate_condition
from ._defaults import STANDARD_VARIABLES, TEMPLATE_CATEGORIES, create_blank_template
from ._engine import TemplateEngine, create_template_engine
from ._helpers import (
    HelperRegistry,
    TemplateHelper,
    create_helper_registry,
    format_date,
)
from ._inheritance import TemplateLookup, resolve_inheritance
from ._interpolation import Interpolator
from ._loader import TemplateLoader
from ._merge import merge_meta, merge_prompts, merge_sections, merge_variables
from ._models import (
    CompiledSection,
    CompiledTemplate,
    ConditionOperator,
    CustomTemplate,
    PromptModel,
    SectionCondition,
    TemplateAudience,
    TemplateLibrary,
    TemplateMeta,
    TemplatePrompt,
    TemplateScope,
    TemplateSection,
    TemplateVariable,
    VariableOption,
    VariableType,
)
from ._registry import TemplateRegistry
from ._renderer import render
from ._values import is_truthy, stringify
from ._variables import resolve_variables

__all__ = [
    "STANDARD_VARIABLES",
    "TEMPLATE_CATEGORIES",
    "CompiledSection",
    "CompiledTemplate",
    "ConditionOperator",
    "CustomTemplate",
    "HelperRegistry",
    "Interpolator",
    "PromptModel",
    "SectionCondition",
    "TemplateAudience",
    "TemplateEngine",
    "TemplateHelper",
    "TemplateLibrary",
    "TemplateLoader",
    "TemplateLookup",
    "TemplateMeta",
    "TemplatePrompt",
    "TemplateRegistry",
    "TemplateScope",
    "TemplateSection",
    "TemplateVariable",
    "VariableOption",
    "VariableType",
    "compile_sections",
    "create_blank_template",
    "create_helper_registry",
    "create_template_engine",
    "evaluate_condition",
    "format_date",
    "is_truthy",
    "merge_meta",
    "merge_prompts",
    "merge_sections",
    "merge_variables",
    "render",
    "resolve_inheritance",
    "resolve_variables",
    "stringify",
]
