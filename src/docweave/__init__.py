"""docweave: declarative document templates compiled to Markdown."""

from docweave.exceptions import DocweaveError, TemplateError
from docweave.templates import (
    CompiledTemplate,
    CustomTemplate,
    TemplateEngine,
    TemplateLoader,
    TemplateRegistry,
    create_template_engine,
)

__all__ = [
    "CompiledTemplate",
    "CustomTemplate",
    "DocweaveError",
    "TemplateEngine",
    "TemplateError",
    "TemplateLoader",
    "TemplateRegistry",
    "create_template_engine",
]
