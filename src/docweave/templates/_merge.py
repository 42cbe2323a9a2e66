# pyright: reportExplicitAny=false, reportAny=false
"""Typed merges of parent and child template records.

A child record overrides only the fields it set explicitly (pydantic's
``model_fields_set``); everything else is inherited from the parent. Lists
of keyed records (variables by ``name``, sections by ``id``) keep parent
order first, with new child records appended.
"""

from collections.abc import Iterable
from typing import Any

from pydantic import BaseModel

from ._models import TemplateMeta, TemplatePrompt, TemplateSection, TemplateVariable


def explicit_fields(record: BaseModel, *, exclude: frozenset[str] = frozenset()) -> dict[str, Any]:
    """Fields the record was created with, by name."""
    return {
        name: getattr(record, name)
        for name in record.model_fields_set
        if name not in exclude
    }


def merge_meta(parent: TemplateMeta, child: TemplateMeta) -> TemplateMeta:
    """Shallow merge, child fields win."""
    return parent.model_copy(update=explicit_fields(child))


def merge_variable(parent: TemplateVariable, child: TemplateVariable) -> TemplateVariable:
    """Field-by-field merge of two definitions of the same variable."""
    return parent.model_copy(update=explicit_fields(child))


def merge_variables(
    parent: Iterable[TemplateVariable],
    child: Iterable[TemplateVariable],
) -> tuple[TemplateVariable, ...]:
    """Merge variable schemas keyed by name, parent-first order."""
    merged: dict[str, TemplateVariable] = {variable.name: variable for variable in parent}
    for variable in child:
        existing = merged.get(variable.name)
        merged[variable.name] = (
            merge_variable(existing, variable) if existing is not None else variable
        )
    return tuple(merged.values())


_SECTIONS_FIELD = frozenset({"sections"})


def merge_section(parent: TemplateSection, child: TemplateSection) -> TemplateSection:
    """Field-by-field merge of two definitions of the same section.

    Nested sections are merged recursively when the child declares them,
    otherwise the parent's children are kept.
    """
    update = explicit_fields(child, exclude=_SECTIONS_FIELD)
    if child.sections is not None:
        update["sections"] = merge_sections(parent.sections or (), child.sections)
    return parent.model_copy(update=update)


def merge_sections(
    parent: Iterable[TemplateSection],
    child: Iterable[TemplateSection],
) -> tuple[TemplateSection, ...]:
    """Merge section lists keyed by id, then stable-sort by ``order``.

    Sections without an order sort as zero; ties keep merge order.
    """
    merged: dict[str, TemplateSection] = {section.id: section for section in parent}
    for section in child:
        existing = merged.get(section.id)
        merged[section.id] = (
            merge_section(existing, section) if existing is not None else section
        )
    return tuple(sorted(merged.values(), key=lambda section: section.sort_key))


def merge_prompts(
    parent: Iterable[TemplatePrompt],
    child: Iterable[TemplatePrompt],
) -> tuple[TemplatePrompt, ...]:
    """Parent prompts first, then the child's."""
    return (*parent, *child)
