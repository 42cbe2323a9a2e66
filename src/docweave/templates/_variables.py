"""Variable resolution: caller values merged with the declared schema."""

from collections.abc import Iterable, Mapping

from docweave.exceptions import MissingRequiredVariableError

from ._models import TemplateVariable


def resolve_variables(
    definitions: Iterable[TemplateVariable],
    provided: Mapping[str, object] | None = None,
    *,
    template_id: str | None = None,
) -> dict[str, object]:
    """Merge caller-supplied values with declared defaults.

    For each declared variable, in declaration order: the provided value wins
    when present and not None, then the declared default; a required
    variable with neither is an error, an optional one is left out.
    Provided keys the schema does not declare are appended afterwards in
    caller order, so templates can reference ad hoc values. A declared
    optional variable given as None with no default stays unresolved.

    Args:
        definitions: Declared variables.
        provided: Caller values.
        template_id: Template being compiled, for error context.

    Returns:
        The resolved variable mapping.

    Raises:
        MissingRequiredVariableError: If a required variable has no value.

    Example:
        >>> resolve_variables([TemplateVariable(name="a", default=1)], {"b": 2})
        {'a': 1, 'b': 2}
    """
    values = dict(provided or {})
    resolved: dict[str, object] = {}
    declared: set[str] = set()

    for definition in definitions:
        name = definition.name
        declared.add(name)
        if values.get(name) is not None:
            resolved[name] = values[name]
        elif definition.default is not None:
            resolved[name] = definition.default
        elif definition.required:
            where = f" (template {template_id})" if template_id else ""
            msg = f"Required variable missing: {name}{where}"
            raise MissingRequiredVariableError(msg, variable=name, template_id=template_id)

    for key, value in values.items():
        if key not in declared:
            resolved[key] = value

    return resolved
