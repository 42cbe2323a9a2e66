"""Section visibility condition evaluation."""

from collections.abc import Mapping

from structlog.typing import FilteringBoundLogger

from ._models import ConditionOperator, SectionCondition
from ._values import is_number, is_present, stringify, strict_equals, to_bound


def _contains(value: object, needle: object) -> bool | None:
    """Membership for lists, substring for strings, None otherwise."""
    if isinstance(value, list | tuple):
        return any(strict_equals(item, needle) for item in value)
    if isinstance(value, str):
        return stringify(needle) in value
    return None


def _compare(condition: SectionCondition, value: object, *, greater: bool) -> bool:
    """Numeric comparison; a condition without ``value`` never matches."""
    if not is_number(value) or "value" not in condition.model_fields_set:
        return False
    bound = to_bound(condition.value)
    if bound is None:
        return False
    number = float(value)  # pyright: ignore[reportArgumentType]
    return number > bound if greater else number < bound


def evaluate_condition(
    condition: SectionCondition,
    variables: Mapping[str, object],
    *,
    logger: FilteringBoundLogger | None = None,
) -> bool:
    """Decide whether a section guarded by ``condition`` is visible.

    Semantics:
        - equals / not_equals: strict equality with the comparand
        - contains / not_contains: list membership or substring; for other
          types contains is false and not_contains is true
        - greater_than / less_than: the variable must be a number; the
          comparand is coerced (booleans as 1 and 0, null and blank strings
          as 0) and never matches when missing or non-numeric
        - exists / not_exists: defined, not None and not ""
        - any other operator: visible

    Args:
        condition: The condition to evaluate.
        variables: Resolved variables.
        logger: Receives a warning when the operator is unknown.

    Returns:
        True if the section should be rendered.
    """
    value = variables.get(condition.variable)
    expected = condition.value

    match condition.operator:
        case ConditionOperator.EQUALS:
            return strict_equals(value, expected)
        case ConditionOperator.NOT_EQUALS:
            return not strict_equals(value, expected)
        case ConditionOperator.CONTAINS:
            return _contains(value, expected) is True
        case ConditionOperator.NOT_CONTAINS:
            return _contains(value, expected) is not True
        case ConditionOperator.GREATER_THAN:
            return _compare(condition, value, greater=True)
        case ConditionOperator.LESS_THAN:
            return _compare(condition, value, greater=False)
        case ConditionOperator.EXISTS:
            return is_present(value)
        case ConditionOperator.NOT_EXISTS:
            return not is_present(value)
        case _:
            if logger is not None:
                logger.warning(
                    "unknown_condition_operator",
                    operator=str(condition.operator),
                    variable=condition.variable,
                )
            return True
