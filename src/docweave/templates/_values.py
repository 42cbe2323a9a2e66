"""Value conversions shared by interpolation, helpers and conditions.

Variable values arrive from YAML documents or callers as plain Python
objects. These functions pin down how such values print into documents and
how they behave in boolean and equality checks.
"""

import re
from collections.abc import Mapping

_NUMBER_PATTERN = re.compile(r"^[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?$")


def stringify(value: object) -> str:
    """Convert a value to the text it renders as.

    ``None`` renders empty, booleans as ``true``/``false`` and sequences as
    their elements joined with ``", "``.

    Example:
        >>> stringify(["Go", "Rust"])
        'Go, Rust'
        >>> stringify(True)
        'true'
    """
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, list | tuple):
        return ", ".join(stringify(item) for item in value)
    return str(value)


def is_truthy(value: object) -> bool:
    """Block truthiness: anything except ``None``, ``False`` and ``""``.

    Zero and empty collections count as truthy.
    """
    return value is not None and value is not False and value != ""


def is_present(value: object) -> bool:
    """Whether a condition variable counts as existing."""
    return value is not None and value != ""


def is_number(value: object) -> bool:
    """Whether ``value`` is an int or float (booleans excluded)."""
    return isinstance(value, int | float) and not isinstance(value, bool)


def strict_equals(left: object, right: object) -> bool:
    """Equality that never treats booleans as numbers.

    ``True == 1`` holds in Python; templates compare booleans only with
    booleans.
    """
    if isinstance(left, list | tuple) and isinstance(right, list | tuple):
        return len(left) == len(right) and all(
            strict_equals(a, b) for a, b in zip(left, right, strict=True)
        )
    if isinstance(left, bool) or isinstance(right, bool):
        return isinstance(left, bool) and isinstance(right, bool) and left is right
    return left == right


def to_number(value: object) -> float | None:
    """Coerce a comparand to a number, returning None when impossible."""
    if is_number(value):
        return float(value)  # pyright: ignore[reportArgumentType]
    if isinstance(value, str) and _NUMBER_PATTERN.match(value.strip()):
        return float(value)
    return None


def to_bound(value: object) -> float | None:
    """Coerce a comparison bound loosely.

    Booleans count as 1 and 0, ``None`` and blank strings as 0; anything
    else goes through ``to_number``.
    """
    if isinstance(value, bool):
        return float(value)
    if value is None or (isinstance(value, str) and not value.strip()):
        return 0.0
    return to_number(value)


def parse_number_literal(token: str) -> int | float | None:
    """Parse a helper argument token as a number literal."""
    if not _NUMBER_PATTERN.match(token):
        return None
    try:
        return int(token)
    except ValueError:
        return float(token)


def as_mapping(value: object) -> Mapping[str, object] | None:
    """Return ``value`` if it is a string-keyed record, otherwise None."""
    if isinstance(value, Mapping):
        return value  # pyright: ignore[reportUnknownVariableType]
    return None
