"""Helper functions callable from interpolated text.

Each built-in helper is a frozen dataclass with a ``__call__`` method taking
the resolved positional arguments and the variables in scope. Arguments are
typed as ``object`` because they come straight from caller data, quoted
literals or raw tokens; every helper tolerates unexpected types and returns a
printable fallback instead of raising.
"""

import re
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Protocol, runtime_checkable

import pendulum

from ._values import is_truthy, stringify

_DATE_TOKEN_PATTERN = re.compile(r"YYYY|MM|DD|HH|mm|ss")
_SLUG_PATTERN = re.compile(r"[^a-z0-9]+")

DEFAULT_DATE_FORMAT = "YYYY-MM-DD"
DEFAULT_JOIN_SEPARATOR = ", "
DEFAULT_TRUNCATE_LENGTH = 100
ELLIPSIS = "..."


@runtime_checkable
class TemplateHelper(Protocol):
    """Protocol for interpolation helpers."""

    def __call__(self, args: Sequence[object], variables: Mapping[str, object]) -> object:
        """Execute the helper with resolved arguments."""
        ...


def _arg(args: Sequence[object], index: int) -> object:
    """Positional argument or None when absent."""
    return args[index] if index < len(args) else None


def _text(args: Sequence[object], index: int = 0) -> str:
    return stringify(_arg(args, index))


def format_date(moment: datetime | date, pattern: str) -> str:
    """Format a date against ``YYYY MM DD HH mm ss`` tokens.

    Example:
        >>> format_date(datetime(2024, 3, 7, 9, 5, 1), "YYYY-MM-DD HH:mm:ss")
        '2024-03-07 09:05:01'
    """
    hour = minute = second = 0
    if isinstance(moment, datetime):
        hour, minute, second = moment.hour, moment.minute, moment.second
    values = {
        "YYYY": f"{moment.year:04d}",
        "MM": f"{moment.month:02d}",
        "DD": f"{moment.day:02d}",
        "HH": f"{hour:02d}",
        "mm": f"{minute:02d}",
        "ss": f"{second:02d}",
    }
    return _DATE_TOKEN_PATTERN.sub(lambda match: values[match.group(0)], pattern)


@dataclass(frozen=True, slots=True)
class DateHelper:
    """Format the current date, or a given one.

    Template usage: ``{{date}}``, ``{{date "DD/MM/YYYY"}}``,
    ``{{date "YYYY" releaseDate}}``
    """

    default_format: str = DEFAULT_DATE_FORMAT
    clock: Callable[[], datetime] | None = None

    def _now(self) -> datetime:
        if self.clock is not None:
            return self.clock()
        return pendulum.now()

    def _moment(self, value: object) -> datetime | date:
        if isinstance(value, datetime | date):
            return value
        if isinstance(value, str) and value:
            try:
                parsed = pendulum.parse(value)
            except ValueError:
                return self._now()
            if isinstance(parsed, datetime | date):
                return parsed
        return self._now()

    def __call__(self, args: Sequence[object], variables: Mapping[str, object]) -> str:
        pattern = _text(args, 0) or self.default_format
        return format_date(self._moment(_arg(args, 1)), pattern)


@dataclass(frozen=True, slots=True)
class UppercaseHelper:
    """Template usage: ``{{uppercase name}}``."""

    def __call__(self, args: Sequence[object], variables: Mapping[str, object]) -> str:
        return _text(args).upper()


@dataclass(frozen=True, slots=True)
class LowercaseHelper:
    """Template usage: ``{{lowercase name}}``."""

    def __call__(self, args: Sequence[object], variables: Mapping[str, object]) -> str:
        return _text(args).lower()


@dataclass(frozen=True, slots=True)
class CapitalizeHelper:
    """Uppercase the first character, leaving the rest untouched."""

    def __call__(self, args: Sequence[object], variables: Mapping[str, object]) -> str:
        text = _text(args)
        return text[:1].upper() + text[1:]


@dataclass(frozen=True, slots=True)
class JoinHelper:
    """Join a list with a separator.

    Template usage: ``{{join techStack}}``, ``{{join techStack " / "}}``

    Non-list values are printed as they are.
    """

    default_separator: str = DEFAULT_JOIN_SEPARATOR

    def __call__(self, args: Sequence[object], variables: Mapping[str, object]) -> str:
        items = _arg(args, 0)
        separator = _text(args, 1) or self.default_separator
        if isinstance(items, list | tuple):
            return separator.join(stringify(item) for item in items)
        return stringify(items)


@dataclass(frozen=True, slots=True)
class DefaultHelper:
    """Return the first truthy argument.

    Template usage: ``{{default owner "Unassigned"}}``

    A bare word that names no variable is passed through as raw text, so
    ``owner`` must be declared (an empty default is enough) for the fallback
    to apply.
    """

    def __call__(self, args: Sequence[object], variables: Mapping[str, object]) -> object:
        for value in args:
            if is_truthy(value):
                return value
        return None


@dataclass(frozen=True, slots=True)
class LengthHelper:
    """Length of a list or string, zero for anything else."""

    def __call__(self, args: Sequence[object], variables: Mapping[str, object]) -> int:
        value = _arg(args, 0)
        if isinstance(value, list | tuple | str):
            return len(value)
        return 0


@dataclass(frozen=True, slots=True)
class TruncateHelper:
    """Shorten text, appending an ellipsis when cut.

    Template usage: ``{{truncate summary 80}}``
    """

    default_length: int = DEFAULT_TRUNCATE_LENGTH

    def __call__(self, args: Sequence[object], variables: Mapping[str, object]) -> str:
        text = _text(args)
        limit = _arg(args, 1)
        length = (
            int(limit)
            if isinstance(limit, int | float) and not isinstance(limit, bool) and limit >= 1
            else self.default_length
        )
        if len(text) <= length:
            return text
        return text[:length] + ELLIPSIS


@dataclass(frozen=True, slots=True)
class SlugHelper:
    """URL-friendly form: lowercase, non-alphanumeric runs become one hyphen."""

    def __call__(self, args: Sequence[object], variables: Mapping[str, object]) -> str:
        return _SLUG_PATTERN.sub("-", _text(args).lower()).strip("-")


@dataclass(slots=True)
class HelperRegistry:
    """Registry of interpolation helpers, keyed by name."""

    _helpers: dict[str, TemplateHelper] = field(default_factory=dict)

    def register(self, name: str, helper: TemplateHelper) -> None:
        """Register a helper, replacing any existing one with that name."""
        self._helpers[name] = helper

    def get(self, name: str) -> TemplateHelper | None:
        """Get a helper by name, or None if unknown."""
        return self._helpers.get(name)

    def __contains__(self, name: object) -> bool:
        return name in self._helpers

    def names(self) -> list[str]:
        """Registered helper names, in registration order."""
        return list(self._helpers)

    def copy(self) -> "HelperRegistry":
        """Independent registry with the same helpers."""
        return HelperRegistry(_helpers=dict(self._helpers))


def create_helper_registry(
    *,
    date_format: str = DEFAULT_DATE_FORMAT,
    join_separator: str = DEFAULT_JOIN_SEPARATOR,
    truncate_length: int = DEFAULT_TRUNCATE_LENGTH,
    clock: Callable[[], datetime] | None = None,
) -> HelperRegistry:
    """Create a registry holding all built-in helpers.

    Args:
        date_format: Pattern ``date`` uses without an argument.
        join_separator: Separator ``join`` uses without an argument.
        truncate_length: Length ``truncate`` uses without an argument.
        clock: Source of "now" for ``date``; defaults to ``pendulum.now``.

    Returns:
        A new HelperRegistry.
    """
    helpers: dict[str, TemplateHelper] = {
        "date": DateHelper(default_format=date_format, clock=clock),
        "uppercase": UppercaseHelper(),
        "lowercase": LowercaseHelper(),
        "capitalize": CapitalizeHelper(),
        "join": JoinHelper(default_separator=join_separator),
        "default": DefaultHelper(),
        "length": LengthHelper(),
        "truncate": TruncateHelper(default_length=truncate_length),
        "slug": SlugHelper(),
    }
    return HelperRegistry(_helpers=helpers)
