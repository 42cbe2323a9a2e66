"""docweave exceptions."""

from pathlib import Path


class DocweaveError(Exception):
    """Base exception for docweave errors."""


# =============================================================================
# Configuration Exceptions
# =============================================================================


class ConfigError(DocweaveError):
    """Base exception for configuration errors."""


class ConfigLoadError(ConfigError):
    """Raised when configuration cannot be loaded or parsed."""

    def __init__(
        self,
        message: str,
        *,
        path: Path | None = None,
        line: int | None = None,
        column: int | None = None,
    ) -> None:
        """Initialize with error message and optional location context."""
        super().__init__(message)
        self.path: Path | None = path
        self.line: int | None = line
        self.column: int | None = column


# =============================================================================
# Template Exceptions
# =============================================================================


class TemplateError(DocweaveError):
    """Base exception for template loading and compilation errors."""


class TemplateIOError(TemplateError):
    """Raised when a template or library file cannot be read.

    Attributes:
        path: Path to the file that caused the error.
        operation: The operation that failed ("read", "list").
        cause: The underlying exception that caused this error.
    """

    def __init__(
        self,
        message: str,
        *,
        path: Path,
        operation: str,
        cause: Exception | None = None,
    ) -> None:
        """Initialize with error message and I/O context.

        Args:
            message: Human-readable error message.
            path: Path to the file that caused the error.
            operation: The operation that failed.
            cause: The underlying exception that caused this error.
        """
        super().__init__(message)
        self.path: Path = path
        self.operation: str = operation
        self.cause: Exception | None = cause


class TemplateParseError(TemplateError):
    """Raised when serialized template content cannot be parsed.

    Attributes:
        source: Name of the file or stream the content came from.
        line: One-based line number where the parse error occurred.
        cause: The underlying exception that caused this error.
    """

    def __init__(
        self,
        message: str,
        *,
        source: str | None = None,
        line: int | None = None,
        cause: Exception | None = None,
    ) -> None:
        """Initialize with error message and parse context.

        Args:
            message: Human-readable error message.
            source: Name of the file or stream the content came from.
            line: One-based line number where the parse error occurred.
            cause: The underlying exception that caused this error.
        """
        super().__init__(message)
        self.source: str | None = source
        self.line: int | None = line
        self.cause: Exception | None = cause


class TemplateValidationError(TemplateError, ValueError):
    """Raised when a template definition holds an invalid value.

    Attributes:
        source: Name of the file or stream the definition came from.
        field: Dotted path of the offending field (if known).
    """

    def __init__(
        self,
        message: str,
        *,
        source: str | None = None,
        field: str | None = None,
    ) -> None:
        """Initialize with error message and validation context.

        Args:
            message: Human-readable error message.
            source: Name of the file or stream the definition came from.
            field: Dotted path of the offending field.
        """
        super().__init__(message)
        self.source: str | None = source
        self.field: str | None = field


class MissingRequiredFieldError(TemplateValidationError):
    """Raised when a mandatory field is absent from a template definition.

    Attributes:
        entity: Kind of record missing the field ("meta", "variable", ...).
        index: Position of the record within its list, if it is in one.
    """

    def __init__(
        self,
        message: str,
        *,
        field: str,
        entity: str,
        source: str | None = None,
        index: int | None = None,
    ) -> None:
        """Initialize with error message and the missing field's location.

        Args:
            message: Human-readable error message.
            field: Name of the missing field.
            entity: Kind of record missing the field.
            source: Name of the file or stream the definition came from.
            index: Position of the record within its list.
        """
        super().__init__(message, source=source, field=field)
        self.entity: str = entity
        self.index: int | None = index


class TemplateNotFoundError(TemplateError, KeyError):
    """Raised when a template id is not registered.

    Attributes:
        template_id: The id that was looked up.
    """

    def __init__(self, message: str, *, template_id: str) -> None:
        """Initialize with error message and template context."""
        super().__init__(message)
        self.template_id: str = template_id

    def __str__(self) -> str:
        """Return the message without KeyError's repr quoting."""
        return str(self.args[0])


class ParentNotFoundError(TemplateNotFoundError):
    """Raised when a template extends a parent that is not registered.

    Attributes:
        child_id: The id of the template declaring ``extends``.
    """

    def __init__(self, message: str, *, template_id: str, child_id: str) -> None:
        """Initialize with error message and inheritance context.

        Args:
            message: Human-readable error message.
            template_id: The missing parent id.
            child_id: The id of the template declaring ``extends``.
        """
        super().__init__(message, template_id=template_id)
        self.child_id: str = child_id


class InheritanceCycleError(TemplateError):
    """Raised when ``extends`` references form a cycle.

    Attributes:
        chain: Template ids in resolution order, ending with the repeated id.
    """

    def __init__(self, message: str, *, chain: tuple[str, ...]) -> None:
        """Initialize with error message and the offending chain."""
        super().__init__(message)
        self.chain: tuple[str, ...] = chain


class MissingRequiredVariableError(TemplateError, ValueError):
    """Raised when a required variable has neither a value nor a default.

    Attributes:
        variable: Name of the missing variable.
        template_id: Template being compiled, if known.
    """

    def __init__(
        self,
        message: str,
        *,
        variable: str,
        template_id: str | None = None,
    ) -> None:
        """Initialize with error message and variable context."""
        super().__init__(message)
        self.variable: str = variable
        self.template_id: str | None = template_id


class SectionNotFoundError(TemplateError, KeyError):
    """Raised when a section id is absent from a compiled template.

    Attributes:
        section_id: The id that was looked up.
    """

    def __init__(self, message: str, *, section_id: str) -> None:
        """Initialize with error message and section context."""
        super().__init__(message)
        self.section_id: str = section_id

    def __str__(self) -> str:
        """Return the message without KeyError's repr quoting."""
        return str(self.args[0])


class HelperError(TemplateError):
    """Raised when a registered helper fails while being invoked.

    Attributes:
        helper: Name of the helper that failed.
        cause: The exception raised by the helper.
    """

    def __init__(
        self,
        message: str,
        *,
        helper: str,
        cause: Exception | None = None,
    ) -> None:
        """Initialize with error message and helper context."""
        super().__init__(message)
        self.helper: str = helper
        self.cause: Exception | None = cause
