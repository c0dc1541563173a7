"""Central exception hierarchy for propbind.

All custom exceptions inherit from PropBindError so callers can treat any
binding failure as a single startup/configuration error.

Exception Hierarchy:
    PropBindError (base)
    ├── ConfigurationError
    ├── ResourceLocatorError
    │   ├── UnresolvedPlaceholderError
    │   └── NoResourceLocatorError
    ├── ResourceError
    │   ├── ResourceNotFoundError
    │   └── ResourceReadError
    ├── BindingError
    │   ├── InvalidParserReferenceError
    │   ├── ParseFailureError
    │   └── UnknownEnumValueError
    └── FieldWriteFailureError

Usage:
    from propbind.exceptions import ParseFailureError, PropBindError

    try:
        PropertiesReader().bind(settings)
    except PropBindError as e:
        logger.error(f"Configuration binding failed: {e.message}", extra=e.to_dict())
        raise
"""

from __future__ import annotations

from enum import IntEnum
from typing import Any


class ErrorCode(IntEnum):
    """Error codes for programmatic handling.

    Categories:
        1xxx - Configuration and locator errors
        2xxx - Binding errors (parsers, enums, field writes)
        4xxx - Resource I/O errors
    """

    # Configuration errors (1xxx)
    CONFIG_LOAD_FAILED = 1001
    CONFIG_VALIDATION_FAILED = 1002
    PLACEHOLDER_UNRESOLVED = 1101
    LOCATOR_MISSING = 1102

    # Binding errors (2xxx)
    PARSER_REFERENCE_INVALID = 2101
    PARSE_FAILED = 2102
    ENUM_VALUE_UNKNOWN = 2103
    FIELD_WRITE_FAILED = 2104

    # Resource errors (4xxx)
    RESOURCE_NOT_FOUND = 4001
    RESOURCE_READ_FAILED = 4002


class PropBindError(Exception):
    """Base exception for all propbind errors.

    Attributes:
        message: Human-readable error description
        component: Library component (e.g., "reader", "parsers.enum")
        operation: Operation being performed (e.g., "bind")
        details: Additional context as dictionary
        retryable: Whether operation can be retried (never, for this library)
        status_code: Numeric error code from ErrorCode enum
        cause: Original exception if wrapping another error
    """

    def __init__(
        self,
        message: str,
        component: str | None = None,
        operation: str | None = None,
        details: dict[str, Any] | None = None,
        retryable: bool = False,
        status_code: ErrorCode | None = None,
        cause: Exception | None = None,
    ):
        self.message = message
        self.component = component or self.__class__.__module__
        self.operation = operation
        self.details = details or {}
        self.retryable = retryable
        self.status_code = status_code
        self.cause = cause

        parts = [message]
        if component:
            parts.append(f"[component={component}]")
        if operation:
            parts.append(f"[operation={operation}]")
        if status_code:
            parts.append(f"[code={status_code}]")

        super().__init__(" ".join(parts))

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to dictionary for logging/serialization.

        Example:
            {
                "error_type": "ParseFailureError",
                "message": "Failed to parse value for key 'int.property'",
                "component": "reader",
                "operation": "bind",
                "details": {"key": "int.property", "target_type": "int"},
                "retryable": false,
                "status_code": 2102,
                "cause": "ValueError: invalid 32-bit integer: 'abc'"
            }
        """
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "component": self.component,
            "operation": self.operation,
            "details": self.details,
            "retryable": self.retryable,
            "status_code": self.status_code.value if self.status_code else None,
            "cause": str(self.cause) if self.cause else None,
        }


class ConfigurationError(PropBindError):
    """Library settings could not be loaded or validated.

    Example:
        raise ConfigurationError(
            "Configuration file not found",
            config_key="resources.search_paths",
            details={"config_dir": "config"}
        )
    """

    def __init__(self, message: str, config_key: str | None = None, **kwargs: Any):
        details = kwargs.pop("details", {})
        if config_key:
            details["config_key"] = config_key

        component = kwargs.pop("component", "config")

        super().__init__(
            message,
            component=component,
            details=details,
            status_code=kwargs.pop("status_code", ErrorCode.CONFIG_VALIDATION_FAILED),
            retryable=False,
            **kwargs,
        )


# ============================================================================
# RESOURCE LOCATOR EXCEPTIONS
# ============================================================================


class ResourceLocatorError(PropBindError):
    """The configuration resource path could not be determined."""

    def __init__(self, message: str, **kwargs: Any):
        component = kwargs.pop("component", "locator")
        super().__init__(message, component=component, retryable=False, **kwargs)


class UnresolvedPlaceholderError(ResourceLocatorError):
    """A ``${NAME}`` token has no value in any lookup source.

    Raised before any resource is loaded or any field is written.
    """

    def __init__(self, key: str, text: str, **kwargs: Any):
        self.key = key
        self.text = text
        details = kwargs.pop("details", {})
        details.update({"key": key, "text": text})
        super().__init__(
            f"No environment variable or process property found for placeholder "
            f"'{key}' in path: {text}",
            details=details,
            status_code=kwargs.pop("status_code", ErrorCode.PLACEHOLDER_UNRESOLVED),
            **kwargs,
        )


class NoResourceLocatorError(ResourceLocatorError):
    """Neither the reader nor the record type declares a resource path."""

    def __init__(self, record_type: type | None = None, **kwargs: Any):
        self.record_type = record_type
        details = kwargs.pop("details", {})
        type_name = getattr(record_type, "__qualname__", None)
        if type_name:
            details["record_type"] = type_name
        super().__init__(
            f"No configuration file path given and none declared on {type_name or 'record'}",
            details=details,
            status_code=kwargs.pop("status_code", ErrorCode.LOCATOR_MISSING),
            **kwargs,
        )


# ============================================================================
# RESOURCE EXCEPTIONS
# ============================================================================


class ResourceError(PropBindError):
    """Resource I/O operation failed."""

    def __init__(self, message: str, path: str | None = None, **kwargs: Any):
        self.path = path
        details = kwargs.pop("details", {})
        if path:
            details["path"] = path

        component = kwargs.pop("component", "resources")

        super().__init__(
            message,
            component=component,
            details=details,
            status_code=kwargs.pop("status_code", ErrorCode.RESOURCE_READ_FAILED),
            **kwargs,
        )


class ResourceNotFoundError(ResourceError):
    """The resolved resource path does not exist under any search root.

    Example:
        raise ResourceNotFoundError(
            "qa-configurations.properties",
            details={"search_paths": ["/app/resources"]}
        )
    """

    def __init__(self, path: str, **kwargs: Any):
        super().__init__(
            f"Resource not found: {path}",
            path=path,
            status_code=ErrorCode.RESOURCE_NOT_FOUND,
            **kwargs,
        )


class ResourceReadError(ResourceError):
    """The resource exists but could not be read or decoded."""


# ============================================================================
# BINDING EXCEPTIONS
# ============================================================================


class BindingError(PropBindError):
    """A directive could not be turned into a field value."""

    def __init__(self, message: str, **kwargs: Any):
        component = kwargs.pop("component", "binding")
        super().__init__(message, component=component, retryable=False, **kwargs)


class InvalidParserReferenceError(BindingError):
    """A custom parser reference cannot be built with a zero-argument call."""

    def __init__(self, parser_ref: Any, **kwargs: Any):
        self.parser_ref = parser_ref
        details = kwargs.pop("details", {})
        details["parser"] = _type_name(parser_ref)
        super().__init__(
            f"Failed to instantiate custom value parser: {_type_name(parser_ref)}",
            details=details,
            status_code=kwargs.pop("status_code", ErrorCode.PARSER_REFERENCE_INVALID),
            **kwargs,
        )


class ParseFailureError(BindingError):
    """A parser rejected the raw value of a property key."""

    def __init__(self, key: str, target_type: Any, cause: Exception | None = None, **kwargs: Any):
        self.key = key
        self.target_type = target_type
        details = kwargs.pop("details", {})
        details.update({"key": key, "target_type": _type_name(target_type)})
        super().__init__(
            f"Failed to parse value of '{key}' as {_type_name(target_type)}: {cause}",
            details=details,
            status_code=kwargs.pop("status_code", ErrorCode.PARSE_FAILED),
            cause=cause,
            **kwargs,
        )


class UnknownEnumValueError(BindingError):
    """No enum member matches the raw value."""

    def __init__(self, value: str | None, enum_type: type | None = None, **kwargs: Any):
        self.value = value
        self.enum_type = enum_type
        details = kwargs.pop("details", {})
        details["value"] = value
        if enum_type is not None:
            details["enum_type"] = _type_name(enum_type)
        component = kwargs.pop("component", "parsers.enum")
        super().__init__(
            f"Unknown {_type_name(enum_type) if enum_type else 'enum'} value: {value}",
            component=component,
            details=details,
            status_code=kwargs.pop("status_code", ErrorCode.ENUM_VALUE_UNKNOWN),
            **kwargs,
        )


class FieldWriteFailureError(PropBindError):
    """Writing a converted value into the record failed."""

    def __init__(self, field_name: str, cause: Exception | None = None, **kwargs: Any):
        self.field_name = field_name
        details = kwargs.pop("details", {})
        details["field_name"] = field_name
        component = kwargs.pop("component", "binding")
        super().__init__(
            f"Failed to write field '{field_name}': {cause}",
            component=component,
            details=details,
            status_code=kwargs.pop("status_code", ErrorCode.FIELD_WRITE_FAILED),
            retryable=False,
            cause=cause,
            **kwargs,
        )


# ============================================================================
# HELPER FUNCTIONS
# ============================================================================


def _type_name(obj: Any) -> str:
    if obj is None:
        return "None"
    name = getattr(obj, "__qualname__", None) or getattr(obj, "__name__", None)
    return name if isinstance(name, str) else repr(obj)


def wrap_exception(
    original: Exception,
    error_class: type[PropBindError],
    message: str | None = None,
    **kwargs: Any,
) -> PropBindError:
    """Wrap a generic exception in a structured propbind exception.

    Only for error classes whose constructor takes a message first
    (PropBindError, ConfigurationError, ResourceError and friends).

    Example:
        try:
            text = path.read_text(encoding="utf-8")
        except OSError as e:
            raise wrap_exception(
                e,
                ResourceReadError,
                path=str(path),
                operation="read_text"
            ) from e
    """
    return error_class(message or str(original), cause=original, **kwargs)


def get_error_code(exc: Exception) -> int | None:
    """Get error code from exception if available."""
    if isinstance(exc, PropBindError) and exc.status_code:
        return exc.status_code.value
    return None
