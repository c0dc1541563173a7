"""Binding engine: populate a record's fields from a properties resource.

    reader = PropertiesReader()
    settings = Settings()
    reader.bind(settings)

For every ``bind`` call the resource path is resolved, the resource is read
and parsed, and each directive of the record's type is applied in
declaration order. A failing directive stops the call; fields written before
it keep their new values.
"""

from __future__ import annotations

from collections.abc import Mapping
from enum import Enum
from typing import Any, Generic, Protocol, TypeVar

from loguru import logger

from .config.loader import get_config
from .exceptions import (
    FieldWriteFailureError,
    NoResourceLocatorError,
    ParseFailureError,
    PropBindError,
    UnknownEnumValueError,
    get_error_code,
)
from .metadata import BindingDirective, read_directives, read_locator
from .parsers.base import ValueParser, is_optional, runtime_class, unwrap_optional
from .parsers.builtin import DEFAULT_REGISTRY, ParserRegistry
from .parsers.enums import EnumParser
from .resources import FileSystemResourceLoader, ResourceLoader, load_source
from .utils.placeholders import PlaceholderResolver


T = TypeVar("T")
T_contra = TypeVar("T_contra", contravariant=True)


class ConfigurationReader(Protocol[T_contra]):
    """Loads configuration values into an existing record."""

    def load_bean(self, bean: T_contra) -> None: ...


class PropertiesReader(Generic[T]):
    """Binds properties resources into records annotated with ``PropertyKey``.

    Args:
        file_path: Resource path overriding the record type's ``@configuration``
        loader: Resource loader; defaults to a filesystem loader built from
            the library configuration
        resolver: Placeholder resolver for the resource path
        registry: Parser table for declared field types
    """

    def __init__(
        self,
        file_path: str | None = None,
        *,
        loader: ResourceLoader | None = None,
        resolver: PlaceholderResolver | None = None,
        registry: ParserRegistry | None = None,
    ):
        self.file_path = file_path
        self._loader = loader
        self._resolver = resolver
        self.registry = registry if registry is not None else DEFAULT_REGISTRY

    @property
    def loader(self) -> ResourceLoader:
        if self._loader is not None:
            return self._loader
        resources = get_config().resources
        return FileSystemResourceLoader(resources.search_paths, encoding=resources.encoding)

    @property
    def resolver(self) -> PlaceholderResolver:
        if self._resolver is not None:
            return self._resolver
        return PlaceholderResolver(use_environment=get_config().placeholders.use_environment)

    def resource_path(self, record_type: type) -> str:
        """Resolved resource path for ``record_type``.

        Raises:
            NoResourceLocatorError: No path given and none declared on the type
            UnresolvedPlaceholderError: A ``${NAME}`` token has no value
        """
        locator = self.file_path if self.file_path is not None else read_locator(record_type)
        if locator is None:
            raise NoResourceLocatorError(record_type, operation="bind")
        return self.resolver.resolve(locator)

    def bind(self, bean: T) -> None:
        """Populate ``bean`` from its configuration resource."""
        record_type = type(bean)
        try:
            path = self.resource_path(record_type)
            source = load_source(self.loader, path)
            logger.debug(
                f"Loaded {len(source)} properties from {path} for {record_type.__qualname__}"
            )

            for directive in read_directives(record_type):
                self._bind_field(bean, directive, source)
        except PropBindError as e:
            logger.error(
                f"Binding {record_type.__qualname__} failed (code={get_error_code(e)}): {e.message}"
            )
            raise

    def load_bean(self, bean: T) -> None:
        self.bind(bean)

    def _bind_field(self, bean: T, directive: BindingDirective, source: Mapping[str, str]) -> None:
        # a broken parser reference fails even when there is nothing to parse
        custom = directive.create_parser()

        raw = source.get(directive.key, directive.default_value)
        if raw is None or not raw.strip():
            logger.debug(f"No value for '{directive.key}'; leaving {directive.field_name} unchanged")
            return

        parser = self._select_parser(directive, custom)
        if parser is None:
            value: Any = raw
        else:
            try:
                value = parser.parse(raw)
            except UnknownEnumValueError:
                raise
            except Exception as e:
                raise ParseFailureError(
                    directive.key, directive.field_type, cause=e, operation="bind"
                ) from e

        _write_field(bean, directive, value)
        logger.debug(f"Bound '{directive.key}' to {type(bean).__qualname__}.{directive.field_name}")

    def _select_parser(
        self, directive: BindingDirective, custom: ValueParser | None = None
    ) -> ValueParser | None:
        if custom is not None:
            return custom

        builtin = self.registry.get(directive.field_type)
        if builtin is not None:
            return builtin

        target = unwrap_optional(directive.field_type)
        if isinstance(target, type) and issubclass(target, Enum):
            return EnumParser(target)

        return None


def _write_field(bean: Any, directive: BindingDirective, value: Any) -> None:
    name = directive.field_name
    if not _accepts(directive.field_type, value):
        raise FieldWriteFailureError(
            name,
            cause=TypeError(
                f"cannot assign {type(value).__name__} value {value!r} "
                f"to field of type {directive.field_type!r}"
            ),
            operation="bind",
        )

    try:
        setattr(bean, name, value)
        return
    except (AttributeError, TypeError):
        pass
    except Exception as e:
        raise FieldWriteFailureError(name, cause=e, operation="bind") from e

    # read-only descriptors and custom __setattr__ hooks are bypassed
    try:
        object.__setattr__(bean, name, value)
    except (AttributeError, TypeError) as e:
        raise FieldWriteFailureError(name, cause=e, operation="bind") from e


def _accepts(field_type: Any, value: Any) -> bool:
    if value is None:
        return is_optional(field_type) or field_type is Any
    expected = runtime_class(field_type)
    if expected is None or expected is object:
        return True
    if expected is float and isinstance(value, int) and not isinstance(value, bool):
        return True
    return isinstance(value, expected)


__all__ = ["ConfigurationReader", "PropertiesReader"]
