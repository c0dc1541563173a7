"""Binding metadata: type-level resource paths and per-field directives.

Declaring a bindable record:

    @configuration(file_path="${env}-configurations.properties")
    @dataclass
    class Settings:
        base_url: Annotated[str, PropertyKey("base.url")] = ""
        retries: Annotated[int, PropertyKey("retries", default_value="3")] = 0
        browser: BrowserType | None = property_key(
            "browser.name", default_value="chrome", parser=BrowserTypeParser, default=None
        )

Plain classes work as well; only annotations declared directly on the class
are considered. ``ClassVar`` and ``Final`` fields are skipped, and a frozen
dataclass yields no directives at all.
"""

from __future__ import annotations

import dataclasses
import inspect
from dataclasses import dataclass
from functools import lru_cache
from typing import Annotated, Any, ClassVar, Final, TypeVar, get_args, get_origin, get_type_hints

from pydantic import BaseModel, ConfigDict, field_validator

from .exceptions import ConfigurationError, InvalidParserReferenceError
from .parsers.base import DefaultValueParser, ValueParser, strip_annotated


FILE_PATH_ATTRIBUTE = "__propbind_file_path__"
PROPERTY_KEY_METADATA = "propbind.property_key"

C = TypeVar("C", bound=type)


class PropertyKey(BaseModel):
    """Field-level directive: bind from ``key``, falling back to ``default_value``.

    ``default_value`` of ``""`` means there is no default. ``parser`` is a
    zero-argument callable (usually a class) producing a ``ValueParser``.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    key: str
    default_value: str = ""
    parser: Any = None

    def __init__(self, key: str | None = None, /, **data: Any):
        if key is not None:
            data["key"] = key
        super().__init__(**data)

    @field_validator("key")
    @classmethod
    def _key_not_blank(cls, value: str) -> str:
        if not value or not value.strip():
            raise ValueError("property key must not be empty")
        return value


def property_key(
    key: str,
    default_value: str = "",
    parser: Any = None,
    **field_kwargs: Any,
) -> Any:
    """Dataclass ``field()`` carrying a ``PropertyKey`` in its metadata.

    Remaining keyword arguments (``default``, ``default_factory``, ``repr``...)
    go to ``dataclasses.field``.
    """
    metadata = dict(field_kwargs.pop("metadata", None) or {})
    metadata[PROPERTY_KEY_METADATA] = PropertyKey(key, default_value=default_value, parser=parser)
    return dataclasses.field(metadata=metadata, **field_kwargs)


def configuration(file_path: str):
    """Class decorator declaring the resource path a record binds from."""

    def decorator(cls: C) -> C:
        setattr(cls, FILE_PATH_ATTRIBUTE, file_path)
        return cls

    return decorator


def read_locator(record_type: type) -> str | None:
    """Resource path declared directly on ``record_type``, if any."""
    return record_type.__dict__.get(FILE_PATH_ATTRIBUTE)


@dataclass(frozen=True)
class BindingDirective:
    """One bindable field of a record type."""

    field_name: str
    field_type: Any
    key: str
    default_value: str = ""
    parser: Any = None

    @property
    def has_custom_parser(self) -> bool:
        return self.parser is not None and self.parser is not DefaultValueParser

    def create_parser(self) -> ValueParser | None:
        """Build a fresh instance of the referenced parser.

        Returns None when the directive has no custom parser.

        Raises:
            InvalidParserReferenceError: The reference cannot be called without
                arguments or does not produce an object with ``parse``
        """
        if not self.has_custom_parser:
            return None
        if not callable(self.parser):
            raise InvalidParserReferenceError(
                self.parser, operation="create_parser", details={"key": self.key}
            )
        try:
            instance = self.parser()
        except Exception as e:
            raise InvalidParserReferenceError(
                self.parser, operation="create_parser", details={"key": self.key}, cause=e
            ) from e
        if not callable(getattr(instance, "parse", None)):
            raise InvalidParserReferenceError(
                self.parser, operation="create_parser", details={"key": self.key}
            )
        return instance


@lru_cache(maxsize=256)
def read_directives(record_type: type) -> tuple[BindingDirective, ...]:
    """Directives for the fields declared directly on ``record_type``, in order.

    Raises:
        ConfigurationError: A field declares more than one ``PropertyKey``, or an
            annotation on the type cannot be evaluated
    """
    if not isinstance(record_type, type):
        raise TypeError(f"Expected a class, got {record_type!r}")

    params = getattr(record_type, "__dataclass_params__", None)
    if params is not None and params.frozen:
        return ()

    own = inspect.get_annotations(record_type)
    if not own:
        return ()

    try:
        hints = get_type_hints(record_type, include_extras=True)
    except (NameError, TypeError) as e:
        raise ConfigurationError(
            f"Cannot evaluate annotations of {record_type.__qualname__}: {e}",
            component="metadata",
            operation="read_directives",
            details={"record_type": record_type.__qualname__},
            cause=e,
        ) from e
    dataclass_fields = getattr(record_type, "__dataclass_fields__", {})

    directives: list[BindingDirective] = []
    for name in own:
        hint = hints.get(name, own[name])
        if _is_class_level(hint):
            continue

        found = [meta for meta in _annotated_metadata(hint) if isinstance(meta, PropertyKey)]
        field_def = dataclass_fields.get(name)
        if field_def is not None and PROPERTY_KEY_METADATA in field_def.metadata:
            found.append(field_def.metadata[PROPERTY_KEY_METADATA])

        if not found:
            continue
        if len(found) > 1:
            raise ConfigurationError(
                f"Field '{record_type.__qualname__}.{name}' declares more than one PropertyKey",
                component="metadata",
                operation="read_directives",
            )

        directive = found[0]
        directives.append(
            BindingDirective(
                field_name=name,
                field_type=strip_annotated(hint),
                key=directive.key,
                default_value=directive.default_value,
                parser=directive.parser,
            )
        )

    return tuple(directives)


def _annotated_metadata(hint: Any) -> tuple[Any, ...]:
    if get_origin(hint) is Annotated:
        return get_args(hint)[1:]
    return ()


def _is_class_level(hint: Any) -> bool:
    hint = strip_annotated(hint)
    for marker in (ClassVar, Final):
        if hint is marker or get_origin(hint) is marker:
            return True
    return False


__all__ = [
    "BindingDirective",
    "PropertyKey",
    "configuration",
    "property_key",
    "read_directives",
    "read_locator",
]
