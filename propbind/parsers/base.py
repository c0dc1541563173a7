"""Parser capability and shared typing helpers."""

from __future__ import annotations

import types
from typing import Annotated, Any, NewType, Protocol, TypeVar, Union, get_args, get_origin, runtime_checkable


T_co = TypeVar("T_co", covariant=True)

# Marker for single-precision fields; plain ``float`` fields are double precision.
Float32 = NewType("Float32", float)


@runtime_checkable
class ValueParser(Protocol[T_co]):
    """Converts one raw property string into a typed value.

    Implementations referenced from a ``PropertyKey`` must be constructible
    without arguments. ``parse`` signals bad input by raising.
    """

    def parse(self, value: str) -> T_co: ...


class DefaultValueParser:
    """Identity parser: the raw string is the value."""

    def parse(self, value: str) -> str:
        return value


def strip_annotated(tp: Any) -> Any:
    """Return the underlying type of ``Annotated[T, ...]``."""
    while get_origin(tp) is Annotated:
        tp = get_args(tp)[0]
    return tp


def unwrap_optional(tp: Any) -> Any:
    """Map ``Optional[T]`` / ``T | None`` to ``T``; other types pass through."""
    tp = strip_annotated(tp)
    origin = get_origin(tp)
    if origin is Union or origin is types.UnionType:
        args = get_args(tp)
        non_none = [arg for arg in args if arg is not type(None)]
        if len(non_none) == 1 and len(args) == 2:
            return strip_annotated(non_none[0])
    return tp


def is_optional(tp: Any) -> bool:
    """True for ``Optional[T]`` and ``T | None``."""
    return unwrap_optional(tp) is not strip_annotated(tp)


def runtime_class(tp: Any) -> type | None:
    """Concrete class a field value must be an instance of, if there is one.

    NewTypes resolve to their supertype. Generics, unions other than
    Optional, ``Any`` and type variables have no single runtime class.
    """
    tp = unwrap_optional(tp)
    if tp is Any:
        return None
    while hasattr(tp, "__supertype__"):
        tp = tp.__supertype__
    if isinstance(tp, type) and get_origin(tp) is None:
        return tp
    return None


__all__ = [
    "DefaultValueParser",
    "Float32",
    "ValueParser",
    "is_optional",
    "runtime_class",
    "strip_annotated",
    "unwrap_optional",
]
