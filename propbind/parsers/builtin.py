"""Built-in parsers and the process-wide parser registry.

The registry maps a field's declared type to its parser by exact identity.
``int`` is a 32-bit integer, ``Float32`` a single-precision float, ``float``
a double and ``bool`` a boolean; ``Optional[T]`` resolves like ``T``.
"""

from __future__ import annotations

import math
import re
import struct
from collections.abc import Callable, Iterator, Mapping
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any

from .base import Float32, ValueParser, unwrap_optional


INT32_MIN = -(2**31)
INT32_MAX = 2**31 - 1

_INT_PATTERN = re.compile(r"[+-]?[0-9]+")
_DECIMAL_PATTERN = re.compile(
    r"[+-]?(?:NaN|Infinity|(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?[fFdD]?)"
)


def parse_int(value: str) -> int:
    """Parse a signed decimal 32-bit integer. Whitespace is not allowed."""
    if not _INT_PATTERN.fullmatch(value):
        raise ValueError(f"invalid 32-bit integer: {value!r}")
    number = int(value)
    if not INT32_MIN <= number <= INT32_MAX:
        raise ValueError(f"value out of 32-bit integer range: {value!r}")
    return number


def _parse_decimal(value: str) -> float:
    text = value.strip()
    if not _DECIMAL_PATTERN.fullmatch(text):
        raise ValueError(f"invalid floating point number: {value!r}")
    if text[-1] in "fFdD":
        text = text[:-1]
    return float(text)


def to_float32(number: float) -> float:
    """Round a double to the nearest single-precision value."""
    try:
        return struct.unpack("f", struct.pack("f", number))[0]
    except OverflowError:
        return math.copysign(math.inf, number)


def parse_float32(value: str) -> float:
    return to_float32(_parse_decimal(value))


def parse_double(value: str) -> float:
    return _parse_decimal(value)


def parse_boolean(value: str) -> bool:
    """``true`` in any letter case is True; everything else is False."""
    return value.lower() == "true"


def _format_special(number: float) -> str | None:
    if math.isnan(number):
        return "NaN"
    if math.isinf(number):
        return "Infinity" if number > 0 else "-Infinity"
    return None


def format_double(number: float) -> str:
    return _format_special(number) or repr(float(number))


def format_float32(number: float) -> str:
    """Shortest decimal string that parses back to the same float32."""
    special = _format_special(number)
    if special:
        return special
    for precision in range(1, 10):
        text = f"{number:.{precision}g}"
        if to_float32(float(text)) == number:
            break
    if not any(c in text for c in ".e"):
        text += ".0"
    return text


def format_int(number: int) -> str:
    return str(number)


def format_boolean(flag: bool) -> str:
    return "true" if flag else "false"


@dataclass(frozen=True)
class BuiltinParser:
    """A named parse/format pair; ``format`` is the inverse of ``parse``."""

    name: str
    parse_func: Callable[[str], Any]
    format_func: Callable[[Any], str]

    def parse(self, value: str) -> Any:
        return self.parse_func(value)

    def format(self, value: Any) -> str:
        return self.format_func(value)


INT_PARSER = BuiltinParser("int32", parse_int, format_int)
FLOAT32_PARSER = BuiltinParser("float32", parse_float32, format_float32)
DOUBLE_PARSER = BuiltinParser("double", parse_double, format_double)
BOOLEAN_PARSER = BuiltinParser("boolean", parse_boolean, format_boolean)


class ParserRegistry(Mapping[Any, ValueParser]):
    """Read-only mapping from target type to parser."""

    def __init__(self, parsers: Mapping[Any, ValueParser] | None = None):
        self._parsers = MappingProxyType(dict(parsers or {}))

    def get(self, target_type: Any, default: ValueParser | None = None) -> ValueParser | None:
        """Parser registered for ``target_type`` (Optional unwrapped), or ``default``."""
        try:
            return self._parsers.get(unwrap_optional(target_type), default)
        except TypeError:
            # unhashable type expressions are never registered
            return default

    def __getitem__(self, target_type: Any) -> ValueParser:
        parser = self.get(target_type)
        if parser is None:
            raise KeyError(target_type)
        return parser

    def __iter__(self) -> Iterator[Any]:
        return iter(self._parsers)

    def __len__(self) -> int:
        return len(self._parsers)

    def with_parsers(self, parsers: Mapping[Any, ValueParser]) -> ParserRegistry:
        """New registry with ``parsers`` added on top of this one."""
        merged = dict(self._parsers)
        merged.update(parsers)
        return ParserRegistry(merged)

    def __repr__(self) -> str:
        names = ", ".join(getattr(t, "__name__", repr(t)) for t in self._parsers)
        return f"ParserRegistry({names})"


DEFAULT_REGISTRY = ParserRegistry(
    {
        int: INT_PARSER,
        Float32: FLOAT32_PARSER,
        float: DOUBLE_PARSER,
        bool: BOOLEAN_PARSER,
    }
)


__all__ = [
    "BOOLEAN_PARSER",
    "BuiltinParser",
    "DEFAULT_REGISTRY",
    "DOUBLE_PARSER",
    "FLOAT32_PARSER",
    "INT_PARSER",
    "ParserRegistry",
    "format_boolean",
    "format_double",
    "format_float32",
    "format_int",
    "parse_boolean",
    "parse_double",
    "parse_float32",
    "parse_int",
    "to_float32",
]
