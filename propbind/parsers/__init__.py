"""Value parsers: built-ins, enum strategies and the parser capability."""

from propbind.parsers.base import DefaultValueParser, Float32, ValueParser
from propbind.parsers.builtin import (
    BOOLEAN_PARSER,
    DEFAULT_REGISTRY,
    DOUBLE_PARSER,
    FLOAT32_PARSER,
    INT_PARSER,
    BuiltinParser,
    ParserRegistry,
)
from propbind.parsers.enums import BrowserType, BrowserTypeParser, EnumParser


__all__ = [
    "BOOLEAN_PARSER",
    "BrowserType",
    "BrowserTypeParser",
    "BuiltinParser",
    "DEFAULT_REGISTRY",
    "DOUBLE_PARSER",
    "DefaultValueParser",
    "EnumParser",
    "FLOAT32_PARSER",
    "Float32",
    "INT_PARSER",
    "ParserRegistry",
    "ValueParser",
]
