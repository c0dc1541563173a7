"""Enum parsing strategies.

Enum fields without an explicit parser are handled by ``EnumParser`` built on
the field's declared enum type. Subclasses pin an enum type and may declare a
``default`` member returned for empty input, which makes them usable as
zero-argument custom parsers:

    class BrowserTypeParser(EnumParser[BrowserType]):
        enum_type = BrowserType
        default = BrowserType.CHROME
"""

from __future__ import annotations

from enum import Enum
from typing import Generic, TypeVar

from ..exceptions import UnknownEnumValueError


E = TypeVar("E", bound=Enum)


class EnumParser(Generic[E]):
    """Case-insensitive match of a raw value against enum members.

    A member matches on its name, or on its value when the value is a string.
    """

    enum_type: type[E] | None = None
    default: E | None = None

    def __init__(self, enum_type: type[E] | None = None):
        if enum_type is not None:
            self.enum_type = enum_type
        if self.enum_type is None:
            raise TypeError(f"{type(self).__name__} requires an enum type")

    def parse(self, value: str | None) -> E:
        if not value:
            if self.default is not None:
                return self.default
            raise UnknownEnumValueError(value, self.enum_type, operation="parse")

        wanted = value.casefold()
        for member in self.enum_type:
            if member.name.casefold() == wanted:
                return member
            if isinstance(member.value, str) and member.value.casefold() == wanted:
                return member

        raise UnknownEnumValueError(value, self.enum_type, operation="parse")


class BrowserType(Enum):
    """Browser kinds selectable from configuration."""

    CHROME = "chrome"
    FIREFOX = "firefox"

    @property
    def browser_name(self) -> str:
        return self.value


class BrowserTypeParser(EnumParser[BrowserType]):
    """Parses browser names, defaulting to Chrome when the value is empty."""

    enum_type = BrowserType
    default = BrowserType.CHROME


__all__ = ["BrowserType", "BrowserTypeParser", "EnumParser"]
