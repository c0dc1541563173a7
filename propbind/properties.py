"""Line-oriented ``key=value`` properties format.

Grammar:
- natural lines end with ``\\n``, ``\\r`` or ``\\r\\n``; leading spaces, tabs
  and form feeds are ignored
- blank lines and lines whose first character is ``#`` or ``!`` are comments
- a line ending in an odd number of backslashes continues on the next line
- the key ends at the first unescaped ``=``, ``:`` or whitespace; one ``=`` or
  ``:`` plus surrounding whitespace separates it from the value
- ``\\t``, ``\\n``, ``\\r``, ``\\f`` and ``\\uXXXX`` are decoded, any other
  escaped character stands for itself
- a repeated key keeps its last value
"""

from __future__ import annotations

import re
from collections.abc import Iterator, Mapping
from types import MappingProxyType


_LINE_BREAK = re.compile(r"\r\n|\r|\n")
_WHITESPACE = " \t\f"
_SEPARATORS = "=:"
_COMMENT_MARKERS = "#!"
_ESCAPES = {"t": "\t", "n": "\n", "r": "\r", "f": "\f"}


def parse_properties(text: str) -> dict[str, str]:
    """Parse properties text into an insertion-ordered dictionary.

    Raises:
        ValueError: A ``\\u`` escape is not followed by four hex digits
    """
    properties: dict[str, str] = {}
    for line in _logical_lines(text):
        key, value = _split_entry(line)
        properties[key] = value
    return properties


def load_properties(text: str) -> Mapping[str, str]:
    """Parse properties text into a read-only mapping."""
    return MappingProxyType(parse_properties(text))


def _logical_lines(text: str) -> Iterator[str]:
    buffer: str | None = None
    for natural in _LINE_BREAK.split(text):
        stripped = natural.lstrip(_WHITESPACE)
        if buffer is None:
            if not stripped or stripped[0] in _COMMENT_MARKERS:
                continue
            buffer = stripped
        else:
            buffer += stripped

        if _continues(buffer):
            buffer = buffer[:-1]
            continue
        yield buffer
        buffer = None

    if buffer is not None:
        yield buffer


def _continues(line: str) -> bool:
    backslashes = len(line) - len(line.rstrip("\\"))
    return backslashes % 2 == 1


def _split_entry(line: str) -> tuple[str, str]:
    n = len(line)
    i = 0
    while i < n:
        char = line[i]
        if char == "\\":
            i += 2
            continue
        if char in _SEPARATORS or char in _WHITESPACE:
            break
        i += 1
    key_end = min(i, n)

    while i < n and line[i] in _WHITESPACE:
        i += 1
    if i < n and line[i] in _SEPARATORS:
        i += 1
        while i < n and line[i] in _WHITESPACE:
            i += 1

    return _unescape(line[:key_end]), _unescape(line[i:])


def _unescape(raw: str) -> str:
    if "\\" not in raw:
        return raw

    out: list[str] = []
    i = 0
    n = len(raw)
    while i < n:
        char = raw[i]
        i += 1
        if char != "\\":
            out.append(char)
            continue
        if i >= n:
            break
        escaped = raw[i]
        i += 1
        if escaped == "u":
            digits = raw[i : i + 4]
            if len(digits) != 4 or any(c not in "0123456789abcdefABCDEF" for c in digits):
                raise ValueError(f"Malformed \\uxxxx encoding: \\u{digits}")
            out.append(chr(int(digits, 16)))
            i += 4
        else:
            out.append(_ESCAPES.get(escaped, escaped))
    return "".join(out)


__all__ = ["load_properties", "parse_properties"]
