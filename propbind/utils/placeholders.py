"""Placeholder substitution for configuration resource paths.

Paths may contain ``${NAME}`` tokens. Each name is looked up in the process
property store first, then in the process environment:

    >>> set_property("env", "qa")
    >>> resolve_placeholders("${env}-configurations.properties")
    'qa-configurations.properties'

Resolution is single-pass: substituted values are never rescanned. A ``${``
without a closing ``}`` is copied through verbatim.
"""

from __future__ import annotations

import os
from collections.abc import Mapping, Sequence

from ..exceptions import UnresolvedPlaceholderError


PLACEHOLDER_START = "${"
PLACEHOLDER_END = "}"

_properties: dict[str, str] = {}


def set_property(name: str, value: str) -> str | None:
    """Set a process-level property, returning the previous value."""
    previous = _properties.get(name)
    _properties[name] = value
    return previous


def get_property(name: str, default: str | None = None) -> str | None:
    return _properties.get(name, default)


def clear_property(name: str) -> str | None:
    """Remove a process-level property, returning the removed value."""
    return _properties.pop(name, None)


def process_properties() -> Mapping[str, str]:
    """Live read-only view of the process property store."""
    return _PropertiesView()


class _PropertiesView(Mapping[str, str]):
    def __getitem__(self, key: str) -> str:
        return _properties[key]

    def __iter__(self):
        return iter(dict(_properties))

    def __len__(self) -> int:
        return len(_properties)


def default_sources(use_environment: bool = True) -> tuple[Mapping[str, str], ...]:
    """Lookup chain used when no sources are injected."""
    if use_environment:
        return (process_properties(), os.environ)
    return (process_properties(),)


def resolve_placeholders(
    text: str | None, sources: Sequence[Mapping[str, str]] | None = None
) -> str | None:
    """Replace every ``${NAME}`` token in ``text``.

    Args:
        text: Path or other string to resolve; ``None`` passes through
        sources: Ordered lookups; defaults to process properties then environment

    Returns:
        The resolved string, or ``None`` when ``text`` is ``None``

    Raises:
        UnresolvedPlaceholderError: A token name is missing from every source
    """
    if text is None:
        return None
    if sources is None:
        sources = default_sources()

    parts: list[str] = []
    i = 0
    while i < len(text):
        start = text.find(PLACEHOLDER_START, i)
        if start == -1:
            parts.append(text[i:])
            break
        parts.append(text[i:start])

        end = text.find(PLACEHOLDER_END, start)
        if end == -1:
            # Unterminated token: keep the rest as literal text
            parts.append(text[start:])
            break

        key = text[start + len(PLACEHOLDER_START) : end]
        value = _lookup(key, sources)
        if value is None:
            raise UnresolvedPlaceholderError(key, text, operation="resolve_placeholders")
        parts.append(value)
        i = end + len(PLACEHOLDER_END)

    return "".join(parts)


def _lookup(key: str, sources: Sequence[Mapping[str, str]]) -> str | None:
    for source in sources:
        value = source.get(key)
        if value is not None:
            return value
    return None


class PlaceholderResolver:
    """Resolves placeholders against a fixed lookup chain.

    With no sources the chain is evaluated lazily on each call, so properties
    and environment variables set after construction are still seen.
    """

    def __init__(
        self,
        sources: Sequence[Mapping[str, str]] | None = None,
        use_environment: bool = True,
    ):
        self._sources = tuple(sources) if sources is not None else None
        self.use_environment = use_environment

    @property
    def sources(self) -> tuple[Mapping[str, str], ...]:
        if self._sources is not None:
            return self._sources
        return default_sources(self.use_environment)

    def resolve(self, text: str | None) -> str | None:
        return resolve_placeholders(text, self.sources)


__all__ = [
    "PlaceholderResolver",
    "clear_property",
    "default_sources",
    "get_property",
    "process_properties",
    "resolve_placeholders",
    "set_property",
]
