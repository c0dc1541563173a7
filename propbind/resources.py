"""Resource lookup for configuration files.

A resource path is relative to one of the loader's search roots, tried in
order, much like a classpath. Absolute paths are used as-is.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from pathlib import Path
from typing import Protocol

from loguru import logger

from .exceptions import ResourceNotFoundError, ResourceReadError, wrap_exception
from .properties import load_properties


class ResourceLoader(Protocol):
    """Anything that can turn a resource path into its text."""

    def read_text(self, path: str) -> str: ...


class FileSystemResourceLoader:
    """Loads resources from a list of directories.

    Args:
        search_paths: Directories tried in order; defaults to the working directory
        encoding: Text encoding of resource files
    """

    def __init__(
        self,
        search_paths: Iterable[str | Path] | None = None,
        encoding: str = "utf-8",
    ):
        roots = list(search_paths) if search_paths is not None else ["."]
        self.search_paths = [Path(root) for root in roots]
        self.encoding = encoding

    def locate(self, path: str) -> Path | None:
        """Return the first existing file for ``path``, or None."""
        candidate = Path(path)
        if candidate.is_absolute():
            return candidate if candidate.is_file() else None

        for root in self.search_paths:
            resolved = root / candidate
            if resolved.is_file():
                return resolved
        return None

    def read_text(self, path: str) -> str:
        located = self.locate(path)
        if located is None:
            raise ResourceNotFoundError(
                path,
                operation="read_text",
                details={"search_paths": [str(root) for root in self.search_paths]},
            )

        logger.debug(f"Reading configuration resource {located}")
        try:
            return located.read_text(encoding=self.encoding)
        except (OSError, UnicodeDecodeError) as e:
            raise wrap_exception(
                e,
                ResourceReadError,
                message=f"Failed to read resource {located}: {e}",
                path=path,
                operation="read_text",
            ) from e


def load_source(loader: ResourceLoader, path: str) -> Mapping[str, str]:
    """Read ``path`` through ``loader`` and parse it as properties text.

    Raises:
        ResourceNotFoundError: The loader cannot locate ``path``
        ResourceReadError: The text is not valid properties syntax
    """
    text = loader.read_text(path)
    try:
        return load_properties(text)
    except ValueError as e:
        raise wrap_exception(
            e,
            ResourceReadError,
            message=f"Invalid properties syntax in {path}: {e}",
            path=path,
            operation="load_source",
        ) from e


__all__ = ["FileSystemResourceLoader", "ResourceLoader", "load_source"]
