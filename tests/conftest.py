# propbind/tests/conftest.py
#
# Test bootstrap for pytest: ensure repository root is on sys.path so tests can import
# `tests.*` helper modules, and provide shared resource fixtures.
#
from __future__ import annotations

import sys
from pathlib import Path

import pytest
from loguru import logger

from propbind.config.loader import reload_config
from propbind.metadata import read_directives
from propbind.resources import FileSystemResourceLoader
from propbind.utils import placeholders


_repo_root = Path(__file__).resolve().parents[1]
_repo_root_str = str(_repo_root)

if _repo_root_str not in sys.path:
    sys.path.insert(0, _repo_root_str)

logger.remove()
logger.add(
    sys.stderr,
    level="INFO",
    format="{time:YYYY-MM-DD HH:mm:ss} {level} {name}: {message}",
)

FIXTURES_DIR = Path(__file__).resolve().parent / "fixtures"


def pytest_configure(config):
    """Register custom pytest markers."""
    config.addinivalue_line(
        "markers",
        "fast: Fast unit tests that should complete in < 1 second",
    )
    config.addinivalue_line(
        "markers",
        "integration: Tests that bind real resource files end to end",
    )


@pytest.fixture(scope="session")
def repo_root() -> Path:
    return _repo_root


@pytest.fixture(scope="session")
def fixtures_dir() -> Path:
    """Directory holding the sample properties resources."""
    return FIXTURES_DIR


@pytest.fixture
def fixtures_loader(fixtures_dir: Path) -> FileSystemResourceLoader:
    return FileSystemResourceLoader([fixtures_dir])


@pytest.fixture
def resource_dir(tmp_path: Path) -> Path:
    """Empty resource root for tests that write their own properties files."""
    root = tmp_path / "resources"
    root.mkdir()
    return root


@pytest.fixture
def write_resource(resource_dir: Path):
    """Write ``content`` to ``name`` under the temporary resource root."""

    def _write(name: str, content: str, encoding: str = "utf-8") -> Path:
        path = resource_dir / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding=encoding)
        return path

    return _write


@pytest.fixture(autouse=True)
def isolated_process_properties(monkeypatch):
    """Give every test an empty process property store."""
    monkeypatch.setattr(placeholders, "_properties", {})
    yield


@pytest.fixture(autouse=True)
def fresh_library_config():
    """Drop cached library configuration and directive tables around each test."""
    reload_config()
    read_directives.cache_clear()
    yield
    reload_config()
    read_directives.cache_clear()
