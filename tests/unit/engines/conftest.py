"""Fixtures for engine tests."""

import importlib
import textwrap
from collections.abc import Callable
from pathlib import Path

import pytest

WriteModule = Callable[[str, str], Path]


@pytest.fixture
def artifact_dir(tmp_path: Path) -> Path:
    """Create an empty artifact directory."""
    directory = tmp_path / "artifacts"
    directory.mkdir()
    return directory


@pytest.fixture
def write_module(artifact_dir: Path) -> WriteModule:
    """Return a helper writing a module below the artifact directory."""

    def write(relative_path: str, source: str) -> Path:
        path = artifact_dir / relative_path
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(textwrap.dedent(source))
        importlib.invalidate_caches()
        return path

    return write
