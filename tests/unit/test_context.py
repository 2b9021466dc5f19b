"""Tests for the ambient resolution context."""

import importlib
import sys
from pathlib import Path

import pytest

from suite_discovery.context import (
    ResolutionContext,
    activated,
    current_context,
    invoke_with_context,
)


@pytest.fixture
def deps_dir(tmp_path: Path) -> Path:
    """Create a directory holding a single importable module."""
    deps = tmp_path / "deps"
    deps.mkdir()
    (deps / "ctx_sample_dependency.py").write_text("VALUE = 42\n")
    (deps / "ctx_sample_package").mkdir()
    (deps / "ctx_sample_package" / "__init__.py").write_text("")
    (deps / "ctx_sample_package" / "helpers.py").write_text("NAME = 'helpers'\n")
    importlib.invalidate_caches()
    return deps


def test_no_context_by_default() -> None:
    """No context is active outside of a scope."""
    assert current_context() is None


def test_activated_installs_and_restores() -> None:
    """The context is ambient inside the scope only."""
    context = ResolutionContext()

    with activated(context) as active:
        assert active is context
        assert current_context() is context

    assert current_context() is None


def test_activated_restores_on_error() -> None:
    """The previous context is restored when the block raises."""
    outer = ResolutionContext()
    inner = ResolutionContext()

    with activated(outer):
        with pytest.raises(RuntimeError, match="boom"):
            with activated(inner):
                raise RuntimeError("boom")
        assert current_context() is outer

    assert current_context() is None


def test_invoke_with_context_returns_operation_result() -> None:
    """The operation runs inside the context and its result is returned."""
    context = ResolutionContext()

    result = invoke_with_context(context, lambda: current_context())

    assert result is context
    assert current_context() is None


def test_invoke_with_context_propagates_errors() -> None:
    """Errors from the operation propagate after restoring the context."""

    def fail() -> None:
        raise ValueError("bad")

    with pytest.raises(ValueError, match="bad"):
        invoke_with_context(ResolutionContext(), fail)

    assert current_context() is None


def test_imports_modules_from_search_path(deps_dir: Path) -> None:
    """Modules in the search path are importable while the context is active."""
    with activated(ResolutionContext([deps_dir])):
        module = importlib.import_module("ctx_sample_dependency")
        assert module.VALUE == 42

    assert "ctx_sample_dependency" not in sys.modules


def test_modules_not_importable_without_context(deps_dir: Path) -> None:
    """Search path entries have no effect outside of the scope."""
    with pytest.raises(ModuleNotFoundError):
        importlib.import_module("ctx_sample_dependency")


def test_imports_submodules_of_resolved_packages(deps_dir: Path) -> None:
    """Submodules resolve through their package and are evicted with it."""
    with activated(ResolutionContext([deps_dir])):
        module = importlib.import_module("ctx_sample_package.helpers")
        assert module.NAME == "helpers"

    assert "ctx_sample_package" not in sys.modules
    assert "ctx_sample_package.helpers" not in sys.modules


def test_resolves_through_parent(deps_dir: Path) -> None:
    """A child context finds modules in its parent's search path."""
    parent = ResolutionContext([deps_dir])
    child = ResolutionContext([], parent=parent)

    assert child.find_spec("ctx_sample_dependency") is not None


def test_find_spec_returns_none_for_unknown_module(deps_dir: Path) -> None:
    """Unknown modules are not found."""
    context = ResolutionContext([deps_dir])

    assert context.find_spec("ctx_sample_missing") is None
    assert ResolutionContext().find_spec("ctx_sample_dependency") is None
