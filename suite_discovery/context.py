"""Ambient module resolution context used while engines import test modules.

Engines import test modules with the regular import system. A meta path
finder consults the context that is active for the current thread or task,
so modules living in the configured search path become importable for the
duration of a discovery run only.
"""

import importlib.abc
import importlib.machinery
import logging
import sys
from collections.abc import Callable, Generator, Iterable, Sequence
from contextlib import contextmanager
from contextvars import ContextVar
from importlib.machinery import ModuleSpec
from pathlib import Path
from types import ModuleType
from typing import TypeVar

log = logging.getLogger(__name__)

T = TypeVar("T")


class ResolutionContext:
    """Search path entries layered on top of an optional parent context.

    Lookups are delegated to the parent first, mirroring how the regular
    import system prefers ``sys.path`` over the context's own entries.
    """

    def __init__(
        self,
        search_path: Iterable[Path] = (),
        parent: "ResolutionContext | None" = None,
    ) -> None:
        self.search_path: Sequence[Path] = tuple(Path(p) for p in search_path)
        self.parent = parent
        self.resolved_modules: set[str] = set()

    def find_spec(self, fullname: str) -> ModuleSpec | None:
        """Find a top-level module in this context or one of its parents."""
        if self.parent is not None:
            spec = self.parent.find_spec(fullname)
            if spec is not None:
                return spec
        if not self.search_path:
            return None
        return importlib.machinery.PathFinder.find_spec(
            fullname, [str(entry) for entry in self.search_path]
        )

    def __repr__(self) -> str:
        entries = ", ".join(str(entry) for entry in self.search_path)
        return f"ResolutionContext([{entries}], parent={self.parent!r})"


_current: ContextVar[ResolutionContext | None] = ContextVar(
    "suite_discovery_context", default=None
)


def current_context() -> ResolutionContext | None:
    """Return the context active for the running thread or task."""
    return _current.get()


class _AmbientContextFinder(importlib.abc.MetaPathFinder):
    """Resolves top-level imports through the active context."""

    def find_spec(
        self,
        fullname: str,
        path: Sequence[str] | None,
        target: ModuleType | None = None,
    ) -> ModuleSpec | None:
        context = _current.get()
        # Submodules are found through their package's __path__.
        if context is None or path is not None:
            return None
        spec = context.find_spec(fullname)
        if spec is not None:
            context.resolved_modules.add(fullname)
            log.debug("Resolved %s through %r", fullname, context)
        return spec


_finder = _AmbientContextFinder()


def _install_finder() -> None:
    if _finder not in sys.meta_path:
        sys.meta_path.append(_finder)


def _evict_modules(names: Iterable[str]) -> None:
    for name in names:
        prefix = f"{name}."
        for module_name in [
            m for m in sys.modules if m == name or m.startswith(prefix)
        ]:
            del sys.modules[module_name]


@contextmanager
def activated(context: ResolutionContext) -> Generator[ResolutionContext]:
    """Make a context ambient for the duration of a ``with`` block.

    The previously active context is restored on every exit path, and
    modules resolved through the context are removed from ``sys.modules``.
    """
    _install_finder()
    token = _current.set(context)
    try:
        yield context
    finally:
        _current.reset(token)
        _evict_modules(context.resolved_modules)
        context.resolved_modules.clear()


def invoke_with_context(context: ResolutionContext, operation: Callable[[], T]) -> T:
    """Run an operation with the given context installed as ambient context.

    Args:
        context: Context to install
        operation: Zero-argument callable to run

    Returns:
        Whatever the operation returns

    """
    with activated(context):
        return operation()
