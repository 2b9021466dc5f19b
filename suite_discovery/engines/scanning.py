"""Locating and importing test modules below a classpath root."""

import importlib
import logging
from collections.abc import Iterator, Sequence
from pathlib import Path
from types import ModuleType

from suite_discovery.context import (
    ResolutionContext,
    current_context,
    invoke_with_context,
)

log = logging.getLogger(__name__)

DEFAULT_PATTERN = "test*.py"


def iter_test_modules(root: Path, pattern: str = DEFAULT_PATTERN) -> Iterator[str]:
    """Yield dotted names of the modules matching a pattern below a root.

    Hidden directories, ``__pycache__`` and paths that are not valid module
    names are skipped. Names are yielded in sorted path order.
    """
    for path in sorted(root.rglob(pattern)):
        relative = path.relative_to(root)
        packages = relative.parts[:-1]
        if any(part.startswith(".") or part == "__pycache__" for part in packages):
            continue
        parts = (*packages, relative.stem)
        if not all(part.isidentifier() for part in parts):
            log.debug("Skipping %s, not importable as a module", path)
            continue
        yield ".".join(parts)


def load_test_modules(
    root: Path, pattern: str = DEFAULT_PATTERN
) -> Sequence[ModuleType]:
    """Import every test module below a root.

    The root is layered on top of the ambient context for the duration of
    the imports. Import errors propagate unchanged.
    """
    names = list(iter_test_modules(root, pattern))
    if not names:
        return []

    log.debug("Importing %d module(s) from %s", len(names), root)
    importlib.invalidate_caches()
    context = ResolutionContext([root], parent=current_context())
    return invoke_with_context(
        context, lambda: [importlib.import_module(name) for name in names]
    )


def defined_in(module: ModuleType) -> Iterator[tuple[str, object]]:
    """Yield the attributes a module defines itself, in definition order."""
    for name, value in vars(module).items():
        if getattr(value, "__module__", None) == module.__name__:
            yield name, value
