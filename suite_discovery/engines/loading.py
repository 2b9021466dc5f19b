"""Loading of discovery engines from entry points."""

import logging
from collections.abc import Sequence
from importlib.metadata import EntryPoint, entry_points

from suite_discovery.engines.base import DiscoveryEngine

log = logging.getLogger(__name__)

ENTRY_POINT_GROUP = "suite_discovery.engines"


class EngineNotFoundError(Exception):
    """Raised when an engine is not found."""


class InvalidEngineError(Exception):
    """Raised when an entry point does not refer to a discovery engine."""


def _instantiate(entry: EntryPoint) -> DiscoveryEngine:
    engine_cls = entry.load()
    if not (isinstance(engine_cls, type) and issubclass(engine_cls, DiscoveryEngine)):
        raise InvalidEngineError(
            f"Entry point '{entry.name}' ({entry.value}) is not a DiscoveryEngine"
        )
    engine: DiscoveryEngine = engine_cls()
    log.debug("Loaded engine %s from %s", engine.engine_id, entry.value)
    return engine


def load_engine(key: str) -> DiscoveryEngine:
    """Load a single engine by key.

    Args:
        key: The engine key as registered in pyproject.toml
             (e.g., "unittest", "functions")

    Returns:
        The engine instance

    Raises:
        EngineNotFoundError: If no engine with the given key is found

    """
    entries = entry_points(group=ENTRY_POINT_GROUP)

    for entry in entries:
        if entry.name == key:
            return _instantiate(entry)

    available = [e.name for e in entries]
    raise EngineNotFoundError(
        f"Engine '{key}' not found. Available engines: {available}"
    )


def load_engines(exclude: Sequence[str] = ()) -> Sequence[DiscoveryEngine]:
    """Load every registered engine, sorted by key.

    Args:
        exclude: Keys of engines to leave out

    Returns:
        The engine instances

    """
    entries = sorted(entry_points(group=ENTRY_POINT_GROUP), key=lambda e: e.name)
    return [_instantiate(entry) for entry in entries if entry.name not in exclude]
