"""Discovery requests handed to the launcher."""

from collections.abc import Iterable, Sequence
from pathlib import Path
from typing import Annotated, Literal, Self

from pydantic import Field

from suite_discovery.models.base import Model


class ClasspathRootSelector(Model):
    """Search a directory as a module root: module names are relative to it."""

    kind: Literal["classpath-root"] = "classpath-root"
    root: Path


class DirectorySelector(Model):
    """Search a directory directly, for engines that work on plain files."""

    kind: Literal["directory"] = "directory"
    path: Path


DiscoverySelector = Annotated[
    ClasspathRootSelector | DirectorySelector, Field(discriminator="kind")
]


class EngineFilter(Model):
    """Restrict discovery to a set of engine ids."""

    included: frozenset[str]

    @classmethod
    def include_engines(cls, engine_ids: Iterable[str]) -> Self:
        """Create a filter that accepts exactly the given engine ids."""
        return cls(included=frozenset(engine_ids))

    def accepts(self, engine_id: str) -> bool:
        """Check whether an engine takes part in discovery."""
        return engine_id in self.included


class DiscoveryRequest(Model):
    """Selectors plus an optional engine filter."""

    selectors: Sequence[DiscoverySelector] = Field(default_factory=tuple)
    engine_filter: EngineFilter | None = None

    def accepts_engine(self, engine_id: str) -> bool:
        """Check an engine against the filter; no filter accepts every engine."""
        return self.engine_filter is None or self.engine_filter.accepts(engine_id)

    def classpath_roots(self) -> Sequence[Path]:
        """Roots of all classpath root selectors, in request order."""
        return [s.root for s in self.selectors if s.kind == "classpath-root"]

    def directories(self) -> Sequence[Path]:
        """Paths of all directory selectors, in request order."""
        return [s.path for s in self.selectors if s.kind == "directory"]


def select_classpath_roots(roots: Iterable[Path]) -> Sequence[ClasspathRootSelector]:
    """Create one selector per distinct root, normalised to absolute paths."""
    seen: set[Path] = set()
    selectors: list[ClasspathRootSelector] = []
    for root in roots:
        resolved = Path(root).absolute()
        if resolved not in seen:
            seen.add(resolved)
            selectors.append(ClasspathRootSelector(root=resolved))
    return selectors


def select_directory(path: Path) -> DirectorySelector:
    """Create a selector for a single directory."""
    return DirectorySelector(path=Path(path).absolute())


def build_request(
    artifact_directory: Path, engine_ids: Sequence[str] = ()
) -> DiscoveryRequest:
    """Build the request used to collect tests from an artifact directory.

    Args:
        artifact_directory: Directory holding the test modules; selected both
            as a classpath root and as a plain directory
        engine_ids: Engines allowed to take part; empty means all engines

    Returns:
        The discovery request

    """
    selectors: list[ClasspathRootSelector | DirectorySelector] = [
        *select_classpath_roots({Path(artifact_directory).absolute()}),
        select_directory(artifact_directory),
    ]
    engine_filter = EngineFilter.include_engines(engine_ids) if engine_ids else None
    return DiscoveryRequest(selectors=selectors, engine_filter=engine_filter)
