"""Collects available tests through a discovery request."""

import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Self

from pydantic import ConfigDict, Field

from suite_discovery.context import (
    ResolutionContext,
    current_context,
    invoke_with_context,
)
from suite_discovery.launcher import Launcher
from suite_discovery.models.base import Model
from suite_discovery.models.identifier import TestIdentifier
from suite_discovery.models.request import build_request
from suite_discovery.models.result import Item, Result

log = logging.getLogger(__name__)

INCOMPATIBLE_ENGINES = frozenset({"cucumber"})


class IncompatibleEngineError(Exception):
    """Raised when an engine that must run inside a suite is found as a root."""

    def __init__(self, engine_id: str) -> None:
        super().__init__(
            f"The core engine, {engine_id}, was found during discovery. "
            "Hint: try configuring the engine as a delegate of the suite "
            "engine instead."
        )
        self.engine_id = engine_id


class CollectorConfig(Model):
    """Settings for a test collector."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    execution_context: ResolutionContext | None = Field(
        default=None,
        description="Parent context; the ambient one at collection time if unset",
    )
    search_path: Sequence[Path] = Field(
        default_factory=tuple,
        description="Locations holding test dependencies",
    )
    artifact_directory: Path = Field(..., description="Directory of test modules")


@dataclass(frozen=True, kw_only=True)
class CollectorBuilder:
    """Step-by-step assembly of a :class:`TestCollector`.

    Every ``with_*`` call returns a new builder.
    """

    execution_context: ResolutionContext | None = None
    search_path: Sequence[Path] = ()
    artifact_directory: Path | None = None

    def with_execution_context(self, value: ResolutionContext | None) -> Self:
        """Set the context the collector's context is layered on."""
        return replace(self, execution_context=value)

    def with_search_path(self, value: Sequence[Path]) -> Self:
        """Set the locations holding test dependencies."""
        return replace(self, search_path=tuple(value))

    def with_artifact_directory(self, value: Path) -> Self:
        """Set the directory containing the test modules."""
        return replace(self, artifact_directory=value)

    def build(self) -> "TestCollector":
        """Validate the settings and create the collector.

        Raises:
            pydantic.ValidationError: If no artifact directory was given

        """
        config = CollectorConfig(
            execution_context=self.execution_context,
            search_path=self.search_path,
            artifact_directory=self.artifact_directory,  # type: ignore[arg-type]
        )
        return TestCollector(config=config)


@dataclass(frozen=True, kw_only=True)
class TestCollector:
    """Runs discovery and maps the plan to items for the host."""

    __test__ = False

    config: CollectorConfig
    launcher_factory: Callable[[], Launcher] = field(default=Launcher.create)

    @classmethod
    def builder(cls) -> CollectorBuilder:
        """Start building a collector."""
        return CollectorBuilder()

    def collect_tests(self, engines: Sequence[str] = ()) -> Result:
        """Discover the tests in the artifact directory.

        Args:
            engines: Engine ids allowed to take part; empty allows every engine

        Returns:
            The discovered items, or the shared empty result when the
            artifact directory does not exist

        Raises:
            IncompatibleEngineError: If an engine that must run inside a
                suite is found as a root

        """
        if not self.config.artifact_directory.exists():
            log.debug(
                "Artifact directory %s does not exist, nothing to collect",
                self.config.artifact_directory,
            )
            return Result.empty()

        parent = self.config.execution_context or current_context()
        context = ResolutionContext(self.config.search_path, parent=parent)
        return invoke_with_context(context, lambda: self._collect(engines))

    def _collect(self, engines: Sequence[str]) -> Result:
        request = build_request(self.config.artifact_directory, engines)
        plan = self.launcher_factory().discover(request)

        items: list[Item] = []
        for root in plan.roots:
            throw_on_incompatible_engine(root)
            for identifier in plan.get_children(root):
                name = fully_qualified_name(identifier)
                items.append(Item(fully_qualified_name=name))

        log.info(
            "Collected %d test item(s) from %s",
            len(items),
            self.config.artifact_directory,
        )
        return Result(items=items)


def throw_on_incompatible_engine(root: TestIdentifier) -> None:
    """Reject a root that belongs to an engine which must run inside a suite."""
    engine_id = root.unique_id.engine_id or ""
    if engine_id.lower() in INCOMPATIBLE_ENGINES:
        raise IncompatibleEngineError(engine_id)


def fully_qualified_name(identifier: TestIdentifier) -> str:
    """Derive the name the host knows a discovered unit by."""
    source = identifier.source
    if source is None:
        return identifier.legacy_reporting_name

    match source.kind:
        case "class":
            return source.class_name
        case "method":
            return (
                f"{source.class_name}#{source.method_name}"
                f"({source.method_parameter_types})"
            )
        case "file":
            return identifier.legacy_reporting_name
