"""Abstract base class for discovery engines."""

from abc import ABC, abstractmethod
from collections.abc import Iterator
from dataclasses import dataclass, field

from suite_discovery.models.identifier import TestIdentifier, TestType, UniqueId
from suite_discovery.models.request import DiscoveryRequest
from suite_discovery.models.source import TestSource


@dataclass(kw_only=True)
class TestDescriptor:
    """Mutable node of the tree an engine builds while discovering.

    Engines grow the tree with :meth:`add_child`; the launcher freezes it
    into :class:`TestIdentifier` values once the engine is done.
    """

    __test__ = False

    unique_id: UniqueId
    display_name: str
    legacy_reporting_name: str | None = None
    type: TestType = TestType.CONTAINER
    source: TestSource | None = None
    children: list["TestDescriptor"] = field(default_factory=list)

    def add_child(self, child: "TestDescriptor") -> "TestDescriptor":
        """Attach a child and return it."""
        self.children.append(child)
        return child

    def to_identifier(self, parent_id: UniqueId | None = None) -> TestIdentifier:
        """Freeze this node, without its children."""
        return TestIdentifier(
            unique_id=self.unique_id,
            parent_id=parent_id,
            display_name=self.display_name,
            legacy_reporting_name=self.legacy_reporting_name or self.display_name,
            type=self.type,
            source=self.source,
        )

    def walk(self) -> Iterator["TestDescriptor"]:
        """Yield this node and all of its descendants, depth first."""
        yield self
        for child in self.children:
            yield from child.walk()


class DiscoveryEngine(ABC):
    """Abstract base for pluggable discovery engines.

    Engines are registered under the ``suite_discovery.engines`` entry point
    group and instantiated without arguments.
    """

    @property
    @abstractmethod
    def engine_id(self) -> str:
        """Unique engine identifier (e.g., "unittest")."""

    @abstractmethod
    def discover(
        self, request: DiscoveryRequest, unique_id: UniqueId
    ) -> TestDescriptor:
        """Discover tests for a request.

        Args:
            request: Selectors describing where to look
            unique_id: Id to give the returned root descriptor

        Returns:
            Root descriptor holding everything the engine found

        """

    def create_root(self, unique_id: UniqueId) -> TestDescriptor:
        """Create an empty root descriptor for this engine."""
        return TestDescriptor(unique_id=unique_id, display_name=self.engine_id)
