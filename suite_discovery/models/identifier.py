"""Identifiers and the plan tree produced by a discovery run."""

from collections.abc import Mapping, Sequence
from enum import StrEnum
from typing import Self

from pydantic import Field

from suite_discovery.models.base import Model
from suite_discovery.models.source import TestSource

ENGINE_SEGMENT_TYPE = "engine"


class Segment(Model):
    """A single ``[type:value]`` part of a unique id."""

    type: str
    value: str

    def __str__(self) -> str:
        return f"[{self.type}:{self.value}]"


class UniqueId(Model):
    """Hierarchical identifier of a node in the discovery tree.

    The first segment of every id produced by the launcher names the engine
    that discovered the node, e.g. ``[engine:unittest]/[class:pkg.FooTest]``.
    """

    segments: Sequence[Segment] = Field(..., min_length=1)

    @classmethod
    def for_engine(cls, engine_id: str) -> Self:
        """Create the root id for an engine."""
        return cls(segments=(Segment(type=ENGINE_SEGMENT_TYPE, value=engine_id),))

    @property
    def engine_id(self) -> str | None:
        """Engine that owns this id, if the id starts with an engine segment."""
        first = self.segments[0]
        return first.value if first.type == ENGINE_SEGMENT_TYPE else None

    def append(self, segment_type: str, value: str) -> Self:
        """Return a new id with one more segment."""
        return type(self)(
            segments=(*self.segments, Segment(type=segment_type, value=value))
        )

    def __str__(self) -> str:
        return "/".join(str(segment) for segment in self.segments)


class TestType(StrEnum):
    """Kind of node in the discovery tree."""

    __test__ = False

    CONTAINER = "container"
    TEST = "test"
    CONTAINER_AND_TEST = "container_and_test"


class TestIdentifier(Model):
    """Immutable view of one discovered node."""

    __test__ = False

    unique_id: UniqueId
    parent_id: UniqueId | None = None
    display_name: str
    legacy_reporting_name: str
    type: TestType = TestType.CONTAINER
    source: TestSource | None = None


class TestPlan(Model):
    """Tree of identifiers returned by the launcher for one request.

    Roots are kept in engine order and children in the order the engines
    reported them.
    """

    __test__ = False

    roots: Sequence[TestIdentifier] = Field(default_factory=tuple)
    children: Mapping[str, Sequence[TestIdentifier]] = Field(default_factory=dict)

    def get_children(self, identifier: TestIdentifier) -> Sequence[TestIdentifier]:
        """Return the direct children of an identifier."""
        return self.children.get(str(identifier.unique_id), ())

    def count_tests(self) -> int:
        """Count identifiers of type test across the whole plan."""
        pending = list(self.roots)
        count = 0
        while pending:
            identifier = pending.pop()
            if identifier.type in (TestType.TEST, TestType.CONTAINER_AND_TEST):
                count += 1
            pending.extend(self.get_children(identifier))
        return count
