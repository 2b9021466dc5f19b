"""Engines with canned results for tests."""

from collections.abc import Sequence
from dataclasses import dataclass, field

from suite_discovery.engines.base import DiscoveryEngine, TestDescriptor
from suite_discovery.models.identifier import UniqueId
from suite_discovery.models.request import DiscoveryRequest
from suite_discovery.models.source import TestSource


@dataclass(frozen=True, kw_only=True)
class CannedChild:
    """A child the static engine reports below its root."""

    name: str
    source: TestSource | None = None
    legacy_reporting_name: str | None = None


@dataclass(kw_only=True)
class StaticEngine(DiscoveryEngine):
    """Engine reporting the same children for every request."""

    id: str
    children: Sequence[CannedChild] = ()
    requests: list[DiscoveryRequest] = field(default_factory=list)

    @property
    def engine_id(self) -> str:
        return self.id

    def discover(
        self, request: DiscoveryRequest, unique_id: UniqueId
    ) -> TestDescriptor:
        self.requests.append(request)
        root = self.create_root(unique_id)
        for child in self.children:
            root.add_child(
                TestDescriptor(
                    unique_id=unique_id.append("item", child.name),
                    display_name=child.name,
                    legacy_reporting_name=child.legacy_reporting_name,
                    source=child.source,
                )
            )
        return root
