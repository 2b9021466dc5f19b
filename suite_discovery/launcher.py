"""Launcher handing discovery requests to the registered engines."""

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Self

from suite_discovery.engines.base import DiscoveryEngine, TestDescriptor
from suite_discovery.engines.loading import load_engines
from suite_discovery.models.identifier import TestIdentifier, TestPlan, UniqueId
from suite_discovery.models.request import DiscoveryRequest

log = logging.getLogger(__name__)


@dataclass(frozen=True, kw_only=True)
class Launcher:
    """Runs a discovery request against a fixed set of engines."""

    engines: Sequence[DiscoveryEngine]

    @classmethod
    def create(cls, exclude: Sequence[str] = ()) -> Self:
        """Create a launcher for every engine registered via entry points."""
        return cls(engines=load_engines(exclude=exclude))

    def discover(self, request: DiscoveryRequest) -> TestPlan:
        """Discover tests and return them as a plan.

        Errors raised by engines are not caught.
        """
        plan = build_plan(self.discover_roots(request))
        log.debug(
            "Discovery finished: %d root(s), %d test(s)",
            len(plan.roots),
            plan.count_tests(),
        )
        return plan

    def discover_roots(self, request: DiscoveryRequest) -> Sequence[TestDescriptor]:
        """Discover tests and return each engine's root descriptor."""
        self._warn_on_unmatched_filter(request)

        roots: list[TestDescriptor] = []
        for engine in self.engines:
            if not request.accepts_engine(engine.engine_id):
                log.debug("Skipping engine %s, excluded by filter", engine.engine_id)
                continue
            log.debug("Running discovery for engine %s", engine.engine_id)
            root_id = UniqueId.for_engine(engine.engine_id)
            roots.append(engine.discover(request, root_id))
        return roots

    def _warn_on_unmatched_filter(self, request: DiscoveryRequest) -> None:
        if request.engine_filter is None:
            return
        known = {engine.engine_id for engine in self.engines}
        if unmatched := sorted(request.engine_filter.included - known):
            log.warning(
                "No engine matched the included engine id(s): %s",
                ", ".join(unmatched),
            )


def build_plan(roots: Sequence[TestDescriptor]) -> TestPlan:
    """Freeze descriptor trees into a plan, keeping discovery order."""
    children: dict[str, Sequence[TestIdentifier]] = {}
    for root in roots:
        for node in root.walk():
            if node.children:
                children[str(node.unique_id)] = [
                    child.to_identifier(node.unique_id) for child in node.children
                ]
    return TestPlan(
        roots=[root.to_identifier() for root in roots],
        children=children,
    )
