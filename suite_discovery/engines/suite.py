"""Engine running other engines on behalf of declared suite classes.

Engines that must not run on their own (see
``suite_discovery.collector.INCOMPATIBLE_ENGINES``) are routed through a
suite instead::

    @suite(include_engines=["cucumber"], select_directories=["features"])
    class CucumberSuite:
        pass
"""

import logging
from collections.abc import Callable, Iterator, Sequence
from dataclasses import dataclass, field
from pathlib import Path
from types import ModuleType
from typing import TypeVar

from suite_discovery.engines.base import DiscoveryEngine, TestDescriptor
from suite_discovery.engines.scanning import defined_in, load_test_modules
from suite_discovery.launcher import Launcher
from suite_discovery.models.identifier import UniqueId
from suite_discovery.models.request import (
    DiscoveryRequest,
    EngineFilter,
    select_classpath_roots,
    select_directory,
)
from suite_discovery.models.source import ClassSource

log = logging.getLogger(__name__)

C = TypeVar("C", bound=type)

SUITE_ENGINE_ID = "suite"
SUITE_ATTRIBUTE = "__suite_declaration__"


@dataclass(frozen=True, kw_only=True)
class SuiteDeclaration:
    """What a suite class asks the delegated engines to discover."""

    include_engines: Sequence[str] = ()
    select_directories: Sequence[str] = ()


def suite(
    *,
    include_engines: Sequence[str] = (),
    select_directories: Sequence[str] = (),
) -> Callable[[C], C]:
    """Declare a class as a suite.

    Args:
        include_engines: Engines the suite delegates to; empty means all
            engines except the suite engine itself
        select_directories: Directories to search, relative to the classpath
            root the suite class was found in; empty means that root

    Returns:
        Class decorator

    """
    declaration = SuiteDeclaration(
        include_engines=tuple(include_engines),
        select_directories=tuple(select_directories),
    )

    def decorate(cls: C) -> C:
        setattr(cls, SUITE_ATTRIBUTE, declaration)
        return cls

    return decorate


def _suite_classes(module: ModuleType) -> Iterator[type]:
    for _, value in defined_in(module):
        if isinstance(value, type) and SUITE_ATTRIBUTE in vars(value):
            yield value


def _reparent(descriptor: TestDescriptor, prefix: UniqueId) -> TestDescriptor:
    unique_id = UniqueId(segments=(*prefix.segments, *descriptor.unique_id.segments))
    return TestDescriptor(
        unique_id=unique_id,
        display_name=descriptor.display_name,
        legacy_reporting_name=descriptor.legacy_reporting_name,
        type=descriptor.type,
        source=descriptor.source,
        children=[_reparent(child, prefix) for child in descriptor.children],
    )


@dataclass(kw_only=True)
class SuiteEngine(DiscoveryEngine):
    """Finds suite classes and nests the delegated engines' trees below them."""

    launcher_factory: Callable[[], Launcher] = field(
        default=lambda: Launcher.create(exclude=(SUITE_ENGINE_ID,))
    )

    @property
    def engine_id(self) -> str:
        return SUITE_ENGINE_ID

    def discover(
        self, request: DiscoveryRequest, unique_id: UniqueId
    ) -> TestDescriptor:
        root = self.create_root(unique_id)
        launcher: Launcher | None = None
        for classpath_root in request.classpath_roots():
            for module in load_test_modules(classpath_root):
                for suite_class in _suite_classes(module):
                    if launcher is None:
                        launcher = self.launcher_factory()
                    descriptor = self._describe_suite(
                        root, classpath_root, suite_class, launcher
                    )
                    root.add_child(descriptor)
        log.debug("Found %d suite(s)", len(root.children))
        return root

    def _describe_suite(
        self,
        root: TestDescriptor,
        classpath_root: Path,
        suite_class: type,
        launcher: Launcher,
    ) -> TestDescriptor:
        class_name = f"{suite_class.__module__}.{suite_class.__qualname__}"
        declaration: SuiteDeclaration = vars(suite_class)[SUITE_ATTRIBUTE]
        descriptor = TestDescriptor(
            unique_id=root.unique_id.append("suite", class_name),
            display_name=suite_class.__qualname__,
            legacy_reporting_name=class_name,
            source=ClassSource(class_name=class_name),
        )

        log.debug(
            "Running suite %s with engines %s",
            class_name,
            list(declaration.include_engines) or "all",
        )
        for delegated_root in launcher.discover_roots(
            delegate_request(classpath_root, declaration)
        ):
            descriptor.add_child(_reparent(delegated_root, descriptor.unique_id))
        return descriptor


def delegate_request(
    classpath_root: Path, declaration: SuiteDeclaration
) -> DiscoveryRequest:
    """Build the request a suite hands to its delegated engines."""
    directories = [classpath_root / d for d in declaration.select_directories] or [
        classpath_root
    ]
    engine_filter = (
        EngineFilter.include_engines(declaration.include_engines)
        if declaration.include_engines
        else None
    )
    return DiscoveryRequest(
        selectors=[
            *select_classpath_roots(directories),
            *(select_directory(d) for d in directories),
        ],
        engine_filter=engine_filter,
    )
