"""Engine discovering ``unittest.TestCase`` classes."""

import logging
import unittest
from collections.abc import Iterator
from types import ModuleType

from suite_discovery.engines.base import DiscoveryEngine, TestDescriptor
from suite_discovery.engines.scanning import defined_in, load_test_modules
from suite_discovery.models.identifier import TestType, UniqueId
from suite_discovery.models.request import DiscoveryRequest
from suite_discovery.models.source import ClassSource, MethodSource

log = logging.getLogger(__name__)


class TestCaseEngine(DiscoveryEngine):
    """Finds test case classes and their test methods.

    Each class becomes a container below the engine root, each test method a
    test below its class. Classes without test methods are left out.
    """

    __test__ = False

    def __init__(self) -> None:
        self._loader = unittest.TestLoader()

    @property
    def engine_id(self) -> str:
        return "unittest"

    def discover(
        self, request: DiscoveryRequest, unique_id: UniqueId
    ) -> TestDescriptor:
        root = self.create_root(unique_id)
        for classpath_root in request.classpath_roots():
            for module in load_test_modules(classpath_root):
                for test_case in _test_cases(module):
                    self._add_test_case(root, test_case)
        log.debug("Found %d test case class(es)", len(root.children))
        return root

    def _add_test_case(
        self, root: TestDescriptor, test_case: type[unittest.TestCase]
    ) -> None:
        method_names = self._loader.getTestCaseNames(test_case)
        if not method_names:
            return

        class_name = f"{test_case.__module__}.{test_case.__qualname__}"
        container = root.add_child(
            TestDescriptor(
                unique_id=root.unique_id.append("class", class_name),
                display_name=test_case.__qualname__,
                legacy_reporting_name=class_name,
                source=ClassSource(class_name=class_name),
            )
        )
        for method_name in method_names:
            container.add_child(
                TestDescriptor(
                    unique_id=container.unique_id.append("method", f"{method_name}()"),
                    display_name=method_name,
                    type=TestType.TEST,
                    source=MethodSource(class_name=class_name, method_name=method_name),
                )
            )


def _test_cases(module: ModuleType) -> Iterator[type[unittest.TestCase]]:
    for _, value in defined_in(module):
        if isinstance(value, type) and issubclass(value, unittest.TestCase):
            yield value
