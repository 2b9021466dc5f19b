"""Engine discovering module-level test functions."""

import inspect
import logging
from collections.abc import Callable

from suite_discovery.engines.base import DiscoveryEngine, TestDescriptor
from suite_discovery.engines.scanning import defined_in, load_test_modules
from suite_discovery.models.identifier import TestType, UniqueId
from suite_discovery.models.request import DiscoveryRequest
from suite_discovery.models.source import MethodSource

log = logging.getLogger(__name__)

TEST_PREFIX = "test"


def render_parameter_types(function: Callable[..., object]) -> str:
    """Render a function's parameter annotations as a comma-joined list.

    Classes are rendered by qualified name (without the ``builtins`` module),
    other annotations by their string form, missing ones as ``object``.
    """
    rendered: list[str] = []
    for parameter in inspect.signature(function).parameters.values():
        annotation = parameter.annotation
        if annotation is inspect.Parameter.empty:
            rendered.append("object")
        elif isinstance(annotation, type):
            if annotation.__module__ == "builtins":
                rendered.append(annotation.__qualname__)
            else:
                rendered.append(f"{annotation.__module__}.{annotation.__qualname__}")
        else:
            rendered.append(str(annotation))
    return ", ".join(rendered)


class FunctionEngine(DiscoveryEngine):
    """Finds ``test*`` functions defined at module level.

    Every function is reported directly below the engine root, with the
    module standing in for the owning class.
    """

    @property
    def engine_id(self) -> str:
        return "functions"

    def discover(
        self, request: DiscoveryRequest, unique_id: UniqueId
    ) -> TestDescriptor:
        root = self.create_root(unique_id)
        for classpath_root in request.classpath_roots():
            for module in load_test_modules(classpath_root):
                for name, value in defined_in(module):
                    if name.startswith(TEST_PREFIX) and inspect.isfunction(value):
                        root.add_child(self._describe(root, module.__name__, value))
        log.debug("Found %d test function(s)", len(root.children))
        return root

    def _describe(
        self,
        root: TestDescriptor,
        module_name: str,
        function: Callable[..., object],
    ) -> TestDescriptor:
        parameter_types = render_parameter_types(function)
        method_name = function.__name__
        return TestDescriptor(
            unique_id=root.unique_id.append(
                "function", f"{module_name}#{method_name}({parameter_types})"
            ),
            display_name=f"{method_name}({parameter_types})",
            legacy_reporting_name=f"{module_name}.{method_name}",
            type=TestType.TEST,
            source=MethodSource(
                class_name=module_name,
                method_name=method_name,
                method_parameter_types=parameter_types,
            ),
        )
