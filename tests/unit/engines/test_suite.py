"""Tests for the suite engine."""

from collections.abc import Callable
from pathlib import Path
from unittest.mock import Mock

from suite_discovery.engines.suite import (
    SUITE_ATTRIBUTE,
    SuiteDeclaration,
    SuiteEngine,
    delegate_request,
    suite,
)
from suite_discovery.launcher import Launcher
from suite_discovery.models.identifier import UniqueId
from suite_discovery.models.request import EngineFilter, build_request
from suite_discovery.models.source import ClassSource, FileSource
from suite_discovery.testing.engines import CannedChild, StaticEngine

WriteModule = Callable[[str, str], Path]

SUITE_MODULE = """
from suite_discovery.engines.suite import suite


@suite(include_engines=["cucumber"], select_directories=["features"])
class CucumberSuite:
    pass


class PlainClass:
    pass
"""


def cucumber_engine() -> StaticEngine:
    """Create a stand-in for an engine that must run inside a suite."""
    return StaticEngine(
        id="cucumber",
        children=[
            CannedChild(
                name="login.feature",
                source=FileSource(path="/features/login.feature"),
            )
        ],
    )


def test_suite_decorator_records_declaration() -> None:
    """The decorator stores the declaration on the class."""

    @suite(include_engines=["cucumber"], select_directories=["features"])
    class Declared:
        pass

    assert vars(Declared)[SUITE_ATTRIBUTE] == SuiteDeclaration(
        include_engines=("cucumber",), select_directories=("features",)
    )


def test_discovers_suite_classes(
    artifact_dir: Path, write_module: WriteModule
) -> None:
    """Suite classes become children of the engine root."""
    write_module("suite_pkg/test_suites.py", SUITE_MODULE)
    engine = SuiteEngine(launcher_factory=lambda: Launcher(engines=[cucumber_engine()]))

    root = engine.discover(build_request(artifact_dir), UniqueId.for_engine("suite"))

    (child,) = root.children
    assert child.source == ClassSource(class_name="suite_pkg.test_suites.CucumberSuite")
    assert str(child.unique_id) == (
        "[engine:suite]/[suite:suite_pkg.test_suites.CucumberSuite]"
    )


def test_nests_delegated_engine_below_suite(
    artifact_dir: Path, write_module: WriteModule
) -> None:
    """Delegated engine trees are re-rooted below the suite class."""
    write_module("suite_nested_pkg/test_suites.py", SUITE_MODULE)
    delegate = cucumber_engine()
    engine = SuiteEngine(launcher_factory=lambda: Launcher(engines=[delegate]))

    root = engine.discover(build_request(artifact_dir), UniqueId.for_engine("suite"))

    (suite_class,) = root.children
    (delegated_root,) = suite_class.children
    assert str(delegated_root.unique_id) == (
        "[engine:suite]/[suite:suite_nested_pkg.test_suites.CucumberSuite]"
        "/[engine:cucumber]"
    )
    assert delegated_root.unique_id.engine_id == "suite"
    (feature,) = delegated_root.children
    assert feature.source == FileSource(path="/features/login.feature")

    (request,) = delegate.requests
    assert request.directories() == [artifact_dir.absolute() / "features"]


def test_does_not_create_launcher_without_suites(
    artifact_dir: Path, write_module: WriteModule
) -> None:
    """Delegated engines are only loaded when a suite is found."""
    write_module("test_no_suites.py", "class PlainClass:\n    pass\n")
    launcher_factory = Mock()

    root = SuiteEngine(launcher_factory=launcher_factory).discover(
        build_request(artifact_dir), UniqueId.for_engine("suite")
    )

    assert root.children == []
    launcher_factory.assert_not_called()


def test_delegate_request_defaults_to_classpath_root(tmp_path: Path) -> None:
    """Without declared directories the suite searches its own root."""
    request = delegate_request(tmp_path, SuiteDeclaration())

    assert request.classpath_roots() == [tmp_path.absolute()]
    assert request.directories() == [tmp_path.absolute()]
    assert request.engine_filter is None


def test_delegate_request_filters_included_engines(tmp_path: Path) -> None:
    """Declared engines become the request's filter."""
    request = delegate_request(
        tmp_path,
        SuiteDeclaration(include_engines=("cucumber",), select_directories=("a", "b")),
    )

    assert request.engine_filter == EngineFilter.include_engines(["cucumber"])
    assert request.directories() == [
        (tmp_path / "a").absolute(),
        (tmp_path / "b").absolute(),
    ]
