"""Models for collected tests handed back to the host test runner."""

from collections.abc import Sequence
from typing import Literal

from pydantic import Field

from suite_discovery.models.base import Model


class Fingerprint(Model):
    """Marker telling the host which adapter produced a test."""

    annotation_name: str
    is_module: bool = False


class Selector(Model):
    """Base of the selector values the host uses to re-select a test."""


class SuiteSelector(Selector):
    """Selects a whole suite (class or container) for execution."""

    kind: Literal["suite"] = "suite"


ENGINE_FINGERPRINT = Fingerprint(annotation_name="suite_discovery.Test")


class Item(Model):
    """A single discovered test, ready to be scheduled by the host."""

    fully_qualified_name: str = Field(..., description="Name of the test unit")
    fingerprint: Fingerprint = ENGINE_FINGERPRINT
    selectors: Sequence[SuiteSelector] = Field(
        default_factory=lambda: (SuiteSelector(),)
    )
    explicit: bool = Field(
        default=False, description="Whether the test was requested explicitly"
    )


class Result(Model):
    """Ordered collection of tests found by one discovery run."""

    items: Sequence[Item] = Field(default_factory=tuple)

    @classmethod
    def empty(cls) -> "Result":
        """Return the shared empty result."""
        return EMPTY_RESULT


EMPTY_RESULT = Result()
