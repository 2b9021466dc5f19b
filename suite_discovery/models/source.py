"""Sources describing where a discovered test unit comes from."""

from typing import Annotated, Literal

from pydantic import Field

from suite_discovery.models.base import Model


class ClassSource(Model):
    """A class container, e.g. a ``unittest.TestCase`` subclass."""

    kind: Literal["class"] = "class"
    class_name: str = Field(..., description="Fully qualified class name")


class MethodSource(Model):
    """A method container, either a method on a class or a module function."""

    kind: Literal["method"] = "method"
    class_name: str = Field(..., description="Fully qualified owner name")
    method_name: str = Field(..., description="Method or function name")
    method_parameter_types: str = Field(
        default="", description="Comma-joined parameter types as reported"
    )


class FileSource(Model):
    """A plain file, used by engines that do not work with classes."""

    kind: Literal["file"] = "file"
    path: str = Field(..., description="Absolute path of the source file")


TestSource = Annotated[
    ClassSource | MethodSource | FileSource, Field(discriminator="kind")
]
