"""Base model configuration for all discovery data structures."""

from pydantic import BaseModel, ConfigDict


class Model(BaseModel):
    """Immutable base model shared by requests, plans and results."""

    model_config = ConfigDict(frozen=True)
