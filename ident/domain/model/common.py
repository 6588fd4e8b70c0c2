"""Base model for domain entities."""

from pydantic import BaseModel, ConfigDict


class DomainModel(BaseModel):
    """Base class for immutable domain entities."""

    model_config = ConfigDict(
        frozen=True,
        arbitrary_types_allowed=True,
    )
