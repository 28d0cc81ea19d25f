"""Principal schemas."""

from pydantic import BaseModel, Field

from access_policy.models.taxonomy import Role


class Principal(BaseModel):
    """The acting user as supplied by the upstream session provider."""
    id: str = Field(..., min_length=1)
    roles: list[Role] = Field(default_factory=list)
