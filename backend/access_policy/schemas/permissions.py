"""Permission introspection request/response schemas."""

from typing import Any

from pydantic import BaseModel, Field

from access_policy.models.taxonomy import Permission, Role
from access_policy.policy.evaluator import PermissionExplanation


# ── Roles ──────────────────────────────────────────
class RoleResponse(BaseModel):
    name: Role
    display_name: str
    description: str
    permissions: list[Permission]

    model_config = {"from_attributes": True}


# ── Current principal ──────────────────────────────
class MyPermissionsResponse(BaseModel):
    user_id: str | None
    roles: list[Role]
    authenticated: bool
    permissions: list[Permission]
    routes: list[str]


# ── Single check ───────────────────────────────────
class PermissionCheckRequest(BaseModel):
    """One (resource, action) question about a resource instance.

    Resource and action are free strings; names outside the vocabulary are
    denied rather than rejected.
    """
    resource: str = Field(..., min_length=1)
    action: str = Field(..., min_length=1)
    resource_id: str | None = None
    resource_owner_id: str | None = None
    project_id: str | None = None
    team_id: str | None = None
    data: dict[str, Any] | None = None
    explain: bool = False

    def context_overrides(self) -> dict[str, Any]:
        overrides = self.model_dump(
            include={"resource_id", "resource_owner_id", "project_id", "team_id", "data"},
            exclude_none=True,
        )
        overrides["resource_type"] = self.resource
        return overrides


class PermissionCheckResponse(BaseModel):
    allowed: bool
    explanation: PermissionExplanation | None = None


class RouteAccessResponse(BaseModel):
    path: str
    allowed: bool
