"""Permission introspection endpoints used by the dashboard to gate rendering."""

from fastapi import APIRouter, Depends, HTTPException, status

from access_policy.core.deps import get_capabilities
from access_policy.policy.capabilities import Capabilities
from access_policy.policy.registry import get_all_roles, get_role_by_name
from access_policy.schemas.permissions import (
    MyPermissionsResponse,
    PermissionCheckRequest,
    PermissionCheckResponse,
    RoleResponse,
)

router = APIRouter(prefix="/permissions", tags=["permissions"])


@router.get("/roles", response_model=list[RoleResponse])
async def list_roles():
    """All roles with their grant rules."""
    return [RoleResponse.model_validate(entry) for entry in get_all_roles()]


@router.get("/roles/{name}", response_model=RoleResponse)
async def get_role(name: str):
    entry = get_role_by_name(name)
    if entry is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Unknown role '{name}'",
        )
    return RoleResponse.model_validate(entry)


@router.get("/me", response_model=MyPermissionsResponse)
async def my_permissions(caps: Capabilities = Depends(get_capabilities)):
    """Grant rules and reachable routes of the current principal."""
    return MyPermissionsResponse(
        user_id=caps.principal.id if caps.principal else None,
        roles=caps.roles,
        authenticated=caps.is_authenticated(),
        permissions=caps.permissions(),
        routes=caps.routes(),
    )


@router.post("/check", response_model=PermissionCheckResponse)
async def check_permission(body: PermissionCheckRequest, caps: Capabilities = Depends(get_capabilities)):
    """Answer one (resource, action) question for the current principal."""
    context = caps.context_for(**body.context_overrides())
    if body.explain:
        explanation = caps.evaluator.explain_permission(context, body.resource, body.action)
        return PermissionCheckResponse(allowed=explanation.allowed, explanation=explanation)
    return PermissionCheckResponse(allowed=caps.evaluator.has_permission(context, body.resource, body.action))
