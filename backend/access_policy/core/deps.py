"""Dependency injection: principal extraction and RBAC enforcement."""

import logging
from typing import Any

from fastapi import Depends, Header, HTTPException, status

from access_policy.models.taxonomy import Role, coerce_role
from access_policy.policy.capabilities import Capabilities
from access_policy.schemas.principal import Principal

logger = logging.getLogger(__name__)


def parse_roles(raw: str | None) -> list[Role]:
    """Comma separated role names; unknown names are dropped, order kept."""
    roles: list[Role] = []
    for name in (raw or "").split(","):
        role = coerce_role(name.strip().lower())
        if role is not None and role not in roles:
            roles.append(role)
    return roles


def principal_from_headers(user_id: str | None, roles: str | None) -> Principal | None:
    """Build the principal set by the upstream auth proxy, or None when anonymous."""
    if not user_id or not user_id.strip():
        return None
    parsed = parse_roles(roles)
    if not parsed:
        logger.debug(f"No known role for user {user_id.strip()}, defaulting to guest")
        parsed = [Role.GUEST]
    return Principal(id=user_id.strip(), roles=parsed)


def get_current_principal(
    x_actor_user_id: str | None = Header(
        default=None,
        alias="X-Actor-User-Id",
        description="Acting user id, set by the session provider",
    ),
    x_roles: str | None = Header(
        default=None,
        alias="X-Roles",
        description="Comma separated roles of the acting user",
        examples=["manager", "user,manager"],
    ),
) -> Principal | None:
    return principal_from_headers(x_actor_user_id, x_roles)


def get_capabilities(principal: Principal | None = Depends(get_current_principal)) -> Capabilities:
    return Capabilities(principal)


def _denied(caps: Capabilities, detail: str) -> HTTPException:
    if not caps.is_authenticated():
        return HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authentication required",
        )
    return HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=detail)


def require_permission(resource: Any, action: Any):
    """Dependency factory: the principal must be allowed ``action`` on ``resource``."""
    resource_name = getattr(resource, "value", resource)
    action_name = getattr(action, "value", action)

    async def checker(caps: Capabilities = Depends(get_capabilities)) -> Capabilities:
        if not caps.can(resource, action):
            logger.warning(
                f"Permission denied: user={caps.context.user_id or 'anonymous'} "
                f"roles={[r.value for r in caps.roles]} attempted {action_name}:{resource_name}"
            )
            raise _denied(caps, f"Missing permission: {action_name}:{resource_name}")
        return caps

    return checker


def require_role(*allowed_roles: Any):
    """Dependency factory: the principal must hold one of the allowed roles."""
    names = [getattr(r, "value", r) for r in allowed_roles]

    async def checker(caps: Capabilities = Depends(get_capabilities)) -> Capabilities:
        if not caps.is_any(allowed_roles):
            raise _denied(caps, f"Role not allowed. Required: {', '.join(names)}")
        return caps

    return checker
