from access_policy.schemas.principal import Principal
from access_policy.schemas.permissions import (
    RoleResponse, MyPermissionsResponse, PermissionCheckRequest,
    PermissionCheckResponse, RouteAccessResponse,
)

__all__ = [
    "Principal",
    "RoleResponse", "MyPermissionsResponse", "PermissionCheckRequest",
    "PermissionCheckResponse", "RouteAccessResponse",
]
