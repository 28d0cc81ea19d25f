"""Access-control domain models."""

from access_policy.models.conditions import (
    Condition,
    CONDITION_TYPES,
    IsOwner,
    IsTeamMember,
    IsProjectMember,
    IsPublic,
    IsAssignee,
    StatusIn,
)
from access_policy.models.taxonomy import (
    Role,
    Resource,
    Action,
    WILDCARD_ACTION,
    Permission,
    RoleDefinition,
    PermissionContext,
    coerce_role,
)

__all__ = [
    "Condition",
    "CONDITION_TYPES",
    "IsOwner",
    "IsTeamMember",
    "IsProjectMember",
    "IsPublic",
    "IsAssignee",
    "StatusIn",
    "Role",
    "Resource",
    "Action",
    "WILDCARD_ACTION",
    "Permission",
    "RoleDefinition",
    "PermissionContext",
    "coerce_role",
]
