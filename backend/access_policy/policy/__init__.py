"""
Policy package

- Registry: static role -> grant rules
- Evaluator: has_permission and friends, sync and async
- Routes: navigation-level guard
- Capabilities: per-principal boolean queries
"""

from .registry import (
    ROLE_REGISTRY,
    get_all_roles,
    get_permissions_for_role,
    get_role_by_name,
)
from .evaluator import (
    AsyncPolicyEvaluator,
    Decision,
    PermissionExplanation,
    PolicyEvaluator,
    create_permission_context,
    get_policy_evaluator,
    get_user_permissions,
    has_permission,
    has_resource_permission,
    set_policy_evaluator,
)
from .predicates import (
    DenyAllMembership,
    DenyAllVisibility,
    StaticMembership,
    StaticVisibility,
)
from .routes import PUBLIC_ROUTES, get_accessible_routes, has_route_access
from .capabilities import Capabilities

__all__ = [
    "ROLE_REGISTRY",
    "get_all_roles",
    "get_permissions_for_role",
    "get_role_by_name",
    "AsyncPolicyEvaluator",
    "Decision",
    "PermissionExplanation",
    "PolicyEvaluator",
    "create_permission_context",
    "get_policy_evaluator",
    "get_user_permissions",
    "has_permission",
    "has_resource_permission",
    "set_policy_evaluator",
    "DenyAllMembership",
    "DenyAllVisibility",
    "StaticMembership",
    "StaticVisibility",
    "PUBLIC_ROUTES",
    "get_accessible_routes",
    "has_route_access",
    "Capabilities",
]
