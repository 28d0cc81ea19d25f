"""Capability facade: boolean queries for one principal.

Only ergonomics and defaulting live here. Every answer comes from the
evaluator or the route guard; no policy is added.
"""

from typing import Any, Iterable

from access_policy.models.taxonomy import Action, Permission, PermissionContext, Role
from access_policy.policy.evaluator import (
    PolicyEvaluator,
    create_permission_context,
    get_policy_evaluator,
    get_user_permissions,
)
from access_policy.policy.routes import get_accessible_routes, has_route_access
from access_policy.schemas.principal import Principal


class Capabilities:
    """What ``principal`` may do. No principal means a guest."""

    def __init__(self, principal: Principal | None = None, evaluator: PolicyEvaluator | None = None):
        self.principal = principal
        self._evaluator = evaluator
        if principal is None:
            self.context = create_permission_context("", [Role.GUEST])
        else:
            self.context = create_permission_context(principal.id, principal.roles)

    @property
    def evaluator(self) -> PolicyEvaluator:
        return self._evaluator or get_policy_evaluator()

    @property
    def roles(self) -> list[Role]:
        return self.context.roles

    def context_for(self, **overrides: Any) -> PermissionContext:
        """Base context with ``overrides`` applied.

        Unknown field names and wrongly typed values raise ``ValidationError``.
        """
        if not overrides:
            return self.context
        return PermissionContext(**{**self.context.model_dump(), **overrides})

    # ── Permission checks ──────────────────────────
    def can(self, resource: Any, action: Any, **overrides: Any) -> bool:
        return self.evaluator.has_permission(self.context_for(**overrides), resource, action)

    def can_create(self, resource: Any, **overrides: Any) -> bool:
        return self.can(resource, Action.CREATE, **overrides)

    def can_read(self, resource: Any, **overrides: Any) -> bool:
        return self.can(resource, Action.READ, **overrides)

    def can_update(self, resource: Any, **overrides: Any) -> bool:
        return self.can(resource, Action.UPDATE, **overrides)

    def can_delete(self, resource: Any, **overrides: Any) -> bool:
        return self.can(resource, Action.DELETE, **overrides)

    def can_manage(self, resource: Any, **overrides: Any) -> bool:
        return self.can(resource, Action.MANAGE, **overrides)

    def can_access_route(self, route: str) -> bool:
        return has_route_access(self.context.user_roles, route)

    # ── Role checks ────────────────────────────────
    def is_(self, role: Any) -> bool:
        """Role membership. Named ``is_`` because ``is`` is reserved."""
        return role in self.context.user_roles

    def is_any(self, roles: Iterable[Any]) -> bool:
        return any(self.is_(role) for role in roles)

    def is_all(self, roles: Iterable[Any]) -> bool:
        return all(self.is_(role) for role in roles)

    def is_admin(self) -> bool:
        return self.is_(Role.ADMIN)

    def is_manager(self) -> bool:
        return self.is_(Role.MANAGER)

    def is_user(self) -> bool:
        return self.is_(Role.USER)

    def is_guest(self) -> bool:
        return self.is_(Role.GUEST)

    def is_authenticated(self) -> bool:
        return self.principal is not None

    def is_owner(self, owner_id: str | None) -> bool:
        if self.principal is None or not owner_id:
            return False
        return self.principal.id == owner_id

    # ── Listings ───────────────────────────────────
    def permissions(self) -> list[Permission]:
        return get_user_permissions(self.context.user_roles)

    def routes(self) -> list[str]:
        return get_accessible_routes(self.context.user_roles)
