"""
Policy evaluator

Decides whether a principal may perform an action on a resource.

Precedence:
1. Admin held: allow, before any rule matching
2. No roles held: deny
3. Every held role's rules are scanned (roles are OR-ed)
4. A rule matches on equal resource and equal action, or a MANAGE rule
5. Unconditioned match allows at once; a conditioned match allows only when
   all its conditions hold, otherwise the scan goes on
6. Nothing allowed: deny

Evaluation never raises for unknown roles, resources or actions; they simply
match nothing. ``AsyncPolicyEvaluator`` runs the same scan with every
provider lookup awaited.
"""

import enum
import logging
from typing import Any, Iterable, Iterator

from pydantic import BaseModel

from access_policy.core.config import settings
from access_policy.models.taxonomy import (
    Permission,
    PermissionContext,
    Role,
)
from access_policy.policy.predicates import (
    AsyncMembershipProvider,
    AsyncVisibilityProvider,
    DenyAllMembership,
    DenyAllVisibility,
    MembershipProvider,
    VisibilityProvider,
    acheck_condition,
    check_condition,
)
from access_policy.policy.registry import iter_grants

logger = logging.getLogger(__name__)


class Decision(str, enum.Enum):
    ADMIN_BYPASS = "admin_bypass"
    NO_ROLES = "no_roles"
    GRANTED = "granted"
    CONDITIONS_FAILED = "conditions_failed"
    NO_MATCHING_PERMISSION = "no_matching_permission"


class PermissionExplanation(BaseModel):
    """Why a check was allowed or denied."""
    allowed: bool
    decision: Decision
    resource: str
    action: str
    roles: list[str]
    matched_role: Role | None = None
    matched_permission: Permission | None = None
    failed_conditions: list[str] = []


def _label(value: Any) -> str:
    return value.value if isinstance(value, enum.Enum) else str(value)


def _matching_rules(
    context: PermissionContext, resource: Any, action: Any
) -> Iterator[tuple[Role, Permission]]:
    for role, permission in iter_grants(context.user_roles):
        if permission.matches(resource, action):
            yield role, permission


class _Verdict:
    __slots__ = ("decision", "role", "permission", "failed")

    def __init__(self, decision: Decision, role: Role | None = None,
                 permission: Permission | None = None, failed: list[str] | None = None):
        self.decision = decision
        self.role = role
        self.permission = permission
        self.failed = failed or []

    @property
    def allowed(self) -> bool:
        return self.decision in (Decision.ADMIN_BYPASS, Decision.GRANTED)


def _with_resource_type(context: PermissionContext, resource: Any) -> PermissionContext:
    # Visibility lookups need a type; default it to the resource being checked
    if context.resource_type is None and resource is not None:
        return context.model_copy(update={"resource_type": resource})
    return context


def _precheck(context: PermissionContext) -> _Verdict | None:
    if Role.ADMIN in context.roles:
        return _Verdict(Decision.ADMIN_BYPASS, role=Role.ADMIN)
    if not context.user_roles:
        return _Verdict(Decision.NO_ROLES)
    return None


class _EvaluatorBase:
    def _finish(
        self, context: PermissionContext, resource: Any, action: Any, verdict: _Verdict
    ) -> PermissionExplanation:
        explanation = PermissionExplanation(
            allowed=verdict.allowed,
            decision=verdict.decision,
            resource=_label(resource),
            action=_label(action),
            roles=[_label(r) for r in context.user_roles],
            matched_role=verdict.role,
            matched_permission=verdict.permission,
            failed_conditions=verdict.failed,
        )
        if settings.PERMS_EXPLAIN:
            logger.debug(
                f"{explanation.decision.value}: user={context.user_id or '-'} "
                f"roles={explanation.roles} {explanation.action} {explanation.resource}"
            )
        return explanation


class PolicyEvaluator(_EvaluatorBase):
    """Synchronous evaluator over the static role registry."""

    def __init__(
        self,
        membership: MembershipProvider | None = None,
        visibility: VisibilityProvider | None = None,
    ):
        self.membership = membership or DenyAllMembership()
        self.visibility = visibility or DenyAllVisibility()

    def _decide(self, context: PermissionContext, resource: Any, action: Any) -> _Verdict:
        verdict = _precheck(context)
        if verdict is not None:
            return verdict
        context = _with_resource_type(context, resource)

        failed: list[str] = []
        for role, permission in _matching_rules(context, resource, action):
            if not permission.conditions:
                return _Verdict(Decision.GRANTED, role, permission)
            failing = next(
                (c for c in permission.conditions
                 if not check_condition(c, context, self.membership, self.visibility)),
                None,
            )
            if failing is None:
                return _Verdict(Decision.GRANTED, role, permission)
            failed.append(failing.kind)

        if failed:
            return _Verdict(Decision.CONDITIONS_FAILED, failed=failed)
        return _Verdict(Decision.NO_MATCHING_PERMISSION)

    def has_permission(self, context: PermissionContext, resource: Any, action: Any) -> bool:
        verdict = self._decide(context, resource, action)
        if settings.PERMS_EXPLAIN:
            self._finish(context, resource, action, verdict)
        return verdict.allowed

    def explain_permission(
        self, context: PermissionContext, resource: Any, action: Any
    ) -> PermissionExplanation:
        return self._finish(context, resource, action, self._decide(context, resource, action))


class AsyncPolicyEvaluator(_EvaluatorBase):
    """Evaluator for awaitable providers. Same rules; every lookup is awaited."""

    def __init__(
        self,
        membership: AsyncMembershipProvider | MembershipProvider | None = None,
        visibility: AsyncVisibilityProvider | VisibilityProvider | None = None,
    ):
        self.membership = membership or DenyAllMembership()
        self.visibility = visibility or DenyAllVisibility()

    async def _all_hold(self, permission: Permission, context: PermissionContext) -> str | None:
        for condition in permission.conditions:
            if not await acheck_condition(condition, context, self.membership, self.visibility):
                return condition.kind
        return None

    async def _decide(self, context: PermissionContext, resource: Any, action: Any) -> _Verdict:
        verdict = _precheck(context)
        if verdict is not None:
            return verdict
        context = _with_resource_type(context, resource)

        failed: list[str] = []
        for role, permission in _matching_rules(context, resource, action):
            failing = await self._all_hold(permission, context)
            if failing is None:
                return _Verdict(Decision.GRANTED, role, permission)
            failed.append(failing)

        if failed:
            return _Verdict(Decision.CONDITIONS_FAILED, failed=failed)
        return _Verdict(Decision.NO_MATCHING_PERMISSION)

    async def has_permission(self, context: PermissionContext, resource: Any, action: Any) -> bool:
        verdict = await self._decide(context, resource, action)
        if settings.PERMS_EXPLAIN:
            self._finish(context, resource, action, verdict)
        return verdict.allowed

    async def explain_permission(
        self, context: PermissionContext, resource: Any, action: Any
    ) -> PermissionExplanation:
        return self._finish(context, resource, action, await self._decide(context, resource, action))


# Global evaluator instance
_policy_evaluator: PolicyEvaluator | None = None


def get_policy_evaluator() -> PolicyEvaluator:
    """Get or initialize the process-wide evaluator (deny-all providers)."""
    global _policy_evaluator

    if _policy_evaluator is None:
        _policy_evaluator = PolicyEvaluator()

    return _policy_evaluator


def set_policy_evaluator(evaluator: PolicyEvaluator | None) -> PolicyEvaluator | None:
    """Install ``evaluator`` as the process-wide one; returns the previous one."""
    global _policy_evaluator

    previous = _policy_evaluator
    _policy_evaluator = evaluator
    return previous


# ── Module-level API ───────────────────────────────
def create_permission_context(user_id: str, roles: Iterable[Any], **overrides: Any) -> PermissionContext:
    return PermissionContext(user_id=user_id, user_roles=tuple(roles), **overrides)


def has_permission(context: PermissionContext, resource: Any, action: Any) -> bool:
    return get_policy_evaluator().has_permission(context, resource, action)


def has_resource_permission(
    roles: Iterable[Any],
    resource: Any,
    action: Any,
    resource_id: str,
    resource_owner_id: str,
    context: dict[str, Any] | None = None,
) -> bool:
    """Check ``action`` on one resource instance with known id and owner."""
    fields = dict(context or {})
    fields.update(
        user_roles=tuple(roles),
        resource_id=resource_id,
        resource_owner_id=resource_owner_id,
        resource_type=resource,
    )
    return has_permission(PermissionContext(**fields), resource, action)


def get_user_permissions(roles: Iterable[Any]) -> list[Permission]:
    """Flattened grant rules of all held roles. May contain duplicates."""
    return [permission for _, permission in iter_grants(roles)]
