"""Condition predicates and the lookups they call out to.

Ownership, assignee and status checks only read the context. Membership and
visibility need outside state, so they go through providers injected into the
evaluator. The defaults deny; a provider that raises counts as ``False``.
"""

import inspect
import logging
from typing import Any, Callable, Iterable, Protocol

from access_policy.models.conditions import (
    IsAssignee,
    IsOwner,
    IsProjectMember,
    IsPublic,
    IsTeamMember,
    StatusIn,
)
from access_policy.models.taxonomy import PermissionContext

logger = logging.getLogger(__name__)


# ── Providers ──────────────────────────────────────
class MembershipProvider(Protocol):
    def is_team_member(self, user_id: str, team_id: str) -> bool: ...

    def is_project_member(self, user_id: str, project_id: str) -> bool: ...


class VisibilityProvider(Protocol):
    def is_public(self, resource_type: Any, resource_id: str) -> bool: ...


class AsyncMembershipProvider(Protocol):
    async def is_team_member(self, user_id: str, team_id: str) -> bool: ...

    async def is_project_member(self, user_id: str, project_id: str) -> bool: ...


class AsyncVisibilityProvider(Protocol):
    async def is_public(self, resource_type: Any, resource_id: str) -> bool: ...


class DenyAllMembership:
    """Nobody is a member of anything until a real source is wired in."""

    def is_team_member(self, user_id: str, team_id: str) -> bool:
        return False

    def is_project_member(self, user_id: str, project_id: str) -> bool:
        return False


class DenyAllVisibility:
    """Nothing is public until a real source is wired in."""

    def is_public(self, resource_type: Any, resource_id: str) -> bool:
        return False


class StaticMembership:
    """In-memory membership table: ``{team_id: {user_id, ...}}`` per scope."""

    def __init__(
        self,
        teams: dict[str, Iterable[str]] | None = None,
        projects: dict[str, Iterable[str]] | None = None,
    ):
        self.teams = {k: frozenset(v) for k, v in (teams or {}).items()}
        self.projects = {k: frozenset(v) for k, v in (projects or {}).items()}

    def is_team_member(self, user_id: str, team_id: str) -> bool:
        return user_id in self.teams.get(team_id, frozenset())

    def is_project_member(self, user_id: str, project_id: str) -> bool:
        return user_id in self.projects.get(project_id, frozenset())


def _type_name(resource_type: Any) -> str | None:
    return getattr(resource_type, "value", resource_type)


class StaticVisibility:
    """In-memory set of public ``(resource_type, resource_id)`` pairs.

    A ``None`` resource type in the table matches any type.
    """

    def __init__(self, public: Iterable[tuple[Any, str]] = ()):
        self.public = frozenset((_type_name(t), i) for t, i in public)

    def is_public(self, resource_type: Any, resource_id: str) -> bool:
        return (
            (_type_name(resource_type), resource_id) in self.public
            or (None, resource_id) in self.public
        )


# ── Lookup guards ──────────────────────────────────
def _guarded(label: str, lookup: Callable[..., Any], *args: Any) -> bool:
    try:
        result = lookup(*args)
    except Exception as e:
        logger.warning(f"{label} lookup failed, treating as denied: {e}")
        return False
    if inspect.isawaitable(result):
        # An async provider needs AsyncPolicyEvaluator; never read a pending result as granted
        if inspect.iscoroutine(result):
            result.close()
        logger.warning(f"{label} lookup returned an awaitable to a synchronous evaluator, treating as denied")
        return False
    return bool(result)


async def _guarded_async(label: str, lookup: Callable[..., Any], *args: Any) -> bool:
    # Plain (non-async) providers are accepted too
    try:
        result = lookup(*args)
        if inspect.isawaitable(result):
            result = await result
        return bool(result)
    except Exception as e:
        logger.warning(f"{label} lookup failed, treating as denied: {e}")
        return False


# ── Context-only predicates ────────────────────────
def _payload(context: PermissionContext, key: str) -> Any:
    if not context.data:
        return None
    return context.data.get(key)


def is_owner(condition: IsOwner, context: PermissionContext) -> bool:
    return bool(context.resource_owner_id) and context.resource_owner_id == context.user_id


def is_assignee(condition: IsAssignee, context: PermissionContext) -> bool:
    assignee = _payload(context, "assignee")
    return bool(assignee) and bool(context.user_id) and assignee == context.user_id


def status_in(condition: StatusIn, context: PermissionContext) -> bool:
    status = _payload(context, "status")
    return isinstance(status, str) and status in condition.statuses


_LOCAL_PREDICATES: dict[type, Callable[[Any, PermissionContext], bool]] = {
    IsOwner: is_owner,
    IsAssignee: is_assignee,
    StatusIn: status_in,
}

_LOOKUP_TYPES = (IsTeamMember, IsProjectMember, IsPublic)


def handled_condition_types() -> set[type]:
    return set(_LOCAL_PREDICATES) | set(_LOOKUP_TYPES)


def _lookup_args(condition: Any, context: PermissionContext) -> tuple[str, tuple] | None:
    """Which lookup a provider-backed condition needs, or None if context lacks the key."""
    if isinstance(condition, IsTeamMember):
        if not context.team_id or not context.user_id:
            return None
        return "team", (context.user_id, context.team_id)
    if isinstance(condition, IsProjectMember):
        if not context.project_id or not context.user_id:
            return None
        return "project", (context.user_id, context.project_id)
    if isinstance(condition, IsPublic):
        if not context.resource_id:
            return None
        return "visibility", (context.resource_type, context.resource_id)
    raise TypeError(f"Not a lookup condition: {condition!r}")


def check_condition(
    condition: Any,
    context: PermissionContext,
    membership: MembershipProvider,
    visibility: VisibilityProvider,
) -> bool:
    """Evaluate one condition synchronously."""
    local = _LOCAL_PREDICATES.get(type(condition))
    if local is not None:
        return local(condition, context)
    if not isinstance(condition, _LOOKUP_TYPES):
        logger.warning(f"Unknown condition {condition!r}, denying")
        return False

    request = _lookup_args(condition, context)
    if request is None:
        return False
    scope, args = request
    if scope == "team":
        return _guarded("team membership", membership.is_team_member, *args)
    if scope == "project":
        return _guarded("project membership", membership.is_project_member, *args)
    return _guarded("visibility", visibility.is_public, *args)


async def acheck_condition(
    condition: Any,
    context: PermissionContext,
    membership: AsyncMembershipProvider,
    visibility: AsyncVisibilityProvider,
) -> bool:
    """Evaluate one condition, awaiting provider lookups."""
    local = _LOCAL_PREDICATES.get(type(condition))
    if local is not None:
        return local(condition, context)
    if not isinstance(condition, _LOOKUP_TYPES):
        logger.warning(f"Unknown condition {condition!r}, denying")
        return False

    request = _lookup_args(condition, context)
    if request is None:
        return False
    scope, args = request
    if scope == "team":
        return await _guarded_async("team membership", membership.is_team_member, *args)
    if scope == "project":
        return await _guarded_async("project membership", membership.is_project_member, *args)
    return await _guarded_async("visibility", visibility.is_public, *args)
