"""Role → grant rules registry.

RBAC matrix (unconditional grants; ``*`` = conditional, see rows below):
┌──────────────┬───────┬──────────────────────────────┬──────────────────────────┬──────────────┐
│ Resource     │ Admin │ Manager                      │ User                     │ Guest        │
├──────────────┼───────┼──────────────────────────────┼──────────────────────────┼──────────────┤
│ dashboard    │  all  │ read view                    │ read view                │ read view    │
│ project      │  all  │ manage                       │ read view list search    │ read*        │
│              │       │                              │ update* comment*         │              │
│ inventory    │  all  │ manage                       │ read view list search    │              │
│              │       │                              │ update*                  │              │
│ material     │  all  │ manage                       │ read view list search    │              │
│              │       │                              │ update*                  │              │
│ supplier     │  all  │ manage                       │ read view list search    │              │
│ team         │  all  │ manage                       │ read view list search    │              │
│ task         │  all  │ manage                       │ read view list search    │              │
│              │       │                              │ update* comment* delete* │              │
│ report       │  all  │ create read update delete    │ read view list search    │ read*        │
│              │       │ export print share view ...  │                          │              │
│ user         │  all  │ read view list search        │                          │              │
│ notification │  all  │ read update delete view list │ read update view list    │ read view    │
│ analytics    │  all  │ read view                    │                          │              │
│ calendar     │  all  │ read update view             │ read view                │              │
│ document     │  all  │ create read update delete    │ read download view list  │              │
│              │       │ upload download share ...    │ search upload*           │              │
│ budget       │  all  │ read update view approve*    │                          │              │
│ schedule     │  all  │ read update view             │                          │              │
│ forecast     │  all  │ read view                    │                          │              │
│ role/setting │  all  │                              │                          │              │
└──────────────┴───────┴──────────────────────────────┴──────────────────────────┴──────────────┘

Admin is not hand-enumerated: its list is the full Resource × Action product,
so a newly added resource or action is covered without touching this file.
"""

from itertools import product
from types import MappingProxyType
from typing import Any, Iterable, Iterator, Mapping

from access_policy.models.conditions import (
    Condition,
    IS_ASSIGNEE,
    IS_OWNER,
    IS_PROJECT_MEMBER,
    IS_PUBLIC,
    status_in,
)
from access_policy.models.taxonomy import (
    Action,
    Permission,
    Resource,
    Role,
    RoleDefinition,
    coerce_role,
)

# Read-side verbs every listing screen needs
BROWSE = (Action.READ, Action.VIEW, Action.LIST, Action.SEARCH)


def _grants(resource: Resource, *actions: Action, when: tuple[Condition, ...] = ()) -> list[Permission]:
    return [Permission(resource=resource, action=a, conditions=when) for a in actions]


def all_grants() -> tuple[Permission, ...]:
    """Every unconditional Resource × Action pair."""
    return tuple(
        Permission(resource=resource, action=action)
        for resource, action in product(Resource, Action)
    )


_ADMIN = RoleDefinition(
    name=Role.ADMIN,
    display_name="Administrator",
    description="Full access to every part of the dashboard",
    permissions=all_grants(),
)

_MANAGER = RoleDefinition(
    name=Role.MANAGER,
    display_name="Manager",
    description="Runs projects, teams and stock",
    permissions=tuple(
        _grants(Resource.DASHBOARD, Action.READ, Action.VIEW)
        + _grants(Resource.PROJECT, Action.MANAGE)
        + _grants(Resource.INVENTORY, Action.MANAGE)
        + _grants(Resource.MATERIAL, Action.MANAGE)
        + _grants(Resource.SUPPLIER, Action.MANAGE)
        + _grants(Resource.TEAM, Action.MANAGE)
        + _grants(Resource.TASK, Action.MANAGE)
        + _grants(
            Resource.REPORT,
            Action.CREATE, Action.UPDATE, Action.DELETE, Action.EXPORT,
            Action.PRINT, Action.SHARE, *BROWSE,
        )
        + _grants(Resource.USER, *BROWSE)
        + _grants(Resource.NOTIFICATION, Action.UPDATE, Action.DELETE, Action.READ, Action.VIEW, Action.LIST)
        + _grants(Resource.ANALYTICS, Action.READ, Action.VIEW)
        + _grants(Resource.CALENDAR, Action.READ, Action.UPDATE, Action.VIEW)
        + _grants(
            Resource.DOCUMENT,
            Action.CREATE, Action.UPDATE, Action.DELETE, Action.UPLOAD,
            Action.DOWNLOAD, Action.SHARE, *BROWSE,
        )
        + _grants(Resource.BUDGET, Action.READ, Action.UPDATE, Action.VIEW)
        + _grants(Resource.BUDGET, Action.APPROVE, when=(status_in("submitted", "pending"),))
        + _grants(Resource.SCHEDULE, Action.READ, Action.UPDATE, Action.VIEW)
        + _grants(Resource.FORECAST, Action.READ, Action.VIEW)
    ),
)

_USER = RoleDefinition(
    name=Role.USER,
    display_name="User",
    description="Views and updates the projects and stock they work on",
    permissions=tuple(
        _grants(Resource.DASHBOARD, Action.READ, Action.VIEW)
        + _grants(Resource.PROJECT, *BROWSE)
        + _grants(Resource.PROJECT, Action.UPDATE, Action.COMMENT, when=(IS_PROJECT_MEMBER,))
        + _grants(Resource.INVENTORY, *BROWSE)
        + _grants(Resource.INVENTORY, Action.UPDATE, when=(IS_PROJECT_MEMBER,))
        + _grants(Resource.MATERIAL, *BROWSE)
        + _grants(Resource.MATERIAL, Action.UPDATE, when=(IS_PROJECT_MEMBER,))
        + _grants(Resource.SUPPLIER, *BROWSE)
        + _grants(Resource.TEAM, *BROWSE)
        + _grants(Resource.TASK, *BROWSE)
        + _grants(Resource.TASK, Action.UPDATE, when=(IS_ASSIGNEE,))
        + _grants(Resource.TASK, Action.COMMENT, when=(IS_PROJECT_MEMBER,))
        # Own tasks can be withdrawn until someone starts on them
        + _grants(Resource.TASK, Action.DELETE, when=(IS_OWNER, status_in("draft", "pending")))
        + _grants(Resource.REPORT, *BROWSE)
        + _grants(Resource.NOTIFICATION, Action.READ, Action.UPDATE, Action.VIEW, Action.LIST)
        + _grants(Resource.CALENDAR, Action.READ, Action.VIEW)
        + _grants(Resource.DOCUMENT, Action.DOWNLOAD, *BROWSE)
        + _grants(Resource.DOCUMENT, Action.UPLOAD, when=(IS_PROJECT_MEMBER,))
    ),
)

_GUEST = RoleDefinition(
    name=Role.GUEST,
    display_name="Guest",
    description="Sees the dashboard and anything published as public",
    permissions=tuple(
        _grants(Resource.DASHBOARD, Action.READ, Action.VIEW)
        + _grants(Resource.PROJECT, *BROWSE, when=(IS_PUBLIC,))
        + _grants(Resource.REPORT, Action.READ, Action.VIEW, when=(IS_PUBLIC,))
        + _grants(Resource.NOTIFICATION, Action.READ, Action.VIEW, Action.LIST)
    ),
)

ROLE_REGISTRY: Mapping[Role, RoleDefinition] = MappingProxyType(
    {entry.name: entry for entry in (_ADMIN, _MANAGER, _USER, _GUEST)}
)


def get_role_by_name(role: Any) -> RoleDefinition | None:
    known = coerce_role(role)
    if known is None:
        return None
    return ROLE_REGISTRY.get(known)


def get_all_roles() -> tuple[RoleDefinition, ...]:
    return tuple(ROLE_REGISTRY.values())


def get_permissions_for_role(role: Any) -> tuple[Permission, ...]:
    """Grant rules of ``role``; unknown names get none."""
    entry = get_role_by_name(role)
    if entry is None:
        return ()
    return entry.permissions


def iter_grants(roles: Iterable[Any]) -> Iterator[tuple[Role, Permission]]:
    """Yield ``(role, permission)`` for every rule of every known role, in order."""
    for role in roles:
        entry = get_role_by_name(role)
        if entry is None:
            continue
        for permission in entry.permissions:
            yield entry.name, permission
