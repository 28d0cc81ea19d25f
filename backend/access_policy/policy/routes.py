"""Navigation-level route guard.

Coarser than the resource/action evaluator and independent of it: a page can
be reachable while the operations inside it stay restricted.
"""

import logging
import posixpath
from types import MappingProxyType
from typing import Any, Iterable, Mapping

from access_policy.core.config import settings
from access_policy.models.taxonomy import Role, coerce_role

logger = logging.getLogger(__name__)

PUBLIC_ROUTES: frozenset[str] = frozenset({
    "/",
    "/login",
    "/register",
    "/forgot-password",
    "/reset-password",
    "/auth/callback",
    "/terms",
    "/privacy",
    "/about",
    "/contact",
})

# ── Route groups ───────────────────────────────────
ACCOUNT_ROUTES = ("/settings", "/profile", "/edit-profile", "/preferences")
OVERVIEW_ROUTES = ("/dashboard", "/overview", "/projects")
WORKSPACE_ROUTES = (
    "/calendar",
    "/inventory-management",
    "/inventory-overview",
    "/reports",
    "/resources",
    "/documents",
    "/suppliers",
    "/teams",
    "/tasks",
)
PLANNING_ROUTES = ("/analytics", "/company-inventory", "/budget", "/schedule", "/forecast")
ADMINISTRATION_ROUTES = ("/users", "/role-management", "/audit-logs")

_GUEST_ROUTES = OVERVIEW_ROUTES + ACCOUNT_ROUTES
_USER_ROUTES = _GUEST_ROUTES + WORKSPACE_ROUTES
_MANAGER_ROUTES = _USER_ROUTES + PLANNING_ROUTES

# No admin entry: admin passes every route before this table is read
ROLE_ROUTES: Mapping[Role, tuple[str, ...]] = MappingProxyType({
    Role.MANAGER: _MANAGER_ROUTES,
    Role.USER: _USER_ROUTES,
    Role.GUEST: _GUEST_ROUTES,
})

ALL_ROUTES: tuple[str, ...] = _MANAGER_ROUTES + ADMINISTRATION_ROUTES


def _strip_query(route: str) -> str:
    return route.split("#", 1)[0].split("?", 1)[0]


def normalize_route(route: str) -> str:
    """Drop query string, fragment and trailing slash; collapse ``.``/``..``; ensure a leading slash."""
    path = _strip_query(route).strip()
    if not path.startswith("/"):
        path = "/" + path
    path = posixpath.normpath(path)
    # normpath keeps a leading "//"
    return "/" + path.lstrip("/")


def is_public_route(route: str) -> bool:
    """Exact match against the public list; only query string and fragment are ignored."""
    path = _strip_query(route)
    return path in PUBLIC_ROUTES or path in settings.EXTRA_PUBLIC_ROUTES


def _covers(prefix: str, path: str) -> bool:
    return path == prefix or path.startswith(prefix + "/")


def has_route_access(roles: Iterable[Any], route: Any) -> bool:
    """Whether any held role may navigate to ``route``."""
    if not isinstance(route, str) or not route.strip():
        return False
    if is_public_route(route):
        return True

    held = [r for r in (coerce_role(v) for v in roles or ()) if r is not None]
    if Role.ADMIN in held:
        return True

    path = normalize_route(route)
    for role in held:
        if any(_covers(prefix, path) for prefix in ROLE_ROUTES.get(role, ())):
            return True

    logger.debug(f"Route {path} denied for roles {[r.value for r in held]}")
    return False


def get_accessible_routes(roles: Iterable[Any]) -> list[str]:
    """Known non-public routes the roles may open, in menu order."""
    held = {r for r in (coerce_role(v) for v in roles or ()) if r is not None}
    if Role.ADMIN in held:
        return list(ALL_ROUTES)
    allowed = set()
    for role in held:
        allowed.update(ROLE_ROUTES.get(role, ()))
    return [route for route in ALL_ROUTES if route in allowed]
