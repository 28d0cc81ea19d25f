"""Navigation guard: admits UI route transitions the principal may make."""

import logging

from fastapi import status
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from access_policy.core.config import settings
from access_policy.core.deps import principal_from_headers
from access_policy.models.taxonomy import Role
from access_policy.policy.routes import has_route_access

logger = logging.getLogger(__name__)


def navigation_target(path: str, prefix: str) -> str | None:
    """UI route named by a request path under ``prefix``, or None if not a navigation.

    The route is returned as sent; ``has_route_access`` does the normalising.
    """
    prefix = prefix.rstrip("/")
    if path != prefix and not path.startswith(prefix + "/"):
        return None
    return path[len(prefix):] or "/"


class RouteGuardMiddleware(BaseHTTPMiddleware):
    """Rejects navigations under ``prefix`` that the route table denies."""

    def __init__(self, app, prefix: str | None = None):
        super().__init__(app)
        self.prefix = prefix or settings.NAVIGATION_PREFIX

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        route = navigation_target(request.url.path, self.prefix)
        if route is None:
            return await call_next(request)

        principal = principal_from_headers(
            request.headers.get("X-Actor-User-Id"),
            request.headers.get("X-Roles"),
        )
        roles = principal.roles if principal is not None else [Role.GUEST]
        if not has_route_access(roles, route):
            logger.info(f"Navigation to {route} blocked for roles {[r.value for r in roles]}")
            return JSONResponse(
                status_code=status.HTTP_403_FORBIDDEN,
                content={"detail": f"Route not accessible: {route}"},
            )
        return await call_next(request)
