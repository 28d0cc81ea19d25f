from fastapi import FastAPI

from access_policy.api import api_router
from access_policy.core.config import settings
from access_policy.core.logging import configure_logging
from access_policy.core.middleware import RouteGuardMiddleware
from access_policy.policy.routes import normalize_route
from access_policy.schemas.permissions import RouteAccessResponse

configure_logging()

app = FastAPI(
    title=settings.PROJECT_NAME,
    description="Role and condition based access decisions for the inventory dashboard",
    version=settings.VERSION,
)

# Navigation guard runs before any handler under the navigation prefix
app.add_middleware(RouteGuardMiddleware, prefix=settings.NAVIGATION_PREFIX)

app.include_router(api_router)


@app.get(settings.NAVIGATION_PREFIX.rstrip("/") + "/{route:path}", response_model=RouteAccessResponse)
async def navigate(route: str):
    """Reached only when the route guard admitted the navigation."""
    return RouteAccessResponse(path=normalize_route("/" + route), allowed=True)


@app.get("/health")
async def health_check():
    return {"status": "ok", "version": settings.VERSION}
