from fastapi import APIRouter

from access_policy.core.config import settings
from .permissions import router as permissions_router

api_router = APIRouter(prefix=settings.API_PREFIX)
api_router.include_router(permissions_router)
