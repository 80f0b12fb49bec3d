"""API v1 router configuration."""

from fastapi import APIRouter

from api.v1.routes.categories import router as categories_router
from api.v1.routes.profiles import router as profiles_router
from api.v1.routes.recommendations import router as recommendations_router
from api.v1.routes.usernames import router as usernames_router

router = APIRouter()
router.include_router(usernames_router)
router.include_router(profiles_router)
router.include_router(categories_router)
router.include_router(recommendations_router)
