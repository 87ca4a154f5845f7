"""Main router aggregating all endpoint routers."""

from fastapi import APIRouter

from imgproxy.api.v1.cache import router as cache_router
from imgproxy.api.v1.health import router as health_router
from imgproxy.api.v1.resize import router as resize_router

api_router = APIRouter()

# Fixed prefixes first; the resize route matches any four-segment path
api_router.include_router(health_router, tags=["Health"])
api_router.include_router(cache_router, tags=["Cache"])
api_router.include_router(resize_router, tags=["Resize"])
