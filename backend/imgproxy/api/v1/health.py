"""Health check endpoint."""

from typing import Annotated

from fastapi import APIRouter, Depends

from imgproxy.dependencies import get_orchestrator
from imgproxy.models.schemas.common import HealthResponse, MemoryCacheStats
from imgproxy.services.image import ResizeOrchestrator

router = APIRouter(prefix="/health")


@router.get("", response_model=HealthResponse)
async def health_check(
    orchestrator: Annotated[ResizeOrchestrator, Depends(get_orchestrator)],
):
    """
    Basic health check for load balancers.

    The cache directory is created lazily, so a missing directory is not an
    error on a fresh instance.
    """
    cache_dir = orchestrator.disk_cache.cache_dir
    return HealthResponse(
        status="ok",
        cache_dir=str(cache_dir),
        cache_dir_exists=cache_dir.is_dir(),
        memory_cache=MemoryCacheStats(**orchestrator.memory_cache.get_stats()),
    )
