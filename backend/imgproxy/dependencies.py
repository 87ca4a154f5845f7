"""Dependency injection factories."""

from fastapi import Request

from imgproxy.config import Settings, get_settings
from imgproxy.services.fetcher import HttpFetcher
from imgproxy.services.image import (
    DiskVariantCache,
    MemoryImageCache,
    PillowCodec,
    ResizeOrchestrator,
)


def create_orchestrator(settings: Settings | None = None) -> ResizeOrchestrator:
    """Build the process-wide pipeline from settings."""
    settings = settings or get_settings()
    return ResizeOrchestrator(
        fetcher=HttpFetcher(
            timeout=settings.fetch_timeout,
            max_bytes=settings.fetch_max_bytes,
            user_agent=settings.user_agent,
        ),
        codec=PillowCodec(),
        memory_cache=MemoryImageCache(capacity=settings.memory_cache_size),
        disk_cache=DiskVariantCache(settings.cache_dir),
    )


# ============================================================================
# HTTP Request Dependencies
# ============================================================================


async def get_orchestrator(request: Request) -> ResizeOrchestrator:
    """Get the shared orchestrator from app state."""
    return request.app.state.orchestrator


async def get_disk_cache(request: Request) -> DiskVariantCache:
    """Get the variant cache used for direct artifact reads."""
    return request.app.state.orchestrator.disk_cache
