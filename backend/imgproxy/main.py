"""FastAPI application entry point."""

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from imgproxy import __version__
from imgproxy.api.router import api_router
from imgproxy.config import Settings, get_settings
from imgproxy.dependencies import create_orchestrator
from imgproxy.middleware.error_handler import setup_exception_handlers
from imgproxy.middleware.observability import get_logger, setup_observability
from imgproxy.services.image import ResizeOrchestrator

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan management."""
    orchestrator: ResizeOrchestrator = app.state.orchestrator
    logger.info(
        f"Starting {app.title} (cache dir: {orchestrator.disk_cache.cache_dir}, "
        f"memory cache size: {orchestrator.memory_cache.capacity})"
    )

    yield

    logger.info("Shutting down...")
    aclose = getattr(orchestrator.fetcher, "aclose", None)
    if aclose is not None:
        await aclose()
    logger.info("Shutdown complete")


def create_app(
    settings: Settings | None = None,
    orchestrator: ResizeOrchestrator | None = None,
) -> FastAPI:
    """
    Application factory.

    The orchestrator (and with it both cache tiers) is built once here and
    shared by every request through ``app.state``.
    """
    settings = settings or get_settings()

    app = FastAPI(
        title=settings.app_name,
        version=__version__,
        description="On-demand image resizing proxy with memory and disk caching",
        lifespan=lifespan,
        docs_url="/docs" if settings.debug else None,
        redoc_url=None,
        openapi_url="/openapi.json" if settings.debug else None,
    )
    app.state.settings = settings
    app.state.orchestrator = orchestrator or create_orchestrator(settings)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_methods=["GET"],
        allow_headers=["*"],
        expose_headers=["X-Cache", "X-Request-ID"],
    )

    # Request ID, access log and method guard
    setup_observability(app)

    setup_exception_handlers(app)

    app.include_router(api_router)

    return app


app = create_app()
