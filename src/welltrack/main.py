"""FastAPI application factory."""
import asyncio
import logging
from contextlib import asynccontextmanager
from typing import Optional
from fastapi import FastAPI
from welltrack.config import Settings, get_settings
from welltrack.core.database import SessionLocal
from welltrack.core.logging import configure_logging
from welltrack.api.v1 import analyze, activity, health, metrics, ml, queue
from welltrack.observability.metrics import init_system_info
from welltrack.observability.middleware import MetricsMiddleware
from welltrack.worker.components import AnalysisComponents, build_components

logger = logging.getLogger(__name__)


def create_app(
    settings: Optional[Settings] = None,
    components: Optional[AnalysisComponents] = None,
) -> FastAPI:
    """
    Create and configure FastAPI application.

    The lifespan builds the analysis components (unless ``components`` is
    given), starts the worker loop and drains the queue on shutdown.

    Args:
        settings: Settings override (defaults to ``get_settings()``)
        components: Pre-built pipeline components

    Returns:
        FastAPI: Configured FastAPI application
    """
    settings = settings or get_settings()
    configure_logging(settings.LOG_LEVEL)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        app.state.components = components or build_components(settings, SessionLocal)
        worker = app.state.components.worker
        worker_task = None

        if settings.ANALYSIS_WORKER_ENABLED:
            worker_task = asyncio.create_task(worker.start())
            app.state.worker_task = worker_task

        try:
            yield
        finally:
            if worker_task is not None:
                await worker.stop(timeout=settings.SHUTDOWN_DRAIN_TIMEOUT, drain=True)
                try:
                    await worker_task
                except asyncio.CancelledError:
                    logger.warning("Analysis worker cancelled during shutdown")
            redis = app.state.components.redis
            if redis is not None and components is None:
                from welltrack.core.redis import close_redis

                close_redis()

    app = FastAPI(
        title=settings.APP_NAME,
        version=settings.APP_VERSION,
        debug=settings.DEBUG,
        lifespan=lifespan,
    )

    # Add middleware
    app.add_middleware(
        MetricsMiddleware,
        skip_paths=(f"{settings.API_V1_PREFIX}/metrics",),
    )

    # Initialize metrics
    init_system_info(settings.APP_VERSION)

    # Include routers
    app.include_router(analyze.router, prefix=settings.API_V1_PREFIX)
    app.include_router(ml.router, prefix=settings.API_V1_PREFIX)
    app.include_router(activity.router, prefix=settings.API_V1_PREFIX)
    app.include_router(queue.router, prefix=settings.API_V1_PREFIX)
    app.include_router(health.router, prefix=settings.API_V1_PREFIX, tags=["health"])
    app.include_router(metrics.router, prefix=settings.API_V1_PREFIX)

    return app


# Create app instance
app = create_app()
