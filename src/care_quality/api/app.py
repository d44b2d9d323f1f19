"""
FastAPI application factory.

Provides create_app() for building the application with its container,
exception handlers, routers and lifecycle management.
"""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from ..config import Settings, configure_logging, get_logger, get_settings
from ..core.container import Container, create_container
from .errors import register_exception_handlers
from .routers import events, health, jobs, metrics


@asynccontextmanager
async def create_lifespan_manager(app: FastAPI) -> AsyncIterator[None]:
    """
    Application lifespan manager.

    Runs the health checks once at startup so a store that cannot be reached
    shows up in the logs immediately.
    """
    logger = get_logger("app.lifespan")
    settings: Settings = app.state.settings
    logger.info("Starting Care Quality Engine", environment=settings.environment, version=settings.app_version)

    container: Container = app.state.container
    health_report = await container.health_checker().get_overall_health()
    logger.info("Startup health check completed", overall_status=health_report["overall_status"])

    yield

    logger.info("Shutting down Care Quality Engine")


def create_app(settings: Settings | None = None, container: Container | None = None) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        settings: Settings to use; defaults to the cached application settings
        container: Pre-built container, e.g. one holding a seeded document store

    Returns:
        FastAPI: Configured FastAPI application instance
    """
    settings = settings or get_settings()
    configure_logging(settings)
    logger = get_logger("app.factory")

    logger.info(
        "Creating FastAPI application", app_name=settings.app_name, version=settings.app_version, environment=settings.environment
    )

    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        description="Quality and incident engine for the caregiver marketplace",
        docs_url="/docs" if settings.enable_docs else None,
        redoc_url="/redoc" if settings.enable_docs else None,
        lifespan=create_lifespan_manager,
        debug=settings.debug,
        openapi_tags=[
            {"name": "health", "description": "System health and status endpoints"},
            {"name": "events", "description": "Domain event delivery"},
            {"name": "jobs", "description": "Manually triggered metrics jobs"},
            {"name": "metrics", "description": "Prometheus metrics"},
        ],
    )
    app.state.settings = settings
    app.state.container = container or create_container(settings)

    register_exception_handlers(app)

    app.include_router(health.router, prefix="/api")
    app.include_router(metrics.router, prefix="/api")
    app.include_router(events.router, prefix=settings.api_prefix)
    app.include_router(jobs.router, prefix=settings.api_prefix)
    logger.info("FastAPI application created successfully")

    return app
