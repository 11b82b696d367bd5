"""FastAPI application factory.

Usage:
    # Development
    fastapi dev src/heatsheet/api/app.py

    # Production
    fastapi run src/heatsheet/api/app.py
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI

from heatsheet import __version__, configure_logging, get_logger
from heatsheet.api.routes import eligibility_router, entries_router, health_router
from heatsheet.config import get_settings

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan - startup and shutdown."""
    settings = get_settings()
    configure_logging()
    logger.info(
        "app_starting",
        environment=settings.environment.value,
        database=settings.has_supabase,
    )
    yield
    logger.info("app_shutdown")


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = get_settings()

    app = FastAPI(
        title="Heat Sheet API",
        description="Assign meet entries to heats and lanes",
        version=__version__,
        lifespan=lifespan,
        docs_url="/docs" if not settings.is_production else None,
        redoc_url="/redoc" if not settings.is_production else None,
    )

    app.include_router(health_router)
    app.include_router(entries_router, prefix="/api/v1")
    app.include_router(eligibility_router, prefix="/api/v1")

    return app


# Application instance for uvicorn
app = create_app()
