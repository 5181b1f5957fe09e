"""Main FastAPI application entry point."""

from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI

from infrastructure.logging import configure_logging
from infrastructure.settings import get_settings
from infrastructure.version import __version__
from landing_zone.presentation import routes as landing_zone_routes


@asynccontextmanager
async def landing_zone_lifespan(app: FastAPI):
    """Application lifespan context.

    Configures logging before the first request is served.
    """
    settings = get_settings()
    configure_logging(level="DEBUG" if settings.debug else settings.log_level)
    structlog.get_logger().info("application_started", version=__version__)
    yield


app = FastAPI(
    title="Landing Zone API",
    description="Plan and apply AWS organization landing zones for teams",
    version=__version__,
    lifespan=landing_zone_lifespan,
)

# Include Landing Zone bounded context routes
app.include_router(landing_zone_routes.router)


@app.get("/health")
def health():
    """Basic health check endpoint."""
    return {"status": "ok", "version": __version__}
