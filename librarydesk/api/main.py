"""
Library Desk API

FastAPI application entry point.
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from dotenv import load_dotenv

# Load environment variables
load_dotenv()

from fastapi import FastAPI, Request

from librarydesk import __version__
from .schemas import HealthResponse
from .routes import admin, auth, books, inventory
from .middleware import (
    setup_logging,
    setup_exception_handlers,
    LoggingConfig,
)
from .dependencies import (
    get_settings,
    init_services,
    Settings,
)

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


# =============================================================================
# Application Lifespan
# =============================================================================

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Application lifespan manager.

    Touches the database on startup so tables exist before the first
    request, and releases the engine on shutdown.
    """
    settings = app.state.settings
    logger.info(f"Starting Library Desk in {settings.environment} mode")

    try:
        _ = app.state.services.database
        logger.info("Library Desk started successfully")

        yield

    finally:
        logger.info("Shutting down Library Desk...")
        app.state.services.close()
        logger.info("Shutdown complete")


# =============================================================================
# Application Factory
# =============================================================================

def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        settings: Application settings. If None, loads from environment.

    Returns:
        Configured FastAPI application.
    """
    if settings is None:
        settings = get_settings()

    app = FastAPI(
        title="Library Desk",
        description="Library management: accounts, dashboards and book inventory.",
        version=__version__,
        docs_url="/docs" if settings.debug else None,
        redoc_url=None,
        openapi_url="/openapi.json" if settings.debug else None,
        lifespan=lifespan,
    )

    # Usable without the lifespan having run.
    app.state.settings = settings
    app.state.services = init_services(settings)

    # ==========================================================================
    # Middleware
    # ==========================================================================

    setup_logging(
        app,
        config=LoggingConfig(
            enabled=True,
            log_request_body=settings.debug,
        ),
        structured=settings.environment != "development",
    )

    setup_exception_handlers(app)

    # ==========================================================================
    # Routers
    # ==========================================================================

    app.include_router(auth.router)
    app.include_router(admin.router)
    app.include_router(inventory.router)
    app.include_router(books.router)

    # ==========================================================================
    # System Routes
    # ==========================================================================

    @app.get("/health", response_model=HealthResponse, tags=["System"])
    def health_check(request: Request) -> HealthResponse:
        """Health check endpoint."""
        services = request.app.state.services

        components = {}
        overall_healthy = True

        if services.database.ping():
            components["database"] = "healthy"
        else:
            components["database"] = "unhealthy"
            overall_healthy = False

        components["sessions"] = f"{len(services.session_store)} active"

        return HealthResponse(
            status="healthy" if overall_healthy else "degraded",
            version=__version__,
            components=components,
        )

    return app


# =============================================================================
# CLI Entry Point
# =============================================================================

def main():
    """Run the application using uvicorn."""
    import uvicorn

    settings = get_settings()

    uvicorn.run(
        "librarydesk.api.main:create_app",
        factory=True,
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
        log_level="debug" if settings.debug else "info",
    )


if __name__ == "__main__":
    main()
