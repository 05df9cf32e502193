"""
lexdesk - Main FastAPI Application

This is the entry point for the FastAPI application.
It configures middleware, routes, and lifecycle handlers.
"""

from contextlib import asynccontextmanager
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from .config.settings import settings
from .api.routes import api_router
from .api.middleware import CorrelationIdMiddleware, register_error_handlers
from .repositories.mongo_client import create_indexes, close_connection, health_check
from .scheduler.reminder_poller import ReminderPoller
from .utils.logger import setup_logging, get_logger

VERSION = "1.0.0"

# Setup logging first
setup_logging()
logger = get_logger(__name__)


# =============================================================================
# Application Lifecycle
# =============================================================================

@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan handler.

    Startup:
        - Creates MongoDB indexes
        - Builds the reminder poller and starts it when enabled

    Shutdown:
        - Stops the poller
        - Closes database connections
    """
    # Startup
    logger.info("Starting lexdesk...")

    # Create MongoDB indexes
    try:
        create_indexes()
        logger.info("MongoDB indexes created")
    except Exception as e:
        logger.error(f"Failed to create indexes: {e}")

    # Build the reminder poller; start it unless disabled for this process
    poller = ReminderPoller()
    app.state.poller = poller
    if settings.scheduler_enabled:
        try:
            poller.start()
        except Exception as e:
            logger.error(f"Failed to start reminder poller: {e}")

    logger.info("Application started successfully")

    yield

    # Shutdown
    logger.info("Shutting down...")
    if poller.is_running:
        poller.stop()
    close_connection()
    logger.info("Application shutdown complete")


# =============================================================================
# Application Factory
# =============================================================================

def create_app() -> FastAPI:
    """
    Create and configure the FastAPI application.

    Returns:
        Configured FastAPI application instance
    """
    docs_enabled = settings.debug and not settings.is_production
    application = FastAPI(
        title="lexdesk",
        description="Legal case management: cases, tasks, hearings, documents, messaging and reminders",
        version=VERSION,
        lifespan=lifespan,
        docs_url="/api/docs" if docs_enabled else None,
        redoc_url="/api/redoc" if docs_enabled else None,
        openapi_url="/api/openapi.json" if docs_enabled else None,
    )

    # Register middleware
    _configure_middleware(application)

    # Register error handlers
    register_error_handlers(application)

    # Register routes
    _configure_routes(application)

    return application


def _configure_middleware(app: FastAPI) -> None:
    """Configure application middleware."""
    # CORS middleware
    # allow_credentials must be False when allowing all origins
    allow_all = settings.cors_origins.strip() == "*"

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"] if allow_all else settings.cors_origins_list,
        allow_credentials=not allow_all,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Correlation-Id"],
    )

    # Correlation ID middleware
    app.add_middleware(CorrelationIdMiddleware)


def _configure_routes(app: FastAPI) -> None:
    """Configure application routes."""
    # API routes (versioned)
    app.include_router(api_router, prefix="/api/v1")

    # Health check endpoint (no auth required)
    @app.get("/health", tags=["Health"])
    async def health(request: Request):
        """
        Health check endpoint.

        Reports database connectivity and the reminder poller state.
        """
        mongo_health = health_check()
        poller = getattr(request.app.state, "poller", None)
        return {
            "status": "healthy" if mongo_health.get("status") == "healthy" else "degraded",
            "version": VERSION,
            "environment": settings.environment,
            "mongo": mongo_health,
            "scheduler": poller.status() if poller else {"running": False, "message": "Scheduler is not configured"},
        }

    # Root endpoint
    @app.get("/", tags=["Health"])
    async def root():
        """Root endpoint with API information."""
        return {
            "name": "lexdesk",
            "version": VERSION,
            "docs": "/api/docs" if settings.debug else None
        }


# =============================================================================
# Application Instance
# =============================================================================

# Create the application instance
app = create_app()
