"""FastAPI app factory"""
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from ..core.config.settings import get_config
from ..core.storage.database import init_db
from .errors import register_error_handlers

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan context manager.

    Handles startup and shutdown events for the FastAPI application.
    """
    # Startup
    config = get_config()
    db = init_db(config.get_database_url(), echo=config.db_echo)
    await db.create_tables()

    # Store in app state for access in routes
    app.state.db = db
    app.state.config = config

    logger.info("reviewpool API started")

    yield

    # Shutdown
    await db.close()
    logger.info("reviewpool API stopped")


def create_app() -> FastAPI:
    """Create FastAPI application.

    Returns:
        Configured FastAPI application instance
    """
    app = FastAPI(
        title="reviewpool API",
        description="Reviewer assignment and reassignment for pull requests",
        version="0.1.0",
        lifespan=lifespan,
    )

    # Add CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],  # Configure appropriately for production
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_error_handlers(app)

    # Register routes
    from .routes import pull_requests, stats, teams, users

    app.include_router(teams.router, tags=["teams"])
    app.include_router(users.router, tags=["users"])
    app.include_router(pull_requests.router, tags=["pull requests"])
    app.include_router(stats.router, tags=["stats"])

    @app.get("/health")
    async def health():
        """Health check endpoint."""
        return {"status": "healthy", "service": "reviewpool"}

    return app


app = create_app()
