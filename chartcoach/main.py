"""
Application entry point.

Creates the FastAPI application and wires together:
- Routers (diagnostics, coaching, workspace)
- Error handlers (centralized domain-to-HTTP mapping)
- Security middleware (headers, rate limiting)
- Logging configuration
- Database schema initialization at startup

No business logic belongs here.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from slowapi.errors import RateLimitExceeded
from sqlalchemy.exc import SQLAlchemyError

from chartcoach.core.config import settings
from chartcoach.infrastructure.coaching.database import get_engine, initialize_schema
from chartcoach.interfaces.coaching.router import router as coaching_router
from chartcoach.interfaces.coaching.workspace_router import router as workspace_router
from chartcoach.interfaces.health import router as health_router
from chartcoach.shared.errors.handlers import register_error_handlers
from chartcoach.shared.logging import configure_logging
from chartcoach.shared.security.headers import SecurityHeadersMiddleware
from chartcoach.shared.security.rate_limiting import limiter, rate_limit_exceeded_handler

logger = logging.getLogger(__name__)

API_PREFIX = "/api"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan: create the schema once before serving."""
    if settings.is_persistence_enabled():
        try:
            initialize_schema(get_engine(settings.get_database_url()))
        except SQLAlchemyError:
            logger.warning(
                "Database schema could not be initialized. "
                "Persistence calls will fail until the database is reachable.",
                exc_info=True,
            )
    else:
        logger.info("No database configured. Running in fallback mode.")

    yield


def create_app() -> FastAPI:
    """Create and configure the FastAPI application.

    Registers routers, error handlers, and security middleware.
    This is the composition root of the application.

    Returns:
        A fully configured FastAPI application instance.
    """
    configure_logging(level=settings.log_level)

    app = FastAPI(
        title=settings.project_name,
        version=settings.version,
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
        lifespan=lifespan,
    )

    # --- Rate Limiting ---
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)

    # --- Security Middleware ---
    app.add_middleware(SecurityHeadersMiddleware)

    # --- Error Handlers ---
    register_error_handlers(app)

    # --- Routers ---
    app.include_router(health_router, prefix=API_PREFIX)
    app.include_router(coaching_router, prefix=API_PREFIX)
    app.include_router(workspace_router, prefix=API_PREFIX)

    return app


app = create_app()
