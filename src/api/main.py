"""
FastAPI application factory and configuration.

This module creates the FastAPI application instance,
configures exception handlers and lifespan events.
"""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from psycopg_pool import ConnectionPool

from src.adapters.repository.postgres import run_migrations
from src.api.dependencies import build_email_sender
from src.api.errors import register_exception_handlers
from src.api.v1 import router as v1_router
from src.config.settings import DEV_JWT_SECRET, get_settings

logger = logging.getLogger(__name__)

# OpenAPI tags for documentation grouping
tags_metadata = [
    {
        "name": "v1",
        "description": "Account API v1 - Register, verify email, log in and fetch profile",
    },
]


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    FastAPI lifespan context manager.

    Manages application startup and shutdown:
    - Creates database connection pool and runs migrations
    - Creates the background email sender
    - Drains pending deliveries and closes the pool on shutdown
    """
    settings = get_settings()
    logging.getLogger("src").setLevel(settings.log_level.upper())

    logger.info("Starting application...")
    if settings.jwt_secret == DEV_JWT_SECRET:
        logger.warning("JWT_SECRET is the development default; set it before deploying")
    if settings.expose_verification_code:
        logger.warning("EXPOSE_VERIFICATION_CODE is on; verification codes are returned to clients")

    logger.info("Connecting to database...")
    pool = ConnectionPool(
        conninfo=settings.database_url,
        min_size=settings.pool_min_size,
        max_size=settings.pool_max_size,
    )

    logger.info("Running database migrations...")
    run_migrations(pool)

    # Store process-wide collaborators in app state for dependency injection
    app.state.pool = pool
    app.state.email_sender = build_email_sender(settings)
    logger.info("Email backend: %s", settings.email_backend)

    logger.info("Application startup complete")

    yield

    logger.info("Shutting down application...")
    app.state.email_sender.shutdown(wait=True)
    pool.close()
    logger.info("Database connection pool closed")


app = FastAPI(
    title="remindkaro-auth",
    description="Account verification API - registration, email one-time codes and bearer sessions",
    version="0.1.0",
    openapi_tags=tags_metadata,
    lifespan=lifespan,
)

register_exception_handlers(app)

# Include v1 API routes
app.include_router(v1_router, prefix="/v1")


@app.get("/health")
async def health_check(request: Request) -> dict[str, str]:
    """
    Health check endpoint with database validation.

    Returns 200 OK if application and database are healthy.
    Raises exception if database connection fails.
    """
    pool = request.app.state.pool
    with pool.connection() as conn:
        conn.execute("SELECT 1")

    return {"status": "healthy"}
