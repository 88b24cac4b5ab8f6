"""
FastAPI application factory and configuration.

This module creates the FastAPI application instance,
configures middleware, exception handlers, and lifespan events.
"""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from psycopg_pool import ConnectionPool

from otpauth.adapters.ledger import InMemoryOTPLedger
from otpauth.adapters.repository.postgres import run_migrations
from otpauth.api.dependencies import build_email_sender, build_token_issuer
from otpauth.api.errors import install_error_handlers
from otpauth.api.user import router as user_router
from otpauth.config.settings import get_settings

logger = logging.getLogger(__name__)

# OpenAPI tags for documentation grouping
tags_metadata = [
    {
        "name": "user",
        "description": "Email OTP verification, registration and login",
    },
]


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    FastAPI lifespan context manager.

    Manages application startup and shutdown:
    - Creates database connection pool on startup
    - Runs migrations on startup
    - Creates the process-wide OTP ledger, email sender and token issuer
    - Closes connection pool on shutdown
    """
    settings = get_settings()

    logger.info("Starting application...")
    logger.info("Connecting to database...")

    pool = ConnectionPool(
        conninfo=settings.database_url,
        min_size=settings.pool_min_size,
        max_size=settings.pool_max_size,
    )

    logger.info("Running database migrations...")
    run_migrations(pool)

    app.state.pool = pool
    app.state.otp_ledger = InMemoryOTPLedger(ttl_seconds=settings.otp_ttl_seconds)
    app.state.email_sender = build_email_sender(settings)
    app.state.token_issuer = build_token_issuer(settings)

    logger.info(
        "Application startup complete (email sender: %s)",
        type(app.state.email_sender).__name__,
    )

    yield

    logger.info("Shutting down application...")
    pool.close()
    logger.info("Database connection pool closed")


def create_app() -> FastAPI:
    """Build the application with middleware, error handlers and routes."""
    settings = get_settings()

    application = FastAPI(
        title="otpauth",
        description="OTP-gated registration and password login API",
        version="0.1.0",
        openapi_tags=tags_metadata,
        lifespan=lifespan,
    )

    origins = [o.strip() for o in settings.cors_origins.split(",") if o.strip()]
    application.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_credentials="*" not in origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    install_error_handlers(application)
    application.include_router(user_router, prefix="/user")

    @application.get("/health")
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

    return application


app = create_app()


def run() -> None:
    """Console entry point: serve the API with uvicorn."""
    settings = get_settings()
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    uvicorn.run(app, host=settings.host, port=settings.port)
