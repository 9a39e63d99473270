"""
FastAPI application factory and configuration.

This module creates the FastAPI application instance,
configures middleware, exception handlers, and lifespan events.
"""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from datetime import timedelta

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from psycopg_pool import ConnectionPool

from otpgate.adapters.repository.postgres import run_migrations
from otpgate.adapters.smtp import ConsoleEmailSender, SmtpEmailSender
from otpgate.adapters.tokens import JwtSessionTokens
from otpgate.api.middleware import QueryTokenMiddleware
from otpgate.api.v1 import router as v1_router
from otpgate.config.settings import Settings, get_settings
from otpgate.domain.ports import EmailSender

logger = logging.getLogger(__name__)

# OpenAPI tags for documentation grouping
tags_metadata = [
    {
        "name": "v1",
        "description": "Signup, email verification and session API v1",
    },
]


def build_email_sender(settings: Settings) -> EmailSender:
    """Select the email sender configured by EMAIL_BACKEND."""
    if settings.email_backend == "smtp":
        return SmtpEmailSender(
            host=settings.smtp_host,
            port=settings.smtp_port,
            sender=settings.smtp_sender,
            username=settings.smtp_username,
            password=settings.smtp_password.get_secret_value(),
            use_starttls=settings.smtp_use_starttls,
            timeout=settings.smtp_timeout_seconds,
        )
    return ConsoleEmailSender()


def build_session_tokens(settings: Settings) -> JwtSessionTokens:
    return JwtSessionTokens(
        secret=settings.jwt_secret.get_secret_value(),
        ttl=timedelta(seconds=settings.token_ttl_seconds),
    )


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    FastAPI lifespan context manager.

    Manages application startup and shutdown:
    - Creates database connection pool on startup
    - Runs migrations on startup
    - Closes connection pool on shutdown
    """
    settings: Settings = app.state.settings

    logger.info("Starting application...")
    logger.info("Connecting to database...")

    # Create connection pool with explicit sizing
    pool = ConnectionPool(
        conninfo=settings.database_url,
        min_size=settings.pool_min_size,
        max_size=settings.pool_max_size,
    )

    # Run migrations
    logger.info("Running database migrations...")
    run_migrations(pool)

    # Store pool in app state for dependency injection
    app.state.pool = pool

    logger.info("Application startup complete")

    yield

    # Shutdown
    logger.info("Shutting down application...")
    pool.close()
    logger.info("Database connection pool closed")


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Log unexpected errors and answer with a generic 500."""
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(status_code=500, content={"detail": "Internal server error"})


def create_app(settings: Settings | None = None) -> FastAPI:
    """Build the application around an immutable Settings instance."""
    settings = settings or get_settings()
    logging.basicConfig(level=settings.log_level.upper())

    app = FastAPI(
        title="otpgate",
        description="Account signup with email OTP verification and signed session tokens",
        version="0.1.0",
        openapi_tags=tags_metadata,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.email_sender = build_email_sender(settings)
    app.state.session_tokens = build_session_tokens(settings)

    app.add_middleware(
        QueryTokenMiddleware,
        cookie_name=settings.cookie_name,
        cookie_secure=settings.cookie_secure,
        cookie_samesite=settings.cookie_samesite,
        max_age=settings.token_ttl_seconds,
    )
    app.add_exception_handler(Exception, unhandled_exception_handler)

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

    return app


app = create_app()
