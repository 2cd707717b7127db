"""FastAPI application entry point."""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, Response
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from slowapi.errors import RateLimitExceeded
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.base import BaseHTTPMiddleware

from employee_api import __version__
from employee_api.config import get_settings
from employee_api.exceptions import EmployeeAPIError
from employee_api.logging_config import configure_logging
from employee_api.middleware.error_handler import (
    domain_exception_handler,
    generic_exception_handler,
    http_exception_handler,
    rate_limit_exceeded_handler,
    sqlalchemy_exception_handler,
    validation_exception_handler,
)
from employee_api.middleware.request_logging_middleware import RequestLoggingMiddleware
from employee_api.routers import employees
from employee_api.security.rate_limit import limiter

logger = logging.getLogger(__name__)

API_PREFIX = "/api/employees"


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Middleware to add security headers to all responses."""

    async def dispatch(self, request: Request, call_next) -> Response:
        response = await call_next(request)
        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "DENY"
        response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"
        if "Cache-Control" not in response.headers:
            response.headers["Cache-Control"] = "no-store, max-age=0"
        response.headers.setdefault("Vary", "Accept, Origin")
        return response


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan handler."""
    config = get_settings()
    configure_logging(config.log_level)

    # SQLite is used for local development without running migrations
    if config.is_sqlite:
        from employee_api.database import create_schema

        await create_schema()
        logger.info("SQLite schema ensured")

    logger.info("%s %s started (%s)", config.app_name, __version__, config.environment)
    yield

    from employee_api.database import engine

    await engine.dispose()
    logger.info("%s stopped", config.app_name)


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    config = get_settings()

    app = FastAPI(
        title=config.app_name,
        version=__version__,
        description="Employee Management REST API",
        lifespan=lifespan,
        docs_url="/docs" if config.debug else None,
        redoc_url="/redoc" if config.debug else None,
    )

    # Rate limiting
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)

    # Error handlers share one JSON envelope
    app.add_exception_handler(EmployeeAPIError, domain_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(SQLAlchemyError, sqlalchemy_exception_handler)
    app.add_exception_handler(Exception, generic_exception_handler)

    allowed_origins = config.cors_origins_list

    # Middleware runs in REVERSE order of addition:
    # RequestLogging -> CORS -> SecurityHeaders -> routes
    app.add_middleware(SecurityHeadersMiddleware)

    # CORS middleware handles OPTIONS preflight before the routes
    app.add_middleware(
        CORSMiddleware,
        allow_origins=allowed_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type", "Accept", "X-Requested-With", "X-Request-ID"],
        expose_headers=["X-Request-ID", "Retry-After"],
    )

    # Added after CORSMiddleware so it runs BEFORE it on incoming requests
    app.add_middleware(RequestLoggingMiddleware, allowed_origins=allowed_origins)

    app.include_router(employees.router, prefix=API_PREFIX, tags=["Employees"])

    @app.get("/health")
    async def health_check() -> dict[str, str]:
        """Health check endpoint."""
        return {"status": "healthy"}

    return app


app = create_app()
