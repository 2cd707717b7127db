"""Global error handlers mapping exceptions to a uniform JSON envelope.

Every error response has the shape::

    {"status": 404, "error": "Not Found", "message": "...", "details": {...}}

Request validation failures additionally carry ``errors``, a list of
``"field: message"`` strings, and are returned as 400.
"""

import logging
from http import HTTPStatus
from typing import Any

from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from slowapi.errors import RateLimitExceeded
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from employee_api.config import get_settings
from employee_api.exceptions import (
    ConflictError,
    EmployeeAPIError,
    NotFoundError,
    ValidationError,
)
from employee_api.security.rate_limit import RETRY_AFTER_SECONDS
from employee_api.utils.secure_logging import log_error, log_warning

logger = logging.getLogger(__name__)

# Safe error messages that can be shown to users
SAFE_ERROR_MESSAGES = {
    400: "Invalid request",
    404: "Resource not found",
    405: "Method not allowed",
    409: "Conflict with existing resource",
    429: "Too many requests",
    500: "Internal server error",
}

# Location prefixes FastAPI puts in front of the field name
_LOCATION_PREFIXES = {"body", "query", "path", "header", "cookie"}

_PYDANTIC_VALUE_ERROR_PREFIX = "Value error, "


def _get_cors_headers(request: Request) -> dict[str, str]:
    """Get CORS headers for error responses.

    Exception handlers run outside the CORS middleware, so allowed
    origins are echoed here.

    Args:
        request: The incoming request

    Returns:
        Dict of CORS headers to add to the response
    """
    origin = request.headers.get("origin")
    if origin and origin in get_settings().cors_origins_list:
        return {
            "Access-Control-Allow-Origin": origin,
            "Access-Control-Allow-Credentials": "true",
        }
    return {}


def error_body(
    status_code: int,
    message: str,
    details: dict[str, Any] | None = None,
    **extra: Any,
) -> dict[str, Any]:
    """Build the error envelope.

    Args:
        status_code: HTTP status code
        message: Human-readable message
        details: Structured details
        **extra: Additional top-level keys

    Returns:
        Envelope dict
    """
    try:
        reason = HTTPStatus(status_code).phrase
    except ValueError:
        reason = "Error"
    body: dict[str, Any] = {
        "status": status_code,
        "error": reason,
        "message": message,
        "details": details or {},
    }
    body.update(extra)
    return body


def _error_response(
    request: Request,
    status_code: int,
    message: str,
    details: dict[str, Any] | None = None,
    headers: dict[str, str] | None = None,
    **extra: Any,
) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=error_body(status_code, message, details, **extra),
        headers={**_get_cors_headers(request), **(headers or {})},
    )


def status_for_domain_error(exc: EmployeeAPIError) -> int:
    """Map a domain exception class to an HTTP status code."""
    if isinstance(exc, NotFoundError):
        return status.HTTP_404_NOT_FOUND
    if isinstance(exc, ConflictError):
        return status.HTTP_409_CONFLICT
    if isinstance(exc, ValidationError):
        return status.HTTP_400_BAD_REQUEST
    return status.HTTP_500_INTERNAL_SERVER_ERROR


def format_validation_errors(errors: list[dict[str, Any]]) -> tuple[list[str], dict[str, str]]:
    """Flatten pydantic validation errors.

    Args:
        errors: Output of RequestValidationError.errors()

    Returns:
        Tuple of ("field: message" strings, {field: message})
    """
    messages: list[str] = []
    by_field: dict[str, str] = {}
    for error in errors:
        loc = [str(part) for part in error.get("loc", ()) if part not in _LOCATION_PREFIXES]
        field = ".".join(loc) or "request"
        msg = str(error.get("msg", "Invalid value"))
        if msg.startswith(_PYDANTIC_VALUE_ERROR_PREFIX):
            msg = msg[len(_PYDANTIC_VALUE_ERROR_PREFIX):]
        messages.append(f"{field}: {msg}")
        by_field.setdefault(field, msg)
    return messages, by_field


async def domain_exception_handler(request: Request, exc: EmployeeAPIError) -> JSONResponse:
    """Handle service-raised domain errors.

    Args:
        request: FastAPI request
        exc: Domain exception

    Returns:
        JSONResponse with the status code for the exception class
    """
    status_code = status_for_domain_error(exc)
    if status_code >= 500:
        log_error(logger, f"Unhandled domain error for {request.url.path}", exc)
    else:
        logger.info("%s %s -> %d %s", request.method, request.url.path, status_code, type(exc).__name__)
    return _error_response(request, status_code, exc.message, exc.details)


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Handle request validation failures as 400 with per-field messages.

    Args:
        request: FastAPI request
        exc: Validation exception

    Returns:
        JSONResponse listing each violated field
    """
    messages, by_field = format_validation_errors(list(exc.errors()))
    logger.warning("Validation error for %s: %s", request.url.path, sorted(by_field))
    return _error_response(
        request,
        status.HTTP_400_BAD_REQUEST,
        "Validation failed",
        by_field,
        errors=messages,
    )


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Handle HTTP exceptions such as unknown routes and wrong methods.

    Args:
        request: FastAPI request
        exc: HTTP exception

    Returns:
        JSONResponse with the error envelope
    """
    if get_settings().debug and isinstance(exc.detail, str):
        message = exc.detail
    else:
        message = SAFE_ERROR_MESSAGES.get(exc.status_code, "Request failed")
    return _error_response(
        request,
        exc.status_code,
        message,
        headers=getattr(exc, "headers", None),
    )


async def sqlalchemy_exception_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    """Handle SQLAlchemy exceptions without leaking database details.

    A unique constraint violation means a concurrent request took the
    same email between the pre-check and the write.

    Args:
        request: FastAPI request
        exc: SQLAlchemy exception

    Returns:
        JSONResponse with safe error
    """
    if isinstance(exc, IntegrityError):
        text = str(exc.orig if exc.orig is not None else exc).lower()
        if "unique" in text or "duplicate" in text:
            log_warning(logger, f"Integrity conflict for {request.url.path}", exc)
            return _error_response(
                request,
                status.HTTP_409_CONFLICT,
                "Employee with this email already exists",
            )

    log_error(logger, f"Database error for {request.url.path}", exc)

    details = {"type": type(exc).__name__} if get_settings().debug else None
    return _error_response(
        request,
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        "Database error occurred",
        details,
    )


async def rate_limit_exceeded_handler(request: Request, exc: RateLimitExceeded) -> JSONResponse:
    """Handle rate limit violations with a Retry-After header."""
    logger.warning("Rate limit exceeded for %s %s", request.method, request.url.path)
    return _error_response(
        request,
        status.HTTP_429_TOO_MANY_REQUESTS,
        "Rate limit exceeded",
        {"limit": str(exc.detail)},
        headers={"Retry-After": str(RETRY_AFTER_SECONDS)},
    )


async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle unexpected exceptions without leaking information.

    Args:
        request: FastAPI request
        exc: Unexpected exception

    Returns:
        JSONResponse with generic error
    """
    log_error(logger, f"Unhandled exception for {request.url.path}", exc)

    details = {"type": type(exc).__name__} if get_settings().debug else None
    return _error_response(
        request,
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        SAFE_ERROR_MESSAGES[500],
        details,
    )
