"""Middleware package."""

from employee_api.middleware.request_logging_middleware import RequestLoggingMiddleware

__all__ = [
    "RequestLoggingMiddleware",
]
