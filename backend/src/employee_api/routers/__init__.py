"""API routers package."""

from employee_api.routers import employees

__all__ = ["employees"]
