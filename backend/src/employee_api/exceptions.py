"""Domain-specific exceptions for the employee API.

These exceptions provide a clean separation between service-layer errors
and HTTP responses. The API layer never recovers from them, it only maps
each class to a status code in the error handler.
"""

from typing import Any


class EmployeeAPIError(Exception):
    """Base exception for all employee API errors."""

    def __init__(self, message: str = "An error occurred", details: dict[str, Any] | None = None) -> None:
        self.message = message
        self.details = details or {}
        super().__init__(self.message)


# =============================================================================
# Resource Not Found Errors (404)
# =============================================================================


class NotFoundError(EmployeeAPIError):
    """Base class for resource not found errors."""

    pass


class EmployeeNotFoundError(NotFoundError):
    """Raised when no employee exists with the given id."""

    def __init__(self, employee_id: int | None = None) -> None:
        message = (
            f"Employee not found with id: {employee_id}"
            if employee_id is not None
            else "Employee not found"
        )
        details = {"id": employee_id} if employee_id is not None else {}
        super().__init__(message, details)


# =============================================================================
# Conflict Errors (409)
# =============================================================================


class ConflictError(EmployeeAPIError):
    """Base class for resource conflict errors."""

    pass


class DuplicateEmailError(ConflictError):
    """Raised when an email is already used by another employee."""

    def __init__(self, email: str | None = None) -> None:
        message = (
            f"Employee with email {email} already exists"
            if email
            else "Employee with this email already exists"
        )
        details = {"email": email} if email else {}
        super().__init__(message, details)


# =============================================================================
# Validation Errors (400)
# =============================================================================


class ValidationError(EmployeeAPIError):
    """Base class for validation errors."""

    pass


class InvalidSortFieldError(ValidationError):
    """Raised when a caller asks to sort by an unknown field."""

    def __init__(self, field: str, allowed: list[str] | None = None) -> None:
        details: dict[str, Any] = {"sortBy": field}
        if allowed:
            details["allowed"] = allowed
        super().__init__(f"Invalid sort field: {field}", details)


class InvalidSortDirectionError(ValidationError):
    """Raised when the sort direction is neither asc nor desc."""

    def __init__(self, direction: str) -> None:
        super().__init__(
            f"Invalid sort direction: {direction}",
            {"sortDir": direction, "allowed": ["asc", "desc"]},
        )
