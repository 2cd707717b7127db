"""Domain models package."""

from employee_api.models.domain.employee import EmployeeStatus, SortDirection

__all__ = [
    "EmployeeStatus",
    "SortDirection",
]
