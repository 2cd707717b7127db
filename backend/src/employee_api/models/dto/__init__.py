"""Data Transfer Objects package."""

from employee_api.models.dto.employee import EmployeeRequest, EmployeeResponse
from employee_api.models.dto.page import PageResponse

__all__ = [
    "EmployeeRequest",
    "EmployeeResponse",
    "PageResponse",
]
