"""Employees router.

Fixed paths are registered before ``/{employee_id}`` so that, for
example, ``/search`` is never parsed as an id.
"""

from datetime import date
from decimal import Decimal
from typing import Annotated

from fastapi import APIRouter, Depends, Path, Query, Request, status

from employee_api.constants.validation import (
    DEFAULT_PAGE,
    DEFAULT_PAGE_SIZE,
    MAX_PAGE_SIZE,
    MAX_PATH_FILTER_LENGTH,
    MAX_RECENT_HIRE_MONTHS,
    MAX_SEARCH_LENGTH,
)
from employee_api.dependencies import get_employee_service
from employee_api.models.domain.employee import EmployeeStatus
from employee_api.models.dto.employee import EmployeeRequest, EmployeeResponse
from employee_api.models.dto.page import PageResponse
from employee_api.security.rate_limit import MUTATION_LIMIT, limiter
from employee_api.services.employee_service import EmployeeService

router = APIRouter()

ServiceDep = Annotated[EmployeeService, Depends(get_employee_service)]
PageParam = Annotated[int, Query(ge=0, description="0-based page index")]
SizeParam = Annotated[int, Query(ge=1, le=MAX_PAGE_SIZE, description="Page size")]
SortByParam = Annotated[str | None, Query(alias="sortBy", max_length=50, description="Field to sort by")]
SortDirParam = Annotated[str | None, Query(alias="sortDir", max_length=10, description="asc or desc")]


# =============================================================================
# Collection
# =============================================================================


@router.post("", response_model=EmployeeResponse, status_code=status.HTTP_201_CREATED)
@limiter.limit(MUTATION_LIMIT)
async def create_employee(
    request: Request,
    data: EmployeeRequest,
    service: ServiceDep,
) -> EmployeeResponse:
    """Create an employee.

    Returns 409 if the email is already in use.
    """
    return await service.create_employee(data)


@router.get("", response_model=PageResponse[EmployeeResponse])
async def list_employees(
    service: ServiceDep,
    page: PageParam = DEFAULT_PAGE,
    size: SizeParam = DEFAULT_PAGE_SIZE,
    sort_by: SortByParam = None,
    sort_dir: SortDirParam = None,
) -> PageResponse[EmployeeResponse]:
    """List employees one page at a time."""
    return await service.list_employees(page, size, sort_by, sort_dir)


# =============================================================================
# Search & Filters
# =============================================================================


@router.get("/search", response_model=PageResponse[EmployeeResponse])
async def search_employees(
    service: ServiceDep,
    query: Annotated[str | None, Query(max_length=MAX_SEARCH_LENGTH)] = None,
    page: PageParam = DEFAULT_PAGE,
    size: SizeParam = DEFAULT_PAGE_SIZE,
    sort_by: SortByParam = None,
    sort_dir: SortDirParam = None,
) -> PageResponse[EmployeeResponse]:
    """Search by first name, last name, email, department or position.

    Matching is a case-insensitive substring match.
    """
    return await service.search_employees(query, page, size, sort_by, sort_dir)


@router.get("/department/{department}", response_model=PageResponse[EmployeeResponse])
async def get_employees_by_department(
    service: ServiceDep,
    department: Annotated[str, Path(max_length=MAX_PATH_FILTER_LENGTH)],
    page: PageParam = DEFAULT_PAGE,
    size: SizeParam = DEFAULT_PAGE_SIZE,
    sort_by: SortByParam = None,
    sort_dir: SortDirParam = None,
) -> PageResponse[EmployeeResponse]:
    """List employees in a department."""
    return await service.get_by_department(department, page, size, sort_by, sort_dir)


@router.get("/position/{position}", response_model=PageResponse[EmployeeResponse])
async def get_employees_by_position(
    service: ServiceDep,
    position: Annotated[str, Path(max_length=MAX_PATH_FILTER_LENGTH)],
    page: PageParam = DEFAULT_PAGE,
    size: SizeParam = DEFAULT_PAGE_SIZE,
    sort_by: SortByParam = None,
    sort_dir: SortDirParam = None,
) -> PageResponse[EmployeeResponse]:
    """List employees holding a position."""
    return await service.get_by_position(position, page, size, sort_by, sort_dir)


@router.get("/status/{employee_status}", response_model=list[EmployeeResponse])
async def get_employees_by_status(
    service: ServiceDep,
    employee_status: EmployeeStatus,
) -> list[EmployeeResponse]:
    """List employees with a status."""
    return await service.get_by_status(employee_status)


@router.get("/hired-between", response_model=list[EmployeeResponse])
async def get_employees_hired_between(
    service: ServiceDep,
    start_date: Annotated[date, Query(alias="startDate", description="YYYY-MM-DD, inclusive")],
    end_date: Annotated[date, Query(alias="endDate", description="YYYY-MM-DD, inclusive")],
) -> list[EmployeeResponse]:
    """List employees hired within a date window."""
    return await service.get_hired_between(start_date, end_date)


@router.get("/recently-hired/{months}", response_model=list[EmployeeResponse])
async def get_recently_hired(
    service: ServiceDep,
    months: Annotated[int, Path(ge=0, le=MAX_RECENT_HIRE_MONTHS)],
) -> list[EmployeeResponse]:
    """List employees hired within the last N months, newest first."""
    return await service.get_recently_hired(months)


@router.get("/salary/greater-than/{amount}", response_model=list[EmployeeResponse])
async def get_salary_greater_than(
    service: ServiceDep,
    amount: Decimal,
) -> list[EmployeeResponse]:
    """List employees earning strictly more than an amount."""
    return await service.get_salary_greater_than(amount)


@router.get("/salary/between", response_model=list[EmployeeResponse])
async def get_salary_between(
    service: ServiceDep,
    min_salary: Annotated[Decimal, Query(alias="minSalary")],
    max_salary: Annotated[Decimal, Query(alias="maxSalary")],
) -> list[EmployeeResponse]:
    """List employees earning within an inclusive salary range."""
    return await service.get_salary_between(min_salary, max_salary)


# =============================================================================
# Statistics
# =============================================================================


@router.get("/statistics/departments", response_model=dict[str, int])
async def get_department_statistics(service: ServiceDep) -> dict[str, int]:
    """Employee count per department."""
    return await service.get_department_statistics()


@router.get("/statistics/status", response_model=dict[str, int])
async def get_status_statistics(service: ServiceDep) -> dict[str, int]:
    """Employee count per status."""
    return await service.get_status_statistics()


# =============================================================================
# Single Employee
# =============================================================================


@router.get("/{employee_id}", response_model=EmployeeResponse)
async def get_employee(
    service: ServiceDep,
    employee_id: int,
) -> EmployeeResponse:
    """Get an employee by id."""
    return await service.get_employee(employee_id)


@router.put("/{employee_id}", response_model=EmployeeResponse)
@limiter.limit(MUTATION_LIMIT)
async def update_employee(
    request: Request,
    employee_id: int,
    data: EmployeeRequest,
    service: ServiceDep,
) -> EmployeeResponse:
    """Replace all mutable fields of an employee.

    Returns 404 for an unknown id and 409 if the new email belongs
    to another employee.
    """
    return await service.update_employee(employee_id, data)


@router.delete("/{employee_id}", status_code=status.HTTP_204_NO_CONTENT)
@limiter.limit(MUTATION_LIMIT)
async def delete_employee(
    request: Request,
    employee_id: int,
    service: ServiceDep,
) -> None:
    """Delete an employee permanently."""
    await service.delete_employee(employee_id)
