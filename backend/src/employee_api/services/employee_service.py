"""Employee service: business rules over the employee repository."""

import logging
from collections.abc import Callable
from datetime import date
from decimal import Decimal

from sqlalchemy.ext.asyncio import AsyncSession

from employee_api.constants.validation import DEFAULT_PAGE, DEFAULT_PAGE_SIZE
from employee_api.exceptions import DuplicateEmailError, EmployeeNotFoundError
from employee_api.models.domain.employee import EmployeeStatus
from employee_api.models.dto.employee import EmployeeRequest, EmployeeResponse
from employee_api.models.dto.page import PageResponse
from employee_api.models.orm.employee import EmployeeORM
from employee_api.repositories.employee_repository import EmployeeRepository
from employee_api.utils.dates import subtract_months
from employee_api.utils.validation import (
    sanitize_filter_value,
    sanitize_search,
    validate_sort_by,
    validate_sort_dir,
)

logger = logging.getLogger(__name__)


class EmployeeService:
    """Service for employee CRUD, filtered queries and statistics."""

    def __init__(self, session: AsyncSession, today: Callable[[], date] = date.today) -> None:
        """Initialize service with database session.

        Args:
            session: Database session
            today: Clock used for date windows such as recently hired
        """
        self.session = session
        self.employee_repo = EmployeeRepository(session)
        self._today = today

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    @staticmethod
    def _to_response(employee: EmployeeORM) -> EmployeeResponse:
        return EmployeeResponse.model_validate(employee)

    def _to_responses(self, employees: list[EmployeeORM]) -> list[EmployeeResponse]:
        return [self._to_response(e) for e in employees]

    def _to_page(
        self, result: tuple[list[EmployeeORM], int], page: int, size: int
    ) -> PageResponse[EmployeeResponse]:
        employees, total = result
        return PageResponse[EmployeeResponse].build(self._to_responses(employees), total, page, size)

    @staticmethod
    def _field_values(data: EmployeeRequest) -> dict:
        """Map a request to ORM column values, excluding status."""
        return {
            "first_name": data.first_name,
            "last_name": data.last_name,
            "email": data.email.strip(),
            "phone_number": data.phone_number,
            "position": data.position,
            "department": data.department,
            "salary": data.salary,
            "hire_date": data.hire_date,
            "address": data.address,
            "city": data.city,
            "state": data.state,
            "zip_code": data.zip_code,
            "emergency_contact_name": data.emergency_contact_name,
            "emergency_contact_phone": data.emergency_contact_phone,
        }

    async def _get_or_raise(self, employee_id: int) -> EmployeeORM:
        employee = await self.employee_repo.get_by_id(employee_id)
        if employee is None:
            raise EmployeeNotFoundError(employee_id)
        return employee

    # -------------------------------------------------------------------------
    # CRUD
    # -------------------------------------------------------------------------

    async def create_employee(self, data: EmployeeRequest) -> EmployeeResponse:
        """Create an employee.

        Args:
            data: Employee fields

        Returns:
            Created EmployeeResponse with id and timestamps assigned

        Raises:
            DuplicateEmailError: If the email is already in use
        """
        values = self._field_values(data)
        if await self.employee_repo.exists_by_email(values["email"]):
            raise DuplicateEmailError(values["email"])

        status = data.status or EmployeeStatus.ACTIVE
        employee = await self.employee_repo.create(status=status.value, **values)

        logger.info("Created employee %s", employee.id)
        return self._to_response(employee)

    async def get_employee(self, employee_id: int) -> EmployeeResponse:
        """Get an employee by id.

        Raises:
            EmployeeNotFoundError: If no employee has this id
        """
        return self._to_response(await self._get_or_raise(employee_id))

    async def update_employee(self, employee_id: int, data: EmployeeRequest) -> EmployeeResponse:
        """Replace all mutable fields of an employee.

        The current status is kept when the request omits it.

        Args:
            employee_id: Employee id
            data: New field values

        Returns:
            Updated EmployeeResponse

        Raises:
            EmployeeNotFoundError: If no employee has this id
            DuplicateEmailError: If the new email belongs to another employee
        """
        employee = await self._get_or_raise(employee_id)

        values = self._field_values(data)
        # Emails are stored as submitted but unique regardless of case
        if values["email"].lower() != employee.email.lower():
            if await self.employee_repo.exists_by_email_excluding_id(values["email"], employee_id):
                raise DuplicateEmailError(values["email"])

        if data.status is not None:
            values["status"] = data.status.value

        employee = await self.employee_repo.update(employee, **values)

        logger.info("Updated employee %s", employee_id)
        return self._to_response(employee)

    async def delete_employee(self, employee_id: int) -> None:
        """Delete an employee permanently.

        Raises:
            EmployeeNotFoundError: If no employee has this id
        """
        employee = await self._get_or_raise(employee_id)
        await self.employee_repo.delete(employee)
        logger.info("Deleted employee %s", employee_id)

    # -------------------------------------------------------------------------
    # Paged listing and filtering
    # -------------------------------------------------------------------------

    async def list_employees(
        self,
        page: int = DEFAULT_PAGE,
        size: int = DEFAULT_PAGE_SIZE,
        sort_by: str | None = None,
        sort_dir: str | None = None,
    ) -> PageResponse[EmployeeResponse]:
        """Get one page of all employees.

        Raises:
            InvalidSortFieldError: If sort_by is not a sortable field
            InvalidSortDirectionError: If sort_dir is not asc/desc
        """
        column = validate_sort_by(sort_by)
        direction = validate_sort_dir(sort_dir)
        result = await self.employee_repo.find_all_paged(column, direction, page * size, size)
        return self._to_page(result, page, size)

    async def search_employees(
        self,
        query: str | None,
        page: int = DEFAULT_PAGE,
        size: int = DEFAULT_PAGE_SIZE,
        sort_by: str | None = None,
        sort_dir: str | None = None,
    ) -> PageResponse[EmployeeResponse]:
        """Case-insensitive substring search over names, email, department and position.

        An empty query returns the unfiltered list.
        """
        column = validate_sort_by(sort_by)
        direction = validate_sort_dir(sort_dir)
        term = sanitize_search(query)
        result = await self.employee_repo.search(term, column, direction, page * size, size)
        return self._to_page(result, page, size)

    async def get_by_department(
        self,
        department: str,
        page: int = DEFAULT_PAGE,
        size: int = DEFAULT_PAGE_SIZE,
        sort_by: str | None = None,
        sort_dir: str | None = None,
    ) -> PageResponse[EmployeeResponse]:
        """Get one page of employees in a department."""
        column = validate_sort_by(sort_by)
        direction = validate_sort_dir(sort_dir)
        department = sanitize_filter_value(department) or ""
        result = await self.employee_repo.find_by_department_paged(
            department, column, direction, page * size, size
        )
        return self._to_page(result, page, size)

    async def get_by_position(
        self,
        position: str,
        page: int = DEFAULT_PAGE,
        size: int = DEFAULT_PAGE_SIZE,
        sort_by: str | None = None,
        sort_dir: str | None = None,
    ) -> PageResponse[EmployeeResponse]:
        """Get one page of employees holding a position."""
        column = validate_sort_by(sort_by)
        direction = validate_sort_dir(sort_dir)
        position = sanitize_filter_value(position) or ""
        result = await self.employee_repo.find_by_position_paged(
            position, column, direction, page * size, size
        )
        return self._to_page(result, page, size)

    # -------------------------------------------------------------------------
    # Unpaged filters
    # -------------------------------------------------------------------------

    async def get_by_status(self, status: EmployeeStatus) -> list[EmployeeResponse]:
        """Get all employees with a status."""
        return self._to_responses(await self.employee_repo.find_by_status(status))

    async def get_by_department_and_status(
        self, department: str, status: EmployeeStatus
    ) -> list[EmployeeResponse]:
        """Get all employees in a department with a status."""
        employees = await self.employee_repo.find_by_department_and_status(department, status)
        return self._to_responses(employees)

    async def get_by_name(self, term: str) -> list[EmployeeResponse]:
        """Get employees whose first or last name contains a term."""
        term = sanitize_search(term)
        if term is None:
            return []
        return self._to_responses(await self.employee_repo.find_by_name_containing(term))

    async def get_hired_between(self, start_date: date, end_date: date) -> list[EmployeeResponse]:
        """Get employees hired within an inclusive date window."""
        employees = await self.employee_repo.find_by_hire_date_between(start_date, end_date)
        return self._to_responses(employees)

    async def get_recently_hired(self, months: int) -> list[EmployeeResponse]:
        """Get employees hired within the last `months` calendar months, newest first."""
        threshold = subtract_months(self._today(), months)
        return self._to_responses(await self.employee_repo.find_recently_hired(threshold))

    async def get_salary_greater_than(self, amount: Decimal) -> list[EmployeeResponse]:
        """Get employees earning strictly more than an amount."""
        return self._to_responses(await self.employee_repo.find_by_salary_greater_than(amount))

    async def get_salary_between(
        self, min_salary: Decimal, max_salary: Decimal
    ) -> list[EmployeeResponse]:
        """Get employees earning within an inclusive salary range."""
        employees = await self.employee_repo.find_by_salary_between(min_salary, max_salary)
        return self._to_responses(employees)

    # -------------------------------------------------------------------------
    # Statistics
    # -------------------------------------------------------------------------

    async def get_department_statistics(self) -> dict[str, int]:
        """Count employees per department.

        Returns:
            Mapping of department name to employee count, ordered by name
        """
        return dict(await self.employee_repo.count_by_department())

    async def get_status_statistics(self) -> dict[str, int]:
        """Count employees per status.

        Returns:
            Mapping of status name to employee count, ordered by name
        """
        return dict(await self.employee_repo.count_by_status())
