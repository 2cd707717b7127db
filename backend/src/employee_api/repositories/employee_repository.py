"""Employee repository."""

from datetime import date
from decimal import Decimal

from sqlalchemy import func, or_, select

from employee_api.models.domain.employee import EmployeeStatus, SortDirection
from employee_api.models.orm.employee import EmployeeORM
from employee_api.repositories.base import BaseRepository
from employee_api.utils.validation import escape_like_wildcards


def _contains(column, term: str):
    """Case-insensitive substring match with LIKE wildcards escaped."""
    pattern = f"%{escape_like_wildcards(term.lower())}%"
    return func.lower(column).like(pattern, escape="\\")


class EmployeeRepository(BaseRepository[EmployeeORM]):
    """Repository for employee queries.

    Each lookup is an explicit, named query. Paged lookups take an ORM
    sort column (already whitelisted by the caller), a direction, and an
    offset/limit pair, and return (records, total_count).
    """

    model = EmployeeORM

    # -------------------------------------------------------------------------
    # Exact match
    # -------------------------------------------------------------------------

    async def find_by_email(self, email: str) -> EmployeeORM | None:
        """Get employee by email (case-insensitive).

        Args:
            email: Employee email address

        Returns:
            EmployeeORM or None if not found
        """
        result = await self.session.execute(
            select(EmployeeORM).where(func.lower(EmployeeORM.email) == email.lower())
        )
        return result.scalar_one_or_none()

    async def find_by_status(self, status: EmployeeStatus) -> list[EmployeeORM]:
        """Get all employees with a status, ordered by id."""
        return await self._list(
            select(EmployeeORM)
            .where(EmployeeORM.status == status.value)
            .order_by(EmployeeORM.id)
        )

    async def find_by_department(self, department: str) -> list[EmployeeORM]:
        """Get all employees in a department, ordered by id."""
        return await self._list(
            select(EmployeeORM)
            .where(EmployeeORM.department == department)
            .order_by(EmployeeORM.id)
        )

    async def find_by_department_paged(
        self,
        department: str,
        sort_column: str = "id",
        sort_dir: SortDirection = SortDirection.ASC,
        offset: int = 0,
        limit: int = 10,
    ) -> tuple[list[EmployeeORM], int]:
        """Get one page of employees in a department."""
        query = select(EmployeeORM).where(EmployeeORM.department == department)
        return await self._page(query, sort_column, sort_dir, offset, limit)

    async def find_by_position(self, position: str) -> list[EmployeeORM]:
        """Get all employees holding a position, ordered by id."""
        return await self._list(
            select(EmployeeORM)
            .where(EmployeeORM.position == position)
            .order_by(EmployeeORM.id)
        )

    async def find_by_position_paged(
        self,
        position: str,
        sort_column: str = "id",
        sort_dir: SortDirection = SortDirection.ASC,
        offset: int = 0,
        limit: int = 10,
    ) -> tuple[list[EmployeeORM], int]:
        """Get one page of employees holding a position."""
        query = select(EmployeeORM).where(EmployeeORM.position == position)
        return await self._page(query, sort_column, sort_dir, offset, limit)

    async def find_by_department_and_status(
        self, department: str, status: EmployeeStatus
    ) -> list[EmployeeORM]:
        """Get employees matching both a department and a status."""
        return await self._list(
            select(EmployeeORM)
            .where(EmployeeORM.department == department)
            .where(EmployeeORM.status == status.value)
            .order_by(EmployeeORM.id)
        )

    # -------------------------------------------------------------------------
    # Ranges
    # -------------------------------------------------------------------------

    async def find_by_hire_date_between(self, start_date: date, end_date: date) -> list[EmployeeORM]:
        """Get employees hired within [start_date, end_date], both inclusive."""
        return await self._list(
            select(EmployeeORM)
            .where(EmployeeORM.hire_date.between(start_date, end_date))
            .order_by(EmployeeORM.hire_date, EmployeeORM.id)
        )

    async def find_recently_hired(self, threshold: date) -> list[EmployeeORM]:
        """Get employees hired on or after a date, newest first."""
        return await self._list(
            select(EmployeeORM)
            .where(EmployeeORM.hire_date >= threshold)
            .order_by(EmployeeORM.hire_date.desc(), EmployeeORM.id)
        )

    async def find_by_salary_greater_than(self, amount: Decimal) -> list[EmployeeORM]:
        """Get employees earning strictly more than an amount."""
        return await self._list(
            select(EmployeeORM)
            .where(EmployeeORM.salary > amount)
            .order_by(EmployeeORM.id)
        )

    async def find_by_salary_between(
        self, min_salary: Decimal, max_salary: Decimal
    ) -> list[EmployeeORM]:
        """Get employees earning within [min_salary, max_salary], both inclusive."""
        return await self._list(
            select(EmployeeORM)
            .where(EmployeeORM.salary.between(min_salary, max_salary))
            .order_by(EmployeeORM.id)
        )

    # -------------------------------------------------------------------------
    # Free-text search and listing
    # -------------------------------------------------------------------------

    async def find_by_name_containing(self, term: str) -> list[EmployeeORM]:
        """Get employees whose first or last name contains a term."""
        return await self._list(
            select(EmployeeORM)
            .where(or_(_contains(EmployeeORM.first_name, term), _contains(EmployeeORM.last_name, term)))
            .order_by(EmployeeORM.id)
        )

    async def search(
        self,
        term: str | None,
        sort_column: str = "id",
        sort_dir: SortDirection = SortDirection.ASC,
        offset: int = 0,
        limit: int = 10,
    ) -> tuple[list[EmployeeORM], int]:
        """Search employees by substring, case-insensitively.

        Matches first name, last name, email, department or position.
        A missing term matches everything.

        Args:
            term: Search text
            sort_column: ORM attribute to sort by
            sort_dir: Sort direction
            offset: Pagination offset
            limit: Pagination limit

        Returns:
            Tuple of (employees, total_count)
        """
        query = select(EmployeeORM)
        if term:
            query = query.where(
                or_(
                    _contains(EmployeeORM.first_name, term),
                    _contains(EmployeeORM.last_name, term),
                    _contains(EmployeeORM.email, term),
                    _contains(EmployeeORM.department, term),
                    _contains(EmployeeORM.position, term),
                )
            )
        return await self._page(query, sort_column, sort_dir, offset, limit)

    async def find_all_paged(
        self,
        sort_column: str = "id",
        sort_dir: SortDirection = SortDirection.ASC,
        offset: int = 0,
        limit: int = 10,
    ) -> tuple[list[EmployeeORM], int]:
        """Get one page of all employees."""
        return await self._page(select(EmployeeORM), sort_column, sort_dir, offset, limit)

    # -------------------------------------------------------------------------
    # Aggregates
    # -------------------------------------------------------------------------

    async def count_by_department(self) -> list[tuple[str, int]]:
        """Count employees grouped by department.

        Returns:
            List of (department, count) ordered by department
        """
        result = await self.session.execute(
            select(EmployeeORM.department, func.count(EmployeeORM.id))
            .group_by(EmployeeORM.department)
            .order_by(EmployeeORM.department)
        )
        return [(department, count) for department, count in result.all()]

    async def count_by_status(self) -> list[tuple[str, int]]:
        """Count employees grouped by status.

        Returns:
            List of (status, count) ordered by status
        """
        result = await self.session.execute(
            select(EmployeeORM.status, func.count(EmployeeORM.id))
            .group_by(EmployeeORM.status)
            .order_by(EmployeeORM.status)
        )
        return [(status, count) for status, count in result.all()]

    # -------------------------------------------------------------------------
    # Existence checks
    # -------------------------------------------------------------------------

    async def exists_by_email(self, email: str) -> bool:
        """Check if any employee uses an email (case-insensitive)."""
        query = select(func.count()).select_from(EmployeeORM).where(
            func.lower(EmployeeORM.email) == email.lower()
        )
        result = await self.session.execute(query)
        return result.scalar_one() > 0

    async def exists_by_email_excluding_id(self, email: str, employee_id: int) -> bool:
        """Check if an employee other than `employee_id` uses an email."""
        query = (
            select(func.count())
            .select_from(EmployeeORM)
            .where(func.lower(EmployeeORM.email) == email.lower())
            .where(EmployeeORM.id != employee_id)
        )
        result = await self.session.execute(query)
        return result.scalar_one() > 0
