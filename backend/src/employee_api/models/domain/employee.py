"""Employee domain model."""

from enum import StrEnum


class EmployeeStatus(StrEnum):
    """Employment status of an employee."""

    ACTIVE = "ACTIVE"
    INACTIVE = "INACTIVE"
    ON_LEAVE = "ON_LEAVE"
    TERMINATED = "TERMINATED"


class SortDirection(StrEnum):
    """Sort direction accepted by paged queries."""

    ASC = "asc"
    DESC = "desc"
