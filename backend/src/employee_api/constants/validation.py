"""Centralized validation constants for the employee API.

This module provides a single source of truth for validation patterns,
whitelists, default values, and limits used across DTOs, routers and
repositories.
"""

import re
from typing import Final

# =============================================================================
# Field Constraints
# =============================================================================

NAME_MIN_LENGTH: Final[int] = 2
NAME_MAX_LENGTH: Final[int] = 50

SALARY_INTEGER_DIGITS: Final[int] = 10
SALARY_FRACTION_DIGITS: Final[int] = 2

# E.164-like: optional leading +, no leading zero, 2-15 digits in total
PHONE_PATTERN: Final[str] = r"^\+?[1-9]\d{1,14}$"

# 5 digits, optionally followed by -4 digits
ZIP_CODE_PATTERN: Final[str] = r"^\d{5}(-\d{4})?$"

PHONE_REGEX: Final[re.Pattern[str]] = re.compile(PHONE_PATTERN)
ZIP_CODE_REGEX: Final[re.Pattern[str]] = re.compile(ZIP_CODE_PATTERN)

# =============================================================================
# Pagination & Sorting
# =============================================================================

DEFAULT_PAGE: Final[int] = 0
DEFAULT_PAGE_SIZE: Final[int] = 10
MAX_PAGE_SIZE: Final[int] = 500
DEFAULT_SORT_FIELD: Final[str] = "id"
DEFAULT_SORT_DIRECTION: Final[str] = "asc"

# API field name -> ORM attribute name
EMPLOYEE_SORT_COLUMNS: Final[dict[str, str]] = {
    "id": "id",
    "firstName": "first_name",
    "lastName": "last_name",
    "email": "email",
    "phoneNumber": "phone_number",
    "department": "department",
    "position": "position",
    "salary": "salary",
    "hireDate": "hire_date",
    "status": "status",
    "city": "city",
    "state": "state",
    "zipCode": "zip_code",
    "createdAt": "created_at",
    "updatedAt": "updated_at",
}

# =============================================================================
# Input Limits
# =============================================================================

MAX_SEARCH_LENGTH: Final[int] = 200
MAX_PATH_FILTER_LENGTH: Final[int] = 255

# Upper bound for the recently-hired window
MAX_RECENT_HIRE_MONTHS: Final[int] = 1200
