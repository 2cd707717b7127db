"""Input validation utilities to prevent injection attacks."""

from employee_api.constants.validation import (
    DEFAULT_SORT_DIRECTION,
    DEFAULT_SORT_FIELD,
    EMPLOYEE_SORT_COLUMNS,
    MAX_PATH_FILTER_LENGTH,
    MAX_SEARCH_LENGTH,
)
from employee_api.exceptions import InvalidSortDirectionError, InvalidSortFieldError
from employee_api.models.domain.employee import SortDirection


def sanitize_search(search: str | None, max_length: int = MAX_SEARCH_LENGTH) -> str | None:
    """Sanitize free-text search input.

    Args:
        search: Raw search string
        max_length: Maximum allowed length

    Returns:
        Sanitized search string or None
    """
    if search is None:
        return None

    search = search[:max_length]

    # SQLAlchemy parameterizes these anyway
    search = search.replace("\x00", "").replace(";", "").replace("--", "")

    return search.strip() or None


def sanitize_filter_value(value: str | None, max_length: int = MAX_PATH_FILTER_LENGTH) -> str | None:
    """Sanitize an exact-match filter value such as a department or position.

    Args:
        value: Raw filter value
        max_length: Maximum allowed length

    Returns:
        Stripped value, or None if nothing is left
    """
    if value is None:
        return None
    value = value.replace("\x00", "")[:max_length].strip()
    return value or None


def validate_sort_by(sort_by: str | None, allowed_columns: dict[str, str] = EMPLOYEE_SORT_COLUMNS) -> str:
    """Resolve an API sort field name to an ORM attribute name.

    Unknown names are a caller error rather than silently replaced.

    Args:
        sort_by: API field name (camelCase), or None for the default
        allowed_columns: Mapping of API field names to ORM attribute names

    Returns:
        ORM attribute name

    Raises:
        InvalidSortFieldError: If the field is not whitelisted
    """
    field = (sort_by or DEFAULT_SORT_FIELD).strip()
    if field not in allowed_columns:
        raise InvalidSortFieldError(field, sorted(allowed_columns))
    return allowed_columns[field]


def validate_sort_dir(sort_dir: str | None) -> SortDirection:
    """Parse a sort direction, case-insensitively.

    Args:
        sort_dir: "asc" or "desc", or None for the default

    Returns:
        SortDirection

    Raises:
        InvalidSortDirectionError: If the direction is unknown
    """
    value = (sort_dir or DEFAULT_SORT_DIRECTION).strip().lower()
    try:
        return SortDirection(value)
    except ValueError:
        raise InvalidSortDirectionError(sort_dir or "") from None


def escape_like_wildcards(value: str) -> str:
    """Escape SQL LIKE wildcards so they match literally.

    The % and _ characters have special meaning in SQL LIKE patterns:
    - % matches any sequence of characters
    - _ matches any single character

    Args:
        value: Raw string

    Returns:
        String with backslash, % and _ escaped (use escape="\\\\")
    """
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
