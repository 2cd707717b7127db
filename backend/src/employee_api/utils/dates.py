"""Calendar helpers."""

import calendar
from datetime import date


def subtract_months(value: date, months: int) -> date:
    """Move a date back by whole calendar months.

    The day is clamped to the last day of the target month, so
    2024-08-31 minus 6 months is 2024-02-29.

    Args:
        value: Starting date
        months: Number of months to go back (negative moves forward)

    Returns:
        Shifted date
    """
    month_index = value.year * 12 + (value.month - 1) - months
    year, month = divmod(month_index, 12)
    month += 1
    day = min(value.day, calendar.monthrange(year, month)[1])
    return date(year, month, day)
