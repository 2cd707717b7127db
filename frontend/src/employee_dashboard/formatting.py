"""Display formatting and CSV export for employee records."""

import csv
import io
from datetime import date
from decimal import Decimal
from typing import Any

STATUS_BADGE_CLASSES = {
    "ACTIVE": "status-active",
    "INACTIVE": "status-inactive",
    "ON_LEAVE": "status-on-leave",
    "TERMINATED": "status-terminated",
}
DEFAULT_BADGE_CLASS = "status-inactive"

CSV_HEADERS = [
    "ID",
    "First Name",
    "Last Name",
    "Email",
    "Department",
    "Position",
    "Salary",
    "Hire Date",
    "Status",
]
CSV_FIELDS = [
    "id",
    "firstName",
    "lastName",
    "email",
    "department",
    "position",
    "salary",
    "hireDate",
    "status",
]


def format_currency(amount: Decimal | float | int | str | None) -> str:
    """Format an amount as US dollars, e.g. ``$1,234.56``."""
    if amount is None or amount == "":
        return ""
    value = Decimal(str(amount)).quantize(Decimal("0.01"))
    sign = "-" if value < 0 else ""
    return f"{sign}${abs(value):,.2f}"


def parse_date(value: date | str) -> date:
    if isinstance(value, date):
        return value
    return date.fromisoformat(value[:10])


def format_date(value: date | str | None) -> str:
    """Format an ISO date as ``Jan 5, 2024``."""
    if not value:
        return ""
    parsed = parse_date(value)
    return f"{parsed:%b} {parsed.day}, {parsed.year}"


def format_month(month_key: str) -> str:
    """Format a ``YYYY-MM`` key as ``January 2024``."""
    parsed = date.fromisoformat(f"{month_key}-01")
    return f"{parsed:%B} {parsed.year}"


def status_badge_class(status: str | None) -> str:
    return STATUS_BADGE_CLASSES.get(status or "", DEFAULT_BADGE_CLASS)


def format_employee_for_display(employee: dict[str, Any]) -> dict[str, Any]:
    """Copy of an employee record with presentation fields added."""
    return {
        **employee,
        "fullName": f"{employee.get('firstName', '')} {employee.get('lastName', '')}".strip(),
        "formattedSalary": format_currency(employee.get("salary")),
        "formattedHireDate": format_date(employee.get("hireDate")),
        "statusBadge": status_badge_class(employee.get("status")),
    }


def employees_to_csv(employees: list[dict[str, Any]]) -> str:
    """Render employees as CSV text with a header row."""
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow(CSV_HEADERS)
    for employee in employees:
        writer.writerow(["" if employee.get(field) is None else employee.get(field) for field in CSV_FIELDS])
    return buffer.getvalue()


def csv_export_filename(today: date | None = None) -> str:
    return f"employees_{(today or date.today()).isoformat()}.csv"
