"""View models handed to a renderer.

Plain dataclasses built from API payloads. They carry formatted text only;
how they are drawn is up to the renderer.
"""

from dataclasses import dataclass, field
from typing import Any, Literal

from employee_dashboard.formatting import format_currency, format_date, status_badge_class

ToastLevel = Literal["success", "error", "warning", "info"]

TOAST_DURATION_MS = 5000


@dataclass(frozen=True)
class EmployeeRow:
    id: int
    full_name: str
    email: str
    department: str
    position: str
    salary: str
    hire_date: str
    status: str
    status_badge: str


@dataclass(frozen=True)
class PageButton:
    """A page link, or an ellipsis when ``page`` is None."""

    page: int | None
    label: str
    active: bool = False

    @property
    def is_ellipsis(self) -> bool:
        return self.page is None


@dataclass(frozen=True)
class PaginationView:
    info: str
    buttons: list[PageButton]
    previous_disabled: bool
    next_disabled: bool


@dataclass(frozen=True)
class DashboardStats:
    total_employees: int
    active_employees: int
    total_departments: int
    recent_hires: int


@dataclass(frozen=True)
class StatsItem:
    label: str
    value: str


@dataclass(frozen=True)
class ChartData:
    label: str
    labels: list[str]
    values: list[int]
    colors: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class Toast:
    message: str
    level: ToastLevel = "info"
    duration_ms: int = TOAST_DURATION_MS


def employee_row(employee: dict[str, Any]) -> EmployeeRow:
    return EmployeeRow(
        id=employee["id"],
        full_name=f"{employee['firstName']} {employee['lastName']}",
        email=employee.get("email", ""),
        department=employee.get("department", ""),
        position=employee.get("position", ""),
        salary=format_currency(employee.get("salary")),
        hire_date=format_date(employee.get("hireDate")),
        status=employee.get("status", ""),
        status_badge=status_badge_class(employee.get("status")),
    )


def employee_rows(employees: list[dict[str, Any]]) -> list[EmployeeRow]:
    return [employee_row(employee) for employee in employees]


def page_buttons(current: int, total_pages: int) -> list[PageButton]:
    """Page links around the current page.

    Always shows the first and last page, the pages either side of the
    current one, and an ellipsis for each gap.
    """
    buttons: list[PageButton] = []
    if total_pages > 0:
        buttons.append(PageButton(0, "1", current == 0))
    if current > 2:
        buttons.append(PageButton(None, "..."))
    for page in range(max(1, current - 1), min(total_pages - 2, current + 1) + 1):
        if 0 < page < total_pages - 1:
            buttons.append(PageButton(page, str(page + 1), current == page))
    if current < total_pages - 3:
        buttons.append(PageButton(None, "..."))
    if total_pages > 1:
        buttons.append(PageButton(total_pages - 1, str(total_pages), current == total_pages - 1))
    return buttons


def pagination_view(page: dict[str, Any]) -> PaginationView:
    """Build the pagination bar from a page envelope."""
    number = page["number"]
    size = page["size"]
    total = page["totalElements"]
    empty = page.get("empty", not page.get("content"))
    start = 0 if empty else number * size + 1
    end = min((number + 1) * size, total)
    return PaginationView(
        info=f"Showing {start}-{end} of {total} employees",
        buttons=page_buttons(number, page["totalPages"]),
        previous_disabled=page["first"],
        next_disabled=page["last"],
    )


def stats_items(stats: dict[str, int], unit: str = "employees") -> list[StatsItem]:
    """Aggregate counts as label/value pairs, largest first."""
    ordered = sorted(stats.items(), key=lambda item: item[1], reverse=True)
    return [StatsItem(label, f"{count} {unit}") for label, count in ordered]
