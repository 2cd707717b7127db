"""Chart datasets for the dashboard and reports."""

from collections import Counter
from typing import Any

from employee_dashboard.views import ChartData

BASE_COLORS = [
    "#3b82f6",
    "#10b981",
    "#f59e0b",
    "#ef4444",
    "#8b5cf6",
    "#06b6d4",
    "#84cc16",
    "#f97316",
    "#ec4899",
    "#6366f1",
    "#14b8a6",
    "#f59e0b",
]

STATUS_LABELS = {
    "ACTIVE": "Active",
    "INACTIVE": "Inactive",
    "ON_LEAVE": "On Leave",
    "TERMINATED": "Terminated",
}

STATUS_COLORS = {
    "ACTIVE": "#10b981",
    "INACTIVE": "#ef4444",
    "ON_LEAVE": "#f59e0b",
    "TERMINATED": "#6b7280",
}
DEFAULT_STATUS_COLOR = "#6b7280"

HIRING_TREND_COLOR = "#10b981"

# Spreads generated hues around the colour wheel
_HUE_STEP = 137


def generate_colors(count: int) -> list[str]:
    """Base palette first, then generated HSL colours for the remainder."""
    if count <= len(BASE_COLORS):
        return BASE_COLORS[:count]
    colors = list(BASE_COLORS)
    for index in range(count - len(BASE_COLORS)):
        hue = (index * _HUE_STEP) % 360
        colors.append(f"hsl({hue}, 60%, 55%)")
    return colors


def department_chart(stats: dict[str, int]) -> ChartData:
    departments = list(stats)
    return ChartData(
        label="Employees by Department",
        labels=departments,
        values=[stats[name] for name in departments],
        colors=generate_colors(len(departments)),
    )


def status_chart(stats: dict[str, int]) -> ChartData:
    statuses = list(stats)
    return ChartData(
        label="Employees by Status",
        labels=[STATUS_LABELS.get(status, status) for status in statuses],
        values=[stats[status] for status in statuses],
        colors=[STATUS_COLORS.get(status, DEFAULT_STATUS_COLOR) for status in statuses],
    )


def monthly_hires(employees: list[dict[str, Any]]) -> dict[str, int]:
    """Count hires per ``YYYY-MM``, newest month first."""
    counts = Counter(employee["hireDate"][:7] for employee in employees if employee.get("hireDate"))
    return dict(sorted(counts.items(), reverse=True))


def hiring_trend_chart(employees: list[dict[str, Any]]) -> ChartData:
    """Line series of hires per month in chronological order."""
    counts = monthly_hires(employees)
    months = sorted(counts)
    return ChartData(
        label="New Hires",
        labels=months,
        values=[counts[month] for month in months],
        colors=[HIRING_TREND_COLOR],
    )
