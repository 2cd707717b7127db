"""Headless dashboard controller.

``DashboardController`` owns the view state and exposes one coroutine per
user action. Each action re-fetches what it needs from the API and hands
view models to a ``Renderer``; nothing is patched locally after a mutation.
"""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from datetime import date
from decimal import Decimal
from pathlib import Path
from typing import Any, Protocol

from employee_dashboard import charts
from employee_dashboard.api_client import DashboardData, EmployeeAPIClient, SearchCriteria
from employee_dashboard.config import ClientSettings, get_client_settings
from employee_dashboard.exceptions import APIError
from employee_dashboard.formatting import csv_export_filename, employees_to_csv, format_month
from employee_dashboard.preferences import Preferences, load_preferences, save_preferences
from employee_dashboard.shortcuts import SHORTCUT_HELP, KeyEvent, ShortcutAction, resolve_shortcut
from employee_dashboard.state import Section, ViewState
from employee_dashboard.validation import normalize_form, validate_employee
from employee_dashboard.views import (
    TOAST_DURATION_MS,
    ChartData,
    DashboardStats,
    EmployeeRow,
    PaginationView,
    StatsItem,
    Toast,
    ToastLevel,
    employee_rows,
    pagination_view,
    stats_items,
)

logger = logging.getLogger(__name__)

DEFAULT_SALARY_THRESHOLD = Decimal("70000")
SALARY_BAND_RATIO = Decimal("0.7")
DEFAULT_HIRING_MONTHS = 6
DEPARTMENT_OPTIONS_PAGE_SIZE = 100
EXPORT_PAGE_SIZE = 500


class Renderer(Protocol):
    """Drawing surface for the dashboard."""

    def set_loading(self, loading: bool) -> None: ...

    def show_section(self, section: Section) -> None: ...

    def render_dashboard(
        self,
        stats: DashboardStats,
        recent: list[EmployeeRow],
        department_chart: ChartData,
        status_chart: ChartData,
    ) -> None: ...

    def render_employees(self, rows: list[EmployeeRow], pagination: PaginationView | None) -> None: ...

    def render_department_options(self, departments: list[str]) -> None: ...

    def render_search_results(self, rows: list[EmployeeRow]) -> None: ...

    def clear_search_results(self) -> None: ...

    def render_reports(self, departments: list[StatsItem], statuses: list[StatsItem]) -> None: ...

    def render_salary_analysis(self, items: list[StatsItem]) -> None: ...

    def render_hiring_trends(self, items: list[StatsItem], chart: ChartData) -> None: ...

    def open_modal(self, mode: str, employee: dict[str, Any]) -> None: ...

    def close_modal(self) -> None: ...

    def show_validation_errors(self, errors: list[str]) -> None: ...

    def focus_quick_search(self) -> None: ...

    def reset_quick_search(self) -> None: ...

    def apply_theme(self, theme: str) -> None: ...

    def offer_download(self, filename: str, content: str) -> None: ...

    def show_toast(self, toast: Toast) -> None: ...


class Debouncer:
    """Run only the last of a burst of calls, after ``delay`` seconds of quiet."""

    def __init__(self, delay: float) -> None:
        self.delay = delay
        self._task: asyncio.Task[None] | None = None

    def call(self, action: Callable[[], Awaitable[None]]) -> asyncio.Task[None]:
        self.cancel()
        self._task = asyncio.create_task(self._run(action))
        return self._task

    async def _run(self, action: Callable[[], Awaitable[None]]) -> None:
        await asyncio.sleep(self.delay)
        await action()

    def cancel(self) -> None:
        if self._task is not None and not self._task.done():
            self._task.cancel()

    async def wait(self) -> None:
        """Wait for the pending call, if any."""
        if self._task is not None and not self._task.done():
            try:
                await self._task
            except asyncio.CancelledError:
                pass


class DashboardController:
    """State transitions for the employee dashboard."""

    def __init__(
        self,
        api: EmployeeAPIClient,
        renderer: Renderer,
        *,
        preferences: Preferences | None = None,
        preferences_path: Path | None = None,
        search_debounce_ms: int = 300,
        today: Callable[[], date] = date.today,
    ) -> None:
        self.api = api
        self.renderer = renderer
        self.preferences = preferences or Preferences()
        self.preferences_path = preferences_path
        self.state = ViewState(
            page_size=self.preferences.page_size,
            sort_field=self.preferences.default_sort,
            theme=self.preferences.theme,
        )
        self.debouncer = Debouncer(search_debounce_ms / 1000)
        self._today = today
        if self.api.on_loading is None:
            self.api.on_loading = renderer.set_loading

    @classmethod
    def from_settings(
        cls,
        api: EmployeeAPIClient,
        renderer: Renderer,
        settings: ClientSettings | None = None,
        **kwargs: Any,
    ) -> "DashboardController":
        """Build a controller with saved preferences and the configured debounce delay.

        Args:
            api: Client for the employee API
            renderer: Drawing surface
            settings: Client settings, the cached environment settings when omitted
            **kwargs: Passed through to the constructor, e.g. ``today``
        """
        settings = settings or get_client_settings()
        return cls(
            api,
            renderer,
            preferences=load_preferences(settings.preferences_path),
            preferences_path=settings.preferences_path,
            search_debounce_ms=settings.search_debounce_ms,
            **kwargs,
        )

    def _toast(self, message: str, level: ToastLevel = "info", duration_ms: int = TOAST_DURATION_MS) -> None:
        self.renderer.show_toast(Toast(message, level, duration_ms))

    # ==================== Lifecycle ====================

    async def start(self) -> None:
        """Check connectivity, apply the theme and show the dashboard."""
        self.renderer.apply_theme(self.state.theme)
        try:
            await self.api.get_department_statistics()
        except APIError as e:
            logger.warning("API connection test failed: %s", e.message)
            self._toast(
                "Warning: Unable to connect to API. Some features may not work.", "warning", 8000
            )
        await self.show_section("dashboard")

    def shutdown(self) -> None:
        self.debouncer.cancel()
        self.save_preferences()
        self.api.clear_cache()

    def save_preferences(self) -> None:
        self.preferences = self.preferences.model_copy(
            update={
                "theme": self.state.theme,
                "page_size": self.state.page_size,
                "default_sort": self.state.sort_field,
            }
        )
        if self.preferences_path is not None:
            save_preferences(self.preferences, self.preferences_path)

    # ==================== Navigation ====================

    async def show_section(self, section: Section) -> None:
        self.state.section = section
        self.renderer.show_section(section)
        if section == "dashboard":
            await self.load_dashboard()
        elif section == "employees":
            await self.refresh_list()
        elif section == "search":
            await self.load_department_options()
        elif section == "reports":
            await self.load_reports()

    async def load_dashboard(self) -> None:
        try:
            data: DashboardData = await self.api.get_dashboard_data()
        except APIError as e:
            logger.error("Error loading dashboard: %s", e.message)
            self._toast("Error loading dashboard data", "error")
            return
        self.renderer.render_dashboard(
            DashboardStats(
                total_employees=data.total_employees,
                active_employees=data.active_employees,
                total_departments=data.total_departments,
                recent_hires=data.recent_hires,
            ),
            employee_rows(data.recent_employees),
            charts.department_chart(data.department_stats),
            charts.status_chart(data.status_stats),
        )

    # ==================== Employee list ====================

    def _list_criteria(self) -> SearchCriteria:
        return SearchCriteria(
            query=self.state.quick_search.strip() or None,
            department=self.state.department_filter or None,
            status=self.state.status_filter or None,
            page=self.state.page,
            size=self.state.page_size,
            sort_by=self.state.sort_field,
            sort_dir=self.state.sort_direction,
        )

    async def refresh_list(self) -> None:
        """Re-fetch the employee list for the current page, sort and filters."""
        try:
            data = await self.api.advanced_search(self._list_criteria())
        except APIError as e:
            logger.error("Error loading employees: %s", e.message)
            self._toast("Error loading employees", "error")
            return

        if isinstance(data, dict):
            employees = data.get("content", [])
            self.state.last_page = data.get("last", True)
            pagination = pagination_view(data)
        else:
            employees = data
            self.state.last_page = True
            pagination = None

        self.renderer.render_employees(employee_rows(employees), pagination)
        self._remember_departments(employees)

    def _remember_departments(self, employees: list[dict[str, Any]]) -> None:
        known = len(self.state.departments)
        self.state.departments.update(e["department"] for e in employees if e.get("department"))
        if len(self.state.departments) != known:
            self.renderer.render_department_options(sorted(self.state.departments))

    async def next_page(self) -> None:
        if self.state.last_page:
            return
        self.state.page += 1
        await self.refresh_list()

    async def previous_page(self) -> None:
        if self.state.page == 0:
            return
        self.state.page -= 1
        await self.refresh_list()

    async def go_to_page(self, page: int) -> None:
        self.state.page = max(page, 0)
        await self.refresh_list()

    async def change_sort(self, field: str, direction: str) -> None:
        self.state.sort_field = field
        self.state.sort_direction = direction
        self.state.page = 0
        await self.refresh_list()

    async def apply_filters(self, department: str = "", status: str = "") -> None:
        self.state.department_filter = department
        self.state.status_filter = status
        self.state.page = 0
        await self.refresh_list()

    def quick_search(self, text: str) -> asyncio.Task[None]:
        """Schedule a list refresh once typing pauses."""
        self.state.quick_search = text
        return self.debouncer.call(self._run_quick_search)

    async def _run_quick_search(self) -> None:
        self.state.page = 0
        await self.refresh_list()

    async def clear_quick_search(self) -> None:
        self.debouncer.cancel()
        self.state.quick_search = ""
        self.state.page = 0
        self.renderer.reset_quick_search()
        await self.refresh_list()

    # ==================== Add / edit / delete ====================

    def open_add_modal(self) -> None:
        self.state.modal = "add"
        self.state.editing_id = None
        self.renderer.open_modal("add", {"hireDate": self._today().isoformat(), "status": "ACTIVE"})

    async def open_edit_modal(self, employee_id: int) -> None:
        try:
            employee = await self.api.get_employee(employee_id)
        except APIError as e:
            logger.error("Error loading employee %s: %s", employee_id, e.message)
            self._toast("Error loading employee data", "error")
            return
        self.state.modal = "edit"
        self.state.editing_id = employee_id
        self.renderer.open_modal("edit", employee)

    def close_modal(self) -> None:
        self.state.modal = "closed"
        self.state.editing_id = None
        self.renderer.close_modal()

    async def submit_form(self, form: dict[str, Any]) -> bool:
        """Create or update from the modal form. Returns True on success."""
        data = normalize_form(form)
        errors = validate_employee(data)
        if errors:
            self._show_validation_errors(errors)
            return False

        try:
            if self.state.modal == "edit" and self.state.editing_id is not None:
                await self.api.update_employee(self.state.editing_id, data)
                message = "Employee updated successfully"
            else:
                await self.api.create_employee(data)
                message = "Employee created successfully"
        except APIError as e:
            if e.is_validation_error:
                self._show_validation_errors([e.error_message()])
            else:
                logger.error("Error saving employee: %s", e.message)
                self._toast(e.error_message(), "error")
            return False

        self._toast(message, "success")
        self.close_modal()
        await self._after_mutation()
        return True

    def _show_validation_errors(self, errors: list[str]) -> None:
        self.renderer.show_validation_errors(errors)
        self._toast(", ".join(errors), "error")

    async def delete_employee(self, employee_id: int) -> bool:
        try:
            await self.api.delete_employee(employee_id)
        except APIError as e:
            logger.error("Error deleting employee %s: %s", employee_id, e.message)
            self._toast("Error deleting employee", "error")
            return False
        self._toast("Employee deleted successfully", "success")
        await self._after_mutation()
        return True

    async def _after_mutation(self) -> None:
        await self.refresh_list()
        if self.state.section == "dashboard":
            await self.load_dashboard()

    # ==================== Advanced search ====================

    async def load_department_options(self) -> None:
        if self.state.departments:
            return
        try:
            data = await self.api.list_employees(0, DEPARTMENT_OPTIONS_PAGE_SIZE)
        except APIError as e:
            logger.warning("Error loading department options: %s", e.message)
            return
        self._remember_departments(data.get("content", []))

    async def advanced_search(self, criteria: SearchCriteria) -> None:
        try:
            data = await self.api.advanced_search(criteria)
        except APIError as e:
            logger.error("Error performing advanced search: %s", e.message)
            self._toast("Error performing advanced search", "error")
            return
        employees = data.get("content", []) if isinstance(data, dict) else data
        self.renderer.render_search_results(employee_rows(employees))

    def clear_advanced_search(self) -> None:
        self.renderer.clear_search_results()

    # ==================== Reports ====================

    async def load_reports(self) -> None:
        try:
            departments, statuses = await asyncio.gather(
                self.api.get_department_statistics(),
                self.api.get_status_statistics(),
            )
        except APIError as e:
            logger.error("Error loading reports: %s", e.message)
            self._toast("Error loading reports", "error")
            return
        self.renderer.render_reports(stats_items(departments), stats_items(statuses))

    async def salary_analysis(self, threshold: Decimal | int | None = None) -> None:
        """Count employees above the threshold and in the band just below it."""
        upper = Decimal(DEFAULT_SALARY_THRESHOLD if threshold is None else threshold)
        lower = upper * SALARY_BAND_RATIO
        try:
            above, band = await asyncio.gather(
                self.api.get_salary_greater_than(upper),
                self.api.get_salary_between(lower, upper),
            )
        except APIError as e:
            logger.error("Error performing salary analysis: %s", e.message)
            self._toast("Error performing salary analysis", "error")
            return
        self.renderer.render_salary_analysis(
            [
                StatsItem(f"Above ${int(upper):,}", f"{len(above)} employees"),
                StatsItem(f"${int(lower):,} - ${int(upper):,}", f"{len(band)} employees"),
            ]
        )

    async def hiring_trends(self, months: int | None = None) -> None:
        """Recent hires grouped by month, newest first."""
        if months is None:
            months = DEFAULT_HIRING_MONTHS
        try:
            recent = await self.api.get_recently_hired(months)
        except APIError as e:
            logger.error("Error analyzing hiring trends: %s", e.message)
            self._toast("Error analyzing hiring trends", "error")
            return
        per_month = charts.monthly_hires(recent)
        items = [StatsItem(format_month(month), f"{count} hires") for month, count in per_month.items()]
        if not items:
            items = [StatsItem("No recent hires", "")]
        self.renderer.render_hiring_trends(items, charts.hiring_trend_chart(recent))

    async def export_csv(self) -> None:
        try:
            data = await self.api.list_employees(0, EXPORT_PAGE_SIZE)
        except APIError as e:
            logger.error("Export error: %s", e.message)
            self._toast("Error exporting data", "error")
            return
        self.renderer.offer_download(
            csv_export_filename(self._today()), employees_to_csv(data.get("content", []))
        )

    # ==================== Theme & keyboard ====================

    def toggle_theme(self) -> None:
        self.state.theme = "dark" if self.state.theme == "light" else "light"
        self.renderer.apply_theme(self.state.theme)
        self.save_preferences()

    def show_shortcuts_help(self) -> None:
        self._toast("Keyboard Shortcuts:\n" + "\n".join(SHORTCUT_HELP), "info", 10000)

    async def handle_key(self, event: KeyEvent) -> ShortcutAction | None:
        """Dispatch a key press. Returns the action taken, if any."""
        action = resolve_shortcut(event)
        if action is None:
            return None

        if action is ShortcutAction.ADD_EMPLOYEE:
            self.open_add_modal()
        elif action is ShortcutAction.FOCUS_SEARCH:
            self.renderer.focus_quick_search()
        elif action is ShortcutAction.SHOW_DASHBOARD:
            await self.show_section("dashboard")
        elif action is ShortcutAction.SHOW_EMPLOYEES:
            await self.show_section("employees")
        elif action is ShortcutAction.SHOW_SEARCH:
            await self.show_section("search")
        elif action is ShortcutAction.SHOW_REPORTS:
            await self.show_section("reports")
        elif action is ShortcutAction.ESCAPE:
            if self.state.modal_open:
                self.close_modal()
            elif self.state.quick_search:
                await self.clear_quick_search()
            else:
                return None
        elif action is ShortcutAction.SHOW_HELP:
            self.show_shortcuts_help()
        return action
