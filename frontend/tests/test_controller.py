"""Tests for dashboard state transitions."""

import json
from collections.abc import Callable
from datetime import date
from typing import Any

import httpx
import pytest

from employee_dashboard.api_client import SearchCriteria
from employee_dashboard.controller import DashboardController
from employee_dashboard.preferences import Preferences, load_preferences
from employee_dashboard.shortcuts import KeyEvent, ShortcutAction

PREFIX = "/api/employees"


def reply(status: int = 200, body: Any = None) -> Callable[[httpx.Request], httpx.Response]:
    def respond(request: httpx.Request) -> httpx.Response:
        if body is None:
            return httpx.Response(status)
        return httpx.Response(status, json=body)

    return respond


def person(employee_id: int, department: str = "Engineering", **overrides: Any) -> dict[str, Any]:
    record = {
        "id": employee_id,
        "firstName": f"First{employee_id}",
        "lastName": "Last",
        "email": f"p{employee_id}@example.com",
        "department": department,
        "position": "Engineer",
        "salary": 80000.0,
        "hireDate": "2024-06-01",
        "status": "ACTIVE",
    }
    record.update(overrides)
    return record


def page(content: list[dict], number: int = 0, size: int = 10, total: int | None = None) -> dict[str, Any]:
    total = len(content) if total is None else total
    total_pages = -(-total // size)
    return {
        "content": content,
        "totalElements": total,
        "totalPages": total_pages,
        "number": number,
        "size": size,
        "first": number == 0,
        "last": number >= total_pages - 1,
        "numberOfElements": len(content),
        "empty": not content,
    }


class FakeBackend:
    """Routes requests by ``(method, path)`` and records them."""

    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []
        self.routes: dict[tuple[str, str], Callable[[httpx.Request], httpx.Response]] = {}

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        key = (request.method, request.url.path.removeprefix(PREFIX))
        responder = self.routes.get(key)
        if responder is None:
            return httpx.Response(404, json={"status": 404, "message": f"No route for {key}"})
        return responder(request)

    def on(self, method: str, path: str, responder: Callable[[httpx.Request], httpx.Response]) -> None:
        self.routes[(method, path)] = responder

    @property
    def calls(self) -> list[tuple[str, str]]:
        return [(r.method, r.url.path.removeprefix(PREFIX)) for r in self.requests]

    def reset(self) -> None:
        self.requests.clear()


@pytest.fixture
def backend() -> FakeBackend:
    fake = FakeBackend()
    fake.on("GET", "", reply(body=page([person(1), person(2, "Sales")], total=25)))
    fake.on("GET", "/statistics/departments", reply(body={"Engineering": 20, "Sales": 5}))
    fake.on("GET", "/statistics/status", reply(body={"ACTIVE": 22, "ON_LEAVE": 3}))
    fake.on("GET", "/recently-hired/6", reply(body=[person(1), person(2)]))
    return fake


@pytest.fixture
def controller(backend, mock_api, renderer, tmp_path) -> DashboardController:
    return DashboardController(
        mock_api(backend),
        renderer,
        preferences_path=tmp_path / "preferences.json",
        search_debounce_ms=10,
        today=lambda: date(2024, 8, 15),
    )


class TestNavigation:
    """Sections and the employee list."""

    async def test_dashboard_section(self, controller, backend, renderer) -> None:
        await controller.show_section("dashboard")

        stats, recent, department_chart, status_chart = renderer.last("render_dashboard")
        assert stats.total_employees == 25
        assert stats.active_employees == 22
        assert stats.total_departments == 2
        assert stats.recent_hires == 2
        assert [row.id for row in recent] == [1, 2]
        assert department_chart.labels == ["Engineering", "Sales"]
        assert status_chart.labels == ["Active", "On Leave"]
        assert renderer.last("show_section") == ("dashboard",)

    async def test_employee_list_uses_state(self, controller, backend, renderer) -> None:
        await controller.show_section("employees")

        request = backend.requests[-1]
        assert dict(request.url.params) == {"page": "0", "size": "10", "sortBy": "firstName", "sortDir": "asc"}
        rows, pagination = renderer.last("render_employees")
        assert [row.id for row in rows] == [1, 2]
        assert pagination.info == "Showing 1-10 of 25 employees"
        assert renderer.last("render_department_options") == (["Engineering", "Sales"],)

    async def test_loading_indicator_wired_to_renderer(self, controller, renderer) -> None:
        await controller.show_section("employees")

        assert renderer.called("set_loading") == [(True,), (False,)]

    async def test_paging(self, controller, backend) -> None:
        await controller.show_section("employees")

        await controller.next_page()
        assert controller.state.page == 1
        assert backend.requests[-1].url.params["page"] == "1"

        await controller.previous_page()
        assert controller.state.page == 0

        backend.reset()
        await controller.previous_page()
        assert backend.requests == []

    async def test_next_page_stops_at_last_page(self, controller, backend) -> None:
        backend.on("GET", "", reply(body=page([person(1)])))
        await controller.show_section("employees")
        backend.reset()

        await controller.next_page()

        assert controller.state.page == 0
        assert backend.requests == []

    async def test_change_sort_resets_page(self, controller, backend) -> None:
        await controller.go_to_page(2)

        await controller.change_sort("salary", "desc")

        params = backend.requests[-1].url.params
        assert controller.state.page == 0
        assert (params["page"], params["sortBy"], params["sortDir"]) == ("0", "salary", "desc")

    async def test_department_filter(self, controller, backend) -> None:
        backend.on("GET", "/department/Sales", reply(body=page([person(2, "Sales")])))

        await controller.apply_filters(department="Sales", status="ACTIVE")

        assert backend.calls[-1] == ("GET", "/department/Sales")

    async def test_status_filter_has_no_pagination(self, controller, backend, renderer) -> None:
        backend.on("GET", "/status/ON_LEAVE", reply(body=[person(3, status="ON_LEAVE")]))

        await controller.apply_filters(status="ON_LEAVE")

        rows, pagination = renderer.last("render_employees")
        assert [row.status for row in rows] == ["ON_LEAVE"]
        assert pagination is None

    async def test_list_error_becomes_toast(self, controller, backend, renderer) -> None:
        backend.on("GET", "", reply(500, {"message": "Internal server error"}))

        await controller.show_section("employees")

        assert renderer.toasts[-1].message == "Error loading employees"
        assert renderer.toasts[-1].level == "error"


class TestQuickSearch:
    """Debounced free-text search."""

    async def test_only_last_keystroke_is_sent(self, controller, backend) -> None:
        backend.on("GET", "/search", reply(body=page([person(1)])))

        controller.quick_search("j")
        controller.quick_search("jo")
        controller.quick_search("joh")
        await controller.debouncer.wait()

        searches = [r for r in backend.requests if r.url.path.endswith("/search")]
        assert len(searches) == 1
        assert searches[0].url.params["query"] == "joh"

    async def test_blank_text_lists_everything(self, controller, backend) -> None:
        controller.quick_search("   ")
        await controller.debouncer.wait()

        assert backend.calls == [("GET", "")]

    async def test_escape_clears_search(self, controller, backend, renderer) -> None:
        controller.state.quick_search = "ann"

        action = await controller.handle_key(KeyEvent("Escape"))

        assert action is ShortcutAction.ESCAPE
        assert controller.state.quick_search == ""
        assert renderer.called("reset_quick_search") == [()]
        assert backend.calls == [("GET", "")]


class TestEmployeeForm:
    """Add, edit and delete."""

    async def test_add_modal_defaults(self, controller, renderer) -> None:
        controller.open_add_modal()

        assert controller.state.modal == "add"
        assert renderer.last("open_modal") == ("add", {"hireDate": "2024-08-15", "status": "ACTIVE"})

    async def test_invalid_form_stays_local(self, controller, backend, renderer, employee_form) -> None:
        controller.open_add_modal()

        ok = await controller.submit_form(employee_form(lastName="", salary="0"))

        assert ok is False
        assert backend.requests == []
        assert renderer.last("show_validation_errors") == (["Last name is required", "Valid salary is required"],)
        assert controller.state.modal_open

    async def test_create_closes_modal_and_refreshes(self, controller, backend, renderer, employee_form) -> None:
        backend.on("POST", "", reply(201, person(9)))
        controller.state.section = "employees"
        controller.open_add_modal()

        ok = await controller.submit_form(employee_form())

        assert ok is True
        assert controller.state.modal == "closed"
        assert renderer.called("close_modal") == [()]
        assert renderer.toasts[-1].message == "Employee created successfully"
        assert backend.calls == [("POST", ""), ("GET", "")]

    async def test_create_on_dashboard_also_refreshes_dashboard(self, controller, backend, employee_form) -> None:
        backend.on("POST", "", reply(201, person(9)))
        controller.open_add_modal()

        await controller.submit_form(employee_form())

        assert ("GET", "/statistics/departments") in backend.calls

    async def test_server_validation_keeps_modal_open(self, controller, backend, renderer, employee_form) -> None:
        body = {"status": 400, "message": "Validation failed", "errors": ["hireDate: Hire date cannot be in the future"]}
        backend.on("POST", "", reply(400, body))
        controller.open_add_modal()

        ok = await controller.submit_form(employee_form())

        assert ok is False
        assert controller.state.modal == "add"
        assert renderer.last("show_validation_errors") == (["hireDate: Hire date cannot be in the future"],)

    async def test_conflict_is_toasted(self, controller, backend, renderer, employee_form) -> None:
        backend.on("POST", "", reply(409, {"status": 409, "message": "Employee with email jane.doe@example.com already exists"}))
        controller.open_add_modal()

        await controller.submit_form(employee_form())

        assert renderer.toasts[-1].message == "Employee with email jane.doe@example.com already exists"
        assert renderer.toasts[-1].level == "error"

    async def test_edit_then_submit_updates(self, controller, backend, renderer, employee_form) -> None:
        backend.on("GET", "/4", reply(body=person(4)))
        backend.on("PUT", "/4", reply(body=person(4, position="Lead")))

        await controller.open_edit_modal(4)
        assert renderer.last("open_modal")[0] == "edit"
        assert controller.state.editing_id == 4

        await controller.submit_form(employee_form(position="Lead"))

        put = next(r for r in backend.requests if r.method == "PUT")
        assert json.loads(put.content)["position"] == "Lead"
        assert renderer.toasts[-1].message == "Employee updated successfully"

    async def test_edit_unknown_employee(self, controller, renderer) -> None:
        await controller.open_edit_modal(404)

        assert controller.state.modal == "closed"
        assert renderer.toasts[-1].message == "Error loading employee data"

    async def test_delete(self, controller, backend, renderer) -> None:
        backend.on("DELETE", "/2", reply(204))
        controller.state.section = "employees"

        assert await controller.delete_employee(2) is True
        assert renderer.toasts[-1].message == "Employee deleted successfully"
        assert backend.calls == [("DELETE", "/2"), ("GET", "")]

    async def test_delete_failure(self, controller, renderer) -> None:
        assert await controller.delete_employee(77) is False
        assert renderer.toasts[-1].message == "Error deleting employee"

    async def test_escape_closes_modal_first(self, controller, renderer) -> None:
        controller.open_add_modal()
        controller.state.quick_search = "ann"

        await controller.handle_key(KeyEvent("Escape"))

        assert controller.state.modal == "closed"
        assert controller.state.quick_search == "ann"


class TestSearchAndReports:
    """Advanced search and report panels."""

    async def test_advanced_search(self, controller, backend, renderer) -> None:
        backend.on("GET", "/position/Lead", reply(body=page([person(5, position="Lead")])))

        await controller.advanced_search(SearchCriteria(position="Lead", status="ACTIVE"))

        (rows,) = renderer.last("render_search_results")
        assert [row.id for row in rows] == [5]
        assert backend.calls == [("GET", "/position/Lead")]

    async def test_department_options_loaded_once(self, controller, backend) -> None:
        await controller.show_section("search")
        await controller.show_section("search")

        assert backend.calls == [("GET", "")]
        assert backend.requests[0].url.params["size"] == "100"

    async def test_reports(self, controller, renderer) -> None:
        await controller.show_section("reports")

        departments, statuses = renderer.last("render_reports")
        assert [(i.label, i.value) for i in departments] == [("Engineering", "20 employees"), ("Sales", "5 employees")]
        assert [i.label for i in statuses] == ["ACTIVE", "ON_LEAVE"]

    async def test_salary_analysis_default_threshold(self, controller, backend, renderer) -> None:
        backend.on("GET", "/salary/greater-than/70000", reply(body=[person(1), person(2)]))
        backend.on("GET", "/salary/between", reply(body=[person(3)]))

        await controller.salary_analysis()

        between = next(r for r in backend.requests if r.url.path.endswith("/salary/between"))
        assert float(between.url.params["minSalary"]) == 49000
        assert float(between.url.params["maxSalary"]) == 70000
        (items,) = renderer.last("render_salary_analysis")
        assert [(i.label, i.value) for i in items] == [
            ("Above $70,000", "2 employees"),
            ("$49,000 - $70,000", "1 employees"),
        ]

    async def test_salary_analysis_zero_threshold(self, controller, backend, renderer) -> None:
        backend.on("GET", "/salary/greater-than/0", reply(body=[person(1)]))
        backend.on("GET", "/salary/between", reply(body=[]))

        await controller.salary_analysis(0)

        assert ("GET", "/salary/greater-than/0") in backend.calls
        (items,) = renderer.last("render_salary_analysis")
        assert items[0].label == "Above $0"

    async def test_hiring_trends(self, controller, backend, renderer) -> None:
        hires = [person(1, hireDate="2024-03-04"), person(2, hireDate="2024-05-01"), person(3, hireDate="2024-05-20")]
        backend.on("GET", "/recently-hired/12", reply(body=hires))

        await controller.hiring_trends(12)

        items, chart = renderer.last("render_hiring_trends")
        assert [(i.label, i.value) for i in items] == [("May 2024", "2 hires"), ("March 2024", "1 hires")]
        assert chart.labels == ["2024-03", "2024-05"]

    async def test_hiring_trends_without_hires(self, controller, backend, renderer) -> None:
        backend.on("GET", "/recently-hired/6", reply(body=[]))

        await controller.hiring_trends()

        items, _ = renderer.last("render_hiring_trends")
        assert [i.label for i in items] == ["No recent hires"]

    async def test_hiring_trends_zero_months(self, controller, backend, renderer) -> None:
        backend.on("GET", "/recently-hired/0", reply(body=[]))

        await controller.hiring_trends(0)

        assert ("GET", "/recently-hired/0") in backend.calls
        assert ("GET", "/recently-hired/6") not in backend.calls

    async def test_export_csv(self, controller, renderer) -> None:
        await controller.export_csv()

        filename, content = renderer.last("offer_download")
        assert filename == "employees_2024-08-15.csv"
        assert content.splitlines()[0].startswith("ID,First Name")
        assert len(content.splitlines()) == 3


class TestLifecycleAndPreferences:
    """Startup, theme and keyboard shortcuts."""

    async def test_start_warns_when_api_is_down(self, mock_api, renderer) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("refused", request=request)

        controller = DashboardController(mock_api(handler), renderer)

        await controller.start()

        messages = [toast.message for toast in renderer.toasts]
        assert messages == [
            "Warning: Unable to connect to API. Some features may not work.",
            "Error loading dashboard data",
        ]
        assert renderer.toasts[0].level == "warning"

    async def test_preferences_applied(self, backend, mock_api, renderer) -> None:
        controller = DashboardController(
            mock_api(backend), renderer, preferences=Preferences(page_size=25, default_sort="hireDate", theme="dark")
        )

        await controller.start()

        assert controller.state.page_size == 25
        assert controller.state.sort_field == "hireDate"
        assert renderer.called("apply_theme")[0] == ("dark",)

    async def test_from_settings_restores_saved_preferences(
        self, backend, mock_api, renderer, client_settings
    ) -> None:
        client_settings.preferences_path.write_text(
            json.dumps({"theme": "dark", "pageSize": 50, "defaultSort": "salary"}), encoding="utf-8"
        )
        settings = client_settings.model_copy(update={"search_debounce_ms": 120})

        controller = DashboardController.from_settings(mock_api(backend), renderer, settings)
        await controller.start()

        assert controller.state.page_size == 50
        assert controller.state.sort_field == "salary"
        assert controller.preferences_path == client_settings.preferences_path
        assert controller.debouncer.delay == pytest.approx(0.12)
        assert renderer.called("apply_theme")[0] == ("dark",)

        await controller.refresh_list()
        assert backend.requests[-1].url.params["size"] == "50"
        assert backend.requests[-1].url.params["sortBy"] == "salary"

    def test_from_settings_without_saved_preferences(self, mock_api, renderer, client_settings) -> None:
        controller = DashboardController.from_settings(mock_api(reply()), renderer, client_settings)

        assert controller.preferences == Preferences()
        assert controller.debouncer.delay == pytest.approx(0.3)
        controller.toggle_theme()
        assert load_preferences(client_settings.preferences_path).theme == "dark"

    def test_toggle_theme_persists(self, controller, renderer, tmp_path) -> None:
        controller.toggle_theme()

        assert controller.state.theme == "dark"
        assert renderer.last("apply_theme") == ("dark",)
        assert load_preferences(tmp_path / "preferences.json").theme == "dark"

    async def test_section_shortcut(self, controller, renderer) -> None:
        action = await controller.handle_key(KeyEvent("R", ctrl=True, shift=True))

        assert action is ShortcutAction.SHOW_REPORTS
        assert controller.state.section == "reports"
        assert renderer.called("render_reports")

    async def test_shortcuts_ignored_in_form_fields(self, controller) -> None:
        assert await controller.handle_key(KeyEvent("n", ctrl=True, target="input")) is None
        assert controller.state.modal == "closed"

    async def test_help_shortcut(self, controller, renderer) -> None:
        await controller.handle_key(KeyEvent("/", meta=True))

        toast = renderer.toasts[-1]
        assert toast.message.startswith("Keyboard Shortcuts:\n")
        assert toast.duration_ms == 10000

    async def test_escape_with_nothing_to_do(self, controller) -> None:
        assert await controller.handle_key(KeyEvent("Escape")) is None
