"""Async HTTP client for the employee API.

One coroutine per endpoint. Non-2xx responses become ``APIError`` carrying
the server's status and message, transport failures become ``NetworkError``.
"""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import Any
from urllib.parse import quote

import httpx

from employee_dashboard.cache import ResponseCache
from employee_dashboard.config import ClientSettings, get_client_settings
from employee_dashboard.exceptions import APIError, ClientValidationError, NetworkError
from employee_dashboard.validation import normalize_form, validate_employee

logger = logging.getLogger(__name__)

DEFAULT_HEADERS = {
    "Content-Type": "application/json",
    "Accept": "application/json",
}

DASHBOARD_RECENT_MONTHS = 6
DASHBOARD_RECENT_LIMIT = 5

Page = dict[str, Any]
Employee = dict[str, Any]


@dataclass
class SearchCriteria:
    """Advanced search form values.

    Only the first non-empty criterion is applied, in field order. Salary
    and date ranges apply only when both bounds are given.
    """

    query: str | None = None
    department: str | None = None
    position: str | None = None
    status: str | None = None
    min_salary: Decimal | float | str | None = None
    max_salary: Decimal | float | str | None = None
    start_date: date | str | None = None
    end_date: date | str | None = None
    page: int = 0
    size: int = 10
    sort_by: str = "id"
    sort_dir: str = "asc"


@dataclass
class DashboardData:
    total_employees: int
    active_employees: int
    total_departments: int
    recent_hires: int
    department_stats: dict[str, int] = field(default_factory=dict)
    status_stats: dict[str, int] = field(default_factory=dict)
    recent_employees: list[Employee] = field(default_factory=list)


@dataclass
class DeleteOutcome:
    employee_id: int
    error: APIError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


def _present(value: Any) -> bool:
    if value is None:
        return False
    if isinstance(value, str):
        return bool(value.strip())
    return True


def _json_value(value: Any) -> Any:
    if isinstance(value, Decimal):
        return float(value)
    if isinstance(value, date):
        return value.isoformat()
    return value


def _paging(page: int, size: int, sort_by: str, sort_dir: str) -> dict[str, Any]:
    return {"page": page, "size": size, "sortBy": sort_by, "sortDir": sort_dir}


class EmployeeAPIClient:
    """Typed wrapper around the ``/api/employees`` endpoints.

    The client owns its ``httpx.AsyncClient`` unless one is passed in.
    ``on_loading`` is called with True when the first request starts and
    with False when the last in-flight request finishes.
    """

    def __init__(
        self,
        base_url: str | None = None,
        *,
        settings: ClientSettings | None = None,
        http_client: httpx.AsyncClient | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
        on_loading: Callable[[bool], None] | None = None,
        cache: ResponseCache | None = None,
    ) -> None:
        settings = settings or get_client_settings()
        self.base_url = (base_url or settings.base_url).rstrip("/")
        self.on_loading = on_loading
        self.cache = cache or ResponseCache(ttl_seconds=settings.cache_ttl_seconds)
        self._owns_client = http_client is None
        self._client = http_client or httpx.AsyncClient(
            timeout=settings.timeout_seconds,
            transport=transport,
        )
        self._in_flight = 0

    async def __aenter__(self) -> "EmployeeAPIClient":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_client and not self._client.is_closed:
            await self._client.aclose()

    @property
    def loading(self) -> bool:
        return self._in_flight > 0

    def _set_loading(self, started: bool) -> None:
        self._in_flight += 1 if started else -1
        if self.on_loading is None:
            return
        if started and self._in_flight == 1:
            self.on_loading(True)
        elif not started and self._in_flight == 0:
            self.on_loading(False)

    async def _request(
        self,
        method: str,
        endpoint: str = "",
        *,
        params: dict[str, Any] | None = None,
        json: dict[str, Any] | None = None,
    ) -> Any:
        url = endpoint if endpoint.startswith("http") else f"{self.base_url}{endpoint}"
        self._set_loading(True)
        try:
            logger.debug("Making %s request to: %s", method, url)
            try:
                response = await self._client.request(
                    method, url, params=params, json=json, headers=DEFAULT_HEADERS
                )
            except httpx.HTTPError as e:
                logger.warning("Request %s %s failed: %s", method, url, e)
                raise NetworkError() from e

            if response.is_error:
                raise self._error_from(response)

            if response.status_code == 204 or not response.content:
                return None
            return response.json()
        finally:
            self._set_loading(False)

    @staticmethod
    def _error_from(response: httpx.Response) -> APIError:
        try:
            data = response.json()
        except ValueError:
            data = None
        if not isinstance(data, dict):
            data = {"message": f"HTTP Error {response.status_code}: {response.reason_phrase}"}
        message = data.get("message") or f"HTTP {response.status_code}"
        logger.warning("API returned %s: %s", response.status_code, message)
        return APIError(message, response.status_code, data)

    @staticmethod
    def _prepare(employee_data: dict[str, Any]) -> dict[str, Any]:
        normalized = normalize_form(employee_data)
        errors = validate_employee(normalized)
        if errors:
            raise ClientValidationError(errors)
        return {key: _json_value(value) for key, value in normalized.items()}

    # ==================== CRUD ====================

    async def create_employee(self, employee_data: dict[str, Any]) -> Employee:
        return await self._request("POST", json=self._prepare(employee_data))

    async def list_employees(
        self, page: int = 0, size: int = 10, sort_by: str = "id", sort_dir: str = "asc"
    ) -> Page:
        return await self._request("GET", params=_paging(page, size, sort_by, sort_dir))

    async def get_employee(self, employee_id: int) -> Employee:
        return await self._request("GET", f"/{employee_id}")

    async def update_employee(self, employee_id: int, employee_data: dict[str, Any]) -> Employee:
        return await self._request("PUT", f"/{employee_id}", json=self._prepare(employee_data))

    async def delete_employee(self, employee_id: int) -> None:
        await self._request("DELETE", f"/{employee_id}")

    # ==================== Search & Filters ====================

    async def search_employees(
        self,
        query: str,
        page: int = 0,
        size: int = 10,
        sort_by: str = "id",
        sort_dir: str = "asc",
    ) -> Page:
        params = {"query": query, **_paging(page, size, sort_by, sort_dir)}
        return await self._request("GET", "/search", params=params)

    async def get_by_department(
        self,
        department: str,
        page: int = 0,
        size: int = 10,
        sort_by: str = "id",
        sort_dir: str = "asc",
    ) -> Page:
        return await self._request(
            "GET",
            f"/department/{quote(department, safe='')}",
            params=_paging(page, size, sort_by, sort_dir),
        )

    async def get_by_position(
        self,
        position: str,
        page: int = 0,
        size: int = 10,
        sort_by: str = "id",
        sort_dir: str = "asc",
    ) -> Page:
        return await self._request(
            "GET",
            f"/position/{quote(position, safe='')}",
            params=_paging(page, size, sort_by, sort_dir),
        )

    async def get_by_status(self, status: str) -> list[Employee]:
        return await self._request("GET", f"/status/{quote(status, safe='')}")

    async def get_hired_between(self, start_date: date | str, end_date: date | str) -> list[Employee]:
        params = {"startDate": _json_value(start_date), "endDate": _json_value(end_date)}
        return await self._request("GET", "/hired-between", params=params)

    async def get_recently_hired(self, months: int) -> list[Employee]:
        return await self._request("GET", f"/recently-hired/{int(months)}")

    async def get_salary_greater_than(self, amount: Decimal | float | str) -> list[Employee]:
        return await self._request("GET", f"/salary/greater-than/{amount}")

    async def get_salary_between(
        self, min_salary: Decimal | float | str, max_salary: Decimal | float | str
    ) -> list[Employee]:
        params = {"minSalary": str(min_salary), "maxSalary": str(max_salary)}
        return await self._request("GET", "/salary/between", params=params)

    # ==================== Statistics ====================

    async def get_department_statistics(self) -> dict[str, int]:
        return await self._request("GET", "/statistics/departments")

    async def get_status_statistics(self) -> dict[str, int]:
        return await self._request("GET", "/statistics/status")

    # ==================== Composite operations ====================

    async def advanced_search(self, criteria: SearchCriteria) -> Page | list[Employee]:
        """Run the first applicable filter, or the unfiltered page."""
        c = criteria
        paging = (c.page, c.size, c.sort_by, c.sort_dir)
        if _present(c.query):
            return await self.search_employees(c.query.strip(), *paging)
        if _present(c.department):
            return await self.get_by_department(c.department.strip(), *paging)
        if _present(c.position):
            return await self.get_by_position(c.position.strip(), *paging)
        if _present(c.status):
            return await self.get_by_status(c.status.strip())
        if _present(c.min_salary) and _present(c.max_salary):
            return await self.get_salary_between(c.min_salary, c.max_salary)
        if _present(c.start_date) and _present(c.end_date):
            return await self.get_hired_between(c.start_date, c.end_date)
        return await self.list_employees(*paging)

    async def get_dashboard_data(self) -> DashboardData:
        first_page, department_stats, status_stats, recent = await asyncio.gather(
            self.list_employees(0, 1),
            self.get_department_statistics(),
            self.get_status_statistics(),
            self.get_recently_hired(DASHBOARD_RECENT_MONTHS),
        )
        return DashboardData(
            total_employees=first_page.get("totalElements", 0),
            active_employees=status_stats.get("ACTIVE", 0),
            total_departments=len(department_stats),
            recent_hires=len(recent),
            department_stats=department_stats,
            status_stats=status_stats,
            recent_employees=recent[:DASHBOARD_RECENT_LIMIT],
        )

    async def bulk_delete(self, employee_ids: list[int]) -> list[DeleteOutcome]:
        """Delete concurrently; failures are reported per id, not raised."""
        results = await asyncio.gather(
            *(self.delete_employee(employee_id) for employee_id in employee_ids),
            return_exceptions=True,
        )
        outcomes = []
        for employee_id, result in zip(employee_ids, results):
            if isinstance(result, APIError):
                outcomes.append(DeleteOutcome(employee_id, result))
            elif isinstance(result, BaseException):
                raise result
            else:
                outcomes.append(DeleteOutcome(employee_id))
        return outcomes

    # ==================== Cache ====================

    async def cached(self, key: str, loader: Callable[[], Awaitable[Any]]) -> Any:
        """Return a fresh cached value for ``key`` or load and store it."""
        data = self.cache.get(key)
        if data is None:
            data = await loader()
            self.cache.set(key, data)
        return data

    def clear_cache(self) -> None:
        self.cache.clear()
