"""Shared fixtures for the dashboard client tests."""

import os
import tempfile
from collections.abc import AsyncIterator, Callable
from pathlib import Path
from typing import Any

import pytest

# Server settings are read at import time, so configure them before any app import
os.environ.setdefault(
    "DATABASE_URL",
    f"sqlite:///{Path(tempfile.mkdtemp(prefix='employee-dashboard-')) / 'app.db'}",
)
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ.setdefault("ENVIRONMENT", "development")

import httpx  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.exc import SQLAlchemyError  # noqa: E402
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine  # noqa: E402
from sqlalchemy.pool import NullPool  # noqa: E402

from employee_dashboard.api_client import EmployeeAPIClient  # noqa: E402
from employee_dashboard.config import ClientSettings  # noqa: E402

MOCK_BASE_URL = "http://api.test/api/employees"
ASGI_BASE_URL = "http://testserver/api/employees"


class RecordingRenderer:
    """Renderer that records every call as ``(method, args)``."""

    def __init__(self) -> None:
        self.calls: list[tuple[str, tuple[Any, ...]]] = []

    def __getattr__(self, name: str) -> Callable[..., None]:
        if name.startswith("_"):
            raise AttributeError(name)

        def record(*args: Any) -> None:
            self.calls.append((name, args))

        return record

    def called(self, name: str) -> list[tuple[Any, ...]]:
        return [args for method, args in self.calls if method == name]

    def last(self, name: str) -> tuple[Any, ...]:
        matches = self.called(name)
        assert matches, f"{name} was never called"
        return matches[-1]

    @property
    def toasts(self) -> list[Any]:
        return [args[0] for args in self.called("show_toast")]


@pytest.fixture
def client_settings(tmp_path: Path) -> ClientSettings:
    return ClientSettings(preferences_path=tmp_path / "preferences.json")


@pytest.fixture
def mock_api(client_settings: ClientSettings) -> Callable[..., EmployeeAPIClient]:
    """Factory for a client whose requests go to ``handler``."""

    def build(handler: Callable[[httpx.Request], httpx.Response], **kwargs: Any) -> EmployeeAPIClient:
        return EmployeeAPIClient(
            MOCK_BASE_URL,
            settings=client_settings,
            transport=httpx.MockTransport(handler),
            **kwargs,
        )

    return build


@pytest.fixture
def renderer() -> RecordingRenderer:
    return RecordingRenderer()


@pytest.fixture
def server_app(tmp_path: Path):
    """The real API application backed by a fresh SQLite file."""
    from employee_api.database import get_db
    from employee_api.main import app
    from employee_api.models.orm import Base

    path = tmp_path / "employees.db"
    sync_engine = create_engine(f"sqlite:///{path}")
    Base.metadata.create_all(sync_engine)
    sync_engine.dispose()

    engine = create_async_engine(f"sqlite+aiosqlite:///{path}", poolclass=NullPool)
    session_maker = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

    async def override_get_db() -> AsyncIterator[AsyncSession]:
        async with session_maker() as db:
            try:
                yield db
                await db.commit()
            except SQLAlchemyError:
                await db.rollback()
                raise

    app.dependency_overrides[get_db] = override_get_db
    yield app
    app.dependency_overrides.clear()


@pytest.fixture
async def live_api(server_app, client_settings: ClientSettings) -> AsyncIterator[EmployeeAPIClient]:
    """Client talking to the real application in-process."""
    async with EmployeeAPIClient(
        ASGI_BASE_URL,
        settings=client_settings,
        transport=httpx.ASGITransport(app=server_app),
    ) as api:
        yield api


@pytest.fixture
def employee_form() -> Callable[..., dict[str, Any]]:
    """Factory for a valid camelCase employee form."""

    def build(**overrides: Any) -> dict[str, Any]:
        form: dict[str, Any] = {
            "firstName": "Jane",
            "lastName": "Doe",
            "email": "jane.doe@example.com",
            "department": "Engineering",
            "position": "Engineer",
            "salary": "75000",
            "hireDate": "2022-03-01",
            "status": "ACTIVE",
        }
        form.update(overrides)
        return form

    return build
