"""Shared fixtures for the employee API tests.

Each test gets its own SQLite file. The schema is created with a plain
synchronous engine, and sessions use an aiosqlite engine without a
connection pool so no connection outlives the event loop that opened it.
"""

import os
import tempfile
from collections.abc import AsyncIterator, Awaitable, Callable, Iterator
from datetime import date
from decimal import Decimal
from pathlib import Path
from typing import Any

import pytest

# Settings are read at import time, so configure them before any app import
os.environ.setdefault(
    "DATABASE_URL",
    f"sqlite:///{Path(tempfile.mkdtemp(prefix='employee-api-')) / 'app.db'}",
)
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ.setdefault("ENVIRONMENT", "development")

from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.exc import SQLAlchemyError  # noqa: E402
from sqlalchemy.ext.asyncio import (  # noqa: E402
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import NullPool  # noqa: E402

from employee_api.models.orm import Base, EmployeeORM  # noqa: E402


@pytest.fixture
def database_file(tmp_path: Path) -> Path:
    """Create an empty schema in a fresh SQLite file."""
    path = tmp_path / "employees.db"
    sync_engine = create_engine(f"sqlite:///{path}")
    Base.metadata.create_all(sync_engine)
    sync_engine.dispose()
    return path


@pytest.fixture
def async_engine(database_file: Path) -> AsyncEngine:
    return create_async_engine(f"sqlite+aiosqlite:///{database_file}", poolclass=NullPool)


@pytest.fixture
def session_maker(async_engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(async_engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
async def session(
    session_maker: async_sessionmaker[AsyncSession],
) -> AsyncIterator[AsyncSession]:
    async with session_maker() as db:
        yield db


@pytest.fixture
def client(session_maker: async_sessionmaker[AsyncSession]) -> Iterator[TestClient]:
    """TestClient whose requests use the per-test database."""
    from employee_api.database import get_db
    from employee_api.main import app

    async def override_get_db() -> AsyncIterator[AsyncSession]:
        async with session_maker() as db:
            try:
                yield db
                await db.commit()
            except SQLAlchemyError:
                await db.rollback()
                raise

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


def _employee_fields(**overrides: Any) -> dict[str, Any]:
    values: dict[str, Any] = {
        "first_name": "Jane",
        "last_name": "Doe",
        "email": "jane.doe@example.com",
        "position": "Engineer",
        "department": "Engineering",
        "salary": Decimal("75000.00"),
        "hire_date": date(2022, 3, 1),
        "status": "ACTIVE",
    }
    values.update(overrides)
    return values


def _employee_payload(**overrides: Any) -> dict[str, Any]:
    payload: dict[str, Any] = {
        "firstName": "Jane",
        "lastName": "Doe",
        "email": "jane.doe@example.com",
        "position": "Engineer",
        "department": "Engineering",
        "salary": 75000.00,
        "hireDate": "2022-03-01",
    }
    payload.update(overrides)
    return payload


async def _insert_employees(db: AsyncSession, *rows: dict[str, Any]) -> list[EmployeeORM]:
    employees = [EmployeeORM(**row) for row in rows]
    db.add_all(employees)
    await db.commit()
    for employee in employees:
        await db.refresh(employee)
    return employees


@pytest.fixture
def employee_fields() -> Callable[..., dict[str, Any]]:
    """Factory for column values of a valid employee row."""
    return _employee_fields


@pytest.fixture
def employee_payload() -> Callable[..., dict[str, Any]]:
    """Factory for the JSON body of a valid create/update request."""
    return _employee_payload


@pytest.fixture
def insert_employees() -> Callable[..., Awaitable[list[EmployeeORM]]]:
    """Insert rows directly through the ORM and commit."""
    return _insert_employees
