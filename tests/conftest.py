"""
Pytest fixtures for the expense API tests.
"""
import os
from typing import Any, AsyncGenerator

# Set test environment before importing the app
os.environ["API_AUTH_TOKEN"] = "test-token"
os.environ.setdefault("LOG_LEVEL", "WARNING")

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from core.db import StoreError
from expenses.dependencies import get_expense_repository
from expenses.repository import ExpenseNotFoundError
from expenses.schemas import ExpensePayload
from expenses.tags import TextArrayCodec
from main import app

AUTH_HEADERS = {"Authorization": "test-token"}


class InMemoryExpenseRepository:
    """
    Stand-in for ExpenseRepository. Tags are stored in their encoded form and
    every read goes through the real codec.
    """

    def __init__(self) -> None:
        self.codec = TextArrayCodec()
        self.rows: dict[int, dict[str, Any]] = {}
        self.next_id = 1
        self.fail_with: Exception | None = None

    def _check(self) -> None:
        if self.fail_with is not None:
            raise self.fail_with

    def _read(self, expense_id: int) -> dict[str, Any]:
        row = self.rows[expense_id]
        return {**row, "tags": self.codec.decode(row["tags"])}

    async def create(self, payload: ExpensePayload) -> dict[str, Any]:
        self._check()
        expense_id = self.next_id
        self.next_id += 1
        self.rows[expense_id] = {
            "id": expense_id,
            "title": payload.title,
            "amount": payload.amount,
            "note": payload.note,
            "tags": self.codec.encode(payload.tags),
        }
        return self._read(expense_id)

    async def get(self, expense_id: int) -> dict[str, Any]:
        self._check()
        if expense_id not in self.rows:
            raise ExpenseNotFoundError(expense_id)
        return self._read(expense_id)

    async def list_all(self) -> list[dict[str, Any]]:
        self._check()
        return [self._read(i) for i in sorted(self.rows)]

    async def update(self, expense_id: int, payload: ExpensePayload) -> dict[str, Any]:
        self._check()
        if expense_id not in self.rows:
            raise ExpenseNotFoundError(expense_id)
        self.rows[expense_id] = {
            "id": expense_id,
            "title": payload.title,
            "amount": payload.amount,
            "note": payload.note,
            "tags": self.codec.encode(payload.tags),
        }
        return self._read(expense_id)


class RecordingDatabase:
    """
    Minimal Database double: records statements and returns queued results.
    """

    def __init__(self) -> None:
        self.calls: list[tuple[str, str, tuple[Any, ...]]] = []
        self.results: list[Any] = []
        self.error: Exception | None = None

    def _next(self, method: str, sql: str, args: tuple[Any, ...]) -> Any:
        self.calls.append((method, sql, args))
        if self.error is not None:
            raise self.error
        return self.results.pop(0) if self.results else None

    async def fetch_one(self, sql: str, *args: Any) -> dict[str, Any] | None:
        return self._next("fetch_one", sql, args)

    async def fetch_all(self, sql: str, *args: Any) -> list[dict[str, Any]]:
        return self._next("fetch_all", sql, args) or []

    async def execute(self, sql: str, *args: Any) -> None:
        self._next("execute", sql, args)


@pytest.fixture
def memory_repo() -> InMemoryExpenseRepository:
    return InMemoryExpenseRepository()


@pytest.fixture
def recording_db() -> RecordingDatabase:
    return RecordingDatabase()


@pytest.fixture
def store_down() -> StoreError:
    return StoreError("connection refused")


@pytest_asyncio.fixture
async def client(memory_repo: InMemoryExpenseRepository) -> AsyncGenerator[AsyncClient, None]:
    """HTTP client against the app with the in-memory repository injected."""
    app.dependency_overrides[get_expense_repository] = lambda: memory_repo
    try:
        async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
            yield ac
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def auth_headers() -> dict[str, str]:
    return dict(AUTH_HEADERS)
