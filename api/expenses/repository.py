"""
Expense persistence (raw SQL).

All SQL touching `expenses` lives here. Tags go through an `ArrayCodec`, which
pins the array parameter/column types and normalizes decoded values.
"""

from __future__ import annotations

from typing import Any

from core.db import Database, StoreError

from .schemas import ExpensePayload
from .tags import ArrayCodec, TextArrayCodec


class ExpenseNotFoundError(LookupError):
    def __init__(self, expense_id: int) -> None:
        super().__init__(f"expense {expense_id} not found")
        self.expense_id = expense_id


CREATE_TABLE_SQL = """
CREATE TABLE IF NOT EXISTS expenses (
    id SERIAL PRIMARY KEY,
    title TEXT,
    amount FLOAT,
    note TEXT,
    tags TEXT[]
)
"""


class ExpenseRepository:
    def __init__(self, db: Database, codec: ArrayCodec | None = None) -> None:
        self._db = db
        self._codec = codec or TextArrayCodec()

    def _columns(self) -> str:
        return f"id, title, amount, note, {self._codec.column('tags')}"

    def _to_row(self, row: dict[str, Any]) -> dict[str, Any]:
        # Columns are nullable; rows written elsewhere may carry NULLs.
        return {
            "id": int(row["id"]),
            "title": row["title"] or "",
            "amount": float(row["amount"] or 0.0),
            "note": row["note"] or "",
            "tags": self._codec.decode(row["tags"]),
        }

    async def create_table(self) -> None:
        await self._db.execute(CREATE_TABLE_SQL)

    async def create(self, payload: ExpensePayload) -> dict[str, Any]:
        row = await self._db.fetch_one(
            f"""
            INSERT INTO expenses (title, amount, note, tags)
            VALUES ($1, $2, $3, {self._codec.bind("$4")})
            RETURNING id
            """,
            payload.title,
            payload.amount,
            payload.note,
            self._codec.encode(payload.tags),
        )
        if row is None:
            raise StoreError("Failed to create expense.")
        return {
            "id": int(row["id"]),
            "title": payload.title,
            "amount": payload.amount,
            "note": payload.note,
            "tags": list(payload.tags),
        }

    async def get(self, expense_id: int) -> dict[str, Any]:
        row = await self._db.fetch_one(
            f"""
            SELECT {self._columns()}
            FROM expenses
            WHERE id = $1
            """,
            expense_id,
        )
        if row is None:
            raise ExpenseNotFoundError(expense_id)
        return self._to_row(row)

    async def list_all(self) -> list[dict[str, Any]]:
        rows = await self._db.fetch_all(
            f"""
            SELECT {self._columns()}
            FROM expenses
            ORDER BY id ASC
            """
        )
        return [self._to_row(r) for r in rows]

    async def update(self, expense_id: int, payload: ExpensePayload) -> dict[str, Any]:
        """
        Replace every field of an existing expense and return the stored row.
        """
        row = await self._db.fetch_one(
            f"""
            UPDATE expenses
            SET title = $2,
                amount = $3,
                note = $4,
                tags = {self._codec.bind("$5")}
            WHERE id = $1
            RETURNING {self._columns()}
            """,
            expense_id,
            payload.title,
            payload.amount,
            payload.note,
            self._codec.encode(payload.tags),
        )
        if row is None:
            raise ExpenseNotFoundError(expense_id)
        return self._to_row(row)
