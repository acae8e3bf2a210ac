"""
Expense business logic.

Scope:
- create / get / list / full replace of expenses
- row -> response mapping
"""

from __future__ import annotations

import logging

from . import schemas
from .repository import ExpenseRepository

logger = logging.getLogger(__name__)


def _to_expense(row: dict) -> schemas.Expense:
    return schemas.Expense(
        id=int(row["id"]),
        title=str(row["title"]),
        amount=float(row["amount"]),
        note=str(row["note"]),
        tags=list(row["tags"]),
    )


async def create_expense(repo: ExpenseRepository, payload: schemas.ExpensePayload) -> schemas.Expense:
    row = await repo.create(payload)
    logger.info("expense_created id=%s tags=%s", row["id"], len(payload.tags))
    return _to_expense(row)


async def get_expense(repo: ExpenseRepository, expense_id: int) -> schemas.Expense:
    return _to_expense(await repo.get(expense_id))


async def list_expenses(repo: ExpenseRepository) -> list[schemas.Expense]:
    rows = await repo.list_all()
    return [_to_expense(row) for row in rows]


async def update_expense(
    repo: ExpenseRepository,
    expense_id: int,
    payload: schemas.ExpensePayload,
) -> schemas.Expense:
    # Full replace: fields missing from the request are reset to zero values.
    row = await repo.update(expense_id, payload)
    logger.info("expense_updated id=%s", expense_id)
    return _to_expense(row)
