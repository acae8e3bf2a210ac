"""
Request-scoped dependencies for expense routes.
"""

from __future__ import annotations

from fastapi import Request

from core.db import Database

from .repository import ExpenseRepository
from .tags import TextArrayCodec

_codec = TextArrayCodec()


def get_database(request: Request) -> Database:
    db = getattr(request.app.state, "db", None)
    if db is None:
        raise RuntimeError("Database is not initialized. Open it on startup.")
    return db


def get_expense_repository(request: Request) -> ExpenseRepository:
    return ExpenseRepository(get_database(request), _codec)
