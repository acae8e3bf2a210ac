"""
FastAPI router for expense endpoints.

Path ids and bodies are parsed by hand (see `schemas.parse_*`) so malformed
input is a 400 with `{"error": ...}` rather than FastAPI's default 422.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Request, status

from auth import dependencies as auth_dependencies

from . import schemas, service
from .dependencies import get_expense_repository
from .repository import ExpenseRepository

router = APIRouter(dependencies=[Depends(auth_dependencies.require_api_token)])


@router.post("/expenses", status_code=status.HTTP_201_CREATED, response_model=schemas.Expense)
async def create_expense(
    request: Request,
    repo: ExpenseRepository = Depends(get_expense_repository),
) -> schemas.Expense:
    payload = schemas.parse_expense_body(await request.body())
    return await service.create_expense(repo, payload)


@router.get("/expenses", response_model=list[schemas.Expense])
async def list_expenses(
    repo: ExpenseRepository = Depends(get_expense_repository),
) -> list[schemas.Expense]:
    return await service.list_expenses(repo)


@router.get("/expenses/{expense_id}", response_model=schemas.Expense)
async def get_expense(
    expense_id: str,
    repo: ExpenseRepository = Depends(get_expense_repository),
) -> schemas.Expense:
    return await service.get_expense(repo, schemas.parse_expense_id(expense_id))


@router.put("/expenses/{expense_id}", response_model=schemas.Expense)
async def update_expense(
    expense_id: str,
    request: Request,
    repo: ExpenseRepository = Depends(get_expense_repository),
) -> schemas.Expense:
    parsed_id = schemas.parse_expense_id(expense_id)
    payload = schemas.parse_expense_body(await request.body())
    return await service.update_expense(repo, parsed_id, payload)
