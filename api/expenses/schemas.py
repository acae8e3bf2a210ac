"""
Expense API schemas and request parsing.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_serializer, field_validator

# `expenses.id` is SERIAL (int4); larger values can never name a row.
MAX_EXPENSE_ID = 2_147_483_647

# Integral amounts up to this size are exact in a double and render as ints.
MAX_EXACT_INT = 2**53


class ExpenseValidationError(ValueError):
    pass


class ExpensePayload(BaseModel):
    """
    Body of POST /expenses and PUT /expenses/{id}.

    Missing keys and explicit nulls both mean "zero value".
    """

    model_config = ConfigDict(strict=True, extra="ignore")

    title: str = ""
    amount: float = Field(default=0.0, allow_inf_nan=False)
    note: str = ""
    tags: list[str] = Field(default_factory=list)

    @field_validator("title", "note", mode="before")
    @classmethod
    def _null_text(cls, value: Any) -> Any:
        return "" if value is None else value

    @field_validator("amount", mode="before")
    @classmethod
    def _null_amount(cls, value: Any) -> Any:
        return 0.0 if value is None else value

    @field_validator("tags", mode="before")
    @classmethod
    def _null_tags(cls, value: Any) -> Any:
        return [] if value is None else value

    # PostgreSQL text cannot hold U+0000.
    @field_validator("title", "note")
    @classmethod
    def _no_nul_text(cls, value: str) -> str:
        if "\x00" in value:
            raise ValueError("must not contain NUL characters")
        return value

    @field_validator("tags")
    @classmethod
    def _no_nul_tags(cls, value: list[str]) -> list[str]:
        if any("\x00" in tag for tag in value):
            raise ValueError("tags must not contain NUL characters")
        return value


class Expense(BaseModel):
    id: int
    title: str
    amount: float
    note: str
    tags: list[str]

    @field_serializer("amount")
    def _render_amount(self, amount: float) -> float | int:
        if amount.is_integer() and abs(amount) <= MAX_EXACT_INT:
            return int(amount)
        return amount


def _format_errors(exc: ValidationError) -> str:
    parts = []
    for err in exc.errors():
        loc = ".".join(str(p) for p in err.get("loc", ()))
        msg = str(err.get("msg", "invalid value"))
        parts.append(f"{loc}: {msg}" if loc else msg)
    return "; ".join(parts) or "invalid request body"


def parse_expense_body(raw: bytes) -> ExpensePayload:
    if not raw or not raw.strip():
        raise ExpenseValidationError("request body is empty")
    try:
        return ExpensePayload.model_validate_json(raw)
    except ValidationError as exc:
        raise ExpenseValidationError(_format_errors(exc)) from exc


def parse_expense_id(segment: str) -> int:
    raw = segment or ""
    if not raw or not raw.isascii() or not raw.isdigit():
        raise ExpenseValidationError("invalid id")
    expense_id = int(raw)
    if expense_id > MAX_EXPENSE_ID:
        raise ExpenseValidationError("invalid id")
    return expense_id
