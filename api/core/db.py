"""
Async database access helpers (raw SQL) using asyncpg.

`Database` wraps the connection pool. FastAPI opens it on startup, stores it on
`app.state.db` and closes it on shutdown (see `api/main.py`). Feature
repositories receive it as a constructor argument.

SQL parameter style:
- asyncpg uses positional placeholders: $1, $2, $3, ...
"""

from __future__ import annotations

import asyncio
from typing import Any
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

import asyncpg

from . import settings


# Backend failures are explicit and separable from programming errors.
class StoreError(RuntimeError):
    pass


def _sanitize_database_url(url: str) -> str:
    parts = urlsplit(url)
    if not parts.query:
        return url

    params = [(k, v) for (k, v) in parse_qsl(parts.query, keep_blank_values=True) if k != "sslmode"]
    query = urlencode(params)
    return urlunsplit((parts.scheme, parts.netloc, parts.path, query, parts.fragment))


def database_url() -> str:
    url = settings.database_url()
    if not url:
        raise RuntimeError("DATABASE_URL is not set.")
    return _sanitize_database_url(url)


def _record_to_dict(record: asyncpg.Record) -> dict[str, Any]:
    return dict(record)


class Database:
    """
    Thin wrapper over an asyncpg pool.

    Every call runs with `command_timeout`; on expiry asyncpg cancels the
    statement server-side. Driver failures are re-raised as `StoreError`.
    """

    def __init__(self, pool: asyncpg.Pool, *, command_timeout: float = 30.0) -> None:
        self._pool = pool
        self.command_timeout = command_timeout

    @classmethod
    async def connect(cls, dsn: str | None = None) -> Database:
        timeout = settings.db_command_timeout_s()
        pool = await asyncpg.create_pool(
            dsn=dsn or database_url(),
            min_size=settings.db_pool_min_size(),
            max_size=settings.db_pool_max_size(),
            command_timeout=timeout,
        )
        return cls(pool, command_timeout=timeout)

    async def close(self) -> None:
        await self._pool.close()

    async def fetch_one(self, sql: str, *args: Any) -> dict[str, Any] | None:
        """
        Run a query and return a single row as a dict (or None).
        """
        try:
            row = await self._pool.fetchrow(sql, *args, timeout=self.command_timeout)
        except (asyncpg.PostgresError, asyncpg.InterfaceError, OSError, asyncio.TimeoutError) as exc:
            raise StoreError(_describe(exc)) from exc
        return _record_to_dict(row) if row is not None else None

    async def fetch_all(self, sql: str, *args: Any) -> list[dict[str, Any]]:
        """
        Run a query and return all rows as a list of dicts.
        """
        try:
            rows = await self._pool.fetch(sql, *args, timeout=self.command_timeout)
        except (asyncpg.PostgresError, asyncpg.InterfaceError, OSError, asyncio.TimeoutError) as exc:
            raise StoreError(_describe(exc)) from exc
        return [_record_to_dict(r) for r in rows]

    async def execute(self, sql: str, *args: Any) -> None:
        """
        Run a statement (INSERT/UPDATE/DDL). No result returned.
        """
        try:
            await self._pool.execute(sql, *args, timeout=self.command_timeout)
        except (asyncpg.PostgresError, asyncpg.InterfaceError, OSError, asyncio.TimeoutError) as exc:
            raise StoreError(_describe(exc)) from exc


def _describe(exc: BaseException) -> str:
    if isinstance(exc, asyncio.TimeoutError):
        return "database statement timed out"
    return str(exc) or exc.__class__.__name__
