"""
Auth dependencies for protected FastAPI routes.

Clients send a shared static token verbatim: `Authorization: <token>`.
"""

from __future__ import annotations

import secrets

from fastapi import Header, HTTPException, status

from core import settings


def _check_token(authorization: str | None) -> None:
    raw = (authorization or "").strip()
    if not raw:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Missing Authorization header.",
        )

    expected = settings.api_auth_token()
    if not secrets.compare_digest(raw.encode("utf-8"), expected.encode("utf-8")):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid Authorization token.",
        )


async def require_api_token(authorization: str | None = Header(default=None)) -> None:
    _check_token(authorization)
