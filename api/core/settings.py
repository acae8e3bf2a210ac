"""
Environment-driven settings.

Values are read on every call so tests can tweak `os.environ` freely.
"""

from __future__ import annotations

import logging
import os

DEFAULT_API_AUTH_TOKEN = "November 10, 2009"
DEFAULT_PORT = 2565


def _env_int(name: str, default: int) -> int:
    raw = os.environ.get(name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _env_float(name: str, default: float) -> float:
    raw = os.environ.get(name, "").strip()
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def database_url() -> str:
    return os.environ.get("DATABASE_URL", "").strip()


def db_pool_min_size() -> int:
    return max(1, _env_int("DB_POOL_MIN_SIZE", 1))


def db_pool_max_size() -> int:
    return max(db_pool_min_size(), _env_int("DB_POOL_MAX_SIZE", 5))


def db_command_timeout_s() -> float:
    return _env_float("DB_COMMAND_TIMEOUT_S", 30.0)


def api_auth_token() -> str:
    # Matches the token the original deployment shipped with.
    # In production, set API_AUTH_TOKEN in environment.
    return os.environ.get("API_AUTH_TOKEN", DEFAULT_API_AUTH_TOKEN).strip() or DEFAULT_API_AUTH_TOKEN


def port() -> int:
    return _env_int("PORT", DEFAULT_PORT)


def log_level() -> str:
    return os.environ.get("LOG_LEVEL", "INFO").strip().upper() or "INFO"


def configure_logging() -> None:
    logging.basicConfig(
        level=log_level(),
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )
