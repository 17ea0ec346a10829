"""Core configuration and infrastructure helpers."""

from .config import (
    ALLOWED_CORS_ORIGINS,
    COOKIE_DOMAIN,
    COOKIE_SAMESITE,
    COOKIE_SECURE,
    DATABASE_URL,
    DB_RESET,
    LEDGER_MAX_RETRIES,
    LOG_LEVEL,
    SECRET_KEY,
    SUPER_USER_ID_NUMBER,
    SUPER_USER_NAME,
    SUPER_USER_PASSWORD,
    SUPER_USER_PHONE,
)
from .database import engine, get_session
from .logging import configure_logging
from .time import isoformat_utc, today, utcnow

__all__ = [
    "ALLOWED_CORS_ORIGINS",
    "COOKIE_DOMAIN",
    "COOKIE_SAMESITE",
    "COOKIE_SECURE",
    "DATABASE_URL",
    "DB_RESET",
    "LEDGER_MAX_RETRIES",
    "LOG_LEVEL",
    "SECRET_KEY",
    "SUPER_USER_ID_NUMBER",
    "SUPER_USER_NAME",
    "SUPER_USER_PASSWORD",
    "SUPER_USER_PHONE",
    "configure_logging",
    "engine",
    "get_session",
    "isoformat_utc",
    "today",
    "utcnow",
]
