"""Application settings and environment helpers."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Iterable, List

from dotenv import load_dotenv

load_dotenv(override=False)


def _require_env(name: str) -> str:
    """Return a required environment variable or raise an error."""

    value = os.getenv(name)
    if not value:
        raise RuntimeError(f"Missing required environment variable: {name}")
    return value


def _env_bool(name: str, default: bool = False) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError as exc:
        raise RuntimeError(f"{name} must be an integer") from exc


def _split_csv(raw: str | None) -> List[str]:
    if not raw:
        return []
    return [item.strip() for item in raw.split(",") if item.strip()]


def _unique(values: Iterable[str]) -> List[str]:
    seen = set()
    ordered: List[str] = []
    for value in values:
        if value not in seen:
            seen.add(value)
            ordered.append(value)
    return ordered


# Application security -------------------------------------------------------
SECRET_KEY = _require_env("SECRET_KEY")

# FRONTEND_ORIGIN can contain a comma-separated list for multi-domain deploys.
_frontend_origins = _split_csv(os.getenv("FRONTEND_ORIGIN"))
_additional_origins = _split_csv(os.getenv("ADDITIONAL_ALLOWED_ORIGINS"))

_local_dev_origins = [
    "http://localhost:8081",
    "http://127.0.0.1:8081",
    "http://localhost:19006",
    "http://127.0.0.1:19006",
]

ALLOWED_CORS_ORIGINS = _unique(
    [
        *_frontend_origins,
        *_additional_origins,
        *_local_dev_origins,
    ]
)

COOKIE_DOMAIN = os.getenv("COOKIE_DOMAIN") or None
COOKIE_SECURE = _env_bool("COOKIE_SECURE", False)
COOKIE_SAMESITE = os.getenv("COOKIE_SAMESITE", "lax")


# Storage --------------------------------------------------------------------
_DEFAULT_DB_PATH = Path(__file__).resolve().parents[2] / "data" / "app.db"
DATABASE_URL = os.getenv("DATABASE_URL") or f"sqlite:///{_DEFAULT_DB_PATH}"
DB_RESET = _env_bool("DB_RESET", False)

# Optimistic update attempts per sales submission before giving up.
LEDGER_MAX_RETRIES = max(1, _env_int("LEDGER_MAX_RETRIES", 5))


# Runtime behaviour ----------------------------------------------------------
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

SUPER_USER_NAME = os.getenv("SUPER_USER_NAME", "Administrator")
SUPER_USER_PHONE = os.getenv("SUPER_USER_PHONE") or None
SUPER_USER_ID_NUMBER = os.getenv("SUPER_USER_ID_NUMBER", "00000000")
SUPER_USER_PASSWORD = os.getenv("SUPER_USER_PASSWORD") or None


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
]
