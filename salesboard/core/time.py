"""Time helpers shared across the application."""

from __future__ import annotations

from datetime import date, datetime, timezone
from typing import Optional


def utcnow() -> datetime:
    """Return the current UTC datetime."""
    return datetime.now(timezone.utc)


def today() -> date:
    return utcnow().date()


def isoformat_utc(value: Optional[datetime]) -> Optional[str]:
    """Serialise a timestamp, marking naive values (as read back from SQLite) as UTC."""

    if value is None:
        return None
    if value.tzinfo is None:
        return value.isoformat() + "Z"
    return value.astimezone(timezone.utc).isoformat().replace("+00:00", "Z")


__all__ = ["isoformat_utc", "today", "utcnow"]
