"""Monthly sales ledger.

Submissions add to the running total for ``(user_id, month_year)``.
Concurrent submissions are reconciled with an optimistic
compare-and-swap on the row version, so no increment is lost.
"""

from __future__ import annotations

import logging
import re
import uuid
from datetime import date
from typing import Any, Dict, Optional

from ..core.config import LEDGER_MAX_RETRIES
from ..core.errors import Conflict, NotFound, PersistenceError, ValidationError
from ..core.time import isoformat_utc, today, utcnow
from ..models import SalesRecord, User
from .store import RecordStore
from .validation import MAX_CONNECTIONS

logger = logging.getLogger(__name__)

_MONTH_KEY_RE = re.compile(r"^\d{4}-(0[1-9]|1[0-2])$")


def month_key(on_date: date) -> str:
    """Bucket a calendar date into its ``YYYY-MM`` key."""
    return f"{on_date.year:04d}-{on_date.month:02d}"


def current_month() -> str:
    return month_key(today())


def parse_month_key(raw: Optional[str]) -> str:
    if raw is None or not raw.strip():
        return current_month()
    value = raw.strip()
    if not _MONTH_KEY_RE.match(value):
        raise ValidationError({"month": "Month must use the YYYY-MM format"})
    return value


def sales_to_dict(record: SalesRecord) -> Dict[str, Any]:
    return {
        "user_id": str(record.user_id),
        "month_year": record.month_year,
        "connections": record.connections,
        "updated_at": isoformat_utc(record.updated_at),
    }


def record_sale(
    store: RecordStore,
    user_id: uuid.UUID,
    on_date: date,
    delta: int,
    *,
    max_retries: int = LEDGER_MAX_RETRIES,
) -> SalesRecord:
    """Add ``delta`` connections to the agent's total for the month of ``on_date``."""

    if (
        isinstance(delta, bool)
        or not isinstance(delta, int)
        or not 0 <= delta <= MAX_CONNECTIONS
    ):
        raise ValidationError({"connections": "Please enter a valid number (0 or greater)"})
    if store.get(User, user_id) is None:
        raise NotFound("Sales agent not found")

    month_year = month_key(on_date)
    key = {"user_id": user_id, "month_year": month_year}

    for attempt in range(1, max_retries + 1):
        current = store.first(SalesRecord, key)
        if current is None:
            try:
                record = store.insert(
                    SalesRecord(user_id=user_id, month_year=month_year, connections=delta)
                )
            except Conflict:
                logger.info(
                    "Sales row %s/%s created concurrently (attempt %d/%d)",
                    user_id, month_year, attempt, max_retries,
                )
                continue
            logger.info("Recorded %d connections for %s in %s", delta, user_id, month_year)
            return record

        record_id = current.id
        total = current.connections + delta
        if total > MAX_CONNECTIONS:
            raise ValidationError(
                {"connections": f"Monthly total cannot exceed {MAX_CONNECTIONS} connections"}
            )
        swapped = store.compare_and_swap(
            SalesRecord,
            {"id": record_id},
            "version",
            current.version,
            {"connections": total, "updated_at": utcnow()},
        )
        if swapped:
            logger.info(
                "Added %d connections for %s in %s (total %d)",
                delta, user_id, month_year, total,
            )
            record = store.get(SalesRecord, record_id)
            if record is None:
                raise PersistenceError()
            return record
        logger.info(
            "Sales row %s/%s changed during update (attempt %d/%d)",
            user_id, month_year, attempt, max_retries,
        )

    logger.warning(
        "Giving up on sales update for %s/%s after %d attempts",
        user_id, month_year, max_retries,
    )
    raise PersistenceError("Sales data is being updated by someone else. Please try again.")


__all__ = [
    "current_month",
    "month_key",
    "parse_month_key",
    "record_sale",
    "sales_to_dict",
]
