"""Leaderboard and sales submission endpoints."""

from __future__ import annotations

from typing import Any, Dict, Optional

from fastapi import APIRouter, Body, Depends

from ...core import LEDGER_MAX_RETRIES
from ...models import User
from ...services.ledger import current_month, parse_month_key, record_sale, sales_to_dict
from ...services.ranking import compute_leaderboard
from ...services.store import RecordStore
from ...services.validation import validate_sale
from ..deps import current_user, get_store, require_admin

router = APIRouter(tags=["leaderboard"])


def _leaderboard_payload(store: RecordStore, month_year: str) -> Dict[str, Any]:
    entries = compute_leaderboard(store, month_year)
    return {
        "month": month_year,
        "entries": [entry.to_dict() for entry in entries],
    }


@router.get("/leaderboard")
def get_leaderboard(
    month: Optional[str] = None,
    _: User = Depends(current_user),
    store: RecordStore = Depends(get_store),
):
    """Ranked standings for ``month`` (``YYYY-MM``, default current month)."""

    return _leaderboard_payload(store, parse_month_key(month))


@router.post("/sales")
def submit_sales(
    body: Dict[str, Any] = Body(...),
    _: User = Depends(require_admin),
    store: RecordStore = Depends(get_store),
):
    """Add connections for an agent, then return the refreshed leaderboard."""

    data = validate_sale(body)
    record = record_sale(
        store,
        data["user_id"],
        data["date"],
        data["connections"],
        max_retries=LEDGER_MAX_RETRIES,
    )
    return {
        "ok": True,
        "record": sales_to_dict(record),
        "leaderboard": _leaderboard_payload(store, current_month()),
    }


__all__ = ["router"]
