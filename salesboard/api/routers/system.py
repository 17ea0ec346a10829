"""System-level API endpoints."""

from __future__ import annotations

from typing import Any, Dict

from fastapi import APIRouter
from fastapi.responses import JSONResponse

from ...services.ledger import current_month
from ...services.ranking import zone_legend
from ...services.validation import PHONE_PREFIX

router = APIRouter(tags=["system"])


@router.get("/health")
def health() -> Dict[str, bool]:
    """Simple readiness probe."""

    return {"ok": True}


@router.get("/healthz")
def healthz() -> JSONResponse:
    """Kubernetes-style readiness endpoint."""

    return JSONResponse({"ok": True})


@router.get("/config")
def get_config() -> Dict[str, Any]:
    """Expose the values clients need to render forms and the legend."""

    return {
        "phone_prefix": PHONE_PREFIX,
        "current_month": current_month(),
        "zones": zone_legend(),
    }


__all__ = ["router"]
