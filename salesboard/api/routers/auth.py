"""Phone number and password authentication routes."""

from __future__ import annotations

from typing import Any, Dict

from fastapi import APIRouter, Body, Depends
from fastapi.responses import JSONResponse

from ...models import User
from ...services import accounts
from ...services.session import SessionProvider
from ...services.store import RecordStore
from ..deps import get_session_provider, get_store

router = APIRouter(tags=["auth"])


@router.post("/auth/register")
def register(
    body: Dict[str, Any] = Body(...),
    store: RecordStore = Depends(get_store),
    provider: SessionProvider = Depends(get_session_provider),
):
    """Create an agent account and start a session for it."""

    user = accounts.register(store, body)
    provider.login(user)
    return {"ok": True, "user": accounts.user_to_dict(user)}


@router.post("/auth/login")
def login(
    body: Dict[str, Any] = Body(...),
    store: RecordStore = Depends(get_store),
    provider: SessionProvider = Depends(get_session_provider),
):
    user = accounts.login(store, body)
    provider.login(user)
    return {"ok": True, "user": accounts.user_to_dict(user)}


@router.post("/auth/logout")
def logout(provider: SessionProvider = Depends(get_session_provider)):
    provider.clear()
    return JSONResponse({"ok": True})


@router.get("/me")
def me(
    provider: SessionProvider = Depends(get_session_provider),
    store: RecordStore = Depends(get_store),
):
    """Launch check: report the session's user, or ``null`` when logged out."""

    user_id = provider.user_id
    if user_id is None:
        return JSONResponse({"user": None})
    user = store.get(User, user_id)
    if user is None:
        provider.clear()
        return JSONResponse({"user": None})
    return {"user": accounts.user_to_dict(user)}


__all__ = ["router"]
