"""User profile and agent directory endpoints."""

from __future__ import annotations

from typing import Any, Dict

from fastapi import APIRouter, Body, Depends

from ...models import User
from ...services import accounts
from ...services.session import USER_NAME_KEY, SessionProvider
from ...services.store import RecordStore
from ..deps import current_user, get_session_provider, get_store, require_admin

router = APIRouter(tags=["users"])


@router.get("/users")
def list_users(
    _: User = Depends(require_admin),
    store: RecordStore = Depends(get_store),
):
    """Agents available in the sales submission picker."""

    return {"users": accounts.list_agents(store)}


@router.get("/me/profile")
def get_profile(user: User = Depends(current_user)):
    return {"user": accounts.user_to_dict(user)}


@router.patch("/me/profile")
def update_profile(
    body: Dict[str, Any] = Body(...),
    user: User = Depends(current_user),
    store: RecordStore = Depends(get_store),
    provider: SessionProvider = Depends(get_session_provider),
):
    """Rename the current user."""

    updated = accounts.update_name(store, user.id, body)
    provider.set(USER_NAME_KEY, updated.name)
    return {"ok": True, "user": accounts.user_to_dict(updated)}


@router.post("/me/password")
def change_password(
    body: Dict[str, Any] = Body(...),
    user: User = Depends(current_user),
    store: RecordStore = Depends(get_store),
):
    accounts.change_password(store, user.id, body)
    return {"ok": True}


__all__ = ["router"]
