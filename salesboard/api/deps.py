"""Request-scoped dependencies shared by the routers."""

from __future__ import annotations

from fastapi import Depends, HTTPException, Request
from sqlmodel import Session

from ..core import get_session
from ..core.errors import SessionExpired
from ..models import User
from ..services.session import SessionProvider
from ..services.store import RecordStore


def get_store(session: Session = Depends(get_session)) -> RecordStore:
    return RecordStore(session)


def get_session_provider(request: Request) -> SessionProvider:
    return SessionProvider(request.session)


def current_user(
    provider: SessionProvider = Depends(get_session_provider),
    store: RecordStore = Depends(get_store),
) -> User:
    """Resolve the logged-in user or raise ``SessionExpired``."""

    user_id = provider.user_id
    if user_id is None:
        provider.clear()
        raise SessionExpired()
    user = store.get(User, user_id)
    if user is None:
        provider.clear()
        raise SessionExpired("Your account could not be found. Please log in again.")
    return user


def require_admin(user: User = Depends(current_user)) -> User:
    if not user.is_admin:
        raise HTTPException(status_code=403, detail="Administrator access required")
    return user


__all__ = ["current_user", "get_session_provider", "get_store", "require_admin"]
