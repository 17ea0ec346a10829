"""Session provider over the signed cookie session."""

from __future__ import annotations

import uuid
from typing import Any, MutableMapping, Optional

from ..models import User

USER_ID_KEY = "uid"
USER_NAME_KEY = "name"


class SessionProvider:
    """get / set / clear access to the per-client session values."""

    def __init__(self, storage: MutableMapping[str, Any]) -> None:
        self._storage = storage

    def get(self, key: str, default: Any = None) -> Any:
        return self._storage.get(key, default)

    def set(self, key: str, value: Any) -> None:
        self._storage[key] = value

    def clear(self) -> None:
        self._storage.clear()

    @property
    def user_id(self) -> Optional[uuid.UUID]:
        raw = self.get(USER_ID_KEY)
        if not raw:
            return None
        try:
            return uuid.UUID(str(raw))
        except ValueError:
            return None

    @property
    def user_name(self) -> Optional[str]:
        return self.get(USER_NAME_KEY)

    def login(self, user: User) -> None:
        self.set(USER_ID_KEY, str(user.id))
        self.set(USER_NAME_KEY, user.name)


__all__ = ["SessionProvider", "USER_ID_KEY", "USER_NAME_KEY"]
