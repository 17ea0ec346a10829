"""Account registration, login and profile maintenance."""

from __future__ import annotations

import logging
import uuid
from typing import Any, Dict, List, Mapping

from ..core.errors import Conflict, NotFound, ValidationError
from ..core.time import isoformat_utc, utcnow
from ..models import User
from .passwords import hash_password, verify_password
from .store import RecordStore
from .validation import (
    check_id_number,
    normalize_phone,
    validate_login,
    validate_name,
    validate_password_change,
    validate_registration,
)

logger = logging.getLogger(__name__)

PHONE_TAKEN = "Phone number already registered. Please login instead."
ID_NUMBER_TAKEN = "ID Number already exists. Please use a different ID."
PHONE_UNKNOWN = "Phone number not found. Please register first."
BAD_CREDENTIALS = "Invalid phone number or password."


def user_to_dict(user: User) -> Dict[str, Any]:
    """Serialise a user for API responses; never includes the password hash."""

    return {
        "id": str(user.id),
        "name": user.name,
        "phone_number": user.phone_number,
        "is_admin": user.is_admin,
        "created_at": isoformat_utc(user.created_at),
    }


def register(store: RecordStore, form: Mapping[str, Any]) -> User:
    data = validate_registration(form)

    if store.first(User, {"phone_number": data["phone_number"]}):
        raise Conflict(PHONE_TAKEN)
    if store.first(User, {"id_number": data["id_number"]}):
        raise Conflict(ID_NUMBER_TAKEN)

    # The unique indexes still reject a duplicate that slips in between the
    # checks above and this insert; the store reports it as Conflict.
    user = store.insert(
        User(
            name=data["name"],
            phone_number=data["phone_number"],
            id_number=data["id_number"],
            password_hash=hash_password(data["password"]),
            is_admin=False,
        )
    )
    logger.info("Registered user %s", user.id)
    return user


def login(store: RecordStore, form: Mapping[str, Any]) -> User:
    data = validate_login(form)
    user = store.first(User, {"phone_number": data["phone_number"]})
    if user is None:
        raise NotFound(PHONE_UNKNOWN)
    if not verify_password(data["password"], user.password_hash):
        logger.info("Rejected login for user %s", user.id)
        raise ValidationError({"general": BAD_CREDENTIALS})
    logger.info("User %s logged in", user.id)
    return user


def get_user(store: RecordStore, user_id: uuid.UUID) -> User:
    user = store.get(User, user_id)
    if user is None:
        raise NotFound("User not found")
    return user


def update_name(store: RecordStore, user_id: uuid.UUID, form: Mapping[str, Any]) -> User:
    name = validate_name(form)
    changed = store.update(User, {"id": user_id}, {"name": name, "updated_at": utcnow()})
    if not changed:
        raise NotFound("User not found")
    return get_user(store, user_id)


def change_password(store: RecordStore, user_id: uuid.UUID, form: Mapping[str, Any]) -> None:
    data = validate_password_change(form)
    user = get_user(store, user_id)
    if not verify_password(data["current_password"], user.password_hash):
        raise ValidationError({"current_password": "Current password is incorrect"})
    store.update(
        User,
        {"id": user_id},
        {"password_hash": hash_password(data["new_password"]), "updated_at": utcnow()},
    )
    logger.info("Password changed for user %s", user_id)


def list_agents(store: RecordStore) -> List[Dict[str, str]]:
    """Users available for a sales submission, alphabetically."""

    users = store.select(User, order_by=(User.name,))
    return [{"id": str(user.id), "name": user.name} for user in users]


def ensure_super_user(
    store: RecordStore,
    *,
    name: str,
    phone_number: str,
    id_number: str,
    password: str,
) -> User:
    """Create or refresh the configured administrator account."""

    message = check_id_number(id_number)
    if message:
        raise ValidationError({"id_number": message})
    phone_number = normalize_phone(phone_number)
    id_number = id_number.strip()
    owner = store.first(User, {"id_number": id_number})
    if owner is not None and owner.phone_number != phone_number:
        logger.error(
            "Administrator ID number %s already belongs to %s, not %s",
            id_number, owner.phone_number, phone_number,
        )
        raise Conflict(f"Administrator ID number {id_number} belongs to another account")

    try:
        user = store.upsert(
            User,
            {
                "name": name.strip()[:50],
                "phone_number": phone_number,
                "id_number": id_number,
                "password_hash": hash_password(password),
                "is_admin": True,
                "updated_at": utcnow(),
            },
            conflict_keys=("phone_number",),
            update_keys=("name", "password_hash", "is_admin", "updated_at"),
        )
    except Conflict:
        logger.error(
            "Could not store administrator %s with ID number %s",
            phone_number, id_number,
        )
        raise
    logger.info("Administrator account %s ready", user.id)
    return user


__all__ = [
    "change_password",
    "ensure_super_user",
    "get_user",
    "list_agents",
    "login",
    "register",
    "update_name",
    "user_to_dict",
]
