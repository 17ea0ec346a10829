"""Form validation and phone number normalisation.

Each ``validate_*`` function checks every field of a submitted form,
collects one message per failing field and raises
:class:`~salesboard.core.errors.ValidationError` carrying all of them.
On success it returns the cleaned values.
"""

from __future__ import annotations

import re
import uuid
from datetime import date, datetime, timezone
from typing import Any, Dict, Mapping, Optional

from ..core.errors import ValidationError
from ..core.time import today

PHONE_PREFIX = "+254"
PHONE_DIGITS = 9

_PHONE_LOCAL_RE = re.compile(r"^[17]\d{8}$")
_DIGITS_RE = re.compile(r"^\d+$")
_NON_DIGITS_RE = re.compile(r"\D")

NAME_MIN_LENGTH = 2
NAME_MAX_LENGTH = 50
PASSWORD_MIN_LENGTH = 6
ID_NUMBER_MIN_LENGTH = 8
# Largest value a portable INTEGER column holds.
MAX_CONNECTIONS = 2**31 - 1

PHONE_REQUIRED = "Phone number is required"
PHONE_INVALID = f"Please enter {PHONE_DIGITS} digits after {PHONE_PREFIX} (starting with 1 or 7)"


def _text(form: Mapping[str, Any], key: str) -> str:
    value = form.get(key)
    if value is None:
        return ""
    return str(value)


def format_phone_input(raw: str) -> str:
    """Keep the country prefix and at most nine digits of whatever was typed after it."""

    if not raw.startswith(PHONE_PREFIX):
        return PHONE_PREFIX
    digits = _NON_DIGITS_RE.sub("", raw[len(PHONE_PREFIX):])
    return PHONE_PREFIX + digits[:PHONE_DIGITS]


def normalize_phone(raw: Optional[str]) -> str:
    """Return ``+254`` followed by nine digits, or raise ``ValidationError``.

    Accepts the prefixed form, ``254...`` without the plus sign and the
    local ``07...``/``01...`` form. Digits typed past the nine after an
    explicit ``+254`` are dropped; the other forms must be exact.
    """

    value = (raw or "").strip()
    if not value or value == PHONE_PREFIX:
        raise ValidationError({"phone_number": PHONE_REQUIRED})

    digits = _NON_DIGITS_RE.sub("", value)
    country = PHONE_PREFIX[1:]
    if value.startswith(PHONE_PREFIX):
        digits = format_phone_input(value)[len(PHONE_PREFIX):]
    elif value.startswith("+"):
        raise ValidationError({"phone_number": PHONE_INVALID})
    elif digits.startswith(country) and len(digits) == len(country) + PHONE_DIGITS:
        digits = digits[len(country):]
    elif digits.startswith("0"):
        digits = digits[1:]

    if len(digits) != PHONE_DIGITS or not _PHONE_LOCAL_RE.match(digits):
        raise ValidationError({"phone_number": PHONE_INVALID})
    return PHONE_PREFIX + digits


def check_name(raw: Optional[str]) -> Optional[str]:
    name = (raw or "").strip()
    if not name:
        return "Name is required"
    if len(name) < NAME_MIN_LENGTH:
        return f"Name must be at least {NAME_MIN_LENGTH} characters"
    if len(name) > NAME_MAX_LENGTH:
        return f"Name must be less than {NAME_MAX_LENGTH} characters"
    return None


def check_id_number(raw: Optional[str]) -> Optional[str]:
    id_number = (raw or "").strip()
    if not id_number:
        return "ID number is required"
    if len(id_number) < ID_NUMBER_MIN_LENGTH:
        return f"ID number must be at least {ID_NUMBER_MIN_LENGTH} digits"
    if not _DIGITS_RE.match(id_number):
        return "ID number must contain only digits"
    return None


def check_password(raw: Optional[str], label: str = "Password") -> Optional[str]:
    password = raw or ""
    if not password.strip():
        return f"{label} is required"
    if len(password) < PASSWORD_MIN_LENGTH:
        return f"{label} must be at least {PASSWORD_MIN_LENGTH} characters"
    return None


def _collect_phone(raw: str, errors: Dict[str, str]) -> Optional[str]:
    try:
        return normalize_phone(raw)
    except ValidationError as exc:
        errors.update(exc.errors)
        return None


def validate_registration(form: Mapping[str, Any]) -> Dict[str, str]:
    errors: Dict[str, str] = {}

    message = check_id_number(_text(form, "id_number"))
    if message:
        errors["id_number"] = message

    phone_number = _collect_phone(_text(form, "phone_number"), errors)

    message = check_name(_text(form, "name"))
    if message:
        errors["name"] = message

    password = _text(form, "password")
    message = check_password(password)
    if message:
        errors["password"] = message

    confirm = _text(form, "confirm_password")
    if not confirm.strip():
        errors["confirm_password"] = "Please confirm your password"
    elif confirm != password:
        errors["confirm_password"] = "Passwords do not match"

    if errors:
        raise ValidationError(errors)
    return {
        "id_number": _text(form, "id_number").strip(),
        "phone_number": phone_number or "",
        "name": _text(form, "name").strip(),
        "password": password,
    }


def validate_login(form: Mapping[str, Any]) -> Dict[str, str]:
    errors: Dict[str, str] = {}
    phone_number = _collect_phone(_text(form, "phone_number"), errors)

    password = _text(form, "password")
    message = check_password(password)
    if message:
        errors["password"] = message

    if errors:
        raise ValidationError(errors)
    return {"phone_number": phone_number or "", "password": password}


def validate_name(form: Mapping[str, Any]) -> str:
    message = check_name(_text(form, "name"))
    if message:
        raise ValidationError({"name": message})
    return _text(form, "name").strip()


def validate_password_change(form: Mapping[str, Any]) -> Dict[str, str]:
    errors: Dict[str, str] = {}
    current = _text(form, "current_password")
    new = _text(form, "new_password")
    confirm = _text(form, "confirm_password")

    if not current:
        errors["current_password"] = "Current password is required"

    if not new:
        errors["new_password"] = "New password is required"
    elif len(new) < PASSWORD_MIN_LENGTH:
        errors["new_password"] = (
            f"New password must be at least {PASSWORD_MIN_LENGTH} characters"
        )

    if not confirm:
        errors["confirm_password"] = "Please confirm your new password"
    elif new != confirm:
        errors["confirm_password"] = "Passwords do not match"

    if current and current == new:
        errors["new_password"] = "New password must be different from current password"

    if errors:
        raise ValidationError(errors)
    return {"current_password": current, "new_password": new}


def parse_connections(raw: Any) -> int:
    """Parse a non-negative whole number from an int or a digit string."""

    if raw is None or (isinstance(raw, str) and not raw.strip()):
        raise ValidationError({"connections": "Connections are required"})
    if isinstance(raw, bool):
        raise ValidationError({"connections": "Please enter a valid number (0 or greater)"})
    if isinstance(raw, int):
        value = raw
    elif isinstance(raw, str) and _DIGITS_RE.match(raw.strip()):
        value = int(raw.strip())
    else:
        raise ValidationError({"connections": "Please enter a valid number (0 or greater)"})
    if value < 0:
        raise ValidationError({"connections": "Please enter a valid number (0 or greater)"})
    if value > MAX_CONNECTIONS:
        raise ValidationError({"connections": f"Connections must be at most {MAX_CONNECTIONS}"})
    return value


def parse_sale_date(raw: Any) -> date:
    """Accept a date, an ISO date or an ISO timestamp; default to today (UTC)."""

    if raw is None or raw == "":
        return today()
    if isinstance(raw, datetime):
        return _utc_date(raw)
    if isinstance(raw, date):
        return raw
    text = str(raw).strip()
    try:
        return date.fromisoformat(text)
    except ValueError:
        pass
    try:
        return _utc_date(datetime.fromisoformat(text.replace("Z", "+00:00")))
    except ValueError as exc:
        raise ValidationError({"date": "Please select a date"}) from exc


def _utc_date(value: datetime) -> date:
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc)
    return value.date()


def validate_sale(form: Mapping[str, Any]) -> Dict[str, Any]:
    errors: Dict[str, str] = {}

    user_id: Optional[uuid.UUID] = None
    raw_user = _text(form, "user_id").strip()
    if not raw_user:
        errors["user_id"] = "Please select a sales agent"
    else:
        try:
            user_id = uuid.UUID(raw_user)
        except ValueError:
            errors["user_id"] = "Please select a sales agent"

    connections = 0
    try:
        connections = parse_connections(form.get("connections"))
    except ValidationError as exc:
        errors.update(exc.errors)

    on_date = None
    try:
        on_date = parse_sale_date(form.get("date"))
    except ValidationError as exc:
        errors.update(exc.errors)

    if errors:
        raise ValidationError(errors)
    return {"user_id": user_id, "connections": connections, "date": on_date}


__all__ = [
    "MAX_CONNECTIONS",
    "PHONE_PREFIX",
    "check_id_number",
    "check_name",
    "check_password",
    "format_phone_input",
    "normalize_phone",
    "parse_connections",
    "parse_sale_date",
    "validate_login",
    "validate_name",
    "validate_password_change",
    "validate_registration",
    "validate_sale",
]
