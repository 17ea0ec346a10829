"""Database model for sales agents and administrators."""

from __future__ import annotations

import uuid
from datetime import datetime

from sqlmodel import Field as ORMField, SQLModel

from ..core.time import utcnow


class User(SQLModel, table=True):
    """Account identified by a normalised phone number."""

    __tablename__ = "users"

    id: uuid.UUID = ORMField(default_factory=uuid.uuid4, primary_key=True, nullable=False)
    name: str = ORMField(max_length=50)
    phone_number: str = ORMField(index=True, unique=True, max_length=13)
    id_number: str = ORMField(index=True, unique=True)
    password_hash: str
    is_admin: bool = ORMField(default=False)
    created_at: datetime = ORMField(default_factory=utcnow)
    updated_at: datetime = ORMField(default_factory=utcnow)


__all__ = ["User"]
