"""Database model for monthly sales totals."""

from __future__ import annotations

import uuid
from datetime import datetime
from typing import Optional

from sqlalchemy import UniqueConstraint
from sqlmodel import Field as ORMField, SQLModel

from ..core.time import utcnow


class SalesRecord(SQLModel, table=True):
    """Accumulated connections for one agent in one ``YYYY-MM`` bucket.

    ``version`` is bumped on every change and guards the conditional
    update used by the ledger.
    """

    __tablename__ = "sales"
    __table_args__ = (
        UniqueConstraint("user_id", "month_year", name="uq_sales_user_month"),
    )

    id: Optional[int] = ORMField(default=None, primary_key=True)
    user_id: uuid.UUID = ORMField(foreign_key="users.id", index=True)
    month_year: str = ORMField(index=True, max_length=7)
    connections: int = ORMField(default=0)
    version: int = ORMField(default=1)
    created_at: datetime = ORMField(default_factory=utcnow)
    updated_at: datetime = ORMField(default_factory=utcnow)


__all__ = ["SalesRecord"]
