"""Database configuration and session helpers."""

from __future__ import annotations

from pathlib import Path
from typing import Iterator

from sqlalchemy.engine import make_url
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, create_engine

from .config import DATABASE_URL


def _build_engine(url: str):
    parsed = make_url(url)
    if parsed.get_backend_name() != "sqlite":
        return create_engine(url, pool_pre_ping=True)

    connect_args = {"check_same_thread": False}
    if parsed.database in (None, "", ":memory:"):
        # A single shared connection keeps the in-memory database alive.
        return create_engine(url, connect_args=connect_args, poolclass=StaticPool)

    Path(parsed.database).parent.mkdir(parents=True, exist_ok=True)
    return create_engine(url, connect_args=connect_args)


engine = _build_engine(DATABASE_URL)


def get_session() -> Iterator[Session]:
    """FastAPI dependency that yields a database session."""

    with Session(engine) as session:
        yield session


__all__ = ["engine", "get_session"]
