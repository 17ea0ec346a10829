"""FastAPI application factory and configuration."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlmodel import Session, SQLModel
from starlette.middleware.sessions import SessionMiddleware

from . import models  # noqa: F401 - ensure models are registered with SQLModel
from .api import register_routes
from .core import (
    ALLOWED_CORS_ORIGINS,
    COOKIE_DOMAIN,
    COOKIE_SAMESITE,
    COOKIE_SECURE,
    DB_RESET,
    SECRET_KEY,
    SUPER_USER_ID_NUMBER,
    SUPER_USER_NAME,
    SUPER_USER_PASSWORD,
    SUPER_USER_PHONE,
    configure_logging,
    engine,
)
from .services.accounts import ensure_super_user
from .services.store import RecordStore

logger = logging.getLogger(__name__)


def bootstrap_super_user() -> None:
    if not (SUPER_USER_PHONE and SUPER_USER_PASSWORD):
        return
    with Session(engine) as session:
        ensure_super_user(
            RecordStore(session),
            name=SUPER_USER_NAME,
            phone_number=SUPER_USER_PHONE,
            id_number=SUPER_USER_ID_NUMBER,
            password=SUPER_USER_PASSWORD,
        )


@asynccontextmanager
async def lifespan(app: FastAPI):
    configure_logging()
    if DB_RESET:
        logger.warning("DB_RESET is set; dropping all tables")
        SQLModel.metadata.drop_all(engine)
    SQLModel.metadata.create_all(engine)
    bootstrap_super_user()
    yield


def create_app() -> FastAPI:
    app = FastAPI(title="Sales Leaderboard API", version="1.0.0", lifespan=lifespan)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=ALLOWED_CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PATCH", "OPTIONS"],
        allow_headers=["*"],
    )
    app.add_middleware(
        SessionMiddleware,
        secret_key=SECRET_KEY,
        session_cookie="sid",
        https_only=COOKIE_SECURE,
        same_site=COOKIE_SAMESITE,
        domain=COOKIE_DOMAIN,
    )

    register_routes(app)
    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("salesboard.app:app", host="127.0.0.1", port=3000, reload=True)
