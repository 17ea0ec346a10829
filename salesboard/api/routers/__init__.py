"""Aggregate API routers."""

from fastapi import APIRouter

from .auth import router as auth_router
from .leaderboard import router as leaderboard_router
from .system import router as system_router
from .users import router as users_router

ALL_ROUTERS: tuple[APIRouter, ...] = (
    system_router,
    auth_router,
    users_router,
    leaderboard_router,
)

__all__ = ["ALL_ROUTERS"]
