"""Salted one-way password hashing."""

from __future__ import annotations

import logging

from passlib.context import CryptContext

logger = logging.getLogger(__name__)

pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Constant-time check of ``plain_password`` against a stored hash."""

    try:
        return pwd_context.verify(plain_password, hashed_password)
    except (TypeError, ValueError) as exc:
        logger.warning("Stored password hash could not be verified: %s", exc)
        return False


__all__ = ["hash_password", "pwd_context", "verify_password"]
