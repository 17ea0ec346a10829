"""Database model exports."""

from .sales import SalesRecord
from .user import User

__all__ = [
    "SalesRecord",
    "User",
]
