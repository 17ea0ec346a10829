"""Service layer helpers."""

from .ledger import current_month, month_key, parse_month_key, record_sale
from .ranking import LeaderboardEntry, Zone, compute_leaderboard, rank_rows, zone_for
from .session import SessionProvider
from .store import RecordStore

__all__ = [
    "LeaderboardEntry",
    "RecordStore",
    "SessionProvider",
    "Zone",
    "compute_leaderboard",
    "current_month",
    "month_key",
    "parse_month_key",
    "rank_rows",
    "record_sale",
    "zone_for",
]
