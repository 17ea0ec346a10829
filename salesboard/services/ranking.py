"""Leaderboard ranking and performance zones."""

from __future__ import annotations

import uuid
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Iterable, List, Optional, Tuple

from sqlmodel import select

from ..models import SalesRecord, User
from .ledger import current_month
from .store import RecordStore


class Zone(str, Enum):
    RED = "red"
    YELLOW = "yellow"
    ORANGE = "orange"
    LIGHT_GREEN = "light_green"
    DARK_GREEN = "dark_green"

    @property
    def label(self) -> str:
        return _ZONE_LABELS[self]

    @property
    def color(self) -> str:
        return _ZONE_COLORS[self]


_ZONE_LABELS = {
    Zone.RED: "Red Zone",
    Zone.YELLOW: "Yellow Zone",
    Zone.ORANGE: "Orange Zone",
    Zone.LIGHT_GREEN: "Light Green Zone",
    Zone.DARK_GREEN: "Dark Green Zone",
}

_ZONE_COLORS = {
    Zone.RED: "#EF4444",
    Zone.YELLOW: "#F59E0B",
    Zone.ORANGE: "#F97316",
    Zone.LIGHT_GREEN: "#10B981",
    Zone.DARK_GREEN: "#059669",
}

# Inclusive (min, max) connections per zone; the last band is open ended.
ZONE_BANDS: Tuple[Tuple[Zone, int, Optional[int]], ...] = (
    (Zone.RED, 0, 4),
    (Zone.YELLOW, 5, 10),
    (Zone.ORANGE, 11, 15),
    (Zone.LIGHT_GREEN, 16, 20),
    (Zone.DARK_GREEN, 21, None),
)


def zone_for(connections: int) -> Zone:
    for zone, _, upper in ZONE_BANDS:
        if upper is None or connections <= upper:
            return zone
    return Zone.DARK_GREEN


def zone_legend() -> List[Dict[str, Any]]:
    return [
        {
            "zone": zone.value,
            "label": zone.label,
            "color": zone.color,
            "min": lower,
            "max": upper,
        }
        for zone, lower, upper in ZONE_BANDS
    ]


@dataclass(frozen=True)
class LeaderboardEntry:
    user_id: uuid.UUID
    name: str
    connections: int
    rank: int

    @property
    def zone(self) -> Zone:
        return zone_for(self.connections)

    def to_dict(self) -> Dict[str, Any]:
        zone = self.zone
        return {
            "user_id": str(self.user_id),
            "name": self.name,
            "connections": self.connections,
            "rank": self.rank,
            "zone": zone.value,
            "zone_color": zone.color,
        }


def rank_rows(rows: Iterable[Tuple[uuid.UUID, str, Optional[int]]]) -> List[LeaderboardEntry]:
    """Rank ``(user_id, name, connections)`` rows given in fetch order.

    Highest connections first; equal totals keep their fetch order and
    still receive consecutive ranks, so ``[30, 30, 10]`` ranks ``1, 2, 3``.
    """

    normalised = [(user_id, name, connections or 0) for user_id, name, connections in rows]
    ordered = sorted(normalised, key=lambda row: -row[2])
    return [
        LeaderboardEntry(user_id=user_id, name=name, connections=connections, rank=index + 1)
        for index, (user_id, name, connections) in enumerate(ordered)
    ]


def compute_leaderboard(
    store: RecordStore, month_year: Optional[str] = None
) -> List[LeaderboardEntry]:
    """Fresh standings for ``month_year`` (default: the current UTC month).

    Only rows whose user still exists take part. Ties are fetched in
    insertion order of the sales rows.
    """

    target = month_year or current_month()
    statement = (
        select(SalesRecord.user_id, User.name, SalesRecord.connections)
        .join(User, User.id == SalesRecord.user_id)
        .where(SalesRecord.month_year == target)
        .order_by(SalesRecord.connections.desc(), SalesRecord.id.asc())
    )
    return rank_rows(store.rows(statement))


__all__ = [
    "LeaderboardEntry",
    "ZONE_BANDS",
    "Zone",
    "compute_leaderboard",
    "rank_rows",
    "zone_for",
    "zone_legend",
]
