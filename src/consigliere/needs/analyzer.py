"""Heuristic team-needs analysis used by trade recommendations."""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from typing import Dict, Iterable, Mapping, Tuple

from consigliere.models import PlayerRecord


# Minimum players per bucket before the position is flagged.
POSITION_MINIMUMS: Mapping[str, int] = {"PG": 2, "C": 1, "F": 3}

# Minimum summed per-game output before the category is flagged.
NEED_THRESHOLDS: Mapping[str, Tuple[str, float]] = {
    "scoring": ("points_per_game", 110.0),
    "rebounding": ("rebounds_per_game", 45.0),
    "playmaking": ("assists_per_game", 25.0),
}

_BUCKETS = {
    "PG": "PG",
    "SG": "G",
    "G": "G",
    "SF": "F",
    "PF": "F",
    "F": "F",
    "C": "C",
}


@dataclass(frozen=True)
class TeamNeeds:
    positions: Tuple[str, ...]
    stats: Tuple[str, ...]
    priority: str
    position_counts: Dict[str, int] = field(default_factory=dict)
    totals: Dict[str, float] = field(default_factory=dict)


def position_bucket(position: str | None) -> str:
    """Collapse listed positions to PG/G/F/C; hybrids such as ``F-C`` use the first part."""

    if not position:
        return "Unknown"
    primary = position.upper().replace("/", "-").split("-", 1)[0].strip()
    return _BUCKETS.get(primary, "Unknown")


def calculate_team_needs(roster: Iterable[PlayerRecord]) -> TeamNeeds:
    counts: Counter[str] = Counter()
    totals = {"points_per_game": 0.0, "rebounds_per_game": 0.0, "assists_per_game": 0.0, "games_played": 0.0}

    for player in roster:
        counts[position_bucket(player.position)] += 1
        for key in totals:
            totals[key] += player.stat(key)

    positions = tuple(pos for pos, minimum in POSITION_MINIMUMS.items() if counts[pos] < minimum)
    stats = tuple(name for name, (key, floor) in NEED_THRESHOLDS.items() if totals[key] < floor)

    gaps = len(positions) + len(stats)
    if gaps == 0:
        priority = "low"
    elif gaps >= 4:
        priority = "high"
    else:
        priority = "medium"

    return TeamNeeds(
        positions=positions,
        stats=stats,
        priority=priority,
        position_counts=dict(counts),
        totals=totals,
    )
