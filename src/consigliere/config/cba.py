"""League salary thresholds for supported seasons."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable


DEFAULT_SEASON = "2023-24"


@dataclass(frozen=True)
class CapThresholds:
    season: str
    salary_cap: int
    luxury_tax: int
    first_apron: int
    second_apron: int
    minimum_salary: int
    maximum_salary: int
    max_roster_size: int = 15
    matching_ratio: float = 1.25
    matching_cushion: int = 100_000


_THRESHOLDS: Dict[str, CapThresholds] = {
    "2023-24": CapThresholds(
        season="2023-24",
        salary_cap=136_021_000,
        luxury_tax=165_294_000,
        first_apron=172_346_000,
        second_apron=182_794_000,
        minimum_salary=953_859,
        maximum_salary=47_600_000,
    ),
}


def iter_thresholds() -> Iterable[CapThresholds]:
    """Return an iterator of all configured seasons."""

    return _THRESHOLDS.values()


def get_thresholds(season: str = DEFAULT_SEASON) -> CapThresholds:
    """Fetch thresholds for a season ("2023-24" or "2023-2024"), raising KeyError if missing."""

    key = _normalize_season(season)
    if key not in _THRESHOLDS:
        raise KeyError(f"No cap thresholds configured for season={season!r}")
    return _THRESHOLDS[key]


def _normalize_season(season: str) -> str:
    season = season.strip()
    parts = season.split("-", 1)
    if len(parts) == 2 and len(parts[1]) == 4:
        return f"{parts[0]}-{parts[1][2:]}"
    return season
