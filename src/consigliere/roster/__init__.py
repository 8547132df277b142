"""Roster lookup with payroll aggregation and bounded concurrent fan-out."""

from __future__ import annotations

import asyncio
import logging
import sqlite3
from dataclasses import dataclass
from typing import Dict, Protocol, Sequence, Tuple

from consigliere.errors import ServiceUnavailable
from consigliere.models import PlayerRecord


logger = logging.getLogger("uvicorn.error")

DEFAULT_TIMEOUT = 5.0


class RosterSource(Protocol):
    def find_roster(self, team: str) -> list[PlayerRecord]: ...


@dataclass(frozen=True)
class RosterSnapshot:
    team: str
    players: Tuple[PlayerRecord, ...]
    total_salary: int

    @property
    def size(self) -> int:
        return len(self.players)


def fetch_roster(store: RosterSource, team: str) -> RosterSnapshot:
    """Read ``team``'s roster and sum salaries, counting a missing salary as 0.

    An unknown team is not an error: it yields an empty roster with zero payroll.
    """

    try:
        players = tuple(store.find_roster(team))
    except sqlite3.Error as exc:
        raise ServiceUnavailable(f"Player store unavailable while loading {team}: {exc}") from exc
    if not players:
        logger.warning("No players found for team: %s", team)
    total = sum(player.salary_value for player in players)
    return RosterSnapshot(team=team, players=players, total_salary=total)


async def fetch_rosters(
    store: RosterSource,
    teams: Sequence[str],
    *,
    timeout: float | None = DEFAULT_TIMEOUT,
) -> Dict[str, RosterSnapshot]:
    """Load every team's roster concurrently and join before returning.

    The whole fan-out shares one deadline; exceeding it raises
    ``ServiceUnavailable`` instead of blocking the request.
    """

    async def _load(team: str) -> RosterSnapshot:
        return await asyncio.to_thread(fetch_roster, store, team)

    gathered = asyncio.gather(*(_load(team) for team in teams))
    try:
        snapshots = await asyncio.wait_for(gathered, timeout=timeout)
    except asyncio.TimeoutError as exc:
        logger.warning("Roster lookup timed out after %.1fs for %s", timeout or 0.0, ", ".join(teams))
        raise ServiceUnavailable("Timed out loading team rosters from the player store") from exc
    return {snapshot.team: snapshot for snapshot in snapshots}
