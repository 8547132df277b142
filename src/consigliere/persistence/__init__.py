"""Persistence layer holding player and team records for a season."""

from __future__ import annotations

import asyncio
import json
import logging
import sqlite3
import tempfile
from pathlib import Path
from typing import Any, Callable, Iterable, List, Optional, Sequence, TypeVar

from consigliere.config import DEFAULT_SEASON
from consigliere.errors import ServiceUnavailable
from consigliere.models import PlayerRecord, PlayoffSeries, TeamRecord, round_index
from consigliere.needs import position_bucket


logger = logging.getLogger(__name__)

T = TypeVar("T")


async def run_in_store(func: Callable[..., T], *args: Any, timeout: float | None = None, **kwargs: Any) -> T:
    """Run a blocking store call off the event loop, mapping failures to ``ServiceUnavailable``."""

    try:
        return await asyncio.wait_for(asyncio.to_thread(func, *args, **kwargs), timeout=timeout)
    except asyncio.TimeoutError as exc:
        raise ServiceUnavailable("Timed out waiting for the player store") from exc
    except sqlite3.Error as exc:
        raise ServiceUnavailable(f"Player store unavailable: {exc}") from exc


class PlayerStore:
    """SQLite-backed, read-mostly document store for players and teams."""

    def __init__(self, db_path: Path | str, *, season: str = DEFAULT_SEASON):
        self.season = season
        self._use_uri = False
        if isinstance(db_path, str) and db_path.startswith("file:"):
            self.db_path: Path | str = db_path
            self._use_uri = True
        else:
            self.db_path = Path(db_path)
        self._ensure_schema()

    def _connect(self) -> sqlite3.Connection:
        if isinstance(self.db_path, Path):
            self.db_path.parent.mkdir(parents=True, exist_ok=True)
        try:
            conn = sqlite3.connect(self.db_path, uri=self._use_uri)
        except sqlite3.OperationalError:
            fallback_dir = Path(tempfile.gettempdir()) / "consigliere-runtime"
            fallback_dir.mkdir(parents=True, exist_ok=True)
            fallback = fallback_dir / "consigliere.sqlite"
            logger.warning("Cannot open %s; falling back to %s", self.db_path, fallback)
            conn = sqlite3.connect(fallback)
            self.db_path = fallback
            self._use_uri = False
            self._create_schema(conn)
        conn.row_factory = sqlite3.Row
        return conn

    def _ensure_schema(self) -> None:
        with self._connect() as conn:
            self._create_schema(conn)

    def _create_schema(self, conn: sqlite3.Connection) -> None:
        conn.execute(
            """
            CREATE TABLE IF NOT EXISTS players (
                name TEXT NOT NULL,
                season TEXT NOT NULL,
                team TEXT NOT NULL,
                position TEXT,
                salary INTEGER,
                stats_json TEXT NOT NULL,
                PRIMARY KEY (name, season)
            )
            """
        )
        conn.execute("CREATE INDEX IF NOT EXISTS idx_players_team ON players (season, team)")
        conn.execute(
            """
            CREATE TABLE IF NOT EXISTS teams (
                abbreviation TEXT NOT NULL,
                season TEXT NOT NULL,
                name TEXT,
                total_payroll INTEGER,
                strength TEXT,
                weakness TEXT,
                PRIMARY KEY (abbreviation, season)
            )
            """
        )
        conn.execute(
            """
            CREATE TABLE IF NOT EXISTS playoff_series (
                series_id TEXT NOT NULL,
                season TEXT NOT NULL,
                round_index INTEGER NOT NULL,
                team1 TEXT NOT NULL,
                team2 TEXT NOT NULL,
                series_json TEXT NOT NULL,
                PRIMARY KEY (series_id, season)
            )
            """
        )
        conn.commit()

    def ping(self) -> bool:
        try:
            with self._connect() as conn:
                conn.execute("SELECT 1").fetchone()
        except sqlite3.Error:
            return False
        return True

    def upsert_players(self, records: Iterable[PlayerRecord]) -> int:
        rows = [
            (
                record.name,
                record.season,
                record.team,
                record.position,
                record.salary,
                json.dumps(record.stats),
            )
            for record in records
        ]
        with self._connect() as conn:
            conn.executemany(
                """
                INSERT INTO players (name, season, team, position, salary, stats_json)
                VALUES (?, ?, ?, ?, ?, ?)
                ON CONFLICT (name, season) DO UPDATE SET
                    team = excluded.team,
                    position = excluded.position,
                    salary = excluded.salary,
                    stats_json = excluded.stats_json
                """,
                rows,
            )
            conn.commit()
        return len(rows)

    def upsert_teams(self, records: Iterable[TeamRecord]) -> int:
        rows = [
            (
                record.abbreviation,
                record.season,
                record.name,
                record.total_payroll,
                record.strength,
                record.weakness,
            )
            for record in records
        ]
        with self._connect() as conn:
            conn.executemany(
                """
                INSERT INTO teams (abbreviation, season, name, total_payroll, strength, weakness)
                VALUES (?, ?, ?, ?, ?, ?)
                ON CONFLICT (abbreviation, season) DO UPDATE SET
                    name = excluded.name,
                    total_payroll = excluded.total_payroll,
                    strength = excluded.strength,
                    weakness = excluded.weakness
                """,
                rows,
            )
            conn.commit()
        return len(rows)

    def upsert_playoff_series(self, records: Iterable[PlayoffSeries]) -> int:
        rows = [
            (
                record.series_id,
                record.season,
                round_index(record.round),
                record.team1,
                record.team2,
                record.model_dump_json(),
            )
            for record in records
        ]
        with self._connect() as conn:
            conn.executemany(
                """
                INSERT INTO playoff_series (series_id, season, round_index, team1, team2, series_json)
                VALUES (?, ?, ?, ?, ?, ?)
                ON CONFLICT (series_id, season) DO UPDATE SET
                    round_index = excluded.round_index,
                    team1 = excluded.team1,
                    team2 = excluded.team2,
                    series_json = excluded.series_json
                """,
                rows,
            )
            conn.commit()
        return len(rows)

    def find_playoff_series(self, team: str) -> List[PlayoffSeries]:
        """Series ``team`` played this season in bracket order; empty when it missed the playoffs."""

        team = team.strip().upper()
        with self._connect() as conn:
            rows = conn.execute(
                """
                SELECT series_json FROM playoff_series
                WHERE season = ? AND (team1 = ? OR team2 = ?)
                ORDER BY round_index, series_id
                """,
                (self.season, team, team),
            ).fetchall()
        return [PlayoffSeries.model_validate_json(row["series_json"]) for row in rows]

    def has_playoff_data(self) -> bool:
        with self._connect() as conn:
            row = conn.execute("SELECT 1 FROM playoff_series WHERE season = ? LIMIT 1", (self.season,)).fetchone()
        return row is not None

    def find_roster(self, team: str) -> List[PlayerRecord]:
        """Players currently affiliated with ``team``; empty for unknown teams."""

        with self._connect() as conn:
            rows = conn.execute(
                "SELECT * FROM players WHERE season = ? AND team = ? ORDER BY name",
                (self.season, team.strip().upper()),
            ).fetchall()
        return [self._row_to_player(row) for row in rows]

    def find_team_payroll(self, team: str) -> Optional[int]:
        """Recorded team payroll, or ``None`` when the team row or figure is absent."""

        record = self.get_team(team)
        if record is None:
            return None
        return record.total_payroll

    def get_team(self, team: str) -> Optional[TeamRecord]:
        with self._connect() as conn:
            row = conn.execute(
                "SELECT * FROM teams WHERE season = ? AND abbreviation = ?",
                (self.season, team.strip().upper()),
            ).fetchone()
        if row is None:
            return None
        return TeamRecord(
            abbreviation=row["abbreviation"],
            season=row["season"],
            name=row["name"],
            total_payroll=row["total_payroll"],
            strength=row["strength"],
            weakness=row["weakness"],
        )

    def list_teams(self) -> List[str]:
        with self._connect() as conn:
            rows = conn.execute(
                """
                SELECT team AS abbreviation FROM players WHERE season = ?
                UNION
                SELECT abbreviation FROM teams WHERE season = ?
                ORDER BY abbreviation
                """,
                (self.season, self.season),
            ).fetchall()
        return [row["abbreviation"] for row in rows]

    def find_player(self, name: str) -> Optional[PlayerRecord]:
        """Case-insensitive lookup: exact name first, then the best-paid partial match."""

        needle = name.strip().lower()
        if not needle:
            return None
        with self._connect() as conn:
            row = conn.execute(
                "SELECT * FROM players WHERE season = ? AND lower(name) = ?",
                (self.season, needle),
            ).fetchone()
            if row is None:
                row = conn.execute(
                    """
                    SELECT * FROM players
                    WHERE season = ? AND instr(lower(name), ?) > 0
                    ORDER BY COALESCE(salary, 0) DESC, name
                    LIMIT 1
                    """,
                    (self.season, needle),
                ).fetchone()
        if row is None:
            return None
        return self._row_to_player(row)

    def find_players_by_names(self, names: Sequence[str]) -> dict[str, Optional[PlayerRecord]]:
        return {name: self.find_player(name) for name in names}

    def find_similar_salary_players(
        self,
        player: PlayerRecord,
        *,
        band: float = 0.2,
        limit: int = 5,
    ) -> List[PlayerRecord]:
        """Other players whose salary lies within ``band`` of ``player``'s, closest first."""

        if not player.salary:
            return []
        low = int(player.salary * (1 - band))
        high = int(player.salary * (1 + band))
        with self._connect() as conn:
            rows = conn.execute(
                """
                SELECT * FROM players
                WHERE season = ? AND name != ? AND salary BETWEEN ? AND ?
                ORDER BY ABS(salary - ?), name
                LIMIT ?
                """,
                (self.season, player.name, low, high, player.salary, limit),
            ).fetchall()
        return [self._row_to_player(row) for row in rows]

    def find_trade_targets(
        self,
        *,
        exclude_team: str,
        positions: Sequence[str] | None = None,
        min_minutes: float = 20.0,
    ) -> List[PlayerRecord]:
        """Rotation players with known salaries on other teams.

        ``positions`` lists need buckets (``PG``/``G``/``F``/``C``); listed
        positions such as ``SG`` or ``F-C`` are matched by their bucket.
        """

        with self._connect() as conn:
            rows = conn.execute(
                """
                SELECT * FROM players
                WHERE season = ? AND team != ? AND salary IS NOT NULL AND salary > 0
                """,
                (self.season, exclude_team.strip().upper()),
            ).fetchall()
        records = [self._row_to_player(row) for row in rows]
        wanted = set(positions) if positions else None
        return [
            record
            for record in records
            if record.stat("minutes_per_game") > min_minutes
            and (wanted is None or position_bucket(record.position) in wanted)
        ]

    def _row_to_player(self, row: sqlite3.Row) -> PlayerRecord:
        return PlayerRecord(
            name=row["name"],
            season=row["season"],
            team=row["team"],
            position=row["position"],
            salary=row["salary"],
            stats=json.loads(row["stats_json"] or "{}"),
        )
