"""Helpers to load player stat, team and playoff series CSVs into canonical records."""

from __future__ import annotations

import csv
import logging
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Mapping, Optional, Tuple

from pydantic import ValidationError

from consigliere.config import DEFAULT_SEASON
from consigliere.models import PlayerRecord, PlayoffSeries, TeamRecord
from consigliere.persistence import PlayerStore


logger = logging.getLogger(__name__)

# Column entries may list alternatives separated by "|"; the first non-empty wins.
DEFAULT_PLAYER_MAPPING: Dict[str, str] = {
    "name": "NAME|Player|PLAYER",
    "team": "TEAM|Team|Tm",
    "position": "POS|Position|Pos",
    "salary": "SALARY|Salary|salary_2023_2024",
    "games_played": "GP|G",
    "minutes_per_game": "MPG|MP",
    "points_per_game": "PPG|PTS",
    "rebounds_per_game": "RPG|TRB",
    "assists_per_game": "APG|AST",
    "steals_per_game": "SPG|STL",
    "blocks_per_game": "BPG|BLK",
    "turnovers_per_game": "TOPG|TPG|TOV",
    "field_goal_percentage": "FG%|FG_PCT",
    "three_point_percentage": "3P%|FG3_PCT",
    "free_throw_percentage": "FT%|FT_PCT",
}

DEFAULT_TEAM_MAPPING: Dict[str, str] = {
    "abbreviation": "TEAM|Team|team",
    "name": "NAME|Name|name",
    "total_payroll": "TOTAL_PAYROLL|Payroll|total_payroll",
    "strength": "STRENGTH|Strength|strength",
    "weakness": "WEAKNESS|Weakness|weakness",
}

DEFAULT_PLAYOFF_MAPPING: Dict[str, str] = {
    "series_id": "SERIES_ID|series_id",
    "round": "ROUND|Round|round",
    "conference": "CONFERENCE|Conference|conference",
    "team1": "TEAM1|team1",
    "team2": "TEAM2|team2",
    "team1_seed": "TEAM1_SEED|team1_seed",
    "team2_seed": "TEAM2_SEED|team2_seed",
    "team1_wins": "TEAM1_WINS|team1_wins",
    "team2_wins": "TEAM2_WINS|team2_wins",
    "winner": "WINNER|winner",
    "favorite": "FAVORITE|favorite",
    "team1_moneyline": "TEAM1_MONEYLINE|team1_moneyline",
    "team2_moneyline": "TEAM2_MONEYLINE|team2_moneyline",
    "over_under": "OVER_UNDER|over_under",
}

_IDENTITY_FIELDS = {"name", "team", "position", "salary"}


@dataclass(frozen=True)
class ImportReport:
    players_loaded: int
    teams_loaded: int
    rows_skipped: int
    playoff_series_loaded: int = 0


def _extract(row: Mapping[str, Optional[str]], columns: str | None) -> str:
    if not columns:
        return ""
    for column in columns.split("|"):
        value = row.get(column.strip())
        if value is not None and value.strip():
            return value.strip()
    return ""


def _parse_salary(raw: str) -> int | None:
    """Dollar amount with optional ``$``/``,`` decoration; ``None`` when no digits remain."""

    digits = re.sub(r"[^0-9.]", "", raw)
    if not digits:
        return None
    try:
        return int(float(digits))
    except ValueError:
        return None


def _parse_stat(raw: str) -> float | None:
    if not raw:
        return None
    try:
        return float(raw.rstrip("%"))
    except ValueError:
        return None


def load_player_csv(
    path: Path,
    *,
    season: str = DEFAULT_SEASON,
    mapping: Mapping[str, str] | None = None,
) -> Tuple[List[PlayerRecord], int]:
    """Read a stats CSV, returning the parsed records and the number of rows skipped."""

    mapping = {**DEFAULT_PLAYER_MAPPING, **(mapping or {})}
    records: List[PlayerRecord] = []
    skipped = 0
    with path.open(newline="", encoding="utf-8-sig") as f:
        for line_no, row in enumerate(csv.DictReader(f), start=2):
            name = _extract(row, mapping.get("name"))
            team = _extract(row, mapping.get("team"))
            if not name or not team:
                logger.warning("Skipping %s line %d: missing player name or team", path.name, line_no)
                skipped += 1
                continue
            stats: Dict[str, float] = {}
            for key, columns in mapping.items():
                if key in _IDENTITY_FIELDS:
                    continue
                value = _parse_stat(_extract(row, columns))
                if value is not None:
                    stats[key] = value
            try:
                records.append(
                    PlayerRecord(
                        name=name,
                        team=team,
                        position=_extract(row, mapping.get("position")) or None,
                        season=season,
                        salary=_parse_salary(_extract(row, mapping.get("salary"))),
                        stats=stats,
                    )
                )
            except ValidationError as exc:
                logger.warning("Skipping %s line %d: %s", path.name, line_no, exc)
                skipped += 1
    return records, skipped


def load_team_csv(
    path: Path,
    *,
    season: str = DEFAULT_SEASON,
    mapping: Mapping[str, str] | None = None,
) -> Tuple[List[TeamRecord], int]:
    mapping = {**DEFAULT_TEAM_MAPPING, **(mapping or {})}
    records: List[TeamRecord] = []
    skipped = 0
    with path.open(newline="", encoding="utf-8-sig") as f:
        for line_no, row in enumerate(csv.DictReader(f), start=2):
            abbreviation = _extract(row, mapping.get("abbreviation"))
            if not abbreviation:
                logger.warning("Skipping %s line %d: missing team abbreviation", path.name, line_no)
                skipped += 1
                continue
            records.append(
                TeamRecord(
                    abbreviation=abbreviation,
                    season=season,
                    name=_extract(row, mapping.get("name")) or None,
                    total_payroll=_parse_salary(_extract(row, mapping.get("total_payroll"))),
                    strength=_extract(row, mapping.get("strength")) or None,
                    weakness=_extract(row, mapping.get("weakness")) or None,
                )
            )
    return records, skipped


def _parse_int(raw: str) -> int | None:
    value = _parse_stat(raw)
    return None if value is None else int(value)


def load_playoff_csv(
    path: Path,
    *,
    season: str = DEFAULT_SEASON,
    mapping: Mapping[str, str] | None = None,
) -> Tuple[List[PlayoffSeries], int]:
    """Read one row per playoff series; rows without both teams and a round are skipped."""

    mapping = {**DEFAULT_PLAYOFF_MAPPING, **(mapping or {})}
    records: List[PlayoffSeries] = []
    skipped = 0
    with path.open(newline="", encoding="utf-8-sig") as f:
        for line_no, row in enumerate(csv.DictReader(f), start=2):
            fields = {key: _extract(row, columns) for key, columns in mapping.items()}
            if not fields["team1"] or not fields["team2"] or not fields["round"]:
                logger.warning("Skipping %s line %d: missing round or teams", path.name, line_no)
                skipped += 1
                continue
            generated = f"{season}-{fields['round']}-{fields['team1']}-{fields['team2']}"
            series_id = fields["series_id"] or generated.lower().replace(" ", "-")
            try:
                records.append(
                    PlayoffSeries(
                        series_id=series_id,
                        season=season,
                        round=fields["round"],
                        conference=fields["conference"] or None,
                        team1=fields["team1"],
                        team2=fields["team2"],
                        team1_seed=_parse_int(fields["team1_seed"]),
                        team2_seed=_parse_int(fields["team2_seed"]),
                        team1_wins=_parse_int(fields["team1_wins"]) or 0,
                        team2_wins=_parse_int(fields["team2_wins"]) or 0,
                        winner=fields["winner"] or None,
                        favorite=fields["favorite"] or None,
                        team1_moneyline=_parse_int(fields["team1_moneyline"]),
                        team2_moneyline=_parse_int(fields["team2_moneyline"]),
                        over_under=_parse_stat(fields["over_under"]),
                    )
                )
            except ValidationError as exc:
                logger.warning("Skipping %s line %d: %s", path.name, line_no, exc)
                skipped += 1
    return records, skipped


def import_files(
    store: PlayerStore,
    *,
    players_path: Path | None = None,
    teams_path: Path | None = None,
    playoffs_path: Path | None = None,
    season: str | None = None,
) -> ImportReport:
    """Upsert whichever CSVs are given into ``store`` for ``season`` (store's season by default)."""

    season = season or store.season
    players_loaded = teams_loaded = series_loaded = skipped = 0
    if players_path is not None:
        players, player_skips = load_player_csv(players_path, season=season)
        players_loaded = store.upsert_players(players)
        skipped += player_skips
    if teams_path is not None:
        teams, team_skips = load_team_csv(teams_path, season=season)
        teams_loaded = store.upsert_teams(teams)
        skipped += team_skips
    if playoffs_path is not None:
        series, series_skips = load_playoff_csv(playoffs_path, season=season)
        series_loaded = store.upsert_playoff_series(series)
        skipped += series_skips
    logger.info(
        "Imported %d players, %d teams and %d playoff series for %s (%d rows skipped)",
        players_loaded,
        teams_loaded,
        series_loaded,
        season,
        skipped,
    )
    return ImportReport(
        players_loaded=players_loaded,
        teams_loaded=teams_loaded,
        rows_skipped=skipped,
        playoff_series_loaded=series_loaded,
    )
