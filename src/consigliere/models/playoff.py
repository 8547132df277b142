"""Playoff series results used as team context."""

from __future__ import annotations

from pydantic import BaseModel, Field, field_validator, model_validator
from pydantic.config import ConfigDict

from consigliere.config import DEFAULT_SEASON


ROUND_ORDER = ("First Round", "Conference Semifinals", "Conference Finals", "NBA Finals")


def round_index(name: str) -> int:
    """Position of ``name`` in the playoff bracket; unknown rounds sort last."""

    lowered = name.strip().lower()
    for index, known in enumerate(ROUND_ORDER):
        if known.lower() == lowered:
            return index
    return len(ROUND_ORDER)


class PlayoffSeries(BaseModel):
    """One best-of-seven series; ``team1`` is the higher seed as listed by the source."""

    series_id: str = Field(..., min_length=1)
    season: str = DEFAULT_SEASON
    round: str = Field(..., min_length=1)
    conference: str | None = None
    team1: str = Field(..., min_length=1)
    team2: str = Field(..., min_length=1)
    team1_seed: int | None = Field(default=None, ge=1)
    team2_seed: int | None = Field(default=None, ge=1)
    team1_wins: int = Field(default=0, ge=0, le=4)
    team2_wins: int = Field(default=0, ge=0, le=4)
    winner: str | None = None
    favorite: str | None = None
    team1_moneyline: int | None = None
    team2_moneyline: int | None = None
    over_under: float | None = None

    model_config = ConfigDict(frozen=True)

    @field_validator("team1", "team2", "winner", "favorite")
    @classmethod
    def _upper_team(cls, value: str | None) -> str | None:
        if value is None:
            return None
        return value.strip().upper() or None

    @model_validator(mode="after")
    def _check_teams(self) -> "PlayoffSeries":
        if self.team1 == self.team2:
            raise ValueError("a series needs two different teams")
        for label, team in (("winner", self.winner), ("favorite", self.favorite)):
            if team is not None and team not in (self.team1, self.team2):
                raise ValueError(f"{label} {team} is not part of the series")
        return self

    @property
    def loser(self) -> str | None:
        if self.winner is None:
            return None
        return self.team2 if self.winner == self.team1 else self.team1

    @property
    def upset(self) -> bool:
        """Lower seed won; ``False`` when seeds are unknown or seeds tie (Finals)."""

        if self.winner is None or self.team1_seed is None or self.team2_seed is None:
            return False
        winner_seed = self.team1_seed if self.winner == self.team1 else self.team2_seed
        loser_seed = self.team2_seed if self.winner == self.team1 else self.team1_seed
        return winner_seed > loser_seed

    @property
    def sweep(self) -> bool:
        if self.winner is None:
            return False
        return sorted((self.team1_wins, self.team2_wins)) == [0, 4]

    def involves(self, team: str) -> bool:
        return team.strip().upper() in (self.team1, self.team2)

    def opponent(self, team: str) -> str:
        team = team.strip().upper()
        if team not in (self.team1, self.team2):
            raise ValueError(f"{team} did not play in series {self.series_id}")
        return self.team2 if team == self.team1 else self.team1

    def record_for(self, team: str) -> tuple[int, int]:
        """Games won and lost by ``team`` in this series."""

        if team.strip().upper() == self.team1:
            return self.team1_wins, self.team2_wins
        return self.team2_wins, self.team1_wins

    def seed_for(self, team: str) -> int | None:
        return self.team1_seed if team.strip().upper() == self.team1 else self.team2_seed

    def summary_for(self, team: str) -> str:
        """e.g. ``"First Round vs MIA: won 4-1 (upset)"``; in-progress series read ``leads``/``trails``."""

        opponent = self.opponent(team)
        won, lost = self.record_for(team)
        if self.winner is None:
            outcome = "leads" if won > lost else "trails" if won < lost else "tied"
        else:
            outcome = "won" if self.winner == team.strip().upper() else "lost"
        notes = [label for label, flag in (("sweep", self.sweep), ("upset", self.upset)) if flag]
        suffix = f" ({', '.join(notes)})" if notes else ""
        return f"{self.round} vs {opponent}: {outcome} {won}-{lost}{suffix}"
