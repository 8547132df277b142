"""Trade proposal payloads accepted by the validator."""

from __future__ import annotations

from typing import Dict, List

from pydantic import AliasChoices, BaseModel, Field, field_validator, model_validator
from pydantic.config import ConfigDict

from .player import PlayerRecord


class TradePlayer(BaseModel):
    name: str = Field(..., min_length=1)
    salary: int | None = Field(
        default=None,
        ge=0,
        validation_alias=AliasChoices("salary", "salary_2023_2024"),
    )

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    @property
    def salary_value(self) -> int:
        return self.salary or 0

    @classmethod
    def from_record(cls, record: PlayerRecord) -> "TradePlayer":
        return cls(name=record.name, salary=record.salary)


class TradeProposal(BaseModel):
    """Teams in a deal plus, per team, the players leaving and arriving."""

    teams: List[str] = Field(..., min_length=2)
    players_out: Dict[str, List[TradePlayer]] = Field(
        default_factory=dict,
        validation_alias=AliasChoices("players_out", "playersOut"),
    )
    players_in: Dict[str, List[TradePlayer]] = Field(
        default_factory=dict,
        validation_alias=AliasChoices("players_in", "playersIn"),
    )

    model_config = ConfigDict(populate_by_name=True)

    @field_validator("teams")
    @classmethod
    def _normalize_teams(cls, value: List[str]) -> List[str]:
        return [team.strip().upper() for team in value]

    @field_validator("players_out", "players_in")
    @classmethod
    def _normalize_keys(cls, value: Dict[str, List[TradePlayer]]) -> Dict[str, List[TradePlayer]]:
        merged: Dict[str, List[TradePlayer]] = {}
        for team, players in value.items():
            merged.setdefault(team.strip().upper(), []).extend(players)
        return merged

    @model_validator(mode="after")
    def _distinct_teams(self) -> "TradeProposal":
        if len(set(self.teams)) != len(self.teams):
            raise ValueError("teams must not repeat")
        return self

    def outgoing(self, team: str) -> List[TradePlayer]:
        return self.players_out.get(team, [])

    def incoming(self, team: str) -> List[TradePlayer]:
        return self.players_in.get(team, [])

    @classmethod
    def two_team(
        cls,
        team_a: str,
        team_b: str,
        from_a: List[TradePlayer],
        from_b: List[TradePlayer],
    ) -> "TradeProposal":
        """Build the common A-for-B proposal where each side receives the other's players."""

        team_a = team_a.upper()
        team_b = team_b.upper()
        return cls(
            teams=[team_a, team_b],
            players_out={team_a: list(from_a), team_b: list(from_b)},
            players_in={team_a: list(from_b), team_b: list(from_a)},
        )
