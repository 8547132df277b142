"""Player and team records shared by the store, validator and assistant."""

from __future__ import annotations

from typing import Dict

from pydantic import BaseModel, Field, field_validator
from pydantic.config import ConfigDict

from consigliere.config import DEFAULT_SEASON


class PlayerRecord(BaseModel):
    """Single-season player row; ``salary`` is ``None`` when the source had no figure."""

    name: str = Field(..., min_length=1)
    team: str
    position: str | None = None
    season: str = DEFAULT_SEASON
    salary: int | None = Field(default=None, ge=0)
    stats: Dict[str, float] = Field(default_factory=dict)

    model_config = ConfigDict(frozen=True)

    @field_validator("team")
    @classmethod
    def _upper_team(cls, value: str) -> str:
        return value.strip().upper()

    @property
    def salary_value(self) -> int:
        return self.salary or 0

    def stat(self, key: str) -> float:
        return float(self.stats.get(key) or 0.0)


class TeamRecord(BaseModel):
    abbreviation: str = Field(..., min_length=1)
    season: str = DEFAULT_SEASON
    name: str | None = None
    total_payroll: int | None = Field(default=None, ge=0)
    strength: str | None = None
    weakness: str | None = None

    model_config = ConfigDict(frozen=True)

    @field_validator("abbreviation")
    @classmethod
    def _upper_abbreviation(cls, value: str) -> str:
        return value.strip().upper()
