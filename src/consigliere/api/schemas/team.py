from __future__ import annotations

from typing import Dict, List

from pydantic import BaseModel


class SalarySituationResponse(BaseModel):
    team: str
    total_payroll: int
    total_payroll_formatted: str
    apron_status: str
    is_over_cap: bool
    is_in_luxury_tax: bool
    is_first_apron: bool
    is_second_apron: bool
    cap_space: int
    luxury_tax_amount: int
    first_apron_amount: int
    second_apron_amount: int


class TeamNeedsResponse(BaseModel):
    team: str
    positions: List[str]
    stats: List[str]
    priority: str
    position_counts: Dict[str, int]
    totals: Dict[str, float]


class RecommendationResponse(BaseModel):
    name: str
    team: str
    position: str | None
    salary: int
    salary_formatted: str
    points_per_game: float
    minutes_per_game: float


class TradeTargetsResponse(BaseModel):
    team: str
    needs: TeamNeedsResponse
    salary_situation: SalarySituationResponse
    recommendations: List[RecommendationResponse]


class PlayoffSeriesResponse(BaseModel):
    series_id: str
    round: str
    conference: str | None
    opponent: str
    seed: int | None
    wins: int
    losses: int
    winner: str | None
    upset: bool
    sweep: bool
    summary: str


class PlayoffRunResponse(BaseModel):
    team: str
    made_playoffs: bool
    series: List[PlayoffSeriesResponse]
