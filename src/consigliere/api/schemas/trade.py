from __future__ import annotations

from typing import Any, Dict, List

from pydantic import BaseModel, Field


class AnalyzeTradeRequest(BaseModel):
    team1: str = Field(..., min_length=1)
    team2: str = Field(..., min_length=1)
    players1: List[str] = Field(..., min_length=1)
    players2: List[str] = Field(..., min_length=1)


class NamedTradeRequest(BaseModel):
    teams: List[str] = Field(..., min_length=2, max_length=2)
    players: List[str] = Field(..., min_length=2, max_length=2)


class TradeAnalysisResponse(BaseModel):
    response: str
    validation: Dict[str, Any]
