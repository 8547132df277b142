"""Pydantic models for API I/O."""

from .chat import ChatRequest, ChatResponse
from .team import (
    PlayoffRunResponse,
    PlayoffSeriesResponse,
    RecommendationResponse,
    SalarySituationResponse,
    TeamNeedsResponse,
    TradeTargetsResponse,
)
from .trade import AnalyzeTradeRequest, NamedTradeRequest, TradeAnalysisResponse

__all__ = [
    "AnalyzeTradeRequest",
    "ChatRequest",
    "ChatResponse",
    "NamedTradeRequest",
    "PlayoffRunResponse",
    "PlayoffSeriesResponse",
    "RecommendationResponse",
    "SalarySituationResponse",
    "TeamNeedsResponse",
    "TradeAnalysisResponse",
    "TradeTargetsResponse",
]
