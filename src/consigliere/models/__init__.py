"""Canonical player, team, playoff and trade models."""

from .player import PlayerRecord, TeamRecord
from .playoff import ROUND_ORDER, PlayoffSeries, round_index
from .trade import TradePlayer, TradeProposal

__all__ = [
    "PlayerRecord",
    "PlayoffSeries",
    "ROUND_ORDER",
    "TeamRecord",
    "TradePlayer",
    "TradeProposal",
    "round_index",
]
