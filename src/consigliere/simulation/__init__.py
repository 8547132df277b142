"""Trade simulation and recommendation services built on the validator."""

from .service import (
    SimulationResult,
    StatisticalImpact,
    TeamSalaryImpact,
    TradeRecommendation,
    TradeRecommendations,
    TradeSimulationService,
)

__all__ = [
    "SimulationResult",
    "StatisticalImpact",
    "TeamSalaryImpact",
    "TradeRecommendation",
    "TradeRecommendations",
    "TradeSimulationService",
]
