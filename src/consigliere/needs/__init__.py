"""Positional and statistical gap analysis for a roster."""

from .analyzer import (
    NEED_THRESHOLDS,
    TeamNeeds,
    calculate_team_needs,
    position_bucket,
)

__all__ = ["NEED_THRESHOLDS", "TeamNeeds", "calculate_team_needs", "position_bucket"]
