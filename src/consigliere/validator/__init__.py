"""Multi-stage trade legality validation."""

from .conservation import check_conservation
from .service import TradeValidator, validate_trade
from .stages import (
    RosterTeamResult,
    RosterValidation,
    RuleValidation,
    RuleViolation,
    SalaryAnalysis,
    SalaryChange,
    ValidationResult,
    aggregate_results,
    analyze_salaries,
    enforce_cba_rules,
    validate_roster_sizes,
)

__all__ = [
    "RosterTeamResult",
    "RosterValidation",
    "RuleValidation",
    "RuleViolation",
    "SalaryAnalysis",
    "SalaryChange",
    "TradeValidator",
    "ValidationResult",
    "aggregate_results",
    "analyze_salaries",
    "check_conservation",
    "enforce_cba_rules",
    "validate_roster_sizes",
    "validate_trade",
]
