"""Pure salary-cap arithmetic."""

from .salary import (
    ApronStatus,
    SalaryMatchResult,
    TeamSalarySituation,
    format_salary,
    max_incoming_salary,
    team_salary_situation,
    validate_salary_matching,
)

__all__ = [
    "ApronStatus",
    "SalaryMatchResult",
    "TeamSalarySituation",
    "format_salary",
    "max_incoming_salary",
    "team_salary_situation",
    "validate_salary_matching",
]
