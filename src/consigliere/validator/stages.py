"""Pure validation stages.

Each stage takes the previous stage's output explicitly and returns a new
immutable value, so stages can be exercised without a store:

* salary analysis  -> per-team salary in/out and post-trade payroll
* roster sizes     -> post-trade roster counts within [0, max_roster_size]
* CBA rules        -> apron and salary-matching violations
* aggregation      -> single verdict plus all stage outputs
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from datetime import datetime
from typing import Any, Dict, Mapping, Tuple

from consigliere.cap import TeamSalarySituation, max_incoming_salary, team_salary_situation
from consigliere.config import CapThresholds, get_thresholds
from consigliere.models import TradeProposal
from consigliere.roster import RosterSnapshot


@dataclass(frozen=True)
class SalaryChange:
    salary_out: int
    salary_in: int
    net_change: int
    new_total_salary: int


@dataclass(frozen=True)
class SalaryAnalysis:
    team_situations: Dict[str, TeamSalarySituation]
    salary_changes: Dict[str, SalaryChange]


@dataclass(frozen=True)
class RosterTeamResult:
    current_size: int
    players_out: int
    players_in: int
    new_size: int
    is_valid: bool


@dataclass(frozen=True)
class RosterValidation:
    is_valid: bool
    details: Dict[str, RosterTeamResult]


@dataclass(frozen=True)
class RuleViolation:
    team: str
    rule: str
    message: str
    status: str = "violated"


@dataclass(frozen=True)
class RuleValidation:
    is_valid: bool
    rules: Tuple[RuleViolation, ...]


@dataclass(frozen=True)
class ValidationResult:
    is_valid: bool
    salary_analysis: SalaryAnalysis
    roster_validation: RosterValidation
    rule_validation: RuleValidation
    timestamp: datetime
    processing_time_ms: float

    @property
    def violations(self) -> Tuple[RuleViolation, ...]:
        return self.rule_validation.rules

    def to_dict(self) -> Dict[str, Any]:
        return {
            "is_valid": self.is_valid,
            "details": {
                "salary_analysis": asdict(self.salary_analysis),
                "roster_validation": asdict(self.roster_validation),
                "rule_validation": asdict(self.rule_validation),
            },
            "timestamp": self.timestamp.isoformat(),
            "processing_time_ms": round(self.processing_time_ms, 3),
        }


def analyze_salaries(
    proposal: TradeProposal,
    rosters: Mapping[str, RosterSnapshot],
    thresholds: CapThresholds | None = None,
) -> SalaryAnalysis:
    rules = thresholds or get_thresholds()
    situations: Dict[str, TeamSalarySituation] = {}
    changes: Dict[str, SalaryChange] = {}
    for team in proposal.teams:
        current_total = rosters[team].total_salary
        situations[team] = team_salary_situation(current_total, rules)
        salary_out = sum(player.salary_value for player in proposal.outgoing(team))
        salary_in = sum(player.salary_value for player in proposal.incoming(team))
        net_change = salary_in - salary_out
        changes[team] = SalaryChange(
            salary_out=salary_out,
            salary_in=salary_in,
            net_change=net_change,
            new_total_salary=current_total + net_change,
        )
    return SalaryAnalysis(team_situations=situations, salary_changes=changes)


def validate_roster_sizes(
    proposal: TradeProposal,
    rosters: Mapping[str, RosterSnapshot],
    thresholds: CapThresholds | None = None,
) -> RosterValidation:
    rules = thresholds or get_thresholds()
    details: Dict[str, RosterTeamResult] = {}
    for team in proposal.teams:
        current = rosters[team].size
        out_count = len(proposal.outgoing(team))
        in_count = len(proposal.incoming(team))
        new_size = current - out_count + in_count
        details[team] = RosterTeamResult(
            current_size=current,
            players_out=out_count,
            players_in=in_count,
            new_size=new_size,
            is_valid=0 <= new_size <= rules.max_roster_size,
        )
    return RosterValidation(
        is_valid=all(result.is_valid for result in details.values()),
        details=details,
    )


def enforce_cba_rules(
    analysis: SalaryAnalysis,
    thresholds: CapThresholds | None = None,
) -> RuleValidation:
    """Apply apron and matching rules to each team's post-trade numbers.

    The apron checks look at the post-trade total; salary matching applies
    only to teams already over the cap before the trade and is measured
    against what the team sends out.
    """

    rules = thresholds or get_thresholds()
    violations: list[RuleViolation] = []
    for team, change in analysis.salary_changes.items():
        situation = analysis.team_situations[team]

        if change.new_total_salary > rules.second_apron:
            violations.append(
                RuleViolation(
                    team=team,
                    rule="Second Apron",
                    message="Team cannot aggregate salaries over Second Apron",
                )
            )
        elif change.new_total_salary > rules.first_apron and change.salary_in > change.salary_out:
            violations.append(
                RuleViolation(
                    team=team,
                    rule="First Apron",
                    message="Team cannot take back more salary than sent out",
                )
            )

        if situation.is_over_cap:
            ceiling = max_incoming_salary(change.salary_out, rules)
            if change.salary_in > ceiling:
                violations.append(
                    RuleViolation(
                        team=team,
                        rule="Salary Matching",
                        message=f"Team can only take back {ceiling:,.0f} in salary",
                    )
                )

    return RuleValidation(is_valid=not violations, rules=tuple(violations))


def aggregate_results(
    analysis: SalaryAnalysis,
    roster_validation: RosterValidation,
    rule_validation: RuleValidation,
    *,
    timestamp: datetime,
    processing_time_ms: float,
) -> ValidationResult:
    return ValidationResult(
        is_valid=roster_validation.is_valid and rule_validation.is_valid,
        salary_analysis=analysis,
        roster_validation=roster_validation,
        rule_validation=rule_validation,
        timestamp=timestamp,
        processing_time_ms=processing_time_ms,
    )
