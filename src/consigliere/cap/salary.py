"""Cap position and salary-matching rules over explicit payroll figures.

Nothing here touches the store: every function takes the payroll numbers it
needs and the season's ``CapThresholds`` (defaulting to the configured season).
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Tuple

from consigliere.config import CapThresholds, get_thresholds


class ApronStatus(str, Enum):
    UNDER_CAP = "Under Cap"
    OVER_CAP = "Over Cap"
    LUXURY_TAX = "Luxury Tax"
    FIRST_APRON = "First Apron"
    SECOND_APRON = "Second Apron"


@dataclass(frozen=True)
class TeamSalarySituation:
    total_payroll: int
    is_over_cap: bool
    is_in_luxury_tax: bool
    is_first_apron: bool
    is_second_apron: bool
    cap_space: int
    luxury_tax_amount: int
    first_apron_amount: int
    second_apron_amount: int
    apron_status: ApronStatus


@dataclass(frozen=True)
class SalaryMatchResult:
    is_valid: bool
    violations: Tuple[str, ...]
    salary_difference: int
    team_apron_status: str
    rule: str


def _thresholds(thresholds: CapThresholds | None) -> CapThresholds:
    return thresholds if thresholds is not None else get_thresholds()


def team_salary_situation(total_payroll: int, thresholds: CapThresholds | None = None) -> TeamSalarySituation:
    """Classify a payroll against the cap, tax line and both aprons.

    Apron membership is inclusive (``>=``) while cap and tax are strict (``>``);
    the highest tier reached wins ``apron_status``. Amounts under a threshold
    clamp to zero.
    """

    rules = _thresholds(thresholds)
    payroll = int(total_payroll)

    if payroll >= rules.second_apron:
        status = ApronStatus.SECOND_APRON
    elif payroll >= rules.first_apron:
        status = ApronStatus.FIRST_APRON
    elif payroll > rules.luxury_tax:
        status = ApronStatus.LUXURY_TAX
    elif payroll > rules.salary_cap:
        status = ApronStatus.OVER_CAP
    else:
        status = ApronStatus.UNDER_CAP

    return TeamSalarySituation(
        total_payroll=payroll,
        is_over_cap=payroll > rules.salary_cap,
        is_in_luxury_tax=payroll > rules.luxury_tax,
        is_first_apron=payroll >= rules.first_apron,
        is_second_apron=payroll >= rules.second_apron,
        cap_space=max(0, rules.salary_cap - payroll),
        luxury_tax_amount=max(0, payroll - rules.luxury_tax),
        first_apron_amount=max(0, payroll - rules.first_apron),
        second_apron_amount=max(0, payroll - rules.second_apron),
        apron_status=status,
    )


def max_incoming_salary(salary_out: int, thresholds: CapThresholds | None = None) -> float:
    """Largest incoming salary an over-cap team may take back for ``salary_out``."""

    rules = _thresholds(thresholds)
    return salary_out * rules.matching_ratio + rules.matching_cushion


def validate_salary_matching(
    salary_out: int,
    salary_in: int,
    team_payroll: int = 0,
    thresholds: CapThresholds | None = None,
) -> SalaryMatchResult:
    """Check one team's side of an exchange.

    Apron teams are judged only on direction (no taking back more than they
    send); teams below the first apron must keep the gap within 25% of the
    larger side plus the cushion, which makes that branch symmetric in
    ``salary_out`` and ``salary_in``.
    """

    rules = _thresholds(thresholds)
    is_first_apron_team = rules.first_apron <= team_payroll < rules.second_apron
    is_second_apron_team = team_payroll >= rules.second_apron
    difference = abs(salary_out - salary_in)
    violations: list[str] = []

    if is_first_apron_team:
        apron_status = "First Apron"
        rule = "First Apron restrictions"
        if salary_in > salary_out:
            violations.append("First Apron teams cannot take back more salary than they send out")
    elif is_second_apron_team:
        apron_status = "Second Apron"
        rule = "Second Apron restrictions"
        if salary_in > salary_out:
            violations.append("Second Apron teams have severe trade restrictions")
    else:
        apron_status = "Below Apron"
        rule = "Standard 125% + $100k rule"
        tolerance = max(salary_out, salary_in) * (rules.matching_ratio - 1) + rules.matching_cushion
        if difference > tolerance:
            violations.append("Salary matching: difference exceeds 125% + $100k rule")

    return SalaryMatchResult(
        is_valid=not violations,
        violations=tuple(violations),
        salary_difference=difference,
        team_apron_status=apron_status,
        rule=rule,
    )


def format_salary(salary: int | float | None) -> str:
    """Render a salary for display: ``$32.6M``, ``$954K`` or ``$500``."""

    value = salary or 0
    if value >= 1_000_000:
        return f"${value / 1_000_000:.1f}M"
    if value >= 1_000:
        return f"${value / 1_000:.0f}K"
    return f"${value:,}"
