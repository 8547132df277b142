"""Facade composing validation, salary snapshots and roster analysis."""

from __future__ import annotations

import asyncio
from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Optional

from consigliere.cap import TeamSalarySituation, format_salary, team_salary_situation
from consigliere.config import CapThresholds, get_thresholds
from consigliere.models import PlayerRecord, TradePlayer, TradeProposal
from consigliere.needs import TeamNeeds, calculate_team_needs
from consigliere.persistence import PlayerStore, run_in_store
from consigliere.roster import DEFAULT_TIMEOUT
from consigliere.validator import TradeValidator, ValidationResult


_IMPACT_STATS = ("points_per_game", "rebounds_per_game", "assists_per_game")
_RECOMMENDATION_LIMIT = 5
_ROTATION_MINUTES = 20.0


@dataclass(frozen=True)
class StatisticalImpact:
    team: str
    points_per_game: float
    rebounds_per_game: float
    assists_per_game: float


@dataclass(frozen=True)
class TeamSalaryImpact:
    team: str
    before_trade: TeamSalarySituation
    after_trade: TeamSalarySituation


@dataclass(frozen=True)
class SimulationResult:
    success: bool
    proposal: TradeProposal
    validation: ValidationResult
    players: List[Dict[str, Any]] = field(default_factory=list)
    statistical_impact: List[StatisticalImpact] = field(default_factory=list)
    # TODO: derive series win probability from the stored moneylines and statistical impact.
    playoff_impact: Optional[Dict[str, Any]] = None
    playoff_context: Dict[str, List[str]] = field(default_factory=dict)
    salary_impact: List[TeamSalaryImpact] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "success": self.success,
            "proposal": self.proposal.model_dump(),
            "validation": self.validation.to_dict(),
            "players": self.players,
            "statistical_impact": [asdict(item) for item in self.statistical_impact],
            "playoff_impact": self.playoff_impact,
            "playoff_context": self.playoff_context,
            "salary_impact": [asdict(item) for item in self.salary_impact],
        }


@dataclass(frozen=True)
class TradeRecommendation:
    name: str
    team: str
    position: str | None
    salary: int
    salary_formatted: str
    points_per_game: float
    minutes_per_game: float


@dataclass(frozen=True)
class TradeRecommendations:
    team: str
    needs: TeamNeeds
    salary_situation: TeamSalarySituation
    recommendations: List[TradeRecommendation]


class TradeSimulationService:
    def __init__(
        self,
        store: PlayerStore,
        *,
        thresholds: CapThresholds | None = None,
        timeout: float | None = DEFAULT_TIMEOUT,
        validator: TradeValidator | None = None,
    ):
        self.store = store
        self.thresholds = thresholds or get_thresholds()
        self.timeout = timeout
        self.validator = validator or TradeValidator(store, thresholds=self.thresholds, timeout=timeout)

    async def get_team_salary_situation(self, team: str) -> TeamSalarySituation:
        """Salary position from the recorded team payroll, falling back to the roster sum."""

        payroll = await run_in_store(self.store.find_team_payroll, team, timeout=self.timeout)
        if not payroll:
            roster = await run_in_store(self.store.find_roster, team, timeout=self.timeout)
            payroll = sum(player.salary_value for player in roster)
        return team_salary_situation(payroll, self.thresholds)

    async def analyze_team_needs(self, team: str) -> TeamNeeds:
        roster = await run_in_store(self.store.find_roster, team, timeout=self.timeout)
        return calculate_team_needs(roster)

    async def recommend_trade_targets(self, team: str) -> TradeRecommendations:
        needs, situation = await asyncio.gather(
            self.analyze_team_needs(team),
            self.get_team_salary_situation(team),
        )
        matches: List[PlayerRecord] = []
        if needs.positions:
            matches = await run_in_store(
                self.store.find_trade_targets,
                exclude_team=team,
                positions=needs.positions,
                min_minutes=_ROTATION_MINUTES,
                timeout=self.timeout,
            )
        matches.sort(key=lambda player: (-player.stat("points_per_game"), player.name))
        recommendations = [
            TradeRecommendation(
                name=player.name,
                team=player.team,
                position=player.position,
                salary=player.salary_value,
                salary_formatted=format_salary(player.salary_value),
                points_per_game=player.stat("points_per_game"),
                minutes_per_game=player.stat("minutes_per_game"),
            )
            for player in matches[:_RECOMMENDATION_LIMIT]
        ]
        return TradeRecommendations(
            team=team.upper(),
            needs=needs,
            salary_situation=situation,
            recommendations=recommendations,
        )

    async def playoff_context(self, teams: List[str]) -> Dict[str, List[str]]:
        """Per-team series summaries; teams that missed the playoffs map to an empty list."""

        found = await asyncio.gather(
            *(run_in_store(self.store.find_playoff_series, team, timeout=self.timeout) for team in teams)
        )
        return {team: [item.summary_for(team) for item in series] for team, series in zip(teams, found)}

    async def simulate_trade(self, proposal: TradeProposal) -> SimulationResult:
        validation = await self.validator.validate(proposal)
        if not validation.is_valid:
            return SimulationResult(success=False, proposal=proposal, validation=validation)

        records = await self._load_involved_players(proposal)
        players = [
            {
                "name": name,
                "team": record.team if record else None,
                "position": record.position if record else None,
                "salary": salary,
                "salary_formatted": format_salary(salary),
                "stats": dict(record.stats) if record else {},
            }
            for name, (record, salary) in records.items()
        ]

        situations, playoffs = await asyncio.gather(
            asyncio.gather(*(self.get_team_salary_situation(team) for team in proposal.teams)),
            self.playoff_context(proposal.teams),
        )
        salary_impact = []
        for team, before in zip(proposal.teams, situations):
            net_change = validation.salary_analysis.salary_changes[team].net_change
            after = team_salary_situation(before.total_payroll + net_change, self.thresholds)
            salary_impact.append(TeamSalaryImpact(team=team, before_trade=before, after_trade=after))

        return SimulationResult(
            success=True,
            proposal=proposal,
            validation=validation,
            players=players,
            statistical_impact=[self._statistical_impact(team, proposal, records) for team in proposal.teams],
            salary_impact=salary_impact,
            playoff_context=playoffs,
        )

    async def _load_involved_players(
        self, proposal: TradeProposal
    ) -> Dict[str, tuple[PlayerRecord | None, int]]:
        involved: Dict[str, TradePlayer] = {}
        for players in proposal.players_out.values():
            for player in players:
                involved.setdefault(player.name, player)

        found = await asyncio.gather(
            *(run_in_store(self.store.find_player, name, timeout=self.timeout) for name in involved)
        )
        loaded: Dict[str, tuple[PlayerRecord | None, int]] = {}
        for (name, player), record in zip(involved.items(), found):
            salary = player.salary if player.salary is not None else (record.salary_value if record else 0)
            loaded[name] = (record, salary)
        return loaded

    @staticmethod
    def _statistical_impact(
        team: str,
        proposal: TradeProposal,
        records: Dict[str, tuple[PlayerRecord | None, int]],
    ) -> StatisticalImpact:
        by_name = {name.lower(): record for name, (record, _) in records.items()}
        delta = dict.fromkeys(_IMPACT_STATS, 0.0)
        for sign, players in ((1, proposal.incoming(team)), (-1, proposal.outgoing(team))):
            for player in players:
                record = by_name.get(player.name.lower())
                if record is None:
                    continue
                for key in _IMPACT_STATS:
                    delta[key] += sign * record.stat(key)
        return StatisticalImpact(team=team, **{key: round(value, 2) for key, value in delta.items()})
