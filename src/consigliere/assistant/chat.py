"""Chat orchestration: classify, gather store data, validate trades and generate."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Sequence, Tuple

from consigliere.errors import InvalidInput
from consigliere.models import PlayerRecord, PlayoffSeries, TeamRecord, TradePlayer, TradeProposal
from consigliere.persistence import PlayerStore, run_in_store
from consigliere.roster import DEFAULT_TIMEOUT
from consigliere.simulation import TradeSimulationService
from consigliere.validator import ValidationResult

from .generator import TextGenerator
from .intent import Intent, IntentType, KeywordIntentClassifier
from .prompts import build_player_prompt, build_playoff_impact_prompt, build_team_prompt, build_trade_prompt


logger = logging.getLogger("uvicorn.error")


@dataclass(frozen=True)
class ChatResult:
    response: str
    query_type: str
    data: Dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class TradeAnalysis:
    response: str
    validation: ValidationResult


def _player_summary(record: PlayerRecord) -> Dict[str, Any]:
    return {
        "name": record.name,
        "team": record.team,
        "position": record.position,
        "salary": record.salary,
        "stats": dict(record.stats),
    }


class ChatHandler:
    def __init__(
        self,
        store: PlayerStore,
        generator: TextGenerator,
        *,
        classifier: KeywordIntentClassifier | None = None,
        simulation: TradeSimulationService | None = None,
        timeout: float | None = DEFAULT_TIMEOUT,
    ):
        self.store = store
        self.generator = generator
        self.classifier = classifier or KeywordIntentClassifier()
        self.timeout = timeout
        self.simulation = simulation or TradeSimulationService(store, timeout=timeout)

    async def process(self, query: str) -> ChatResult:
        query = (query or "").strip()
        if not query:
            raise InvalidInput("Query must not be empty")

        intent = self.classifier.classify(query)
        logger.info("Chat query classified as %s: teams=%s players=%s", intent.type.value, intent.teams, intent.players)
        if intent.type is IntentType.TRADE:
            return await self._answer_trade(query, intent)
        if intent.type is IntentType.TEAM:
            return await self._answer_team(query, intent.teams[0])
        return await self._answer_player(query, intent.players[0] if intent.players else query)

    async def analyze_trade(
        self,
        team1: str,
        team2: str,
        players1: Sequence[str],
        players2: Sequence[str],
        *,
        question: str | None = None,
    ) -> TradeAnalysis:
        """Analyze a two-team trade where every named player must belong to their stated team."""

        team1, team2 = team1.strip().upper(), team2.strip().upper()
        side1, side2, validation = await self._validate_sides(team1, team2, players1, players2)
        if question is None:
            names1 = ", ".join(record.name for record in side1) or "nothing"
            names2 = ", ".join(record.name for record in side2) or "nothing"
            question = f"Trade {names1} ({team1}) for {names2} ({team2})"
        playoffs = await self._playoff_context([team1, team2])
        prompt = build_trade_prompt(question, [*side1, *side2], validation, playoffs)
        response = await self.generator.generate(prompt)
        return TradeAnalysis(response=response, validation=validation)

    async def analyze_named_trade(self, teams: Sequence[str], players: Sequence[str]) -> TradeAnalysis:
        """One-for-one form: ``players[i]`` leaves ``teams[i]`` for the other team."""

        if len(teams) != 2 or len(players) != 2:
            raise InvalidInput("Provide exactly two teams and two players")
        return await self.analyze_trade(teams[0], teams[1], [players[0]], [players[1]])

    async def analyze_playoff_impact(
        self,
        team1: str,
        team2: str,
        players1: Sequence[str],
        players2: Sequence[str],
    ) -> TradeAnalysis:
        """Playoff-outlook variant of ``analyze_trade``; needs playoff series in the store."""

        if not await run_in_store(self.store.has_playoff_data, timeout=self.timeout):
            raise InvalidInput("Playoff series data not found")
        team1, team2 = team1.strip().upper(), team2.strip().upper()
        side1, side2, validation = await self._validate_sides(team1, team2, players1, players2)
        playoffs, profiles = await asyncio.gather(
            self._playoff_context([team1, team2]),
            self._team_profiles([team1, team2]),
        )
        prompt = build_playoff_impact_prompt(
            [team1, team2],
            {team1: side1, team2: side2},
            validation,
            playoffs or {},
            profiles,
        )
        response = await self.generator.generate(prompt)
        return TradeAnalysis(response=response, validation=validation)

    async def _validate_sides(
        self,
        team1: str,
        team2: str,
        players1: Sequence[str],
        players2: Sequence[str],
    ) -> Tuple[List[PlayerRecord], List[PlayerRecord], ValidationResult]:
        side1, side2 = await asyncio.gather(
            self._resolve_side(team1, players1),
            self._resolve_side(team2, players2),
        )
        proposal = TradeProposal.two_team(
            team1,
            team2,
            [TradePlayer.from_record(record) for record in side1],
            [TradePlayer.from_record(record) for record in side2],
        )
        validation = await self.simulation.validator.validate(proposal)
        return side1, side2, validation

    async def _playoff_context(self, teams: Sequence[str]) -> Dict[str, List[PlayoffSeries]] | None:
        """Series per team, or ``None`` when the store holds no playoff data for the season."""

        found = await asyncio.gather(
            *(run_in_store(self.store.find_playoff_series, team, timeout=self.timeout) for team in teams)
        )
        context = dict(zip(teams, found))
        if any(context.values()) or await run_in_store(self.store.has_playoff_data, timeout=self.timeout):
            return context
        return None

    async def _team_profiles(self, teams: Sequence[str]) -> Dict[str, TeamRecord | None]:
        found = await asyncio.gather(*(run_in_store(self.store.get_team, team, timeout=self.timeout) for team in teams))
        return dict(zip(teams, found))

    async def _resolve_side(self, team: str, names: Sequence[str]) -> List[PlayerRecord]:
        found = await run_in_store(self.store.find_players_by_names, list(names), timeout=self.timeout)
        records = []
        for name in names:
            record = found.get(name)
            if record is None or record.team != team:
                logger.warning("Trade analysis rejected: %s is not on %s", name, team)
                raise InvalidInput("Invalid player names provided")
            records.append(record)
        return records

    async def _answer_player(self, query: str, name: str) -> ChatResult:
        record = await run_in_store(self.store.find_player, name, timeout=self.timeout)
        if record is None:
            logger.warning('Player "%s" not found in store', name)
            raise InvalidInput(f'Player "{name}" not found.')
        similar = await run_in_store(self.store.find_similar_salary_players, record, timeout=self.timeout)
        response = await self.generator.generate(build_player_prompt(query, record, similar))
        data = {
            "player": _player_summary(record),
            "similar_players": [_player_summary(player) for player in similar],
        }
        return ChatResult(response=response, query_type=IntentType.PLAYER.value, data=data)

    async def _answer_team(self, query: str, team: str) -> ChatResult:
        roster = await run_in_store(self.store.find_roster, team, timeout=self.timeout)
        if not roster:
            logger.warning('Team "%s" not found or has no players', team)
            raise InvalidInput(f'Team "{team}" not found or has no players.')
        record, situation, needs, context = await asyncio.gather(
            run_in_store(self.store.get_team, team, timeout=self.timeout),
            self.simulation.get_team_salary_situation(team),
            self.simulation.analyze_team_needs(team),
            self._playoff_context([team]),
        )
        playoffs = None if context is None else context[team]
        prompt = build_team_prompt(query, team, roster, situation, needs, record, playoffs)
        response = await self.generator.generate(prompt)
        data = {
            "team": team,
            "salary_situation": asdict(situation),
            "needs": asdict(needs),
            "playoffs": [series.model_dump() for series in playoffs or ()],
            "players": [_player_summary(player) for player in roster],
        }
        return ChatResult(response=response, query_type=IntentType.TEAM.value, data=data)

    async def _answer_trade(self, query: str, intent: Intent) -> ChatResult:
        if len(intent.players) < 2:
            raise InvalidInput("Name the players on each side of the trade, e.g. \"Player A for Player B\"")

        found = await run_in_store(self.store.find_players_by_names, list(intent.players), timeout=self.timeout)
        by_team: Dict[str, List[PlayerRecord]] = {}
        for name in intent.players:
            record = found.get(name)
            if record is None:
                raise InvalidInput(f'Player "{name}" not found.')
            by_team.setdefault(record.team, []).append(record)
        if len(by_team) != 2:
            raise InvalidInput("A trade needs players from exactly two teams")

        team1, team2 = by_team
        analysis = await self.analyze_trade(
            team1,
            team2,
            [record.name for record in by_team[team1]],
            [record.name for record in by_team[team2]],
            question=query,
        )
        data = {
            "players": [_player_summary(record) for records in by_team.values() for record in records],
            "validation": analysis.validation.to_dict(),
        }
        return ChatResult(response=analysis.response, query_type=IntentType.TRADE.value, data=data)
