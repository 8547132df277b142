"""REST API for the trade consigliere."""

from __future__ import annotations

import logging
from dataclasses import asdict
from typing import Any

from fastapi import Depends, FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from consigliere import __version__
from consigliere.api.schemas import (
    AnalyzeTradeRequest,
    ChatRequest,
    ChatResponse,
    NamedTradeRequest,
    PlayoffRunResponse,
    PlayoffSeriesResponse,
    RecommendationResponse,
    SalarySituationResponse,
    TeamNeedsResponse,
    TradeAnalysisResponse,
    TradeTargetsResponse,
)
from consigliere.assistant import ChatHandler, KeywordIntentClassifier, OpenAIGenerator, TextGenerator
from consigliere.cap import TeamSalarySituation, format_salary
from consigliere.config import Settings, get_thresholds, load_settings
from consigliere.errors import ConsigliereError, RateLimitExceeded, ServiceUnavailable
from consigliere.models import PlayoffSeries, TradeProposal
from consigliere.needs import TeamNeeds
from consigliere.persistence import PlayerStore, run_in_store
from consigliere.ratelimit import FixedWindowRateLimiter
from consigliere.simulation import TradeSimulationService


logger = logging.getLogger("uvicorn.error")


def _salary_response(team: str, situation: TeamSalarySituation) -> SalarySituationResponse:
    data = asdict(situation)
    data["apron_status"] = situation.apron_status.value
    return SalarySituationResponse(
        team=team,
        total_payroll_formatted=format_salary(situation.total_payroll),
        **data,
    )


def _playoff_run_response(team: str, series: list[PlayoffSeries]) -> PlayoffRunResponse:
    items = []
    for item in series:
        wins, losses = item.record_for(team)
        items.append(
            PlayoffSeriesResponse(
                series_id=item.series_id,
                round=item.round,
                conference=item.conference,
                opponent=item.opponent(team),
                seed=item.seed_for(team),
                wins=wins,
                losses=losses,
                winner=item.winner,
                upset=item.upset,
                sweep=item.sweep,
                summary=item.summary_for(team),
            )
        )
    return PlayoffRunResponse(team=team, made_playoffs=bool(items), series=items)


def _validation_message(exc: RequestValidationError) -> str:
    problems = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error.get("loc", ()) if part != "body")
        problems.append(f"{location}: {error['msg']}" if location else error["msg"])
    return "Invalid request: " + "; ".join(problems)


def _needs_response(team: str, needs: TeamNeeds) -> TeamNeedsResponse:
    return TeamNeedsResponse(
        team=team,
        positions=list(needs.positions),
        stats=list(needs.stats),
        priority=needs.priority,
        position_counts=dict(needs.position_counts),
        totals=dict(needs.totals),
    )


def create_app(
    store: PlayerStore | None = None,
    generator: TextGenerator | None = None,
    classifier: KeywordIntentClassifier | None = None,
    rate_limiter: FixedWindowRateLimiter | None = None,
    settings: Settings | None = None,
) -> FastAPI:
    settings = settings or load_settings()
    app = FastAPI(title="NBA trade consigliere", version=__version__)

    if store is None:
        store = PlayerStore(settings.db_path, season=settings.season)
    if generator is None and settings.openai_api_key:
        generator = OpenAIGenerator(model=settings.model, api_key=settings.openai_api_key)
    if generator is None:
        logger.warning("No OpenAI API key configured; chat and trade analysis are disabled")
    limiter = rate_limiter
    if limiter is None:
        limiter = FixedWindowRateLimiter(settings.rate_limit, settings.rate_window)
    thresholds = get_thresholds(settings.season)
    simulation = TradeSimulationService(store, thresholds=thresholds, timeout=settings.store_timeout)

    app.state.store = store
    app.state.rate_limiter = limiter
    app.state.simulation = simulation

    def chat_handler() -> ChatHandler:
        if generator is None:
            raise ServiceUnavailable("Text generator is not configured")
        return ChatHandler(
            store,
            generator,
            classifier=classifier,
            simulation=simulation,
            timeout=settings.store_timeout,
        )

    def rate_limited(request: Request) -> None:
        identity = request.headers.get("x-user-id") or (request.client.host if request.client else "anonymous")
        limiter.hit(identity)

    async def known_team(team: str) -> str:
        team = team.strip().upper()
        teams = await run_in_store(store.list_teams, timeout=settings.store_timeout)
        if team not in teams:
            raise HTTPException(status_code=404, detail=f"Team {team} not found")
        return team

    @app.exception_handler(ConsigliereError)
    async def consigliere_error(request: Request, exc: ConsigliereError) -> JSONResponse:
        if exc.status_code >= 500:
            logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
        headers = None
        if isinstance(exc, RateLimitExceeded):
            headers = {"Retry-After": str(max(1, int(round(exc.retry_after))))}
        return JSONResponse(status_code=exc.status_code, content={"error": exc.message}, headers=headers)

    @app.exception_handler(RequestValidationError)
    async def invalid_request(request: Request, exc: RequestValidationError) -> JSONResponse:
        return JSONResponse(status_code=400, content={"error": _validation_message(exc)})

    @app.exception_handler(StarletteHTTPException)
    async def http_error(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": str(exc.detail)},
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(Exception)
    async def unexpected_error(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("%s %s failed", request.method, request.url.path)
        return JSONResponse(status_code=500, content={"error": "Internal server error"})

    @app.get("/health")
    async def health() -> dict[str, Any]:
        database = await run_in_store(store.ping, timeout=settings.store_timeout)
        return {
            "status": "ok",
            "version": __version__,
            "season": store.season,
            "database": "ok" if database else "unavailable",
            "generator": "configured" if generator is not None else "not configured",
        }

    @app.post("/chat", response_model=ChatResponse, dependencies=[Depends(rate_limited)])
    async def chat(payload: ChatRequest) -> ChatResponse:
        result = await chat_handler().process(payload.query)
        return ChatResponse(response=result.response, query_type=result.query_type, data=result.data)

    @app.post("/analyze-trade", response_model=TradeAnalysisResponse, dependencies=[Depends(rate_limited)])
    async def analyze_trade(payload: AnalyzeTradeRequest) -> TradeAnalysisResponse:
        analysis = await chat_handler().analyze_trade(
            payload.team1, payload.team2, payload.players1, payload.players2
        )
        return TradeAnalysisResponse(response=analysis.response, validation=analysis.validation.to_dict())

    @app.post("/api/trade", response_model=TradeAnalysisResponse, dependencies=[Depends(rate_limited)])
    async def named_trade(payload: NamedTradeRequest) -> TradeAnalysisResponse:
        analysis = await chat_handler().analyze_named_trade(payload.teams, payload.players)
        return TradeAnalysisResponse(response=analysis.response, validation=analysis.validation.to_dict())

    @app.post("/analyze-playoff-impact", response_model=TradeAnalysisResponse, dependencies=[Depends(rate_limited)])
    async def analyze_playoff_impact(payload: AnalyzeTradeRequest) -> TradeAnalysisResponse:
        analysis = await chat_handler().analyze_playoff_impact(
            payload.team1, payload.team2, payload.players1, payload.players2
        )
        return TradeAnalysisResponse(response=analysis.response, validation=analysis.validation.to_dict())

    @app.post("/trades/validate")
    async def validate(proposal: TradeProposal) -> dict[str, Any]:
        result = await simulation.validator.validate(proposal)
        return result.to_dict()

    @app.post("/trades/simulate")
    async def simulate(proposal: TradeProposal) -> dict[str, Any]:
        result = await simulation.simulate_trade(proposal)
        return result.to_dict()

    @app.get("/teams/{team}/salary", response_model=SalarySituationResponse)
    async def team_salary(team: str = Depends(known_team)) -> SalarySituationResponse:
        situation = await simulation.get_team_salary_situation(team)
        return _salary_response(team, situation)

    @app.get("/teams/{team}/needs", response_model=TeamNeedsResponse)
    async def team_needs(team: str = Depends(known_team)) -> TeamNeedsResponse:
        needs = await simulation.analyze_team_needs(team)
        return _needs_response(team, needs)

    @app.get("/teams/{team}/recommendations", response_model=TradeTargetsResponse)
    async def team_recommendations(team: str = Depends(known_team)) -> TradeTargetsResponse:
        targets = await simulation.recommend_trade_targets(team)
        return TradeTargetsResponse(
            team=targets.team,
            needs=_needs_response(team, targets.needs),
            salary_situation=_salary_response(team, targets.salary_situation),
            recommendations=[RecommendationResponse(**asdict(item)) for item in targets.recommendations],
        )

    @app.get("/teams/{team}/playoffs", response_model=PlayoffRunResponse)
    async def team_playoffs(team: str = Depends(known_team)) -> PlayoffRunResponse:
        series = await run_in_store(store.find_playoff_series, team, timeout=settings.store_timeout)
        return _playoff_run_response(team, series)

    return app


__all__ = ["create_app"]
