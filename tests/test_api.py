import pytest
from httpx import ASGITransport, AsyncClient

from consigliere.api import create_app
from consigliere.config import Settings
from consigliere.models import PlayerRecord, PlayoffSeries, TeamRecord
from consigliere.persistence import PlayerStore
from consigliere.ratelimit import FixedWindowRateLimiter


class RecordingGenerator:
    def __init__(self):
        self.prompts: list[str] = []

    async def generate(self, prompt: str) -> str:
        self.prompts.append(prompt)
        return "generated answer"


def _player(name, team, position, salary, ppg, mpg=30.0):
    return PlayerRecord(
        name=name,
        team=team,
        position=position,
        salary=salary,
        stats={"points_per_game": ppg, "minutes_per_game": mpg, "rebounds_per_game": 5.0, "assists_per_game": 3.0},
    )


def _seed(store: PlayerStore) -> None:
    store.upsert_players(
        [
            _player("Jayson Tatum", "BOS", "SF", 32_600_060, 26.9),
            _player("Jaylen Brown", "BOS", "SG", 31_830_357, 23.0),
            _player("Jrue Holiday", "BOS", "PG", 36_861_000, 12.5),
            _player("Zach LaVine", "CHI", "SG", 40_064_220, 19.5),
            _player("Nikola Vucevic", "CHI", "C", 18_518_518, 18.0),
            _player("Andre Drummond", "CHI", "C", 3_360_000, 8.4, mpg=16.6),
        ]
    )
    store.upsert_teams([TeamRecord(abbreviation="CHI", name="Chicago Bulls", total_payroll=170_000_000)])


def _settings(tmp_path) -> Settings:
    return Settings(db_path=tmp_path / "api.sqlite", rate_limit=100, openai_api_key=None)


@pytest.fixture
def generator():
    return RecordingGenerator()


@pytest.fixture
async def client(tmp_path, generator):
    store = PlayerStore(tmp_path / "api.sqlite")
    _seed(store)
    app = create_app(store=store, generator=generator, settings=_settings(tmp_path))
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://testserver") as async_client:
        yield async_client


def _proposal(out_bos: list[dict], out_chi: list[dict]) -> dict:
    return {
        "teams": ["BOS", "CHI"],
        "playersOut": {"BOS": out_bos, "CHI": out_chi},
        "playersIn": {"BOS": out_chi, "CHI": out_bos},
    }


@pytest.mark.anyio
async def test_health(client: AsyncClient):
    resp = await client.get("/health")
    assert resp.status_code == 200
    body = resp.json()
    assert body["status"] == "ok"
    assert body["database"] == "ok"
    assert body["generator"] == "configured"


@pytest.mark.anyio
async def test_chat_player(client: AsyncClient, generator: RecordingGenerator):
    resp = await client.post("/chat", json={"query": "Tell me about Jayson Tatum"})
    assert resp.status_code == 200
    body = resp.json()
    assert body["response"] == "generated answer"
    assert body["query_type"] == "player"
    assert body["data"]["player"]["team"] == "BOS"
    assert len(generator.prompts) == 1


@pytest.mark.anyio
async def test_chat_errors_use_error_envelope(client: AsyncClient):
    resp = await client.post("/chat", json={"query": "  "})
    assert resp.status_code == 400
    assert resp.json() == {"error": "Query must not be empty"}

    resp = await client.post("/chat", json={"query": "Nobody Special"})
    assert resp.status_code == 400
    assert resp.json()["error"] == 'Player "Nobody Special" not found.'

    resp = await client.post("/chat", json={})
    assert resp.status_code == 400
    assert resp.json() == {"error": "Invalid request: query: Field required"}


@pytest.mark.anyio
async def test_analyze_trade(client: AsyncClient):
    payload = {"team1": "BOS", "team2": "CHI", "players1": ["Jaylen Brown"], "players2": ["Zach LaVine"]}
    resp = await client.post("/analyze-trade", json=payload)
    assert resp.status_code == 200
    body = resp.json()
    assert body["response"] == "generated answer"
    assert body["validation"]["is_valid"] is True

    payload["players1"] = ["Zach LaVine"]
    resp = await client.post("/analyze-trade", json=payload)
    assert resp.status_code == 400
    assert resp.json() == {"error": "Invalid player names provided"}


@pytest.mark.anyio
async def test_named_trade(client: AsyncClient):
    resp = await client.post("/api/trade", json={"teams": ["BOS", "CHI"], "players": ["Jayson Tatum", "Nikola Vucevic"]})
    assert resp.status_code == 200
    assert resp.json()["validation"]["details"]["salary_analysis"]["salary_changes"]["CHI"]["salary_in"] == 32_600_060


@pytest.mark.anyio
async def test_validate_trade_endpoint(client: AsyncClient):
    proposal = _proposal(
        [{"name": "Jaylen Brown", "salary": 31_830_357}],
        [{"name": "Zach LaVine", "salary_2023_2024": 40_064_220}],
    )
    resp = await client.post("/trades/validate", json=proposal)
    assert resp.status_code == 200
    body = resp.json()
    assert body["is_valid"] is True
    changes = body["details"]["salary_analysis"]["salary_changes"]
    assert changes["BOS"]["net_change"] == 40_064_220 - 31_830_357
    assert body["details"]["rule_validation"]["rules"] == []


@pytest.mark.anyio
async def test_validate_malformed_trade(client: AsyncClient):
    proposal = {
        "teams": ["BOS", "CHI"],
        "players_out": {"BOS": [{"name": "Jaylen Brown"}]},
        "players_in": {},
    }
    resp = await client.post("/trades/validate", json=proposal)
    assert resp.status_code == 400
    assert resp.json()["error"].startswith("Malformed trade proposal: Jaylen Brown leaves BOS")

    resp = await client.post("/trades/validate", json={"teams": ["BOS", "bos"]})
    assert resp.status_code == 400
    assert resp.json()["error"].startswith("Invalid request: ")


@pytest.mark.anyio
async def test_simulate_trade_endpoint(client: AsyncClient):
    proposal = _proposal(
        [{"name": "Jrue Holiday", "salary": 36_861_000}],
        [{"name": "Nikola Vucevic", "salary": 18_518_518}, {"name": "Andre Drummond", "salary": 3_360_000}],
    )
    resp = await client.post("/trades/simulate", json=proposal)
    assert resp.status_code == 200
    body = resp.json()
    assert body["success"] is True
    assert body["playoff_impact"] is None
    impact = {item["team"]: item for item in body["statistical_impact"]}
    assert impact["BOS"]["points_per_game"] == pytest.approx(18.0 + 8.4 - 12.5)
    salary = {item["team"]: item for item in body["salary_impact"]}
    assert salary["CHI"]["after_trade"]["total_payroll"] == 170_000_000 + 36_861_000 - 18_518_518 - 3_360_000


@pytest.mark.anyio
async def test_team_endpoints(client: AsyncClient):
    resp = await client.get("/teams/chi/salary")
    assert resp.status_code == 200
    body = resp.json()
    assert body["team"] == "CHI"
    assert body["apron_status"] == "Luxury Tax"
    assert body["total_payroll_formatted"] == "$170.0M"

    resp = await client.get("/teams/BOS/needs")
    assert resp.status_code == 200
    assert "C" in resp.json()["positions"]

    resp = await client.get("/teams/BOS/recommendations")
    assert resp.status_code == 200
    names = [item["name"] for item in resp.json()["recommendations"]]
    assert names == ["Nikola Vucevic"]

    resp = await client.get("/teams/XYZ/salary")
    assert resp.status_code == 404
    assert resp.json() == {"error": "Team XYZ not found"}


@pytest.mark.anyio
async def test_chat_without_generator_is_unavailable(tmp_path):
    store = PlayerStore(tmp_path / "nogen.sqlite")
    app = create_app(store=store, settings=_settings(tmp_path))
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://testserver") as client:
        resp = await client.post("/chat", json={"query": "Tell me about Jayson Tatum"})
        assert resp.status_code == 503
        assert resp.json() == {"error": "Text generator is not configured"}
        health = await client.get("/health")
        assert health.json()["generator"] == "not configured"


@pytest.mark.anyio
async def test_rate_limit_by_user_header(tmp_path, generator):
    store = PlayerStore(tmp_path / "limited.sqlite")
    _seed(store)
    limiter = FixedWindowRateLimiter(limit=1, window=60)
    app = create_app(store=store, generator=generator, rate_limiter=limiter, settings=_settings(tmp_path))
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://testserver") as client:
        first = await client.post("/chat", json={"query": "Jayson Tatum"}, headers={"X-User-Id": "fan-1"})
        assert first.status_code == 200
        second = await client.post("/chat", json={"query": "Jayson Tatum"}, headers={"X-User-Id": "fan-1"})
        assert second.status_code == 429
        assert second.json() == {"error": "Rate limit exceeded. Please try again later."}
        assert second.headers["Retry-After"] == "60"
        other = await client.post("/chat", json={"query": "Jayson Tatum"}, headers={"X-User-Id": "fan-2"})
        assert other.status_code == 200
        # Validation is not rate limited.
        health = await client.get("/health")
        assert health.status_code == 200


class FailingGenerator:
    async def generate(self, prompt: str) -> str:
        raise RuntimeError("model backend exploded")


@pytest.mark.anyio
async def test_incomplete_trade_request_uses_error_envelope(client: AsyncClient):
    resp = await client.post("/analyze-trade", json={"team1": "BOS"})
    assert resp.status_code == 400
    error = resp.json()["error"]
    assert error.startswith("Invalid request: ")
    assert "team2: Field required" in error

    resp = await client.get("/no-such-route")
    assert resp.status_code == 404
    assert resp.json() == {"error": "Not Found"}


@pytest.mark.anyio
async def test_unexpected_failure_returns_json_500(tmp_path):
    store = PlayerStore(tmp_path / "failing.sqlite")
    _seed(store)
    app = create_app(store=store, generator=FailingGenerator(), settings=_settings(tmp_path))
    transport = ASGITransport(app=app, raise_app_exceptions=False)
    async with AsyncClient(transport=transport, base_url="http://testserver") as client:
        resp = await client.post("/chat", json={"query": "Tell me about Jayson Tatum"})
    assert resp.status_code == 500
    assert resp.json() == {"error": "Internal server error"}


@pytest.mark.anyio
async def test_playoff_endpoints(tmp_path, generator):
    store = PlayerStore(tmp_path / "playoffs.sqlite")
    _seed(store)
    app = create_app(store=store, generator=generator, settings=_settings(tmp_path))
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://testserver") as client:
        payload = {"team1": "BOS", "team2": "CHI", "players1": ["Jaylen Brown"], "players2": ["Zach LaVine"]}
        resp = await client.post("/analyze-playoff-impact", json=payload)
        assert resp.status_code == 400
        assert resp.json() == {"error": "Playoff series data not found"}

        store.upsert_playoff_series(
            [
                PlayoffSeries(
                    series_id="finals",
                    round="NBA Finals",
                    team1="BOS",
                    team2="DAL",
                    team1_seed=1,
                    team2_seed=5,
                    team1_wins=4,
                    team2_wins=1,
                    winner="BOS",
                )
            ]
        )
        resp = await client.post("/analyze-playoff-impact", json=payload)
        assert resp.status_code == 200
        assert resp.json()["validation"]["is_valid"] is True
        assert "NBA Finals vs DAL: won 4-1" in generator.prompts[-1]

        resp = await client.get("/teams/bos/playoffs")
        assert resp.status_code == 200
        body = resp.json()
        assert body["made_playoffs"] is True
        finals = body["series"][0]
        assert (finals["opponent"], finals["wins"], finals["losses"], finals["seed"]) == ("DAL", 4, 1, 1)

        resp = await client.get("/teams/CHI/playoffs")
        assert resp.json() == {"team": "CHI", "made_playoffs": False, "series": []}
