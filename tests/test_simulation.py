import pytest

from consigliere.cap import ApronStatus
from consigliere.config import get_thresholds
from consigliere.models import PlayerRecord, PlayoffSeries, TeamRecord, TradePlayer, TradeProposal
from consigliere.persistence import PlayerStore
from consigliere.simulation import TradeSimulationService


RULES = get_thresholds("2023-24")


def _player(name, team, position, salary, ppg, mpg, rpg=0.0, apg=0.0):
    return PlayerRecord(
        name=name,
        team=team,
        position=position,
        salary=salary,
        stats={
            "points_per_game": ppg,
            "minutes_per_game": mpg,
            "rebounds_per_game": rpg,
            "assists_per_game": apg,
        },
    )


@pytest.fixture
def service(tmp_path):
    store = PlayerStore(tmp_path / "sim.sqlite")
    store.upsert_players(
        [
            # BOS: guards and wings but no center.
            _player("Jrue Holiday", "BOS", "PG", 36_861_000, 12.5, 32.8, 5.4, 4.8),
            _player("Payton Pritchard", "BOS", "PG", 4_037_278, 9.6, 22.3, 3.2, 3.4),
            _player("Jayson Tatum", "BOS", "SF", 32_600_060, 26.9, 35.7, 8.1, 4.9),
            _player("Jaylen Brown", "BOS", "SG", 31_830_357, 23.0, 33.5, 5.5, 3.6),
            _player("Sam Hauser", "BOS", "SF", 1_927_896, 9.0, 22.0, 3.5, 1.0),
            _player("Oshae Brissett", "BOS", "PF", 2_165_000, 2.5, 9.0, 2.0, 0.5),
            # CHI
            _player("Nikola Vucevic", "CHI", "C", 18_518_518, 18.0, 32.5, 10.5, 3.3),
            _player("Andre Drummond", "CHI", "C", 3_360_000, 8.4, 16.6, 8.5, 1.2),
            _player("Zach LaVine", "CHI", "SG", 40_064_220, 19.5, 34.9, 5.2, 3.9),
            # PHX: over the cap on roster salaries alone.
            _player("Kevin Durant", "PHX", "PF", 47_649_433, 27.1, 37.2, 6.6, 5.0),
            _player("Devin Booker", "PHX", "SG", 36_016_200, 27.1, 36.0, 4.5, 6.9),
            _player("Bradley Beal", "PHX", "SG", 46_741_590, 18.2, 33.3, 4.4, 5.0),
            _player("Jusuf Nurkic", "PHX", "C", 16_875_000, 10.9, 27.5, 11.0, 4.0),
            _player("Grayson Allen", "PHX", "SF", 15_000_000, 13.5, 33.5, 3.9, 3.0),
            # MIL
            _player("Brook Lopez", "MIL", "C", 25_000_000, 12.5, 30.5, 5.2, 1.6),
            _player("Bobby Portis", "MIL", "PF", 11_710_818, 13.8, 24.5, 7.4, 1.3),
        ]
    )
    store.upsert_teams([TeamRecord(abbreviation="CHI", total_payroll=170_000_000)])
    return TradeSimulationService(store, thresholds=RULES)


@pytest.mark.anyio
async def test_salary_situation_prefers_recorded_payroll(service):
    chi = await service.get_team_salary_situation("CHI")
    assert chi.total_payroll == 170_000_000
    assert chi.apron_status is ApronStatus.LUXURY_TAX

    mil = await service.get_team_salary_situation("MIL")
    assert mil.total_payroll == 36_710_818
    assert mil.apron_status is ApronStatus.UNDER_CAP


@pytest.mark.anyio
async def test_recommendations_match_needs(service):
    targets = await service.recommend_trade_targets("BOS")

    assert "C" in targets.needs.positions
    names = [item.name for item in targets.recommendations]
    # Rotation centers on other teams, best scorer first; Drummond plays under 20 minutes.
    assert names == ["Nikola Vucevic", "Brook Lopez", "Jusuf Nurkic"]
    assert targets.recommendations[0].salary_formatted == "$18.5M"


@pytest.mark.anyio
async def test_simulate_valid_trade_reports_impacts(service):
    proposal = TradeProposal.two_team(
        "CHI",
        "MIL",
        [TradePlayer(name="Andre Drummond", salary=3_360_000)],
        [TradePlayer(name="Bobby Portis", salary=11_710_818)],
    )
    result = await service.simulate_trade(proposal)

    assert result.success
    assert result.playoff_impact is None
    impact = {item.team: item for item in result.statistical_impact}
    assert impact["CHI"].points_per_game == pytest.approx(13.8 - 8.4)
    assert impact["MIL"].rebounds_per_game == pytest.approx(8.5 - 7.4)

    salary = {item.team: item for item in result.salary_impact}
    assert salary["CHI"].before_trade.total_payroll == 170_000_000
    assert salary["CHI"].after_trade.total_payroll == 170_000_000 + 11_710_818 - 3_360_000
    assert salary["CHI"].after_trade.apron_status is ApronStatus.FIRST_APRON

    payload = result.to_dict()
    assert payload["validation"]["is_valid"] is True
    assert {player["name"] for player in payload["players"]} == {"Andre Drummond", "Bobby Portis"}


@pytest.mark.anyio
async def test_simulate_invalid_trade_stops_after_validation(service):
    proposal = TradeProposal.two_team(
        "PHX",
        "CHI",
        [TradePlayer(name="Jusuf Nurkic", salary=16_875_000)],
        [TradePlayer(name="Zach LaVine", salary=40_064_220)],
    )
    result = await service.simulate_trade(proposal)

    assert not result.success
    assert not result.validation.is_valid
    assert result.statistical_impact == []
    assert result.salary_impact == []


@pytest.mark.anyio
async def test_simulation_reports_playoff_context(service):
    service.store.upsert_playoff_series(
        [
            PlayoffSeries(
                series_id="east-first-bucks-pacers",
                round="First Round",
                team1="MIL",
                team2="IND",
                team1_seed=3,
                team2_seed=6,
                team1_wins=2,
                team2_wins=4,
                winner="IND",
            )
        ]
    )
    proposal = TradeProposal.two_team(
        "CHI",
        "MIL",
        [TradePlayer(name="Andre Drummond", salary=3_360_000)],
        [TradePlayer(name="Bobby Portis", salary=11_710_818)],
    )
    result = await service.simulate_trade(proposal)

    assert result.playoff_context == {"CHI": [], "MIL": ["First Round vs IND: lost 2-4 (upset)"]}
    assert result.to_dict()["playoff_context"]["MIL"] == ["First Round vs IND: lost 2-4 (upset)"]
