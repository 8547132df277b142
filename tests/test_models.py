import pytest
from pydantic import ValidationError

from consigliere.models import PlayerRecord, PlayoffSeries, TradePlayer, TradeProposal, round_index


def test_player_record_is_frozen():
    record = PlayerRecord(name="Jayson Tatum", team=" bos ", position="SF", salary=32_600_060)

    assert record.team == "BOS"
    assert record.season == "2023-24"
    assert record.stat("points_per_game") == 0.0

    with pytest.raises((TypeError, ValidationError)):
        record.team = "CHI"  # type: ignore[misc]


def test_player_record_rejects_negative_salary():
    with pytest.raises(ValidationError):
        PlayerRecord(name="Bad Contract", team="BOS", salary=-1)


def test_trade_player_accepts_season_salary_alias():
    player = TradePlayer.model_validate({"name": "Jayson Tatum", "salary_2023_2024": 32_600_060})
    assert player.salary == 32_600_060
    assert TradePlayer(name="Unsigned").salary_value == 0


def test_trade_proposal_normalizes_and_accepts_camel_case():
    proposal = TradeProposal.model_validate(
        {
            "teams": ["bos", "chi"],
            "playersOut": {"bos": [{"name": "Jaylen Brown", "salary": 31_830_357}]},
            "playersIn": {"chi": [{"name": "Jaylen Brown", "salary": 31_830_357}]},
        }
    )
    assert proposal.teams == ["BOS", "CHI"]
    assert [player.name for player in proposal.outgoing("BOS")] == ["Jaylen Brown"]
    assert [player.name for player in proposal.incoming("CHI")] == ["Jaylen Brown"]
    assert proposal.incoming("BOS") == []


def test_trade_proposal_rejects_repeated_or_single_team():
    with pytest.raises(ValidationError):
        TradeProposal(teams=["BOS", "bos"])
    with pytest.raises(ValidationError):
        TradeProposal(teams=["BOS"])


def test_two_team_mirrors_sides():
    a = [TradePlayer(name="A", salary=1)]
    b = [TradePlayer(name="B", salary=2)]
    proposal = TradeProposal.two_team("lal", "mia", a, b)
    assert proposal.players_out == {"LAL": a, "MIA": b}
    assert proposal.players_in == {"LAL": b, "MIA": a}


def test_trade_proposal_merges_team_keys_differing_in_case():
    proposal = TradeProposal.model_validate(
        {
            "teams": ["LAL", "BOS"],
            "players_out": {"lal": [{"name": "Player A", "salary": 30_000_000}], "LAL": [{"name": "Player B"}]},
        }
    )
    assert list(proposal.players_out) == ["LAL"]
    assert [player.name for player in proposal.outgoing("LAL")] == ["Player A", "Player B"]


def _series(**overrides):
    values = {
        "series_id": "east-first-bucks-pacers",
        "round": "First Round",
        "conference": "Eastern",
        "team1": "mil",
        "team2": "IND",
        "team1_seed": 3,
        "team2_seed": 6,
        "team1_wins": 2,
        "team2_wins": 4,
        "winner": "ind",
    }
    values.update(overrides)
    return PlayoffSeries(**values)


def test_playoff_series_flags_upsets_and_sweeps():
    series = _series()
    assert (series.team1, series.winner, series.loser) == ("MIL", "IND", "MIL")
    assert series.upset is True
    assert series.sweep is False
    assert series.record_for("IND") == (4, 2)
    assert series.summary_for("ind") == "First Round vs MIL: won 4-2 (upset)"
    assert series.summary_for("MIL") == "First Round vs IND: lost 2-4 (upset)"

    sweep = _series(team1_wins=0, team2_wins=4, team1_seed=6, team2_seed=3)
    assert sweep.sweep is True
    assert sweep.upset is False


def test_playoff_series_in_progress_and_invalid_teams():
    live = _series(team1_wins=3, team2_wins=2, winner=None)
    assert live.loser is None
    assert live.summary_for("MIL") == "First Round vs IND: leads 3-2"
    assert not live.involves("BOS")
    with pytest.raises(ValueError):
        live.opponent("BOS")
    with pytest.raises(ValidationError):
        _series(winner="BOS")
    with pytest.raises(ValidationError):
        _series(team2="MIL")


def test_round_index_orders_the_bracket():
    assert [round_index(name) for name in ("nba finals", "First Round", "Play-In")] == [3, 0, 4]
