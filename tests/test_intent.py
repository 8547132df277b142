import pytest

from consigliere.assistant import IntentType, KeywordIntentClassifier


@pytest.fixture(scope="module")
def classifier():
    return KeywordIntentClassifier()


def test_player_question_strips_filler(classifier):
    intent = classifier.classify("Tell me about Jayson Tatum")
    assert intent.type is IntentType.PLAYER
    assert intent.players == ("Jayson Tatum",)


def test_stats_for_player_is_not_a_trade(classifier):
    intent = classifier.classify("stats for Jayson Tatum")
    assert intent.type is IntentType.PLAYER
    assert intent.players == ("Jayson Tatum",)


@pytest.mark.parametrize(
    ("query", "team"),
    [
        ("How are the Celtics doing?", "BOS"),
        ("Lakers salary", "LAL"),
        ("tell me about the los angeles clippers", "LAC"),
        ("What do the Sixers need", "PHI"),
        ("Trail Blazers cap space", "POR"),
    ],
)
def test_team_aliases(classifier, query, team):
    intent = classifier.classify(query)
    assert intent.type is IntentType.TEAM
    assert intent.teams == (team,)


def test_trade_for_phrasing(classifier):
    intent = classifier.classify("Trade Jayson Tatum for Luka Doncic")
    assert intent.type is IntentType.TRADE
    assert intent.players == ("Jayson Tatum", "Luka Doncic")


def test_multi_player_side_without_keyword(classifier):
    intent = classifier.classify("Jrue Holiday and Derrick White for Zach LaVine?")
    assert intent.type is IntentType.TRADE
    assert intent.players == ("Jrue Holiday", "Derrick White", "Zach LaVine")


def test_swap_list(classifier):
    intent = classifier.classify("swap Tatum and Brown")
    assert intent.type is IntentType.TRADE
    assert intent.players == ("Tatum", "Brown")


def test_trade_keyword_collects_teams(classifier):
    intent = classifier.classify("Is a trade between the Celtics and Bulls possible")
    assert intent.type is IntentType.TRADE
    assert set(intent.teams) == {"BOS", "CHI"}
