"""Keyword intent classification for free-text questions."""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple


class IntentType(str, Enum):
    PLAYER = "player"
    TEAM = "team"
    TRADE = "trade"


@dataclass(frozen=True)
class Intent:
    type: IntentType
    teams: Tuple[str, ...] = ()
    players: Tuple[str, ...] = ()


NBA_TEAM_ALIAS_GROUPS: dict[str, list[str]] = {
    "ATL": ["hawks", "atlanta hawks"],
    "BOS": ["celtics", "boston celtics"],
    "BKN": ["nets", "brooklyn nets"],
    "CHA": ["hornets", "charlotte hornets"],
    "CHI": ["bulls", "chicago bulls"],
    "CLE": ["cavaliers", "cleveland cavaliers", "cavs"],
    "DAL": ["mavericks", "dallas mavericks", "mavs"],
    "DEN": ["nuggets", "denver nuggets"],
    "DET": ["pistons", "detroit pistons"],
    "GSW": ["warriors", "golden state warriors"],
    "HOU": ["rockets", "houston rockets"],
    "IND": ["pacers", "indiana pacers"],
    "LAC": ["clippers", "los angeles clippers", "la clippers"],
    "LAL": ["lakers", "los angeles lakers"],
    "MEM": ["grizzlies", "memphis grizzlies"],
    "MIA": ["heat", "miami heat"],
    "MIL": ["bucks", "milwaukee bucks"],
    "MIN": ["timberwolves", "minnesota timberwolves", "twolves"],
    "NOP": ["pelicans", "new orleans pelicans", "pels"],
    "NYK": ["knicks", "new york knicks"],
    "OKC": ["thunder", "oklahoma city thunder"],
    "ORL": ["magic", "orlando magic"],
    "PHI": ["76ers", "philadelphia 76ers", "sixers"],
    "PHX": ["suns", "phoenix suns"],
    "POR": ["blazers", "trail blazers", "portland trail blazers"],
    "SAC": ["kings", "sacramento kings"],
    "SAS": ["spurs", "san antonio spurs"],
    "TOR": ["raptors", "toronto raptors"],
    "UTA": ["jazz", "utah jazz"],
    "WAS": ["wizards", "washington wizards"],
}


def _build_alias_lookup() -> list[tuple[re.Pattern[str], str]]:
    pairs = [(alias, abbr) for abbr, aliases in NBA_TEAM_ALIAS_GROUPS.items() for alias in aliases]
    # Longest alias first so "los angeles lakers" wins over "lakers".
    pairs.sort(key=lambda pair: -len(pair[0]))
    return [(re.compile(rf"\b{re.escape(alias)}\b"), abbr) for alias, abbr in pairs]


TEAM_ALIAS_PATTERNS = _build_alias_lookup()

_TRADE_KEYWORDS = re.compile(r"\b(trade|trading|traded|swap|exchange|deal)\b")
_FOR_SPLIT = re.compile(r"\s+(?:trade\s+)?for\s+", re.IGNORECASE)
_LIST_SPLIT = re.compile(r"\s*(?:,|\band\b|&|\+)\s*", re.IGNORECASE)
_LEADING_VERBS = re.compile(r"^(?:what\s+if\s+(?:we\s+)?|should\s+we\s+|can\s+we\s+|would\s+)?(?:trade|swap|exchange|deal)\s+", re.IGNORECASE)
_TRAILING_NOISE = re.compile(r"[?.!]+$")

FILLER_WORDS = frozenset(
    {
        "show", "get", "find", "player", "players", "stats", "stat", "for", "about",
        "me", "the", "tell", "what", "are", "is", "how", "good", "salary", "of",
        "please", "info", "information", "on", "his", "contract",
    }
)


def _strip_filler(text: str) -> str:
    words = [word for word in text.split() if word.lower() not in FILLER_WORDS]
    return " ".join(words).strip()


class KeywordIntentClassifier:
    """Classify a query as trade, team or player using keyword rules.

    Trade phrasing is checked first since it is most specific, then team
    aliases; anything else is treated as a player lookup.
    """

    def classify(self, text: str) -> Intent:
        query = _TRAILING_NOISE.sub("", text.strip())
        lowered = query.lower()

        trade_players = self.extract_trade_players(query)
        if _TRADE_KEYWORDS.search(lowered) or len(trade_players) >= 2:
            return Intent(IntentType.TRADE, teams=self.extract_teams(lowered), players=tuple(trade_players))

        team = self.extract_team(lowered)
        if team:
            return Intent(IntentType.TEAM, teams=(team,))

        name = _strip_filler(query) or query
        return Intent(IntentType.PLAYER, players=(name,) if name else ())

    def extract_team(self, lowered: str) -> Optional[str]:
        for pattern, abbr in TEAM_ALIAS_PATTERNS:
            if pattern.search(lowered):
                return abbr
        return None

    def extract_teams(self, lowered: str) -> Tuple[str, ...]:
        found: list[str] = []
        for pattern, abbr in TEAM_ALIAS_PATTERNS:
            if abbr not in found and pattern.search(lowered):
                found.append(abbr)
        return tuple(found)

    def extract_trade_players(self, query: str) -> list[str]:
        """Pull player names from "A for B", "A and B for C" or "trade A and B"."""

        body = _LEADING_VERBS.sub("", _TRAILING_NOISE.sub("", query.strip()))
        sides = _FOR_SPLIT.split(body, maxsplit=1)
        names: list[str] = []
        if len(sides) == 2:
            left, right = (_strip_filler(side) for side in sides)
            if not left or not right:
                return []
            for side in (left, right):
                names.extend(part for part in _LIST_SPLIT.split(side) if part)
            return names
        if body != query.strip():
            names.extend(part for part in (_strip_filler(p) for p in _LIST_SPLIT.split(body)) if part)
        return names
