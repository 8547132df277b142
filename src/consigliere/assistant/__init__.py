"""Natural-language front end: intent classification, prompts and generation."""

from .chat import ChatHandler, ChatResult, TradeAnalysis
from .generator import BLOCKED_RESPONSE, OpenAIGenerator, TextGenerator
from .intent import Intent, IntentType, KeywordIntentClassifier
from .prompts import (
    build_player_prompt,
    build_playoff_impact_prompt,
    build_team_prompt,
    build_trade_prompt,
    describe_playoff_run,
    describe_validation,
)

__all__ = [
    "BLOCKED_RESPONSE",
    "ChatHandler",
    "ChatResult",
    "Intent",
    "IntentType",
    "KeywordIntentClassifier",
    "OpenAIGenerator",
    "TextGenerator",
    "TradeAnalysis",
    "build_player_prompt",
    "build_playoff_impact_prompt",
    "build_team_prompt",
    "build_trade_prompt",
    "describe_playoff_run",
    "describe_validation",
]
