"""Environment-driven runtime settings."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

from .cba import DEFAULT_SEASON


logger = logging.getLogger("uvicorn.error")

_DB_PATH_ENV = "CONSIGLIERE_DB_PATH"
_SEASON_ENV = "CONSIGLIERE_SEASON"
_STORE_TIMEOUT_ENV = "CONSIGLIERE_STORE_TIMEOUT"
_RATE_LIMIT_ENV = "CONSIGLIERE_RATE_LIMIT"
_RATE_WINDOW_ENV = "CONSIGLIERE_RATE_WINDOW"
_MODEL_ENV = "CONSIGLIERE_MODEL"

_DEFAULT_DB_PATH = Path("consigliere.sqlite")
_STORE_TIMEOUT_DEFAULT = 5.0
_RATE_LIMIT_DEFAULT = 5
_RATE_WINDOW_DEFAULT = 60.0
_MODEL_DEFAULT = "gpt-4o-mini"


def _env_float(name: str, default: float, *, clamp_min: float | None = None, clamp_max: float | None = None) -> float:
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        value = float(raw)
    except ValueError:
        logger.warning("Invalid float for %s: %s; using default %.2f", name, raw, default)
        return default
    if clamp_min is not None:
        value = max(clamp_min, value)
    if clamp_max is not None:
        value = min(clamp_max, value)
    return value


def _env_int(name: str, default: int, *, min_value: int | None = None) -> int:
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        value = int(raw)
    except ValueError:
        logger.warning("Invalid int for %s: %s; using default %d", name, raw, default)
        return default
    if min_value is not None:
        value = max(min_value, value)
    return value


@dataclass(frozen=True)
class Settings:
    db_path: str | Path
    season: str = DEFAULT_SEASON
    store_timeout: float = _STORE_TIMEOUT_DEFAULT
    rate_limit: int = _RATE_LIMIT_DEFAULT
    rate_window: float = _RATE_WINDOW_DEFAULT
    model: str = _MODEL_DEFAULT
    openai_api_key: str | None = None


def load_settings() -> Settings:
    """Build settings from the environment, reading a local .env file first."""

    load_dotenv()
    db_path: str | Path = os.getenv(_DB_PATH_ENV) or _DEFAULT_DB_PATH
    return Settings(
        db_path=db_path,
        season=os.getenv(_SEASON_ENV) or DEFAULT_SEASON,
        store_timeout=_env_float(_STORE_TIMEOUT_ENV, _STORE_TIMEOUT_DEFAULT, clamp_min=0.1, clamp_max=120.0),
        rate_limit=_env_int(_RATE_LIMIT_ENV, _RATE_LIMIT_DEFAULT, min_value=0),
        rate_window=_env_float(_RATE_WINDOW_ENV, _RATE_WINDOW_DEFAULT, clamp_min=1.0),
        model=os.getenv(_MODEL_ENV) or _MODEL_DEFAULT,
        openai_api_key=os.getenv("OPENAI_API_KEY") or os.getenv("OPEN_AI_KEY"),
    )
