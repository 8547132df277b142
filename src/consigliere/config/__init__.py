"""Configuration helpers for CBA thresholds and runtime settings."""

from .cba import CapThresholds, DEFAULT_SEASON, get_thresholds, iter_thresholds
from .settings import Settings, load_settings

__all__ = [
    "CapThresholds",
    "DEFAULT_SEASON",
    "Settings",
    "get_thresholds",
    "iter_thresholds",
    "load_settings",
]
