"""Input adapters that normalize raw player, team and playoff CSVs."""

from .players import (
    DEFAULT_PLAYER_MAPPING,
    DEFAULT_PLAYOFF_MAPPING,
    DEFAULT_TEAM_MAPPING,
    ImportReport,
    import_files,
    load_player_csv,
    load_playoff_csv,
    load_team_csv,
)

__all__ = [
    "DEFAULT_PLAYER_MAPPING",
    "DEFAULT_PLAYOFF_MAPPING",
    "DEFAULT_TEAM_MAPPING",
    "ImportReport",
    "import_files",
    "load_player_csv",
    "load_playoff_csv",
    "load_team_csv",
]
