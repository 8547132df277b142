"""Command-line interface for importing data, validating trades and serving the API."""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
from pathlib import Path

from pydantic import ValidationError

from consigliere.config import get_thresholds, load_settings
from consigliere.errors import ConsigliereError
from consigliere.ingest import import_files
from consigliere.models import TradeProposal
from consigliere.persistence import PlayerStore
from consigliere.validator import validate_trade


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="NBA trade consigliere")
    parser.add_argument("--db", default=None, help="SQLite path or file: URI (defaults to CONSIGLIERE_DB_PATH)")
    parser.add_argument("--season", default=None, help="Season key, e.g. 2023-24")
    subparsers = parser.add_subparsers(dest="command", required=True)

    importer = subparsers.add_parser("import", help="Load player, team and playoff CSVs into the store")
    importer.add_argument("--players", type=Path, default=None, help="Player stats/salary CSV")
    importer.add_argument("--teams", type=Path, default=None, help="Team payroll/profile CSV")
    importer.add_argument("--playoffs", type=Path, default=None, help="Playoff series CSV, one row per series")

    validator = subparsers.add_parser("validate", help="Validate a trade proposal JSON file")
    validator.add_argument("proposal", type=Path, help="JSON file with teams, players_out and players_in")

    server = subparsers.add_parser("serve", help="Run the HTTP API with uvicorn")
    server.add_argument("--host", default="127.0.0.1")
    server.add_argument("--port", type=int, default=8000)
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> None:
    args = _parse_args(argv)
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")
    settings = load_settings()
    season = args.season or settings.season

    if args.command == "serve":
        import uvicorn

        from consigliere.api import create_app

        store = PlayerStore(args.db or settings.db_path, season=season)
        uvicorn.run(create_app(store=store, settings=settings), host=args.host, port=args.port)
        return

    store = PlayerStore(args.db or settings.db_path, season=season)

    if args.command == "import":
        paths = (args.players, args.teams, args.playoffs)
        if all(path is None for path in paths):
            raise SystemExit("Provide at least one of --players, --teams or --playoffs")
        for path in paths:
            if path is not None and not path.exists():
                raise SystemExit(f"CSV file not found: {path}")
        report = import_files(
            store,
            players_path=args.players,
            teams_path=args.teams,
            playoffs_path=args.playoffs,
            season=season,
        )
        print(
            f"Imported {report.players_loaded} players, {report.teams_loaded} teams "
            f"and {report.playoff_series_loaded} playoff series "
            f"({report.rows_skipped} rows skipped) into {store.db_path}"
        )
        return

    try:
        proposal = TradeProposal.model_validate(json.loads(args.proposal.read_text()))
    except (OSError, json.JSONDecodeError, ValidationError) as exc:
        raise SystemExit(f"Invalid proposal file {args.proposal}: {exc}") from exc
    try:
        result = asyncio.run(
            validate_trade(
                proposal,
                store,
                thresholds=get_thresholds(season),
                timeout=settings.store_timeout,
            )
        )
    except ConsigliereError as exc:
        raise SystemExit(f"Validation failed: {exc.message}") from exc
    print(json.dumps(result.to_dict(), indent=2, default=str))
    if not result.is_valid:
        raise SystemExit(1)


if __name__ == "__main__":
    main()
