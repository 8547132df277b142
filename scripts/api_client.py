"""Lightweight REST client for the consigliere API."""

from __future__ import annotations

import argparse
import json
from pathlib import Path

import httpx


def _print_response(resp: httpx.Response) -> None:
    if resp.status_code >= 400:
        try:
            message = resp.json().get("error") or resp.text
        except json.JSONDecodeError:
            message = resp.text
        raise SystemExit(f"{resp.status_code}: {message}")
    print(json.dumps(resp.json(), indent=2))


def main() -> None:
    parser = argparse.ArgumentParser(description="Interact with the consigliere REST API")
    parser.add_argument("base_url", help="Base URL of the API, e.g. http://localhost:8000")
    parser.add_argument("--user", default=None, help="Value sent as X-User-Id for rate limiting")
    parser.add_argument("--chat", metavar="QUERY", help="Ask a free-text question")
    parser.add_argument("--validate", metavar="FILE", type=Path, help="Validate a trade proposal JSON file")
    parser.add_argument("--simulate", metavar="FILE", type=Path, help="Simulate a trade proposal JSON file")
    parser.add_argument("--team", metavar="ABBR", help="Show salary, needs, trade targets and playoff run for a team")
    parser.add_argument("--timeout", type=float, default=30.0, help="Request timeout in seconds")
    args = parser.parse_args()

    headers = {"X-User-Id": args.user} if args.user else None
    with httpx.Client(base_url=args.base_url, headers=headers, timeout=args.timeout) as client:
        if not any((args.chat, args.validate, args.simulate, args.team)):
            _print_response(client.get("/health"))
            return
        if args.chat:
            _print_response(client.post("/chat", json={"query": args.chat}))
        if args.validate:
            _print_response(client.post("/trades/validate", json=json.loads(args.validate.read_text())))
        if args.simulate:
            _print_response(client.post("/trades/simulate", json=json.loads(args.simulate.read_text())))
        if args.team:
            for view in ("salary", "needs", "recommendations", "playoffs"):
                _print_response(client.get(f"/teams/{args.team}/{view}"))


if __name__ == "__main__":
    main()
