"""Consistency check for the caller-supplied out/in partition."""

from __future__ import annotations

from collections import defaultdict
from typing import Dict, List

from consigliere.errors import MalformedProposal
from consigliere.models import TradeProposal


def _key(name: str) -> str:
    return " ".join(name.lower().split())


def _distinct(teams: List[str]) -> List[str]:
    return list(dict.fromkeys(teams))


def check_conservation(proposal: TradeProposal) -> None:
    """Raise ``MalformedProposal`` unless every departing player lands on exactly one other team.

    Also rejects arrivals nobody sent, players leaving two teams, and
    per-team entries for teams outside ``proposal.teams``.
    """

    problems: List[str] = []
    teams = set(proposal.teams)

    for label, mapping in (("players_out", proposal.players_out), ("players_in", proposal.players_in)):
        for team in mapping:
            if team not in teams:
                problems.append(f"{label} lists {team}, which is not part of the trade")

    senders: Dict[str, List[str]] = defaultdict(list)
    receivers: Dict[str, List[str]] = defaultdict(list)
    display: Dict[str, str] = {}
    for team, players in proposal.players_out.items():
        for player in players:
            senders[_key(player.name)].append(team)
            display.setdefault(_key(player.name), player.name)
    for team, players in proposal.players_in.items():
        for player in players:
            receivers[_key(player.name)].append(team)
            display.setdefault(_key(player.name), player.name)

    for key, listed_by in senders.items():
        name = display[key]
        from_teams = _distinct(listed_by)
        if len(from_teams) > 1:
            problems.append(f"{name} is sent out by more than one team ({', '.join(from_teams)})")
            continue
        if len(listed_by) > 1:
            problems.append(f"{name} is listed twice in players_out by {from_teams[0]}")
            continue
        to_teams = _distinct(receivers.get(key, []))
        if from_teams[0] in to_teams:
            problems.append(f"{name} is both sent out and received by {from_teams[0]}")
        elif len(to_teams) > 1:
            problems.append(f"{name} arrives at more than one team ({', '.join(to_teams)})")
        elif not to_teams:
            problems.append(f"{name} leaves {from_teams[0]} but arrives nowhere")
        elif len(receivers[key]) > 1:
            problems.append(f"{name} is listed twice in players_in by {to_teams[0]}")

    for key, to_teams in receivers.items():
        if key not in senders:
            problems.append(f"{display[key]} arrives at {to_teams[0]} but is not sent out by any team")

    if problems:
        raise MalformedProposal(problems)
