"""Prompt builders that turn store data and validation results into model input."""

from __future__ import annotations

from typing import Iterable, Mapping, Sequence

from consigliere.cap import TeamSalarySituation, format_salary
from consigliere.models import PlayerRecord, PlayoffSeries, TeamRecord
from consigliere.needs import TeamNeeds
from consigliere.validator import ValidationResult


_PLAYER_STATS = (
    ("Points", "points_per_game"),
    ("Rebounds", "rebounds_per_game"),
    ("Assists", "assists_per_game"),
    ("Steals", "steals_per_game"),
    ("Blocks", "blocks_per_game"),
    ("Field Goal Percentage", "field_goal_percentage"),
    ("Three-Point Percentage", "three_point_percentage"),
)


def _stat(player: PlayerRecord, key: str) -> str:
    value = player.stats.get(key)
    return "N/A" if value is None else f"{value:g}"


def build_player_prompt(question: str, player: PlayerRecord, similar: Sequence[PlayerRecord]) -> str:
    stat_lines = "\n".join(f"- {label}: {_stat(player, key)}" for label, key in _PLAYER_STATS)
    similar_lines = "\n".join(f"- {p.name} ({p.team}): {format_salary(p.salary)}" for p in similar) or "- None found."
    return (
        f"You are a concise NBA stats provider. Your context is ONLY the {player.season} NBA season.\n"
        "Do not write a narrative. Provide a scannable, data-focused summary.\n\n"
        f"PLAYER: {player.name} ({player.team})\n"
        f"POSITION: {player.position or 'N/A'}\n"
        f"SALARY: {format_salary(player.salary) if player.salary is not None else 'Unknown'}\n\n"
        f"{player.season} STATS:\n{stat_lines}\n\n"
        f"SIMILARLY PAID PLAYERS:\n{similar_lines}\n\n"
        "YOUR TASK:\n"
        "1. State the player's salary.\n"
        "2. Present their key stats.\n"
        "3. List the similarly paid players.\n"
        "Keep the entire response very brief and use bullet points for clarity.\n\n"
        f'User Query: "{question}"'
    )


def build_team_prompt(
    question: str,
    team: str,
    roster: Iterable[PlayerRecord],
    situation: TeamSalarySituation,
    needs: TeamNeeds,
    record: TeamRecord | None = None,
    playoffs: Sequence[PlayoffSeries] | None = None,
) -> str:
    top_paid = sorted(roster, key=lambda p: -p.salary_value)[:5]
    player_lines = "\n".join(f"  - {p.name}: {format_salary(p.salary_value)}" for p in top_paid) or "  - No players on file."
    profile = ""
    if record is not None and (record.strength or record.weakness):
        profile = f"- Strengths: {record.strength or 'N/A'}\n- Weaknesses: {record.weakness or 'N/A'}\n"
    playoff_run = "" if playoffs is None else f"PLAYOFF RUN:\n{describe_playoff_run(team, playoffs)}\n\n"
    return (
        "You are a concise NBA analyst. Provide a brief, scannable summary. Do not use conversational filler.\n\n"
        "TEAM DATA:\n"
        f"- Team: {record.name if record and record.name else team}\n"
        f"- Total Salary: {format_salary(situation.total_payroll)} ({situation.apron_status.value})\n"
        f"- Cap Space: {format_salary(situation.cap_space)}\n"
        f"{profile}"
        f"- Positional needs: {', '.join(needs.positions) or 'none'}\n"
        f"- Statistical needs: {', '.join(needs.stats) or 'none'}\n"
        f"- Top Paid Players:\n{player_lines}\n\n"
        f"{playoff_run}"
        "YOUR TASK:\n"
        "1. Briefly state the team's total salary and cap position.\n"
        "2. Recommend 3 specific and realistic players the team could trade for, "
        "keeping the listed needs and salary rules in mind (e.g. \"Player Name (Team)\").\n\n"
        f'User Query: "{question}"'
    )


def describe_playoff_run(team: str, series: Sequence[PlayoffSeries]) -> str:
    """One line per series ``team`` played, or a note that it missed the playoffs."""

    if not series:
        return f"- {team}: Not in playoffs"
    first = series[0]
    seed = first.seed_for(team)
    header = f"- {team}"
    if seed is not None:
        conference = f"{first.conference} " if first.conference else ""
        header += f" ({conference}#{seed} seed)"
    lines = [f"{header}:"]
    for item in series:
        lines.append(f"  - {item.summary_for(team)}")
    return "\n".join(lines)


def _playoff_section(playoffs: Mapping[str, Sequence[PlayoffSeries]] | None) -> str:
    if playoffs is None:
        return ""
    runs = "\n".join(describe_playoff_run(team, series) for team, series in playoffs.items())
    return f"PLAYOFF CONTEXT:\n{runs}\n\n"


def describe_validation(validation: ValidationResult) -> str:
    lines = [f"Trade is legal: {'Yes' if validation.is_valid else 'No'}"]
    for team, change in validation.salary_analysis.salary_changes.items():
        situation = validation.salary_analysis.team_situations[team]
        roster = validation.roster_validation.details[team]
        lines.append(
            f"- {team}: sends {format_salary(change.salary_out)}, receives {format_salary(change.salary_in)}, "
            f"payroll {format_salary(situation.total_payroll)} -> {format_salary(change.new_total_salary)} "
            f"({situation.apron_status.value} before trade), roster {roster.current_size} -> {roster.new_size}"
        )
    for team, roster in validation.roster_validation.details.items():
        if not roster.is_valid:
            lines.append(f"- Violation [{team}] Roster Size: roster would be {roster.new_size} players")
    for violation in validation.violations:
        lines.append(f"- Violation [{violation.team}] {violation.rule}: {violation.message}")
    return "\n".join(lines)


def _player_lines(players: Sequence[PlayerRecord]) -> str:
    return "\n".join(
        f"- {p.name} ({p.team}):\n"
        f"  - Salary: {format_salary(p.salary_value)}\n"
        f"  - PTS: {_stat(p, 'points_per_game')}  REB: {_stat(p, 'rebounds_per_game')}  AST: {_stat(p, 'assists_per_game')}"
        for p in players
    )


def build_trade_prompt(
    question: str,
    players: Sequence[PlayerRecord],
    validation: ValidationResult,
    playoffs: Mapping[str, Sequence[PlayoffSeries]] | None = None,
) -> str:
    return (
        "You are an NBA trade analyst. Base your analysis strictly on the data provided. "
        "The salary-cap verdict below was computed by a rules engine; do not contradict it.\n\n"
        f"PLAYERS:\n{_player_lines(players)}\n\n"
        f"CBA VALIDATION:\n{describe_validation(validation)}\n\n"
        f"{_playoff_section(playoffs)}"
        "Respond in this format:\n"
        "Is this trade legal: [Yes/No]\n"
        "Logic from CBA: [explain the salary matching and apron rules using the numbers above]\n"
        "If the trade is legal, continue with:\n"
        "Trade Winner: [team]\n"
        "Why They Win: [2-3 sentences on fit and impact]\n\n"
        f'User Query: "{question}"'
    )


def build_playoff_impact_prompt(
    teams: Sequence[str],
    sides: Mapping[str, Sequence[PlayerRecord]],
    validation: ValidationResult,
    playoffs: Mapping[str, Sequence[PlayoffSeries]],
    profiles: Mapping[str, TeamRecord | None] | None = None,
) -> str:
    """Ask how a two-team trade changes each side's playoff outlook.

    ``sides`` maps each team to the players it sends away; the other team
    receives them.
    """

    profiles = profiles or {}
    situations = []
    for team in teams:
        record = profiles.get(team)
        strength = record.strength if record and record.strength else "N/A"
        weakness = record.weakness if record and record.weakness else "N/A"
        situations.append(
            f"{describe_playoff_run(team, playoffs.get(team, ()))}\n"
            f"  - Strengths: {strength}\n"
            f"  - Weaknesses: {weakness}"
        )
    changes = []
    for team in teams:
        other = next(candidate for candidate in teams if candidate != team)
        changes.append(
            f"{team} trading away:\n{_player_lines(sides.get(team, ())) or '- nothing'}\n"
            f"{team} receiving:\n{_player_lines(sides.get(other, ())) or '- nothing'}"
        )
    return (
        "You are an NBA expert analyzing how a trade would impact the playoffs. "
        "Base your analysis strictly on the data provided.\n\n"
        "TEAM SITUATIONS:\n" + "\n".join(situations) + "\n\n"
        "ROSTER CHANGES:\n" + "\n\n".join(changes) + "\n\n"
        f"CBA VALIDATION:\n{describe_validation(validation)}\n\n"
        "PLAYOFF IMPACT ANALYSIS:\n"
        "1. Finals Odds Change (Significantly Better/Better/Neutral/Worse) for each team\n"
        "2. Matchup Impact (how the trade affects each team's series)\n"
        "3. Rotation Changes (key lineup adjustments)\n"
        "4. Quick Impact Score (1-10, with 10 being most positive) for each team\n"
        "Keep the response focused on immediate playoff impact and use bullet points."
    )
