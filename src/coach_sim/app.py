from __future__ import annotations

from .career import CareerSimulator
from .models import Season


def format_schedule(season: Season) -> str:
    lines = ["No  Game                 Opponent                      Dist  Result"]
    games = [*season.games]
    if season.tiebreaker_game is not None:
        games.append(season.tiebreaker_game)
    games.extend(season.playoffs)
    for idx, game in enumerate(games, start=1):
        lines.append(
            f"{idx:>2}  {game.name:<20} {game.opponent:<29} {'D' if game.is_district else '':<4}  {game.score_line}"
        )
    return "\n".join(lines)


def format_career_summary(simulator: CareerSimulator) -> str:
    view = simulator.view()
    lines = [
        f"Coach: {view['career_status']}",
        f"Phase: {view['phase_label']}",
    ]
    if view["season_number"] is not None:
        lines.append(f"Year {view['season_number']}  Record {view['record']}  District {view['district_record']}")
    if view["playoff_record"] is not None:
        lines.append(f"Playoffs: {view['playoff_record']}")
    advantage = view["advantage"]
    lines.append(
        f"OFFENSE: {'ON' if advantage['offense'] else 'off'}  "
        f"DEFENSE: {'ON' if advantage['defense'] else 'off'}  ({advantage['label']})"
    )
    if view["pending_gain"]:
        lines.append(f"Next season bonus: +{view['pending_gain'].upper()}")
    lines.append(f"Seasons without playoffs: {view['seasons_without_playoffs']}")
    if view["awaiting_side_choice"]:
        lines.append("Choose your Highly Skilled side: OFFENSE or DEFENSE.")
    return "\n".join(lines)
