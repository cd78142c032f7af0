"""Season state machine.

preseason -> (awaiting_side_choice) -> regular -> (tiebreaker) -> (playoffs) -> done

Each public function performs one step against the career passed in and
returns the narration lines for that step.
"""

from __future__ import annotations

import logging
import random

from .advantages import apply_pending_gain, finalize_season, grant_advantage, preseason_roll
from .config import DISTRICT_GAMES, TIEBREAKER_MIN_WINS
from .engine import play_game
from .models import (
    KIND_CHAMPIONSHIP,
    PHASE_AWAITING_SIDE_CHOICE,
    PHASE_DONE,
    PHASE_PLAYOFFS,
    PHASE_PRESEASON,
    PHASE_REGULAR,
    PHASE_TIEBREAKER,
    CareerError,
    CareerState,
    Game,
    Season,
    validate_side,
)
from .names import OpponentNameGenerator
from .schedule import build_playoff_bracket, build_regular_schedule, build_tiebreaker_game

_log = logging.getLogger("coach_sim.season")


def new_season(number: int, rng: random.Random) -> Season:
    return Season(number=number, games=build_regular_schedule(rng, season_number=number))


def start_season(career: CareerState, rng: random.Random) -> list[str]:
    if career.fired:
        raise CareerError("Career is over; no further seasons can be started.")
    career.season_number += 1
    career.season = new_season(career.season_number, rng)
    _log.info(f"Season {career.season_number} started for {career.coach_name or 'Coach'}")

    lines = apply_pending_gain(career)
    return lines + _open_season(career, rng)


def restart_season(career: CareerState, rng: random.Random) -> list[str]:
    if career.fired:
        raise CareerError("Career is over; the season cannot be restarted.")
    season = career.require_season()
    if season.phase == PHASE_DONE:
        raise CareerError(f"Season {season.number} is complete; start the next season instead.")
    number = season.number
    career.season = new_season(number, rng)
    _log.info(f"Season {number} restarted")
    return _open_season(career, rng, restarted=True)


def _open_season(career: CareerState, rng: random.Random, restarted: bool = False) -> list[str]:
    season = career.require_season()
    district = f"District games this season: {', '.join(f'Game {n}' for n in season.district_game_numbers())}"

    owes_roll = career.bonus_preseason_roll
    career.bonus_preseason_roll = False
    if career.advantage.any and not owes_roll:
        season.phase = PHASE_REGULAR
        heading = f"Season {season.number} restarted." if restarted else f"Season {season.number} begins."
        return [heading, f"Advantages retained: {career.advantage.label}", district]

    season.phase = PHASE_PRESEASON
    heading = f"Season {season.number} restarted." if restarted else f"Season {season.number} preseason."
    lines = [heading, "Rolling for Highly Skilled advantage...", district]
    return lines + preseason_roll(career, rng)


def resolve_side_choice(career: CareerState, side: str) -> list[str]:
    side = validate_side(side)
    if not career.awaiting_side_choice:
        raise CareerError("No advantage side choice is pending.")
    line = grant_advantage(career.advantage, side, "Preseason choice")
    career.require_season().phase = PHASE_REGULAR
    return [line]


def next_regular_game(season: Season) -> Game:
    remaining = season.remaining_regular_games()
    if not remaining:
        raise CareerError(f"Season {season.number} has no unplayed regular-season games.")
    return remaining[0]


def advance_season(career: CareerState, rng: random.Random) -> list[str]:
    """Run the next step of the current season.

    Returns an empty list, changing nothing, while a side choice is pending.
    """
    season = career.season
    if season is None:
        raise CareerError("No season is in progress.")
    if career.fired:
        raise CareerError("Career is over; the season cannot be advanced.")

    if season.phase == PHASE_AWAITING_SIDE_CHOICE:
        return []
    if season.phase == PHASE_PRESEASON:
        return preseason_roll(career, rng)
    if season.phase == PHASE_REGULAR:
        return _play_regular(career, season, rng)
    if season.phase == PHASE_TIEBREAKER:
        return _play_tiebreaker(career, season, rng)
    if season.phase == PHASE_PLAYOFFS:
        return _play_playoff(career, season, rng)
    raise CareerError(f"Season {season.number} is complete; start the next season instead.")


def _play_regular(career: CareerState, season: Season, rng: random.Random) -> list[str]:
    lines = play_game(next_regular_game(season), season, career.advantage, rng)
    if not season.remaining_regular_games():
        lines.extend(_close_regular_season(career, season))
    return lines


def _close_regular_season(career: CareerState, season: Season) -> list[str]:
    lines = [
        f"Regular season complete: {season.record}",
        f"District record: {season.district_record}",
    ]
    if season.district_wins == DISTRICT_GAMES:
        lines.append(f"You won the district ({season.district_record}) and ADVANCE to playoffs.")
        _enter_playoffs(season)
        return lines

    if season.district_wins == DISTRICT_GAMES - 1:
        if season.wins < TIEBREAKER_MIN_WINS:
            season.made_playoffs = False
            lines.append(
                f"You went {season.district_record} in district, but total wins < {TIEBREAKER_MIN_WINS}, "
                "so NO tiebreaker game allowed."
            )
            return lines + _finish(career, season)
        season.tiebreaker_game = build_tiebreaker_game(_postseason_names(season))
        season.phase = PHASE_TIEBREAKER
        lines.append(
            f"You went {season.district_record} in district. "
            "You get a DISTRICT TIEBREAKER game to decide playoff spot."
        )
        return lines

    season.made_playoffs = False
    lines.append("You did not win enough district games to advance. No playoffs this season.")
    return lines + _finish(career, season)


def _play_tiebreaker(career: CareerState, season: Season, rng: random.Random) -> list[str]:
    game = season.tiebreaker_game
    if game is None:
        raise CareerError(f"Season {season.number} has no district tiebreaker game.")
    lines = play_game(game, season, career.advantage, rng)
    if game.won:
        lines.append("You won the district tiebreaker and ADVANCE to playoffs.")
        _enter_playoffs(season)
        return lines
    season.made_playoffs = False
    lines.append("You lost the district tiebreaker. No playoffs this season.")
    return lines + _finish(career, season)


def _play_playoff(career: CareerState, season: Season, rng: random.Random) -> list[str]:
    game = season.next_playoff_game()
    if game is None:
        raise CareerError(f"Season {season.number} has no unplayed playoff games.")
    lines = play_game(game, season, career.advantage, rng)
    if game.kind == KIND_CHAMPIONSHIP:
        season.champion = game.won
        lines.append(
            "STATE CHAMPIONS! You won the championship." if game.won else "You lost the State Championship."
        )
        return lines + _finish(career, season)
    if not game.won:
        season.champion = False
        lines.append("Playoff loss. Season ends.")
        return lines + _finish(career, season)
    return lines


def _enter_playoffs(season: Season) -> None:
    season.made_playoffs = True
    season.playoffs = build_playoff_bracket(_postseason_names(season))
    season.phase = PHASE_PLAYOFFS


def _finish(career: CareerState, season: Season) -> list[str]:
    season.phase = PHASE_DONE
    _log.info(
        f"Season {season.number} finished {season.record} "
        f"(district {season.district_record}, playoffs={season.made_playoffs}, champion={season.champion})"
    )
    return finalize_season(career)


def _postseason_names(season: Season) -> OpponentNameGenerator:
    names = OpponentNameGenerator(season.number, stream="postseason")
    played = [g.opponent for g in season.games]
    if season.tiebreaker_game is not None:
        played.append(season.tiebreaker_game.opponent)
    names.reserve(played)
    return names
