"""Cross-season rules for earning, keeping and losing the skill advantages.

Two independent flags (offense, defense) live on the career. They are granted
by preseason rolls or by a queued pending gain, and are kept or cleared when
a season ends. Every function here returns its narration lines.
"""

from __future__ import annotations

import logging
import random

from .config import FIRED_AFTER_MISSED_PLAYOFFS, RETAIN_PLAYOFF_WINS, RETAIN_REGULAR_WINS
from .dice import roll_pair
from .models import (
    OFFENSE,
    PHASE_AWAITING_SIDE_CHOICE,
    PHASE_REGULAR,
    Advantage,
    CareerError,
    CareerState,
    Season,
    validate_side,
)

_log = logging.getLogger("coach_sim.advantages")


def grant_advantage(advantage: Advantage, side: str, note: str) -> str:
    side = validate_side(side)
    if advantage.has(side):
        return f"{note}: {side.upper()} advantage already owned."
    if side == OFFENSE:
        advantage.offense = True
    else:
        advantage.defense = True
    return f"{note}: {side.upper()} advantage granted."


def apply_pending_gain(career: CareerState) -> list[str]:
    if not career.pending_gain:
        return []
    side = career.pending_gain
    career.pending_gain = None
    return [grant_advantage(career.advantage, side, f"Automatic award for next season: +{side.upper()}")]


def preseason_roll(career: CareerState, rng: random.Random) -> list[str]:
    """Roll for a Highly Skilled advantage.

    A good roll means both dice show 5 or better. One good roll earns one side,
    and a second good roll upgrades it to both. One good roll followed by a
    miss leaves the season waiting for the caller to pick a side.
    """
    season = career.require_season()
    lines: list[str] = []
    first = roll_pair(rng)
    lines.append(f"Preseason roll #1: {first.describe()}")
    if not first.is_good:
        lines.append("Result: No Highly Skilled advantage this season.")
        season.phase = PHASE_REGULAR
        return lines

    lines.append("Result: You earned a Highly Skilled advantage (one side of the ball).")
    second = roll_pair(rng)
    lines.append(f"Preseason roll #2: {second.describe()}")
    if second.is_good:
        career.advantage.offense = True
        career.advantage.defense = True
        lines.append("Result: Highly Skilled on BOTH offense and defense!")
        season.phase = PHASE_REGULAR
        return lines

    lines.append("Second roll did not repeat. Choose: OFFENSE or DEFENSE.")
    season.phase = PHASE_AWAITING_SIDE_CHOICE
    return lines


def retains_advantages(season: Season) -> bool:
    return season.playoff_wins >= RETAIN_PLAYOFF_WINS or season.wins >= RETAIN_REGULAR_WINS


def finalize_season(career: CareerState) -> list[str]:
    """Apply the playoff-drought rule and advantage retention once per season."""
    season = career.require_season()
    if season.finalized:
        raise CareerError(f"Season {season.number} has already been finalized.")
    season.finalized = True

    lines = [
        f"Season {season.number} complete.",
        f"Record: {season.record} | District: {season.district_record}",
    ]
    if season.made_playoffs:
        lines.append(f"Playoffs: {season.playoff_wins} win(s), {season.playoff_losses} loss(es)")

    if season.made_playoffs:
        career.seasons_without_playoffs = 0
    else:
        career.seasons_without_playoffs += 1
    if career.seasons_without_playoffs >= FIRED_AFTER_MISSED_PLAYOFFS:
        career.fired = True
        lines.append(
            f"FIRED: You failed to make playoffs for {FIRED_AFTER_MISSED_PLAYOFFS} consecutive seasons."
        )
        _log.info(f"Coach fired after season {season.number}")
        return lines

    held_any = career.advantage.any
    side = validate_side(career.default_gain_side)

    if season.champion:
        if held_any:
            lines.append("Championship won: advantages automatically retained into next season.")
        else:
            career.pending_gain = side
            lines.append(
                f"You won the championship with no advantages: you will gain ONE advantage next season ({side.upper()})."
            )
        return lines

    retains = retains_advantages(season)
    if held_any:
        if retains:
            lines.append("You retained your advantages into next season (met retention requirement).")
        else:
            career.advantage.clear()
            lines.append("You FAILED the retention requirement and lose your advantages going into next season.")
    elif retains:
        career.pending_gain = side
        career.bonus_preseason_roll = True
        lines.append(
            f"No advantages this season, but you met the requirement ({RETAIN_REGULAR_WINS}+ wins or "
            f"{RETAIN_PLAYOFF_WINS} playoff wins): you will gain ONE advantage next season ({side.upper()}) "
            "in addition to preseason rolling."
        )
    return lines
