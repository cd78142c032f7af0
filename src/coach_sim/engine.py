from __future__ import annotations

import logging
import random
from dataclasses import dataclass, field

from .config import (
    BASE_BONUS_DICE,
    CHECK_DIE_POINTS,
    CHECK_DIE_THRESHOLD,
    DOUBLE_SIX_BONUS_DICE,
    DOUBLE_SIX_TOTAL,
    OFFENSE_BONUS_DICE,
    SCORE_TABLE,
    TIE_BREAK_POINTS,
)
from .dice import DiceOutcome, exploding_chain, roll_die, roll_pair
from .models import RESULT_LOSS, RESULT_WIN, Advantage, CareerError, Game, Season

_log = logging.getLogger("coach_sim.engine")


@dataclass(slots=True)
class TeamScore:
    score: int
    pair: DiceOutcome
    base_points: int
    bonus_dice: int = 0
    bonus_chains: list[list[int]] = field(default_factory=list)
    check_die: int | None = None
    trace: list[str] = field(default_factory=list)


@dataclass(slots=True)
class TieBreak:
    user_score: int
    opponent_score: int
    rounds: int = 0
    trace: list[str] = field(default_factory=list)


def bonus_dice_count(total: int, has_offense_advantage: bool) -> int:
    if total in CHECK_DIE_POINTS:
        return 0
    count = DOUBLE_SIX_BONUS_DICE if total == DOUBLE_SIX_TOTAL else BASE_BONUS_DICE
    if has_offense_advantage:
        count = max(count, OFFENSE_BONUS_DICE)
    return count


def resolve_team_score(
    rng: random.Random,
    is_user: bool,
    has_offense_advantage: bool = False,
    opponent_has_defense_advantage: bool = False,
    label: str | None = None,
) -> TeamScore:
    label = label or ("You" if is_user else "Opponent")
    pair = roll_pair(rng)
    trace = [f"{label} 2d6: {pair.describe()}"]

    # Totals of 2 and 3 are settled by one checking die and never take bonus dice.
    if pair.total in CHECK_DIE_POINTS:
        check = roll_die(rng)
        hit_points, miss_points = CHECK_DIE_POINTS[pair.total]
        points = hit_points if check >= CHECK_DIE_THRESHOLD else miss_points
        trace.append(f"{label} check die (for sum={pair.total}): {check}")
        trace.append(f"{label} base points: {points} (no extra dice allowed)")
        return TeamScore(score=points, pair=pair, base_points=points, check_die=check, trace=trace)

    base = SCORE_TABLE[pair.total]
    trace.append(f"{label} base points: {base}")

    if opponent_has_defense_advantage:
        trace.append(f"{label} (opponent has DEF advantage): no extra dice allowed.")
        return TeamScore(score=base, pair=pair, base_points=base, trace=trace)

    count = bonus_dice_count(pair.total, has_offense_advantage)
    trace.append(f"{label} extra dice count: {count} (6s explode)")
    score = base
    chains: list[list[int]] = []
    for idx in range(1, count + 1):
        chain = exploding_chain(rng)
        chains.append(chain)
        score += sum(chain)
        trace.append(f"{label} extra die #{idx}: {', '.join(str(v) for v in chain)} (adds {sum(chain)})")
    trace.append(f"{label} final score: {score}")
    return TeamScore(
        score=score,
        pair=pair,
        base_points=base,
        bonus_dice=count,
        bonus_chains=chains,
        trace=trace,
    )


def break_tie(rng: random.Random, user_score: int, opponent_score: int) -> TieBreak:
    result = TieBreak(user_score=user_score, opponent_score=opponent_score)
    while result.user_score == result.opponent_score:
        result.rounds += 1
        user_roll = roll_die(rng)
        opponent_roll = roll_die(rng)
        result.trace.append(f"TIEBREAKER #{result.rounds}: You roll {user_roll}, Opponent rolls {opponent_roll}")
        if user_roll > opponent_roll:
            result.user_score += TIE_BREAK_POINTS
            result.trace.append(
                f"You win tiebreaker (+{TIE_BREAK_POINTS}). "
                f"New score: You {result.user_score} - Opp {result.opponent_score}"
            )
        elif opponent_roll > user_roll:
            result.opponent_score += TIE_BREAK_POINTS
            result.trace.append(
                f"Opponent wins tiebreaker (+{TIE_BREAK_POINTS}). "
                f"New score: You {result.user_score} - Opp {result.opponent_score}"
            )
        else:
            result.trace.append("Tiebreaker tied again. Rolling again...")
    return result


def play_game(game: Game, season: Season, advantage: Advantage, rng: random.Random) -> list[str]:
    """Resolve one scheduled contest and record it on the season.

    Each game may be resolved once; a second call is a caller bug.
    """
    if game.played:
        raise CareerError(f"{game.name} vs {game.opponent} has already been played.")

    header = f"{game.name} vs {game.opponent}"
    if game.is_district:
        header += " (District)"
    lines = [header]

    user = resolve_team_score(rng, is_user=True, has_offense_advantage=advantage.offense)
    # The user's defense advantage suppresses the opponent's bonus dice, never the reverse.
    opponent = resolve_team_score(
        rng,
        is_user=False,
        has_offense_advantage=False,
        opponent_has_defense_advantage=advantage.defense,
    )
    lines.extend(f"  {line}" for line in user.trace)
    lines.extend(f"  {line}" for line in opponent.trace)

    user_score = user.score
    opponent_score = opponent.score
    if user_score == opponent_score:
        lines.append(f"Score tied at {user_score}-{opponent_score}. Settling with one-die tiebreaker (+{TIE_BREAK_POINTS}).")
        tie = break_tie(rng, user_score, opponent_score)
        lines.extend(tie.trace)
        user_score = tie.user_score
        opponent_score = tie.opponent_score

    win = user_score > opponent_score
    game.played = True
    game.user_score = user_score
    game.opponent_score = opponent_score
    game.result = RESULT_WIN if win else RESULT_LOSS
    season.record_result(game)

    lines.append(f"FINAL: You {user_score} - {game.opponent} {opponent_score}  => {'WIN' if win else 'LOSS'}")
    _log.debug(f"Season {season.number} {game.name}: {game.result} {user_score}-{opponent_score}")
    return lines
