from __future__ import annotations

import random

from .config import DISTRICT_GAMES, REGULAR_SEASON_GAMES
from .models import (
    KIND_CHAMPIONSHIP,
    KIND_DISTRICT_TIEBREAKER,
    KIND_PLAYOFF_ROUND_1,
    KIND_PLAYOFF_ROUND_2,
    KIND_PLAYOFF_ROUND_3,
    KIND_REGULAR,
    Game,
)
from .names import OpponentNameGenerator

PLAYOFF_ROUNDS: tuple[tuple[str, str], ...] = (
    (KIND_PLAYOFF_ROUND_1, "Playoff Game 1"),
    (KIND_PLAYOFF_ROUND_2, "Playoff Game 2"),
    (KIND_PLAYOFF_ROUND_3, "Playoff Game 3"),
    (KIND_CHAMPIONSHIP, "State Championship"),
)


def pick_district_slots(
    rng: random.Random,
    games: int = REGULAR_SEASON_GAMES,
    district_games: int = DISTRICT_GAMES,
) -> list[int]:
    """Choose district slot indexes uniformly without replacement."""
    if district_games > games:
        raise ValueError(f"Cannot mark {district_games} district games in a {games}-game schedule.")
    return sorted(rng.sample(range(games), district_games))


def build_regular_schedule(
    rng: random.Random,
    season_number: int = 1,
    names: OpponentNameGenerator | None = None,
    games: int = REGULAR_SEASON_GAMES,
    district_games: int = DISTRICT_GAMES,
) -> list[Game]:
    names = names or OpponentNameGenerator(season_number, salt=rng.getrandbits(32))
    district = set(pick_district_slots(rng, games, district_games))
    return [
        Game(
            kind=KIND_REGULAR,
            number=idx + 1,
            name=f"Game {idx + 1}",
            opponent=names.next_name(),
            is_district=idx in district,
        )
        for idx in range(games)
    ]


def build_tiebreaker_game(names: OpponentNameGenerator) -> Game:
    # Played against a district rival, but it does not count toward the district record.
    return Game(
        kind=KIND_DISTRICT_TIEBREAKER,
        number=1,
        name="District Tiebreaker",
        opponent=names.next_name(),
    )


def build_playoff_bracket(names: OpponentNameGenerator) -> list[Game]:
    return [
        Game(kind=kind, number=idx, name=name, opponent=names.next_name())
        for idx, (kind, name) in enumerate(PLAYOFF_ROUNDS, start=1)
    ]
