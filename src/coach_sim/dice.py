from __future__ import annotations

import random
from dataclasses import dataclass

from .config import EXPLODING_FACE, GOOD_ROLL_MIN_FACE


@dataclass(slots=True, frozen=True)
class DiceOutcome:
    a: int
    b: int

    @property
    def total(self) -> int:
        return self.a + self.b

    @property
    def is_good(self) -> bool:
        return self.a >= GOOD_ROLL_MIN_FACE and self.b >= GOOD_ROLL_MIN_FACE

    def describe(self) -> str:
        return f"{self.a} + {self.b} = {self.total}"


def roll_die(rng: random.Random) -> int:
    return rng.randint(1, 6)


def roll_pair(rng: random.Random) -> DiceOutcome:
    return DiceOutcome(a=roll_die(rng), b=roll_die(rng))


def exploding_chain(rng: random.Random) -> list[int]:
    """Roll one die, rolling again after every six. Returns each face rolled."""
    chain = [roll_die(rng)]
    while chain[-1] == EXPLODING_FACE:
        chain.append(roll_die(rng))
    return chain


def exploding_roll(rng: random.Random) -> int:
    return sum(exploding_chain(rng))
