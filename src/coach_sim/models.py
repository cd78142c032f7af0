from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime

from .config import DEFAULT_GAIN_SIDE

OFFENSE = "offense"
DEFENSE = "defense"
SIDES = (OFFENSE, DEFENSE)

RESULT_WIN = "W"
RESULT_LOSS = "L"

KIND_REGULAR = "regular"
KIND_DISTRICT_TIEBREAKER = "district_tiebreaker"
KIND_PLAYOFF_ROUND_1 = "playoff_round_1"
KIND_PLAYOFF_ROUND_2 = "playoff_round_2"
KIND_PLAYOFF_ROUND_3 = "playoff_round_3"
KIND_CHAMPIONSHIP = "championship"
PLAYOFF_KINDS = (KIND_PLAYOFF_ROUND_1, KIND_PLAYOFF_ROUND_2, KIND_PLAYOFF_ROUND_3, KIND_CHAMPIONSHIP)
GAME_KINDS = (KIND_REGULAR, KIND_DISTRICT_TIEBREAKER, *PLAYOFF_KINDS)

PHASE_PRESEASON = "preseason"
PHASE_AWAITING_SIDE_CHOICE = "awaiting_side_choice"
PHASE_REGULAR = "regular"
PHASE_TIEBREAKER = "tiebreaker"
PHASE_PLAYOFFS = "playoffs"
PHASE_DONE = "done"
PHASES = (
    PHASE_PRESEASON,
    PHASE_AWAITING_SIDE_CHOICE,
    PHASE_REGULAR,
    PHASE_TIEBREAKER,
    PHASE_PLAYOFFS,
    PHASE_DONE,
)

PHASE_LABELS: dict[str, str] = {
    PHASE_PRESEASON: "Preseason",
    PHASE_AWAITING_SIDE_CHOICE: "Preseason (Choose Advantage)",
    PHASE_REGULAR: "Regular Season",
    PHASE_TIEBREAKER: "District Tiebreaker",
    PHASE_PLAYOFFS: "Playoffs",
    PHASE_DONE: "Season Complete",
}


class CareerError(RuntimeError):
    """Raised when a caller breaks a career or season invariant."""


def validate_side(side: str) -> str:
    normalized = str(side).lower().strip()
    if normalized not in SIDES:
        raise ValueError(f"Unknown advantage side '{side}'; expected one of {', '.join(SIDES)}.")
    return normalized


@dataclass(slots=True)
class Advantage:
    offense: bool = False
    defense: bool = False

    @property
    def any(self) -> bool:
        return self.offense or self.defense

    def has(self, side: str) -> bool:
        return self.offense if validate_side(side) == OFFENSE else self.defense

    def clear(self) -> None:
        self.offense = False
        self.defense = False

    @property
    def label(self) -> str:
        if self.offense and self.defense:
            return "Highly Skilled: OFFENSE + DEFENSE"
        if self.offense:
            return "Highly Skilled: OFFENSE"
        if self.defense:
            return "Highly Skilled: DEFENSE"
        return "No Highly Skilled advantage"


@dataclass(slots=True)
class Game:
    kind: str
    number: int
    name: str
    opponent: str = "Opponent"
    is_district: bool = False
    played: bool = False
    result: str | None = None
    user_score: int | None = None
    opponent_score: int | None = None

    @property
    def won(self) -> bool:
        return self.result == RESULT_WIN

    @property
    def is_playoff(self) -> bool:
        return self.kind in PLAYOFF_KINDS

    @property
    def score_line(self) -> str:
        if not self.played:
            return "-"
        return f"{self.result} {self.user_score}-{self.opponent_score}"


@dataclass(slots=True)
class Season:
    number: int
    games: list[Game] = field(default_factory=list)
    tiebreaker_game: Game | None = None
    playoffs: list[Game] = field(default_factory=list)
    phase: str = PHASE_PRESEASON
    wins: int = 0
    losses: int = 0
    district_wins: int = 0
    district_losses: int = 0
    playoff_wins: int = 0
    playoff_losses: int = 0
    made_playoffs: bool = False
    champion: bool = False
    finalized: bool = False

    @property
    def record(self) -> str:
        return f"{self.wins}-{self.losses}"

    @property
    def district_record(self) -> str:
        return f"{self.district_wins}-{self.district_losses}"

    @property
    def playoff_record(self) -> str:
        return f"{self.playoff_wins}-{self.playoff_losses}"

    def district_game_numbers(self) -> list[int]:
        return [g.number for g in self.games if g.is_district]

    def remaining_regular_games(self) -> list[Game]:
        return [g for g in self.games if not g.played]

    def next_playoff_game(self) -> Game | None:
        return next((g for g in self.playoffs if not g.played), None)

    def record_result(self, game: Game) -> None:
        win = game.won
        if win:
            self.wins += 1
        else:
            self.losses += 1
        if game.is_district:
            if win:
                self.district_wins += 1
            else:
                self.district_losses += 1
        if game.is_playoff:
            if win:
                self.playoff_wins += 1
            else:
                self.playoff_losses += 1


@dataclass(slots=True)
class CareerState:
    coach_name: str = ""
    advantage: Advantage = field(default_factory=Advantage)
    pending_gain: str | None = None
    bonus_preseason_roll: bool = False
    default_gain_side: str = DEFAULT_GAIN_SIDE
    seasons_without_playoffs: int = 0
    fired: bool = False
    season_number: int = 0
    season: Season | None = None
    created_at: str = field(default_factory=lambda: datetime.now().isoformat(timespec="seconds"))
    log: list[str] = field(default_factory=list)

    @property
    def awaiting_side_choice(self) -> bool:
        return self.season is not None and self.season.phase == PHASE_AWAITING_SIDE_CHOICE

    def require_season(self) -> Season:
        if self.season is None:
            raise CareerError("No season is in progress.")
        return self.season
