"""Static simulation configuration constants."""

# 2d6 total -> base points. Totals 2 and 3 use the checking die instead.
SCORE_TABLE: dict[int, int] = {
    4: 13,
    5: 14,
    6: 16,
    7: 17,
    8: 20,
    9: 24,
    10: 27,
    11: 28,
    12: 30,
}

CHECK_DIE_THRESHOLD = 4
# total -> (points when check die >= threshold, points otherwise)
CHECK_DIE_POINTS: dict[int, tuple[int, int]] = {
    2: (3, 0),
    3: (12, 6),
}

EXPLODING_FACE = 6
DOUBLE_SIX_TOTAL = 12
BASE_BONUS_DICE = 1
DOUBLE_SIX_BONUS_DICE = 2
OFFENSE_BONUS_DICE = 2

TIE_BREAK_POINTS = 3

REGULAR_SEASON_GAMES = 10
DISTRICT_GAMES = 4
TIEBREAKER_MIN_WINS = 5

GOOD_ROLL_MIN_FACE = 5
RETAIN_PLAYOFF_WINS = 2
RETAIN_REGULAR_WINS = 8
FIRED_AFTER_MISSED_PLAYOFFS = 5

DEFAULT_GAIN_SIDE = "offense"
DEFAULT_COACH_NAME = "Coach"

SAVE_VERSION = 1
