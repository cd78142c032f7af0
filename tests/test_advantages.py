import pytest

from coach_sim.advantages import (
    apply_pending_gain,
    finalize_season,
    grant_advantage,
    preseason_roll,
    retains_advantages,
)
from coach_sim.models import (
    KIND_DISTRICT_TIEBREAKER,
    KIND_PLAYOFF_ROUND_1,
    KIND_PLAYOFF_ROUND_2,
    KIND_REGULAR,
    PHASE_DONE,
    PHASE_REGULAR,
    RESULT_LOSS,
    RESULT_WIN,
    Advantage,
    CareerError,
    CareerState,
    Game,
    Season,
)
from coach_sim.season import resolve_side_choice, start_season


def _season(regular_wins: int, playoff_wins: int = 0, made_playoffs: bool = False, champion: bool = False) -> Season:
    games = [
        Game(
            kind=KIND_REGULAR,
            number=n,
            name=f"Game {n}",
            played=True,
            result=RESULT_WIN if n <= regular_wins else RESULT_LOSS,
        )
        for n in range(1, 11)
    ]
    season = Season(number=1, games=games, phase=PHASE_DONE, made_playoffs=made_playoffs, champion=champion)
    for game in games:
        season.record_result(game)
    season.playoff_wins = playoff_wins
    return season


def _career(season: Season, **kwargs) -> CareerState:
    return CareerState(season=season, season_number=season.number, **kwargs)


def test_grant_is_idempotent() -> None:
    advantage = Advantage()
    assert grant_advantage(advantage, "Offense", "Bonus") == "Bonus: OFFENSE advantage granted."
    assert grant_advantage(advantage, "offense", "Bonus") == "Bonus: OFFENSE advantage already owned."
    assert advantage == Advantage(offense=True)


def test_pending_gain_is_consumed_once() -> None:
    career = CareerState(pending_gain="defense")
    lines = apply_pending_gain(career)
    assert career.advantage.defense
    assert career.pending_gain is None
    assert lines and "+DEFENSE" in lines[0]
    assert apply_pending_gain(career) == []


@pytest.mark.parametrize(
    ("regular_wins", "playoff_wins", "expected"),
    [(8, 0, True), (7, 1, False), (7, 2, True), (0, 2, True), (10, 0, True)],
)
def test_retention_threshold(regular_wins, playoff_wins, expected) -> None:
    assert retains_advantages(_season(regular_wins, playoff_wins)) is expected


def test_tiebreaker_and_playoff_wins_count_toward_retention() -> None:
    season = _season(7, made_playoffs=True)
    postseason = [
        Game(kind=KIND_DISTRICT_TIEBREAKER, number=1, name="District Tiebreaker", played=True, result=RESULT_WIN),
        Game(kind=KIND_PLAYOFF_ROUND_1, number=1, name="Playoff Game 1", played=True, result=RESULT_WIN),
        Game(kind=KIND_PLAYOFF_ROUND_2, number=2, name="Playoff Game 2", played=True, result=RESULT_LOSS),
    ]
    season.tiebreaker_game = postseason[0]
    season.playoffs = postseason[1:]
    for game in postseason:
        season.record_result(game)
    assert (season.wins, season.playoff_wins) == (9, 1)
    assert retains_advantages(season)

    career = _career(season, advantage=Advantage(offense=True))
    lines = finalize_season(career)
    assert career.advantage == Advantage(offense=True)
    assert "You retained your advantages into next season (met retention requirement)." in lines


def test_failed_retention_clears_advantages() -> None:
    career = _career(_season(5), advantage=Advantage(offense=True, defense=True))
    lines = finalize_season(career)
    assert not career.advantage.any
    assert career.seasons_without_playoffs == 1
    assert any("FAILED the retention requirement" in line for line in lines)


def test_met_retention_keeps_advantages() -> None:
    career = _career(_season(8), advantage=Advantage(defense=True))
    finalize_season(career)
    assert career.advantage == Advantage(defense=True)
    assert career.pending_gain is None


def test_champion_keeps_advantages_even_without_retention_wins() -> None:
    career = _career(
        _season(3, playoff_wins=4, made_playoffs=True, champion=True),
        advantage=Advantage(offense=True),
        seasons_without_playoffs=4,
    )
    lines = finalize_season(career)
    assert career.advantage == Advantage(offense=True)
    assert career.seasons_without_playoffs == 0
    assert "Championship won: advantages automatically retained into next season." in lines


def test_champion_without_advantages_queues_default_side() -> None:
    career = _career(
        _season(6, playoff_wins=4, made_playoffs=True, champion=True),
        default_gain_side="defense",
    )
    finalize_season(career)
    assert career.pending_gain == "defense"
    assert not career.bonus_preseason_roll


def test_retention_without_advantages_queues_gain_and_still_rolls(scripted) -> None:
    career = _career(_season(9))
    finalize_season(career)
    assert career.pending_gain == "offense"
    assert career.bonus_preseason_roll

    rng = scripted(1, 1)
    lines = start_season(career, rng)
    assert rng.remaining == 0
    assert career.advantage == Advantage(offense=True)
    assert not career.bonus_preseason_roll
    assert career.season.phase == PHASE_REGULAR
    assert "Preseason roll #1: 1 + 1 = 2" in lines


def test_bonus_roll_duplicate_grant_reports_owned(scripted) -> None:
    career = _career(_season(9))
    finalize_season(career)
    lines = start_season(career, scripted(6, 6, 5, 1))
    assert career.awaiting_side_choice
    assert resolve_side_choice(career, "offense") == ["Preseason choice: OFFENSE advantage already owned."]
    assert career.advantage == Advantage(offense=True)
    assert lines[0].startswith("Automatic award for next season: +OFFENSE")


def test_fifth_straight_miss_fires_coach_and_skips_retention() -> None:
    career = _career(_season(9), advantage=Advantage(offense=True), seasons_without_playoffs=4)
    lines = finalize_season(career)
    assert career.fired
    assert career.seasons_without_playoffs == 5
    assert career.pending_gain is None
    assert lines[-1] == "FIRED: You failed to make playoffs for 5 consecutive seasons."


def test_playoff_appearance_resets_drought() -> None:
    season = _season(6, made_playoffs=True)
    season.playoffs = [Game(kind=KIND_PLAYOFF_ROUND_1, number=1, name="Playoff Game 1")]
    career = _career(season, seasons_without_playoffs=4)
    finalize_season(career)
    assert career.seasons_without_playoffs == 0
    assert not career.fired


def test_finalize_runs_once() -> None:
    career = _career(_season(2))
    finalize_season(career)
    with pytest.raises(CareerError):
        finalize_season(career)
    assert career.seasons_without_playoffs == 1


def test_preseason_roll_requires_a_season(scripted) -> None:
    with pytest.raises(CareerError):
        preseason_roll(CareerState(), scripted(5, 5))
