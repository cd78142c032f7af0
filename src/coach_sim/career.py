from __future__ import annotations

import logging
import random
from datetime import datetime
from typing import Any

from .config import DEFAULT_COACH_NAME, DEFAULT_GAIN_SIDE
from .models import (
    PHASE_DONE,
    PHASE_LABELS,
    CareerError,
    CareerState,
    Game,
    Season,
    validate_side,
)
from .season import advance_season, resolve_side_choice, restart_season, start_season
from .storage import CareerStore

_log = logging.getLogger("coach_sim.career")


class CareerSimulator:
    """Drives one coaching career: seasons, the side-choice pause, the log and autosave."""

    def __init__(
        self,
        state: CareerState | None = None,
        seed: int | None = None,
        rng: random.Random | None = None,
        store: CareerStore | None = None,
        default_side: str = DEFAULT_GAIN_SIDE,
    ) -> None:
        self._rng = rng or random.Random(seed)
        self.store = store
        self.last_load_error: str = ""
        if state is None and store is not None:
            state = store.load()
            self.last_load_error = store.last_load_error
        self.state = state or CareerState(default_gain_side=validate_side(default_side))

    @property
    def season(self) -> Season | None:
        return self.state.season

    @property
    def awaiting_side_choice(self) -> bool:
        return self.state.awaiting_side_choice

    @property
    def last_save_error(self) -> str:
        return self.store.last_save_error if self.store is not None else ""

    def new_career(self, coach_name: str = "") -> dict[str, Any]:
        default_side = self.state.default_gain_side
        self.state = CareerState(coach_name=coach_name.strip(), default_gain_side=default_side)
        _log.info(f"New career started for {self.coach_label}")
        self._push_log(
            [
                f"NEW CAREER started for {self.coach_label}.",
                "Goal: Win state championships and build a dynasty.",
            ]
        )
        lines = start_season(self.state, self._rng)
        return self._commit(lines)

    def advance(self) -> dict[str, Any]:
        """Handle one external advance request.

        Starts the first or next season when none is running, otherwise plays
        the next step of the current one. Rejected without changes while a
        side choice is pending.
        """
        if self.state.fired:
            raise CareerError("Career is over; the coach has been fired.")
        if self.awaiting_side_choice:
            return self._result(advanced=False, lines=[])
        if self.state.season is None or self.state.season.phase == PHASE_DONE:
            lines = start_season(self.state, self._rng)
        else:
            lines = advance_season(self.state, self._rng)
        return self._commit(lines)

    def choose_side(self, side: str) -> dict[str, Any]:
        lines = resolve_side_choice(self.state, side)
        return self._commit(lines)

    def restart_season(self) -> dict[str, Any]:
        if self.state.fired:
            raise CareerError("Career is over; the season cannot be restarted.")
        if self.awaiting_side_choice:
            return self._result(advanced=False, lines=[])
        lines = restart_season(self.state, self._rng)
        return self._commit(lines)

    def set_coach_name(self, name: str) -> None:
        self.state.coach_name = name.strip()
        self.save()

    def set_default_side(self, side: str) -> None:
        self.state.default_gain_side = validate_side(side)
        self.save()

    def clear_log(self) -> None:
        self.state.log = []
        self.save()

    def export_log(self) -> str:
        return "\n".join(self.state.log)

    def save(self) -> bool:
        if self.store is None:
            return True
        return self.store.save(self.state)

    @property
    def coach_label(self) -> str:
        return self.state.coach_name or DEFAULT_COACH_NAME

    def phase_label(self) -> str:
        season = self.state.season
        if season is None:
            return "No season"
        if season.phase == PHASE_DONE and season.champion:
            return "Season Complete (Champion)"
        return PHASE_LABELS[season.phase]

    def next_action_label(self) -> str:
        season = self.state.season
        if season is not None and season.phase == PHASE_DONE:
            return "Start Next Season"
        return "Play Next Game"

    def view(self) -> dict[str, Any]:
        state = self.state
        season = state.season
        payload: dict[str, Any] = {
            "coach": self.coach_label,
            "career_status": f"{self.coach_label} (Fired)" if state.fired else self.coach_label,
            "season_number": season.number if season else None,
            "phase": season.phase if season else None,
            "phase_label": self.phase_label(),
            "next_action": self.next_action_label(),
            "record": season.record if season else None,
            "district_record": season.district_record if season else None,
            "playoff_record": season.playoff_record if season and season.made_playoffs else None,
            "made_playoffs": season.made_playoffs if season else False,
            "champion": season.champion if season else False,
            "advantage": {
                "offense": state.advantage.offense,
                "defense": state.advantage.defense,
                "label": state.advantage.label,
            },
            "pending_gain": state.pending_gain,
            "default_side": state.default_gain_side,
            "seasons_without_playoffs": state.seasons_without_playoffs,
            "fired": state.fired,
            "awaiting_side_choice": self.awaiting_side_choice,
            "can_advance": not state.fired and not self.awaiting_side_choice,
            "can_restart": (
                season is not None
                and season.phase != PHASE_DONE
                and not state.fired
                and not self.awaiting_side_choice
            ),
            "schedule": self._schedule_rows(),
            "log": list(state.log),
            "last_load_error": self.last_load_error,
            "last_save_error": self.last_save_error,
        }
        return payload

    def _schedule_rows(self) -> list[dict[str, Any]]:
        season = self.state.season
        if season is None:
            return []
        games: list[Game] = list(season.games)
        if season.tiebreaker_game is not None:
            games.append(season.tiebreaker_game)
        games.extend(season.playoffs)
        return [
            {
                "kind": g.kind,
                "name": g.name,
                "opponent": g.opponent,
                "district": g.is_district,
                "played": g.played,
                "result": g.result,
                "user_score": g.user_score,
                "opponent_score": g.opponent_score,
            }
            for g in games
        ]

    def _push_log(self, lines: list[str]) -> None:
        stamp = datetime.now().strftime("%Y-%m-%d %H:%M:%S")
        self.state.log.append("\n".join([f"=== {stamp} ===", *lines]))

    def _commit(self, lines: list[str]) -> dict[str, Any]:
        if lines:
            self._push_log(lines)
        self.save()
        return self._result(advanced=True, lines=lines)

    def _result(self, advanced: bool, lines: list[str]) -> dict[str, Any]:
        season = self.state.season
        return {
            "advanced": advanced,
            "phase": season.phase if season else None,
            "fired": self.state.fired,
            "lines": lines,
        }
