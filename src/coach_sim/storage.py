from __future__ import annotations

import json
import logging
import shutil
from pathlib import Path
from typing import Any

from .config import DEFAULT_GAIN_SIDE, SAVE_VERSION
from .models import (
    GAME_KINDS,
    PHASES,
    RESULT_LOSS,
    RESULT_WIN,
    SIDES,
    Advantage,
    CareerState,
    Game,
    Season,
)

_log = logging.getLogger("coach_sim.storage")


class SaveFormatError(ValueError):
    pass


def serialize_game(game: Game) -> dict[str, Any]:
    return {
        "kind": game.kind,
        "number": game.number,
        "name": game.name,
        "opponent": game.opponent,
        "is_district": game.is_district,
        "played": game.played,
        "result": game.result,
        "user_score": game.user_score,
        "opponent_score": game.opponent_score,
    }


def deserialize_game(raw: Any) -> Game:
    if not isinstance(raw, dict):
        raise SaveFormatError("Game entry is not an object.")
    kind = str(raw.get("kind", ""))
    if kind not in GAME_KINDS:
        raise SaveFormatError(f"Unknown game kind '{kind}'.")
    result = raw.get("result")
    if result not in (None, RESULT_WIN, RESULT_LOSS):
        raise SaveFormatError(f"Unknown game result '{result}'.")
    played = bool(raw.get("played", False))
    if played and result is None:
        raise SaveFormatError("Played game has no result.")
    return Game(
        kind=kind,
        number=int(raw.get("number", 1)),
        name=str(raw.get("name", "Game")),
        opponent=str(raw.get("opponent", "Opponent")),
        is_district=bool(raw.get("is_district", False)),
        played=played,
        result=result,
        user_score=_optional_int(raw.get("user_score")),
        opponent_score=_optional_int(raw.get("opponent_score")),
    )


def serialize_season(season: Season) -> dict[str, Any]:
    return {
        "number": season.number,
        "phase": season.phase,
        "games": [serialize_game(g) for g in season.games],
        "tiebreaker_game": serialize_game(season.tiebreaker_game) if season.tiebreaker_game else None,
        "playoffs": [serialize_game(g) for g in season.playoffs],
        "wins": season.wins,
        "losses": season.losses,
        "district_wins": season.district_wins,
        "district_losses": season.district_losses,
        "playoff_wins": season.playoff_wins,
        "playoff_losses": season.playoff_losses,
        "made_playoffs": season.made_playoffs,
        "champion": season.champion,
        "finalized": season.finalized,
    }


def deserialize_season(raw: Any) -> Season:
    if not isinstance(raw, dict):
        raise SaveFormatError("Season entry is not an object.")
    phase = str(raw.get("phase", ""))
    if phase not in PHASES:
        raise SaveFormatError(f"Unknown season phase '{phase}'.")
    raw_games = raw.get("games", [])
    raw_playoffs = raw.get("playoffs", [])
    if not isinstance(raw_games, list) or not isinstance(raw_playoffs, list):
        raise SaveFormatError("Season schedule is invalid.")
    raw_tiebreaker = raw.get("tiebreaker_game")
    return Season(
        number=int(raw.get("number", 1)),
        phase=phase,
        games=[deserialize_game(g) for g in raw_games],
        tiebreaker_game=deserialize_game(raw_tiebreaker) if raw_tiebreaker is not None else None,
        playoffs=[deserialize_game(g) for g in raw_playoffs],
        wins=int(raw.get("wins", 0)),
        losses=int(raw.get("losses", 0)),
        district_wins=int(raw.get("district_wins", 0)),
        district_losses=int(raw.get("district_losses", 0)),
        playoff_wins=int(raw.get("playoff_wins", 0)),
        playoff_losses=int(raw.get("playoff_losses", 0)),
        made_playoffs=bool(raw.get("made_playoffs", False)),
        champion=bool(raw.get("champion", False)),
        finalized=bool(raw.get("finalized", False)),
    )


def serialize_career(state: CareerState) -> dict[str, Any]:
    return {
        "coach_name": state.coach_name,
        "created_at": state.created_at,
        "advantage": {"offense": state.advantage.offense, "defense": state.advantage.defense},
        "pending_gain": state.pending_gain,
        "bonus_preseason_roll": state.bonus_preseason_roll,
        "default_gain_side": state.default_gain_side,
        "seasons_without_playoffs": state.seasons_without_playoffs,
        "fired": state.fired,
        "season_number": state.season_number,
        "season": serialize_season(state.season) if state.season else None,
        "log": list(state.log),
    }


def deserialize_career(raw: Any) -> CareerState:
    if not isinstance(raw, dict):
        raise SaveFormatError("Career payload is not an object.")
    raw_adv = raw.get("advantage", {})
    if not isinstance(raw_adv, dict):
        raise SaveFormatError("Advantage payload is invalid.")
    pending = raw.get("pending_gain")
    if pending is not None and pending not in SIDES:
        raise SaveFormatError(f"Unknown pending gain side '{pending}'.")
    default_side = raw.get("default_gain_side", DEFAULT_GAIN_SIDE)
    if default_side not in SIDES:
        default_side = DEFAULT_GAIN_SIDE
    raw_log = raw.get("log", [])
    raw_season = raw.get("season")
    state = CareerState(
        coach_name=str(raw.get("coach_name", "")),
        advantage=Advantage(offense=bool(raw_adv.get("offense", False)), defense=bool(raw_adv.get("defense", False))),
        pending_gain=pending,
        bonus_preseason_roll=bool(raw.get("bonus_preseason_roll", False)),
        default_gain_side=default_side,
        seasons_without_playoffs=max(0, int(raw.get("seasons_without_playoffs", 0))),
        fired=bool(raw.get("fired", False)),
        season_number=max(0, int(raw.get("season_number", 0))),
        season=deserialize_season(raw_season) if raw_season is not None else None,
        log=[str(entry) for entry in raw_log] if isinstance(raw_log, list) else [],
    )
    created_at = raw.get("created_at")
    if isinstance(created_at, str) and created_at:
        state.created_at = created_at
    return state


def _optional_int(value: Any) -> int | None:
    if value is None:
        return None
    return int(value)


class CareerStore:
    """Reads and writes one career snapshot as JSON at a fixed path."""

    def __init__(self, path: str | Path | None = None) -> None:
        self.path = Path(path or "career_state.json")
        self.last_load_error: str = ""
        self.last_save_error: str = ""

    def load(self) -> CareerState | None:
        self.last_load_error = ""
        if not self.path.exists():
            return None
        try:
            raw = json.loads(self.path.read_text(encoding="utf-8"))
            if not isinstance(raw, dict):
                self.last_load_error = "Career save file has invalid format; starting a new career."
                return None
            version = int(raw.get("save_version", 1) or 1)
            if version > SAVE_VERSION:
                self.last_load_error = (
                    f"Unsupported career save version {version}; app supports up to {SAVE_VERSION}."
                )
                return None
            return deserialize_career(raw.get("career"))
        except (json.JSONDecodeError, OSError) as exc:
            self.last_load_error = f"Failed to load career save ({exc}); starting a new career."
        except (SaveFormatError, TypeError, ValueError) as exc:
            self.last_load_error = f"Career save is corrupted ({exc}); starting a new career."
        finally:
            if self.last_load_error:
                _log.warning(self.last_load_error)
        return None

    def save(self, state: CareerState) -> bool:
        payload = {
            "save_version": SAVE_VERSION,
            "career": serialize_career(state),
        }
        try:
            self._write_json_with_backup(self.path, payload)
        except OSError as exc:
            self.last_save_error = f"Save failed ({exc})."
            _log.warning(self.last_save_error)
            return False
        self.last_save_error = ""
        return True

    def clear(self) -> None:
        try:
            self.path.unlink(missing_ok=True)
        except OSError as exc:
            _log.warning(f"Could not remove career save {self.path}: {exc}")

    def _write_json_with_backup(self, path: Path, payload: Any) -> None:
        if path.exists():
            backup = path.with_suffix(path.suffix + ".bak")
            try:
                shutil.copy2(path, backup)
            except OSError:
                pass
        path.write_text(json.dumps(payload, indent=2), encoding="utf-8")
