from __future__ import annotations

import logging
from pathlib import Path
from threading import Lock
from typing import Any

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import PlainTextResponse
from pydantic import BaseModel

from .app import format_career_summary, format_schedule
from .career import CareerSimulator
from .models import CareerError, validate_side
from .storage import CareerStore

_log = logging.getLogger("coach_sim.api")


class CareerStart(BaseModel):
    coach_name: str = ""


class SideSelection(BaseModel):
    side: str


class SettingsSelection(BaseModel):
    coach_name: str | None = None
    default_side: str | None = None


class SimService:
    def __init__(self, data_root: Path | None = None, seed: int | None = None) -> None:
        self.data_root = data_root or Path(__file__).resolve().parents[2]
        self.store = CareerStore(self.data_root / "career_state.json")
        self.simulator = CareerSimulator(store=self.store, seed=seed)
        if self.simulator.season is None and not self.simulator.state.fired:
            # Nothing usable on disk: open a fresh career, keeping the load error visible.
            load_error = self.simulator.last_load_error
            _log.info(f"No saved career at {self.store.path}; starting a new one")
            self.simulator.new_career()
            self.simulator.last_load_error = load_error
        self._lock = Lock()

    def career(self) -> dict[str, Any]:
        return self.simulator.view()

    def new_career(self, coach_name: str) -> dict[str, Any]:
        self.store.clear()
        self.simulator.last_load_error = ""
        self.simulator.new_career(coach_name=coach_name)
        return self.simulator.view()

    def advance(self) -> dict[str, Any]:
        try:
            result = self.simulator.advance()
        except CareerError as exc:
            raise HTTPException(status_code=409, detail=str(exc)) from exc
        return {**result, "career": self.simulator.view()}

    def choose_side(self, side: str) -> dict[str, Any]:
        try:
            result = self.simulator.choose_side(side)
        except ValueError as exc:
            raise HTTPException(status_code=400, detail=str(exc)) from exc
        except CareerError as exc:
            raise HTTPException(status_code=409, detail=str(exc)) from exc
        return {**result, "career": self.simulator.view()}

    def restart_season(self) -> dict[str, Any]:
        try:
            result = self.simulator.restart_season()
        except CareerError as exc:
            raise HTTPException(status_code=409, detail=str(exc)) from exc
        return {**result, "career": self.simulator.view()}

    def update_settings(self, coach_name: str | None, default_side: str | None) -> dict[str, Any]:
        if default_side is not None:
            try:
                side = validate_side(default_side)
            except ValueError as exc:
                raise HTTPException(status_code=400, detail=str(exc)) from exc
            self.simulator.set_default_side(side)
        if coach_name is not None:
            self.simulator.set_coach_name(coach_name)
        return {
            "ok": True,
            "coach": self.simulator.coach_label,
            "default_side": self.simulator.state.default_gain_side,
        }

    def summary(self) -> str:
        text = format_career_summary(self.simulator)
        season = self.simulator.season
        if season is None:
            return text
        return f"{text}\n\n{format_schedule(season)}"

    def export_log(self) -> str:
        return self.simulator.export_log()

    def clear_log(self) -> dict[str, Any]:
        self.simulator.clear_log()
        return {"ok": True, "entries": 0}


service = SimService()
app = FastAPI(title="High School Football Coach API", version="0.1.0")
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/api/health")
def health() -> dict[str, str]:
    return {"status": "ok"}


@app.get("/api/career")
def career() -> dict[str, Any]:
    with service._lock:
        return service.career()


@app.post("/api/career/new")
def new_career(payload: CareerStart) -> dict[str, Any]:
    with service._lock:
        return service.new_career(coach_name=payload.coach_name)


@app.post("/api/advance")
def advance() -> dict[str, Any]:
    with service._lock:
        return service.advance()


@app.post("/api/choose-side")
def choose_side(payload: SideSelection) -> dict[str, Any]:
    with service._lock:
        return service.choose_side(side=payload.side)


@app.post("/api/restart-season")
def restart_season() -> dict[str, Any]:
    with service._lock:
        return service.restart_season()


@app.post("/api/settings")
def update_settings(payload: SettingsSelection) -> dict[str, Any]:
    with service._lock:
        return service.update_settings(coach_name=payload.coach_name, default_side=payload.default_side)


@app.get("/api/summary", response_class=PlainTextResponse)
def summary() -> str:
    with service._lock:
        return service.summary()


@app.get("/api/log", response_class=PlainTextResponse)
def export_log() -> str:
    with service._lock:
        return service.export_log()


@app.post("/api/log/clear")
def clear_log() -> dict[str, Any]:
    with service._lock:
        return service.clear_log()
