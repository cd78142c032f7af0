import json

import pytest

from coach_sim.career import CareerSimulator
from coach_sim.config import SAVE_VERSION
from coach_sim.models import Advantage, CareerState
from coach_sim.storage import CareerStore, SaveFormatError, deserialize_career, serialize_career


def _played_state(seed: int = 31) -> CareerState:
    sim = CareerSimulator(state=CareerState(coach_name="Tester", advantage=Advantage(offense=True)), seed=seed)
    for _ in range(6):
        sim.advance()
    return sim.state


def test_career_survives_serialization() -> None:
    state = _played_state()
    state.pending_gain = "defense"
    state.bonus_preseason_roll = True
    restored = deserialize_career(json.loads(json.dumps(serialize_career(state))))
    assert restored == state


@pytest.mark.regression
def test_save_includes_version_and_backup(tmp_path) -> None:
    store = CareerStore(tmp_path / "career_state.json")
    state = _played_state()

    # First write creates the primary file.
    assert store.save(state)
    payload = json.loads(store.path.read_text(encoding="utf-8"))
    assert payload["save_version"] == SAVE_VERSION
    assert payload["career"]["coach_name"] == "Tester"

    # Second write refreshes the backup.
    assert store.save(state)
    assert (tmp_path / "career_state.json.bak").exists()


@pytest.mark.regression
def test_missing_file_is_not_an_error(tmp_path) -> None:
    store = CareerStore(tmp_path / "career_state.json")
    assert store.load() is None
    assert store.last_load_error == ""


@pytest.mark.regression
def test_rejects_future_save_version_with_clear_error(tmp_path) -> None:
    path = tmp_path / "career_state.json"
    path.write_text(json.dumps({"save_version": 999, "career": {}}), encoding="utf-8")
    store = CareerStore(path)
    assert store.load() is None
    assert "Unsupported career save version 999" in store.last_load_error


@pytest.mark.regression
def test_corrupt_json_falls_back_to_fresh_career(tmp_path) -> None:
    path = tmp_path / "career_state.json"
    path.write_text("{not json", encoding="utf-8")
    store = CareerStore(path)
    sim = CareerSimulator(store=store, seed=1)
    assert sim.season is None
    assert sim.last_load_error.startswith("Failed to load career save")


@pytest.mark.regression
def test_non_object_payload_is_invalid_format(tmp_path) -> None:
    path = tmp_path / "career_state.json"
    path.write_text(json.dumps([1, 2, 3]), encoding="utf-8")
    store = CareerStore(path)
    assert store.load() is None
    assert "invalid format" in store.last_load_error


@pytest.mark.regression
def test_unknown_phase_is_reported_as_corruption(tmp_path) -> None:
    store = CareerStore(tmp_path / "career_state.json")
    store.save(_played_state())
    payload = json.loads(store.path.read_text(encoding="utf-8"))
    payload["career"]["season"]["phase"] = "overtime"
    store.path.write_text(json.dumps(payload), encoding="utf-8")

    assert store.load() is None
    assert "Career save is corrupted" in store.last_load_error
    assert "overtime" in store.last_load_error


@pytest.mark.regression
def test_missing_version_is_read_as_first_version(tmp_path) -> None:
    state = _played_state()
    path = tmp_path / "career_state.json"
    path.write_text(json.dumps({"career": serialize_career(state)}), encoding="utf-8")
    loaded = CareerStore(path).load()
    assert loaded is not None
    assert loaded.season.record == state.season.record


@pytest.mark.regression
def test_unknown_default_side_falls_back(tmp_path) -> None:
    raw = serialize_career(CareerState())
    raw["default_gain_side"] = "special_teams"
    assert deserialize_career(raw).default_gain_side == "offense"


def test_played_game_without_result_is_rejected() -> None:
    raw = serialize_career(_played_state())
    raw["season"]["games"][0]["result"] = None
    with pytest.raises(SaveFormatError):
        deserialize_career(raw)


def test_bad_pending_gain_is_rejected() -> None:
    raw = serialize_career(CareerState())
    raw["pending_gain"] = "kicking"
    with pytest.raises(SaveFormatError):
        deserialize_career(raw)


def test_save_into_directory_reports_error(tmp_path) -> None:
    store = CareerStore(tmp_path)
    assert store.save(CareerState()) is False
    assert store.last_save_error.startswith("Save failed")


def test_clear_removes_save(tmp_path) -> None:
    store = CareerStore(tmp_path / "career_state.json")
    store.save(CareerState())
    store.clear()
    assert not store.path.exists()
    store.clear()


@pytest.mark.regression
def test_every_save_backs_up_previous_contents(tmp_path) -> None:
    store = CareerStore(tmp_path / "career_state.json")
    store.save(CareerState(coach_name="First"))
    store.save(CareerState(coach_name="Second"))
    store.save(CareerState(coach_name="Third"))
    backup = json.loads((tmp_path / "career_state.json.bak").read_text(encoding="utf-8"))
    assert backup["career"]["coach_name"] == "Second"
    assert json.loads(store.path.read_text(encoding="utf-8"))["career"]["coach_name"] == "Third"
