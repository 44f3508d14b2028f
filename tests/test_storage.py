from __future__ import annotations

import json
import logging
from pathlib import Path

import pytest

from shiftlog.core.clock import Clock
from shiftlog.core.errors import StorageError
from shiftlog.model import Counter
from shiftlog.storage import (
    STORAGE_KEY,
    JsonFileStore,
    MemoryStore,
    SqliteStore,
    StateRepository,
)
from shiftlog.summary import summarize_shift
from shiftlog.tracker import ShiftTracker


class _BrokenStore(MemoryStore):
    def get(self, key: str) -> str | None:
        raise StorageError("access denied")

    def set(self, key: str, value: str) -> None:
        raise StorageError("quota exceeded")


def _busy_tracker(repository: StateRepository, fake_clock) -> ShiftTracker:
    tracker = ShiftTracker(repository=repository, clock=Clock(fake_clock))
    tracker.start_shift()
    fake_clock.advance(minutes=5)
    tracker.start_patrol(0)
    fake_clock.advance(minutes=30)
    tracker.end_patrol(0)
    tracker.increment(Counter.ENGAGEMENTS)
    tracker.increment(Counter.STREET_DRINKERS)
    tracker.end_shift()
    fake_clock.advance(hours=10)
    tracker.start_shift()
    tracker.start_patrol(0)
    tracker.add_note("Handover briefing")
    tracker.toggle_notes_lock()
    return tracker


@pytest.mark.parametrize("backend", ["memory", "json", "sqlite"])
def test_save_then_load_round_trips(backend, tmp_path: Path, fake_clock):
    store = {
        "memory": lambda: MemoryStore(),
        "json": lambda: JsonFileStore(tmp_path / "state.json"),
        "sqlite": lambda: SqliteStore(tmp_path / "state.sqlite3"),
    }[backend]()
    repository = StateRepository(store)
    tracker = _busy_tracker(repository, fake_clock)
    loaded = StateRepository(store).load()
    assert loaded == tracker.state
    assert loaded.current_shift.notes[0].text == "Handover briefing"
    assert loaded.current_shift.notes_locked is False
    assert loaded.last_completed_shift.patrols[0].duration_ms == 30 * 60 * 1000


def test_load_missing_blob_gives_defaults(repository):
    state = repository.load()
    assert state.current_shift is None
    assert state.last_completed_shift is None


def test_load_missing_notes_locked_defaults_to_locked(store, repository):
    blob = {
        "currentShift": {
            "id": "2026-10-19T08:00:00.000Z",
            "date": "2026-10-19",
            "startTime": "2026-10-19T08:00:00.000Z",
            "endTime": None,
            "engagements": 1,
            "patrols": [{"index": i, "startTime": None, "endTime": None} for i in range(1, 6)],
        },
        "lastCompletedShift": None,
    }
    store.set(STORAGE_KEY, json.dumps(blob))
    state = repository.load()
    assert state.current_shift.notes_locked is True
    assert state.current_shift.notes == []
    assert state.current_shift.street_drinkers == 0


def test_load_reads_legacy_engagement_only_blob(store, repository):
    blob = {
        "currentShift": None,
        "lastCompletedShift": {
            "id": "2026-10-18T07:00:00.000Z",
            "date": "2026-10-18",
            "startTime": "2026-10-18T07:00:00.000Z",
            "endTime": "2026-10-18T15:00:00.000Z",
            "patrols": [
                {"index": 1, "startTime": "2026-10-18T08:00:00.000Z", "endTime": "2026-10-18T09:00:00.000Z"}
            ],
        },
    }
    store.set(STORAGE_KEY, json.dumps(blob))
    shift = repository.load().last_completed_shift
    assert shift.engagements == 0
    assert len(shift.patrols) == 5
    assert shift.patrols[0].duration_ms == 3600 * 1000


def test_load_corrupt_json_logs_and_defaults(store, repository, caplog):
    store.set(STORAGE_KEY, "{not json")
    with caplog.at_level(logging.WARNING, logger="shiftlog"):
        state = repository.load()
    assert not state.has_data
    assert "Failed to load state" in caplog.text


def test_storage_failures_are_logged_not_raised(fake_clock, caplog):
    repository = StateRepository(_BrokenStore())
    with caplog.at_level(logging.WARNING, logger="shiftlog"):
        assert not repository.load().has_data
        tracker = ShiftTracker(repository=repository, clock=Clock(fake_clock))
        assert tracker.start_shift()
    assert tracker.current_shift is not None
    assert "Failed to save state" in caplog.text


def test_custom_key_isolates_blobs(store, fake_clock):
    ShiftTracker(repository=StateRepository(store, key="other"), clock=Clock(fake_clock)).start_shift()
    assert store.get(STORAGE_KEY) is None
    assert StateRepository(store, key="other").load().current_shift is not None


def test_json_file_store_lifecycle(tmp_path: Path):
    path = tmp_path / "nested" / "state.json"
    store = JsonFileStore(path)
    assert store.get("k") is None
    store.set("k", "v")
    store.set("other", "w")
    assert json.loads(path.read_text(encoding="utf-8")) == {"k": "v", "other": "w"}
    store.delete("k")
    assert store.get("k") is None
    store.delete("other")
    assert not path.exists()


def test_json_file_store_corrupt_file_raises_storage_error(tmp_path: Path):
    path = tmp_path / "state.json"
    path.write_text("[1, 2", encoding="utf-8")
    with pytest.raises(StorageError):
        JsonFileStore(path).get("k")


def test_sqlite_store_overwrites_and_deletes(tmp_path: Path):
    store = SqliteStore(tmp_path / "state.sqlite3")
    store.set("k", "one")
    store.set("k", "two")
    assert store.get("k") == "two"
    store.delete("k")
    assert store.get("k") is None


def test_load_survives_instants_outside_utc_range(store, repository):
    blob = {
        "currentShift": {
            "startTime": "2026-10-19T08:00:00.000Z",
            "patrols": [{"index": 1, "startTime": "0001-01-01T00:00:00+01:00", "endTime": None}],
            "notes": [{"id": "n1", "timestamp": "0001-01-01T00:00:00+01:00", "text": "x"}],
            "engagements": 2,
        },
        "lastCompletedShift": None,
    }
    store.set(STORAGE_KEY, json.dumps(blob))
    shift = repository.load().current_shift
    assert shift is not None
    assert shift.engagements == 2
    assert shift.patrols[0].start_time is None
    assert shift.notes == []


def test_load_keeps_completed_shift_without_start(store, repository):
    blob = {
        "currentShift": None,
        "lastCompletedShift": {
            "startTime": None,
            "endTime": "2026-10-19T16:00:00.000Z",
            "asbIncidents": 2,
            "patrols": [
                {"index": 1, "startTime": "2026-10-19T09:00:00.000Z", "endTime": "2026-10-19T10:00:00.000Z"}
            ],
        },
    }
    store.set(STORAGE_KEY, json.dumps(blob))
    shift = repository.load().last_completed_shift
    assert shift is not None
    assert shift.start_time is None
    assert shift.id == "2026-10-19T16:00:00.000Z"

    summary = summarize_shift(shift)
    assert summary.shift_duration_ms == 0
    assert summary.total_patrol_ms == 3600 * 1000
    assert summary.asb_incidents == 2
    assert [line.index for line in summary.patrols] == [1]
