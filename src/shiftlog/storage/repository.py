"""Load and save the whole tracker state under one fixed key."""

from __future__ import annotations

import json
import logging

from shiftlog.core.errors import StorageError
from shiftlog.model import TrackerState, normalize_state
from shiftlog.storage.stores import KeyValueStore

__all__ = ["STORAGE_KEY", "StateRepository"]

logger = logging.getLogger(__name__)

STORAGE_KEY = "shift_tracker_state_v1"


class StateRepository:
    """Persistence adapter between a :class:`TrackerState` and a key-value store.

    Failures never propagate: ``load`` falls back to an empty state and ``save`` /
    ``clear`` report ``False`` after logging a warning. Nothing is retried.
    """

    def __init__(self, store: KeyValueStore, key: str = STORAGE_KEY) -> None:
        self.store = store
        self.key = key

    def load(self) -> TrackerState:
        try:
            raw = self.store.get(self.key)
        except StorageError as exc:
            logger.warning("Failed to load state: %s", exc)
            return TrackerState()
        if raw is None:
            return TrackerState()
        try:
            payload = json.loads(raw)
        except json.JSONDecodeError as exc:
            logger.warning("Failed to load state: %s", exc)
            return TrackerState()
        return normalize_state(payload)

    def save(self, state: TrackerState) -> bool:
        blob = json.dumps(state.to_payload(), ensure_ascii=False, separators=(",", ":"))
        try:
            self.store.set(self.key, blob)
        except StorageError as exc:
            logger.warning("Failed to save state: %s", exc)
            return False
        return True

    def clear(self) -> bool:
        try:
            self.store.delete(self.key)
        except StorageError as exc:
            logger.warning("Failed to clear stored state: %s", exc)
            return False
        return True
