"""Shift/patrol state machine.

Shift states run ``NONE -> ACTIVE -> ENDED``; an ended shift is archived into
``last_completed_shift`` straight away and the current slot returns to ``NONE``.
Patrol states run ``PENDING -> ACTIVE -> COMPLETED``, strictly in order 1..5 with
at most one active patrol per shift.

Every operation re-validates its guard and quietly returns ``False`` when the
transition is not allowed; successful operations persist the whole state and
notify the ``on_change`` listener so front ends re-render everything.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime
from typing import TYPE_CHECKING

from shiftlog.core.clock import Clock
from shiftlog.model import Counter, Note, Shift, TrackerState, shift_status
from shiftlog.storage.repository import StateRepository
from shiftlog.summary import ShiftSummary, summarize_shift
from shiftlog.tracker import counters, notes
from shiftlog.tracker.guards import (
    can_end_patrol,
    can_end_shift,
    can_reset,
    can_start_patrol,
    can_start_shift,
)

__all__ = ["ShiftTracker"]

if TYPE_CHECKING:
    from shiftlog.view import TrackerView

logger = logging.getLogger(__name__)


class ShiftTracker:
    """Owns a :class:`TrackerState` and applies lifecycle, counter and note operations to it.

    Parameters
    ----------
    state:
        Initial state. Defaults to an empty state; use :meth:`load` to read the
        repository instead.
    repository:
        Persistence collaborator. ``None`` keeps everything in memory.
    clock:
        Callable returning the current instant. Defaults to a fresh :class:`Clock`.
    on_change:
        Listener invoked with the state after every successful mutation.
    """

    def __init__(
        self,
        state: TrackerState | None = None,
        *,
        repository: StateRepository | None = None,
        clock: Callable[[], datetime] | None = None,
        on_change: Callable[[TrackerState], None] | None = None,
    ) -> None:
        self.state = state if state is not None else TrackerState()
        self.repository = repository
        self.clock = clock or Clock()
        self.on_change = on_change

    @classmethod
    def open(cls, repository: StateRepository, **kwargs) -> "ShiftTracker":
        """Build a tracker whose state is loaded from ``repository``."""
        tracker = cls(repository=repository, **kwargs)
        tracker.load()
        return tracker

    @property
    def current_shift(self) -> Shift | None:
        return self.state.current_shift

    @property
    def last_completed_shift(self) -> Shift | None:
        return self.state.last_completed_shift

    def load(self) -> TrackerState:
        if self.repository is not None:
            self.state = self.repository.load()
        return self.state

    def _commit(self) -> bool:
        if self.repository is not None:
            self.repository.save(self.state)
        if self.on_change is not None:
            self.on_change(self.state)
        return True

    def _refuse(self, operation: str, *args: object) -> bool:
        logger.debug("%s%r refused in state %s", operation, args, shift_status(self.current_shift).value)
        return False

    # ------------------------------------------------------------------ #
    # Shift / patrol lifecycle
    # ------------------------------------------------------------------ #

    def start_shift(self) -> bool:
        if not can_start_shift(self.state):
            return self._refuse("start_shift")
        self.state.current_shift = Shift.begin(self.clock())
        return self._commit()

    def end_shift(self) -> bool:
        if not can_end_shift(self.state):
            return self._refuse("end_shift")
        shift = self.state.current_shift
        at = self.clock()
        running = shift.active_patrol()
        if running is not None:
            running.end_time = at
        shift.end_time = at
        self.state.last_completed_shift = shift
        self.state.current_shift = None
        return self._commit()

    def start_patrol(self, position: int) -> bool:
        """Start the patrol at 0-based ``position`` (0 is Patrol 1)."""
        shift = self.current_shift
        if not can_start_patrol(shift, position):
            return self._refuse("start_patrol", position)
        shift.patrols[position].start_time = self.clock()
        return self._commit()

    def end_patrol(self, position: int) -> bool:
        """End the active patrol at 0-based ``position``."""
        shift = self.current_shift
        if not can_end_patrol(shift, position):
            return self._refuse("end_patrol", position)
        shift.patrols[position].end_time = self.clock()
        return self._commit()

    def reset_all_data(self, confirm: Callable[[], bool] | None = None) -> bool:
        """Clear both slots and the persisted blob after an optional confirmation."""
        if not can_reset(self.state):
            return self._refuse("reset_all_data")
        if confirm is not None and not confirm():
            return False
        self.state.current_shift = None
        self.state.last_completed_shift = None
        if self.repository is not None and not self.repository.clear():
            logger.warning("Falling back to saving an empty state")
            self.repository.save(self.state)
        if self.on_change is not None:
            self.on_change(self.state)
        return True

    # ------------------------------------------------------------------ #
    # Counters
    # ------------------------------------------------------------------ #

    def get_counter(self, name: Counter | str) -> int:
        return counters.get_counter(self.current_shift, name)

    def set_counter(self, name: Counter | str, value: object) -> bool:
        if not counters.set_counter(self.current_shift, name, value):
            return self._refuse("set_counter", name, value)
        return self._commit()

    def increment(self, name: Counter | str) -> bool:
        if not counters.increment_counter(self.current_shift, name):
            return self._refuse("increment", name)
        return self._commit()

    def decrement(self, name: Counter | str) -> bool:
        if not counters.decrement_counter(self.current_shift, name):
            return self._refuse("decrement", name)
        return self._commit()

    # ------------------------------------------------------------------ #
    # Notes
    # ------------------------------------------------------------------ #

    def add_note(self, text: str | None) -> Note | None:
        note = notes.add_note(self.current_shift, text, self.clock())
        if note is None:
            self._refuse("add_note")
            return None
        self._commit()
        return note

    def toggle_notes_lock(self) -> bool:
        if not notes.toggle_lock(self.current_shift):
            return self._refuse("toggle_notes_lock")
        return self._commit()

    def update_note(self, note_id: str, text: str) -> bool:
        if not notes.update_note(self.current_shift, note_id, text):
            return self._refuse("update_note", note_id)
        return self._commit()

    def delete_note(self, note_id: str) -> bool:
        if not notes.delete_note(self.current_shift, note_id):
            return self._refuse("delete_note", note_id)
        return self._commit()

    # ------------------------------------------------------------------ #
    # Read side
    # ------------------------------------------------------------------ #

    def summary(self) -> ShiftSummary:
        return summarize_shift(self.last_completed_shift)

    def view(self) -> TrackerView:
        from shiftlog.view import build_view

        return build_view(self.state)
