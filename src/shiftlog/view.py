"""Presentation-facing read model derived from a :class:`TrackerState`."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime

from shiftlog.core.clock import duration_ms
from shiftlog.model import (
    COUNTER_LABELS,
    PATROL_COUNT,
    Counter,
    Note,
    PatrolStatus,
    ShiftStatus,
    TrackerState,
    shift_status,
)
from shiftlog.summary import ShiftSummary, summarize_shift
from shiftlog.tracker.counters import can_decrement, can_increment, get_counter
from shiftlog.tracker.guards import (
    can_end_patrol,
    can_end_shift,
    can_reset,
    can_start_patrol,
    can_start_shift,
)

__all__ = ["CounterView", "PatrolView", "TrackerView", "build_view"]

PATROL_STATUS_LABELS: dict[PatrolStatus, str] = {
    PatrolStatus.PENDING: "Not started",
    PatrolStatus.ACTIVE: "In progress",
    PatrolStatus.COMPLETED: "Completed",
}
WAITING_LABEL = "Waiting"


@dataclass(slots=True)
class CounterView:
    counter: Counter
    label: str
    value: int
    can_increment: bool
    can_decrement: bool


@dataclass(slots=True)
class PatrolView:
    """One patrol card; ``position`` is 0-based, ``index`` is the 1..5 label."""

    position: int
    index: int
    status: PatrolStatus
    status_label: str
    start_time: datetime | None = None
    end_time: datetime | None = None
    duration_ms: int = 0
    can_start: bool = False
    can_end: bool = False


@dataclass(slots=True)
class TrackerView:
    status: ShiftStatus
    status_label: str
    shift_id: str | None
    start_time: datetime | None
    end_time: datetime | None
    shift_duration_ms: int
    can_start_shift: bool
    can_end_shift: bool
    can_reset: bool
    counters: list[CounterView]
    patrols: list[PatrolView]
    notes: list[Note] = field(default_factory=list)
    notes_locked: bool = True
    can_add_note: bool = False
    can_toggle_notes_lock: bool = False
    can_edit_notes: bool = False
    can_delete_notes: bool = False
    summary: ShiftSummary = field(default_factory=ShiftSummary.empty)


def _placeholder_patrols() -> list[PatrolView]:
    return [
        PatrolView(position=i, index=i + 1, status=PatrolStatus.PENDING, status_label=WAITING_LABEL)
        for i in range(PATROL_COUNT)
    ]


def build_view(state: TrackerState) -> TrackerView:
    """Derive every display value and "can perform X" flag from ``state``."""
    shift = state.current_shift
    status = shift_status(shift)
    counters = [
        CounterView(
            counter=counter,
            label=COUNTER_LABELS[counter],
            value=get_counter(shift, counter),
            can_increment=can_increment(shift),
            can_decrement=can_decrement(shift, counter),
        )
        for counter in Counter
    ]
    if shift is None:
        patrols = _placeholder_patrols()
    else:
        patrols = [
            PatrolView(
                position=position,
                index=patrol.index,
                status=patrol.status,
                status_label=PATROL_STATUS_LABELS[patrol.status],
                start_time=patrol.start_time,
                end_time=patrol.end_time,
                duration_ms=patrol.duration_ms,
                can_start=can_start_patrol(shift, position),
                can_end=can_end_patrol(shift, position),
            )
            for position, patrol in enumerate(shift.patrols)
        ]
    unlocked = shift is not None and not shift.notes_locked
    return TrackerView(
        status=status,
        status_label="Shift in progress" if status is ShiftStatus.ACTIVE else "No active shift",
        shift_id=None if shift is None else shift.id,
        start_time=None if shift is None else shift.start_time,
        end_time=None if shift is None else shift.end_time,
        shift_duration_ms=0 if shift is None else duration_ms(shift.start_time or shift.end_time, shift.end_time),
        can_start_shift=can_start_shift(state),
        can_end_shift=can_end_shift(state),
        can_reset=can_reset(state),
        counters=counters,
        patrols=patrols,
        notes=[] if shift is None else list(shift.notes),
        notes_locked=True if shift is None else shift.notes_locked,
        can_add_note=shift is not None,
        can_toggle_notes_lock=shift is not None,
        can_edit_notes=unlocked,
        can_delete_notes=unlocked,
        summary=summarize_shift(state.last_completed_shift),
    )
