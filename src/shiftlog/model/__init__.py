"""Shift, patrol and note data model."""

from .models import (
    COUNTER_ALIASES,
    COUNTER_FIELDS,
    COUNTER_LABELS,
    PATROL_COUNT,
    Counter,
    Note,
    Patrol,
    PatrolStatus,
    Shift,
    ShiftStatus,
    TrackerState,
    coerce_count,
    normalize_state,
    resolve_counter,
    shift_status,
)

__all__ = [
    "COUNTER_ALIASES",
    "COUNTER_FIELDS",
    "COUNTER_LABELS",
    "PATROL_COUNT",
    "Counter",
    "Note",
    "Patrol",
    "PatrolStatus",
    "Shift",
    "ShiftStatus",
    "TrackerState",
    "coerce_count",
    "normalize_state",
    "resolve_counter",
    "shift_status",
]
