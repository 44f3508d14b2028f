"""Named guard functions for shift and patrol transitions."""

from __future__ import annotations

from shiftlog.model import Patrol, PatrolStatus, Shift, ShiftStatus, TrackerState, shift_status

__all__ = [
    "active_patrol",
    "can_end_patrol",
    "can_end_shift",
    "can_reset",
    "can_start_patrol",
    "can_start_shift",
]


def can_start_shift(state: TrackerState) -> bool:
    return shift_status(state.current_shift) is not ShiftStatus.ACTIVE


def can_end_shift(state: TrackerState) -> bool:
    return shift_status(state.current_shift) is ShiftStatus.ACTIVE


def can_reset(state: TrackerState) -> bool:
    return state.has_data


def active_patrol(shift: Shift | None) -> Patrol | None:
    return None if shift is None else shift.active_patrol()


def can_start_patrol(shift: Shift | None, position: int) -> bool:
    """Return whether the patrol at 0-based ``position`` may start now.

    Requires an active shift, a pending target, no other active patrol and, past
    the first position, a completed predecessor.
    """
    if shift_status(shift) is not ShiftStatus.ACTIVE:
        return False
    patrol = shift.patrol_at(position)
    if patrol is None or patrol.status is not PatrolStatus.PENDING:
        return False
    if shift.active_patrol() is not None:
        return False
    if position > 0 and shift.patrols[position - 1].status is not PatrolStatus.COMPLETED:
        return False
    return True


def can_end_patrol(shift: Shift | None, position: int) -> bool:
    if shift_status(shift) is not ShiftStatus.ACTIVE:
        return False
    patrol = shift.patrol_at(position)
    return patrol is not None and patrol.status is PatrolStatus.ACTIVE
