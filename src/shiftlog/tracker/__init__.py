"""Shift tracker: lifecycle engine plus the counter and notes subsystems."""

from .guards import (
    active_patrol,
    can_end_patrol,
    can_end_shift,
    can_reset,
    can_start_patrol,
    can_start_shift,
)
from .lifecycle import ShiftTracker

__all__ = [
    "ShiftTracker",
    "active_patrol",
    "can_end_patrol",
    "can_end_shift",
    "can_reset",
    "can_start_patrol",
    "can_start_shift",
]
