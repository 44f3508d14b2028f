"""shiftlog: personal shift, patrol and event-counter logging."""

from shiftlog.model import Counter, Note, Patrol, PatrolStatus, Shift, ShiftStatus, TrackerState
from shiftlog.storage import STORAGE_KEY, StateRepository
from shiftlog.summary import ShiftSummary, summarize_shift
from shiftlog.tracker import ShiftTracker
from shiftlog.view import TrackerView, build_view

__version__ = "0.1.0"

__all__ = [
    "STORAGE_KEY",
    "Counter",
    "Note",
    "Patrol",
    "PatrolStatus",
    "Shift",
    "ShiftStatus",
    "ShiftSummary",
    "ShiftTracker",
    "StateRepository",
    "TrackerState",
    "TrackerView",
    "build_view",
    "summarize_shift",
]
