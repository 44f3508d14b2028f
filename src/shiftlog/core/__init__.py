"""Core utilities shared across shiftlog modules."""

from .clock import Clock, duration_ms, format_duration, now, to_iso
from .errors import ShiftLogValueError, StorageError

__all__ = [
    "Clock",
    "ShiftLogValueError",
    "StorageError",
    "duration_ms",
    "format_duration",
    "now",
    "to_iso",
]
