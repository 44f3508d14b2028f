"""Bounded non-negative event counters attached to the active shift."""

from __future__ import annotations

from shiftlog.model import COUNTER_FIELDS, Counter, Shift, coerce_count, resolve_counter

__all__ = [
    "get_counter",
    "set_counter",
    "increment_counter",
    "decrement_counter",
    "can_increment",
    "can_decrement",
]


def get_counter(shift: Shift | None, name: Counter | str) -> int:
    """Return the counter value, ``0`` when there is no shift."""
    counter = resolve_counter(name)
    if shift is None:
        return 0
    return shift.counter_value(counter)


def can_increment(shift: Shift | None) -> bool:
    return shift is not None and not shift.is_ended


def can_decrement(shift: Shift | None, name: Counter | str) -> bool:
    return can_increment(shift) and get_counter(shift, name) > 0


def set_counter(shift: Shift | None, name: Counter | str, value: object) -> bool:
    """Store ``max(0, value)``; inert without a shift or once the shift has ended."""
    counter = resolve_counter(name)
    if shift is None or shift.is_ended:
        return False
    setattr(shift, COUNTER_FIELDS[counter], coerce_count(value))
    return True


def increment_counter(shift: Shift | None, name: Counter | str) -> bool:
    return set_counter(shift, name, get_counter(shift, name) + 1)


def decrement_counter(shift: Shift | None, name: Counter | str) -> bool:
    current = get_counter(shift, name)
    if current <= 0:
        return False
    return set_counter(shift, name, current - 1)
