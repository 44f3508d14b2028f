"""Instant capture and millisecond duration helpers."""

from __future__ import annotations

from collections.abc import Callable
from datetime import datetime, timedelta, timezone

__all__ = ["Clock", "now", "duration_ms", "format_duration", "to_iso"]

_ONE_MS = timedelta(milliseconds=1)


def _wall_clock() -> datetime:
    return datetime.now(timezone.utc)


class Clock:
    """Callable returning aware UTC instants that never go backwards.

    Parameters
    ----------
    source:
        Zero-argument callable producing the raw wall-clock reading. Defaults to
        ``datetime.now(timezone.utc)``; tests pass a fake source.
    """

    def __init__(self, source: Callable[[], datetime] | None = None) -> None:
        self._source = source or _wall_clock
        self._last: datetime | None = None

    def __call__(self) -> datetime:
        instant = self._source()
        if instant.tzinfo is None:
            instant = instant.replace(tzinfo=timezone.utc)
        # persisted instants carry millisecond precision
        instant = instant.replace(microsecond=instant.microsecond // 1000 * 1000)
        if self._last is not None and instant < self._last:
            instant = self._last
        self._last = instant
        return instant


_DEFAULT_CLOCK = Clock()


def now() -> datetime:
    """Return the current instant from the shared process clock."""
    return _DEFAULT_CLOCK()


def duration_ms(start: datetime | None, end: datetime | None) -> int:
    """Return ``end - start`` in whole milliseconds, or ``0`` when either end is missing.

    Negative spans (a wall clock adjusted backwards between captures, or corrupt
    persisted data) are clamped to ``0``.
    """
    if start is None or end is None:
        return 0
    return max(0, (end - start) // _ONE_MS)


def format_duration(ms: int | float | None) -> str:
    """Render a millisecond span as ``1h 05m``, ``4m 09s`` or ``12s``."""
    if not ms or ms <= 0:
        return "0m"
    total_seconds = int(ms // 1000)
    hours, remainder = divmod(total_seconds, 3600)
    minutes, seconds = divmod(remainder, 60)
    if hours > 0:
        return f"{hours}h {minutes:02d}m"
    if minutes > 0:
        return f"{minutes}m {seconds:02d}s"
    return f"{seconds}s"


def to_iso(instant: datetime | None) -> str | None:
    """Serialise an instant as ISO-8601 UTC with millisecond precision (``...T08:00:00.000Z``)."""
    if instant is None:
        return None
    if instant.tzinfo is None:
        instant = instant.replace(tzinfo=timezone.utc)
    text = instant.astimezone(timezone.utc).isoformat(timespec="milliseconds")
    return text.replace("+00:00", "Z")
