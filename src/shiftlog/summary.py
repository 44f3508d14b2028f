"""Read-only summary of the most recently completed shift."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from datetime import datetime

import pandas as pd

from shiftlog.core.clock import duration_ms, format_duration, to_iso
from shiftlog.model import Counter, Shift

__all__ = [
    "EMPTY_SUMMARY_MESSAGE",
    "NO_PATROLS_MESSAGE",
    "PATROL_COLUMNS",
    "PatrolLine",
    "ShiftSummary",
    "patrol_dataframe",
    "summarize_shift",
]

EMPTY_SUMMARY_MESSAGE = "No completed shift yet. Finish a shift to see your totals."
NO_PATROLS_MESSAGE = "No patrols were started during this shift."

PATROL_COLUMNS = ["index", "start_time", "end_time", "duration_ms", "duration"]


@dataclass(slots=True)
class PatrolLine:
    """Itemized patrol entry (only patrols that were started appear)."""

    index: int
    start_time: datetime | None
    end_time: datetime | None
    duration_ms: int

    @property
    def duration(self) -> str:
        return format_duration(self.duration_ms)


@dataclass(slots=True)
class ShiftSummary:
    """Totals derived from a completed shift.

    ``is_empty`` marks the "no completed shift" case; every figure is then zero and
    ``message`` carries the placeholder text.
    """

    is_empty: bool
    message: str = ""
    shift_id: str | None = None
    date: str | None = None
    start_time: datetime | None = None
    end_time: datetime | None = None
    shift_duration_ms: int = 0
    total_patrol_ms: int = 0
    patrols: tuple[PatrolLine, ...] = ()
    counters: dict[Counter, int] = field(default_factory=dict)
    headline: str = ""

    @classmethod
    def empty(cls) -> "ShiftSummary":
        return cls(is_empty=True, message=EMPTY_SUMMARY_MESSAGE)

    @property
    def engagements(self) -> int:
        return self.counters.get(Counter.ENGAGEMENTS, 0)

    @property
    def street_drinkers(self) -> int:
        return self.counters.get(Counter.STREET_DRINKERS, 0)

    @property
    def asb_incidents(self) -> int:
        return self.counters.get(Counter.ASB_INCIDENTS, 0)


def _headline(total_patrol_ms: int, totals: dict[Counter, int]) -> str:
    return (
        f"You spent {format_duration(total_patrol_ms)} actively on patrols and recorded "
        f"{totals[Counter.ENGAGEMENTS]} public engagement(s), "
        f"{totals[Counter.STREET_DRINKERS]} street drinker contact(s) and "
        f"{totals[Counter.ASB_INCIDENTS]} ASB incident(s) this shift."
    )


def summarize_shift(shift: Shift | None) -> ShiftSummary:
    """Compute shift length, patrol breakdown and counter totals for ``shift``."""
    if shift is None:
        return ShiftSummary.empty()

    lines = tuple(
        PatrolLine(
            index=patrol.index,
            start_time=patrol.start_time,
            end_time=patrol.end_time,
            duration_ms=patrol.duration_ms,
        )
        for patrol in shift.patrols
        if patrol.touched
    )
    total_patrol_ms = sum(patrol.duration_ms for patrol in shift.patrols)
    totals = {counter: shift.counter_value(counter) for counter in Counter}
    end = shift.end_time
    return ShiftSummary(
        is_empty=False,
        message="" if lines else NO_PATROLS_MESSAGE,
        shift_id=shift.id,
        date=shift.date,
        start_time=shift.start_time,
        end_time=end,
        shift_duration_ms=duration_ms(shift.start_time or end, end),
        total_patrol_ms=total_patrol_ms,
        patrols=lines,
        counters=totals,
        headline=_headline(total_patrol_ms, totals),
    )


def patrol_dataframe(summary: ShiftSummary) -> pd.DataFrame:
    """Return the itemized patrol breakdown as a DataFrame (``PATROL_COLUMNS``)."""
    if not summary.patrols:
        return pd.DataFrame(columns=PATROL_COLUMNS)
    rows = []
    for line in summary.patrols:
        row = asdict(line)
        row["start_time"] = to_iso(line.start_time)
        row["end_time"] = to_iso(line.end_time)
        row["duration"] = line.duration
        rows.append(row)
    return pd.DataFrame(rows).reindex(columns=PATROL_COLUMNS)
