from __future__ import annotations

from datetime import datetime, timedelta, timezone

from shiftlog.core.clock import Clock
from shiftlog.model import Counter, Shift
from shiftlog.summary import (
    EMPTY_SUMMARY_MESSAGE,
    NO_PATROLS_MESSAGE,
    PATROL_COLUMNS,
    patrol_dataframe,
    summarize_shift,
)
from shiftlog.tracker import ShiftTracker

T0 = datetime(2026, 10, 19, 8, 0, tzinfo=timezone.utc)


def _completed_two_patrols(fake_clock) -> Shift:
    tracker = ShiftTracker(clock=Clock(fake_clock))
    tracker.start_shift()
    fake_clock.advance(minutes=15)
    tracker.start_patrol(0)
    fake_clock.advance(minutes=40)
    tracker.end_patrol(0)
    fake_clock.advance(minutes=20)
    tracker.start_patrol(1)
    fake_clock.advance(minutes=25)
    tracker.end_patrol(1)
    for _ in range(3):
        tracker.increment(Counter.ENGAGEMENTS)
    tracker.increment(Counter.ASB_INCIDENTS)
    fake_clock.advance(hours=1)
    tracker.end_shift()
    return tracker.last_completed_shift


def test_summary_of_nothing_is_empty_marker():
    summary = summarize_shift(None)
    assert summary.is_empty
    assert summary.message == EMPTY_SUMMARY_MESSAGE
    assert summary.patrols == ()
    assert summary.total_patrol_ms == 0


def test_summary_lists_only_touched_patrols(fake_clock):
    summary = summarize_shift(_completed_two_patrols(fake_clock))
    assert not summary.is_empty
    assert [line.index for line in summary.patrols] == [1, 2]
    assert summary.patrols[0].duration_ms == 40 * 60 * 1000
    assert summary.total_patrol_ms == 65 * 60 * 1000
    assert summary.shift_duration_ms == (15 + 40 + 20 + 25 + 60) * 60 * 1000
    assert summary.engagements == 3
    assert summary.street_drinkers == 0
    assert summary.asb_incidents == 1
    assert summary.message == ""


def test_summary_headline_combines_totals(fake_clock):
    summary = summarize_shift(_completed_two_patrols(fake_clock))
    assert summary.headline == (
        "You spent 1h 05m actively on patrols and recorded 3 public engagement(s), "
        "0 street drinker contact(s) and 1 ASB incident(s) this shift."
    )


def test_summary_without_patrols():
    shift = Shift.begin(T0)
    shift.end_time = T0 + timedelta(hours=8)
    summary = summarize_shift(shift)
    assert summary.patrols == ()
    assert summary.total_patrol_ms == 0
    assert summary.shift_duration_ms == 8 * 3600 * 1000
    assert summary.message == NO_PATROLS_MESSAGE


def test_summary_clamps_backwards_shift_length():
    shift = Shift.begin(T0)
    shift.end_time = T0 - timedelta(minutes=3)
    assert summarize_shift(shift).shift_duration_ms == 0


def test_patrol_dataframe_columns(fake_clock):
    frame = patrol_dataframe(summarize_shift(_completed_two_patrols(fake_clock)))
    assert list(frame.columns) == PATROL_COLUMNS
    assert frame["index"].tolist() == [1, 2]
    assert frame["duration"].tolist() == ["40m 00s", "25m 00s"]
    assert frame.loc[0, "start_time"] == "2026-10-19T08:15:00.000Z"


def test_patrol_dataframe_empty():
    frame = patrol_dataframe(summarize_shift(None))
    assert frame.empty
    assert list(frame.columns) == PATROL_COLUMNS
