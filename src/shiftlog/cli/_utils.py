"""CLI helper utilities for shiftlog."""

from __future__ import annotations

from datetime import datetime
from typing import NoReturn

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from shiftlog.config import ShiftLogConfig, build_store
from shiftlog.core.clock import format_duration
from shiftlog.model import PatrolStatus, ShiftStatus
from shiftlog.storage import StateRepository
from shiftlog.summary import ShiftSummary
from shiftlog.tracker import ShiftTracker
from shiftlog.view import TrackerView

console = Console()

_STATUS_STYLES: dict[PatrolStatus, str] = {
    PatrolStatus.PENDING: "dim",
    PatrolStatus.ACTIVE: "bold green",
    PatrolStatus.COMPLETED: "cyan",
}


def open_tracker(ctx: typer.Context) -> ShiftTracker:
    """Build a tracker from the config stashed on the root context."""
    config: ShiftLogConfig = (ctx.obj or {}).get("config") or ShiftLogConfig()
    repository = StateRepository(build_store(config), key=config.key)
    return ShiftTracker.open(repository)


def refuse(message: str) -> NoReturn:
    console.print(f"[yellow]{message}[/yellow]")
    raise typer.Exit(1)


def fail(message: str) -> NoReturn:
    console.print(f"[red]Error:[/red] {message}")
    raise typer.Exit(1)


def format_clock(instant: datetime | None) -> str:
    """Local wall-clock ``HH:MM`` for display, ``-`` when absent."""
    if instant is None:
        return "-"
    return instant.astimezone().strftime("%H:%M")


def format_day(instant: datetime | None) -> str:
    if instant is None:
        return "-"
    return instant.astimezone().strftime("%a %d %b %Y")


def print_status(view: TrackerView) -> None:
    console.print(f"[bold]{view.status_label}[/bold]")
    if view.status is ShiftStatus.NONE:
        console.print("No active shift. Run `shiftlog start` to begin your day.")
    else:
        console.print(f"Date: {format_day(view.start_time)}")
        console.print(f"Started: {format_clock(view.start_time)}")
        console.print(f"Finished: {format_clock(view.end_time)}")
        if view.end_time is not None:
            console.print(f"Shift length: {format_duration(view.shift_duration_ms)}")

    patrols = Table(title="Patrols")
    patrols.add_column("Patrol")
    patrols.add_column("Status")
    patrols.add_column("Start")
    patrols.add_column("End")
    patrols.add_column("Duration")
    for patrol in view.patrols:
        style = _STATUS_STYLES[patrol.status]
        patrols.add_row(
            f"Patrol {patrol.index}",
            f"[{style}]{patrol.status_label}[/{style}]",
            format_clock(patrol.start_time),
            format_clock(patrol.end_time),
            format_duration(patrol.duration_ms),
        )
    console.print(patrols)

    counters = Table(title="Counters")
    counters.add_column("Counter")
    counters.add_column("Value", justify="right")
    for counter in view.counters:
        counters.add_row(counter.label, str(counter.value))
    console.print(counters)

    if view.notes:
        print_notes(view)


def print_notes(view: TrackerView) -> None:
    lock = "locked" if view.notes_locked else "unlocked"
    table = Table(title=f"Notes ({lock})")
    table.add_column("ID", no_wrap=True)
    table.add_column("Time")
    table.add_column("Text")
    for note in view.notes:
        table.add_row(note.id, format_clock(note.timestamp), escape(note.text))
    console.print(table)


def print_summary(summary: ShiftSummary) -> None:
    if summary.is_empty:
        console.print(summary.message)
        return
    table = Table(title="Last completed shift")
    table.add_column("Item")
    table.add_column("Value", justify="right")
    table.add_row("Date", format_day(summary.start_time))
    table.add_row("Shift start", format_clock(summary.start_time))
    table.add_row("Shift end", format_clock(summary.end_time))
    table.add_row("Total shift length", format_duration(summary.shift_duration_ms))
    for line in summary.patrols:
        table.add_row(f"Patrol {line.index}", line.duration)
    table.add_row("Total time in patrols", format_duration(summary.total_patrol_ms))
    table.add_row("Public engagements", str(summary.engagements))
    table.add_row("Street drinker contacts", str(summary.street_drinkers))
    table.add_row("ASB incidents", str(summary.asb_incidents))
    console.print(table)
    if summary.message:
        console.print(f"[dim]{summary.message}[/dim]")
    console.print(f"[bold]Summary:[/bold] {summary.headline}")


__all__ = [
    "console",
    "fail",
    "format_clock",
    "format_day",
    "open_tracker",
    "print_notes",
    "print_status",
    "print_summary",
    "refuse",
]
