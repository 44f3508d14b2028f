from __future__ import annotations

import typer

from shiftlog.cli._utils import console, format_clock, open_tracker, refuse
from shiftlog.model import PATROL_COUNT, PatrolStatus

patrol_app = typer.Typer(add_completion=False, no_args_is_help=True, help="Start and end patrols 1-5.")

_NUMBER = typer.Argument(..., min=1, max=PATROL_COUNT, help="Patrol number (1-5).")


@patrol_app.command("start")
def start(ctx: typer.Context, number: int = _NUMBER) -> None:
    """Start patrol NUMBER; the previous patrol must be finished first."""
    tracker = open_tracker(ctx)
    position = number - 1
    if not tracker.start_patrol(position):
        shift = tracker.current_shift
        if shift is None or shift.is_ended:
            refuse("No active shift. Run `shiftlog start` first.")
        running = shift.active_patrol()
        if running is not None and running.index != number:
            refuse(f"Patrol {running.index} is still in progress. End it first.")
        if shift.patrols[position].status is not PatrolStatus.PENDING:
            refuse(f"Patrol {number} has already been started.")
        refuse(f"Finish patrol {number - 1} before starting patrol {number}.")
    patrol = tracker.current_shift.patrols[position]
    console.print(f"Patrol {number} started at {format_clock(patrol.start_time)}.")


@patrol_app.command("end")
def end(ctx: typer.Context, number: int = _NUMBER) -> None:
    """End patrol NUMBER if it is in progress."""
    tracker = open_tracker(ctx)
    position = number - 1
    if not tracker.end_patrol(position):
        refuse(f"Patrol {number} is not in progress.")
    patrol = tracker.current_shift.patrols[position]
    console.print(f"Patrol {number} ended at {format_clock(patrol.end_time)}.")
