from __future__ import annotations

from pathlib import Path

import typer

from shiftlog.cli._utils import (
    console,
    fail,
    format_clock,
    open_tracker,
    print_status,
    print_summary,
    refuse,
)
from shiftlog.cli.counters import count_app
from shiftlog.cli.notes import note_app
from shiftlog.cli.patrol import patrol_app
from shiftlog.config import load_config
from shiftlog.core.errors import ShiftLogValueError
from shiftlog.core.logs import configure_logging
from shiftlog.summary import patrol_dataframe

app = typer.Typer(add_completion=False, no_args_is_help=True, help="Personal shift and patrol logger.")
app.add_typer(patrol_app, name="patrol")
app.add_typer(count_app, name="count")
app.add_typer(note_app, name="note")


@app.callback()
def main(
    ctx: typer.Context,
    config: Path | None = typer.Option(
        None,
        "--config",
        "-c",
        dir_okay=False,
        help="YAML config file (defaults to config.yaml in the shiftlog app directory).",
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log storage and state details."),
) -> None:
    """Track a shift, its five patrols, event counters and notes."""
    try:
        settings = load_config(config)
    except ShiftLogValueError as exc:
        fail(str(exc))
    configure_logging("DEBUG" if verbose else settings.log_level)
    ctx.obj = {"config": settings}


@app.command()
def status(ctx: typer.Context) -> None:
    """Show the current shift, patrols, counters and notes."""
    print_status(open_tracker(ctx).view())


@app.command()
def start(ctx: typer.Context) -> None:
    """Start a new shift."""
    tracker = open_tracker(ctx)
    if not tracker.start_shift():
        refuse("A shift is already in progress.")
    console.print(f"Shift started at {format_clock(tracker.current_shift.start_time)}.")


@app.command()
def end(ctx: typer.Context) -> None:
    """End the current shift, closing any patrol still in progress."""
    tracker = open_tracker(ctx)
    if not tracker.end_shift():
        refuse("No active shift to end.")
    console.print(f"Shift ended at {format_clock(tracker.last_completed_shift.end_time)}.")
    print_summary(tracker.summary())


@app.command()
def summary(
    ctx: typer.Context,
    csv: Path | None = typer.Option(None, "--csv", dir_okay=False, help="Write the patrol breakdown to CSV."),
) -> None:
    """Summarise the last completed shift."""
    result = open_tracker(ctx).summary()
    print_summary(result)
    if csv is not None:
        if result.is_empty:
            refuse("No completed shift to export.")
        csv.parent.mkdir(parents=True, exist_ok=True)
        patrol_dataframe(result).to_csv(csv, index=False)
        console.print(f"Patrol breakdown saved to {csv}")


@app.command()
def reset(
    ctx: typer.Context,
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip the confirmation prompt."),
) -> None:
    """Clear the current shift, the last summary and all stored data."""
    tracker = open_tracker(ctx)
    if not tracker.state.has_data:
        refuse("Nothing to reset.")

    def _confirm() -> bool:
        return yes or typer.confirm(
            "This will clear your current shift, last summary and all stored data. Are you sure?"
        )

    if not tracker.reset_all_data(confirm=_confirm):
        console.print("Reset cancelled.")
        raise typer.Exit(1)
    console.print("All shift data cleared.")


if __name__ == "__main__":
    app()
