from __future__ import annotations

import click
import typer

from shiftlog.cli._utils import console, open_tracker, refuse
from shiftlog.model import COUNTER_ALIASES, COUNTER_LABELS, Counter, resolve_counter

count_app = typer.Typer(
    add_completion=False,
    no_args_is_help=True,
    help="Adjust the engagement, street drinker and ASB counters.",
)

COUNTER_NAME = click.Choice(sorted(COUNTER_ALIASES), case_sensitive=False)

_NAME = typer.Argument(
    ...,
    click_type=COUNTER_NAME,
    help="Counter: engagements|street-drinkers|asb (aliases: eng, sd).",
)


def _report(counter: Counter, value: int) -> None:
    console.print(f"{COUNTER_LABELS[counter]}: {value}")


@count_app.command("inc")
def increment(ctx: typer.Context, name: str = _NAME) -> None:
    """Add one to a counter."""
    counter = resolve_counter(name)
    tracker = open_tracker(ctx)
    if not tracker.increment(counter):
        refuse("Counters can only change during an active shift.")
    _report(counter, tracker.get_counter(counter))


@count_app.command("dec")
def decrement(ctx: typer.Context, name: str = _NAME) -> None:
    """Subtract one from a counter (never below zero)."""
    counter = resolve_counter(name)
    tracker = open_tracker(ctx)
    if not tracker.decrement(counter):
        if tracker.current_shift is None:
            refuse("Counters can only change during an active shift.")
        refuse(f"{COUNTER_LABELS[counter]} is already 0.")
    _report(counter, tracker.get_counter(counter))


@count_app.command("set")
def set_value(
    ctx: typer.Context,
    name: str = _NAME,
    value: int = typer.Argument(..., min=0, help="New non-negative whole number."),
) -> None:
    """Overwrite a counter."""
    counter = resolve_counter(name)
    tracker = open_tracker(ctx)
    if not tracker.set_counter(counter, value):
        refuse("Counters can only change during an active shift.")
    _report(counter, tracker.get_counter(counter))
