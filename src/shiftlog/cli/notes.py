from __future__ import annotations

import typer

from shiftlog.cli._utils import console, open_tracker, print_notes, refuse

note_app = typer.Typer(add_completion=False, no_args_is_help=True, help="Capture and revise shift notes.")

_LOCKED_HINT = "Notes are locked. Run `shiftlog note lock` to unlock them first."


@note_app.command("add")
def add(ctx: typer.Context, text: list[str] = typer.Argument(..., help="Note text.")) -> None:
    """Append a note to the current shift (allowed while locked)."""
    tracker = open_tracker(ctx)
    if tracker.current_shift is None:
        refuse("No active shift. Run `shiftlog start` first.")
    note = tracker.add_note(" ".join(text))
    if note is None:
        refuse("Nothing to add: the note is empty.")
    console.print(f"Added note {note.id}.")


@note_app.command("edit")
def edit(
    ctx: typer.Context,
    note_id: str = typer.Argument(..., help="Note ID (see `shiftlog note list`)."),
    text: list[str] = typer.Argument(..., help="Replacement text."),
) -> None:
    """Replace the text of an existing note (notes must be unlocked)."""
    tracker = open_tracker(ctx)
    if not tracker.view().can_edit_notes:
        refuse(_LOCKED_HINT if tracker.current_shift is not None else "No active shift.")
    if not tracker.update_note(note_id, " ".join(text)):
        refuse(f"No note with ID {note_id}.")
    console.print(f"Updated note {note_id}.")


@note_app.command("delete")
def delete(ctx: typer.Context, note_id: str = typer.Argument(..., help="Note ID.")) -> None:
    """Remove a note (notes must be unlocked)."""
    tracker = open_tracker(ctx)
    if not tracker.view().can_delete_notes:
        refuse(_LOCKED_HINT if tracker.current_shift is not None else "No active shift.")
    if not tracker.delete_note(note_id):
        refuse(f"No note with ID {note_id}.")
    console.print(f"Deleted note {note_id}.")


@note_app.command("lock")
def lock(ctx: typer.Context) -> None:
    """Toggle the notes lock."""
    tracker = open_tracker(ctx)
    if not tracker.toggle_notes_lock():
        refuse("No active shift.")
    state = "locked" if tracker.current_shift.notes_locked else "unlocked"
    console.print(f"Notes {state}.")


@note_app.command("list")
def list_notes(ctx: typer.Context) -> None:
    """Show the current shift's notes."""
    view = open_tracker(ctx).view()
    if not view.notes:
        console.print("No notes yet.")
        return
    print_notes(view)
