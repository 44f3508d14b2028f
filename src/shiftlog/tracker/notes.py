"""Free-text notes attached to the active shift.

Capturing a note is always allowed while a shift exists; the ``notes_locked`` flag
only tells front ends whether existing notes may be revised. The mutation helpers
here stay unconditional with respect to the lock.
"""

from __future__ import annotations

from datetime import datetime
from uuid import uuid4

from shiftlog.model import Note, Shift

__all__ = ["add_note", "toggle_lock", "find_note", "update_note", "delete_note", "new_note_id"]


def new_note_id(at: datetime) -> str:
    """Return ``<epoch-ms>-<8 hex>``; sortable by creation time and unique per process."""
    return f"{int(at.timestamp() * 1000)}-{uuid4().hex[:8]}"


def add_note(shift: Shift | None, text: str | None, at: datetime) -> Note | None:
    if shift is None or text is None:
        return None
    cleaned = text.strip()
    if not cleaned:
        return None
    note = Note(id=new_note_id(at), timestamp=at, text=cleaned)
    shift.notes.append(note)
    return note


def toggle_lock(shift: Shift | None) -> bool:
    if shift is None:
        return False
    shift.notes_locked = not shift.notes_locked
    return True


def find_note(shift: Shift | None, note_id: str) -> Note | None:
    if shift is None:
        return None
    return next((note for note in shift.notes if note.id == note_id), None)


def update_note(shift: Shift | None, note_id: str, text: str) -> bool:
    note = find_note(shift, note_id)
    if note is None:
        return False
    note.text = text.strip()
    return True


def delete_note(shift: Shift | None, note_id: str) -> bool:
    note = find_note(shift, note_id)
    if note is None:
        return False
    shift.notes.remove(note)
    return True
