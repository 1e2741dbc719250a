"""
Real-time note updates.
"""

from note_conflicts.sync.channel import (
    NoteUpdateType,
    NoteUpdateMessage,
    NoteUpdateCallback,
    Subscription,
    NoteUpdateChannel,
    NotesSync,
)

__all__ = [
    "NoteUpdateType",
    "NoteUpdateMessage",
    "NoteUpdateCallback",
    "Subscription",
    "NoteUpdateChannel",
    "NotesSync",
]
