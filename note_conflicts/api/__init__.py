"""
API module for the note conflict engine.

Provides:
- NoteConflictService: version-checked note writes and conflict resolution
"""

from note_conflicts.api.service import (
    NoteConflictService,
    UpdateOutcome,
)

__all__ = [
    "NoteConflictService",
    "UpdateOutcome",
]
