"""
Note storage backends.

Provides:
- SQLite note store with conditional (version-checked) writes
- Abstract base class for custom backends
"""

from note_conflicts.storage.base import (
    BaseNoteStore,
    StorageError,
    NoteNotFoundError,
    VersionConflictError,
)
from note_conflicts.storage.sqlite import SQLiteNoteStore

__all__ = [
    # Base
    "BaseNoteStore",
    "StorageError",
    "NoteNotFoundError",
    "VersionConflictError",
    # Implementations
    "SQLiteNoteStore",
]
