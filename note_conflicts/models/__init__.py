"""
Note models.

Snapshots of notes exchanged between the write path, the conflict engine
and the note store.
"""

from note_conflicts.models.note import VersionedRecord, ResolvedRecord, StoredNote

__all__ = [
    "VersionedRecord",
    "ResolvedRecord",
    "StoredNote",
]
