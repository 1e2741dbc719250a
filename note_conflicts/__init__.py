"""
Note Conflicts - optimistic-concurrency conflict resolution for notes

When two users edit the same note, the second save is detected as stale
and turned into a per-field Conflict:
- Conflict detection (title, content, tags)
- Merge suggestions (incoming text, union of tags)
- Per-field resolution (keep current, keep incoming, manual merge)
- SQLite note store with version-checked writes
- Real-time note update channel

Quick Start:
    from note_conflicts import ConflictDetector, MergeSuggestionGenerator, ResolutionApplier

    conflict = ConflictDetector().detect(current, incoming)
    suggestions = MergeSuggestionGenerator().suggest(conflict)
    resolved = ResolutionApplier().apply(conflict)
"""

from note_conflicts.config import NotesConfig, ConflictConfig, StorageConfig, SyncConfig
from note_conflicts.models.note import VersionedRecord, ResolvedRecord, StoredNote

from note_conflicts.conflict import (
    ConflictField,
    ConflictError,
    IdentifierMismatch,
    MissingOverride,
    SessionClosed,
    Conflict,
    ConflictDetector,
    MergeSuggestions,
    MergeSuggestionGenerator,
    ResolutionChoice,
    FieldChoices,
    ManualOverrides,
    ResolutionApplier,
    ResolutionForm,
    SessionState,
    ConflictSession,
)
from note_conflicts.storage import (
    BaseNoteStore,
    SQLiteNoteStore,
    StorageError,
    NoteNotFoundError,
    VersionConflictError,
)
from note_conflicts.sync import NoteUpdateChannel, NoteUpdateMessage, NoteUpdateType, NotesSync
from note_conflicts.api import NoteConflictService, UpdateOutcome

__version__ = "0.1.0"

__all__ = [
    # Configuration
    "NotesConfig",
    "ConflictConfig",
    "StorageConfig",
    "SyncConfig",

    # Records
    "VersionedRecord",
    "ResolvedRecord",
    "StoredNote",

    # Conflict engine
    "ConflictField",
    "Conflict",
    "ConflictDetector",
    "MergeSuggestions",
    "MergeSuggestionGenerator",
    "ResolutionChoice",
    "FieldChoices",
    "ManualOverrides",
    "ResolutionApplier",
    "ResolutionForm",
    "SessionState",
    "ConflictSession",

    # Errors
    "ConflictError",
    "IdentifierMismatch",
    "MissingOverride",
    "SessionClosed",
    "StorageError",
    "NoteNotFoundError",
    "VersionConflictError",

    # Storage
    "BaseNoteStore",
    "SQLiteNoteStore",

    # Sync
    "NoteUpdateChannel",
    "NoteUpdateMessage",
    "NoteUpdateType",
    "NotesSync",

    # Service
    "NoteConflictService",
    "UpdateOutcome",
]
