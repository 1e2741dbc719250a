"""
Conflict resolution module.

Provides:
- Per-field conflict detection between stored and incoming note versions
- Merge suggestions (incoming text, union of tags)
- Per-field resolution strategies
- Atomic resolution sessions
"""

from note_conflicts.conflict.errors import (
    ConflictField,
    ConflictError,
    IdentifierMismatch,
    MissingOverride,
    SessionClosed,
)
from note_conflicts.conflict.detector import (
    Conflict,
    ConflictDetector,
)
from note_conflicts.conflict.suggestions import (
    MergeSuggestions,
    MergeSuggestionGenerator,
    merge_tags,
)
from note_conflicts.conflict.strategies import (
    ResolutionChoice,
    FieldChoices,
    ManualOverrides,
    BaseFieldStrategy,
    KeepCurrentStrategy,
    KeepIncomingStrategy,
    ManualMergeStrategy,
    get_strategy,
)
from note_conflicts.conflict.resolver import (
    ResolutionApplier,
    ResolutionForm,
    SessionState,
    ConflictSession,
)

__all__ = [
    # Errors
    "ConflictField",
    "ConflictError",
    "IdentifierMismatch",
    "MissingOverride",
    "SessionClosed",
    # Detector
    "Conflict",
    "ConflictDetector",
    # Suggestions
    "MergeSuggestions",
    "MergeSuggestionGenerator",
    "merge_tags",
    # Strategies
    "ResolutionChoice",
    "FieldChoices",
    "ManualOverrides",
    "BaseFieldStrategy",
    "KeepCurrentStrategy",
    "KeepIncomingStrategy",
    "ManualMergeStrategy",
    "get_strategy",
    # Resolver
    "ResolutionApplier",
    "ResolutionForm",
    "SessionState",
    "ConflictSession",
]
