"""
Conflict resolution.

Turns a Conflict plus per-field choices into the record to persist:
- ResolutionApplier: pure application of choices and overrides
- ResolutionForm: mutable per-field state filled in by a UI or policy
- ConflictSession: lifecycle of a single conflict (awaiting → resolved | abandoned)
"""

import logging
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field

from note_conflicts.models.note import ResolvedRecord
from note_conflicts.conflict.detector import Conflict
from note_conflicts.conflict.errors import ConflictField, MissingOverride, SessionClosed
from note_conflicts.conflict.strategies import (
    FieldChoices,
    FieldValue,
    ManualOverrides,
    ResolutionChoice,
    get_strategy,
)
from note_conflicts.conflict.suggestions import MergeSuggestions

logger = logging.getLogger(__name__)


class ResolutionApplier:
    """
    Applies per-field choices to a Conflict.

    Fields without a detected conflict always take the incoming value,
    whatever choice was supplied for them. The resolved record is
    attributed to the conflict's current editor (the resolving user).
    """

    def apply(
        self,
        conflict: Conflict,
        choices: FieldChoices | None = None,
        overrides: ManualOverrides | None = None,
    ) -> ResolvedRecord:
        """
        Resolve a conflict.

        Args:
            conflict: The detected conflict
            choices: Strategy per field (defaults to keep_incoming everywhere)
            overrides: Values for fields marked manual_merge

        Returns:
            ResolvedRecord ready for the note store

        Raises:
            MissingOverride: If a conflicting field is marked manual_merge
                without an override
        """
        choices = choices or FieldChoices()
        overrides = overrides or ManualOverrides()

        values = {
            field.value: self._resolve_field(conflict, field, choices, overrides)
            for field in ConflictField
        }

        return ResolvedRecord(
            identifier=conflict.identifier,
            title=values["title"],
            content=values["content"],
            tags=values["tags"],
            editor=conflict.current_editor,
        )

    def _resolve_field(
        self,
        conflict: Conflict,
        field: ConflictField,
        choices: FieldChoices,
        overrides: ManualOverrides,
    ) -> FieldValue:
        if not conflict.is_conflicting(field):
            return conflict.incoming_value(field)

        strategy = get_strategy(choices.for_field(field))
        return strategy.resolve(conflict, field, overrides)


class ResolutionForm(BaseModel):
    """
    Per-field resolution state collected from the user.

    Mutable on purpose: a UI updates it as the user picks options, then
    hands it to ConflictSession.resolve().
    """

    choices: FieldChoices = Field(default_factory=FieldChoices)
    overrides: ManualOverrides = Field(default_factory=ManualOverrides)

    def choose(self, field: ConflictField, choice: ResolutionChoice) -> None:
        """Set the strategy for a field."""
        self.choices = self.choices.model_copy(update={field.value: ResolutionChoice(choice)})

    def override(self, field: ConflictField, value: Any) -> None:
        """Set the manual value for a field."""
        data = self.overrides.model_dump()
        data[field.value] = value
        self.overrides = ManualOverrides.model_validate(data)

    def apply_suggestions(self, suggestions: MergeSuggestions) -> None:
        """
        Pre-fill the form with merge suggestions.

        Overrides are seeded with the suggested values and tags switch to
        manual_merge so the suggested union is used.
        """
        self.overrides = ManualOverrides(
            title=suggestions.title,
            content=suggestions.content,
            tags=suggestions.tags,
        )
        self.choose(ConflictField.TAGS, ResolutionChoice.MANUAL_MERGE)

    def missing_overrides(self, conflict: Conflict) -> list[ConflictField]:
        """Conflicting fields marked manual_merge that still lack a value."""
        return [
            field
            for field in conflict.conflicting_fields
            if self.choices.for_field(field) == ResolutionChoice.MANUAL_MERGE
            and self.overrides.for_field(field) is None
        ]


class SessionState(str, Enum):
    """Lifecycle of a conflict session."""

    AWAITING_RESOLUTION = "awaiting_resolution"
    RESOLVED = "resolved"  # terminal
    ABANDONED = "abandoned"  # terminal


class ConflictSession:
    """
    A single conflict awaiting resolution.

    Resolution is atomic: either one call produces one ResolvedRecord and
    the session is resolved, or nothing changes.
    """

    def __init__(self, conflict: Conflict, applier: ResolutionApplier | None = None):
        self.conflict = conflict
        self.applier = applier or ResolutionApplier()
        self._state = SessionState.AWAITING_RESOLUTION
        self._result: ResolvedRecord | None = None

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def result(self) -> ResolvedRecord | None:
        """The resolved record, once resolved."""
        return self._result

    @property
    def is_open(self) -> bool:
        return self._state == SessionState.AWAITING_RESOLUTION

    def resolve(self, form: ResolutionForm | None = None) -> ResolvedRecord:
        """
        Resolve the conflict with the given form.

        Raises:
            SessionClosed: If the session was already resolved or abandoned
            MissingOverride: If the form is incomplete (session stays open)
        """
        self._ensure_open()
        form = form or ResolutionForm()

        try:
            resolved = self.applier.apply(self.conflict, form.choices, form.overrides)
        except MissingOverride as e:
            logger.info(f"Resolution of note {self.conflict.identifier} incomplete: {e.field.value}")
            raise

        self._result = resolved
        self._state = SessionState.RESOLVED
        logger.info(
            f"Resolved conflict on note {self.conflict.identifier} by {resolved.editor}"
        )
        return resolved

    def abandon(self) -> None:
        """Discard the conflict without resolving it."""
        self._ensure_open()
        self._state = SessionState.ABANDONED
        logger.info(f"Abandoned conflict on note {self.conflict.identifier}")

    def _ensure_open(self) -> None:
        if not self.is_open:
            raise SessionClosed(
                f"Conflict session for note {self.conflict.identifier} is {self._state.value}"
            )
