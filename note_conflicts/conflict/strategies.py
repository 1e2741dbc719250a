"""
Per-field resolution strategies.

Each conflicting field is resolved independently with one of:
- Keep current: the stored value wins
- Keep incoming: the client's value wins
- Manual merge: a caller-supplied value wins
"""

from abc import ABC, abstractmethod
from enum import Enum
from typing import Any

from pydantic import BaseModel, field_validator

from note_conflicts.conflict.detector import Conflict
from note_conflicts.conflict.errors import ConflictField, MissingOverride
from note_conflicts.models.note import as_tag_set

FieldValue = str | frozenset[str]


class ResolutionChoice(str, Enum):
    """Strategy chosen for a single field."""

    KEEP_CURRENT = "keep_current"
    KEEP_INCOMING = "keep_incoming"
    MANUAL_MERGE = "manual_merge"


class FieldChoices(BaseModel):
    """One choice per resolvable field. Defaults to the incoming edit."""

    title: ResolutionChoice = ResolutionChoice.KEEP_INCOMING
    content: ResolutionChoice = ResolutionChoice.KEEP_INCOMING
    tags: ResolutionChoice = ResolutionChoice.KEEP_INCOMING

    def for_field(self, field: ConflictField) -> ResolutionChoice:
        return getattr(self, field.value)


class ManualOverrides(BaseModel):
    """Caller-supplied values for fields resolved by manual merge."""

    title: str | None = None
    content: str | None = None
    tags: frozenset[str] | None = None

    @field_validator("tags", mode="before")
    @classmethod
    def _coerce_tags(cls, value: Any) -> frozenset[str] | None:
        if value is None:
            return None
        return as_tag_set(value)

    def for_field(self, field: ConflictField) -> FieldValue | None:
        return getattr(self, field.value)


class BaseFieldStrategy(ABC):
    """Base class for field resolution strategies."""

    choice: ResolutionChoice

    @abstractmethod
    def resolve(
        self,
        conflict: Conflict,
        field: ConflictField,
        overrides: ManualOverrides,
    ) -> FieldValue:
        """Return the final value for a field."""
        pass


class KeepCurrentStrategy(BaseFieldStrategy):
    """Use the stored value."""

    choice = ResolutionChoice.KEEP_CURRENT

    def resolve(
        self,
        conflict: Conflict,
        field: ConflictField,
        overrides: ManualOverrides,
    ) -> FieldValue:
        return conflict.current_value(field)


class KeepIncomingStrategy(BaseFieldStrategy):
    """Use the client's value."""

    choice = ResolutionChoice.KEEP_INCOMING

    def resolve(
        self,
        conflict: Conflict,
        field: ConflictField,
        overrides: ManualOverrides,
    ) -> FieldValue:
        return conflict.incoming_value(field)


class ManualMergeStrategy(BaseFieldStrategy):
    """
    Use a value supplied by the caller.

    Fails closed: a missing override is an error, never a silent
    fallback to either side.
    """

    choice = ResolutionChoice.MANUAL_MERGE

    def resolve(
        self,
        conflict: Conflict,
        field: ConflictField,
        overrides: ManualOverrides,
    ) -> FieldValue:
        value = overrides.for_field(field)
        if value is None:
            raise MissingOverride(field)
        return value


_STRATEGIES: dict[ResolutionChoice, BaseFieldStrategy] = {
    ResolutionChoice.KEEP_CURRENT: KeepCurrentStrategy(),
    ResolutionChoice.KEEP_INCOMING: KeepIncomingStrategy(),
    ResolutionChoice.MANUAL_MERGE: ManualMergeStrategy(),
}


def get_strategy(choice: ResolutionChoice) -> BaseFieldStrategy:
    """Get the field strategy for a choice."""
    return _STRATEGIES[ResolutionChoice(choice)]
