"""
Edit conflict detection between two versions of a note.

Compares the stored ("current") version of a note against the version a
client tried to save ("incoming") and flags which fields diverge:
- Title (exact, case-sensitive comparison)
- Content (exact comparison)
- Tags (set comparison, order is irrelevant)
"""

import logging
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, computed_field

from note_conflicts.models.note import VersionedRecord
from note_conflicts.conflict.errors import ConflictField, IdentifierMismatch

logger = logging.getLogger(__name__)


class Conflict(BaseModel):
    """A divergence between the stored and incoming versions of a note."""

    model_config = ConfigDict(frozen=True)

    identifier: str
    current: VersionedRecord
    incoming: VersionedRecord

    # Who is resolving vs. who saved the stored version
    current_editor: str = Field(description="User performing the resolution")
    last_editor: str = Field(description="User who last saved the stored version")
    last_modified: datetime

    # Optimistic concurrency bookkeeping
    expected_version: int | None = Field(
        default=None,
        description="Version the incoming edit was based on",
    )
    actual_version: int | None = Field(
        default=None,
        description="Version currently stored",
    )

    @computed_field
    @property
    def has_title_conflict(self) -> bool:
        return self.current.title != self.incoming.title

    @computed_field
    @property
    def has_content_conflict(self) -> bool:
        return self.current.content != self.incoming.content

    @computed_field
    @property
    def has_tag_conflict(self) -> bool:
        return self.current.tags != self.incoming.tags

    @property
    def has_field_conflict(self) -> bool:
        """True if any resolvable field diverges."""
        return bool(self.conflicting_fields)

    @property
    def has_version_conflict(self) -> bool:
        """True if the edit was based on a stale version."""
        if self.expected_version is None or self.actual_version is None:
            return False
        return self.expected_version != self.actual_version

    @property
    def conflicting_fields(self) -> list[ConflictField]:
        """Conflicting fields in display order."""
        flags = {
            ConflictField.TITLE: self.has_title_conflict,
            ConflictField.CONTENT: self.has_content_conflict,
            ConflictField.TAGS: self.has_tag_conflict,
        }
        return [f for f, conflicting in flags.items() if conflicting]

    def is_conflicting(self, field: ConflictField) -> bool:
        """Check a single field."""
        return field in self.conflicting_fields

    def current_value(self, field: ConflictField) -> str | frozenset[str]:
        return getattr(self.current, field.value)

    def incoming_value(self, field: ConflictField) -> str | frozenset[str]:
        return getattr(self.incoming, field.value)


class ConflictDetector:
    """
    Builds a Conflict from two versions of the same note.

    Stateless: a single detector can be shared between callers.
    """

    def detect(
        self,
        current: VersionedRecord,
        incoming: VersionedRecord,
        *,
        current_editor: str | None = None,
        expected_version: int | None = None,
    ) -> Conflict:
        """
        Compare the stored and incoming versions of a note.

        Args:
            current: Version held by the store
            incoming: Version the client tried to save
            current_editor: User resolving the conflict (defaults to incoming.editor)
            expected_version: Version the client's edit was based on

        Returns:
            Conflict with per-field flags

        Raises:
            IdentifierMismatch: If the records belong to different notes
        """
        if current.identifier != incoming.identifier:
            raise IdentifierMismatch(current.identifier, incoming.identifier)

        conflict = Conflict(
            identifier=current.identifier,
            current=current,
            incoming=incoming,
            current_editor=current_editor if current_editor is not None else incoming.editor,
            last_editor=current.editor,
            last_modified=current.last_modified,
            expected_version=expected_version,
            actual_version=current.version,
        )

        logger.debug(
            f"Conflict check for note {conflict.identifier}: "
            f"fields={[f.value for f in conflict.conflicting_fields]}, "
            f"expected_version={expected_version}, actual_version={current.version}"
        )

        return conflict
