"""
Note write path with optimistic concurrency.

Ties the note store to the conflict engine:
- Conditional updates that turn stale writes into Conflicts
- Merge suggestions for the UI
- Forced writes after resolution
- Update broadcasts on the note update channel
"""

import logging

from pydantic import BaseModel, ConfigDict

from note_conflicts.config import NotesConfig
from note_conflicts.models.note import StoredNote, VersionedRecord
from note_conflicts.conflict.detector import Conflict, ConflictDetector
from note_conflicts.conflict.suggestions import MergeSuggestions, MergeSuggestionGenerator
from note_conflicts.conflict.resolver import ConflictSession, ResolutionApplier, ResolutionForm
from note_conflicts.storage.base import BaseNoteStore, NoteNotFoundError, VersionConflictError
from note_conflicts.sync.channel import NoteUpdateChannel, NoteUpdateMessage, NoteUpdateType

logger = logging.getLogger(__name__)


class UpdateOutcome(BaseModel):
    """Result of a version-checked update."""

    model_config = ConfigDict(frozen=True)

    success: bool
    note: StoredNote | None = None
    conflict: Conflict | None = None


class NoteConflictService:
    """
    Write path for notes edited concurrently.

    Usage:
        service = NoteConflictService(store, channel)

        outcome = await service.update_with_conflict_check(edit, expected_version=3)
        if not outcome.success:
            session = service.open_session(outcome.conflict)
            form = ResolutionForm()
            form.apply_suggestions(service.suggest(outcome.conflict))
            note = await service.resolve(session, form)
    """

    def __init__(
        self,
        store: BaseNoteStore,
        channel: NoteUpdateChannel | None = None,
        config: NotesConfig | None = None,
    ):
        self.store = store
        self.channel = channel
        self.config = config or NotesConfig()

        self._detector = ConflictDetector()
        self._suggester = MergeSuggestionGenerator(self.config.conflict)
        self._applier = ResolutionApplier()

    async def create_note(self, record: VersionedRecord) -> StoredNote:
        """Store a new note and announce it."""
        note = await self.store.create(record)
        self._broadcast(NoteUpdateType.NOTE_CREATED, note)
        return note

    async def delete_note(self, note_id: str, user_id: str) -> bool:
        """Delete a note and announce it."""
        deleted = await self.store.delete(note_id)
        if deleted:
            self._publish(NoteUpdateMessage(
                type=NoteUpdateType.NOTE_DELETED,
                note_id=note_id,
                user_id=user_id,
            ))
        return deleted

    async def check_for_conflicts(
        self,
        incoming: VersionedRecord,
        expected_version: int,
    ) -> Conflict:
        """
        Compare an edit against the stored note.

        Args:
            incoming: The client's version of the note
            expected_version: Version the edit was based on

        Returns:
            Conflict describing the divergence

        Raises:
            NoteNotFoundError: If the note does not exist
        """
        current = await self.store.read(incoming.identifier)
        if current is None:
            raise NoteNotFoundError(incoming.identifier)

        conflict = self._detector.detect(
            current.to_record(),
            incoming,
            expected_version=expected_version,
        )

        logger.info(
            f"Conflict check for note {incoming.identifier}: "
            f"expected_version={expected_version}, actual_version={current.version}, "
            f"has_conflict={conflict.has_version_conflict}"
        )

        return conflict

    async def update_with_conflict_check(
        self,
        incoming: VersionedRecord,
        expected_version: int,
    ) -> UpdateOutcome:
        """
        Save an edit if nobody else saved first.

        Returns:
            UpdateOutcome with the stored note, or with the Conflict if the
            stored version moved on

        Raises:
            NoteNotFoundError: If the note does not exist
        """
        try:
            note = await self.store.update_if_version(incoming, expected_version)
        except VersionConflictError as e:
            logger.warning(
                f"Version conflict for note {e.note_id}: "
                f"expected={e.expected_version}, actual={e.actual_version}"
            )
            conflict = await self.check_for_conflicts(incoming, expected_version)
            return UpdateOutcome(success=False, conflict=conflict)

        self._broadcast(NoteUpdateType.NOTE_UPDATED, note)
        return UpdateOutcome(success=True, note=note)

    def suggest(self, conflict: Conflict) -> MergeSuggestions:
        """Merge suggestions for a conflict."""
        return self._suggester.suggest(conflict)

    def open_session(self, conflict: Conflict) -> ConflictSession:
        """Start resolving a conflict."""
        return ConflictSession(conflict, self._applier)

    async def resolve(
        self,
        session: ConflictSession | Conflict,
        form: ResolutionForm | None = None,
    ) -> StoredNote:
        """
        Resolve a conflict and persist the result.

        Args:
            session: An open session, or a Conflict to resolve directly
            form: Per-field choices and overrides

        Returns:
            The stored note after the forced write

        Raises:
            MissingOverride: If the form is incomplete
            SessionClosed: If the session already ended
            NoteNotFoundError: If the note was deleted meanwhile
        """
        if isinstance(session, Conflict):
            session = self.open_session(session)

        resolved = session.resolve(form)
        note = await self.store.force_update(resolved)

        self._broadcast(NoteUpdateType.NOTE_UPDATED, note)
        return note

    def _broadcast(self, update_type: NoteUpdateType, note: StoredNote) -> None:
        self._publish(NoteUpdateMessage(
            type=update_type,
            note_id=note.identifier,
            user_id=note.editor,
            title=note.title,
            content=note.content,
            tag_names=note.sorted_tags,
        ))

    def _publish(self, message: NoteUpdateMessage) -> None:
        if self.channel is None or not self.config.sync.enabled:
            return
        self.channel.publish(message)
