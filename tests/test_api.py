"""
Tests for the note conflict service.
"""

import pytest

from note_conflicts.config import NotesConfig, StorageConfig, SyncConfig
from note_conflicts.models.note import VersionedRecord
from note_conflicts.conflict.errors import ConflictField, MissingOverride, SessionClosed
from note_conflicts.conflict.strategies import ResolutionChoice
from note_conflicts.conflict.resolver import ResolutionForm, SessionState
from note_conflicts.storage.sqlite import SQLiteNoteStore
from note_conflicts.storage.base import NoteNotFoundError
from note_conflicts.sync.channel import NoteUpdateChannel, NoteUpdateType
from note_conflicts.api.service import NoteConflictService


@pytest.fixture
def config(temp_directory):
    """Config pointing at a temporary database."""
    return NotesConfig(storage=StorageConfig(sqlite_path=temp_directory / "notes.db"))


@pytest.fixture
def channel():
    """A connected update channel recording every message."""
    channel = NoteUpdateChannel()
    channel.connect()
    channel.received = []
    channel.subscribe(channel.received.append)
    return channel


@pytest.fixture
async def service(config, channel):
    """A service backed by a fresh SQLite store."""
    store = SQLiteNoteStore(config.storage)
    await store.connect()
    yield NoteConflictService(store, channel, config)
    await store.disconnect()


@pytest.fixture
async def stored_note(service):
    """Alice's note at version 1."""
    return await service.create_note(VersionedRecord(
        identifier="note_1",
        title="Meeting Notes",
        content="Draft A",
        tags=["work"],
        editor="alice",
    ))


def bob_edit(**changes) -> VersionedRecord:
    """Bob's edit of note_1."""
    data = {
        "identifier": "note_1",
        "title": "Meeting Notes",
        "content": "Draft B",
        "tags": ["urgent"],
        "editor": "bob",
    }
    data.update(changes)
    return VersionedRecord(**data)


class TestUpdateWithConflictCheck:
    """Tests for version-checked updates."""

    @pytest.mark.asyncio
    async def test_update_succeeds_on_matching_version(self, service, stored_note, channel):
        """An up-to-date edit is saved and broadcast."""
        outcome = await service.update_with_conflict_check(bob_edit(), expected_version=1)

        assert outcome.success
        assert outcome.conflict is None
        assert outcome.note.version == 2
        assert outcome.note.content == "Draft B"
        assert outcome.note.editor == "bob"

        assert [m.type for m in channel.received] == [
            NoteUpdateType.NOTE_CREATED,
            NoteUpdateType.NOTE_UPDATED,
        ]
        assert channel.received[-1].user_id == "bob"

    @pytest.mark.asyncio
    async def test_stale_update_returns_conflict(self, service, stored_note, channel):
        """A stale edit is not saved; a conflict comes back instead."""
        await service.update_with_conflict_check(
            bob_edit(content="Draft A2", tags=["work"], editor="alice"), expected_version=1
        )

        outcome = await service.update_with_conflict_check(bob_edit(), expected_version=1)

        assert not outcome.success
        assert outcome.note is None
        conflict = outcome.conflict
        assert conflict.has_version_conflict
        assert conflict.expected_version == 1
        assert conflict.actual_version == 2
        assert conflict.has_content_conflict
        assert conflict.has_tag_conflict
        assert not conflict.has_title_conflict
        assert conflict.current_editor == "bob"
        assert conflict.last_editor == "alice"

        stored = await service.store.read("note_1")
        assert stored.content == "Draft A2"
        assert len(channel.received) == 2

    @pytest.mark.asyncio
    async def test_update_missing_note(self, service):
        """Updating an unknown note raises NoteNotFoundError."""
        with pytest.raises(NoteNotFoundError):
            await service.update_with_conflict_check(bob_edit(identifier="missing"), 1)


class TestCheckForConflicts:
    """Tests for conflict checks."""

    @pytest.mark.asyncio
    async def test_matching_version_has_no_version_conflict(self, service, stored_note):
        """Field differences alone are not a version conflict."""
        conflict = await service.check_for_conflicts(bob_edit(), expected_version=1)

        assert not conflict.has_version_conflict
        assert conflict.has_content_conflict

    @pytest.mark.asyncio
    async def test_missing_note(self, service):
        """Checking an unknown note raises NoteNotFoundError."""
        with pytest.raises(NoteNotFoundError):
            await service.check_for_conflicts(bob_edit(identifier="missing"), 1)


class TestResolve:
    """Tests for resolving and persisting conflicts."""

    async def _conflict(self, service):
        await service.update_with_conflict_check(
            bob_edit(content="Draft A2", tags=["work"], editor="alice"), expected_version=1
        )
        outcome = await service.update_with_conflict_check(bob_edit(), expected_version=1)
        return outcome.conflict

    @pytest.mark.asyncio
    async def test_resolve_with_suggestions(self, service, stored_note, channel):
        """Smart merge keeps incoming content and unions tags."""
        conflict = await self._conflict(service)
        form = ResolutionForm()
        form.apply_suggestions(service.suggest(conflict))

        note = await service.resolve(conflict, form)

        assert note.version == 3
        assert note.content == "Draft B"
        assert note.tags == frozenset({"work", "urgent"})
        assert note.editor == "bob"
        assert channel.received[-1].tag_names == ["urgent", "work"]

    @pytest.mark.asyncio
    async def test_resolve_keep_current(self, service, stored_note):
        """Keeping the stored content overwrites nothing but the attribution."""
        conflict = await self._conflict(service)
        form = ResolutionForm()
        form.choose(ConflictField.CONTENT, ResolutionChoice.KEEP_CURRENT)
        form.choose(ConflictField.TAGS, ResolutionChoice.KEEP_CURRENT)

        note = await service.resolve(conflict, form)

        assert note.content == "Draft A2"
        assert note.tags == frozenset({"work"})
        assert note.editor == "bob"

    @pytest.mark.asyncio
    async def test_incomplete_form_writes_nothing(self, service, stored_note):
        """MissingOverride leaves the store and session untouched."""
        conflict = await self._conflict(service)
        session = service.open_session(conflict)
        form = ResolutionForm()
        form.choose(ConflictField.CONTENT, ResolutionChoice.MANUAL_MERGE)

        with pytest.raises(MissingOverride):
            await service.resolve(session, form)

        assert session.state == SessionState.AWAITING_RESOLUTION
        stored = await service.store.read("note_1")
        assert stored.version == 2

    @pytest.mark.asyncio
    async def test_abandoned_session_cannot_be_resolved(self, service, stored_note):
        """An abandoned session never reaches the store."""
        session = service.open_session(await self._conflict(service))
        session.abandon()

        with pytest.raises(SessionClosed):
            await service.resolve(session)

        stored = await service.store.read("note_1")
        assert stored.version == 2


class TestBroadcasting:
    """Tests for update broadcasts."""

    @pytest.mark.asyncio
    async def test_delete_is_broadcast(self, service, stored_note, channel):
        """Deleting a note announces it."""
        assert await service.delete_note("note_1", user_id="alice")

        assert channel.received[-1].type == NoteUpdateType.NOTE_DELETED
        assert channel.received[-1].note_id == "note_1"

    @pytest.mark.asyncio
    async def test_sync_disabled(self, config, channel):
        """Nothing is published when sync is disabled."""
        config = config.model_copy(update={"sync": SyncConfig(enabled=False)})

        async with SQLiteNoteStore(config.storage) as store:
            service = NoteConflictService(store, channel, config)
            await service.create_note(bob_edit())

        assert channel.received == []

    @pytest.mark.asyncio
    async def test_no_channel(self, config):
        """The service works without a channel."""
        async with SQLiteNoteStore(config.storage) as store:
            service = NoteConflictService(store)
            note = await service.create_note(bob_edit())

        assert note.version == 1
