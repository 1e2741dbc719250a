"""
Tests for note record models.
"""

import pytest
from pydantic import ValidationError

from note_conflicts.models.note import VersionedRecord, ResolvedRecord, StoredNote


class TestVersionedRecord:
    """Tests for VersionedRecord."""

    def test_default_identifier_is_generated(self):
        """Each new record gets its own identifier."""
        a = VersionedRecord(title="A")
        b = VersionedRecord(title="B")

        assert a.identifier
        assert a.identifier != b.identifier

    def test_tags_have_set_semantics(self):
        """Duplicate tags collapse and order is irrelevant."""
        record = VersionedRecord(tags=["work", "urgent", "work"])

        assert record.tags == frozenset({"work", "urgent"})
        assert record == VersionedRecord(
            identifier=record.identifier,
            tags=["urgent", "work"],
            last_modified=record.last_modified,
        )

    def test_sorted_tags(self):
        """Tags can be listed in a stable order."""
        record = VersionedRecord(tags={"b", "a", "c"})

        assert record.sorted_tags == ["a", "b", "c"]

    def test_identifier_is_immutable(self):
        """Records are frozen."""
        record = VersionedRecord(identifier="note_1")

        with pytest.raises(ValidationError):
            record.identifier = "note_2"

    def test_with_changes(self):
        """with_changes returns a modified copy."""
        record = VersionedRecord(identifier="note_1", title="Old")

        changed = record.with_changes(title="New", tags=["x"])

        assert changed.title == "New"
        assert changed.tags == frozenset({"x"})
        assert record.title == "Old"

    def test_with_changes_rejects_new_identifier(self):
        """The identifier cannot be changed through with_changes."""
        record = VersionedRecord(identifier="note_1")

        with pytest.raises(ValueError):
            record.with_changes(identifier="note_2")

    def test_negative_version_rejected(self):
        """Versions start at zero."""
        with pytest.raises(ValidationError):
            VersionedRecord(version=-1)


class TestResolvedRecord:
    """Tests for ResolvedRecord."""

    def test_requires_editor(self):
        """A resolution is always attributed to someone."""
        with pytest.raises(ValidationError):
            ResolvedRecord(identifier="n", title="t", content="c")

    def test_tags_coerced(self):
        """Tags passed as a list become a frozenset."""
        resolved = ResolvedRecord(
            identifier="n", title="t", content="c", tags=["a", "a"], editor="bob"
        )

        assert resolved.tags == frozenset({"a"})


class TestStoredNote:
    """Tests for StoredNote."""

    def test_to_record_drops_created_at(self):
        """to_record returns a plain VersionedRecord."""
        note = StoredNote(identifier="n", title="t", version=3)

        record = note.to_record()

        assert type(record) is VersionedRecord
        assert record.identifier == "n"
        assert record.version == 3
