"""
Abstract base class for note stores.

Defines the interface the write path relies on for optimistic concurrency.
"""

from abc import ABC, abstractmethod

from note_conflicts.models.note import ResolvedRecord, StoredNote, VersionedRecord


# Custom exceptions
class StorageError(Exception):
    """Base exception for storage errors."""

    pass


class NoteNotFoundError(StorageError):
    """Raised when a note is not found."""

    def __init__(self, note_id: str):
        self.note_id = note_id
        super().__init__(f"Note not found: {note_id}")


class VersionConflictError(StorageError):
    """Raised when a conditional write finds a newer stored version."""

    def __init__(self, note_id: str, expected_version: int, actual_version: int):
        self.note_id = note_id
        self.expected_version = expected_version
        self.actual_version = actual_version
        super().__init__(
            f"Version conflict for note {note_id}: "
            f"expected={expected_version}, actual={actual_version}"
        )


class BaseNoteStore(ABC):
    """
    Abstract base class for note storage backends.

    Owns durable state and version numbers. Every successful write bumps
    the stored version by one.
    """

    @abstractmethod
    async def connect(self) -> None:
        """Initialize connection to storage backend."""
        pass

    @abstractmethod
    async def disconnect(self) -> None:
        """Close connection to storage backend."""
        pass

    @abstractmethod
    async def is_connected(self) -> bool:
        """Check if storage is connected."""
        pass

    @abstractmethod
    async def create(self, record: VersionedRecord) -> StoredNote:
        """
        Create a new note.

        Args:
            record: The note to store (its version is ignored)

        Returns:
            The stored note at version 1
        """
        pass

    @abstractmethod
    async def read(self, note_id: str) -> StoredNote | None:
        """
        Read a note by ID.

        Returns:
            The note if found, None otherwise
        """
        pass

    @abstractmethod
    async def update_if_version(
        self,
        record: VersionedRecord,
        expected_version: int,
    ) -> StoredNote:
        """
        Update a note only if its stored version matches.

        Args:
            record: New values (identifier selects the note)
            expected_version: Version the edit was based on

        Returns:
            The stored note with its new version

        Raises:
            NoteNotFoundError: If the note does not exist
            VersionConflictError: If the stored version differs
        """
        pass

    @abstractmethod
    async def force_update(self, resolved: ResolvedRecord) -> StoredNote:
        """
        Update a note without a version check, after conflict resolution.

        Raises:
            NoteNotFoundError: If the note does not exist
        """
        pass

    @abstractmethod
    async def delete(self, note_id: str) -> bool:
        """
        Delete a note by ID.

        Returns:
            True if deleted, False if not found
        """
        pass

    @abstractmethod
    async def list_notes(self, limit: int = 100, offset: int = 0) -> list[StoredNote]:
        """List notes, most recently modified first."""
        pass

    async def __aenter__(self) -> "BaseNoteStore":
        await self.connect()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.disconnect()
