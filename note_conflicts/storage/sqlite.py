"""
SQLite note store.

Uses aiosqlite for async operations. Conditional writes are a single
UPDATE guarded by the expected version.
"""

import logging
from datetime import datetime
from typing import Any

import aiosqlite

from note_conflicts.config import StorageConfig
from note_conflicts.models.note import ResolvedRecord, StoredNote, VersionedRecord
from note_conflicts.storage.base import (
    BaseNoteStore,
    NoteNotFoundError,
    StorageError,
    VersionConflictError,
)

logger = logging.getLogger(__name__)


# SQL Schema
SCHEMA = """
CREATE TABLE IF NOT EXISTS notes (
    id TEXT PRIMARY KEY,
    title TEXT NOT NULL,
    content TEXT NOT NULL,
    editor TEXT NOT NULL,
    version INTEGER NOT NULL DEFAULT 1,
    created_at TEXT NOT NULL,
    last_modified TEXT NOT NULL
);

CREATE INDEX IF NOT EXISTS idx_last_modified ON notes(last_modified);

CREATE TABLE IF NOT EXISTS note_tags (
    note_id TEXT NOT NULL,
    tag TEXT NOT NULL,
    PRIMARY KEY (note_id, tag),
    FOREIGN KEY (note_id) REFERENCES notes(id) ON DELETE CASCADE
);

CREATE INDEX IF NOT EXISTS idx_tag ON note_tags(tag);
"""


def _utcnow() -> datetime:
    return datetime.utcnow()


def _serialize_datetime(dt: datetime) -> str:
    """Serialize datetime to ISO format string."""
    return dt.isoformat()


def _deserialize_datetime(s: str) -> datetime:
    """Deserialize datetime from ISO format string."""
    return datetime.fromisoformat(s)


class SQLiteNoteStore(BaseNoteStore):
    """
    SQLite-based note store.

    Tags live in their own table, one row per tag, so set semantics are
    enforced by the primary key.
    """

    def __init__(self, config: StorageConfig | None = None):
        """
        Initialize SQLite storage.

        Args:
            config: Storage configuration
        """
        self.config = config or StorageConfig()
        self.db_path = self.config.sqlite_path
        self._connection: aiosqlite.Connection | None = None
        self._connected = False

    async def connect(self) -> None:
        """Initialize connection and create schema."""
        try:
            self.db_path.parent.mkdir(parents=True, exist_ok=True)

            self._connection = await aiosqlite.connect(str(self.db_path))
            self._connection.row_factory = aiosqlite.Row

            await self._connection.execute("PRAGMA foreign_keys = ON")
            await self._connection.executescript(SCHEMA)
            await self._connection.commit()

            self._connected = True
        except Exception as e:
            raise StorageError(f"Failed to connect to SQLite: {e}") from e

    async def disconnect(self) -> None:
        """Close the database connection."""
        if self._connection:
            await self._connection.close()
            self._connection = None
        self._connected = False

    async def is_connected(self) -> bool:
        """Check if storage is connected."""
        return self._connected and self._connection is not None

    def _ensure_connected(self) -> None:
        """Raise error if not connected."""
        if not self._connected:
            raise StorageError("Not connected to database")

    async def _read_tags(self, note_id: str) -> frozenset[str]:
        async with self._connection.execute(
            "SELECT tag FROM note_tags WHERE note_id = ?", (note_id,)
        ) as cursor:
            rows = await cursor.fetchall()
        return frozenset(row["tag"] for row in rows)

    async def _write_tags(self, note_id: str, tags: frozenset[str]) -> None:
        await self._connection.execute("DELETE FROM note_tags WHERE note_id = ?", (note_id,))
        if tags:
            await self._connection.executemany(
                "INSERT INTO note_tags (note_id, tag) VALUES (?, ?)",
                [(note_id, tag) for tag in sorted(tags)],
            )

    async def _row_to_note(self, row: aiosqlite.Row) -> StoredNote:
        """Convert a database row to a stored note."""
        data: dict[str, Any] = {
            "identifier": row["id"],
            "title": row["title"],
            "content": row["content"],
            "editor": row["editor"],
            "version": row["version"],
            "created_at": _deserialize_datetime(row["created_at"]),
            "last_modified": _deserialize_datetime(row["last_modified"]),
            "tags": await self._read_tags(row["id"]),
        }
        return StoredNote.model_validate(data)

    async def create(self, record: VersionedRecord) -> StoredNote:
        """Create a new note at version 1."""
        self._ensure_connected()

        now = _serialize_datetime(_utcnow())
        query = """
            INSERT INTO notes (id, title, content, editor, version, created_at, last_modified)
            VALUES (?, ?, ?, ?, 1, ?, ?)
        """

        try:
            await self._connection.execute(
                query,
                (record.identifier, record.title, record.content, record.editor, now, now),
            )
            await self._write_tags(record.identifier, record.tags)
            await self._connection.commit()
        except Exception as e:
            await self._connection.rollback()
            raise StorageError(f"Failed to create note: {e}") from e

        logger.info(f"Created note {record.identifier}")
        return await self._read_existing(record.identifier)

    async def read(self, note_id: str) -> StoredNote | None:
        """Read a note by ID."""
        self._ensure_connected()

        async with self._connection.execute(
            "SELECT * FROM notes WHERE id = ?", (note_id,)
        ) as cursor:
            row = await cursor.fetchone()

        if row is None:
            return None

        return await self._row_to_note(row)

    async def _read_existing(self, note_id: str) -> StoredNote:
        note = await self.read(note_id)
        if note is None:
            raise NoteNotFoundError(note_id)
        return note

    async def update_if_version(
        self,
        record: VersionedRecord,
        expected_version: int,
    ) -> StoredNote:
        """Update a note only if its stored version matches."""
        self._ensure_connected()

        query = """
            UPDATE notes
            SET title = ?, content = ?, editor = ?, last_modified = ?, version = version + 1
            WHERE id = ? AND version = ?
        """

        try:
            cursor = await self._connection.execute(
                query,
                (
                    record.title,
                    record.content,
                    record.editor,
                    _serialize_datetime(_utcnow()),
                    record.identifier,
                    expected_version,
                ),
            )
            updated = cursor.rowcount > 0
            if updated:
                await self._write_tags(record.identifier, record.tags)
            await self._connection.commit()
        except Exception as e:
            await self._connection.rollback()
            raise StorageError(f"Failed to update note: {e}") from e

        if not updated:
            existing = await self._read_existing(record.identifier)
            logger.warning(
                f"Version conflict detected for note {record.identifier}: "
                f"expected={expected_version}, actual={existing.version}"
            )
            raise VersionConflictError(record.identifier, expected_version, existing.version)

        note = await self._read_existing(record.identifier)
        logger.info(f"Updated note {note.identifier} to version {note.version}")
        return note

    async def force_update(self, resolved: ResolvedRecord) -> StoredNote:
        """Update a note without a version check."""
        self._ensure_connected()

        query = """
            UPDATE notes
            SET title = ?, content = ?, editor = ?, last_modified = ?, version = version + 1
            WHERE id = ?
        """

        try:
            cursor = await self._connection.execute(
                query,
                (
                    resolved.title,
                    resolved.content,
                    resolved.editor,
                    _serialize_datetime(_utcnow()),
                    resolved.identifier,
                ),
            )
            updated = cursor.rowcount > 0
            if updated:
                await self._write_tags(resolved.identifier, resolved.tags)
            await self._connection.commit()
        except Exception as e:
            await self._connection.rollback()
            raise StorageError(f"Failed to force update note: {e}") from e

        if not updated:
            raise NoteNotFoundError(resolved.identifier)

        note = await self._read_existing(resolved.identifier)
        logger.info(f"Force updated note {note.identifier} after conflict resolution")
        return note

    async def delete(self, note_id: str) -> bool:
        """Delete a note by ID."""
        self._ensure_connected()

        try:
            cursor = await self._connection.execute("DELETE FROM notes WHERE id = ?", (note_id,))
            await self._connection.commit()
            return cursor.rowcount > 0
        except Exception as e:
            await self._connection.rollback()
            raise StorageError(f"Failed to delete note: {e}") from e

    async def list_notes(self, limit: int = 100, offset: int = 0) -> list[StoredNote]:
        """List notes, most recently modified first."""
        self._ensure_connected()

        query = """
            SELECT * FROM notes
            ORDER BY last_modified DESC
            LIMIT ? OFFSET ?
        """

        rows = []
        async with self._connection.execute(query, (limit, offset)) as cursor:
            async for row in cursor:
                rows.append(row)

        return [await self._row_to_note(row) for row in rows]
