"""
Note record models.

Defines the snapshots of a note that flow through conflict resolution:
- VersionedRecord: a note's mutable fields at a point in time
- ResolvedRecord: the outcome of resolving a conflict
- StoredNote: a record as returned by the note store
"""

from collections.abc import Iterable
from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator
from ulid import ULID


def _utcnow() -> datetime:
    """Get current UTC time (naive, for compatibility with the store)."""
    return datetime.utcnow()


def as_tag_set(value: Any) -> frozenset[str]:
    """Coerce any iterable of tag names into a frozenset."""
    if value is None:
        return frozenset()
    if isinstance(value, str):
        return frozenset([value])
    if isinstance(value, Iterable):
        return frozenset(value)
    return value


class VersionedRecord(BaseModel):
    """A snapshot of a note keyed by a stable identifier."""

    model_config = ConfigDict(frozen=True)

    identifier: str = Field(
        default_factory=lambda: str(ULID()),
        description="Opaque note key (ULID by default)",
    )
    title: str = ""
    content: str = ""
    tags: frozenset[str] = Field(default_factory=frozenset)
    editor: str = Field(default="", description="User who produced this version")
    last_modified: datetime = Field(default_factory=_utcnow)
    version: int = Field(
        default=0,
        description="Optimistic concurrency counter assigned by the store",
        ge=0,
    )

    @field_validator("tags", mode="before")
    @classmethod
    def _coerce_tags(cls, value: Any) -> frozenset[str]:
        return as_tag_set(value)

    @property
    def sorted_tags(self) -> list[str]:
        """Tags in a stable order for display."""
        return sorted(self.tags)

    def with_changes(self, **changes: Any) -> "VersionedRecord":
        """Return a copy with the given fields replaced."""
        if "identifier" in changes and changes["identifier"] != self.identifier:
            raise ValueError("identifier is immutable")
        return self.model_validate({**self.model_dump(), **changes})

    def __str__(self) -> str:
        return f"VersionedRecord({self.identifier}, v{self.version}): {self.title[:50]}"


class ResolvedRecord(BaseModel):
    """Final values to persist after a conflict is resolved."""

    model_config = ConfigDict(frozen=True)

    identifier: str
    title: str
    content: str
    tags: frozenset[str] = Field(default_factory=frozenset)
    editor: str = Field(description="User who performed the resolution")

    @field_validator("tags", mode="before")
    @classmethod
    def _coerce_tags(cls, value: Any) -> frozenset[str]:
        return as_tag_set(value)

    @property
    def sorted_tags(self) -> list[str]:
        return sorted(self.tags)


class StoredNote(VersionedRecord):
    """A note as persisted by a note store."""

    created_at: datetime = Field(default_factory=_utcnow)

    def to_record(self) -> VersionedRecord:
        """Drop store-only fields."""
        return VersionedRecord.model_validate(self.model_dump(exclude={"created_at"}))
