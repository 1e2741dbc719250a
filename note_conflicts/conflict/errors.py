"""
Conflict engine exceptions.
"""

from enum import Enum


class ConflictField(str, Enum):
    """Note fields that can be in conflict."""

    TITLE = "title"
    CONTENT = "content"
    TAGS = "tags"


class ConflictError(Exception):
    """Base exception for conflict engine errors."""

    pass


class IdentifierMismatch(ConflictError):
    """Raised when asked to compare records of two different notes.

    Indicates a bug in the calling write path, never a user error.
    """

    def __init__(self, current_id: str, incoming_id: str):
        self.current_id = current_id
        self.incoming_id = incoming_id
        super().__init__(
            f"Cannot compare records with different identifiers: "
            f"{current_id!r} != {incoming_id!r}"
        )


class MissingOverride(ConflictError):
    """Raised when manual_merge is chosen for a field without a value."""

    def __init__(self, field: ConflictField):
        self.field = field
        super().__init__(f"manual_merge chosen for '{field.value}' but no override supplied")


class SessionClosed(ConflictError):
    """Raised when acting on a conflict session that already ended."""

    pass
