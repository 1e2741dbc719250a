"""
Real-time note update channel.

An explicit connection object owned by its caller. Subscriptions are
scoped registrations: unsubscribing releases them. Provides:
- Note created/updated/deleted messages
- Subscribe/unsubscribe handles usable as context managers
- A notes sync helper that ignores the current user's own updates
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Callable

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    """Get current UTC time (naive)."""
    return datetime.utcnow()


class NoteUpdateType(str, Enum):
    """Types of note update messages."""

    NOTE_CREATED = "note_created"
    NOTE_UPDATED = "note_updated"
    NOTE_DELETED = "note_deleted"


@dataclass
class NoteUpdateMessage:
    """A change to a note broadcast to subscribers."""

    type: NoteUpdateType
    note_id: str
    user_id: str
    title: str | None = None
    content: str | None = None
    tag_names: list[str] = field(default_factory=list)
    timestamp: datetime = field(default_factory=_utcnow)


NoteUpdateCallback = Callable[[NoteUpdateMessage], None]


class Subscription:
    """Handle for a registered callback."""

    def __init__(self, channel: "NoteUpdateChannel", callback: NoteUpdateCallback):
        self._channel = channel
        self.callback = callback
        self._active = True

    @property
    def active(self) -> bool:
        return self._active

    def unsubscribe(self) -> bool:
        """
        Release the registration.

        Returns:
            True if this call removed it, False if it was already released
        """
        if not self._active:
            return False
        self._active = False
        return self._channel._remove(self)

    def __enter__(self) -> "Subscription":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.unsubscribe()


class NoteUpdateChannel:
    """
    Channel delivering note updates to subscribers.

    Nothing is delivered while disconnected.
    """

    def __init__(self):
        self._subscriptions: list[Subscription] = []
        self._connected = False

    def connect(self) -> None:
        self._connected = True
        logger.info("Note update channel connected")

    def disconnect(self) -> None:
        self._connected = False
        logger.info("Note update channel disconnected")

    @property
    def is_connected(self) -> bool:
        return self._connected

    @property
    def connection_status(self) -> str:
        return "connected" if self._connected else "disconnected"

    @property
    def subscriber_count(self) -> int:
        return len(self._subscriptions)

    def subscribe(self, callback: NoteUpdateCallback) -> Subscription:
        """
        Register a callback for note updates.

        Args:
            callback: Function called with each NoteUpdateMessage

        Returns:
            Subscription whose unsubscribe() releases the callback
        """
        subscription = Subscription(self, callback)
        self._subscriptions.append(subscription)
        return subscription

    def _remove(self, subscription: Subscription) -> bool:
        if subscription in self._subscriptions:
            self._subscriptions.remove(subscription)
            return True
        return False

    def publish(self, message: NoteUpdateMessage) -> list[Exception]:
        """
        Deliver a message to every subscriber.

        Args:
            message: The note update

        Returns:
            List of any exceptions raised by callbacks
        """
        if not self._connected:
            logger.debug(f"Dropped {message.type.value} for note {message.note_id}: channel disconnected")
            return []

        errors = []

        # Copy so callbacks may unsubscribe while we iterate
        for subscription in list(self._subscriptions):
            try:
                subscription.callback(message)
            except Exception as e:
                logger.error(f"Note update subscriber failed: {e}")
                errors.append(e)

        return errors


class NotesSync:
    """
    Keeps a notes view in sync with updates from other users.

    The current user's identity is injected; updates the current user
    made themselves are not forwarded.
    """

    def __init__(
        self,
        channel: NoteUpdateChannel,
        current_user_id: str,
        on_update: NoteUpdateCallback,
    ):
        self.channel = channel
        self.current_user_id = current_user_id
        self.on_update = on_update
        self._subscription = channel.subscribe(self._handle)

    def _handle(self, message: NoteUpdateMessage) -> None:
        if message.user_id == self.current_user_id:
            return
        self.on_update(message)

    @property
    def is_connected(self) -> bool:
        return self.channel.is_connected and self._subscription.active

    def close(self) -> None:
        """Stop receiving updates."""
        self._subscription.unsubscribe()
