"""
Merge suggestions for edit conflicts.

Proposes a non-destructive merged version of a conflicting note:
- Title and content default to the incoming (most recent) edit
- Tags are the union of both versions, since tags are additive metadata
"""

import logging

from pydantic import BaseModel, ConfigDict, Field, field_validator

from note_conflicts.config import ConflictConfig
from note_conflicts.conflict.detector import Conflict
from note_conflicts.models.note import as_tag_set

logger = logging.getLogger(__name__)


TITLE_KEPT_INCOMING = "Title differs: kept incoming version"
TITLE_KEPT_CURRENT = "Title differs: kept current version as it appears more descriptive"
CONTENT_KEPT_INCOMING = "Content differs: kept incoming version (manual review recommended)"
TAGS_MERGED = "Tags merged from both versions"


class MergeSuggestions(BaseModel):
    """Suggested values for each field plus human-readable notes."""

    model_config = ConfigDict(frozen=True)

    title: str
    content: str
    tags: frozenset[str] = Field(default_factory=frozenset)
    suggestions: list[str] = Field(default_factory=list)

    @field_validator("tags", mode="before")
    @classmethod
    def _coerce_tags(cls, value):
        return as_tag_set(value)


def merge_tags(current: frozenset[str], incoming: frozenset[str]) -> frozenset[str]:
    """Union of two tag sets."""
    return frozenset(current) | frozenset(incoming)


class MergeSuggestionGenerator:
    """
    Generates merge suggestions for a Conflict.

    Deterministic and free of I/O. Never fails: a conflict with no
    diverging fields yields the incoming values and no suggestion lines.
    """

    def __init__(self, config: ConflictConfig | None = None):
        self.config = config or ConflictConfig()

    def suggest(self, conflict: Conflict) -> MergeSuggestions:
        """
        Build suggestions for a conflict.

        Args:
            conflict: The detected conflict

        Returns:
            MergeSuggestions with one line per conflicting field
        """
        suggestions: list[str] = []

        title = self._suggest_title(conflict, suggestions)

        content = conflict.incoming.content
        if conflict.has_content_conflict:
            suggestions.append(CONTENT_KEPT_INCOMING)

        tags = merge_tags(conflict.current.tags, conflict.incoming.tags)
        if conflict.has_tag_conflict:
            suggestions.append(TAGS_MERGED)

        logger.debug(f"Generated {len(suggestions)} merge suggestions for note {conflict.identifier}")

        return MergeSuggestions(
            title=title,
            content=content,
            tags=tags,
            suggestions=suggestions,
        )

    def _suggest_title(self, conflict: Conflict, suggestions: list[str]) -> str:
        """Pick a title, preferring the longer one if configured."""
        if not conflict.has_title_conflict:
            return conflict.incoming.title

        current_title = conflict.current.title
        incoming_title = conflict.incoming.title

        if self.config.prefer_descriptive_title and len(current_title) > len(incoming_title):
            suggestions.append(TITLE_KEPT_CURRENT)
            return current_title

        suggestions.append(TITLE_KEPT_INCOMING)
        return incoming_title
