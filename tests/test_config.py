"""
Tests for configuration.
"""

import pytest
from pathlib import Path

from note_conflicts.config import NotesConfig, ConflictConfig, StorageConfig


class TestNotesConfig:
    """Tests for the master configuration."""

    def test_defaults(self):
        """Defaults keep the plain incoming-first behaviour."""
        config = NotesConfig()

        assert config.conflict.prefer_descriptive_title is False
        assert config.storage.sqlite_path == Path("./data/notes.db")
        assert config.sync.enabled is True

    def test_round_trip_file(self, temp_directory):
        """Configuration survives a save and load."""
        path = temp_directory / "conf" / "notes.json"
        config = NotesConfig(
            conflict=ConflictConfig(prefer_descriptive_title=True),
            storage=StorageConfig(sqlite_path=temp_directory / "n.db"),
        )

        config.to_file(path)
        loaded = NotesConfig.from_file(path)

        assert loaded == config

    def test_unsupported_format(self, temp_directory):
        """Only JSON files are supported."""
        with pytest.raises(ValueError):
            NotesConfig.from_file(temp_directory / "notes.yaml")
