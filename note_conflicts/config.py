"""
Configuration management for the note conflict engine.

Provides centralized configuration for:
- Merge suggestion heuristics
- Note storage
- Real-time update channel
"""

from pathlib import Path

from pydantic import BaseModel, Field


class ConflictConfig(BaseModel):
    """Configuration for conflict suggestions."""

    prefer_descriptive_title: bool = Field(
        default=False,
        description="Suggest the current title when it is longer than the incoming one",
    )


class StorageConfig(BaseModel):
    """Configuration for the note store."""

    sqlite_path: Path = Field(
        default=Path("./data/notes.db"),
        description="Path to SQLite database file",
    )


class SyncConfig(BaseModel):
    """Configuration for real-time note updates."""

    enabled: bool = Field(
        default=True,
        description="Publish note updates on the update channel",
    )


class NotesConfig(BaseModel):
    """Master configuration."""

    conflict: ConflictConfig = Field(default_factory=ConflictConfig)
    storage: StorageConfig = Field(default_factory=StorageConfig)
    sync: SyncConfig = Field(default_factory=SyncConfig)

    @classmethod
    def from_file(cls, path: Path) -> "NotesConfig":
        """Load configuration from a JSON file."""
        import json

        if path.suffix == ".json":
            with open(path) as f:
                data = json.load(f)
            return cls.model_validate(data)
        else:
            raise ValueError(f"Unsupported config file format: {path.suffix}")

    def to_file(self, path: Path) -> None:
        """Save configuration to a JSON file."""
        import json

        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w") as f:
            json.dump(self.model_dump(), f, indent=2, default=str)
