"""
Pytest configuration and shared fixtures.
"""

import pytest
import tempfile
from datetime import datetime, timedelta
from pathlib import Path

from note_conflicts.models.note import VersionedRecord


@pytest.fixture
def temp_directory():
    """Create a temporary directory for tests."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def note_id():
    """Provide a stable note identifier."""
    return "note_01"


@pytest.fixture
def current_record(note_id):
    """Stored version of a note, saved by alice."""
    return VersionedRecord(
        identifier=note_id,
        title="Meeting Notes",
        content="Draft A",
        tags=["work"],
        editor="alice",
        last_modified=datetime(2024, 5, 1, 9, 30) - timedelta(minutes=30),
        version=2,
    )


@pytest.fixture
def incoming_record(note_id):
    """Bob's edit of the same note, based on an older version."""
    return VersionedRecord(
        identifier=note_id,
        title="Meeting Notes",
        content="Draft B",
        tags=["urgent"],
        editor="bob",
        last_modified=datetime(2024, 5, 1, 9, 30),
        version=1,
    )
