"""Pytest configuration and shared fixtures."""

import tempfile
from pathlib import Path

import pytest

from wireshape.formats import BUILTIN_FORMATS, clear_registry, register_format


class RecordingStore:
    """Object store that records load requests and tracks loaded paths per object."""

    def __init__(self):
        self.loaded: dict[int, set[str]] = {}
        self.calls: list[tuple[list, list[str]]] = []
        self.events: list[str] = []
        self.error: Exception | None = None

    def mark_loaded(self, obj, *paths):
        self.loaded.setdefault(id(obj), set()).update(paths)

    def is_relation_loaded(self, obj, path):
        return path in self.loaded.get(id(obj), set())

    def load_relations(self, objects, paths):
        self.calls.append((list(objects), list(paths)))
        self.events.append("load")
        if self.error is not None:
            raise self.error
        for obj in objects:
            self.mark_loaded(obj, *paths)


@pytest.fixture
def temp_dir():
    """Create a temporary directory for test files."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def recording_store():
    """Store that records every load request."""
    return RecordingStore()


@pytest.fixture
def cli_vars():
    """Fixture providing CLI variables for testing."""
    return {
        "show_emails": "true",
        "date_pattern": "%Y/%m/%d",
    }


@pytest.fixture
def reset_formats():
    """Restore the built-in formats after a test that changes the registry."""
    yield
    clear_registry()
    for kind, factory in BUILTIN_FORMATS.items():
        register_format(kind, factory)
