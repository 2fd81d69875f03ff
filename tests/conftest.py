import sys
import os
from datetime import datetime
from pathlib import Path

import pytest

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from quicknotes.core.errors import NotePermissionError
from quicknotes.core.models import Note, new_note_id
from quicknotes.infrastructure.filesystem import LocalFileSystem
from quicknotes.services.note_index import NoteIndex


class MemoryStore:
    """In-memory key/value store; `fail_writes` makes set() raise."""

    def __init__(self):
        self.data: dict[str, bytes] = {}
        self.writes = 0
        self.fail_writes = False

    def get(self, key):
        return self.data.get(key)

    def set(self, key, value):
        if self.fail_writes:
            raise OSError("settings store is read-only")
        self.writes += 1
        self.data[key] = value


class ManualTimer:
    """Debounce timer that only fires when the test says so."""

    def __init__(self):
        self._callback = None
        self.starts = 0

    def start(self, callback):
        self.starts += 1
        self._callback = callback

    def stop(self):
        self._callback = None

    def is_active(self):
        return self._callback is not None

    def fire(self):
        callback, self._callback = self._callback, None
        assert callback is not None, "timer was not armed"
        callback()


class RecordingFileSystem(LocalFileSystem):
    """Real disk access plus a write log and switchable failures."""

    def __init__(self):
        self.writes: list[tuple[Path, bytes]] = []
        self.write_error: Exception | None = None
        self.delete_error: Exception | None = None

    def write_bytes(self, path, data):
        if self.write_error is not None:
            raise self.write_error
        self.writes.append((Path(path), data))
        super().write_bytes(path, data)

    def delete(self, path):
        if self.delete_error is not None:
            raise self.delete_error
        super().delete(path)


@pytest.fixture
def store():
    return MemoryStore()


@pytest.fixture
def fs():
    return RecordingFileSystem()


@pytest.fixture
def timer():
    return ManualTimer()


@pytest.fixture
def index(store, fs):
    return NoteIndex(store=store, fs=fs)


@pytest.fixture
def make_note(tmp_path):
    """Factory: Note backed by a real file in tmp_path (unless create=False)."""

    def _make(title="Note", *, content=None, create=True, note_id=None, name=None):
        path = tmp_path / (name or f"{title}.txt")
        if create:
            path.write_text(content if content is not None else title, encoding="utf-8")
        return Note(
            id=note_id or new_note_id(),
            title=title,
            location=path,
            saved_at=datetime(2024, 5, 1, 12, 30, 15),
        )

    return _make


@pytest.fixture
def permission_denied():
    return NotePermissionError("Permission denied: test")
