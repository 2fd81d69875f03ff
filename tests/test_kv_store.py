import sys
import os

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from PySide6.QtCore import QSettings

from quicknotes.core.codec import decode_notes, encode_notes
from quicknotes.infrastructure.filesystem import LocalFileSystem
from quicknotes.infrastructure.kv_store import QSettingsStore
from quicknotes.services.note_index import NoteIndex


def _settings(tmp_path):
    return QSettings(str(tmp_path / "quicknotes.ini"), QSettings.Format.IniFormat)


def test_missing_key(tmp_path):
    assert QSettingsStore(_settings(tmp_path)).get("notes/none") is None


def test_bytes_survive_reopen(tmp_path):
    payload = '[{"id": "x", "title": "a, b; c"}]'.encode("utf-8")
    QSettingsStore(_settings(tmp_path)).set("notes/key", payload)

    assert QSettingsStore(_settings(tmp_path)).get("notes/key") == payload


def test_index_round_trip_through_settings(tmp_path, make_note):
    notes = [make_note("One"), make_note("Two, with comma")]
    first = NoteIndex(store=QSettingsStore(_settings(tmp_path)), fs=LocalFileSystem())
    for n in reversed(notes):
        first.upsert(n)

    second = NoteIndex(store=QSettingsStore(_settings(tmp_path)), fs=LocalFileSystem())
    second.load()

    assert second.notes() == notes
    assert decode_notes(encode_notes(second.notes())) == notes
