# quicknotes/services/note_index.py

from __future__ import annotations

import logging
import threading
from pathlib import Path
from typing import Callable, Iterator, Optional

from quicknotes.core.codec import MalformedIndexError, decode_notes, encode_notes
from quicknotes.core.errors import QuicknotesError
from quicknotes.core.models import Note
from quicknotes.infrastructure.filesystem import FileSystem
from quicknotes.infrastructure.kv_store import KeyValueStore
from quicknotes.settings import APP_NAME, NOTES_INDEX_KEY


Listener = Callable[[], None]


class NoteIndex:
    """
    Ordered list of known documents, newest first, one entry per note id.

    Responsibilities:
    - load + reconcile against the filesystem (stale entries dropped)
    - upsert / remove / delete-from-device / clear
    - persist the whole list to the key/value store after every mutation

    Persistence failures never propagate: the in-memory list stays the
    source of truth for the rest of the process and persist() reports
    the failure through its return value, last_persist_error and the log.
    """

    def __init__(
        self,
        *,
        store: KeyValueStore,
        fs: FileSystem,
        key: str = NOTES_INDEX_KEY,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self._store = store
        self._fs = fs
        self._key = key
        self._log = logger or logging.getLogger(APP_NAME)

        self._lock = threading.RLock()
        self._notes: list[Note] = []
        self._listeners: list[Listener] = []
        self.last_persist_error: Exception | None = None

    # ───────────────────────── queries ─────────────────────────

    def notes(self) -> list[Note]:
        with self._lock:
            return list(self._notes)

    def get(self, note_id: str) -> Optional[Note]:
        with self._lock:
            for note in self._notes:
                if note.id == note_id:
                    return note
        return None

    def find_by_location(self, location: Path) -> Optional[Note]:
        location = Path(location)
        with self._lock:
            for note in self._notes:
                if note.location == location:
                    return note
        return None

    def __len__(self) -> int:
        with self._lock:
            return len(self._notes)

    def __contains__(self, note_id: object) -> bool:
        return isinstance(note_id, str) and self.get(note_id) is not None

    def __iter__(self) -> Iterator[Note]:
        return iter(self.notes())

    # ───────────────────────── listeners ─────────────────────────

    def add_listener(self, callback: Listener) -> None:
        self._listeners.append(callback)

    def remove_listener(self, callback: Listener) -> None:
        try:
            self._listeners.remove(callback)
        except ValueError:
            pass

    def _notify(self) -> None:
        for callback in list(self._listeners):
            try:
                callback()
            except Exception:
                self._log.exception("Index listener failed: %r", callback)

    # ───────────────────────── load ─────────────────────────

    def load(self) -> None:
        try:
            raw = self._store.get(self._key)
        except Exception as exc:
            self._log.warning("Index read failed: key=%s error=%s", self._key, exc)
            raw = None

        if raw is None:
            self._log.info("No saved index: key=%s", self._key)
            return

        try:
            decoded = decode_notes(raw)
        except MalformedIndexError as exc:
            self._log.warning("Malformed index ignored: key=%s error=%s", self._key, exc)
            return

        seen: set[str] = set()
        kept: list[Note] = []
        dropped = 0
        for note in decoded:
            if note.id in seen:
                self._log.warning("Duplicate note id dropped on load: id=%s", note.id)
                continue
            seen.add(note.id)
            if not self._fs.exists(note.location):
                dropped += 1
                self._log.info("Stale note dropped: id=%s location=%s", note.id, note.location)
                continue
            kept.append(note)

        with self._lock:
            self._notes = kept
            self.persist()

        self._log.info("Index loaded: notes=%d stale_dropped=%d", len(kept), dropped)
        self._notify()

    # ───────────────────────── mutations ─────────────────────────

    def upsert(self, note: Note) -> None:
        with self._lock:
            for i, existing in enumerate(self._notes):
                if existing.id == note.id:
                    self._notes[i] = note
                    break
            else:
                self._notes.insert(0, note)
            self.persist()
        self._notify()

    def remove_from_index(self, note_id: str) -> None:
        with self._lock:
            self._notes = [n for n in self._notes if n.id != note_id]
            self.persist()
        self._notify()

    def delete_from_device(self, note_id: str) -> None:
        note = self.get(note_id)
        if note is not None:
            try:
                self._fs.delete(note.location)
                self._log.info("Note file deleted: id=%s location=%s", note.id, note.location)
            except (QuicknotesError, OSError) as exc:
                # index entry goes away regardless
                self._log.warning(
                    "Note file delete failed: id=%s location=%s error=%s",
                    note.id, note.location, exc,
                )
        self.remove_from_index(note_id)

    def clear_all(self) -> None:
        """Forget every note. Files on disk are left untouched."""
        with self._lock:
            count = len(self._notes)
            self._notes = []
            self.persist()
        self._log.info("Index cleared: notes=%d (files kept)", count)
        self._notify()

    # ───────────────────────── persistence ─────────────────────────

    def persist(self) -> bool:
        with self._lock:
            try:
                self._store.set(self._key, encode_notes(self._notes))
            except Exception as exc:
                self.last_persist_error = exc
                self._log.warning(
                    "Index persist failed: key=%s notes=%d error=%s",
                    self._key, len(self._notes), exc,
                )
                return False
            self.last_persist_error = None
            return True
