# quicknotes/services/session.py

from __future__ import annotations

import logging
from datetime import datetime
from pathlib import Path
from typing import Callable, Optional

from quicknotes.core.errors import DocumentDecodeError, NoteNotFoundError, QuicknotesError
from quicknotes.core.filenames import resolve_available_path
from quicknotes.core.models import Note, extract_title, new_note_id
from quicknotes.infrastructure.filesystem import FileSystem
from quicknotes.infrastructure.timers import DebounceTimer
from quicknotes.services.autosave import AutoSaveScheduler
from quicknotes.services.importer import read_document
from quicknotes.services.note_index import NoteIndex
from quicknotes.settings import APP_NAME, DEFAULT_ENCODING, RECOVERY_DIR


class EditingSession:
    """
    What the UI talks to: the open document, its buffer and the index.

    Invariants:
    - a pending auto-save never outlives the document it was armed for
      (switching documents flushes it, explicit saves cancel it)
    - a failed explicit save re-arms the auto-save, so close() still
      writes the edit
    - scratch content (no current note) is never written automatically
    """

    def __init__(
        self,
        *,
        index: NoteIndex,
        fs: FileSystem,
        timer: DebounceTimer,
        encoding: str = DEFAULT_ENCODING,
        on_autosave_failed: Optional[Callable[[Note, Exception], None]] = None,
        recovery_dir: Path = RECOVERY_DIR,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self._index = index
        self._fs = fs
        self._encoding = encoding
        self._on_autosave_failed_cb = on_autosave_failed
        self._log = logger or logging.getLogger(APP_NAME)

        self.current_note: Note | None = None
        self.content: str = ""

        self._scheduler = AutoSaveScheduler(
            index=index,
            fs=fs,
            timer=timer,
            encoding=encoding,
            on_saved=self._on_autosaved,
            on_failed=self._on_autosave_failed,
            recovery_dir=recovery_dir,
            logger=self._log,
        )

    @property
    def index(self) -> NoteIndex:
        return self._index

    @property
    def scheduler(self) -> AutoSaveScheduler:
        return self._scheduler

    # ───────────────────────── listing / opening ─────────────────────────

    def list_notes(self) -> list[Note]:
        return self._index.notes()

    def open_note(self, note_id: str) -> str:
        note = self._index.get(note_id)
        if note is None:
            raise NoteNotFoundError(f"Unknown note id: {note_id}")

        self._scheduler.flush()

        raw = self._fs.read_bytes(note.location)
        try:
            content = raw.decode(self._encoding)
        except UnicodeDecodeError as exc:
            raise DocumentDecodeError(f"{note.location.name} is not valid {self._encoding} text") from exc

        self.current_note = note
        self.content = content
        self._log.info("Note opened: id=%s location=%s", note.id, note.location)
        return content

    def create_note(self) -> None:
        self._scheduler.flush()
        self.current_note = None
        self.content = ""
        self._log.info("New scratch document")

    # ───────────────────────── editing / saving ─────────────────────────

    def on_edit(self, content: str) -> None:
        self.content = content
        self._scheduler.on_content_changed(self.current_note, content)

    def save_current_as(self, title: str | None, directory: Path) -> Note:
        """
        Save the buffer as a new .txt file in `directory` (collision-free name).
        Keeps the current note id, so a re-save moves the entry instead of
        duplicating it.
        """
        self._scheduler.cancel()

        title = (title or "").strip() or extract_title(self.content)
        path = resolve_available_path(title, Path(directory), exists=self._fs.is_taken)
        self._write_or_rearm(path)

        note = Note(
            id=self.current_note.id if self.current_note else new_note_id(),
            title=title,
            location=path,
            saved_at=datetime.now(),
        )
        self._index.upsert(note)
        self.current_note = note
        self._log.info("Note saved as: id=%s location=%s", note.id, path)
        return note

    def save_current(self) -> Note | None:
        self._scheduler.cancel()
        note = self.current_note
        if note is None:
            return None

        self._write_or_rearm(note.location)
        updated = note.touched(self.content)
        self._index.upsert(updated)
        self.current_note = updated
        self._log.info("Note saved: id=%s location=%s", note.id, note.location)
        return updated

    # ───────────────────────── deleting ─────────────────────────

    def delete_from_recent(self, note_id: str) -> None:
        self._index.remove_from_index(note_id)

    def delete_from_device(self, note_id: str) -> None:
        if self.current_note is not None and self.current_note.id == note_id:
            # a pending auto-save must not recreate the deleted file
            self._scheduler.cancel()
            self.current_note = None
        self._index.delete_from_device(note_id)

    def clear_all(self) -> None:
        self._index.clear_all()

    # ───────────────────────── import ─────────────────────────

    def import_document(self, path: Path) -> Note:
        """
        Register an existing file as a note. The file is not copied:
        later saves overwrite the original in place.
        """
        path = Path(path).absolute()
        # the file may be the open note; its pending edit must land first
        self._scheduler.flush()
        doc = read_document(path, self._fs, encoding=self._encoding)

        existing = self._index.find_by_location(path)
        note = Note(
            id=existing.id if existing else new_note_id(),
            title=doc.title,
            location=path,
            saved_at=datetime.now(),
        )
        self._index.upsert(note)
        self.current_note = note
        self.content = doc.content
        self._log.info("Document imported: id=%s location=%s", note.id, path)
        return note

    # ───────────────────────── lifecycle ─────────────────────────

    def close(self) -> None:
        self._scheduler.flush()
        self._log.info("Session closed")

    def _write_or_rearm(self, path: Path) -> None:
        try:
            self._fs.write_bytes(path, self.content.encode(self._encoding))
        except (QuicknotesError, OSError, UnicodeEncodeError):
            if self.current_note is not None:
                self._scheduler.on_content_changed(self.current_note, self.content)
            raise

    # ───────────────────────── scheduler callbacks ─────────────────────────

    def _on_autosaved(self, note: Note) -> None:
        current = self.current_note
        if current is not None and current.id == note.id and current.location == note.location:
            self.current_note = note

    def _on_autosave_failed(self, note: Note, exc: Exception) -> None:
        if self._on_autosave_failed_cb is not None:
            self._on_autosave_failed_cb(note, exc)
