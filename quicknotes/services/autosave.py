# quicknotes/services/autosave.py

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Optional

from quicknotes.core.errors import QuicknotesError
from quicknotes.core.models import Note
from quicknotes.infrastructure.filesystem import FileSystem, write_recovery_copy
from quicknotes.infrastructure.timers import DebounceTimer
from quicknotes.services.note_index import NoteIndex
from quicknotes.settings import APP_NAME, DEFAULT_ENCODING, RECOVERY_DIR


@dataclass(frozen=True)
class PendingWrite:
    """Note identity and content captured when the delay was armed."""
    note: Note
    content: str
    token: int


class AutoSaveScheduler:
    """
    Debounced auto-save: many edits, one write once typing pauses.

    - one pending write per scheduler (re-arming replaces it)
    - the write uses the note and content captured at schedule time,
      never the live editor buffer
    - a monotonic token drops timer callbacks that outlived their write
    """

    def __init__(
        self,
        *,
        index: NoteIndex,
        fs: FileSystem,
        timer: DebounceTimer,
        encoding: str = DEFAULT_ENCODING,
        on_saved: Optional[Callable[[Note], None]] = None,
        on_failed: Optional[Callable[[Note, Exception], None]] = None,
        recovery_dir: Path = RECOVERY_DIR,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self._index = index
        self._fs = fs
        self._timer = timer
        self._encoding = encoding
        self._on_saved = on_saved
        self._on_failed = on_failed
        self._recovery_dir = recovery_dir
        self._log = logger or logging.getLogger(APP_NAME)

        self._lock = threading.Lock()
        # held for the whole duration of a write; cancel() waits on it
        self._write_lock = threading.RLock()
        self._token = 0
        self._pending: PendingWrite | None = None

    # ───────────────────────── public API ─────────────────────────

    @property
    def pending_note_id(self) -> str | None:
        with self._lock:
            return self._pending.note.id if self._pending else None

    def on_content_changed(self, note: Note | None, content: str) -> None:
        if note is None:
            # scratch buffer: nothing on disk to update
            return

        with self._lock:
            self._token += 1
            token = self._token
            self._pending = PendingWrite(note=note, content=content, token=token)
        self._timer.start(lambda: self._fire(token))

    def cancel(self) -> bool:
        """Drop the pending write. Waits for a write already in progress."""
        self._timer.stop()
        with self._write_lock:
            with self._lock:
                pending, self._pending = self._pending, None
        if pending is not None:
            self._log.debug("Autosave cancelled: id=%s", pending.note.id)
        return pending is not None

    def flush(self) -> bool:
        """Cancel the delay and perform the pending write right now."""
        self._timer.stop()
        with self._write_lock:
            with self._lock:
                pending, self._pending = self._pending, None
            if pending is None:
                return False
            self._log.info("Autosave flush: id=%s location=%s", pending.note.id, pending.note.location)
            return self._write(pending)

    # ───────────────────────── internal ─────────────────────────

    def _fire(self, token: int) -> None:
        with self._write_lock:
            with self._lock:
                pending = self._pending
                if pending is None or pending.token != token:
                    self._log.debug("Autosave skipped: stale timer token=%s", token)
                    return
                self._pending = None
            self._write(pending)

    def _write(self, pending: PendingWrite) -> bool:
        note = pending.note
        try:
            self._fs.write_bytes(note.location, pending.content.encode(self._encoding))
        except (QuicknotesError, OSError, UnicodeEncodeError) as exc:
            self._log.error("Autosave failed: id=%s location=%s error=%s", note.id, note.location, exc)
            self._write_recovery(pending)
            if self._on_failed is not None:
                self._on_failed(note, exc)
            return False

        updated = note.touched(pending.content)
        self._index.upsert(updated)
        self._log.info("Autosaved: id=%s location=%s chars=%d", note.id, note.location, len(pending.content))
        if self._on_saved is not None:
            self._on_saved(updated)
        return True

    def _write_recovery(self, pending: PendingWrite) -> None:
        try:
            rec_path = write_recovery_copy(
                pending.note.location, pending.content, recovery_dir=self._recovery_dir
            )
            self._log.critical("Recovery copy written: %s", rec_path)
        except Exception:
            self._log.exception("Failed to write recovery copy")
