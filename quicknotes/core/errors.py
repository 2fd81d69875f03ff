from __future__ import annotations

import errno
from pathlib import Path


class QuicknotesError(Exception):
    """Base class for errors surfaced to the UI."""


class NoteNotFoundError(QuicknotesError):
    """A referenced file (or note id) does not exist."""


class NoteReadError(QuicknotesError):
    pass


class NoteWriteError(QuicknotesError):
    pass


class NotePermissionError(NoteWriteError):
    """Permission denied. Raised from reads and deletes as well as writes."""


class DiskFullError(NoteWriteError):
    pass


class DocumentDecodeError(QuicknotesError):
    """Imported bytes are not valid text in the declared encoding."""


class UnsupportedDocumentError(QuicknotesError):
    pass


_DISK_FULL_ERRNOS = {errno.ENOSPC, getattr(errno, "EDQUOT", errno.ENOSPC)}


def translate_os_error(exc: OSError, path: Path, *, writing: bool) -> QuicknotesError:
    """Map an OSError raised for `path` onto the note error taxonomy."""
    if isinstance(exc, FileNotFoundError):
        return NoteNotFoundError(f"File not found: {path}")
    if isinstance(exc, PermissionError):
        return NotePermissionError(f"Permission denied: {path}")
    if exc.errno in _DISK_FULL_ERRNOS:
        return DiskFullError(f"Disk is full, cannot write: {path}")
    if writing:
        return NoteWriteError(f"Cannot write {path}: {exc}")
    return NoteReadError(f"Cannot read {path}: {exc}")
