from .codec import MalformedIndexError, decode_notes, encode_notes
from .errors import (
    DiskFullError,
    DocumentDecodeError,
    NoteNotFoundError,
    NotePermissionError,
    NoteReadError,
    NoteWriteError,
    QuicknotesError,
    UnsupportedDocumentError,
)
from .filenames import resolve_available_path, safe_filename
from .models import Note, extract_title, new_note_id

__all__ = ["MalformedIndexError",
           "decode_notes",
           "encode_notes",
           "DiskFullError",
           "DocumentDecodeError",
           "NoteNotFoundError",
           "NotePermissionError",
           "NoteReadError",
           "NoteWriteError",
           "QuicknotesError",
           "UnsupportedDocumentError",
           "resolve_available_path",
           "safe_filename",
           "Note",
           "extract_title",
           "new_note_id",
           ]
