from .autosave import AutoSaveScheduler, PendingWrite
from .importer import ImportedDocument, read_document
from .note_index import NoteIndex
from .session import EditingSession

__all__ = ["AutoSaveScheduler",
           "PendingWrite",
           "ImportedDocument",
           "read_document",
           "NoteIndex",
           "EditingSession",
           ]
