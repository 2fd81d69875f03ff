from .filesystem import (
    FileSystem,
    LocalFileSystem,
    atomic_write_bytes,
    atomic_write_text,
    write_recovery_copy,
)
from .kv_store import KeyValueStore, QSettingsStore
from .timers import DebounceTimer, QtDebounceTimer, ThreadingDebounceTimer

__all__ = ["FileSystem",
           "LocalFileSystem",
           "atomic_write_bytes",
           "atomic_write_text",
           "write_recovery_copy",
           "KeyValueStore",
           "QSettingsStore",
           "DebounceTimer",
           "QtDebounceTimer",
           "ThreadingDebounceTimer",
           ]
