from __future__ import annotations

from dataclasses import dataclass

from PySide6.QtCore import QSettings

from quicknotes.settings import NOTES_INDEX_KEY


@dataclass(frozen=True)
class SettingsKeys:
    NOTES_INDEX: str = NOTES_INDEX_KEY
    AUTOSAVE_MS: str = "editor/autosave_ms"
    LAST_SAVE_DIR: str = "paths/last_save_dir"
    LAST_IMPORT_DIR: str = "paths/last_import_dir"
    UI_GEOMETRY: str = "ui/geometry"


def get_str(settings: QSettings, key: str, default: str) -> str:
    try:
        val = settings.value(key, default)
        return str(val) if val is not None else default
    except Exception:
        return default


def get_int(settings: QSettings, key: str, default: int) -> int:
    try:
        return int(settings.value(key, default))
    except Exception:
        return default
