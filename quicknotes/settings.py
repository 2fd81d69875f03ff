from __future__ import annotations
from pathlib import Path

APP_NAME = "quicknotes"
LOG_DIR = Path.home() / f".{APP_NAME}" / "logs"
LOG_PATH = LOG_DIR / f"{APP_NAME}.log"
RECOVERY_DIR = Path.home() / f".{APP_NAME}" / "recovery"

NOTES_INDEX_KEY = "notes/savedNotesReferences"
AUTOSAVE_DELAY_MS = 1000
TITLE_MAX_LENGTH = 50
DEFAULT_ENCODING = "utf-8"
