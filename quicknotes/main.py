from __future__ import annotations

import sys

from PySide6.QtCore import QSettings
from PySide6.QtWidgets import QApplication

from quicknotes.app_settings import SettingsKeys, get_int
from quicknotes.infrastructure.filesystem import LocalFileSystem
from quicknotes.infrastructure.kv_store import QSettingsStore
from quicknotes.infrastructure.timers import QtDebounceTimer
from quicknotes.logging_setup import SESSION_ID, install_global_exception_hooks, setup_logging
from quicknotes.services.note_index import NoteIndex
from quicknotes.settings import APP_NAME, AUTOSAVE_DELAY_MS
from quicknotes.ui.main_window import NotesWindow
from quicknotes.ui.tray import build_tray_icon


def main() -> int:
    log = setup_logging()
    install_global_exception_hooks(log)

    app = QApplication(sys.argv)
    app.setApplicationName(APP_NAME)
    app.setQuitOnLastWindowClosed(False)

    # QSettings picks the right place for the current OS.
    settings = QSettings(APP_NAME, APP_NAME)
    fs = LocalFileSystem()

    index = NoteIndex(store=QSettingsStore(settings), fs=fs, logger=log)
    index.load()

    delay_ms = get_int(settings, SettingsKeys.AUTOSAVE_MS, AUTOSAVE_DELAY_MS)
    win = NotesWindow(
        settings=settings,
        index=index,
        fs=fs,
        timer=QtDebounceTimer(interval_ms=delay_ms, parent=app),
    )
    app.aboutToQuit.connect(win.shutdown)

    tray = build_tray_icon(app, win)
    if tray is None:
        app.setQuitOnLastWindowClosed(True)
        log.warning("System tray unavailable; running as a regular window")
    win.show()

    log.info("Application started, SID=%s notes=%d autosave_ms=%d", SESSION_ID, len(index), delay_ms)
    return app.exec()


if __name__ == "__main__":
    raise SystemExit(main())
