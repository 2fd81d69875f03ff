from __future__ import annotations

import logging
from pathlib import Path

from PySide6.QtCore import QSettings, Qt, QTimer, Signal
from PySide6.QtGui import QFont
from PySide6.QtWidgets import (
    QApplication, QWidget, QHBoxLayout, QVBoxLayout, QLabel, QListWidget,
    QListWidgetItem, QPlainTextEdit, QPushButton, QStackedWidget, QToolButton,
    QFileDialog, QFrame,
)

from quicknotes.app_settings import SettingsKeys, get_str
from quicknotes.core.errors import QuicknotesError
from quicknotes.core.models import Note, extract_title
from quicknotes.infrastructure.filesystem import FileSystem
from quicknotes.infrastructure.timers import DebounceTimer
from quicknotes.services.importer import SUPPORTED_SUFFIXES
from quicknotes.services.note_index import NoteIndex
from quicknotes.services.session import EditingSession
from quicknotes.settings import APP_NAME
from quicknotes.ui.dialogs import ask_delete_action, confirm_clear_all, show_error
from quicknotes.ui.qt_utils import blocked_signals, safe_set_setting


log = logging.getLogger(APP_NAME)

WINDOW_SIZE = (650, 600)
IMPORT_FILTER = "Documents ({})".format(" ".join(f"*{s}" for s in SUPPORTED_SUFFIXES))


def _flat_button(text: str) -> QPushButton:
    btn = QPushButton(text)
    btn.setFlat(True)
    btn.setCursor(Qt.CursorShape.PointingHandCursor)
    return btn


def _divider() -> QFrame:
    line = QFrame()
    line.setFrameShape(QFrame.Shape.HLine)
    line.setFrameShadow(QFrame.Shadow.Sunken)
    return line


class _NoteRow(QWidget):
    """One library entry: title, path, save date and a trash button."""
    openRequested = Signal(str)
    deleteRequested = Signal(str)

    def __init__(self, note: Note):
        super().__init__()
        self._note_id = note.id

        title = QLabel(note.title)
        font = QFont(title.font())
        font.setPointSize(font.pointSize() + 2)
        font.setWeight(QFont.Weight.Medium)
        title.setFont(font)

        path = QLabel(str(note.location))
        path.setStyleSheet("color: gray; font-size: 11px;")
        path.setTextInteractionFlags(Qt.TextInteractionFlag.NoTextInteraction)

        saved = QLabel(note.saved_at.strftime("%d %b %Y, %H:%M"))
        saved.setStyleSheet("color: gray; font-size: 11px;")

        text_col = QVBoxLayout()
        text_col.setSpacing(4)
        text_col.addWidget(title)
        text_col.addWidget(path)
        text_col.addWidget(saved)

        trash = QToolButton()
        trash.setText("🗑")
        trash.setToolTip("Delete…")
        trash.setAutoRaise(True)
        trash.clicked.connect(lambda: self.deleteRequested.emit(self._note_id))

        row = QHBoxLayout(self)
        row.setContentsMargins(14, 10, 14, 10)
        row.addLayout(text_col, 1)
        row.addWidget(trash)

    def mouseReleaseEvent(self, event):  # type: ignore[override]
        if event.button() == Qt.MouseButton.LeftButton:
            self.openRequested.emit(self._note_id)
        super().mouseReleaseEvent(event)


class NotesWindow(QWidget):
    """
    Two pages: the editor and the "Previous Documents" library.

    All document state lives in EditingSession; this class only maps
    buttons and editor signals onto it and shows errors.
    """

    def __init__(
        self,
        *,
        settings: QSettings,
        index: NoteIndex,
        fs: FileSystem,
        timer: DebounceTimer,
    ):
        super().__init__()
        self.setWindowTitle("Quicknotes")
        self.resize(*WINDOW_SIZE)

        self._settings = settings
        self.session = EditingSession(
            index=index,
            fs=fs,
            timer=timer,
            on_autosave_failed=self._on_autosave_failed,
        )

        self._stack = QStackedWidget()
        self._editor_page = self._build_editor_page()
        self._library_page = self._build_library_page()
        self._stack.addWidget(self._editor_page)
        self._stack.addWidget(self._library_page)

        root = QVBoxLayout(self)
        root.setContentsMargins(0, 0, 0, 0)
        root.addWidget(self._stack)

        index.add_listener(self._schedule_refresh)
        self.refresh_library()

        geo = self._settings.value(SettingsKeys.UI_GEOMETRY)
        if geo:
            self.restoreGeometry(geo)

    # ───────────────────────── pages ─────────────────────────

    def _build_editor_page(self) -> QWidget:
        page = QWidget()

        btn_save = _flat_button("Save Document")
        btn_import = _flat_button("Import Document")
        btn_new = _flat_button("New Document")
        btn_save.clicked.connect(self.save_document)
        btn_import.clicked.connect(self.import_document)
        btn_new.clicked.connect(self.new_document)

        top = QHBoxLayout()
        top.setContentsMargins(20, 12, 20, 12)
        top.addWidget(btn_save)
        top.addWidget(btn_import)
        top.addStretch(1)
        top.addWidget(btn_new)

        self.editor = QPlainTextEdit()
        self.editor.setFrameShape(QFrame.Shape.NoFrame)
        font = QFont(self.editor.font())
        font.setPointSize(16)
        self.editor.setFont(font)
        self.editor.setPlaceholderText("Start typing…")
        self.editor.textChanged.connect(self._on_text_changed)

        btn_library = _flat_button("Open Previous Documents")
        btn_library.clicked.connect(self.show_library)

        bottom = QHBoxLayout()
        bottom.setContentsMargins(20, 8, 20, 8)
        bottom.addWidget(btn_library)
        bottom.addStretch(1)

        layout = QVBoxLayout(page)
        layout.setContentsMargins(0, 0, 0, 0)
        layout.setSpacing(0)
        layout.addLayout(top)
        layout.addWidget(_divider())
        layout.addWidget(self.editor, 1)
        layout.addWidget(_divider())
        layout.addLayout(bottom)
        return page

    def _build_library_page(self) -> QWidget:
        page = QWidget()

        btn_clear = _flat_button("Clear All")
        btn_clear.setStyleSheet("color: #d33;")
        btn_quit = _flat_button("Quit App")
        btn_back = _flat_button("Back")
        btn_clear.clicked.connect(self.clear_all)
        btn_quit.clicked.connect(self.quit_app)
        btn_back.clicked.connect(self.show_editor)

        top = QHBoxLayout()
        top.setContentsMargins(20, 12, 20, 12)
        top.addWidget(btn_clear)
        top.addStretch(1)
        top.addWidget(btn_quit)
        top.addWidget(btn_back)

        heading = QLabel("Previous Documents")
        font = QFont(heading.font())
        font.setPointSize(24)
        font.setWeight(QFont.Weight.Light)
        heading.setFont(font)
        heading.setContentsMargins(20, 20, 20, 16)

        self.library = QListWidget()
        self.library.setFrameShape(QFrame.Shape.NoFrame)
        self.library.setSpacing(5)

        self._empty_label = QLabel("No saved documents")
        self._empty_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        self._empty_label.setStyleSheet("color: gray; font-size: 14px;")

        layout = QVBoxLayout(page)
        layout.setContentsMargins(0, 0, 0, 0)
        layout.setSpacing(0)
        layout.addLayout(top)
        layout.addWidget(_divider())
        layout.addWidget(heading)
        layout.addWidget(self._empty_label, 1)
        layout.addWidget(self.library, 1)
        return page

    # ───────────────────────── navigation ─────────────────────────

    def show_editor(self) -> None:
        self._stack.setCurrentWidget(self._editor_page)
        self.editor.setFocus()

    def show_library(self) -> None:
        self.refresh_library()
        self._stack.setCurrentWidget(self._library_page)

    def _schedule_refresh(self) -> None:
        # rows may be the signal senders that caused the change
        QTimer.singleShot(0, self.refresh_library)

    def refresh_library(self) -> None:
        self.library.clear()
        notes = self.session.list_notes()
        for note in notes:
            row = _NoteRow(note)
            row.openRequested.connect(self.open_note)
            row.deleteRequested.connect(self.delete_note)
            item = QListWidgetItem(self.library)
            item.setData(Qt.ItemDataRole.UserRole, note.id)
            item.setSizeHint(row.sizeHint())
            self.library.setItemWidget(item, row)
        self._empty_label.setVisible(not notes)
        self.library.setVisible(bool(notes))

    # ───────────────────────── editor actions ─────────────────────────

    def _set_editor_text(self, text: str) -> None:
        """Fill the editor without triggering an auto-save."""
        with blocked_signals(self.editor):
            self.editor.setPlainText(text)

    def _on_text_changed(self) -> None:
        self.session.on_edit(self.editor.toPlainText())

    def new_document(self) -> None:
        self.session.create_note()
        self._set_editor_text("")
        self.show_editor()

    def save_document(self) -> None:
        start_dir = get_str(self._settings, SettingsKeys.LAST_SAVE_DIR, str(Path.home()))
        folder = QFileDialog.getExistingDirectory(self, "Select Folder", start_dir)
        if not folder:
            return
        safe_set_setting(self._settings, SettingsKeys.LAST_SAVE_DIR, folder)

        try:
            note = self.session.save_current_as(extract_title(self.session.content), Path(folder))
        except QuicknotesError as e:
            log.exception("Save failed: folder=%s", folder)
            show_error(self, "Save Failed", str(e))
            return
        log.info("Document saved: %s", note.location)

    def import_document(self) -> None:
        start_dir = get_str(self._settings, SettingsKeys.LAST_IMPORT_DIR, str(Path.home()))
        path, _ = QFileDialog.getOpenFileName(self, "Import Document", start_dir, IMPORT_FILTER)
        if not path:
            return
        safe_set_setting(self._settings, SettingsKeys.LAST_IMPORT_DIR, str(Path(path).parent))

        try:
            self.session.import_document(Path(path))
        except QuicknotesError as e:
            log.exception("Import failed: %s", path)
            show_error(self, "Import Failed", str(e))
            return
        self._set_editor_text(self.session.content)
        self.show_editor()

    # ───────────────────────── library actions ─────────────────────────

    def open_note(self, note_id: str) -> None:
        try:
            content = self.session.open_note(note_id)
        except QuicknotesError as e:
            log.warning("Cannot open note: id=%s error=%s", note_id, e)
            show_error(self, "Cannot Open Document", str(e))
            return
        self._set_editor_text(content)
        self.show_editor()

    def delete_note(self, note_id: str) -> None:
        note = self.session.index.get(note_id)
        if note is None:
            return
        action = ask_delete_action(self, title=note.title)
        if action == "recent":
            self.session.delete_from_recent(note_id)
        elif action == "device":
            self.session.delete_from_device(note_id)

    def clear_all(self) -> None:
        if confirm_clear_all(self):
            self.session.clear_all()

    def quit_app(self) -> None:
        QApplication.instance().quit()

    # ───────────────────────── lifecycle ─────────────────────────

    def _on_autosave_failed(self, note: Note, exc: Exception) -> None:
        show_error(
            self,
            "Auto-save Failed",
            f"Could not save “{note.title}”:\n{note.location}",
            details=f"{exc}\nA recovery copy was written to the recovery folder.",
        )

    def shutdown(self) -> None:
        """Flush pending edits before the process goes away."""
        safe_set_setting(self._settings, SettingsKeys.UI_GEOMETRY, self.saveGeometry())
        self.session.close()

    def closeEvent(self, event):  # type: ignore[override]
        # window hides into the tray; flush so nothing waits on a timer
        self.session.scheduler.flush()
        safe_set_setting(self._settings, SettingsKeys.UI_GEOMETRY, self.saveGeometry())
        super().closeEvent(event)
