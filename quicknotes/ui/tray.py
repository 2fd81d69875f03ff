from __future__ import annotations

from PySide6.QtGui import QAction, QIcon
from PySide6.QtWidgets import QApplication, QMenu, QStyle, QSystemTrayIcon, QWidget


def build_tray_icon(app: QApplication, window: QWidget) -> QSystemTrayIcon | None:
    """
    Menu-bar / system-tray entry that toggles the notes window.
    Returns None when the platform has no tray; the window is then shown directly.
    """
    if not QSystemTrayIcon.isSystemTrayAvailable():
        return None

    fallback = app.style().standardIcon(QStyle.StandardPixmap.SP_FileIcon)
    tray = QSystemTrayIcon(QIcon.fromTheme("accessories-text-editor", fallback), app)
    tray.setToolTip("Quicknotes")

    def toggle() -> None:
        if window.isVisible():
            window.hide()
        else:
            window.show()
            window.raise_()
            window.activateWindow()

    menu = QMenu()
    act_toggle = QAction("Show / Hide Quicknotes", menu)
    act_toggle.triggered.connect(toggle)
    act_quit = QAction("Quit", menu)
    act_quit.triggered.connect(app.quit)
    menu.addAction(act_toggle)
    menu.addSeparator()
    menu.addAction(act_quit)
    tray.setContextMenu(menu)
    # keep the menu alive as long as the icon
    tray._menu = menu  # type: ignore[attr-defined]

    def on_activated(reason: QSystemTrayIcon.ActivationReason) -> None:
        if reason == QSystemTrayIcon.ActivationReason.Trigger:
            toggle()

    tray.activated.connect(on_activated)
    tray.show()
    return tray
