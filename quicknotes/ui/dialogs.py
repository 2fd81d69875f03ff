from __future__ import annotations

from typing import Literal

from PySide6.QtWidgets import QMessageBox, QWidget


def ask_delete_action(parent: QWidget, *, title: str) -> Literal["recent", "device", "cancel"]:
    """
    Asked when the user deletes a document from the library.
    Returns one of: 'recent', 'device', 'cancel'.
    """
    msg = QMessageBox(parent)
    msg.setIcon(QMessageBox.Icon.Warning)
    msg.setWindowTitle("Delete Note")
    msg.setText(f"Choose how to delete “{title}”")
    msg.setInformativeText(
        "Deleting from recent files keeps the file on disk.\n"
        "Deleting from device removes the file permanently."
    )
    btn_recent = msg.addButton("Delete from Recent Files", QMessageBox.ButtonRole.AcceptRole)
    btn_device = msg.addButton("Delete from Device", QMessageBox.ButtonRole.DestructiveRole)
    btn_cancel = msg.addButton("Cancel", QMessageBox.ButtonRole.RejectRole)
    msg.setDefaultButton(btn_cancel)
    msg.exec()

    clicked = msg.clickedButton()
    if clicked == btn_recent:
        return "recent"
    if clicked == btn_device:
        return "device"
    return "cancel"


def confirm_clear_all(parent: QWidget) -> bool:
    answer = QMessageBox.warning(
        parent,
        "Clear All Documents",
        "This will remove all documents from recent files "
        "(files will not be deleted from your device).",
        QMessageBox.StandardButton.Ok | QMessageBox.StandardButton.Cancel,
        QMessageBox.StandardButton.Cancel,
    )
    return answer == QMessageBox.StandardButton.Ok


def show_error(parent: QWidget, title: str, text: str, *, details: str | None = None) -> None:
    msg = QMessageBox(parent)
    msg.setIcon(QMessageBox.Icon.Critical)
    msg.setWindowTitle(title)
    msg.setText(text)
    if details:
        msg.setInformativeText(details)
    msg.exec()
