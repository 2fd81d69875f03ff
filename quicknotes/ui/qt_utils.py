from __future__ import annotations

import logging
from contextlib import contextmanager

from PySide6.QtCore import QSettings

from quicknotes.settings import APP_NAME


log = logging.getLogger(APP_NAME)


@contextmanager
def blocked_signals(obj):
    """
    Temporarily silence Qt signals of `obj` (e.g. textChanged while the
    editor is filled programmatically) and always switch them back on.
    """
    if obj is None:
        yield
        return
    try:
        obj.blockSignals(True)
        yield
    finally:
        try:
            obj.blockSignals(False)
        except RuntimeError:
            # the C++ object may already be gone
            pass


def safe_set_setting(settings: QSettings, key: str, value) -> None:
    """Best-effort QSettings write; never takes the UI down."""
    try:
        settings.setValue(key, value)
    except Exception:
        log.warning("Failed to store setting: key=%s", key)
