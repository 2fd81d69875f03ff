from __future__ import annotations

from typing import Protocol

from PySide6.QtCore import QByteArray, QSettings


class KeyValueStore(Protocol):
    def get(self, key: str) -> bytes | None:
        ...

    def set(self, key: str, value: bytes) -> None:
        ...


class QSettingsStore:
    """
    Durable key/value store over QSettings.
    QSettings picks the right place for the current OS.
    """

    def __init__(self, settings: QSettings) -> None:
        self._settings = settings

    @property
    def settings(self) -> QSettings:
        return self._settings

    def get(self, key: str) -> bytes | None:
        val = self._settings.value(key)
        if val is None:
            return None
        if isinstance(val, QByteArray):
            return val.data()
        if isinstance(val, (bytes, bytearray)):
            return bytes(val)
        if isinstance(val, str):
            return val.encode("utf-8")
        # anything else (lists from a hand-edited INI file, ...) is not ours
        return None

    def set(self, key: str, value: bytes) -> None:
        self._settings.setValue(key, QByteArray(value))
        self._settings.sync()
        if self._settings.status() != QSettings.Status.NoError:
            raise OSError(f"QSettings write failed: key={key} status={self._settings.status()}")
