from __future__ import annotations

import logging
import threading
from typing import Callable, Protocol

from PySide6.QtCore import QObject, QTimer

from quicknotes.settings import APP_NAME


log = logging.getLogger(APP_NAME)


class DebounceTimer(Protocol):
    """
    Single-shot timer handle: start() (re)arms, stop() cancels.
    At most one callback is pending per handle.
    """

    def start(self, callback: Callable[[], None]) -> None:
        ...

    def stop(self) -> None:
        ...

    def is_active(self) -> bool:
        ...


class QtDebounceTimer:
    """QTimer-backed handle. Fires on the thread owning `parent` (the UI thread)."""

    def __init__(self, *, interval_ms: int, parent: QObject | None = None) -> None:
        self._callback: Callable[[], None] | None = None
        self._timer = QTimer(parent)
        self._timer.setSingleShot(True)
        self._timer.setInterval(int(interval_ms))
        self._timer.timeout.connect(self._on_timeout)

    def start(self, callback: Callable[[], None]) -> None:
        self._callback = callback
        self._timer.start()

    def stop(self) -> None:
        try:
            if self._timer.isActive():
                self._timer.stop()
        except RuntimeError:
            # QTimer already deleted by Qt on shutdown
            log.debug("Debounce timer already destroyed")
        self._callback = None

    def is_active(self) -> bool:
        return self._timer.isActive()

    def _on_timeout(self) -> None:
        callback, self._callback = self._callback, None
        if callback is not None:
            callback()


class ThreadingDebounceTimer:
    """threading.Timer-backed handle for headless use. Fires on a worker thread."""

    def __init__(self, *, interval_ms: int) -> None:
        self._interval = interval_ms / 1000.0
        self._lock = threading.Lock()
        self._timer: threading.Timer | None = None

    def start(self, callback: Callable[[], None]) -> None:
        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
            timer = threading.Timer(self._interval, self._fire, args=(callback,))
            timer.daemon = True
            self._timer = timer
            timer.start()

    def stop(self) -> None:
        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
                self._timer = None

    def is_active(self) -> bool:
        with self._lock:
            return self._timer is not None

    def _fire(self, callback: Callable[[], None]) -> None:
        with self._lock:
            if self._timer is not threading.current_thread():
                # re-armed or stopped after this thread was already running
                return
            self._timer = None
        callback()
