from __future__ import annotations

from typing import Callable

from PySide6.QtCore import QObject, QTimer


class QtDebouncer(QObject):
    """Single-shot timer usable as the popup controller's ``defer`` hook.

    Each call restarts the timer and replaces the pending callback, so only
    the last request within the window runs.
    """

    def __init__(self, parent: QObject | None = None) -> None:
        super().__init__(parent)
        self._callback: Callable[[], None] | None = None
        self._timer = QTimer(self)
        self._timer.setSingleShot(True)
        self._timer.timeout.connect(self._fire)

    def __call__(self, delay_ms: int, callback: Callable[[], None]) -> None:
        self._callback = callback
        self._timer.start(max(0, int(delay_ms)))

    def is_pending(self) -> bool:
        return self._timer.isActive()

    def cancel(self) -> None:
        self._timer.stop()
        self._callback = None

    def _fire(self) -> None:
        callback, self._callback = self._callback, None
        if callback is not None:
            callback()
