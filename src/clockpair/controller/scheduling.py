"""
Event-loop Scheduling Helpers
=============================
Thin wrappers around QTimer for the two timing patterns used by the core.

1. `defer`: run a callable on the next pass of the event loop, after the
   handler that is currently executing has returned. Zero-interval timers fire
   in the order they were started, so deferred calls keep their ordering.
2. `Debouncer`: a restartable single-shot timer. Every `trigger()` cancels the
   pending run; only the last request in a burst survives.
"""
from __future__ import annotations

from typing import Callable

from PySide6.QtCore import QObject, QTimer


def defer(callback: Callable[[], None]) -> None:
    """Schedule `callback` for the next event-loop tick."""
    QTimer.singleShot(0, callback)


class Debouncer(QObject):
    def __init__(self, interval_ms: int, callback: Callable[[], None], parent: QObject | None = None) -> None:
        super().__init__(parent)
        self._callback = callback
        self._timer = QTimer(self)
        self._timer.setSingleShot(True)
        self._timer.setInterval(interval_ms)
        self._timer.timeout.connect(self._callback)

    @property
    def interval(self) -> int:
        return self._timer.interval()

    @property
    def is_pending(self) -> bool:
        return self._timer.isActive()

    def trigger(self) -> None:
        """(Re)start the quiet period."""
        self._timer.start()

    def cancel(self) -> None:
        self._timer.stop()

    def flush(self) -> None:
        """Run a pending callback immediately."""
        if self._timer.isActive():
            self._timer.stop()
            self._callback()
