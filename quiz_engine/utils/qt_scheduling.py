"""Qt event-loop scheduler for countdown timers in the desktop host."""

from __future__ import annotations

import time

from PySide6.QtCore import QObject, QTimer

from quiz_engine.constants.quiz_constants import TICK_INTERVAL_SECONDS
from quiz_engine.utils.scheduling import TickCallback, TickHandle


class _QtTickHandle:
    def __init__(self, timer: QTimer) -> None:
        self._timer: QTimer | None = timer

    @property
    def active(self) -> bool:
        return self._timer is not None and self._timer.isActive()

    def cancel(self) -> None:
        if self._timer is None:
            return
        self._timer.stop()
        self._timer.deleteLater()
        self._timer = None


class QtTickScheduler:
    """Schedules ticks with one repeating ``QTimer`` per registration."""

    def __init__(self, parent: QObject | None = None) -> None:
        self._parent = parent

    def now(self) -> float:
        return time.monotonic()

    def schedule(self, callback: TickCallback, interval_seconds: int = TICK_INTERVAL_SECONDS) -> TickHandle:
        if interval_seconds <= 0:
            raise ValueError("Tick interval must be a positive number of seconds.")
        timer = QTimer(self._parent)
        timer.setInterval(interval_seconds * 1000)
        timer.timeout.connect(callback)
        timer.start()
        return _QtTickHandle(timer)
