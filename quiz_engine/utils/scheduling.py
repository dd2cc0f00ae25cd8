"""Tick sources that drive countdown timers.

Timers never sleep or poll; they ask a scheduler to call them back once per
interval. The desktop host uses the Qt event loop (see ``qt_scheduling``),
while tests and headless hosts pump virtual time through
``ManualTickScheduler``.
"""

from __future__ import annotations

from typing import Callable, Protocol

from quiz_engine.constants.quiz_constants import TICK_INTERVAL_SECONDS

TickCallback = Callable[[], None]


class TickHandle(Protocol):
    """Registration returned by a scheduler; cancelling stops further calls."""

    @property
    def active(self) -> bool: ...

    def cancel(self) -> None: ...


class TickScheduler(Protocol):
    def schedule(self, callback: TickCallback, interval_seconds: int = TICK_INTERVAL_SECONDS) -> TickHandle: ...

    def now(self) -> float: ...


class _ManualHandle:
    def __init__(self, callback: TickCallback, interval_seconds: int, due_at: int) -> None:
        self.callback = callback
        self.interval_seconds = interval_seconds
        self.due_at = due_at
        self._active = True

    @property
    def active(self) -> bool:
        return self._active

    def cancel(self) -> None:
        self._active = False


class ManualTickScheduler:
    """Deterministic scheduler whose clock only moves when ``advance`` is called."""

    def __init__(self, start_time: int = 0) -> None:
        self._now = start_time
        self._handles: list[_ManualHandle] = []

    def now(self) -> float:
        return float(self._now)

    def schedule(self, callback: TickCallback, interval_seconds: int = TICK_INTERVAL_SECONDS) -> TickHandle:
        if interval_seconds <= 0:
            raise ValueError("Tick interval must be a positive number of seconds.")
        handle = _ManualHandle(callback, interval_seconds, self._now + interval_seconds)
        self._handles.append(handle)
        return handle

    def advance(self, seconds: int = 1) -> None:
        """Move virtual time forward one second at a time, firing due handles."""
        if seconds < 0:
            raise ValueError("Cannot move time backwards.")
        for _ in range(seconds):
            self._now += 1
            # Handles registered during this turn first fire on a later turn.
            for handle in list(self._handles):
                if not handle.active or handle.due_at > self._now:
                    continue
                handle.due_at += handle.interval_seconds
                handle.callback()
            self._handles = [handle for handle in self._handles if handle.active]

    def active_handle_count(self) -> int:
        return sum(1 for handle in self._handles if handle.active)
