"""Second-granularity countdown used for quiz and question time limits."""

from __future__ import annotations

from typing import Callable

from quiz_engine.core.models import TimerSnapshot
from quiz_engine.utils.scheduling import TickHandle, TickScheduler


def format_time(seconds: int) -> str:
    """Format seconds as MM:SS."""
    seconds = max(0, seconds)
    minutes, secs = divmod(seconds, 60)
    return f"{minutes:02d}:{secs:02d}"


class CountdownTimer:
    """Counts down from an initial number of seconds and reports expiry once.

    A timer configured with ``0`` means "no limit": it never ticks and never
    expires. The timer knows nothing about sessions; it only calls ``on_tick``
    with the new remaining time after each decrement and ``on_expire`` when
    the count reaches zero.
    """

    def __init__(
        self,
        scheduler: TickScheduler,
        initial_time: int = 0,
        on_tick: Callable[[int], None] | None = None,
        on_expire: Callable[[], None] | None = None,
    ) -> None:
        if initial_time < 0:
            raise ValueError("Initial time must not be negative.")
        self._scheduler = scheduler
        self._initial_time = initial_time
        self._time_remaining = initial_time
        self._is_expired = False
        self._handle: TickHandle | None = None
        self.on_tick = on_tick
        self.on_expire = on_expire

    @property
    def initial_time(self) -> int:
        return self._initial_time

    @property
    def time_remaining(self) -> int:
        return self._time_remaining

    @property
    def is_running(self) -> bool:
        return self._handle is not None

    @property
    def is_expired(self) -> bool:
        return self._is_expired

    @property
    def formatted_time(self) -> str:
        return format_time(self._time_remaining)

    def start(self) -> None:
        if self._is_expired or self._time_remaining <= 0 or self._handle is not None:
            return
        self._handle = self._scheduler.schedule(self._handle_tick)

    def pause(self) -> None:
        self._cancel_ticks()

    def reset(self, new_time: int | None = None) -> None:
        if new_time is not None and new_time < 0:
            raise ValueError("Reset time must not be negative.")
        self._cancel_ticks()
        self._is_expired = False
        self._time_remaining = self._initial_time if new_time is None else new_time

    def snapshot(self) -> TimerSnapshot:
        return TimerSnapshot(
            time_remaining=self._time_remaining,
            formatted_time=self.formatted_time,
            is_running=self.is_running,
            is_expired=self._is_expired,
        )

    def _handle_tick(self) -> None:
        if self._handle is None or self._is_expired:
            return
        self._time_remaining = max(0, self._time_remaining - 1)
        if self._time_remaining <= 0:
            # Stop before notifying so callbacks may reset and restart us.
            self._cancel_ticks()
            self._is_expired = True
            if self.on_tick is not None:
                self.on_tick(0)
            if self.on_expire is not None:
                self.on_expire()
            return
        if self.on_tick is not None:
            self.on_tick(self._time_remaining)

    def _cancel_ticks(self) -> None:
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None
