"""Tests for the countdown timer driven by virtual time."""

from __future__ import annotations

import pytest

from quiz_engine.core.services.countdown_timer import CountdownTimer, format_time


class TestFormatTime:
    def test_minutes_and_seconds_are_zero_padded(self):
        assert format_time(125) == "02:05"
        assert format_time(0) == "00:00"

    def test_negative_values_clamp_to_zero(self):
        assert format_time(-4) == "00:00"


class TestCountdown:
    def test_expires_after_exactly_n_ticks(self, scheduler):
        ticks: list[int] = []
        expiries: list[bool] = []
        timer = CountdownTimer(scheduler, 3, on_tick=ticks.append, on_expire=lambda: expiries.append(True))

        timer.start()
        scheduler.advance(2)
        assert timer.time_remaining == 1
        assert not timer.is_expired

        scheduler.advance(1)
        assert ticks == [2, 1, 0]
        assert expiries == [True]
        assert timer.is_expired
        assert not timer.is_running
        assert timer.time_remaining == 0

    def test_no_ticks_after_expiry(self, scheduler):
        ticks: list[int] = []
        timer = CountdownTimer(scheduler, 2, on_tick=ticks.append)
        timer.start()
        scheduler.advance(10)
        assert ticks == [1, 0]
        assert scheduler.active_handle_count() == 0

    def test_zero_limit_never_ticks_or_expires(self, scheduler):
        ticks: list[int] = []
        expiries: list[bool] = []
        timer = CountdownTimer(scheduler, 0, on_tick=ticks.append, on_expire=lambda: expiries.append(True))
        timer.start()
        scheduler.advance(30)
        assert ticks == []
        assert expiries == []
        assert not timer.is_running
        assert not timer.is_expired

    def test_start_is_noop_when_expired(self, scheduler):
        timer = CountdownTimer(scheduler, 1)
        timer.start()
        scheduler.advance(1)
        timer.start()
        assert not timer.is_running
        assert timer.is_expired

    def test_pause_freezes_remaining_time(self, scheduler):
        timer = CountdownTimer(scheduler, 10)
        timer.start()
        scheduler.advance(4)
        timer.pause()
        scheduler.advance(5)
        assert timer.time_remaining == 6
        assert not timer.is_running
        assert not timer.is_expired

        timer.start()
        scheduler.advance(1)
        assert timer.time_remaining == 5

    def test_double_start_does_not_double_tick(self, scheduler):
        timer = CountdownTimer(scheduler, 10)
        timer.start()
        timer.start()
        scheduler.advance(1)
        assert timer.time_remaining == 9

    def test_reset_clears_expiry_and_stops(self, scheduler):
        timer = CountdownTimer(scheduler, 2)
        timer.start()
        scheduler.advance(2)
        assert timer.is_expired

        timer.reset()
        assert timer.time_remaining == 2
        assert not timer.is_expired
        assert not timer.is_running

        timer.reset(45)
        assert timer.time_remaining == 45
        assert timer.formatted_time == "00:45"

    def test_snapshot_reflects_state(self, scheduler):
        timer = CountdownTimer(scheduler, 90)
        timer.start()
        scheduler.advance(1)
        snapshot = timer.snapshot()
        assert snapshot.time_remaining == 89
        assert snapshot.formatted_time == "01:29"
        assert snapshot.is_running
        assert not snapshot.is_expired

    def test_negative_initial_time_rejected(self, scheduler):
        with pytest.raises(ValueError):
            CountdownTimer(scheduler, -1)
