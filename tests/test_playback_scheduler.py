"""
Tests for playback/scheduler.py — cancelable step scheduling.

All timers are FakeTimers from conftest; steps run only when fired.
"""

from __future__ import annotations

import threading

import pytest

from playback.scheduler import PlaybackScheduler


class TestSchedule:
    def test_arms_one_timer_per_step(self, scheduler, step_timers) -> None:
        scheduler.schedule([(0.0, lambda: None), (2.5, lambda: None)])
        assert [t.interval for t in step_timers.timers] == [0.0, 2.5]
        assert all(t.started and t.daemon for t in step_timers.timers)
        assert scheduler.pending_count == 2
        assert scheduler.is_playing is True

    def test_fired_step_runs_and_leaves_pending(self, scheduler, step_timers) -> None:
        ran: list[int] = []
        scheduler.schedule([(0.0, lambda: ran.append(1)), (1.0, lambda: ran.append(2))])
        step_timers.timers[0].fire()
        assert ran == [1]
        assert scheduler.pending_count == 1

    def test_all_steps_fire_in_order(self, scheduler, step_timers) -> None:
        ran: list[int] = []
        scheduler.schedule([(i * 1.0, lambda i=i: ran.append(i)) for i in range(4)])
        step_timers.fire_all()
        assert ran == [0, 1, 2, 3]
        assert scheduler.is_playing is False

    def test_negative_delay_raises(self, scheduler, step_timers) -> None:
        with pytest.raises(ValueError, match="non-negative"):
            scheduler.schedule([(0.0, lambda: None), (-1.0, lambda: None)])
        assert step_timers.timers == []

    def test_empty_schedule(self, scheduler) -> None:
        assert scheduler.schedule([]) == 0
        assert scheduler.is_playing is False


class TestCancel:
    def test_new_schedule_cancels_previous(self, scheduler, step_timers) -> None:
        ran: list[str] = []
        scheduler.schedule([(0.0, lambda: ran.append("old-0")), (1.0, lambda: ran.append("old-1"))])
        old = list(step_timers.timers)

        cancelled = scheduler.schedule([(0.0, lambda: ran.append("new"))])

        assert cancelled == 2
        assert all(t.cancelled for t in old)
        step_timers.fire_all()
        assert ran == ["new"]

    def test_partially_played_sequence_cancels_remainder(self, scheduler, step_timers) -> None:
        scheduler.schedule([(0.0, lambda: None), (1.0, lambda: None), (2.0, lambda: None)])
        step_timers.timers[0].fire()
        assert scheduler.schedule([(0.0, lambda: None)]) == 2

    def test_cancel_returns_count(self, scheduler) -> None:
        scheduler.schedule([(0.0, lambda: None), (1.0, lambda: None)])
        assert scheduler.cancel() == 2
        assert scheduler.pending_count == 0
        assert scheduler.cancel() == 0

    def test_callback_after_cancel_does_not_run(self, scheduler, step_timers) -> None:
        ran: list[int] = []
        scheduler.schedule([(0.0, lambda: ran.append(1))])
        callback = step_timers.timers[0].function
        scheduler.cancel()
        # The timer thread may already be inside its callback when cancel() lands.
        callback()
        assert ran == []


class TestRealTimers:
    def test_default_factory_runs_steps(self) -> None:
        done = threading.Event()
        scheduler = PlaybackScheduler()
        scheduler.schedule([(0.0, done.set)])
        assert done.wait(timeout=2.0)

    def test_default_factory_cancel(self) -> None:
        ran = threading.Event()
        scheduler = PlaybackScheduler()
        scheduler.schedule([(5.0, ran.set)])
        assert scheduler.cancel() == 1
        assert not ran.is_set()
