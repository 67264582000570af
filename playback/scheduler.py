"""Cancelable scheduler for multi-step playback.

Playing a progression means firing one step per chord at fixed delays. Each
step is a ``threading.Timer`` kept in an explicit pending list:

    schedule(steps) ──→ cancel every pending step, then arm the new ones
    cancel()        ──→ cancel every pending step
    step fires      ──→ removed from the list, then its action runs

Starting a new sequence therefore never overlaps with one still in flight.

Usage::

    scheduler = PlaybackScheduler()
    scheduler.schedule([
        (0.0, lambda: audio.play_chord(["D4", "F4", "A4", "C5"], "2n")),
        (2.5, lambda: audio.play_chord(["G4", "B4", "D5", "F5"], "2n")),
    ])
    ...
    scheduler.cancel()
"""

from __future__ import annotations

import functools
import itertools
import logging
import threading
from collections.abc import Callable, Sequence
from typing import Protocol

logger = logging.getLogger(__name__)

Step = tuple[float, Callable[[], None]]
"""(delay in seconds from schedule(), action)."""


class Timer(Protocol):
    """The subset of threading.Timer the scheduler uses."""

    daemon: bool

    def start(self) -> None: ...

    def cancel(self) -> None: ...


TimerFactory = Callable[[float, Callable[[], None]], Timer]


class PlaybackScheduler:
    """Holds the not-yet-fired steps of the current playback sequence.

    Args:
        timer_factory: Builds a timer from (delay, callback). Defaults to
            ``threading.Timer``; tests inject a manually-fired fake.
    """

    def __init__(self, timer_factory: TimerFactory = threading.Timer) -> None:
        self._timer_factory = timer_factory
        self._lock = threading.Lock()
        self._pending: dict[int, Timer] = {}
        self._ids = itertools.count()

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    @property
    def pending_count(self) -> int:
        """Steps scheduled but not yet fired."""
        with self._lock:
            return len(self._pending)

    @property
    def is_playing(self) -> bool:
        return self.pending_count > 0

    def schedule(self, steps: Sequence[Step]) -> int:
        """Replace the current sequence with a new one.

        Args:
            steps: (delay_seconds, action) pairs. Delays are measured from now.

        Returns:
            Number of steps that were cancelled from the previous sequence.

        Raises:
            ValueError: If any delay is negative
        """
        for delay, _ in steps:
            if delay < 0:
                raise ValueError(f"step delay must be non-negative, got {delay}")

        with self._lock:
            cancelled = self._cancel_locked()
            for delay, action in steps:
                step_id = next(self._ids)
                timer = self._timer_factory(delay, functools.partial(self._fire, step_id, action))
                timer.daemon = True
                self._pending[step_id] = timer
                timer.start()

        if cancelled:
            logger.info("Playback restarted: cancelled %d pending step(s)", cancelled)
        logger.debug("Scheduled %d playback step(s)", len(steps))
        return cancelled

    def cancel(self) -> int:
        """Cancel every pending step.

        Returns:
            Number of steps cancelled.
        """
        with self._lock:
            cancelled = self._cancel_locked()
        if cancelled:
            logger.info("Playback stopped: cancelled %d pending step(s)", cancelled)
        return cancelled

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    def _cancel_locked(self) -> int:
        for timer in self._pending.values():
            timer.cancel()
        count = len(self._pending)
        self._pending.clear()
        return count

    def _fire(self, step_id: int, action: Callable[[], None]) -> None:
        with self._lock:
            # A step cancelled after its timer already started running is
            # no longer in the pending list and must not play.
            if self._pending.pop(step_id, None) is None:
                return
        action()
