"""
Shared fixtures for the test suite.

Centralizes reusable test infrastructure so individual test files
don't need to repeat fake-timer / fake-port boilerplate.

No test touches a real MIDI backend and no test sleeps: ports are
RecordingPort instances and every timer is a FakeTimer fired by hand.
"""

from __future__ import annotations

import os
from collections.abc import Callable
from unittest.mock import patch

import mido
import pytest
from fastapi.testclient import TestClient

from api.main import app
from core.config import RECORDING_PORT, PlaybackConfig
from playback.engine import AudioEngine, RecordingPort
from playback.practice import PracticePlayer
from playback.scheduler import PlaybackScheduler

# ---------------------------------------------------------------------------
# Fake timers
# ---------------------------------------------------------------------------


class FakeTimer:
    """Stands in for threading.Timer; runs only when fire() is called."""

    def __init__(self, interval: float, function: Callable[[], None]) -> None:
        self.interval = interval
        self.function = function
        self.daemon = False
        self.started = False
        self.cancelled = False

    def start(self) -> None:
        self.started = True

    def cancel(self) -> None:
        self.cancelled = True

    def fire(self) -> None:
        if self.started and not self.cancelled:
            self.function()


class FakeTimerFactory:
    """Timer factory that remembers every timer it built."""

    def __init__(self) -> None:
        self.timers: list[FakeTimer] = []

    def __call__(self, interval: float, function: Callable[[], None]) -> FakeTimer:
        timer = FakeTimer(interval, function)
        self.timers.append(timer)
        return timer

    @property
    def live(self) -> list[FakeTimer]:
        """Started, not cancelled timers, in creation order."""
        return [t for t in self.timers if t.started and not t.cancelled]

    def fire_all(self) -> None:
        """Fire every live timer in delay order."""
        for timer in sorted(self.live, key=lambda t: t.interval):
            timer.fire()


# ---------------------------------------------------------------------------
# Engine / player fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def recording_config() -> PlaybackConfig:
    return PlaybackConfig(midi_port=RECORDING_PORT)


@pytest.fixture()
def release_timers() -> FakeTimerFactory:
    """Timers the engine uses for note_off releases."""
    return FakeTimerFactory()


@pytest.fixture()
def step_timers() -> FakeTimerFactory:
    """Timers the scheduler uses for sequence steps."""
    return FakeTimerFactory()


@pytest.fixture()
def engine(recording_config: PlaybackConfig, release_timers: FakeTimerFactory):
    """Unstarted AudioEngine writing to a RecordingPort."""
    eng = AudioEngine(recording_config, timer_factory=release_timers)
    yield eng
    eng.close()


@pytest.fixture()
def scheduler(step_timers: FakeTimerFactory) -> PlaybackScheduler:
    return PlaybackScheduler(timer_factory=step_timers)


@pytest.fixture()
def player(
    engine: AudioEngine, scheduler: PlaybackScheduler, recording_config: PlaybackConfig
) -> PracticePlayer:
    return PracticePlayer(engine, scheduler, recording_config)


@pytest.fixture()
def sent(engine: AudioEngine) -> Callable[[str], list[int]]:
    """``sent("note_on")`` → notes of every such message the engine's port received."""

    def _sent(msg_type: str = "note_on") -> list[int]:
        port = engine.port
        assert isinstance(port, RecordingPort)
        return [m.note for m in port.messages if m.type == msg_type]

    return _sent


# ---------------------------------------------------------------------------
# FastAPI test client fixture
# ---------------------------------------------------------------------------


@pytest.fixture()
def api_client(engine: AudioEngine, player: PracticePlayer):
    """FastAPI ``TestClient`` with the lifespan run against a recording port.

    After startup the application's engine and player are replaced by the
    fake-timer ones from the fixtures above, so tests can inspect sent
    messages and fire scheduled steps deterministically.
    """
    with patch.dict(os.environ, {"JAZZ_MIDI_PORT": RECORDING_PORT}):
        with TestClient(app) as client:
            app.state.audio_engine = engine
            app.state.practice_player = player
            yield client


# ---------------------------------------------------------------------------
# MIDI file reader
# ---------------------------------------------------------------------------


@pytest.fixture()
def pitch_sets() -> Callable[[mido.MidiFile], list[tuple[int, ...]]]:
    """``pitch_sets(midi_file)`` → one pitch tuple per chord of an exported file.

    Notes starting on the same tick of the chord track form one chord, in
    note_on order. A file without a chord track gives an empty list.
    """

    def _pitch_sets(midi_file: mido.MidiFile) -> list[tuple[int, ...]]:
        if len(midi_file.tracks) < 2:
            return []
        chords: dict[int, list[int]] = {}
        tick = 0
        for msg in midi_file.tracks[1]:
            tick += msg.time
            if msg.type == "note_on" and msg.velocity > 0:
                chords.setdefault(tick, []).append(msg.note)
        return [tuple(chords[t]) for t in sorted(chords)]

    return _pitch_sets
