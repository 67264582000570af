"""
playback/engine.py — MIDI audio engine.

AudioEngine implements core.audio.AudioCapability on top of a mido output
port. A software or hardware synthesizer listening on that port produces the
actual sound; the engine only sends note_on / note_off messages.

Lifecycle:
    engine = AudioEngine(config)   # no port yet, started == False
    engine.start()                 # opens the port once; later calls do nothing
    engine.play_chord([...], "2n") # note_on now, note_off after the duration
    engine.close()                 # releases sounding notes, closes the port

Triggers before start() are ignored (logged, return False).

Port selection (PlaybackConfig.midi_port):
    None          → mido.open_output(), the rtmidi backend's default output
    "recording"   → RecordingPort, keeps every message in memory
    any other     → mido.open_output(name)
"""

from __future__ import annotations

import functools
import itertools
import logging
import threading
from collections.abc import Callable

import mido
from mido.ports import BaseOutput

from core.audio.base import DEFAULT_CHORD_DURATION, DEFAULT_NOTE_DURATION, duration_to_seconds
from core.config import DEFAULT_CONFIG, RECORDING_PORT, PlaybackConfig
from core.music_theory.notes import note_name_to_pitch
from playback.scheduler import Timer, TimerFactory

logger = logging.getLogger(__name__)

PortFactory = Callable[[str | None], BaseOutput]


# ---------------------------------------------------------------------------
# RecordingPort: in-memory output
# ---------------------------------------------------------------------------


class RecordingPort(BaseOutput):
    """Output port that keeps every sent message.

    Used for headless deployments and tests.
    """

    def __init__(self, name: str = RECORDING_PORT, **kwargs) -> None:
        self.messages: list[mido.Message] = []
        super().__init__(name, **kwargs)

    def _send(self, msg: mido.Message) -> None:
        self.messages.append(msg)


class AudioEngineUnavailableError(OSError):
    """The MIDI output port could not be opened (no backend, no such port)."""


def open_port(name: str | None) -> BaseOutput:
    """Open the output port selected by PlaybackConfig.midi_port.

    Real ports go through mido's default backend (python-rtmidi).
    """
    if name == RECORDING_PORT:
        return RecordingPort()
    return mido.open_output(name)


# ---------------------------------------------------------------------------
# AudioEngine
# ---------------------------------------------------------------------------


class AudioEngine:
    """Sends practice notes to a MIDI output port.

    Args:
        config: Playback configuration (tempo, velocity, channel, port name).
        port_factory: Opens the output port. Defaults to open_port().
        timer_factory: Schedules note releases. Defaults to threading.Timer.
    """

    def __init__(
        self,
        config: PlaybackConfig = DEFAULT_CONFIG,
        *,
        port_factory: PortFactory = open_port,
        timer_factory: TimerFactory = threading.Timer,
    ) -> None:
        self._config = config
        self._port_factory = port_factory
        self._timer_factory = timer_factory
        self._lock = threading.Lock()
        self._port: BaseOutput | None = None
        self._started = False
        self._releases: dict[int, tuple[Timer, tuple[int, ...]]] = {}
        self._ids = itertools.count()

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    @property
    def started(self) -> bool:
        return self._started

    @property
    def config(self) -> PlaybackConfig:
        return self._config

    @property
    def port(self) -> BaseOutput | None:
        """The open output port, or None before start()."""
        return self._port

    def start(self) -> None:
        """Open the output port. Idempotent.

        Raises:
            AudioEngineUnavailableError: If the MIDI backend is missing or
                cannot open the port
        """
        with self._lock:
            if self._started:
                return
            try:
                self._port = self._port_factory(self._config.midi_port)
            except (OSError, ImportError) as exc:
                raise AudioEngineUnavailableError(
                    f"Cannot open MIDI port {self._config.midi_port!r}: {exc}"
                ) from exc
            self._started = True
        logger.info("Audio engine started on port %r", getattr(self._port, "name", None))

    def close(self) -> None:
        """Release sounding notes and close the port. Safe to call twice."""
        with self._lock:
            if not self._started:
                return
            for timer, pitches in self._releases.values():
                timer.cancel()
                self._send_note_offs(pitches)
            self._releases.clear()
            if self._port is not None:
                self._port.close()
            self._port = None
            self._started = False
        logger.info("Audio engine closed")

    def __enter__(self) -> AudioEngine:
        self.start()
        return self

    def __exit__(self, *_: object) -> None:
        self.close()

    # ------------------------------------------------------------------
    # Triggers
    # ------------------------------------------------------------------

    def play_note(self, note: str, duration: str = DEFAULT_NOTE_DURATION) -> bool:
        """Sound one note, e.g. play_note("A4", "8n")."""
        return self._trigger([note], duration)

    def play_chord(self, notes: list[str], duration: str = DEFAULT_CHORD_DURATION) -> bool:
        """Sound several notes together, e.g. play_chord(["C4", "E4", "G4"], "2n")."""
        return self._trigger(notes, duration)

    def _trigger(self, notes: list[str], duration: str) -> bool:
        """Send note_on now and schedule the matching note_off.

        Raises:
            ValueError: For an unparseable or out-of-range note name, or an
                unknown duration token. Nothing is sent in that case.
        """
        pitches = tuple(note_name_to_pitch(n) for n in notes)
        seconds = duration_to_seconds(duration, self._config.bpm)

        with self._lock:
            if not self._started or self._port is None:
                logger.warning("Audio engine not started; ignoring %s", list(notes))
                return False
            for pitch in pitches:
                self._port.send(
                    mido.Message(
                        "note_on",
                        channel=self._config.channel,
                        note=pitch,
                        velocity=self._config.velocity,
                    )
                )
            release_id = next(self._ids)
            timer = self._timer_factory(seconds, functools.partial(self._release, release_id))
            timer.daemon = True
            self._releases[release_id] = (timer, pitches)
            timer.start()

        logger.debug("Playing %s for %s (%.2fs)", list(notes), duration, seconds)
        return True

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    def _release(self, release_id: int) -> None:
        with self._lock:
            entry = self._releases.pop(release_id, None)
            if entry is None or self._port is None:
                return
            self._send_note_offs(entry[1])

    def _send_note_offs(self, pitches: tuple[int, ...]) -> None:
        if self._port is None:
            return
        for pitch in pitches:
            self._port.send(
                mido.Message("note_off", channel=self._config.channel, note=pitch, velocity=0)
            )
