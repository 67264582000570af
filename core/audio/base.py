"""
Audio capability protocol for the practice trainer.

Defines the contract the theory layer and the API rely on to make sound.
This module is pure — no I/O, no ports, no timers. The concrete MIDI
implementation lives in playback/engine.py.

Durations use the synthesizer's note-value tokens:

    "1n"  whole note      "2n"  half note      "4n"  quarter note
    "8n"  eighth note     "16n" sixteenth note
    a trailing "." makes the value dotted ("4n." = 1.5 beats)
"""

from __future__ import annotations

import re
from typing import Protocol, runtime_checkable

_DURATION_RE = re.compile(r"^(1|2|4|8|16|32)n(\.?)$")

DEFAULT_CHORD_DURATION: str = "4n"
DEFAULT_NOTE_DURATION: str = "8n"


def duration_to_beats(token: str) -> float:
    """Length of a note-value token in quarter-note beats.

    Examples:
        >>> duration_to_beats("4n")
        1.0
        >>> duration_to_beats("2n.")
        3.0

    Raises:
        ValueError: If the token is not a supported note value
    """
    match = _DURATION_RE.match(token.strip())
    if match is None:
        raise ValueError(f"Unsupported duration {token!r}. Use e.g. '1n', '2n', '4n', '8n'")
    denominator, dot = match.groups()
    beats = 4.0 / int(denominator)
    return beats * 1.5 if dot else beats


def duration_to_seconds(token: str, bpm: float) -> float:
    """Length of a note-value token in seconds at the given tempo."""
    if bpm <= 0:
        raise ValueError(f"bpm must be > 0, got {bpm}")
    return duration_to_beats(token) * 60.0 / bpm


@runtime_checkable
class AudioCapability(Protocol):
    """
    Protocol for anything that can sound notes for the trainer.

    ``start`` must be idempotent. Triggers issued before ``start`` are
    ignored and report False.
    """

    @property
    def started(self) -> bool:
        """True once start() has completed."""
        ...

    def start(self) -> None:
        """Acquire the output device. Calling it again does nothing."""
        ...

    def play_note(self, note: str, duration: str = DEFAULT_NOTE_DURATION) -> bool:
        """
        Sound one note.

        Args:
            note: Note name with octave, e.g. "C#4".
            duration: Note-value token, e.g. "8n".

        Returns:
            True if the note was sent, False if the capability is not started.
        """
        ...

    def play_chord(self, notes: list[str], duration: str = DEFAULT_CHORD_DURATION) -> bool:
        """Sound several notes together. Same contract as play_note."""
        ...
