"""
playback/practice.py — What the trainer plays, and when.

PracticePlayer turns theory values into calls on an AudioCapability:

    play_note          one note; a bare name sounds in the reference octave ("8n")
    play_chord_symbol  one chord, root position in the reference octave ("4n")
    play_voicing       one four-voice voicing, optionally marking its position ("1n")
    play_progression   every chord of a progression, chord_step_seconds apart ("2n")
    play_song          every voicing of a song, chord_step_seconds apart ("2n")
    play_question      interval: two notes interval_gap_seconds apart ("8n")
                       chord:    all notes together ("4n")
    stop               cancel whatever is still scheduled

Multi-step playback goes through a PlaybackScheduler, so starting a new
sequence cancels the pending steps of the previous one.
"""

from __future__ import annotations

import functools
import logging

from core.audio.base import AudioCapability, duration_to_beats
from core.config import DEFAULT_CONFIG, PlaybackConfig
from core.music_theory.chords import chord_note_names, parse_chord_symbol
from core.music_theory.ear_training import Question
from core.music_theory.notes import pitch_to_note_name, reference_pitch
from core.music_theory.types import ChordSymbol, Progression, Song, Voicing
from playback.scheduler import PlaybackScheduler

logger = logging.getLogger(__name__)

NOTE_DURATION: str = "8n"
CHORD_DURATION: str = "4n"
VOICING_DURATION: str = "1n"
SEQUENCE_DURATION: str = "2n"
QUESTION_NOTE_DURATION: str = "8n"


class PracticePlayer:
    """Plays trainer material through an audio capability.

    Args:
        audio: Audio capability; start() is called before every trigger.
        scheduler: Scheduler for multi-step sequences.
        config: Delays between sequence steps.
    """

    def __init__(
        self,
        audio: AudioCapability,
        scheduler: PlaybackScheduler | None = None,
        config: PlaybackConfig = DEFAULT_CONFIG,
    ) -> None:
        self._audio = audio
        self._scheduler = scheduler or PlaybackScheduler()
        self._config = config
        self._current_index: int | None = None

    @property
    def is_playing(self) -> bool:
        return self._scheduler.is_playing

    @property
    def pending_steps(self) -> int:
        return self._scheduler.pending_count

    @property
    def current_index(self) -> int | None:
        """Position of the chord last sounded in the current sequence or song.

        None before any, after stop(), and while a new sequence waits for
        its first step.
        """
        return self._current_index

    # ------------------------------------------------------------------
    # Single events
    # ------------------------------------------------------------------

    def play_chord_symbol(
        self, symbol: ChordSymbol | str, duration: str = CHORD_DURATION
    ) -> tuple[str, ...]:
        """Play a chord symbol; returns the note names sent."""
        if isinstance(symbol, str):
            symbol = parse_chord_symbol(symbol)
        notes = chord_note_names(symbol.root, symbol.quality)
        self._audio.start()
        self._audio.play_chord(list(notes), duration)
        return notes

    def play_note(self, note: str, duration: str = NOTE_DURATION) -> str:
        """Play one note, e.g. "F#" (reference octave) or "F#5". Returns the name sent."""
        if not note[-1:].isdigit():
            note = pitch_to_note_name(reference_pitch(note))
        self._audio.start()
        self._audio.play_note(note, duration)
        return note

    def play_voicing(
        self, voicing: Voicing, duration: str = VOICING_DURATION, *, index: int | None = None
    ) -> tuple[str, ...]:
        """Play a voicing; index is its position in a song, if it has one."""
        notes = voicing.note_names
        self._audio.start()
        self._audio.play_chord(list(notes), duration)
        self._current_index = index
        return notes

    def play_question(self, question: Question) -> None:
        """Play the audio of an ear-training question."""
        self._audio.start()
        if question.kind == "interval":
            first, second = question.audio
            self._audio.play_note(first, QUESTION_NOTE_DURATION)
            self._scheduler.schedule(
                [
                    (
                        self._config.interval_gap_seconds,
                        functools.partial(self._audio.play_note, second, QUESTION_NOTE_DURATION),
                    )
                ]
            )
        else:
            self._audio.play_chord(list(question.audio), CHORD_DURATION)

    # ------------------------------------------------------------------
    # Sequences
    # ------------------------------------------------------------------

    def play_progression(self, progression: Progression, duration: str = SEQUENCE_DURATION) -> int:
        """Schedule every chord of a progression. Returns the number of steps."""
        chords = [chord_note_names(c.root, c.quality) for c in progression.chords]
        logger.info("Playing progression %r (%d chords)", progression.title, len(chords))
        return self._play_sequence(chords, duration)

    def play_song(self, song: Song, duration: str = SEQUENCE_DURATION) -> int:
        """Schedule every voicing of a song. Returns the number of steps."""
        chords = [v.note_names for v in song.voicings]
        logger.info("Playing song %r (%d voicings)", song.title, len(chords))
        return self._play_sequence(chords, duration)

    def stop(self) -> int:
        """Cancel pending sequence steps. Returns how many were cancelled."""
        self._current_index = None
        return self._scheduler.cancel()

    def _play_sequence(self, chords: list[tuple[str, ...]], duration: str) -> int:
        # Steps fire on timer threads; a bad token must fail here instead.
        duration_to_beats(duration)
        self._audio.start()
        self._current_index = None
        step = self._config.chord_step_seconds
        self._scheduler.schedule(
            [
                (i * step, functools.partial(self._play_step, i, notes, duration))
                for i, notes in enumerate(chords)
            ]
        )
        return len(chords)

    def _play_step(self, index: int, notes: tuple[str, ...], duration: str) -> None:
        self._current_index = index
        self._audio.play_chord(list(notes), duration)
