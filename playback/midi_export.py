"""
playback/midi_export.py — Render progressions and songs to MIDI files using mido.

This module is the file output boundary of the trainer:
    progression (core/music_theory/) → progression_to_midi
    song with voicings (core/music_theory/) → song_to_midi

Usage:
    from playback.midi_export import progression_to_midi, song_to_midi

MIDI structure (both functions):
    Type 1, Track 0=meta (tempo, 4/4 time signature, track name),
            Track 1=chords (all voices, channel 0)

Timing:
    Each chord lasts beats_per_chord beats (default 4 = one 4/4 bar).
    Positions are computed in whole beats, so
        ticks = beats × ticks_per_beat
    is exact — no seconds → ticks rounding.
"""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path

import mido

from core.music_theory.chords import symbol_tones
from core.music_theory.types import Progression, Song

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

DEFAULT_TICKS_PER_BEAT: int = 480
"""Standard MIDI ticks per quarter note. 480 gives 1 ms resolution at 120 BPM."""

MIDI_CHANNEL: int = 0
"""MIDI channel for chord note events (0-indexed = channel 1 in DAW)."""

DEFAULT_VELOCITY: int = 80


# ---------------------------------------------------------------------------
# Time conversion utilities
# ---------------------------------------------------------------------------


def _bpm_to_tempo_us(bpm: float) -> int:
    """Convert BPM to MIDI tempo (microseconds per beat).

    MIDI represents tempo as microseconds per quarter note.
    120 BPM = 500,000 μs/beat.

    Args:
        bpm: Tempo in beats per minute. Must be > 0.

    Returns:
        Tempo in microseconds per beat (integer).
    """
    if bpm <= 0:
        bpm = 120.0
    return max(1, round(60_000_000.0 / bpm))


# ---------------------------------------------------------------------------
# Shared writer
# ---------------------------------------------------------------------------


def _chords_to_midi(
    title: str,
    pitch_sets: Sequence[Sequence[int]],
    *,
    bpm: float,
    beats_per_chord: int,
    velocity: int,
    ticks_per_beat: int,
) -> mido.MidiFile:
    if not pitch_sets:
        raise ValueError("chord sequence must not be empty")
    if beats_per_chord <= 0:
        raise ValueError(f"beats_per_chord must be > 0, got {beats_per_chord}")

    midi = mido.MidiFile(type=1, ticks_per_beat=ticks_per_beat)

    # Track 0: metadata
    meta_track = mido.MidiTrack()
    midi.tracks.append(meta_track)
    meta_track.append(mido.MetaMessage("track_name", name=title, time=0))
    meta_track.append(mido.MetaMessage("set_tempo", tempo=_bpm_to_tempo_us(bpm), time=0))
    meta_track.append(
        mido.MetaMessage(
            "time_signature",
            numerator=4,
            denominator=4,
            clocks_per_click=24,
            notated_32nd_notes_per_beat=8,
            time=0,
        )
    )
    meta_track.append(mido.MetaMessage("end_of_track", time=0))

    # Track 1: chord events
    chord_track = mido.MidiTrack()
    midi.tracks.append(chord_track)

    velocity = max(1, min(127, velocity))  # clamp, ensure non-zero for note_on
    chord_ticks = beats_per_chord * ticks_per_beat

    # Chords are back to back: every chord's note_offs land on the tick where
    # the next chord's note_ons start, so all deltas inside a chord are 0.
    for pitches in pitch_sets:
        for pitch in pitches:
            chord_track.append(
                mido.Message("note_on", channel=MIDI_CHANNEL, note=pitch, velocity=velocity, time=0)
            )
        for i, pitch in enumerate(pitches):
            chord_track.append(
                mido.Message(
                    "note_off",
                    channel=MIDI_CHANNEL,
                    note=pitch,
                    velocity=0,
                    time=chord_ticks if i == 0 else 0,
                )
            )

    chord_track.append(mido.MetaMessage("end_of_track", time=0))
    return midi


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def progression_to_midi(
    progression: Progression,
    *,
    bpm: float = 120.0,
    beats_per_chord: int = 4,
    velocity: int = DEFAULT_VELOCITY,
    output_path: str | Path | None = None,
    ticks_per_beat: int = DEFAULT_TICKS_PER_BEAT,
) -> mido.MidiFile:
    """Render a progression with root-position chords in the reference octave.

    Args:
        progression:     Progression to render (one chord per beats_per_chord beats).
        bpm:             Tempo in BPM (default: 120.0).
        beats_per_chord: Length of each chord in beats (default: 4).
        velocity:        Note-on velocity (clamped to 1–127).
        output_path:     If provided, saves the MIDI file to this path.
        ticks_per_beat:  MIDI resolution (default: 480, standard).

    Returns:
        mido.MidiFile object. Can be further modified or saved manually.

    Raises:
        OSError: If output_path is not writable.
    """
    pitch_sets = [symbol_tones(c) for c in progression.chords]
    midi = _chords_to_midi(
        progression.title,
        pitch_sets,
        bpm=bpm,
        beats_per_chord=beats_per_chord,
        velocity=velocity,
        ticks_per_beat=ticks_per_beat,
    )
    if output_path is not None:
        midi.save(str(output_path))
    return midi


def song_to_midi(
    song: Song,
    *,
    bpm: float = 120.0,
    beats_per_chord: int = 4,
    velocity: int = DEFAULT_VELOCITY,
    output_path: str | Path | None = None,
    ticks_per_beat: int = DEFAULT_TICKS_PER_BEAT,
) -> mido.MidiFile:
    """Render a song using its four-voice voicings.

    Same arguments and return value as progression_to_midi().
    """
    midi = _chords_to_midi(
        song.title,
        [v.pitches for v in song.voicings],
        bpm=bpm,
        beats_per_chord=beats_per_chord,
        velocity=velocity,
        ticks_per_beat=ticks_per_beat,
    )
    if output_path is not None:
        midi.save(str(output_path))
    return midi

