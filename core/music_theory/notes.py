"""
core/music_theory/notes.py — Chromatic pitch model.

Converts between note names, pitch classes (0–11) and MIDI pitch numbers
(middle C = 60 = "C4"). No I/O, no side effects.

Exports:
    NOTE_NAMES                    12-element tuple of chromatic note names (sharps)
    REFERENCE_OCTAVE              octave chords and questions are rendered in
    note_to_pitch_class(name)     → int
    pitch_to_note_name(pitch)     → str, e.g. 61 → "C#4"
    note_name_to_pitch(name)      → int, e.g. "C#4" → 61
    reference_pitch(name)         → int in [60, 71]
"""

from __future__ import annotations

import re

# ---------------------------------------------------------------------------
# Chromatic pitch classes
# ---------------------------------------------------------------------------

NOTE_NAMES: tuple[str, ...] = (
    "C",
    "C#",
    "D",
    "D#",
    "E",
    "F",
    "F#",
    "G",
    "G#",
    "A",
    "A#",
    "B",
)

_LETTER_PC: dict[str, int] = {"C": 0, "D": 2, "E": 4, "F": 5, "G": 7, "A": 9, "B": 11}
_ACCIDENTAL_SHIFT: dict[str, int] = {"": 0, "#": 1, "b": -1}

_NOTE_RE = re.compile(r"^([A-G])([#b]?)$")
_NOTE_WITH_OCTAVE_RE = re.compile(r"^([A-G][#b]?)(-?\d+)$")

_OCTAVE = 12
_MIDI_MIN = 0
_MIDI_MAX = 127

REFERENCE_OCTAVE: int = 4
"""Octave of the chord-root reference register: C4 = 60 .. B4 = 71."""


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def note_to_pitch_class(name: str) -> int:
    """Map a note name to its pitch class.

    Sharp names come straight from NOTE_NAMES. Flat and other single-accidental
    spellings ("Bb", "Cb", "E#") are resolved from the letter plus accidental,
    modulo 12.

    Args:
        name: Note name without octave, e.g. "C", "F#", "Eb"

    Returns:
        Pitch class in [0, 11]

    Raises:
        ValueError: If name is not a letter A–G with at most one accidental
    """
    if name in NOTE_NAMES:
        return NOTE_NAMES.index(name)
    match = _NOTE_RE.match(name.strip()) if name else None
    if match is None:
        raise ValueError(f"Unknown note name {name!r}. Expected one of {list(NOTE_NAMES)}")
    letter, accidental = match.groups()
    return (_LETTER_PC[letter] + _ACCIDENTAL_SHIFT[accidental]) % _OCTAVE


def pitch_class_to_note(pc: int) -> str:
    """Return the sharp spelling for a pitch class (taken modulo 12)."""
    return NOTE_NAMES[pc % _OCTAVE]


def pitch_to_note_name(pitch: int) -> str:
    """Convert a MIDI pitch to a note name with octave.

    Examples:
        >>> pitch_to_note_name(60)
        'C4'
        >>> pitch_to_note_name(70)
        'A#4'
    """
    octave = pitch // _OCTAVE - 1
    return f"{NOTE_NAMES[pitch % _OCTAVE]}{octave}"


def note_name_to_pitch(name: str) -> int:
    """Convert a note name with octave back to a MIDI pitch.

    Inverse of pitch_to_note_name(); also accepts flat spellings ("Bb3" → 58).

    Raises:
        ValueError: If the name has no octave number, an unknown note, or
            lies outside the MIDI range C-1 (0) .. G9 (127)
    """
    match = _NOTE_WITH_OCTAVE_RE.match(name.strip())
    if match is None:
        raise ValueError(f"Cannot parse note name {name!r}. Expected e.g. 'C#4'")
    note, octave = match.groups()
    letter_pc = _LETTER_PC[note[0]] + _ACCIDENTAL_SHIFT[note[1:]]
    pitch = (int(octave) + 1) * _OCTAVE + letter_pc
    if not (_MIDI_MIN <= pitch <= _MIDI_MAX):
        raise ValueError(
            f"Note {name!r} is MIDI pitch {pitch}, outside [{_MIDI_MIN}, {_MIDI_MAX}]"
        )
    return pitch


def reference_pitch(name: str) -> int:
    """MIDI pitch of a note in the reference octave, e.g. "C" → 60, "B" → 71."""
    return (REFERENCE_OCTAVE + 1) * _OCTAVE + note_to_pitch_class(name)
