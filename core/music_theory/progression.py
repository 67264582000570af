"""
core/music_theory/progression.py — Transposition and navigation.

transpose() shifts every chord root of a Progression by the interval between
the old and new key, keeping each quality suffix exactly as written. Roots
are re-spelled from NOTE_NAMES (sharps). A zero shift leaves the chords
untouched, spelling included.

Navigation is circular: next/previous always land on a valid index.

Exports:
    transpose(progression, new_key)  → Progression
    key_shift(from_key, to_key)      → int in [0, 11]
    next_index(index, length)        → int
    previous_index(index, length)    → int
    ProgressionCursor                immutable "which chord is selected" snapshot
"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass

from core.music_theory.chords import chord_note_names, symbol_tones
from core.music_theory.notes import NOTE_NAMES, note_to_pitch_class
from core.music_theory.types import ChordSymbol, Progression

# ---------------------------------------------------------------------------
# Transposition
# ---------------------------------------------------------------------------


def key_shift(from_key: str, to_key: str) -> int:
    """Semitones (mod 12) that move from_key onto to_key."""
    return (note_to_pitch_class(to_key) - note_to_pitch_class(from_key)) % 12


def _shift_symbol(symbol: ChordSymbol, shift: int) -> ChordSymbol:
    new_root_index = (note_to_pitch_class(symbol.root) + shift + 12) % 12
    return ChordSymbol(root=NOTE_NAMES[new_root_index], suffix=symbol.suffix)


def transpose(progression: Progression, new_key: str) -> Progression:
    """Transpose a whole progression to a new key.

    Args:
        progression: Source progression
        new_key:     Target key note name, e.g. "D", "Eb"

    Returns:
        A new Progression with key=new_key and every root shifted by the same
        interval. Title and quality suffixes are preserved.

    Raises:
        ValueError: If new_key is not a note name

    Examples:
        >>> p = Progression.from_symbols("ii-V-I", "C", ["Dmin7", "G7", "Cmaj7"])
        >>> transpose(p, "D").symbols
        ('Emin7', 'A7', 'Dmaj7')
    """
    shift = key_shift(progression.key, new_key)
    if shift == 0:
        return dataclasses.replace(progression, key=new_key)

    chords = tuple(_shift_symbol(c, shift) for c in progression.chords)
    return dataclasses.replace(progression, key=new_key, chords=chords)


# ---------------------------------------------------------------------------
# Circular navigation
# ---------------------------------------------------------------------------


def next_index(index: int, length: int) -> int:
    """Index after `index`, wrapping to 0 past the end."""
    if length <= 0:
        raise ValueError(f"length must be > 0, got {length}")
    return (index + 1) % length


def previous_index(index: int, length: int) -> int:
    """Index before `index`, wrapping to length - 1 before the start."""
    if length <= 0:
        raise ValueError(f"length must be > 0, got {length}")
    return (index - 1 + length) % length


@dataclass(frozen=True)
class ProgressionCursor:
    """The selected chord of a progression.

    Every move returns a new cursor; the index is always in range.

    Attributes:
        progression: Progression being practiced
        index:       Selected chord index
    """

    progression: Progression
    index: int = 0

    def __post_init__(self) -> None:
        if not (0 <= self.index < len(self.progression)):
            raise ValueError(
                f"ProgressionCursor.index must be in [0, {len(self.progression) - 1}], "
                f"got {self.index}"
            )

    @property
    def current(self) -> ChordSymbol:
        return self.progression.chords[self.index]

    @property
    def current_tones(self) -> tuple[int, ...]:
        return symbol_tones(self.current)

    @property
    def current_note_names(self) -> tuple[str, ...]:
        chord = self.current
        return chord_note_names(chord.root, chord.quality)

    def next(self) -> ProgressionCursor:
        return dataclasses.replace(self, index=next_index(self.index, len(self.progression)))

    def previous(self) -> ProgressionCursor:
        return dataclasses.replace(self, index=previous_index(self.index, len(self.progression)))

    def select(self, index: int) -> ProgressionCursor:
        """Jump to a chord; out-of-range indexes wrap around."""
        return dataclasses.replace(self, index=index % len(self.progression))

    def transpose(self, new_key: str) -> ProgressionCursor:
        """Transpose the progression, keeping the selected position."""
        return dataclasses.replace(self, progression=transpose(self.progression, new_key))
