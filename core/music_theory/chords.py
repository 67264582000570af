"""
core/music_theory/chords.py — Chord symbol parsing and chord-tone resolution.

Chord symbols are "<root><suffix>" tokens such as "Dmin7", "G7", "Bbmaj7" or
"F" (bare major triad). Parsing never fails and neither does resolution:

    - A symbol that does not start with a note letter parses as C major.
    - A suffix that is not a ChordQuality value resolves to the major-triad
      intervals; QualityResolution.recognized is False in that case.

Exports:
    CHORD_INTERVALS                   quality identifier → semitone offsets
    PRACTICE_QUALITIES                qualities drilled by the ear-training quiz
    parse_chord_symbol(text)          → ChordSymbol
    resolve_quality(suffix)           → QualityResolution
    chord_tones(root, quality)        → tuple[int, ...] MIDI pitches
    chord_note_names(root, quality)   → tuple[str, ...] e.g. ("C4", "E4", "G4", "B4")
    symbol_tones(symbol)              → tuple[int, ...]
"""

from __future__ import annotations

import logging
import re

from core.music_theory.notes import pitch_to_note_name, reference_pitch
from core.music_theory.types import ChordQuality, ChordSymbol, QualityResolution

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Tables
# ---------------------------------------------------------------------------

CHORD_INTERVALS: dict[str, tuple[int, ...]] = {q.value: q.intervals for q in ChordQuality}

PRACTICE_QUALITIES: tuple[ChordQuality, ...] = (
    ChordQuality.MAJ7,
    ChordQuality.MIN7,
    ChordQuality.DOM7,
    ChordQuality.MIN7B5,
    ChordQuality.DIM7,
)

_SYMBOL_RE = re.compile(r"^([A-G][#b]?)(.*)$")

_FALLBACK_ROOT = "C"
_FALLBACK_QUALITY = ChordQuality.MAJ

# ---------------------------------------------------------------------------
# Parsing
# ---------------------------------------------------------------------------


def parse_chord_symbol(text: str) -> ChordSymbol:
    """Split a chord symbol into root and quality suffix.

    Args:
        text: e.g. "Dmin7", "F#min7b5", "Bb7", "C"

    Returns:
        ChordSymbol with the root and suffix kept verbatim. Unparseable input
        yields ChordSymbol("C", "") — root C, quality maj.

    Examples:
        >>> parse_chord_symbol("Ebmaj7")
        ChordSymbol(root='Eb', suffix='maj7')
        >>> parse_chord_symbol("N.C.").quality
        'maj'
    """
    match = _SYMBOL_RE.match(text.strip())
    if match is None:
        logger.debug("Unparseable chord symbol %r, using %s%s", text, _FALLBACK_ROOT, "maj")
        return ChordSymbol(root=_FALLBACK_ROOT, suffix="")
    root, suffix = match.groups()
    return ChordSymbol(root=root, suffix=suffix)


def resolve_quality(suffix: str) -> QualityResolution:
    """Look a quality identifier up in ChordQuality.

    An empty suffix is the major triad. Any other unknown text falls back to
    ChordQuality.MAJ with recognized=False.
    """
    if not suffix:
        return QualityResolution(suffix=suffix, quality=ChordQuality.MAJ, recognized=True)
    try:
        return QualityResolution(suffix=suffix, quality=ChordQuality(suffix), recognized=True)
    except ValueError:
        logger.debug("Unknown chord quality %r, using %s intervals", suffix, _FALLBACK_QUALITY.value)
        return QualityResolution(suffix=suffix, quality=_FALLBACK_QUALITY, recognized=False)


# ---------------------------------------------------------------------------
# Chord tones
# ---------------------------------------------------------------------------


def chord_tones(root: str, quality: str) -> tuple[int, ...]:
    """Resolve a root + quality to MIDI pitches in the reference octave.

    Args:
        root:    Root note name, e.g. "C", "F#", "Bb"
        quality: Quality identifier, e.g. "maj7". Unknown → major triad.

    Returns:
        Root pitch (60–71) plus each interval of the quality, in interval order.

    Raises:
        ValueError: If root is not a note name

    Examples:
        >>> chord_tones("C", "maj7")
        (60, 64, 67, 71)
    """
    root_pitch = reference_pitch(root)
    return tuple(root_pitch + offset for offset in resolve_quality(quality).intervals)


def chord_note_names(root: str, quality: str) -> tuple[str, ...]:
    """chord_tones() rendered as note names with octave, e.g. ('D4', 'F4', 'A4', 'C5')."""
    return tuple(pitch_to_note_name(p) for p in chord_tones(root, quality))


def symbol_tones(symbol: ChordSymbol | str) -> tuple[int, ...]:
    """Chord tones for a ChordSymbol or a raw symbol string."""
    if isinstance(symbol, str):
        symbol = parse_chord_symbol(symbol)
    return chord_tones(symbol.root, symbol.quality)
