"""
core/music_theory/types.py — Frozen value objects for the music theory engine.

All types are immutable frozen dataclasses — safe to hash, cache, and use as
dict keys. No I/O, no side effects, no external dependencies beyond stdlib.

Types:
    ChordQuality      — closed enumeration of recognized chord qualities
    QualityResolution — a suffix resolved against ChordQuality (with fallback flag)
    Interval          — a named semitone distance
    ChordSymbol       — root + verbatim quality suffix, e.g. "Bb" + "min7"
    Progression       — titled, keyed, ordered sequence of ChordSymbols
    Voicing           — 4 MIDI pitches ordered Bass, Tenor, Alto, Soprano
    Song              — a Progression paired 1:1 with Voicings
    VoiceMovement     — one voice's motion between two voicings
    TransitionReport  — all four voice movements + aggregate cost
    SongAnalysis      — per-transition reports + summary for a whole Song
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

# ---------------------------------------------------------------------------
# Voices
# ---------------------------------------------------------------------------

#: Voice labels, ordered bass-to-soprano. Index i is the same voice in every voicing.
VOICE_NAMES: tuple[str, ...] = ("Bass", "Tenor", "Alto", "Soprano")

VOICE_COUNT: int = len(VOICE_NAMES)


# ---------------------------------------------------------------------------
# ChordQuality
# ---------------------------------------------------------------------------


class ChordQuality(Enum):
    """Recognized chord qualities and their semitone offsets from the root."""

    MAJ7 = "maj7"
    MIN7 = "min7"
    DOM7 = "7"
    MIN7B5 = "min7b5"
    DIM7 = "dim7"
    MAJ = "maj"
    MIN = "min"

    @property
    def intervals(self) -> tuple[int, ...]:
        """Ascending, non-negative semitone offsets from the root."""
        return _QUALITY_INTERVALS[self]


_QUALITY_INTERVALS: dict[ChordQuality, tuple[int, ...]] = {
    ChordQuality.MAJ7: (0, 4, 7, 11),
    ChordQuality.MIN7: (0, 3, 7, 10),
    ChordQuality.DOM7: (0, 4, 7, 10),
    ChordQuality.MIN7B5: (0, 3, 6, 10),
    ChordQuality.DIM7: (0, 3, 6, 9),
    ChordQuality.MAJ: (0, 4, 7),
    ChordQuality.MIN: (0, 3, 7),
}


@dataclass(frozen=True)
class QualityResolution:
    """A quality suffix resolved against ChordQuality.

    Attributes:
        suffix:     The text that was looked up, e.g. "min7" or "m9"
        quality:    The quality whose intervals apply. MAJ when unrecognized.
        recognized: False when the suffix is not a ChordQuality value and the
                    major-triad fallback was taken.
    """

    suffix: str
    quality: ChordQuality
    recognized: bool

    @property
    def intervals(self) -> tuple[int, ...]:
        return self.quality.intervals


# ---------------------------------------------------------------------------
# Interval
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Interval:
    """A named ascending interval between unison and octave.

    Examples:
        Interval(semitones=0,  name="Perfect Unison")
        Interval(semitones=7,  name="Perfect 5th")
        Interval(semitones=12, name="Octave")
    """

    semitones: int  # 0–12
    name: str

    def __post_init__(self) -> None:
        if not (0 <= self.semitones <= 12):
            raise ValueError(f"Interval semitones must be in [0, 12], got {self.semitones}")
        if not self.name:
            raise ValueError("Interval name must not be empty")


# ---------------------------------------------------------------------------
# ChordSymbol
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ChordSymbol:
    """A chord symbol split into root and quality suffix.

    Both parts are kept verbatim so a symbol always renders back to the text
    it was parsed from.

    Attributes:
        root:   Root note name, e.g. "D", "F#", "Bb"
        suffix: Text after the root, e.g. "min7", "7", "" (bare major triad)
    """

    root: str
    suffix: str = ""

    def __post_init__(self) -> None:
        if not self.root:
            raise ValueError("ChordSymbol.root must not be empty")

    @property
    def quality(self) -> str:
        """Quality identifier; an empty suffix means 'maj'."""
        return self.suffix or ChordQuality.MAJ.value

    @property
    def text(self) -> str:
        """The symbol as written, e.g. 'Dmin7'."""
        return f"{self.root}{self.suffix}"

    def __str__(self) -> str:
        return self.text


# ---------------------------------------------------------------------------
# Progression
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Progression:
    """An ordered chord sequence tied to a home key.

    Attributes:
        title:    Display title, e.g. "Autumn Leaves"
        key:      Home key note name, e.g. "G", "Ab"
        chords:   ChordSymbols in playback order (at least one)
        composer: Optional credit shown in the standards library
        form:     Optional form description, e.g. "AABA, 32 bars"
    """

    title: str
    key: str
    chords: tuple[ChordSymbol, ...]
    composer: str = ""
    form: str = ""

    def __post_init__(self) -> None:
        from core.music_theory.notes import note_to_pitch_class  # local import to avoid circularity

        if not self.title:
            raise ValueError("Progression.title must not be empty")
        if not self.chords:
            raise ValueError("Progression.chords must not be empty")
        note_to_pitch_class(self.key)

    @classmethod
    def from_symbols(
        cls,
        title: str,
        key: str,
        symbols: list[str] | tuple[str, ...],
        *,
        composer: str = "",
        form: str = "",
    ) -> Progression:
        """Build a Progression by parsing each chord symbol string."""
        from core.music_theory.chords import parse_chord_symbol

        return cls(
            title=title,
            key=key,
            chords=tuple(parse_chord_symbol(s) for s in symbols),
            composer=composer,
            form=form,
        )

    @property
    def symbols(self) -> tuple[str, ...]:
        """Chord symbols as text, e.g. ('Dmin7', 'G7', 'Cmaj7')."""
        return tuple(c.text for c in self.chords)

    def pitch_classes(self) -> tuple[int, ...]:
        """Root pitch class of every chord — compares progressions across spellings."""
        from core.music_theory.notes import note_to_pitch_class

        return tuple(note_to_pitch_class(c.root) for c in self.chords)

    def __len__(self) -> int:
        return len(self.chords)


# ---------------------------------------------------------------------------
# Voicing
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Voicing:
    """One realization of a chord across the four named voices.

    Attributes:
        pitches: MIDI pitches ordered Bass, Tenor, Alto, Soprano
    """

    pitches: tuple[int, ...]

    def __post_init__(self) -> None:
        if len(self.pitches) != VOICE_COUNT:
            raise ValueError(
                f"Voicing must have exactly {VOICE_COUNT} pitches, got {len(self.pitches)}"
            )
        for pitch in self.pitches:
            if not (0 <= pitch <= 127):
                raise ValueError(f"MIDI pitch {pitch} out of range [0, 127]")

    @property
    def note_names(self) -> tuple[str, ...]:
        """Pitches as note names with octave, e.g. ('A3', 'D4', 'F4', 'A4')."""
        from core.music_theory.notes import pitch_to_note_name

        return tuple(pitch_to_note_name(p) for p in self.pitches)

    def __getitem__(self, voice: int) -> int:
        return self.pitches[voice]


# ---------------------------------------------------------------------------
# Song
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Song:
    """A Progression with one Voicing per chord, for voice-leading study."""

    title: str
    progression: Progression
    voicings: tuple[Voicing, ...]

    def __post_init__(self) -> None:
        if len(self.voicings) != len(self.progression.chords):
            raise ValueError(
                f"Song {self.title!r} has {len(self.voicings)} voicings for "
                f"{len(self.progression.chords)} chords"
            )

    def __len__(self) -> int:
        return len(self.voicings)


# ---------------------------------------------------------------------------
# Voice-leading analysis results
# ---------------------------------------------------------------------------


class Direction(Enum):
    """Sign of a voice's movement."""

    UP = "up"
    DOWN = "down"
    SAME = "same"

    @property
    def arrow(self) -> str:
        return {"up": "↑", "down": "↓", "same": "→"}[self.value]


class VoiceTier(Enum):
    """Display tier for a single voice's movement, best first."""

    COMMON_TONE = "common_tone"
    GOOD = "good"
    FAIR = "fair"
    POOR = "poor"


class MovementBand(Enum):
    """Qualitative banding of a transition's total movement."""

    EXCELLENT = "Excellent"
    GOOD = "Good"
    FAIR = "Fair"
    NEEDS_WORK = "Needs work"


@dataclass(frozen=True)
class VoiceMovement:
    """Motion of one voice from a voicing to the next."""

    voice: str
    from_pitch: int
    to_pitch: int
    distance: int
    direction: Direction
    is_common_tone: bool
    tier: VoiceTier

    @property
    def label(self) -> str:
        """Display text, e.g. 'A3 ↑ B3'."""
        from core.music_theory.notes import pitch_to_note_name

        return (
            f"{pitch_to_note_name(self.from_pitch)} {self.direction.arrow} "
            f"{pitch_to_note_name(self.to_pitch)}"
        )


@dataclass(frozen=True)
class TransitionReport:
    """Voice-leading analysis of one adjacent voicing pair.

    Attributes:
        index:             Index of the destination voicing in its song (1-based
                           transitions start at 1; 0 for a standalone pair)
        movements:         One VoiceMovement per voice, bass first
        total_movement:    Sum of per-voice distances in semitones
        common_tone_count: Voices holding their pitch
        band:              Qualitative band of total_movement
    """

    index: int
    movements: tuple[VoiceMovement, ...]
    total_movement: int
    common_tone_count: int
    band: MovementBand
    from_chord: str = ""
    to_chord: str = ""


@dataclass(frozen=True)
class SongAnalysis:
    """Voice-leading analysis across a whole Song.

    Attributes:
        title:                Song title
        transitions:          One TransitionReport per adjacent voicing pair
        mean_total_movement:  Mean of total_movement over transitions (0.0 if none)
        common_tone_count:    Common tones across all transitions
        voice_movement_count: 4 × number of transitions
        band:                 Band of mean_total_movement
    """

    title: str
    transitions: tuple[TransitionReport, ...]
    mean_total_movement: float
    common_tone_count: int
    voice_movement_count: int
    band: MovementBand
