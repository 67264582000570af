"""
api/schemas/music.py — Pydantic request/response schemas for theory endpoints.

Covers:
    /standards                 — ProgressionOut
    /progressions/transpose    — TransposeRequest / ProgressionOut
    /progressions/navigate     — NavigateRequest / NavigateResponse
    /chords/parse              — ChordParseRequest / ChordOut
    /voice-leading/songs       — SongOut
    /voice-leading/analyze     — SongAnalyzeRequest / SongAnalysisOut
    /voice-leading/transition  — TransitionRequest / TransitionOut
"""

from typing import Literal

from pydantic import BaseModel, Field, field_validator, model_validator

from core.music_theory.notes import NOTE_NAMES, note_to_pitch_class
from core.music_theory.types import Progression

# ---------------------------------------------------------------------------
# Shared sub-schemas
# ---------------------------------------------------------------------------


def _validate_note(value: str) -> str:
    note_to_pitch_class(value)
    return value


class ChordOut(BaseModel):
    """A chord symbol resolved to root, quality and tones."""

    symbol: str
    root: str
    quality: str
    recognized_quality: bool
    midi_notes: list[int]
    note_names: list[str]


class ProgressionOut(BaseModel):
    """A titled progression in a key."""

    title: str
    key: str
    composer: str = ""
    form: str = ""
    chords: list[str]


class ProgressionIn(BaseModel):
    """A progression supplied inline by the client."""

    title: str = Field(..., min_length=1)
    key: str
    chords: list[str] = Field(..., min_length=1)

    @field_validator("key")
    @classmethod
    def key_must_be_note(cls, v: str) -> str:
        return _validate_note(v)

    def to_progression(self) -> Progression:
        return Progression.from_symbols(self.title, self.key, self.chords)


# ---------------------------------------------------------------------------
# /progressions
# ---------------------------------------------------------------------------


class TransposeRequest(BaseModel):
    """Transpose either a bundled standard (by title) or an inline progression."""

    new_key: str = Field(..., description=f"Target key, one of {list(NOTE_NAMES)} or a flat name")
    title: str | None = None
    progression: ProgressionIn | None = None

    @field_validator("new_key")
    @classmethod
    def new_key_must_be_note(cls, v: str) -> str:
        return _validate_note(v)

    @model_validator(mode="after")
    def exactly_one_source(self) -> "TransposeRequest":
        if (self.title is None) == (self.progression is None):
            raise ValueError("Provide exactly one of 'title' or 'progression'")
        return self


class NavigateRequest(BaseModel):
    """Move the selected chord of a progression.

    Send the progression itself (bundled ``standard`` title or inline
    ``progression``) to get the newly selected chord back, or only its
    ``length`` to move a bare index.
    """

    length: int | None = Field(None, ge=1)
    standard: str | None = None
    progression: ProgressionIn | None = None
    index: int = Field(0, ge=0)
    action: Literal["next", "previous", "select"]
    target: int | None = None

    @model_validator(mode="after")
    def index_in_range(self) -> "NavigateRequest":
        sources = [s for s in (self.length, self.standard, self.progression) if s is not None]
        if len(sources) != 1:
            raise ValueError("Provide exactly one of 'length', 'standard' or 'progression'")
        size = self.length
        if self.progression is not None:
            size = len(self.progression.chords)
        if size is not None and self.index >= size:
            raise ValueError(f"index must be < length ({size})")
        if self.action == "select" and self.target is None:
            raise ValueError("'select' requires 'target'")
        return self


class NavigateResponse(BaseModel):
    index: int
    chord: ChordOut | None = None


# ---------------------------------------------------------------------------
# /chords
# ---------------------------------------------------------------------------


class ChordParseRequest(BaseModel):
    symbol: str = Field(..., max_length=32)


# ---------------------------------------------------------------------------
# /voice-leading
# ---------------------------------------------------------------------------


class VoicingIn(BaseModel):
    """Four MIDI pitches ordered Bass, Tenor, Alto, Soprano."""

    pitches: list[int] = Field(..., min_length=4, max_length=4)

    @field_validator("pitches")
    @classmethod
    def pitches_in_range(cls, v: list[int]) -> list[int]:
        for p in v:
            if not (0 <= p <= 127):
                raise ValueError(f"MIDI pitch {p} out of range [0, 127]")
        return v


class SongOut(BaseModel):
    title: str
    key: str
    chords: list[str]
    voicings: list[list[int]]
    note_names: list[list[str]]


class SongAnalyzeRequest(BaseModel):
    """Analyze a bundled song (by ``title``) or inline ``voicings``.

    Inline songs may carry ``chords`` symbols and a display ``label``.
    """

    title: str | None = None
    voicings: list[VoicingIn] | None = None
    chords: list[str] | None = None
    label: str | None = Field(None, min_length=1)

    @model_validator(mode="after")
    def source_is_complete(self) -> "SongAnalyzeRequest":
        if (self.title is None) == (self.voicings is None):
            raise ValueError("Provide exactly one of 'title' or 'voicings'")
        if self.voicings is not None:
            if not self.voicings:
                raise ValueError("'voicings' must not be empty")
            if self.chords is not None and len(self.chords) != len(self.voicings):
                raise ValueError("'chords' and 'voicings' must have the same length")
        elif self.chords is not None or self.label is not None:
            raise ValueError("'chords' and 'label' can only accompany inline 'voicings'")
        return self


class TransitionRequest(BaseModel):
    previous: VoicingIn
    current: VoicingIn


class VoiceMovementOut(BaseModel):
    voice: str
    from_pitch: int
    to_pitch: int
    from_note: str
    to_note: str
    distance: int
    direction: Literal["up", "down", "same"]
    is_common_tone: bool
    tier: Literal["common_tone", "good", "fair", "poor"]
    label: str


class TransitionOut(BaseModel):
    index: int
    from_chord: str = ""
    to_chord: str = ""
    movements: list[VoiceMovementOut]
    total_movement: int
    common_tone_count: int
    band: str


class SongAnalysisOut(BaseModel):
    title: str
    transitions: list[TransitionOut]
    mean_total_movement: float
    common_tone_count: int
    voice_movement_count: int
    band: str
