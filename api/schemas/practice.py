"""
api/schemas/practice.py — Pydantic schemas for ear training, playback and export.

Covers:
    /ear-training/question  — QuestionRequest / QuestionOut
    /ear-training/answer    — AnswerRequest / AnswerResponse
    /playback/*             — PlayNoteRequest / PlayChordRequest / PlayVoicingRequest
                              / PlaySequenceRequest / PlayQuestionRequest / PlaybackStatus
    /export/midi            — ExportRequest
"""

from typing import Literal

from pydantic import BaseModel, Field, field_validator, model_validator

from api.schemas.music import ProgressionIn, VoicingIn
from core.music_theory.notes import note_name_to_pitch, note_to_pitch_class

# ---------------------------------------------------------------------------
# /ear-training
# ---------------------------------------------------------------------------


class ScoreIn(BaseModel):
    """Running scoreboard kept by the client between answers."""

    correct: int = Field(0, ge=0)
    attempted: int = Field(0, ge=0)

    @model_validator(mode="after")
    def correct_not_above_attempted(self) -> "ScoreIn":
        if self.correct > self.attempted:
            raise ValueError("'correct' cannot exceed 'attempted'")
        return self


class ScoreOut(BaseModel):
    correct: int
    attempted: int
    accuracy: float = Field(..., ge=0.0, le=1.0)
    accuracy_percent: int = Field(..., ge=0, le=100)


class QuestionRequest(BaseModel):
    mode: Literal["intervals", "chords"] = "intervals"
    seed: int | None = None


class QuestionOut(BaseModel):
    """A question as shown to (and echoed back by) the client."""

    kind: Literal["interval", "chord"]
    answer: str
    options: list[str]
    audio: list[str]
    root: str
    answered: bool = False

    @field_validator("audio")
    @classmethod
    def audio_notes_playable(cls, v: list[str]) -> list[str]:
        for name in v:
            note_name_to_pitch(name)
        return v


class AnswerRequest(BaseModel):
    question: QuestionOut
    selected: str
    score: ScoreIn = ScoreIn()


class AnswerResponse(BaseModel):
    question: QuestionOut
    selected: str
    correct: bool
    answer: str
    score: ScoreOut


# ---------------------------------------------------------------------------
# /playback
# ---------------------------------------------------------------------------


class PlayNoteRequest(BaseModel):
    """One piano key: "F#" sounds in the reference octave, "F#5" as written."""

    note: str = Field(..., max_length=8)
    duration: str = "8n"

    @field_validator("note")
    @classmethod
    def note_must_be_playable(cls, v: str) -> str:
        if v[-1:].isdigit():
            note_name_to_pitch(v)
        else:
            note_to_pitch_class(v)
        return v


class PlayChordRequest(BaseModel):
    symbol: str = Field(..., max_length=32)
    duration: str = "4n"


class PlayVoicingRequest(BaseModel):
    """Play one voicing of a bundled song (title + index) or an inline voicing."""

    song: str | None = None
    index: int | None = Field(None, ge=0)
    voicing: VoicingIn | None = None
    duration: str = "1n"

    @model_validator(mode="after")
    def exactly_one_source(self) -> "PlayVoicingRequest":
        if (self.song is None) == (self.voicing is None):
            raise ValueError("Provide exactly one of 'song' or 'voicing'")
        if self.song is not None and self.index is None:
            raise ValueError("'song' requires 'index'")
        if self.voicing is not None and self.index is not None:
            raise ValueError("'index' can only accompany 'song'")
        return self


class PlaySequenceRequest(BaseModel):
    """Play a bundled standard, a bundled voice-leading song, or an inline progression."""

    standard: str | None = None
    song: str | None = None
    progression: ProgressionIn | None = None
    duration: str = "2n"

    @model_validator(mode="after")
    def exactly_one_source(self) -> "PlaySequenceRequest":
        sources = [s for s in (self.standard, self.song, self.progression) if s is not None]
        if len(sources) != 1:
            raise ValueError("Provide exactly one of 'standard', 'song' or 'progression'")
        return self


class PlayQuestionRequest(BaseModel):
    question: QuestionOut


class PlaybackStatus(BaseModel):
    started: bool
    is_playing: bool
    pending_steps: int
    current_index: int | None = None
    notes: list[str] = []
    steps: int = 0
    cancelled: int = 0


# ---------------------------------------------------------------------------
# /export
# ---------------------------------------------------------------------------


class ExportRequest(BaseModel):
    """Export a bundled standard, a bundled song (voicings) or an inline progression."""

    standard: str | None = None
    song: str | None = None
    progression: ProgressionIn | None = None
    voicings: list[VoicingIn] | None = None
    bpm: float = Field(120.0, gt=0, le=400)
    beats_per_chord: int = Field(4, ge=1, le=16)

    @model_validator(mode="after")
    def exactly_one_source(self) -> "ExportRequest":
        sources = [s for s in (self.standard, self.song, self.progression) if s is not None]
        if len(sources) != 1:
            raise ValueError("Provide exactly one of 'standard', 'song' or 'progression'")
        if self.voicings is not None and self.progression is None:
            raise ValueError("'voicings' can only accompany an inline 'progression'")
        return self
