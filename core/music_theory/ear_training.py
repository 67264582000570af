"""
core/music_theory/ear_training.py — Ear-training questions and scoring.

Two quiz modes:
    intervals — a random interval (unison..octave) above a random root;
                the answer is the interval name, the options are all 13 names
    chords    — a random practice quality (maj7, min7, 7, min7b5, dim7) on a
                random root; the answer is the quality, the options are the 5

Each question is Unanswered until one answer is submitted, then Answered for
good: there are no retries and no partial credit. Scoring is a running
correct/attempted count.

Design:
    - Randomness comes from an injected random.Random so questions are
      reproducible from a seed.
    - Question and Scoreboard are frozen; submit_answer() returns new values.
"""

from __future__ import annotations

import dataclasses
import random
from dataclasses import dataclass
from enum import Enum

from core.music_theory.chords import PRACTICE_QUALITIES, chord_note_names
from core.music_theory.notes import (
    NOTE_NAMES,
    REFERENCE_OCTAVE,
    note_name_to_pitch,
    pitch_to_note_name,
    reference_pitch,
)
from core.music_theory.types import Interval

# ---------------------------------------------------------------------------
# Tables
# ---------------------------------------------------------------------------

INTERVALS: tuple[Interval, ...] = (
    Interval(0, "Perfect Unison"),
    Interval(1, "Minor 2nd"),
    Interval(2, "Major 2nd"),
    Interval(3, "Minor 3rd"),
    Interval(4, "Major 3rd"),
    Interval(5, "Perfect 4th"),
    Interval(6, "Tritone"),
    Interval(7, "Perfect 5th"),
    Interval(8, "Minor 6th"),
    Interval(9, "Major 6th"),
    Interval(10, "Minor 7th"),
    Interval(11, "Major 7th"),
    Interval(12, "Octave"),
)

INTERVAL_NAMES: tuple[str, ...] = tuple(i.name for i in INTERVALS)

CHORD_OPTIONS: tuple[str, ...] = tuple(q.value for q in PRACTICE_QUALITIES)


class QuizMode(Enum):
    INTERVALS = "intervals"
    CHORDS = "chords"


class AnswerAlreadySubmittedError(ValueError):
    """Raised when a second answer is submitted for the same question."""


# ---------------------------------------------------------------------------
# Question / Scoreboard
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Question:
    """One ear-training question.

    Attributes:
        kind:     "interval" or "chord"
        answer:   Correct option, e.g. "Perfect 5th" or "min7b5"
        options:  All selectable options, in fixed table order
        audio:    Note names with octave to play, e.g. ("D4", "A4")
        root:     Root note of the question
        answered: False until an answer has been submitted
    """

    kind: str
    answer: str
    options: tuple[str, ...]
    audio: tuple[str, ...]
    root: str
    answered: bool = False

    def __post_init__(self) -> None:
        if self.kind not in ("interval", "chord"):
            raise ValueError(f"Question.kind must be 'interval' or 'chord', got {self.kind!r}")
        if self.answer not in self.options:
            raise ValueError(f"Question.answer {self.answer!r} is not one of its options")
        if not self.audio:
            raise ValueError("Question.audio must not be empty")
        if self.kind == "interval" and len(self.audio) != 2:
            raise ValueError(f"An interval question plays two notes, got {len(self.audio)}")
        for name in self.audio:
            note_name_to_pitch(name)


@dataclass(frozen=True)
class Scoreboard:
    """Running correct / attempted counter."""

    correct: int = 0
    attempted: int = 0

    def __post_init__(self) -> None:
        if self.correct < 0 or self.attempted < 0:
            raise ValueError("Scoreboard counts must be non-negative")
        if self.correct > self.attempted:
            raise ValueError(
                f"Scoreboard.correct ({self.correct}) cannot exceed attempted ({self.attempted})"
            )

    @property
    def accuracy(self) -> float:
        """correct / attempted, or 0.0 before any attempt."""
        if self.attempted == 0:
            return 0.0
        return self.correct / self.attempted

    @property
    def accuracy_percent(self) -> int:
        """Accuracy as a whole percentage, rounding halves up."""
        if self.attempted == 0:
            return 0
        return (200 * self.correct + self.attempted) // (2 * self.attempted)

    def record(self, is_correct: bool) -> Scoreboard:
        return Scoreboard(
            correct=self.correct + (1 if is_correct else 0),
            attempted=self.attempted + 1,
        )


@dataclass(frozen=True)
class AnswerOutcome:
    """Result of submit_answer()."""

    question: Question
    selected: str
    is_correct: bool
    scoreboard: Scoreboard


# ---------------------------------------------------------------------------
# Generation
# ---------------------------------------------------------------------------


def generate_interval_question(rng: random.Random | None = None) -> Question:
    """Pick a random interval above a random root.

    The root sounds in the reference octave and the top note is
    root + semitones, so an octave question on B spans B4 → B5.
    """
    rng = rng or random.Random()
    interval = rng.choice(INTERVALS)
    root = rng.choice(NOTE_NAMES)
    top = pitch_to_note_name(reference_pitch(root) + interval.semitones)
    return Question(
        kind="interval",
        answer=interval.name,
        options=INTERVAL_NAMES,
        audio=(f"{root}{REFERENCE_OCTAVE}", top),
        root=root,
    )


def generate_chord_question(rng: random.Random | None = None) -> Question:
    """Pick a random practice quality on a random root."""
    rng = rng or random.Random()
    quality = rng.choice(CHORD_OPTIONS)
    root = rng.choice(NOTE_NAMES)
    return Question(
        kind="chord",
        answer=quality,
        options=CHORD_OPTIONS,
        audio=chord_note_names(root, quality),
        root=root,
    )


def generate_question(mode: QuizMode | str, rng: random.Random | None = None) -> Question:
    """Generate a question for a quiz mode ("intervals" or "chords")."""
    mode = QuizMode(mode)
    if mode is QuizMode.INTERVALS:
        return generate_interval_question(rng)
    return generate_chord_question(rng)


# ---------------------------------------------------------------------------
# Answering
# ---------------------------------------------------------------------------


def submit_answer(question: Question, selected: str, scoreboard: Scoreboard) -> AnswerOutcome:
    """Grade one answer.

    Attempted always increments; correct increments on an exact match only.

    Raises:
        AnswerAlreadySubmittedError: If the question was already answered
    """
    if question.answered:
        raise AnswerAlreadySubmittedError("This question has already been answered")
    is_correct = selected == question.answer
    return AnswerOutcome(
        question=dataclasses.replace(question, answered=True),
        selected=selected,
        is_correct=is_correct,
        scoreboard=scoreboard.record(is_correct),
    )
