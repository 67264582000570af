"""
api/routes/ear_training.py — Ear-training quiz endpoints.

Endpoints:
    POST /ear-training/question — New interval or chord-quality question
    POST /ear-training/answer   — Grade an answer and return the updated score

Stateless: the client echoes the question and its running score back with
each answer. A question already marked answered is rejected with 409.
"""

from __future__ import annotations

import logging
import random

from fastapi import APIRouter, HTTPException

from api.schemas.practice import (
    AnswerRequest,
    AnswerResponse,
    QuestionOut,
    QuestionRequest,
    ScoreOut,
)
from core.music_theory.ear_training import (
    AnswerAlreadySubmittedError,
    Question,
    Scoreboard,
    generate_question,
    submit_answer,
)
from infrastructure.metrics import record_quiz_answer

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/ear-training", tags=["ear-training"])

_MODE_BY_KIND = {"interval": "intervals", "chord": "chords"}


def _question_out(question: Question) -> QuestionOut:
    return QuestionOut(
        kind=question.kind,
        answer=question.answer,
        options=list(question.options),
        audio=list(question.audio),
        root=question.root,
        answered=question.answered,
    )


def question_from_schema(question: QuestionOut) -> Question:
    """Rebuild a domain Question from its echoed schema.

    Raises:
        ValueError: If the echoed question is inconsistent
    """
    return Question(
        kind=question.kind,
        answer=question.answer,
        options=tuple(question.options),
        audio=tuple(question.audio),
        root=question.root,
        answered=question.answered,
    )


@router.post("/question", response_model=QuestionOut)
def new_question(request: QuestionRequest) -> QuestionOut:
    """Generate a question; a seed makes it reproducible."""
    rng = random.Random(request.seed)
    return _question_out(generate_question(request.mode, rng))


@router.post("/answer", response_model=AnswerResponse)
def answer_question(request: AnswerRequest) -> AnswerResponse:
    """Grade one answer.

    Raises:
        409: The question was already answered.
        422: The echoed question or score is inconsistent.
    """
    try:
        question = question_from_schema(request.question)
        scoreboard = Scoreboard(correct=request.score.correct, attempted=request.score.attempted)
        outcome = submit_answer(question, request.selected, scoreboard)
    except AnswerAlreadySubmittedError as exc:
        raise HTTPException(status_code=409, detail=str(exc)) from exc
    except ValueError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc

    record_quiz_answer(mode=_MODE_BY_KIND[question.kind], correct=outcome.is_correct)
    score = outcome.scoreboard
    return AnswerResponse(
        question=_question_out(outcome.question),
        selected=outcome.selected,
        correct=outcome.is_correct,
        answer=question.answer,
        score=ScoreOut(
            correct=score.correct,
            attempted=score.attempted,
            accuracy=score.accuracy,
            accuracy_percent=score.accuracy_percent,
        ),
    )
