"""Prometheus metrics for the Jazz Piano Trainer.

Exposes practice context in metrics so dashboards show what students drill,
not just generic HTTP stats.

Metrics:
    playback_requests_total          Counter by kind (note/chord/voicing/progression/song/question)
    quiz_answers_total               Counter by quiz mode and result (correct/incorrect)
    transpositions_total             Counter of progression transpositions
    voice_leading_analyses_total     Counter of song / transition analyses

Usage::

    from infrastructure.metrics import (
        record_playback,
        record_quiz_answer,
        record_transposition,
    )
"""

from __future__ import annotations

import logging

from prometheus_client import (
    CONTENT_TYPE_LATEST,
    CollectorRegistry,
    Counter,
    generate_latest,
)

logger = logging.getLogger(__name__)

_REGISTRY = CollectorRegistry()

playback_requests_total = Counter(
    "jpt_playback_requests_total",
    "Playback requests by kind",
    ["kind"],
    registry=_REGISTRY,
)

quiz_answers_total = Counter(
    "jpt_quiz_answers_total",
    "Ear-training answers by quiz mode and result",
    ["mode", "result"],
    registry=_REGISTRY,
)

transpositions_total = Counter(
    "jpt_transpositions_total",
    "Progression transpositions",
    registry=_REGISTRY,
)

voice_leading_analyses_total = Counter(
    "jpt_voice_leading_analyses_total",
    "Voice-leading analyses by scope (song/transition)",
    ["scope"],
    registry=_REGISTRY,
)

logger.info("Prometheus metrics registry initialized")


# ---------------------------------------------------------------------------
# Public helpers
# ---------------------------------------------------------------------------


def record_playback(kind: str) -> None:
    """Increment the playback counter.

    Args:
        kind: One of "note", "chord", "voicing", "progression", "song", "question".
    """
    playback_requests_total.labels(kind=kind).inc()


def record_quiz_answer(*, mode: str, correct: bool) -> None:
    """Record one graded ear-training answer.

    Args:
        mode: Quiz mode, "intervals" or "chords".
        correct: Whether the answer matched.
    """
    quiz_answers_total.labels(mode=mode, result="correct" if correct else "incorrect").inc()


def record_transposition() -> None:
    """Increment the transposition counter."""
    transpositions_total.inc()


def record_voice_leading_analysis(scope: str) -> None:
    """Increment the voice-leading analysis counter for "song" or "transition"."""
    voice_leading_analyses_total.labels(scope=scope).inc()


def get_metrics_response() -> tuple[bytes, str]:
    """Generate Prometheus text exposition format.

    Returns:
        Tuple of (body_bytes, content_type_string).
    """
    return generate_latest(_REGISTRY), CONTENT_TYPE_LATEST
