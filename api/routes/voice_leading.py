"""
api/routes/voice_leading.py — Voice-leading trainer endpoints.

Endpoints:
    GET  /voice-leading/songs       — Bundled four-voice songs
    POST /voice-leading/analyze     — Whole-song analysis (bundled title or inline)
    POST /voice-leading/transition  — One voicing pair
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, HTTPException

from api.schemas.music import (
    SongAnalysisOut,
    SongAnalyzeRequest,
    SongOut,
    TransitionOut,
    TransitionRequest,
    VoiceMovementOut,
)
from core.music_theory.library import get_voice_leading_song, load_voice_leading_songs
from core.music_theory.notes import pitch_class_to_note, pitch_to_note_name
from core.music_theory.types import ChordSymbol, Progression, Song, TransitionReport, Voicing
from core.music_theory.voice_leading import analyze_song, analyze_transition
from infrastructure.metrics import record_voice_leading_analysis

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/voice-leading", tags=["voice-leading"])

_INLINE_TITLE = "Custom voicings"


def _transition_out(report: TransitionReport) -> TransitionOut:
    return TransitionOut(
        index=report.index,
        from_chord=report.from_chord,
        to_chord=report.to_chord,
        movements=[
            VoiceMovementOut(
                voice=m.voice,
                from_pitch=m.from_pitch,
                to_pitch=m.to_pitch,
                from_note=pitch_to_note_name(m.from_pitch),
                to_note=pitch_to_note_name(m.to_pitch),
                distance=m.distance,
                direction=m.direction.value,
                is_common_tone=m.is_common_tone,
                tier=m.tier.value,
                label=m.label,
            )
            for m in report.movements
        ],
        total_movement=report.total_movement,
        common_tone_count=report.common_tone_count,
        band=report.band.value,
    )


def _inline_song(request: SongAnalyzeRequest) -> Song:
    voicings = tuple(Voicing(tuple(v.pitches)) for v in request.voicings)
    if request.chords is not None:
        progression = Progression.from_symbols(request.label or _INLINE_TITLE, "C", request.chords)
    else:
        # Unlabelled voicings: name each chord after its bass note.
        chords = tuple(ChordSymbol(root=pitch_class_to_note(v.pitches[0])) for v in voicings)
        progression = Progression(title=request.label or _INLINE_TITLE, key="C", chords=chords)
    return Song(title=progression.title, progression=progression, voicings=voicings)


# ---------------------------------------------------------------------------
# GET /voice-leading/songs
# ---------------------------------------------------------------------------


@router.get("/songs", response_model=list[SongOut])
def list_songs() -> list[SongOut]:
    """Return the bundled voice-leading songs."""
    return [
        SongOut(
            title=s.title,
            key=s.progression.key,
            chords=list(s.progression.symbols),
            voicings=[list(v.pitches) for v in s.voicings],
            note_names=[list(v.note_names) for v in s.voicings],
        )
        for s in load_voice_leading_songs()
    ]


# ---------------------------------------------------------------------------
# POST /voice-leading/analyze
# ---------------------------------------------------------------------------


@router.post("/analyze", response_model=SongAnalysisOut)
def analyze(request: SongAnalyzeRequest) -> SongAnalysisOut:
    """Analyze every adjacent voicing pair of a song.

    Raises:
        404: Unknown bundled song title.
        422: Invalid inline song.
    """
    try:
        if request.voicings is not None:
            song = _inline_song(request)
        else:
            song = get_voice_leading_song(request.title)
    except KeyError as exc:
        raise HTTPException(status_code=404, detail=str(exc.args[0])) from exc
    except ValueError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc

    analysis = analyze_song(song)
    record_voice_leading_analysis("song")
    logger.debug(
        "Analyzed %r: mean movement %.2f (%s)",
        song.title,
        analysis.mean_total_movement,
        analysis.band.value,
    )
    return SongAnalysisOut(
        title=analysis.title,
        transitions=[_transition_out(t) for t in analysis.transitions],
        mean_total_movement=analysis.mean_total_movement,
        common_tone_count=analysis.common_tone_count,
        voice_movement_count=analysis.voice_movement_count,
        band=analysis.band.value,
    )


# ---------------------------------------------------------------------------
# POST /voice-leading/transition
# ---------------------------------------------------------------------------


@router.post("/transition", response_model=TransitionOut)
def transition(request: TransitionRequest) -> TransitionOut:
    """Analyze the movement between two voicings."""
    report = analyze_transition(
        Voicing(tuple(request.previous.pitches)),
        Voicing(tuple(request.current.pitches)),
    )
    record_voice_leading_analysis("transition")
    return _transition_out(report)
