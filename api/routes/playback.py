"""
api/routes/playback.py — Audio playback endpoints.

Endpoints:
    POST /playback/note         — Sound one piano key
    POST /playback/chord        — Sound one chord symbol
    POST /playback/voicing      — Sound one voicing of a song, or an inline voicing
    POST /playback/progression  — Play a standard, a voice-leading song or an inline progression
    POST /playback/question     — Play the audio of an ear-training question
    POST /playback/stop         — Cancel pending sequence steps
    GET  /playback/status       — Engine and scheduler state

The engine and player come from app.state via api.deps. A MIDI backend
that cannot open its port surfaces as 503.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException

from api.deps import get_audio_engine, get_practice_player
from api.routes.ear_training import question_from_schema
from api.schemas.practice import (
    PlaybackStatus,
    PlayChordRequest,
    PlayNoteRequest,
    PlayQuestionRequest,
    PlaySequenceRequest,
    PlayVoicingRequest,
)
from core.music_theory.library import get_standard, get_voice_leading_song
from core.music_theory.types import Voicing
from infrastructure.metrics import record_playback
from playback.engine import AudioEngine
from playback.practice import PracticePlayer

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/playback", tags=["playback"])


def _status(
    engine: AudioEngine,
    player: PracticePlayer,
    *,
    notes: tuple[str, ...] = (),
    steps: int = 0,
    cancelled: int = 0,
) -> PlaybackStatus:
    return PlaybackStatus(
        started=engine.started,
        is_playing=player.is_playing,
        pending_steps=player.pending_steps,
        current_index=player.current_index,
        notes=list(notes),
        steps=steps,
        cancelled=cancelled,
    )


def _engine_unavailable(exc: OSError) -> HTTPException:
    logger.error("Audio engine unavailable: %s", exc)
    return HTTPException(status_code=503, detail=f"Audio engine unavailable: {exc}")


# ---------------------------------------------------------------------------
# POST /playback/note
# ---------------------------------------------------------------------------


@router.post("/note", response_model=PlaybackStatus)
def play_note(
    request: PlayNoteRequest,
    engine: AudioEngine = Depends(get_audio_engine),
    player: PracticePlayer = Depends(get_practice_player),
) -> PlaybackStatus:
    """Sound one piano key; a bare note name plays in the reference octave.

    Raises:
        422: Invalid note name or duration token.
        503: MIDI port could not be opened.
    """
    try:
        note = player.play_note(request.note, request.duration)
    except OSError as exc:
        raise _engine_unavailable(exc) from exc
    except ValueError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc

    record_playback("note")
    return _status(engine, player, notes=(note,), steps=1)


# ---------------------------------------------------------------------------
# POST /playback/chord
# ---------------------------------------------------------------------------


@router.post("/chord", response_model=PlaybackStatus)
def play_chord(
    request: PlayChordRequest,
    engine: AudioEngine = Depends(get_audio_engine),
    player: PracticePlayer = Depends(get_practice_player),
) -> PlaybackStatus:
    """Sound a chord symbol in root position.

    Raises:
        422: Invalid duration token.
        503: MIDI port could not be opened.
    """
    try:
        notes = player.play_chord_symbol(request.symbol, request.duration)
    except OSError as exc:
        raise _engine_unavailable(exc) from exc
    except ValueError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc

    record_playback("chord")
    return _status(engine, player, notes=notes, steps=1)


# ---------------------------------------------------------------------------
# POST /playback/voicing
# ---------------------------------------------------------------------------


@router.post("/voicing", response_model=PlaybackStatus)
def play_voicing(
    request: PlayVoicingRequest,
    engine: AudioEngine = Depends(get_audio_engine),
    player: PracticePlayer = Depends(get_practice_player),
) -> PlaybackStatus:
    """Sound one voicing. A song voicing also becomes the current index.

    Raises:
        404: Unknown song title.
        422: Index past the end of the song, or invalid duration token.
        503: MIDI port could not be opened.
    """
    index: int | None = None
    try:
        if request.song is not None:
            song = get_voice_leading_song(request.song)
            index = request.index
            if index >= len(song):
                raise ValueError(
                    f"index {index} out of range for {song.title!r} ({len(song)} voicings)"
                )
            voicing = song.voicings[index]
        else:
            voicing = Voicing(tuple(request.voicing.pitches))
        notes = player.play_voicing(voicing, request.duration, index=index)
    except KeyError as exc:
        raise HTTPException(status_code=404, detail=str(exc.args[0])) from exc
    except OSError as exc:
        raise _engine_unavailable(exc) from exc
    except ValueError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc

    record_playback("voicing")
    return _status(engine, player, notes=notes, steps=1)


# ---------------------------------------------------------------------------
# POST /playback/progression
# ---------------------------------------------------------------------------


@router.post("/progression", response_model=PlaybackStatus)
def play_progression(
    request: PlaySequenceRequest,
    engine: AudioEngine = Depends(get_audio_engine),
    player: PracticePlayer = Depends(get_practice_player),
) -> PlaybackStatus:
    """Schedule a whole progression, replacing whatever was still pending.

    Raises:
        404: Unknown standard or song title.
        422: Invalid inline progression or duration token.
        503: MIDI port could not be opened.
    """
    cancelled = player.pending_steps
    try:
        if request.song is not None:
            steps = player.play_song(get_voice_leading_song(request.song), request.duration)
            kind = "song"
        else:
            if request.standard is not None:
                progression = get_standard(request.standard)
            else:
                progression = request.progression.to_progression()
            steps = player.play_progression(progression, request.duration)
            kind = "progression"
    except KeyError as exc:
        raise HTTPException(status_code=404, detail=str(exc.args[0])) from exc
    except OSError as exc:
        raise _engine_unavailable(exc) from exc
    except ValueError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc

    record_playback(kind)
    return _status(engine, player, steps=steps, cancelled=cancelled)


# ---------------------------------------------------------------------------
# POST /playback/question
# ---------------------------------------------------------------------------


@router.post("/question", response_model=PlaybackStatus)
def play_question(
    request: PlayQuestionRequest,
    engine: AudioEngine = Depends(get_audio_engine),
    player: PracticePlayer = Depends(get_practice_player),
) -> PlaybackStatus:
    """Play an ear-training question (interval: two notes, chord: together)."""
    try:
        question = question_from_schema(request.question)
        player.play_question(question)
    except OSError as exc:
        raise _engine_unavailable(exc) from exc
    except ValueError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc

    record_playback("question")
    return _status(engine, player, notes=question.audio, steps=len(question.audio))


# ---------------------------------------------------------------------------
# POST /playback/stop, GET /playback/status
# ---------------------------------------------------------------------------


@router.post("/stop", response_model=PlaybackStatus)
def stop(
    engine: AudioEngine = Depends(get_audio_engine),
    player: PracticePlayer = Depends(get_practice_player),
) -> PlaybackStatus:
    """Cancel every pending step."""
    cancelled = player.stop()
    return _status(engine, player, cancelled=cancelled)


@router.get("/status", response_model=PlaybackStatus)
def status(
    engine: AudioEngine = Depends(get_audio_engine),
    player: PracticePlayer = Depends(get_practice_player),
) -> PlaybackStatus:
    return _status(engine, player)
