"""
api/routes/progressions.py — Standards library, transposition, navigation, chord parsing.

Endpoints:
    GET  /standards                — All bundled standards
    GET  /standards/{title}        — One standard by title
    POST /progressions/transpose   — Transpose a standard or inline progression
    POST /progressions/navigate    — Circular next / previous / select
    POST /chords/parse             — Parse a chord symbol into root, quality and tones

No audio, no state — pure music theory computation.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, HTTPException

from api.schemas.music import (
    ChordOut,
    ChordParseRequest,
    NavigateRequest,
    NavigateResponse,
    ProgressionOut,
    TransposeRequest,
)
from core.music_theory.chords import (
    chord_note_names,
    parse_chord_symbol,
    resolve_quality,
    symbol_tones,
)
from core.music_theory.library import get_standard, load_standards
from core.music_theory.progression import ProgressionCursor, next_index, previous_index, transpose
from core.music_theory.types import ChordSymbol, Progression
from infrastructure.metrics import record_transposition

logger = logging.getLogger(__name__)

router = APIRouter(tags=["progressions"])


def _progression_out(progression: Progression) -> ProgressionOut:
    return ProgressionOut(
        title=progression.title,
        key=progression.key,
        composer=progression.composer,
        form=progression.form,
        chords=list(progression.symbols),
    )


def _chord_out(
    symbol: ChordSymbol, tones: tuple[int, ...], note_names: tuple[str, ...]
) -> ChordOut:
    return ChordOut(
        symbol=symbol.text,
        root=symbol.root,
        quality=symbol.quality,
        recognized_quality=resolve_quality(symbol.suffix).recognized,
        midi_notes=list(tones),
        note_names=list(note_names),
    )


# ---------------------------------------------------------------------------
# GET /standards
# ---------------------------------------------------------------------------


@router.get("/standards", response_model=list[ProgressionOut])
def list_standards() -> list[ProgressionOut]:
    """Return every bundled standard in library order."""
    return [_progression_out(p) for p in load_standards()]


@router.get("/standards/{title}", response_model=ProgressionOut)
def read_standard(title: str) -> ProgressionOut:
    """Return one standard by title (case-insensitive).

    Raises:
        404: Unknown title.
    """
    try:
        return _progression_out(get_standard(title))
    except KeyError as exc:
        raise HTTPException(status_code=404, detail=str(exc.args[0])) from exc


# ---------------------------------------------------------------------------
# POST /progressions/transpose
# ---------------------------------------------------------------------------


@router.post("/progressions/transpose", response_model=ProgressionOut)
def transpose_progression(request: TransposeRequest) -> ProgressionOut:
    """Transpose a progression to a new key.

    Every root moves by the interval between the old and new key; quality
    suffixes are kept as written.

    Raises:
        404: Unknown standard title.
        422: Invalid key or progression.
    """
    try:
        if request.title is not None:
            source = get_standard(request.title)
        else:
            source = request.progression.to_progression()
    except KeyError as exc:
        raise HTTPException(status_code=404, detail=str(exc.args[0])) from exc
    except ValueError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc

    result = transpose(source, request.new_key)
    record_transposition()
    logger.debug("Transposed %r from %s to %s", source.title, source.key, request.new_key)
    return _progression_out(result)


# ---------------------------------------------------------------------------
# POST /progressions/navigate
# ---------------------------------------------------------------------------


@router.post(
    "/progressions/navigate", response_model=NavigateResponse, response_model_exclude_none=True
)
def navigate(request: NavigateRequest) -> NavigateResponse:
    """Move through a progression circularly.

    With a standard or inline progression the response also carries the
    newly selected chord, ready to display or play.

    Raises:
        404: Unknown standard title.
        422: Invalid progression or index past its end.
    """
    if request.length is not None:
        if request.action == "next":
            index = next_index(request.index, request.length)
        elif request.action == "previous":
            index = previous_index(request.index, request.length)
        else:
            index = request.target % request.length
        return NavigateResponse(index=index)

    try:
        if request.standard is not None:
            progression = get_standard(request.standard)
        else:
            progression = request.progression.to_progression()
        cursor = ProgressionCursor(progression, request.index)
    except KeyError as exc:
        raise HTTPException(status_code=404, detail=str(exc.args[0])) from exc
    except ValueError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc

    if request.action == "next":
        cursor = cursor.next()
    elif request.action == "previous":
        cursor = cursor.previous()
    else:
        cursor = cursor.select(request.target)
    return NavigateResponse(
        index=cursor.index,
        chord=_chord_out(cursor.current, cursor.current_tones, cursor.current_note_names),
    )


# ---------------------------------------------------------------------------
# POST /chords/parse
# ---------------------------------------------------------------------------


@router.post("/chords/parse", response_model=ChordOut)
def parse_chord(request: ChordParseRequest) -> ChordOut:
    """Parse a chord symbol.

    Never fails on content: unparseable symbols resolve to C major and
    unknown qualities to major-triad tones (``recognized_quality`` is False).
    """
    symbol = parse_chord_symbol(request.symbol)
    return _chord_out(
        symbol, symbol_tones(symbol), chord_note_names(symbol.root, symbol.quality)
    )
