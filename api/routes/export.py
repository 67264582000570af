"""
api/routes/export.py — MIDI file download.

Endpoints:
    POST /export/midi — Render a standard, a voice-leading song or an inline
                        progression (optionally with voicings) to a .mid file
"""

from __future__ import annotations

import io
import logging

from fastapi import APIRouter, HTTPException
from fastapi.responses import Response

from api.schemas.practice import ExportRequest
from core.music_theory.library import get_standard, get_voice_leading_song
from core.music_theory.types import Song, Voicing
from playback.midi_export import progression_to_midi, song_to_midi

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/export", tags=["export"])

MIDI_MEDIA_TYPE = "audio/midi"


def _filename(title: str) -> str:
    slug = "".join(c if c.isalnum() else "_" for c in title.lower()).strip("_")
    return f"{slug or 'progression'}.mid"


@router.post("/midi")
def export_midi(request: ExportRequest) -> Response:
    """Render the requested material and return it as audio/midi.

    Raises:
        404: Unknown standard or song title.
        422: Voicings that do not match the progression length.
    """
    options = {"bpm": request.bpm, "beats_per_chord": request.beats_per_chord}
    try:
        if request.song is not None:
            song = get_voice_leading_song(request.song)
            title = song.title
            midi = song_to_midi(song, **options)
        elif request.standard is not None:
            progression = get_standard(request.standard)
            title = progression.title
            midi = progression_to_midi(progression, **options)
        else:
            progression = request.progression.to_progression()
            title = progression.title
            if request.voicings is not None:
                song = Song(
                    title=title,
                    progression=progression,
                    voicings=tuple(Voicing(tuple(v.pitches)) for v in request.voicings),
                )
                midi = song_to_midi(song, **options)
            else:
                midi = progression_to_midi(progression, **options)
    except KeyError as exc:
        raise HTTPException(status_code=404, detail=str(exc.args[0])) from exc
    except ValueError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc

    buf = io.BytesIO()
    midi.save(file=buf)
    logger.info("Exported %r as MIDI (%d bytes)", title, buf.tell())
    return Response(
        content=buf.getvalue(),
        media_type=MIDI_MEDIA_TYPE,
        headers={"Content-Disposition": f'attachment; filename="{_filename(title)}"'},
    )
