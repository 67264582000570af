"""
FastAPI dependency providers.

The audio engine and the practice player are created once by the
application lifespan (see ``api.main``) and stored on ``app.state``.
These providers hand the same instances to every request, so routes
receive their collaborators by injection instead of reaching for
module-level globals.

Environment variables
---------------------
``JAZZ_MIDI_PORT``
    MIDI output port name. Unset selects mido's default output;
    ``recording`` selects the in-memory port.

``JAZZ_BPM``
    Playback tempo (default ``120``).

``JAZZ_VELOCITY``
    Note-on velocity (default ``80``).

``JAZZ_CHORD_STEP_SECONDS``
    Delay between chords of a played progression (default ``2.5``).
"""

import os

from fastapi import Request

from core.config import PlaybackConfig
from playback.engine import AudioEngine
from playback.practice import PracticePlayer


def load_playback_config() -> PlaybackConfig:
    """Build a ``PlaybackConfig`` from ``JAZZ_*`` environment variables.

    Raises:
        ValueError: If a variable is not a number or fails validation.
    """
    return PlaybackConfig(
        bpm=float(os.getenv("JAZZ_BPM", "120")),
        velocity=int(os.getenv("JAZZ_VELOCITY", "80")),
        chord_step_seconds=float(os.getenv("JAZZ_CHORD_STEP_SECONDS", "2.5")),
        midi_port=os.getenv("JAZZ_MIDI_PORT") or None,
    )


def get_audio_engine(request: Request) -> AudioEngine:
    """Return the application's ``AudioEngine``."""
    return request.app.state.audio_engine


def get_practice_player(request: Request) -> PracticePlayer:
    """Return the application's ``PracticePlayer``."""
    return request.app.state.practice_player
