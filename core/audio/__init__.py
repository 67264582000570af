"""
core/audio — Audio capability contract.

Public API:
    AudioCapability      Protocol implemented by playback.engine.AudioEngine
    duration_to_beats    note-value token → beats
    duration_to_seconds  note-value token → seconds at a tempo
"""

from core.audio.base import AudioCapability, duration_to_beats, duration_to_seconds

__all__ = [
    "AudioCapability",
    "duration_to_beats",
    "duration_to_seconds",
]
