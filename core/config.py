"""
Configuration dataclasses for practice playback.

These immutable config objects decouple parameter passing from function signatures,
making it easy to define standard configurations and reuse them across the audio
engine, the playback scheduler and the API.

Environment variables are read in api/deps.py, never here — core/ stays pure.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class PlaybackConfig:
    """
    Configuration for audio playback.

    Immutable configuration object shared by AudioEngine and PracticePlayer.

    Attributes:
        bpm: Tempo used to turn note-value tokens ("4n", "2n") into seconds.
            Defaults to 120.
        velocity: MIDI note-on velocity for every triggered note (1–127).
        channel: MIDI channel (0-indexed) the engine sends on.
        chord_step_seconds: Delay between consecutive chords when a whole
            progression is played. Defaults to 2.5 s.
        interval_gap_seconds: Delay between the two notes of an interval
            question. Defaults to 0.5 s.
        midi_port: Name of the MIDI output port. None selects mido's default
            output; "recording" selects an in-memory port.

    Example:
        >>> config = PlaybackConfig(bpm=90.0, chord_step_seconds=3.0)
        >>> engine = AudioEngine(config)
    """

    bpm: float = 120.0
    velocity: int = 80
    channel: int = 0
    chord_step_seconds: float = 2.5
    interval_gap_seconds: float = 0.5
    midi_port: str | None = None

    def __post_init__(self) -> None:
        """Validate configuration parameters."""
        if self.bpm <= 0:
            raise ValueError(f"bpm must be positive, got {self.bpm}")
        if not (1 <= self.velocity <= 127):
            raise ValueError(f"velocity must be in [1, 127], got {self.velocity}")
        if not (0 <= self.channel <= 15):
            raise ValueError(f"channel must be in [0, 15], got {self.channel}")
        if self.chord_step_seconds <= 0:
            raise ValueError(
                f"chord_step_seconds must be positive, got {self.chord_step_seconds}"
            )
        if self.interval_gap_seconds < 0:
            raise ValueError(
                f"interval_gap_seconds must be non-negative, got {self.interval_gap_seconds}"
            )


RECORDING_PORT: str = "recording"
"""midi_port value that selects the in-memory RecordingPort."""

DEFAULT_CONFIG = PlaybackConfig()
"""Default configuration: 120 BPM, velocity 80, 2.5 s between chords."""
