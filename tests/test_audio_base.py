"""
Tests for core/audio/base.py — note-value durations and the AudioCapability protocol.
"""

import pytest

from core.audio.base import AudioCapability, duration_to_beats, duration_to_seconds
from playback.engine import AudioEngine


class TestDurations:
    @pytest.mark.parametrize(
        ("token", "beats"),
        [("1n", 4.0), ("2n", 2.0), ("4n", 1.0), ("8n", 0.5), ("16n", 0.25), ("32n", 0.125)],
    )
    def test_plain_values(self, token: str, beats: float) -> None:
        assert duration_to_beats(token) == beats

    def test_dotted_value(self) -> None:
        assert duration_to_beats("4n.") == 1.5
        assert duration_to_beats("2n.") == 3.0

    @pytest.mark.parametrize("bad", ["3n", "4", "n", "quarter", "4n.."])
    def test_unsupported_token_raises(self, bad: str) -> None:
        with pytest.raises(ValueError, match="Unsupported duration"):
            duration_to_beats(bad)

    def test_seconds_at_120_bpm(self) -> None:
        assert duration_to_seconds("4n", 120.0) == 0.5
        assert duration_to_seconds("1n", 120.0) == 2.0

    def test_seconds_at_60_bpm(self) -> None:
        assert duration_to_seconds("8n", 60.0) == 0.5

    def test_non_positive_bpm_raises(self) -> None:
        with pytest.raises(ValueError, match="bpm"):
            duration_to_seconds("4n", 0)


class _SilentAudio:
    """Minimal structural implementation used to check the protocol."""

    def __init__(self) -> None:
        self._started = False

    @property
    def started(self) -> bool:
        return self._started

    def start(self) -> None:
        self._started = True

    def play_note(self, note: str, duration: str = "8n") -> bool:
        return self._started

    def play_chord(self, notes: list[str], duration: str = "4n") -> bool:
        return self._started


class TestAudioCapabilityProtocol:
    def test_engine_satisfies_protocol(self) -> None:
        assert isinstance(AudioEngine(), AudioCapability)

    def test_structural_implementation(self) -> None:
        assert isinstance(_SilentAudio(), AudioCapability)

    def test_missing_method_fails(self) -> None:
        class NoChords:
            started = False

            def start(self) -> None: ...

            def play_note(self, note: str, duration: str = "8n") -> bool:
                return False

        assert not isinstance(NoChords(), AudioCapability)
