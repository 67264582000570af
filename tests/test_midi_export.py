"""
Tests for playback/midi_export.py — MIDI file generation for progressions and songs.

Tests cover:
    - Tempo conversion (_bpm_to_tempo_us)
    - Track layout: meta track + chord track
    - Chord timing: back-to-back chords, beats_per_chord × ticks_per_beat each
    - Round-trip: progression → MIDI → pitch sets
    - File I/O (saves correctly to tmp_path)
"""

import mido
import pytest

from core.music_theory.chords import chord_tones
from core.music_theory.library import get_standard, get_voice_leading_song
from core.music_theory.types import Progression
from playback.midi_export import (
    DEFAULT_TICKS_PER_BEAT,
    _bpm_to_tempo_us,
    _chords_to_midi,
    progression_to_midi,
    song_to_midi,
)


def _two_five_one() -> Progression:
    return Progression.from_symbols("ii-V-I", "C", ["Dmin7", "G7", "Cmaj7"])


# ---------------------------------------------------------------------------
# _bpm_to_tempo_us
# ---------------------------------------------------------------------------


class TestBpmToTempoUs:
    def test_120_bpm(self) -> None:
        """120 BPM → 500,000 μs/beat."""
        assert _bpm_to_tempo_us(120.0) == 500_000

    def test_60_bpm(self) -> None:
        assert _bpm_to_tempo_us(60.0) == 1_000_000

    def test_invalid_bpm_falls_back_to_120(self) -> None:
        assert _bpm_to_tempo_us(0) == 500_000


# ---------------------------------------------------------------------------
# progression_to_midi
# ---------------------------------------------------------------------------


class TestProgressionToMidi:
    def test_two_tracks(self) -> None:
        midi = progression_to_midi(_two_five_one())
        assert midi.type == 1
        assert len(midi.tracks) == 2
        assert midi.ticks_per_beat == DEFAULT_TICKS_PER_BEAT

    def test_meta_track(self) -> None:
        midi = progression_to_midi(_two_five_one(), bpm=90.0)
        meta = {m.type: m for m in midi.tracks[0]}
        assert meta["track_name"].name == "ii-V-I"
        assert meta["set_tempo"].tempo == _bpm_to_tempo_us(90.0)
        assert (meta["time_signature"].numerator, meta["time_signature"].denominator) == (4, 4)

    def test_round_trip_pitch_sets(self, pitch_sets) -> None:
        prog = get_standard("Autumn Leaves")
        midi = progression_to_midi(prog)
        expected = [chord_tones(c.root, c.quality) for c in prog.chords]
        assert pitch_sets(midi) == expected

    def test_chord_length_in_ticks(self) -> None:
        midi = progression_to_midi(_two_five_one(), beats_per_chord=2, ticks_per_beat=96)
        note_offs = [m for m in midi.tracks[1] if m.type == "note_off"]
        # Four-note chords: the first note_off of each chord carries the delta.
        assert [m.time for m in note_offs] == [192, 0, 0, 0] * 3

    def test_total_length_in_beats(self) -> None:
        midi = progression_to_midi(_two_five_one(), beats_per_chord=4)
        total_ticks = sum(m.time for m in midi.tracks[1])
        assert total_ticks == 3 * 4 * DEFAULT_TICKS_PER_BEAT

    def test_velocity_is_clamped(self) -> None:
        midi = progression_to_midi(_two_five_one(), velocity=500)
        assert {m.velocity for m in midi.tracks[1] if m.type == "note_on"} == {127}

    def test_saves_file(self, pitch_sets, tmp_path) -> None:
        out = tmp_path / "two_five_one.mid"
        progression_to_midi(_two_five_one(), output_path=out)
        loaded = mido.MidiFile(str(out))
        assert pitch_sets(loaded) == [
            (62, 65, 69, 72),
            (67, 71, 74, 77),
            (60, 64, 67, 71),
        ]

    def test_zero_beats_raises(self) -> None:
        with pytest.raises(ValueError, match="beats_per_chord"):
            progression_to_midi(_two_five_one(), beats_per_chord=0)


# ---------------------------------------------------------------------------
# song_to_midi
# ---------------------------------------------------------------------------


class TestSongToMidi:
    def test_uses_voicings(self, pitch_sets) -> None:
        song = get_voice_leading_song("ii-V-I in C")
        midi = song_to_midi(song)
        assert pitch_sets(midi)[:3] == [
            (57, 62, 65, 69),
            (59, 62, 65, 71),
            (60, 64, 67, 72),
        ]

    def test_repeated_voicing_is_its_own_chord(self, pitch_sets) -> None:
        song = get_voice_leading_song("ii-V-I in C")
        assert len(pitch_sets(song_to_midi(song))) == 4


class TestEdgeCases:
    def test_empty_chords_raise(self) -> None:
        with pytest.raises(ValueError, match="empty"):
            _chords_to_midi(
                "Empty",
                [],
                bpm=120.0,
                beats_per_chord=4,
                velocity=80,
                ticks_per_beat=480,
            )

    def test_parse_file_without_chord_track(self, pitch_sets) -> None:
        midi = mido.MidiFile(type=1)
        midi.tracks.append(mido.MidiTrack())
        assert pitch_sets(midi) == []
