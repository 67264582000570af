"""
Tests for api/routes/playback.py.

The app's engine and player are the fake-timer fixtures from conftest, so
note_on messages can be read from the RecordingPort and sequence steps are
fired by hand.
"""

from __future__ import annotations

import pytest

from api.main import app
from infrastructure import metrics as metrics_module
from core.config import PlaybackConfig
from playback.engine import AudioEngine
from playback.practice import PracticePlayer


def _playback_count(kind: str) -> float:
    return (
        metrics_module._REGISTRY.get_sample_value("jpt_playback_requests_total", {"kind": kind})
        or 0.0
    )


class TestPlayChord:
    def test_plays_and_starts_engine(self, api_client, sent) -> None:
        resp = api_client.post("/playback/chord", json={"symbol": "Dmin7"})
        assert resp.status_code == 200
        data = resp.json()
        assert data["started"] is True
        assert data["notes"] == ["D4", "F4", "A4", "C5"]
        assert sent("note_on") == [62, 65, 69, 72]

    def test_invalid_duration_422(self, api_client) -> None:
        resp = api_client.post("/playback/chord", json={"symbol": "C", "duration": "3n"})
        assert resp.status_code == 422

    def test_engine_failure_503(self, api_client, release_timers) -> None:
        def broken(name):
            raise OSError("no MIDI backend")

        engine = AudioEngine(PlaybackConfig(), port_factory=broken, timer_factory=release_timers)
        app.state.audio_engine = engine
        app.state.practice_player = PracticePlayer(engine)

        resp = api_client.post("/playback/chord", json={"symbol": "C"})
        assert resp.status_code == 503
        assert "no MIDI backend" in resp.json()["detail"]


class TestPlayProgression:
    def test_standard(self, api_client, step_timers, sent) -> None:
        resp = api_client.post("/playback/progression", json={"standard": "Autumn Leaves"})
        assert resp.status_code == 200
        data = resp.json()
        assert data["steps"] == 8
        assert data["pending_steps"] == 8
        assert data["is_playing"] is True
        assert data["cancelled"] == 0

        step_timers.timers[0].fire()
        assert sent("note_on") == [60, 64, 67, 71]

    def test_song_uses_voicings(self, api_client, step_timers, sent) -> None:
        resp = api_client.post("/playback/progression", json={"song": "ii-V-I in C"})
        assert resp.json()["steps"] == 4
        step_timers.timers[0].fire()
        assert sent("note_on") == [57, 62, 65, 69]

    def test_inline_progression(self, api_client) -> None:
        resp = api_client.post(
            "/playback/progression",
            json={"progression": {"title": "ii-V", "key": "C", "chords": ["Dmin7", "G7"]}},
        )
        assert resp.json()["steps"] == 2

    def test_restart_cancels_pending(self, api_client) -> None:
        api_client.post("/playback/progression", json={"standard": "Giant Steps"})
        resp = api_client.post("/playback/progression", json={"standard": "ii-V-I in C"})
        data = resp.json()
        assert data["cancelled"] == 8
        assert data["pending_steps"] == 4

    def test_unknown_standard_404(self, api_client) -> None:
        resp = api_client.post("/playback/progression", json={"standard": "Nope"})
        assert resp.status_code == 404

    def test_invalid_duration_422(self, api_client) -> None:
        resp = api_client.post(
            "/playback/progression", json={"standard": "Giant Steps", "duration": "whole"}
        )
        assert resp.status_code == 422

    @pytest.mark.parametrize(
        "body",
        [{}, {"standard": "Giant Steps", "song": "ii-V-I in C"}],
    )
    def test_source_count_422(self, api_client, body) -> None:
        assert api_client.post("/playback/progression", json=body).status_code == 422


class TestPlayQuestion:
    def test_chord_question(self, api_client, sent) -> None:
        q = api_client.post("/ear-training/question", json={"mode": "chords", "seed": 1}).json()
        resp = api_client.post("/playback/question", json={"question": q})
        assert resp.status_code == 200
        assert resp.json()["notes"] == q["audio"]
        assert len(sent("note_on")) == 4

    def test_interval_question_schedules_second_note(self, api_client, step_timers, sent) -> None:
        q = api_client.post("/ear-training/question", json={"mode": "intervals", "seed": 1}).json()
        api_client.post("/playback/question", json={"question": q})
        assert len(sent("note_on")) == 1
        step_timers.fire_all()
        assert len(sent("note_on")) == 2


class TestStopAndStatus:
    def test_status_before_playback(self, api_client) -> None:
        data = api_client.get("/playback/status").json()
        assert data["started"] is False
        assert data["is_playing"] is False
        assert data["current_index"] is None

    def test_stop_cancels(self, api_client) -> None:
        api_client.post("/playback/progression", json={"standard": "Autumn Leaves"})
        data = api_client.post("/playback/stop").json()
        assert data["cancelled"] == 8
        assert data["is_playing"] is False

    def test_status_tracks_current_index(self, api_client, step_timers) -> None:
        api_client.post("/playback/progression", json={"standard": "ii-V-I in C"})
        step_timers.timers[0].fire()
        step_timers.timers[1].fire()
        data = api_client.get("/playback/status").json()
        assert data["current_index"] == 1
        assert data["pending_steps"] == 2


class TestQuestionAudioValidation:
    def test_out_of_range_chord_audio_sends_nothing(self, api_client, release_timers, sent) -> None:
        api_client.post("/playback/chord", json={"symbol": "C"})
        q = api_client.post("/ear-training/question", json={"mode": "chords", "seed": 1}).json()
        q["audio"] = q["audio"][:2] + ["C12"]

        resp = api_client.post("/playback/question", json={"question": q})
        assert resp.status_code == 422
        assert sent("note_on") == [60, 64, 67]
        assert len(release_timers.timers) == 1

    def test_out_of_range_interval_note_not_scheduled(self, api_client, player) -> None:
        q = api_client.post("/ear-training/question", json={"mode": "intervals", "seed": 1}).json()
        q["audio"][1] = "C12"

        resp = api_client.post("/playback/question", json={"question": q})
        assert resp.status_code == 422
        assert player.pending_steps == 0


class TestPlayNote:
    def test_bare_name_plays_in_reference_octave(self, api_client, sent) -> None:
        resp = api_client.post("/playback/note", json={"note": "F#"})
        assert resp.status_code == 200
        data = resp.json()
        assert data["notes"] == ["F#4"]
        assert data["started"] is True
        assert sent("note_on") == [66]

    def test_note_does_not_move_current_index(self, api_client, step_timers) -> None:
        api_client.post("/playback/progression", json={"song": "ii-V-I in C"})
        step_timers.timers[0].fire()
        data = api_client.post("/playback/note", json={"note": "C5", "duration": "4n"}).json()
        assert data["notes"] == ["C5"]
        assert data["current_index"] == 0

    @pytest.mark.parametrize(
        "body", [{"note": "H"}, {"note": "C12"}, {"note": "C", "duration": "3n"}]
    )
    def test_invalid_422(self, api_client, body) -> None:
        assert api_client.post("/playback/note", json=body).status_code == 422

    def test_records_metric(self, api_client) -> None:
        before = _playback_count("note")
        api_client.post("/playback/note", json={"note": "A"})
        assert _playback_count("note") == before + 1


class TestPlayVoicing:
    def test_song_voicing_sets_current_index(self, api_client, sent, release_timers) -> None:
        resp = api_client.post("/playback/voicing", json={"song": "ii-V-I in C", "index": 1})
        assert resp.status_code == 200
        data = resp.json()
        assert data["current_index"] == 1
        assert data["notes"] == ["B3", "D4", "F4", "B4"]
        assert sent("note_on") == [59, 62, 65, 71]
        assert release_timers.timers[0].interval == pytest.approx(2.0)  # whole note

    def test_inline_voicing(self, api_client, sent) -> None:
        resp = api_client.post(
            "/playback/voicing", json={"voicing": {"pitches": [48, 64, 67, 71]}}
        )
        assert resp.status_code == 200
        assert resp.json()["current_index"] is None
        assert sent("note_on") == [48, 64, 67, 71]

    def test_unknown_song_404(self, api_client) -> None:
        resp = api_client.post("/playback/voicing", json={"song": "Nope", "index": 0})
        assert resp.status_code == 404

    def test_index_past_end_422(self, api_client) -> None:
        resp = api_client.post("/playback/voicing", json={"song": "ii-V-I in C", "index": 4})
        assert resp.status_code == 422
        assert "out of range" in resp.json()["detail"]

    @pytest.mark.parametrize(
        "body",
        [
            {},
            {"song": "ii-V-I in C"},
            {"voicing": {"pitches": [48, 64, 67, 71]}, "index": 0},
            {"song": "ii-V-I in C", "index": 0, "voicing": {"pitches": [48, 64, 67, 71]}},
        ],
    )
    def test_source_shape_422(self, api_client, body) -> None:
        assert api_client.post("/playback/voicing", json=body).status_code == 422

    def test_records_metric(self, api_client) -> None:
        before = _playback_count("voicing")
        api_client.post("/playback/voicing", json={"song": "ii-V-I in C", "index": 0})
        assert _playback_count("voicing") == before + 1


class TestCurrentIndexReset:
    def test_new_sequence_clears_index(self, api_client, step_timers) -> None:
        api_client.post("/playback/progression", json={"standard": "Autumn Leaves"})
        step_timers.timers[0].fire()
        step_timers.timers[1].fire()
        data = api_client.post("/playback/progression", json={"standard": "ii-V-I in C"}).json()
        assert data["current_index"] is None
        assert api_client.get("/playback/status").json()["current_index"] is None

    def test_stop_clears_index(self, api_client, step_timers) -> None:
        api_client.post("/playback/progression", json={"standard": "ii-V-I in C"})
        step_timers.timers[0].fire()
        assert api_client.post("/playback/stop").json()["current_index"] is None
