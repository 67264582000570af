"""
core/music_theory/ — Pure music theory engine.

Exports:
    Types:         ChordQuality, ChordSymbol, Progression, Voicing, Song,
                   Interval, TransitionReport, SongAnalysis
    Notes:         NOTE_NAMES, note_to_pitch_class, pitch_to_note_name
    Chords:        parse_chord_symbol, chord_tones, chord_note_names
    Progressions:  transpose, ProgressionCursor
    Voice leading: analyze_transition, analyze_song
    Ear training:  generate_question, submit_answer, Scoreboard
    Library:       load_standards, load_voice_leading_songs
"""

from core.music_theory.chords import chord_note_names, chord_tones, parse_chord_symbol
from core.music_theory.ear_training import (
    INTERVALS,
    QuizMode,
    Scoreboard,
    generate_question,
    submit_answer,
)
from core.music_theory.library import load_standards, load_voice_leading_songs
from core.music_theory.notes import NOTE_NAMES, note_to_pitch_class, pitch_to_note_name
from core.music_theory.progression import ProgressionCursor, transpose
from core.music_theory.types import (
    ChordQuality,
    ChordSymbol,
    Interval,
    Progression,
    Song,
    SongAnalysis,
    TransitionReport,
    Voicing,
)
from core.music_theory.voice_leading import analyze_song, analyze_transition

__all__ = [
    # Types
    "ChordQuality",
    "ChordSymbol",
    "Interval",
    "Progression",
    "Song",
    "SongAnalysis",
    "TransitionReport",
    "Voicing",
    # Notes
    "NOTE_NAMES",
    "note_to_pitch_class",
    "pitch_to_note_name",
    # Chords
    "parse_chord_symbol",
    "chord_tones",
    "chord_note_names",
    # Progressions
    "transpose",
    "ProgressionCursor",
    # Voice leading
    "analyze_transition",
    "analyze_song",
    # Ear training
    "INTERVALS",
    "QuizMode",
    "Scoreboard",
    "generate_question",
    "submit_answer",
    # Library
    "load_standards",
    "load_voice_leading_songs",
]
