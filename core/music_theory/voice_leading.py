"""
core/music_theory/voice_leading.py — Voice leading analyzer.

Measures how each of the four voices moves between adjacent voicings of a
Song. Voices are matched by position: voice i of one voicing is voice i of
the next. No re-assignment or optimization is attempted — the analysis
describes the voicings exactly as written.

Per voice:
    distance   = |to - from| in semitones
    direction  = up / down / same
    common tone when from == to

Per transition:
    total_movement = sum of the four distances, banded as
        ≤ 4  → Excellent
        ≤ 8  → Good
        ≤ 12 → Fair
        else → Needs work

Per voice display tier:
    common tone → COMMON_TONE, ≤ 2 → GOOD, ≤ 4 → FAIR, else POOR

Per song:
    one TransitionReport per adjacent pair (len - 1 reports),
    mean total movement, common tones out of 4 × transitions.
"""

from __future__ import annotations

from core.music_theory.types import (
    VOICE_NAMES,
    Direction,
    MovementBand,
    Song,
    SongAnalysis,
    TransitionReport,
    VoiceMovement,
    VoiceTier,
    Voicing,
)

# ---------------------------------------------------------------------------
# Thresholds
# ---------------------------------------------------------------------------

# (upper bound inclusive, band), checked in order
BAND_THRESHOLDS: tuple[tuple[int, MovementBand], ...] = (
    (4, MovementBand.EXCELLENT),
    (8, MovementBand.GOOD),
    (12, MovementBand.FAIR),
)

GOOD_STEP_MAX: int = 2  # semitones, stepwise motion
FAIR_STEP_MAX: int = 4  # semitones, up to a major third


# ---------------------------------------------------------------------------
# Single-voice measures
# ---------------------------------------------------------------------------


def movement_distance(from_pitch: int, to_pitch: int) -> int:
    """Unsigned semitone distance between two pitches."""
    return abs(to_pitch - from_pitch)


def is_common_tone(from_pitch: int, to_pitch: int) -> bool:
    """True when the voice holds its pitch."""
    return from_pitch == to_pitch


def direction(from_pitch: int, to_pitch: int) -> Direction:
    """Direction of motion from one pitch to the next."""
    if to_pitch > from_pitch:
        return Direction.UP
    if to_pitch < from_pitch:
        return Direction.DOWN
    return Direction.SAME


def voice_tier(from_pitch: int, to_pitch: int) -> VoiceTier:
    """Display tier for a single voice's movement."""
    if is_common_tone(from_pitch, to_pitch):
        return VoiceTier.COMMON_TONE
    distance = movement_distance(from_pitch, to_pitch)
    if distance <= GOOD_STEP_MAX:
        return VoiceTier.GOOD
    if distance <= FAIR_STEP_MAX:
        return VoiceTier.FAIR
    return VoiceTier.POOR


def movement_band(total_movement: float) -> MovementBand:
    """Qualitative band for a total (or mean total) movement."""
    for upper, band in BAND_THRESHOLDS:
        if total_movement <= upper:
            return band
    return MovementBand.NEEDS_WORK


# ---------------------------------------------------------------------------
# Transitions
# ---------------------------------------------------------------------------


def analyze_transition(
    prev: Voicing,
    curr: Voicing,
    *,
    index: int = 0,
    from_chord: str = "",
    to_chord: str = "",
) -> TransitionReport:
    """Analyze the movement of every voice from one voicing to the next.

    Args:
        prev:       Voicing being left
        curr:       Voicing being entered
        index:      Position of `curr` in its song (informational)
        from_chord: Chord symbol of `prev` (informational)
        to_chord:   Chord symbol of `curr` (informational)

    Returns:
        TransitionReport with four VoiceMovements, bass first.

    Examples:
        >>> r = analyze_transition(Voicing((57, 62, 65, 69)), Voicing((59, 62, 65, 71)))
        >>> [m.distance for m in r.movements], r.total_movement, r.band.value
        ([2, 0, 0, 2], 4, 'Excellent')
    """
    movements = tuple(
        VoiceMovement(
            voice=name,
            from_pitch=a,
            to_pitch=b,
            distance=movement_distance(a, b),
            direction=direction(a, b),
            is_common_tone=is_common_tone(a, b),
            tier=voice_tier(a, b),
        )
        for name, a, b in zip(VOICE_NAMES, prev.pitches, curr.pitches, strict=True)
    )
    total = sum(m.distance for m in movements)
    return TransitionReport(
        index=index,
        movements=movements,
        total_movement=total,
        common_tone_count=sum(1 for m in movements if m.is_common_tone),
        band=movement_band(total),
        from_chord=from_chord,
        to_chord=to_chord,
    )


def transition_into(song: Song, index: int) -> TransitionReport | None:
    """Analysis of the move into the chord at `index`.

    Returns None for the first chord, which has no predecessor.

    Raises:
        IndexError: If index is outside the song
    """
    if not (0 <= index < len(song)):
        raise IndexError(f"index {index} out of range for song of length {len(song)}")
    if index == 0:
        return None
    chords = song.progression.chords
    return analyze_transition(
        song.voicings[index - 1],
        song.voicings[index],
        index=index,
        from_chord=chords[index - 1].text,
        to_chord=chords[index].text,
    )


# ---------------------------------------------------------------------------
# Whole song
# ---------------------------------------------------------------------------


def analyze_song(song: Song) -> SongAnalysis:
    """Analyze every adjacent voicing pair of a song.

    Returns:
        SongAnalysis with len(song) - 1 transitions. A single-voicing song has
        no transitions, a mean of 0.0 and band Excellent.
    """
    transitions = tuple(
        report for i in range(1, len(song)) if (report := transition_into(song, i)) is not None
    )
    count = len(transitions)
    mean = sum(t.total_movement for t in transitions) / count if count else 0.0
    return SongAnalysis(
        title=song.title,
        transitions=transitions,
        mean_total_movement=mean,
        common_tone_count=sum(t.common_tone_count for t in transitions),
        voice_movement_count=len(VOICE_NAMES) * count,
        band=movement_band(mean),
    )
