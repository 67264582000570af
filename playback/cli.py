"""
Command-line export of bundled material to MIDI files.

CLI entry point::

    python -m playback.cli --list
    python -m playback.cli --standard "Autumn Leaves" --key Bb --out autumn.mid
    python -m playback.cli --song "ii-V-I in C" --bpm 90 --out two_five_one.mid
"""

from __future__ import annotations

import argparse
import logging
import pathlib

from core.music_theory.library import (
    available_standards,
    get_standard,
    get_voice_leading_song,
    load_voice_leading_songs,
)
from core.music_theory.progression import transpose
from playback.midi_export import progression_to_midi, song_to_midi

logger = logging.getLogger(__name__)


def export(
    out: pathlib.Path,
    *,
    standard: str | None = None,
    song: str | None = None,
    key: str | None = None,
    bpm: float = 120.0,
    beats_per_chord: int = 4,
) -> pathlib.Path:
    """Render one standard (optionally transposed) or one voice-leading song to a file.

    Raises:
        KeyError: Unknown title
        ValueError: Neither or both sources given, or an invalid key
    """
    if (standard is None) == (song is None):
        raise ValueError("Give exactly one of standard or song")

    if song is not None:
        if key is not None:
            raise ValueError("Voice-leading songs cannot be transposed")
        song_to_midi(
            get_voice_leading_song(song),
            bpm=bpm,
            beats_per_chord=beats_per_chord,
            output_path=out,
        )
    else:
        progression = get_standard(standard)
        if key is not None:
            progression = transpose(progression, key)
        progression_to_midi(
            progression,
            bpm=bpm,
            beats_per_chord=beats_per_chord,
            output_path=out,
        )
    logger.info("Wrote %s", out)
    return out


def main() -> None:
    """Parse CLI arguments and write the MIDI file."""
    parser = argparse.ArgumentParser(
        description="Export a bundled jazz standard or voice-leading song to a MIDI file.",
    )
    parser.add_argument("--list", action="store_true", help="List bundled titles and exit.")
    parser.add_argument("--standard", default=None, help="Standard title, e.g. 'Autumn Leaves'.")
    parser.add_argument("--song", default=None, help="Voice-leading song title.")
    parser.add_argument("--key", default=None, help="Transpose the standard to this key.")
    parser.add_argument("--bpm", type=float, default=120.0, help="Tempo (default: 120).")
    parser.add_argument(
        "--beats-per-chord",
        type=int,
        default=4,
        help="Beats each chord lasts (default: 4).",
    )
    parser.add_argument("--out", type=pathlib.Path, default=None, help="Output .mid path.")
    args = parser.parse_args()

    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

    if args.list:
        print("Standards:")
        for title in available_standards():
            print(f"  {title}")
        print("Voice-leading songs:")
        for s in load_voice_leading_songs():
            print(f"  {s.title}")
        return

    if args.out is None:
        parser.error("--out is required unless --list is given")
    try:
        export(
            args.out,
            standard=args.standard,
            song=args.song,
            key=args.key,
            bpm=args.bpm,
            beats_per_chord=args.beats_per_chord,
        )
    except KeyError as exc:
        parser.error(str(exc.args[0]))
    except ValueError as exc:
        parser.error(str(exc))


if __name__ == "__main__":
    main()
