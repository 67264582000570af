"""
core/music_theory/library.py — Bundled standards and voice-leading songs.

YAML Library Files
------------------
Located in core/music_theory/data/:
    standards.yaml      — jazz standards for the progression trainer
    voice_leading.yaml  — four-voice voicings for the voice-leading trainer

Loaded lazily on first call and cached. The returned values are frozen
dataclasses, so callers share one immutable copy.

Design decisions:
    - Loading is the only I/O in core/music_theory; every other module is pure.
    - A malformed file raises ValueError naming the file and entry — the
      bundled data is part of the package, so a bad entry is a packaging bug.
"""

from __future__ import annotations

import functools
import logging
from pathlib import Path
from typing import Any

import yaml

from core.music_theory.types import Progression, Song, Voicing

logger = logging.getLogger(__name__)

_DATA_DIR: Path = Path(__file__).parent / "data"

STANDARDS_FILE: str = "standards.yaml"
VOICE_LEADING_FILE: str = "voice_leading.yaml"


# ---------------------------------------------------------------------------
# YAML loading (lazy, cached)
# ---------------------------------------------------------------------------


def _load_yaml(filename: str, section: str) -> list[dict[str, Any]]:
    """Load one top-level list section from a bundled YAML file.

    Raises:
        ValueError: If the file is missing or the section is not a list
    """
    path = _DATA_DIR / filename
    if not path.exists():
        raise ValueError(f"Library file not found: {path}")

    with path.open(encoding="utf-8") as fh:
        data = yaml.safe_load(fh) or {}

    entries = data.get(section)
    if not isinstance(entries, list):
        raise ValueError(f"{filename}: expected a list under {section!r}")
    return entries


def _progression_from_entry(entry: dict[str, Any], filename: str) -> Progression:
    try:
        return Progression.from_symbols(
            str(entry["title"]),
            str(entry["key"]),
            [str(s) for s in entry["progression"]],
            composer=str(entry.get("composer", "")),
            form=str(entry.get("form", "")),
        )
    except (KeyError, TypeError, ValueError) as exc:
        raise ValueError(f"{filename}: invalid entry {entry.get('title')!r}: {exc}") from exc


@functools.cache
def load_standards() -> tuple[Progression, ...]:
    """Return the bundled jazz standards in file order."""
    entries = _load_yaml(STANDARDS_FILE, "standards")
    standards = tuple(_progression_from_entry(e, STANDARDS_FILE) for e in entries)
    logger.info("Loaded %d standards from %s", len(standards), STANDARDS_FILE)
    return standards


@functools.cache
def load_voice_leading_songs() -> tuple[Song, ...]:
    """Return the bundled voice-leading songs in file order."""
    songs: list[Song] = []
    for entry in _load_yaml(VOICE_LEADING_FILE, "songs"):
        progression = _progression_from_entry(entry, VOICE_LEADING_FILE)
        try:
            voicings = tuple(Voicing(tuple(int(p) for p in v)) for v in entry["voicings"])
            songs.append(Song(title=progression.title, progression=progression, voicings=voicings))
        except (KeyError, TypeError, ValueError) as exc:
            raise ValueError(
                f"{VOICE_LEADING_FILE}: invalid voicings for {progression.title!r}: {exc}"
            ) from exc
    logger.info("Loaded %d voice-leading songs from %s", len(songs), VOICE_LEADING_FILE)
    return tuple(songs)


# ---------------------------------------------------------------------------
# Lookup
# ---------------------------------------------------------------------------


def available_standards() -> list[str]:
    """Titles of the bundled standards, in file order."""
    return [p.title for p in load_standards()]


def get_standard(title: str) -> Progression:
    """Look a standard up by title (case-insensitive).

    Raises:
        KeyError: If no standard has that title
    """
    for progression in load_standards():
        if progression.title.lower() == title.lower():
            return progression
    raise KeyError(f"Unknown standard {title!r}. Available: {available_standards()}")


def get_voice_leading_song(title: str) -> Song:
    """Look a voice-leading song up by title (case-insensitive).

    Raises:
        KeyError: If no song has that title
    """
    for song in load_voice_leading_songs():
        if song.title.lower() == title.lower():
            return song
    available = [s.title for s in load_voice_leading_songs()]
    raise KeyError(f"Unknown voice-leading song {title!r}. Available: {available}")
