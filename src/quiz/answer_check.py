"""
Answer checking for piano questions.

Learner input arrives as note names or MIDI note numbers. Comparison against
a question's expected input ignores octaves and note order, so "E4-C4-G4"
matches the expected "C-E-G".
"""

from __future__ import annotations

import re
from collections.abc import Iterable

# MIDI note numbers on the one-octave keyboard (C4..C5)
MIDI_NOTE_NAMES: dict[int, str] = {
    60: "C4",
    61: "C#4",
    62: "D4",
    63: "D#4",
    64: "E4",
    65: "F4",
    66: "F#4",
    67: "G4",
    68: "G#4",
    69: "A4",
    70: "A#4",
    71: "B4",
    72: "C5",
}

_SEPARATORS = re.compile(r"[\s,;\-]+")
_NOTE = re.compile(r"^([A-Ga-g])([#b]?)(\d*)$")

# Flat and white-key-sharp spellings mapped onto the sharp names the bank uses
SHARP_SPELLING: dict[str, str] = {
    "Cb": "B",
    "Db": "C#",
    "Eb": "D#",
    "Fb": "E",
    "Gb": "F#",
    "Ab": "G#",
    "Bb": "A#",
    "E#": "F",
    "B#": "C",
}


def note_index_to_name(note_index: int) -> str:
    """Name of a MIDI note on the keyboard; empty string if out of range."""
    return MIDI_NOTE_NAMES.get(note_index, "")


def strip_octave(note: str) -> str:
    """'C#4' -> 'C#'; notes without an octave are returned unchanged."""
    note = note.strip()
    if len(note) > 1 and note[-1].isdigit():
        return note.rstrip("0123456789")
    return note


def to_sharp(note: str) -> str:
    """'Bb' -> 'A#', 'E#4' -> 'F4'; other notes are returned unchanged."""
    pitch = strip_octave(note)
    return SHARP_SPELLING.get(pitch, pitch) + note.strip()[len(pitch):]


def parse_note_input(text: str) -> list[str]:
    """
    Split raw learner input into note names.

    Accepts names or MIDI numbers separated by spaces, commas or dashes:
    "C E G", "c-e-g", "C4,E4,G4", "60 64 67". Flats are respelled as
    sharps ("Bb" -> "A#").

    Raises:
        ValueError: If a token is neither a note name nor a keyboard MIDI number
    """
    notes: list[str] = []
    for token in _SEPARATORS.split(text.strip()):
        if not token:
            continue
        if token.isdigit():
            name = note_index_to_name(int(token))
            if not name:
                raise ValueError(f"MIDI note {token} is not on the keyboard (60-72)")
            notes.append(name)
            continue
        match = _NOTE.match(token)
        if not match:
            raise ValueError(f"Not a note: {token!r}")
        letter, accidental, octave = match.groups()
        notes.append(to_sharp(f"{letter.upper()}{accidental}{octave}"))
    return notes


def normalize_notes(notes: Iterable[str]) -> str:
    """Octave-free, de-duplicated, sorted notes joined with '-'."""
    return "-".join(sorted({to_sharp(strip_octave(note)) for note in notes if note.strip()}))


def is_correct_answer(user_notes: Iterable[str], expected_input: str) -> bool:
    """Compare learner notes with a question's expected input."""
    expected = normalize_notes(expected_input.split("-"))
    return bool(expected) and normalize_notes(user_notes) == expected
