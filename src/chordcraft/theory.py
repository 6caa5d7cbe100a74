"""Scale tables, roman-numeral to chord conversion and chord-symbol parsing."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence

NOTE_NAMES = ["C", "C#", "D", "D#", "E", "F", "F#", "G", "G#", "A", "A#", "B"]

FLAT_TO_SHARP = {
    "Db": "C#",
    "Eb": "D#",
    "Gb": "F#",
    "Ab": "G#",
    "Bb": "A#",
    "Cb": "B",
    "Fb": "E",
    "E#": "F",
    "B#": "C",
}

# Semitone offsets of the seven diatonic degrees.
SCALE_INTERVALS: Dict[str, List[int]] = {
    "major": [0, 2, 4, 5, 7, 9, 11],
    "minor": [0, 2, 3, 5, 7, 8, 10],
    "dorian": [0, 2, 3, 5, 7, 9, 10],
    "mixolydian": [0, 2, 4, 5, 7, 9, 10],
}

NUMERAL_DEGREES = {
    "I": 0,
    "II": 1,
    "III": 2,
    "IV": 3,
    "V": 4,
    "VI": 5,
    "VII": 6,
}

DEGREE_NUMERALS = ["I", "II", "III", "IV", "V", "VI", "VII"]

CHORD_RE = re.compile(r"^([A-Ga-g])([#b]?)(.*)$")


@dataclass(frozen=True)
class ChordSymbol:
    """A chord root (pitch class 0-11) plus its quality suffix."""

    root: int
    quality: str = ""

    @property
    def name(self) -> str:
        return NOTE_NAMES[self.root % 12] + self.quality

    @property
    def is_minor(self) -> bool:
        return "m" in self.quality and "maj" not in self.quality

    def __str__(self) -> str:
        return self.name


def scale_intervals(scale: str) -> List[int]:
    """Return the degree offsets for a scale, using major for unknown names."""
    return SCALE_INTERVALS.get(scale.lower(), SCALE_INTERVALS["major"])


def note_to_pitch(note: str) -> int:
    """Pitch class of a note name such as ``"F#"`` or ``"Bb"``."""
    name = note.strip()
    if name[:1].islower():
        name = name[:1].upper() + name[1:]
    name = FLAT_TO_SHARP.get(name, name)
    try:
        return NOTE_NAMES.index(name)
    except ValueError:
        raise ValueError(f"Unknown note name: {note!r}") from None


def key_to_pitch(key: str) -> int:
    """Pitch class of a key name; a trailing minor ``m`` is ignored."""
    name = key.strip()
    if len(name) > 1 and name.endswith("m"):
        name = name[:-1]
    return note_to_pitch(name)


def roman_numeral_to_chord(numeral: str, key: str, scale: str) -> str:
    """Convert a roman numeral to a chord name in the given key and scale.

    Lowercase numerals yield minor chords. Raises ValueError for numerals
    outside I-VII.
    """
    degree = NUMERAL_DEGREES.get(numeral.upper())
    if degree is None:
        raise ValueError(f"Unknown roman numeral: {numeral!r}")
    root = (key_to_pitch(key) + scale_intervals(scale)[degree]) % 12
    quality = "m" if numeral == numeral.lower() else ""
    return ChordSymbol(root, quality).name


def adjust_scale(scale: str, starting_chord: Optional[str] = None) -> str:
    """Switch a major request to minor when the starting chord is minor.

    Only the major -> minor case is handled; other modes are left alone.
    """
    if (
        starting_chord
        and starting_chord.endswith("m")
        and "maj" not in starting_chord
        and scale == "major"
    ):
        return "minor"
    return scale


def parse_chord_symbol(text: str) -> ChordSymbol:
    """Split a chord symbol into root pitch class and quality suffix.

    Unparseable input falls back to C major.
    """
    m = CHORD_RE.match(text.strip()) if isinstance(text, str) else None
    if not m:
        return ChordSymbol(0, "")
    letter, accidental, quality = m.group(1).upper(), m.group(2), m.group(3)
    return ChordSymbol(note_to_pitch(letter + accidental), quality)


def chords_to_numerals(
    chords: Sequence[str], key: str, scale: str
) -> List[str]:
    """Derive roman numerals for chord names; non-diatonic roots map to "?"."""
    tonic = key_to_pitch(key)
    degrees = [(tonic + i) % 12 for i in scale_intervals(scale)]
    numerals: List[str] = []
    for chord in chords:
        symbol = parse_chord_symbol(chord)
        if symbol.root not in degrees:
            numerals.append("?")
            continue
        numeral = DEGREE_NUMERALS[degrees.index(symbol.root)]
        numerals.append(numeral.lower() if symbol.is_minor else numeral)
    return numerals
