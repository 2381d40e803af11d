"""Type definitions for the Tonal Pitch project."""

from dataclasses import dataclass
from typing import Dict, TypeAlias

# Semitones counted from MIDI note 0 (C-1); unbounded, may be negative
SemitoneIndex: TypeAlias = int
# Frequency in Hz
Frequency: TypeAlias = float

SEMITONES_PER_OCTAVE = 12
MIDI_MIN = 0
MIDI_MAX = 127

# Semitone offset of each natural letter from C within an octave
NATURAL_OFFSETS: Dict[str, int] = {
    "C": 0,
    "D": 2,
    "E": 4,
    "F": 5,
    "G": 7,
    "A": 9,
    "B": 11,
}

ACCIDENTAL_STEPS: Dict[str, int] = {"#": 1, "b": -1}


@dataclass(frozen=True)
class ParsedNote:
    """A note in scientific pitch notation broken into its parts."""

    letter: str  # Natural letter, 'A'-'G'
    accidentals: str  # Run of '#'/'b' in written order, may be empty
    octave: int  # SPN octave, C4 is middle C
    index: SemitoneIndex  # Semitone index, C4 == 60

    def __str__(self):
        return f"{self.letter}{self.accidentals}{self.octave}"
