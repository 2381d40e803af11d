"""Parsing and formatting of scientific pitch notation (SPN).

Octave 4 starts at middle C, so ``C4`` is semitone index 60 and ``A4`` is 69.
The parser knows nothing about tuning; it only turns text into a semitone
index.
"""

import re
from typing import List

from .errors import NoteFormatError
from .logging_config import get_logger
from .note_types import (
    ACCIDENTAL_STEPS,
    NATURAL_OFFSETS,
    SEMITONES_PER_OCTAVE,
    ParsedNote,
    SemitoneIndex,
)

# Get logger for this module
logger = get_logger(__name__)

# Compile regex to split a note into its parts (always used with fullmatch)
# This pattern matches:
# - Note letter (A-G, uppercase only)
# - Zero or more accidentals ('#' or 'b'), folded in written order
# - Signed integer octave
NOTE_PATTERN = re.compile(r"([A-G])([#b]*)(-?[0-9]+)")

# Letter plus accidentals, without an octave (used for tonics)
PITCH_CLASS_PATTERN = re.compile(r"([A-G])([#b]*)")

SHARP_NAMES: List[str] = [
    "C",
    "C#",
    "D",
    "D#",
    "E",
    "F",
    "F#",
    "G",
    "G#",
    "A",
    "A#",
    "B",
]
FLAT_NAMES: List[str] = ["C", "Db", "D", "Eb", "E", "F", "Gb", "G", "Ab", "A", "Bb", "B"]


def natural_index(letter: str, octave: int) -> SemitoneIndex:
    """Semitone index of an accidental-free note, e.g. ('C', 4) -> 60."""
    return NATURAL_OFFSETS[letter] + octave * SEMITONES_PER_OCTAVE + SEMITONES_PER_OCTAVE


def apply_accidentals(index: SemitoneIndex, accidentals: str) -> SemitoneIndex:
    # Mixed runs like '#b' are folded as written, not rejected
    for accidental in accidentals:
        index += ACCIDENTAL_STEPS[accidental]
    return index


def octave_of(index: SemitoneIndex) -> int:
    """SPN octave containing a semitone index (60 -> 4, 59 -> 3, -1 -> -2)."""
    return (index - SEMITONES_PER_OCTAVE) // SEMITONES_PER_OCTAVE


def parse_note(text: str) -> ParsedNote:
    """Parse a note written in scientific pitch notation.

    Args:
        text: The note, e.g. 'A4', 'C#5', 'Dbb4' or 'B-1'

    Returns:
        ParsedNote: the letter, accidentals, octave and semitone index

    Raises:
        NoteFormatError: If the text is not letter + accidentals + octave
    """
    if not isinstance(text, str):
        raise NoteFormatError(f"Note must be a string, got {type(text).__name__}")

    match = NOTE_PATTERN.fullmatch(text)
    if match is None:
        raise NoteFormatError(f"Invalid note format: '{text}'")

    letter, accidentals, octave_text = match.groups()
    octave = int(octave_text)
    index = apply_accidentals(natural_index(letter, octave), accidentals)

    logger.debug(f"Parsed '{text}' -> index {index} (octave {octave})")
    return ParsedNote(letter=letter, accidentals=accidentals, octave=octave, index=index)


def note_to_semitone(text: str) -> SemitoneIndex:
    """Convert a note name to its semitone index. No range check is applied."""
    return parse_note(text).index


def parse_pitch_class(text: str) -> str:
    """Validate a letter with optional accidentals and no octave (e.g. a tonic).

    Returns:
        The text unchanged

    Raises:
        NoteFormatError: If the text is not a letter followed by '#'/'b' only
    """
    if not isinstance(text, str) or PITCH_CLASS_PATTERN.fullmatch(text) is None:
        raise NoteFormatError(f"Invalid pitch class: '{text}'")
    return text


def pitch_class_index(pitch_class: str, octave: int) -> SemitoneIndex:
    """Semitone index of a pitch class placed in an octave, e.g. ('Bb', 4) -> 70."""
    letter, accidentals = PITCH_CLASS_PATTERN.fullmatch(parse_pitch_class(pitch_class)).groups()
    return apply_accidentals(natural_index(letter, octave), accidentals)


def pitch_class_number(pitch_class: str) -> int:
    """Position of a pitch class within the octave, 0-11 ('C' -> 0, 'Cb' -> 11, 'B#' -> 0)."""
    return pitch_class_index(pitch_class, 0) % SEMITONES_PER_OCTAVE


def index_to_note(index: SemitoneIndex, use_flats: bool = False) -> str:
    """Format a semitone index in scientific pitch notation.

    Args:
        index: Semitone index (60 is C4)
        use_flats: If True, use flat names (e.g., 'Bb') instead of sharps (e.g., 'A#')

    Returns:
        Note name with octave, e.g. 'A4', 'C#4' or 'Db4'
    """
    names = FLAT_NAMES if use_flats else SHARP_NAMES
    return f"{names[index % SEMITONES_PER_OCTAVE]}{octave_of(index)}"
