"""Pitch conversions between note names, semitone indices and frequencies."""

# Import the public API for easier access
from .errors import (
    PitchError,
    NoteFormatError,
    PitchRangeError,
    TuningContextError,
    UnsupportedConversionError,
)
from .note_parser import index_to_note, note_to_semitone, parse_note
from .note_types import ParsedNote
from .pitch import (
    hz_to_index,
    hz_to_note,
    hz_to_note_index,
    index_to_hz,
    note_to_hz,
    note_to_index,
)
from .tuning_context import (
    TuningContext,
    clear_key,
    get_context,
    key,
    reference_pitch,
    reset_context,
    set_context,
    set_key,
    set_reference_pitch,
    set_tuning_system,
    tuning,
    tuning_system,
    using_context,
)
from .tuning_systems import (
    EQUAL_TEMPERAMENT,
    JUST_INTONATION,
    WERCKMEISTER_III,
    EqualTemperament,
    TuningSystem,
    WellTemperament,
    get_tuning_system,
    register_tuning_system,
    tuning_system_names,
)

__all__ = [
    "PitchError",
    "NoteFormatError",
    "PitchRangeError",
    "TuningContextError",
    "UnsupportedConversionError",
    "ParsedNote",
    "parse_note",
    "note_to_semitone",
    "index_to_note",
    "note_to_hz",
    "note_to_index",
    "index_to_hz",
    "hz_to_note_index",
    "hz_to_index",
    "hz_to_note",
    "TuningContext",
    "get_context",
    "set_context",
    "set_reference_pitch",
    "set_tuning_system",
    "set_key",
    "clear_key",
    "reset_context",
    "reference_pitch",
    "tuning_system",
    "key",
    "tuning",
    "using_context",
    "TuningSystem",
    "EqualTemperament",
    "WellTemperament",
    "EQUAL_TEMPERAMENT",
    "WERCKMEISTER_III",
    "JUST_INTONATION",
    "register_tuning_system",
    "get_tuning_system",
    "tuning_system_names",
]
