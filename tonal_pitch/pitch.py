"""Note name, semitone index and frequency conversions.

These functions are the public entry points. Each call reads the current
tuning context once and passes its values to the active tuning system.
"""

from .errors import PitchRangeError
from .logging_config import get_logger
from .note_parser import index_to_note, note_to_semitone
from .note_types import MIDI_MAX, MIDI_MIN, Frequency, SemitoneIndex
from .tuning_context import get_context
from .tuning_systems import validate_frequency

logger = get_logger(__name__)


def _require_midi_range(index: SemitoneIndex, source) -> SemitoneIndex:
    if not MIDI_MIN <= index <= MIDI_MAX:
        raise PitchRangeError(
            f"{source!r} gives semitone index {index}, outside MIDI range "
            f"[{MIDI_MIN}, {MIDI_MAX}]"
        )
    return index


def note_to_index(text: str) -> SemitoneIndex:
    """Convert a note name to its MIDI semitone index.

    Args:
        text: Note in scientific pitch notation, e.g. 'C4', 'C#4', 'Dbb4'

    Returns:
        Semitone index in [0, 127] (C4 == 60, A4 == 69)

    Raises:
        NoteFormatError: If text is not valid scientific pitch notation
        PitchRangeError: If the note lies outside the MIDI range
    """
    return _require_midi_range(note_to_semitone(text), text)


def note_to_hz(text: str) -> Frequency:
    """Convert a note name to its frequency under the current tuning context.

    Notes outside the MIDI range are still converted.

    Raises:
        NoteFormatError: If text is not valid scientific pitch notation
        TuningContextError: If the tuning system needs a tonic and none is set
    """
    ctx = get_context()
    index = note_to_semitone(text)
    frequency = ctx.tuning_system.index_to_hz(ctx.reference_pitch, index, ctx.tonic)
    logger.debug(
        f"{text} (index {index}) -> {frequency:.4f}Hz "
        f"[{ctx.tuning_system.name}, A4={ctx.reference_pitch}, tonic={ctx.tonic}]"
    )
    return frequency


def index_to_hz(index: SemitoneIndex) -> Frequency:
    """Convert a MIDI semitone index to its frequency under the current tuning context."""
    ctx = get_context()
    _require_midi_range(index, index)
    return ctx.tuning_system.index_to_hz(ctx.reference_pitch, index, ctx.tonic)


def hz_to_note_index(freq: Frequency) -> SemitoneIndex:
    """Convert a frequency to the nearest MIDI semitone index.

    The input must be a finite frequency above zero. The result is always a
    valid MIDI index; anything that would round outside [0, 127] is an error.

    Raises:
        PitchRangeError: If freq is not positive or maps outside the MIDI range
        UnsupportedConversionError: If the current tuning system has no inverse
    """
    ctx = get_context()
    freq = validate_frequency(freq)
    index = ctx.tuning_system.hz_to_index(ctx.reference_pitch, freq, ctx.tonic)
    logger.debug(f"{freq:.4f}Hz -> index {index} [{ctx.tuning_system.name}]")
    return _require_midi_range(index, freq)


hz_to_index = hz_to_note_index


def hz_to_note(freq: Frequency, use_flats: bool = False) -> str:
    """Convert a frequency to the nearest note name, e.g. 440.0 -> 'A4'."""
    return index_to_note(hz_to_note_index(freq), use_flats=use_flats)
