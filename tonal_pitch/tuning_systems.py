"""Tuning systems: conversion between semitone index and frequency.

Each tuning system is a frozen value with its own ``index_to_hz`` and
``hz_to_index``. Callers pass in the reference pitch and tonic. New
temperaments are added by registering another ``TuningSystem`` (usually a
``WellTemperament`` with its own ratio table), without touching the facade.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from numbers import Real
from typing import ClassVar, Dict, List, Optional, Sequence, Tuple

import numpy as np

from .errors import PitchRangeError, TuningContextError, UnsupportedConversionError
from .logging_config import get_logger
from .note_parser import natural_index, octave_of, pitch_class_number
from .note_types import SEMITONES_PER_OCTAVE, Frequency, SemitoneIndex

logger = get_logger(__name__)

# A4
REFERENCE_INDEX: SemitoneIndex = 69

RatioTable = Tuple[float, ...]

# Werckmeister III: four fifths (C-G, G-D, D-A, B-F#) narrowed by a quarter
# of the Pythagorean comma, all others pure. Ratios relative to the tonic.
WERCKMEISTER_III_RATIOS: RatioTable = (
    1.0,
    256 / 243,
    64 / 81 * 2 ** (1 / 2),
    32 / 27,
    256 / 243 * 2 ** (1 / 4),
    4 / 3,
    1024 / 729,
    8 / 9 * 2 ** (3 / 4),
    128 / 81,
    1024 / 729 * 2 ** (1 / 4),
    16 / 9,
    128 / 81 * 2 ** (1 / 4),
)

# 5-limit just intonation
JUST_INTONATION_RATIOS: RatioTable = (
    1.0,
    16 / 15,
    9 / 8,
    6 / 5,
    5 / 4,
    4 / 3,
    45 / 32,
    3 / 2,
    8 / 5,
    5 / 3,
    9 / 5,
    15 / 8,
)


def round_half_away_from_zero(value: float) -> int:
    """Round to the nearest integer, ties away from zero (68.5 -> 69, -0.5 -> -1).

    Python's built-in ``round`` uses banker's rounding and would give 68.
    """
    return int(np.sign(value) * np.floor(abs(value) + 0.5))


def is_number(value) -> bool:
    """True for real numbers (int, float, Fraction, numpy scalars), never for bool."""
    return isinstance(value, Real) and not isinstance(value, bool)


def validate_frequency(value: Frequency, what: str = "Frequency") -> Frequency:
    """Return value as a float if it is a finite positive number.

    Raises:
        PitchRangeError: If value is not a finite number greater than zero
    """
    if not is_number(value):
        raise PitchRangeError(f"{what} must be a real number, got {value!r}")
    value = float(value)
    if not np.isfinite(value) or value <= 0:
        raise PitchRangeError(f"{what} must be finite and positive, got {value}")
    return value


def equal_tempered_hz(reference_pitch: Frequency, index: SemitoneIndex) -> Frequency:
    return reference_pitch * 2.0 ** ((index - REFERENCE_INDEX) / SEMITONES_PER_OCTAVE)


def equal_tempered_index(reference_pitch: Frequency, frequency: Frequency) -> SemitoneIndex:
    frequency = validate_frequency(frequency)
    semitones = SEMITONES_PER_OCTAVE * np.log2(frequency / reference_pitch)
    return round_half_away_from_zero(REFERENCE_INDEX + float(semitones))


def validate_ratio_table(ratios: Sequence[float]) -> RatioTable:
    """Check a ratio table and return it as a tuple.

    Raises:
        ValueError: Unless there are exactly 12 finite positive ratios starting at 1.0
    """
    table = tuple(float(r) for r in ratios)
    if len(table) != SEMITONES_PER_OCTAVE:
        raise ValueError(
            f"Ratio table needs {SEMITONES_PER_OCTAVE} entries, got {len(table)}"
        )
    if not all(np.isfinite(r) and r > 0 for r in table):
        raise ValueError(f"Ratio table entries must be finite and positive: {table}")
    if table[0] != 1.0:
        raise ValueError(f"Ratio table must start at 1.0, got {table[0]}")
    return table


def well_tempered_hz(
    ratios: RatioTable,
    reference_pitch: Frequency,
    index: SemitoneIndex,
    tonic: str,
) -> Frequency:
    """Frequency of a semitone index in a tonic-relative ratio temperament.

    The tonic is placed in the nominal octave of ``index`` by its pitch
    class, so spellings like "Cb" or "B#" land in that octave, and tuned
    equal tempered; the note is then the tonic times the ratio for its distance
    above the tonic. A note below the tonic of its own octave wraps to the
    previous octave's tonic, so its frequency is halved once.

    Args:
        ratios: Validated 12-entry ratio table
        reference_pitch: Frequency of A4 in Hz
        index: Semitone index to convert
        tonic: Pitch class of the tonic, e.g. 'C' or 'Bb'

    Returns:
        Frequency in Hz
    """
    octave = octave_of(index)
    tonic_index = natural_index("C", octave) + pitch_class_number(tonic)
    below = index < tonic_index
    # Always 0-11; Python's modulo is non-negative for a positive divisor
    position = (index - tonic_index) % SEMITONES_PER_OCTAVE

    frequency = equal_tempered_hz(reference_pitch, tonic_index) * ratios[position]
    if below:
        frequency /= 2.0
    return frequency


class TuningSystem(ABC):
    """Interface for tuning systems."""

    name: str
    requires_tonic: ClassVar[bool] = False

    @abstractmethod
    def index_to_hz(
        self,
        reference_pitch: Frequency,
        index: SemitoneIndex,
        tonic: Optional[str] = None,
    ) -> Frequency:
        """Convert a semitone index to a frequency in Hz."""
        pass

    @abstractmethod
    def hz_to_index(
        self,
        reference_pitch: Frequency,
        frequency: Frequency,
        tonic: Optional[str] = None,
    ) -> SemitoneIndex:
        """Convert a frequency in Hz to the nearest semitone index."""
        pass


@dataclass(frozen=True)
class EqualTemperament(TuningSystem):
    """12-tone equal temperament; every semitone is a ratio of 2 ** (1/12)."""

    name: str = "equal"

    def index_to_hz(self, reference_pitch, index, tonic=None):
        return equal_tempered_hz(reference_pitch, index)

    def hz_to_index(self, reference_pitch, frequency, tonic=None):
        return equal_tempered_index(reference_pitch, frequency)


@dataclass(frozen=True)
class WellTemperament(TuningSystem):
    """A tonic-relative temperament defined by a 12-entry ratio table."""

    name: str
    ratios: RatioTable
    requires_tonic: ClassVar[bool] = True

    def __post_init__(self):
        object.__setattr__(self, "ratios", validate_ratio_table(self.ratios))

    def index_to_hz(self, reference_pitch, index, tonic=None):
        if tonic is None:
            raise TuningContextError(
                f"{self.name} needs a tonic; call set_key() before converting"
            )
        return well_tempered_hz(self.ratios, reference_pitch, index, tonic)

    def hz_to_index(self, reference_pitch, frequency, tonic=None):
        raise UnsupportedConversionError(
            f"Frequency to index conversion is not supported for {self.name}"
        )


EQUAL_TEMPERAMENT = EqualTemperament()
WERCKMEISTER_III = WellTemperament("werckmeister_iii", WERCKMEISTER_III_RATIOS)
JUST_INTONATION = WellTemperament("just", JUST_INTONATION_RATIOS)

_registry: Dict[str, TuningSystem] = {}


def register_tuning_system(name: str, system: TuningSystem) -> None:
    """Make a tuning system selectable by name.

    Raises:
        TypeError: If system is not a TuningSystem
    """
    if not isinstance(system, TuningSystem):
        raise TypeError(f"Expected a TuningSystem, got {type(system).__name__}")
    if name in _registry and _registry[name] != system:
        logger.info(f"Replacing registered tuning system '{name}'")
    _registry[name] = system
    logger.debug(f"Registered tuning system '{name}': {system!r}")


def get_tuning_system(name: str) -> TuningSystem:
    """Look up a registered tuning system.

    Raises:
        TuningContextError: If no system is registered under that name
    """
    try:
        return _registry[name]
    except KeyError:
        raise TuningContextError(
            f"Unknown tuning system '{name}'. Known: {', '.join(tuning_system_names())}"
        ) from None


def tuning_system_names() -> List[str]:
    return sorted(_registry)


register_tuning_system(EQUAL_TEMPERAMENT.name, EQUAL_TEMPERAMENT)
register_tuning_system(WERCKMEISTER_III.name, WERCKMEISTER_III)
register_tuning_system(JUST_INTONATION.name, JUST_INTONATION)
