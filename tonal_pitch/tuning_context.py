"""Tuning configuration shared by every conversion.

The active ``TuningContext`` lives in a ``ContextVar``, so each thread and
each asyncio task has its own binding:

- A new thread starts from the defaults.
- A new task starts from a copy of the context of whoever created it.

Within one execution unit there are two ways to change it:

- ``set_*`` functions rebind the context for every later read.
- Context managers (``reference_pitch``, ``tuning_system``, ``key``,
  ``tuning``, ``using_context``) override it only for the body of a ``with``
  block, or of a decorated function. On exit, including when the body
  raises, they restore the fields they overrode to their enclosing values.
  Persistent ``set_*`` changes made inside the block to other fields stay.
  ``using_context`` overrides every field, so it restores the whole context.
  Overrides must nest: the inner block is unwound before the outer one.
"""

from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass, replace
from typing import Iterator, Optional, Union

from .errors import TuningContextError
from .logging_config import get_logger
from .note_parser import parse_pitch_class
from .note_types import Frequency
from .tuning_systems import (
    EQUAL_TEMPERAMENT,
    TuningSystem,
    get_tuning_system,
    is_number,
    validate_frequency,
)

logger = get_logger(__name__)

DEFAULT_REFERENCE_PITCH: Frequency = 440.0
DEFAULT_SCALE_TYPE = "major"

TuningSystemLike = Union[TuningSystem, str]


@dataclass(frozen=True)
class TuningContext:
    """Snapshot of the settings a conversion reads."""

    reference_pitch: Frequency = DEFAULT_REFERENCE_PITCH  # Hz of A4 (index 69)
    tuning_system: TuningSystem = EQUAL_TEMPERAMENT
    tonic: Optional[str] = None  # Required by well-tempered systems
    scale_type: str = DEFAULT_SCALE_TYPE  # Informational only


_current: ContextVar[TuningContext] = ContextVar(
    "tonal_pitch_tuning_context", default=TuningContext()
)


def resolve_tuning_system(system: TuningSystemLike) -> TuningSystem:
    """Accept a TuningSystem or the name it was registered under."""
    if isinstance(system, TuningSystem):
        return system
    if isinstance(system, str):
        return get_tuning_system(system)
    raise TuningContextError(
        f"Expected a TuningSystem or registered name, got {type(system).__name__}"
    )


def get_context() -> TuningContext:
    """Return the tuning context active in the current thread or task."""
    return _current.get()


def _rebind(**changes) -> TuningContext:
    ctx = replace(_current.get(), **changes)
    _current.set(ctx)
    logger.debug(f"Tuning context set: {ctx}")
    return ctx


def set_reference_pitch(freq: Frequency) -> None:
    """Set the frequency of A4 in Hz (e.g. 440.0, 432.0)."""
    _rebind(reference_pitch=validate_frequency(freq, "Reference pitch"))


def set_tuning_system(system: TuningSystemLike) -> None:
    """Select the tuning system, by instance or registered name."""
    _rebind(tuning_system=resolve_tuning_system(system))


def set_key(tonic: str, scale_type: str = DEFAULT_SCALE_TYPE) -> None:
    """Set the tonic (e.g. 'C', 'Bb') used by well-tempered systems.

    Raises:
        NoteFormatError: If tonic is not a letter followed by optional '#'/'b'
    """
    _rebind(tonic=parse_pitch_class(tonic), scale_type=scale_type)


def clear_key() -> None:
    _rebind(tonic=None, scale_type=DEFAULT_SCALE_TYPE)


def set_context(ctx: TuningContext) -> None:
    """Replace the whole context for every later read."""
    if not isinstance(ctx, TuningContext):
        raise TypeError(f"Expected a TuningContext, got {type(ctx).__name__}")
    _current.set(ctx)
    logger.debug(f"Tuning context set: {ctx}")


def reset_context() -> None:
    """Restore the default context (A4 = 440 Hz, equal temperament, no tonic)."""
    _current.set(TuningContext())
    logger.debug("Tuning context reset to defaults")


@contextmanager
def using_context(ctx: TuningContext) -> Iterator[TuningContext]:
    """Bind a whole TuningContext for the duration of the block.

    Every field is overridden, so the whole enclosing context comes back on
    exit, including fields changed with ``set_*`` inside the block.
    """
    if not isinstance(ctx, TuningContext):
        raise TypeError(f"Expected a TuningContext, got {type(ctx).__name__}")
    previous = _current.get()
    _current.set(ctx)
    logger.debug(f"Tuning context override entered: {ctx}")
    try:
        yield ctx
    finally:
        _current.set(previous)
        logger.debug(f"Tuning context override exited, restored: {previous}")


@contextmanager
def _override(**changes) -> Iterator[TuningContext]:
    # Only the overridden fields are restored on exit; persistent set_* calls
    # made inside the block to other fields survive it
    previous = _current.get()
    ctx = replace(previous, **changes)
    _current.set(ctx)
    logger.debug(f"Tuning override entered: {changes}")
    try:
        yield ctx
    finally:
        restored = replace(
            _current.get(), **{field: getattr(previous, field) for field in changes}
        )
        _current.set(restored)
        logger.debug(f"Tuning override exited, restored: {restored}")


@contextmanager
def reference_pitch(freq: Frequency) -> Iterator[TuningContext]:
    """Temporarily set the frequency of A4.

    Example:
        >>> with reference_pitch(430):
        ...     note_to_hz("A4")
        430.0
    """
    with _override(reference_pitch=validate_frequency(freq, "Reference pitch")) as ctx:
        yield ctx


@contextmanager
def tuning_system(system: TuningSystemLike) -> Iterator[TuningContext]:
    """Temporarily select a tuning system."""
    with _override(tuning_system=resolve_tuning_system(system)) as ctx:
        yield ctx


@contextmanager
def key(tonic: str, scale_type: str = DEFAULT_SCALE_TYPE) -> Iterator[TuningContext]:
    """Temporarily set the tonic and scale type."""
    with _override(tonic=parse_pitch_class(tonic), scale_type=scale_type) as ctx:
        yield ctx


@contextmanager
def tuning(*settings) -> Iterator[TuningContext]:
    """Temporarily override the reference pitch and/or tuning system.

    Numbers are taken as the reference pitch. TuningSystem instances and
    registered names are taken as the tuning system. Anything not given keeps
    its current value.

    Example:
        >>> with tuning(415, "werckmeister_iii"):
        ...     ...

    Raises:
        TypeError: If an argument is neither kind, or a kind is given twice
    """
    changes = {}
    for setting in settings:
        if is_number(setting):
            field = "reference_pitch"
            value = validate_frequency(setting, "Reference pitch")
        elif isinstance(setting, (TuningSystem, str)):
            field = "tuning_system"
            value = resolve_tuning_system(setting)
        else:
            raise TypeError(
                f"tuning() takes reference pitches and tuning systems, got {setting!r}"
            )
        if field in changes:
            raise TypeError(f"tuning() got more than one {field.replace('_', ' ')}")
        changes[field] = value

    with _override(**changes) as ctx:
        yield ctx
