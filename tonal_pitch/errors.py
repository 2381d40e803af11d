"""Exception types raised by Tonal Pitch conversions."""


class PitchError(Exception):
    """Base class for every error raised by this package."""


class NoteFormatError(PitchError, ValueError):
    """Text is not valid scientific pitch notation (e.g. 'H4', 'C', 'C4.5')."""


class PitchRangeError(PitchError, ValueError):
    """A semitone index or frequency falls outside the range an operation requires."""


class TuningContextError(PitchError, RuntimeError):
    """The tuning context is missing something a conversion needs, such as a tonic."""


class UnsupportedConversionError(PitchError, NotImplementedError):
    """The active tuning system cannot perform the requested conversion."""
