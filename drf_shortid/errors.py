"""
Exception hierarchy for identifier generation.

Every failure mode of the generator maps to one of these classes so callers
can distinguish an unusable clock from a bad argument or a saturated
sequence. None of them is ever converted into a fallback identifier.
"""


class ShortIdError(Exception):
    """Base class for all identifier generation errors."""


class ClockError(ShortIdError):
    """
    The time source cannot be used.

    Raised when the clock cannot be read, reports a time before the Unix
    epoch, runs backwards further than the configured tolerance, or reports
    a time that no longer fits the 60-bit UUID time field.
    """


class InvalidEpoch(ShortIdError):
    """The epoch rebases the current time outside the time field."""


class CounterExhausted(ShortIdError):
    """The sequence ran out before the clock moved to the next tick."""


class WorkerIdOverflow(ShortIdError):
    """The worker id does not fit the field reserved for it."""


class InvalidDiscriminator(ShortIdError, ValueError):
    """The discriminator is not a byte sequence of the expected length."""
