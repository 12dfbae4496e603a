"""
Time sources and tick arithmetic.

A clock is any zero-argument callable returning integer nanoseconds since
the Unix epoch. The generator works in 100 ns ticks, the unit RFC 4122 uses
for version 1 UUIDs.
"""

import time
from datetime import datetime, timedelta, timezone

from drf_shortid.compat import Self, Union

# 100 ns intervals between 1582-10-15 (Gregorian reform) and 1970-01-01.
UUID_TICKS_BETWEEN_EPOCHS = 0x01B2_1DD2_1381_4000

NANOS_PER_TICK = 100

_UNIX_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


def system_clock() -> int:
    return time.time_ns()


def to_ticks(value: Union[int, datetime]) -> int:
    """
    Converts an epoch setting into 100 ns ticks since the Unix epoch.

    Integers are taken as ticks already. Naive datetimes are read as UTC.
    """
    if isinstance(value, bool):
        raise TypeError("Epoch must be an int or a datetime, not bool.")
    if isinstance(value, int):
        return value
    if isinstance(value, datetime):
        if value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        delta = value - _UNIX_EPOCH
        return (
            delta.days * 864_000_000_000
            + delta.seconds * 10_000_000
            + delta.microseconds * 10
        )
    raise TypeError(
        f"Epoch must be an int or a datetime, got {type(value).__name__}."
    )


def from_ticks(ticks: int) -> datetime:
    """Converts 100 ns ticks since the Unix epoch into an aware UTC datetime."""
    return _UNIX_EPOCH + timedelta(microseconds=ticks // 10)


class ManualClock:
    """
    A deterministic clock that only moves when told to.

    Each read returns the current value and then moves it forward by
    'step_ns', so a zero step freezes time entirely.
    """

    __slots__ = ("_now", "_step")

    def __init__(self, start_ns: int = 0, step_ns: int = 0) -> None:
        self._now = start_ns
        self._step = step_ns

    def __call__(self) -> int:
        now = self._now
        self._now += self._step
        return now

    def advance(self, ns: int) -> Self:
        self._now += ns
        return self

    def set(self, ns: int) -> Self:
        self._now = ns
        return self

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(now={self._now}, step={self._step})"
