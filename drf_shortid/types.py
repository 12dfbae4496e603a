"""
Data structures and aliases shared by the generator and its layouts.
"""

from drf_shortid.compat import Union, Callable, Sequence, NamedTuple

# Nanoseconds since the Unix epoch, as returned by time.time_ns().
Clock = Callable[[], int]

# Anything that can be turned into a fixed-length run of bytes.
BytesLike = Union[bytes, bytearray, memoryview, Sequence[int]]


class Stamp(NamedTuple):
    """
    The (tick, sequence) pair last handed out for one identifier shape.

    The tick is expressed in the resolution of the shape it belongs to:
    100 ns for the UUID-style shapes, 819.2 us for the rebased ones.
    """

    tick: int
    sequence: int


class Field(NamedTuple):
    """
    A named bit range inside a packed identifier.

    Attributes:
        name: Key used when encoding and decoding.
        offset: Position of the first bit, counted from the most significant bit.
        width: Number of bits.
    """

    name: str
    offset: int
    width: int
