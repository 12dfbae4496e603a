"""
Lossless widening of short identifiers and time extraction.

A short64 id can be widened into a short96 by adding a discriminator, and a
short96 into a UUID-compatible short128 by restoring the full tick count.
The widened id keeps the time, sequence and worker of the source id.
"""

from datetime import datetime

from drf_shortid import layouts
from drf_shortid.types import BytesLike
from drf_shortid.choices import ID_SHAPE
from drf_shortid.generator import as_discriminator
from drf_shortid.clock import UUID_TICKS_BETWEEN_EPOCHS, from_ticks


def short_64_to_96(short_64: bytes, discriminator: BytesLike) -> bytes:
    fields = layouts.SHORT_64.decode(short_64)
    machine_id = as_discriminator(discriminator, 3)
    return layouts.SHORT_96.encode(
        timestamp=fields["timestamp"],
        sequence=fields["sequence"],
        worker=fields["worker"],
        discriminator=int.from_bytes(machine_id, "big"),
    )


def short_96_to_128(short_96: bytes, epoch: int, discriminator_hi: int) -> bytes:
    """
    Widens a short96 id into a version 1 UUID layout.

    The 13 low tick bits dropped when the short96 was generated come back as
    zeros. 'discriminator_hi' becomes the first byte of the 4-byte
    discriminator, in front of the three bytes already in the id.
    """
    fields = layouts.SHORT_96.decode(short_96)
    ticks = (
        (fields["timestamp"] << layouts.TIMESTAMP42_SHIFT)
        + epoch
        + UUID_TICKS_BETWEEN_EPOCHS
    )
    return layouts.SHORT_128.encode(
        **layouts.split_uuid_time(ticks),
        variant=layouts.RFC_4122_VARIANT,
        clock_seq=fields["sequence"],
        worker=fields["worker"],
        discriminator=(discriminator_hi << 24) | fields["discriminator"],
    )


def short_64_to_128(short_64: bytes, epoch: int, discriminator: BytesLike) -> bytes:
    machine_id = as_discriminator(discriminator, 4)
    return short_96_to_128(
        short_64_to_96(short_64, machine_id[1:]), epoch, machine_id[0]
    )


def timestamp_of(identifier: bytes, shape: str, epoch: int = 0) -> datetime:
    """
    Reads the creation time back out of an identifier.

    Args:
        identifier: Raw identifier bytes.
        shape: One of the ID_SHAPE values.
        epoch: The epoch the id was generated with (rebased shapes only).

    Returns:
        An aware UTC datetime, truncated to the shape's time resolution.
    """
    layout = layouts.LAYOUTS[str(shape)]
    fields = layout.decode(bytes(identifier))

    if shape in (ID_SHAPE.UUID1, ID_SHAPE.SHORT128):
        return from_ticks(layouts.join_uuid_time(fields) - UUID_TICKS_BETWEEN_EPOCHS)

    return from_ticks((fields["timestamp"] << layouts.TIMESTAMP42_SHIFT) + epoch)
