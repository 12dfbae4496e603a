"""
Bit layouts for the packed identifier shapes.

Each shape is described as a table of named fields (bit offset from the
most significant bit, bit width) and a single encode/decode routine packs
and unpacks any of them as a big-endian integer.
"""

from drf_shortid.types import Field
from drf_shortid.compat import Any, Dict, Sequence

# RFC 4122 version and variant values.
UUID_VERSION_1 = 0b0001
RFC_4122_VARIANT = 0b10

SEQUENCE_BITS = 14
TIMESTAMP42_BITS = 42
# Rebased shapes drop the low 13 bits of the 100 ns tick (819.2 us units).
TIMESTAMP42_SHIFT = 13


class Layout:
    """
    An ordered table of fields packed into a fixed number of bytes.

    Fields may leave gaps but must not overlap and must fit the size;
    gaps always encode as zero bits.
    """

    __slots__ = ("name", "size", "fields", "_index")

    def __init__(self, name: str, size: int, fields: Sequence[Field]) -> None:
        self.name = name
        self.size = size
        self.fields = tuple(sorted(fields, key=lambda f: f.offset))
        self._index = {f.name: f for f in self.fields}
        self._validate()

    def _validate(self) -> None:
        if len(self._index) != len(self.fields):
            raise ValueError(f"{self.name}: duplicate field names.")

        cursor = 0
        for field in self.fields:
            if field.width <= 0:
                raise ValueError(f"{self.name}.{field.name}: width must be positive.")
            if field.offset < cursor:
                raise ValueError(f"{self.name}.{field.name}: overlaps previous field.")
            cursor = field.offset + field.width

        if cursor > self.size * 8:
            raise ValueError(f"{self.name}: fields exceed {self.size} bytes.")

    @property
    def bits(self) -> int:
        return self.size * 8

    def _shift(self, field: Field) -> int:
        return self.bits - field.offset - field.width

    def encode(self, **values: int) -> bytes:
        """
        Packs the given field values into bytes.

        Raises:
            KeyError: If a field is missing or unknown.
            ValueError: If a value is negative or wider than its field.
        """
        unknown = set(values) - set(self._index)
        if unknown:
            raise KeyError(f"{self.name}: unknown fields {sorted(unknown)}.")

        packed = 0
        for field in self.fields:
            value = values[field.name]
            if value < 0 or value >> field.width:
                raise ValueError(
                    f"{self.name}.{field.name}: {value} does not fit "
                    f"{field.width} bits."
                )
            packed |= value << self._shift(field)
        return packed.to_bytes(self.size, "big")

    def decode(self, data: bytes) -> Dict[str, int]:
        if len(data) != self.size:
            raise ValueError(
                f"{self.name}: expected {self.size} bytes, got {len(data)}."
            )
        packed = int.from_bytes(data, "big")
        return {
            field.name: (packed >> self._shift(field)) & ((1 << field.width) - 1)
            for field in self.fields
        }

    def byte_span(self, name: str) -> slice:
        """Returns the smallest byte slice covering the named field."""
        field = self._index[name]
        return slice(field.offset // 8, -(-(field.offset + field.width) // 8))

    def __repr__(self) -> str:
        return f"<Layout {self.name} ({self.size} bytes)>"


def split_uuid_time(ticks: int) -> Dict[str, Any]:
    """Splits a 60-bit tick count into the RFC 4122 time fields."""
    return {
        "time_low": ticks & 0xFFFF_FFFF,
        "time_mid": (ticks >> 32) & 0xFFFF,
        "time_hi": (ticks >> 48) & 0x0FFF,
        "version": UUID_VERSION_1,
    }


def join_uuid_time(fields: Dict[str, int]) -> int:
    return (fields["time_hi"] << 48) | (fields["time_mid"] << 32) | fields["time_low"]


_UUID_TIME_FIELDS = (
    Field("time_low", 0, 32),
    Field("time_mid", 32, 16),
    Field("version", 48, 4),
    Field("time_hi", 52, 12),
    Field("variant", 64, 2),
    Field("clock_seq", 66, SEQUENCE_BITS),
)

UUID1 = Layout("uuid1", 16, _UUID_TIME_FIELDS + (Field("node", 80, 48),))

SHORT_128 = Layout(
    "short128",
    16,
    _UUID_TIME_FIELDS + (Field("worker", 80, 16), Field("discriminator", 96, 32)),
)

SHORT_96 = Layout(
    "short96",
    12,
    (
        Field("timestamp", 0, TIMESTAMP42_BITS),
        Field("sequence", 42, SEQUENCE_BITS),
        Field("worker", 56, 16),
        Field("discriminator", 72, 24),
    ),
)

SHORT_64 = Layout(
    "short64",
    8,
    (
        Field("timestamp", 0, TIMESTAMP42_BITS),
        Field("sequence", 42, SEQUENCE_BITS),
        Field("worker", 56, 8),
    ),
)

LAYOUTS = {layout.name: layout for layout in (UUID1, SHORT_128, SHORT_96, SHORT_64)}
