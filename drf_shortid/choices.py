"""
Constants for identifier shapes and generator policies.
"""

from django.db import models
from django.utils.translation import gettext_lazy as _


class ID_SHAPE(models.TextChoices):
    """
    The fixed-width identifier shapes the generator produces.

    Attributes:
        UUID1: RFC 4122 version 1 UUID with a 6-byte node.
        SHORT128: UUID-compatible id with worker id and 4-byte discriminator.
        SHORT96: Rebased 42-bit time with worker id and 3-byte discriminator.
        SHORT64: Rebased 42-bit time with an 8-bit worker id.
    """

    UUID1 = "uuid1", _("UUID v1")
    SHORT128 = "short128", _("Short 128")
    SHORT96 = "short96", _("Short 96")
    SHORT64 = "short64", _("Short 64")

    @property
    def size(self) -> int:
        """Length of the identifier in bytes."""
        return SHAPE_SIZES[self.value]


SHAPE_SIZES = {
    "uuid1": 16,
    "short128": 16,
    "short96": 12,
    "short64": 8,
}


class EXHAUSTION_POLICY(models.TextChoices):
    """
    What to do when a tick's sequence numbers are used up.

    Attributes:
        WAIT: Spin on the clock until the next tick, bounded by MAX_WAIT.
        RAISE: Fail with CounterExhausted straight away.
    """

    WAIT = "wait", _("Wait for next tick")
    RAISE = "raise", _("Raise")
