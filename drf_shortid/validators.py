"""
Validation logic for stored identifiers.

Ensures values assigned to identifier fields are raw bytes of the length
their shape prescribes, so malformed or hex-encoded values never reach
the database.
"""

from django.core.exceptions import ValidationError
from django.utils.deconstruct import deconstructible
from django.utils.translation import gettext_lazy as _

from drf_shortid.choices import ID_SHAPE, SHAPE_SIZES


@deconstructible
class ShortIdValidator:
    """
    Ensures that a value is a raw identifier of the given shape.
    """

    message = _("Ensure this value is a %(size)d-byte %(shape)s identifier.")
    code = "invalid_short_id"

    def __init__(self, shape: str):
        if shape not in ID_SHAPE.values:
            raise ValueError(f"Unknown identifier shape '{shape}'.")
        self.shape = str(shape)

    @property
    def size(self) -> int:
        return SHAPE_SIZES[self.shape]

    def __call__(self, value):
        if (
            not isinstance(value, (bytes, bytearray, memoryview))
            or len(value) != self.size
        ):
            raise ValidationError(
                self.message,
                code=self.code,
                params={"size": self.size, "shape": self.shape},
            )

    def __eq__(self, other):
        return isinstance(other, ShortIdValidator) and self.shape == other.shape
