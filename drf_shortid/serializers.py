"""
REST framework field for identifiers.

Ids travel over the API as lowercase hex; dashes are accepted on input so
UUID-formatted values of the 16-byte shapes parse as well.
"""

from rest_framework import serializers
from django.utils.translation import gettext_lazy as _

from drf_shortid.choices import ID_SHAPE, SHAPE_SIZES


class ShortIdField(serializers.Field):
    """
    Serializes raw identifier bytes to hex and parses hex back to bytes.
    """

    default_error_messages = {
        "invalid": _("Must be a hexadecimal string."),
        "length": _("Must be a {size}-byte {shape} identifier."),
    }

    def __init__(self, shape: str = ID_SHAPE.SHORT64, **kwargs):
        if shape not in ID_SHAPE.values:
            raise ValueError(f"Unknown identifier shape '{shape}'.")
        self.shape = str(shape)
        super().__init__(**kwargs)

    @property
    def size(self) -> int:
        return SHAPE_SIZES[self.shape]

    def to_representation(self, value) -> str:
        return bytes(value).hex()

    def to_internal_value(self, data) -> bytes:
        if not isinstance(data, str):
            self.fail("invalid")

        try:
            value = bytes.fromhex(data.strip().replace("-", ""))
        except ValueError:
            self.fail("invalid")

        if len(value) != self.size:
            self.fail("length", size=self.size, shape=self.shape)
        return value
