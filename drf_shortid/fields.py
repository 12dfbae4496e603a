"""
Model field storing time-ordered identifiers as raw bytes.
"""

from django.db import models
from django.utils.translation import gettext_lazy as _

from drf_shortid.choices import ID_SHAPE, SHAPE_SIZES
from drf_shortid.validators import ShortIdValidator
from drf_shortid.utils.generators import GENERATORS


class ShortIdField(models.BinaryField):
    """
    A binary column holding one identifier shape.

    New rows receive an id from the shared generator unless a default is
    given explicitly. The column length follows from the shape.
    """

    description = _("Time-ordered identifier")

    def __init__(self, *args, shape: str = ID_SHAPE.SHORT64, **kwargs):
        if shape not in ID_SHAPE.values:
            raise ValueError(f"Unknown identifier shape '{shape}'.")
        self.shape = str(shape)
        self.default_validators = [ShortIdValidator(self.shape)]

        kwargs["max_length"] = SHAPE_SIZES[self.shape]
        kwargs.setdefault("default", GENERATORS[self.shape])
        super().__init__(*args, **kwargs)

    def deconstruct(self):
        name, path, args, kwargs = super().deconstruct()
        kwargs["shape"] = self.shape
        kwargs.pop("max_length", None)
        if kwargs.get("default") is GENERATORS[self.shape]:
            del kwargs["default"]
        return name, path, args, kwargs
