from django.test import SimpleTestCase
from django.core.exceptions import ValidationError

from drf_shortid.validators import ShortIdValidator


class ShortIdValidatorTest(SimpleTestCase):
    def test_valid_values_pass(self):
        validator = ShortIdValidator("short96")
        for value in (bytes(12), bytearray(12), memoryview(bytes(12))):
            with self.subTest(value=value):
                try:
                    validator(value)
                except ValidationError:
                    self.fail("ShortIdValidator raised ValidationError unexpectedly!")

    def test_invalid_values_raise_error(self):
        validator = ShortIdValidator("short64")
        invalid_inputs = [bytes(7), bytes(9), "00" * 8, 123, None, [0] * 8]

        for value in invalid_inputs:
            with self.subTest(value=value):
                with self.assertRaises(ValidationError) as cm:
                    validator(value)

                self.assertEqual(cm.exception.code, "invalid_short_id")

    def test_unknown_shape(self):
        with self.assertRaises(ValueError):
            ShortIdValidator("short32")

    def test_deconstruct_and_equality(self):
        validator = ShortIdValidator("uuid1")
        path, args, kwargs = validator.deconstruct()

        self.assertEqual(path, "drf_shortid.validators.ShortIdValidator")
        self.assertEqual(ShortIdValidator(*args, **kwargs), validator)
        self.assertNotEqual(validator, ShortIdValidator("short128"))
