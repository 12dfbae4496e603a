from rest_framework import serializers
from django.test import SimpleTestCase

from drf_shortid.serializers import ShortIdField


class EventSerializer(serializers.Serializer):
    id = ShortIdField(shape="short96")
    trace_id = ShortIdField(shape="uuid1", required=False)


class ShortIdSerializerFieldTests(SimpleTestCase):
    def test_representation_is_lowercase_hex(self):
        field = ShortIdField(shape="short64")
        self.assertEqual(
            field.to_representation(b"\x00\x01\xab\xcd\xef\x10\x20\x30"),
            "0001abcdef102030",
        )

    def test_accepts_memoryview(self):
        field = ShortIdField(shape="short64")
        self.assertEqual(field.to_representation(memoryview(bytes(8))), "0" * 16)

    def test_parses_hex(self):
        serializer = EventSerializer(data={"id": "00112233445566778899AABB"})

        self.assertTrue(serializer.is_valid(), serializer.errors)
        self.assertEqual(
            serializer.validated_data["id"], bytes.fromhex("00112233445566778899aabb")
        )

    def test_parses_uuid_formatted_value(self):
        serializer = EventSerializer(
            data={
                "id": "00" * 12,
                "trace_id": "13814000-1dd2-11b2-8000-010203040506",
            }
        )

        self.assertTrue(serializer.is_valid(), serializer.errors)
        self.assertEqual(
            serializer.validated_data["trace_id"],
            bytes.fromhex("138140001dd211b28000010203040506"),
        )

    def test_rejects_non_hex(self):
        for value in ("zz" * 12, 1234, None, ["00"]):
            with self.subTest(value=value):
                serializer = EventSerializer(data={"id": value})
                self.assertFalse(serializer.is_valid())
                self.assertIn("id", serializer.errors)

    def test_rejects_wrong_length(self):
        serializer = EventSerializer(data={"id": "00" * 8})

        self.assertFalse(serializer.is_valid())
        self.assertEqual(
            serializer.errors["id"], ["Must be a 12-byte short96 identifier."]
        )

    def test_output(self):
        serializer = EventSerializer({"id": bytes(range(12)), "trace_id": bytes(16)})
        self.assertEqual(
            serializer.data,
            {"id": "000102030405060708090a0b", "trace_id": "0" * 32},
        )

    def test_unknown_shape(self):
        with self.assertRaises(ValueError):
            ShortIdField(shape="short32")
