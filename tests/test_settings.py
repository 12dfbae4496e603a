from datetime import datetime, timedelta

from django.test import SimpleTestCase, override_settings
from django.core.exceptions import ImproperlyConfigured

from drf_shortid.clock import system_clock
from drf_shortid.settings import (
    DEFAULTS,
    ShortIdSettings,
    default_node_id,
    shortid_settings,
)

NOT_CALLABLE = 42


class SettingsTests(SimpleTestCase):
    def test_default_values_are_loaded(self):
        settings = ShortIdSettings(user_settings={})
        self.assertEqual(settings.MAX_WAIT, DEFAULTS["MAX_WAIT"])
        self.assertEqual(settings.EXHAUSTION_POLICY, "wait")
        self.assertIsNone(settings.CLOCK)

    def test_user_settings_override_defaults(self):
        settings = ShortIdSettings(user_settings={"MAX_WAIT": timedelta(seconds=1)})
        self.assertEqual(settings.MAX_WAIT, timedelta(seconds=1))

    def test_invalid_type_raises_error(self):
        for user_settings in (
            {"WORKER_ID": "1"},
            {"WORKER_ID": True},
            {"NODE_ID": "010203040506"},
            {"EPOCH": 1.5},
            {"MAX_WAIT": 10},
        ):
            with self.subTest(user_settings=user_settings):
                with self.assertRaisesRegex(ImproperlyConfigured, "invalid type"):
                    ShortIdSettings(user_settings=user_settings)

    def test_epoch_accepts_datetime(self):
        settings = ShortIdSettings(user_settings={"EPOCH": datetime(2020, 1, 1)})
        self.assertEqual(settings.EPOCH, datetime(2020, 1, 1))

    def test_discriminator_lengths(self):
        with self.assertRaisesRegex(ImproperlyConfigured, "NODE_ID must be exactly 6"):
            ShortIdSettings(user_settings={"NODE_ID": b"\x01\x02"})
        with self.assertRaisesRegex(ImproperlyConfigured, "MACHINE_ID must be exactly"):
            ShortIdSettings(user_settings={"MACHINE_ID": b"\x01\x02\x03"})

    def test_range_validation(self):
        with self.assertRaisesRegex(ImproperlyConfigured, "WORKER_ID"):
            ShortIdSettings(user_settings={"WORKER_ID": 70000})
        with self.assertRaisesRegex(ImproperlyConfigured, "CLOCK_SEQ_SEED"):
            ShortIdSettings(user_settings={"CLOCK_SEQ_SEED": -1})

    def test_duration_validation(self):
        with self.assertRaisesRegex(ImproperlyConfigured, "MAX_WAIT must be positive"):
            ShortIdSettings(user_settings={"MAX_WAIT": timedelta(0)})
        with self.assertRaisesRegex(ImproperlyConfigured, "cannot be negative"):
            ShortIdSettings(user_settings={"CLOCK_TOLERANCE": timedelta(seconds=-1)})

    def test_policy_validation(self):
        with self.assertRaisesRegex(ImproperlyConfigured, "EXHAUSTION_POLICY"):
            ShortIdSettings(user_settings={"EXHAUSTION_POLICY": "retry"})

    def test_clock_is_imported_from_string(self):
        settings = ShortIdSettings(
            user_settings={"CLOCK": "drf_shortid.clock.system_clock"}
        )
        self.assertIs(settings.CLOCK, system_clock)

    def test_invalid_import_string_raises_error(self):
        settings = ShortIdSettings(user_settings={"CLOCK": "non_existent.module.clock"})
        with self.assertRaises(ImproperlyConfigured):
            # Accessing the attribute triggers the lazy import
            _ = settings.CLOCK

    def test_clock_must_be_callable(self):
        settings = ShortIdSettings(
            user_settings={"CLOCK": "tests.test_settings.NOT_CALLABLE"}
        )
        with self.assertRaisesRegex(ImproperlyConfigured, "must be a callable"):
            _ = settings.CLOCK

    def test_discriminator_fallbacks(self):
        settings = ShortIdSettings(user_settings={})
        self.assertEqual(settings.node_id, default_node_id())
        self.assertEqual(settings.machine_id, default_node_id()[2:])

        settings = ShortIdSettings(
            user_settings={"NODE_ID": b"\x01\x02\x03\x04\x05\x06"}
        )
        self.assertEqual(settings.machine_id, b"\x03\x04\x05\x06")

        settings = ShortIdSettings(user_settings={"MACHINE_ID": b"\x0a\x0b\x0c\x0d"})
        self.assertEqual(settings.machine_id, b"\x0a\x0b\x0c\x0d")

    def test_reload_clears_cache(self):
        settings = ShortIdSettings(user_settings={"WORKER_ID": 5})
        self.assertEqual(settings.WORKER_ID, 5)

        settings.reload(new_user_settings={"WORKER_ID": 100})
        self.assertEqual(settings.WORKER_ID, 100)

    def test_attribute_error_on_invalid_setting(self):
        settings = ShortIdSettings(user_settings={})
        with self.assertRaises(AttributeError):
            _ = settings.NON_EXISTENT_SETTING

    @override_settings(DRF_SHORTID={"WORKER_ID": 9})
    def test_override_settings_reloads_shared_settings(self):
        self.assertEqual(shortid_settings.WORKER_ID, 9)
