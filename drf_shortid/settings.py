"""
Configuration management for DRF Short ID.

This module handles the loading, validation, and caching of library
settings read from 'settings.DRF_SHORTID'. It resolves the node and machine
discriminators and keeps the cache in sync with Django's test overrides.
"""

import uuid
from datetime import datetime, timedelta

from django.conf import settings
from django.test.signals import setting_changed
from django.utils.module_loading import import_string
from django.utils.translation import gettext_lazy as _
from django.core.exceptions import ImproperlyConfigured

from drf_shortid.choices import EXHAUSTION_POLICY


DEFAULTS = {
    # Discriminators
    "NODE_ID": None,
    "MACHINE_ID": None,
    # Time
    "EPOCH": 0,
    "CLOCK": None,
    "CLOCK_TOLERANCE": timedelta(seconds=1),
    # Sequencing
    "WORKER_ID": None,
    "CLOCK_SEQ_SEED": None,
    "EXHAUSTION_POLICY": EXHAUSTION_POLICY.WAIT,
    "MAX_WAIT": timedelta(milliseconds=10),
}

IMPORT_STRINGS = ("CLOCK",)

BYTES_SETTINGS = {
    "NODE_ID": 6,
    "MACHINE_ID": 4,
}

TYPE_VALIDATORS = {
    "NODE_ID": (bytes, type(None)),
    "MACHINE_ID": (bytes, type(None)),
    "EPOCH": (int, datetime),
    "CLOCK": (str, type(None)),
    "CLOCK_TOLERANCE": timedelta,
    "WORKER_ID": (int, type(None)),
    "CLOCK_SEQ_SEED": (int, type(None)),
    "EXHAUSTION_POLICY": str,
    "MAX_WAIT": timedelta,
}


def default_node_id() -> bytes:
    """The host's hardware address as reported by uuid.getnode()."""
    return uuid.getnode().to_bytes(6, "big")


class ShortIdSettings:
    """
    Lazy settings container for DRF Short ID.
    """

    __slots__ = ("_user_settings", "_cache")

    def __init__(self, user_settings=None):
        self._user_settings = user_settings or {}
        self._cache = {}
        self._validate_all()

    def _get_setting(self, setting_name: str):
        return self._user_settings.get(setting_name, DEFAULTS[setting_name])

    def __getattr__(self, setting_name: str):
        if setting_name not in DEFAULTS:
            raise AttributeError(_(f"Invalid setting: '{setting_name}'."))

        if setting_name in self._cache:
            return self._cache[setting_name]

        value = self._get_setting(setting_name)

        if setting_name in IMPORT_STRINGS and isinstance(value, str):
            value = self._import_from_string(setting_name, value)

        self._cache[setting_name] = value
        return value

    @property
    def node_id(self) -> bytes:
        """The 6-byte node for UUID v1 ids, falling back to the host address."""
        return self.NODE_ID or default_node_id()

    @property
    def machine_id(self) -> bytes:
        """The 4-byte discriminator for short128 ids; short96 uses its last 3 bytes."""
        return self.MACHINE_ID or self.node_id[2:]

    def _import_from_string(self, setting_name: str, path: str):
        try:
            value = import_string(path)
        except ImportError as exc:
            raise ImproperlyConfigured(
                _(f"Could not import '{path}' for '{setting_name}'.")
            ) from exc
        if not callable(value):
            raise ImproperlyConfigured(_(f"'{setting_name}' must be a callable."))
        return value

    def _validate_all(self):
        self._validate_primitive_types()
        self._validate_business_logic()

    def _validate_primitive_types(self):
        for setting_name, expected_types in TYPE_VALIDATORS.items():
            value = self._get_setting(setting_name)
            if isinstance(value, bool) or not isinstance(value, expected_types):
                raise ImproperlyConfigured(_(f"'{setting_name}' has invalid type."))

    def _validate_business_logic(self):
        self._validate_discriminators()
        self._validate_ranges()
        self._validate_durations()
        self._validate_policy()

    def _validate_discriminators(self):
        for setting_name, length in BYTES_SETTINGS.items():
            value = self._get_setting(setting_name)
            if value is not None and len(value) != length:
                raise ImproperlyConfigured(
                    _(f"{setting_name} must be exactly {length} bytes.")
                )

    def _validate_ranges(self):
        worker_id = self._get_setting("WORKER_ID")
        seed = self._get_setting("CLOCK_SEQ_SEED")

        if worker_id is not None and not 0 <= worker_id <= 0xFFFF:
            raise ImproperlyConfigured(_("WORKER_ID must be within 0..65535."))

        if seed is not None and not 0 <= seed <= 0x3FFF:
            raise ImproperlyConfigured(_("CLOCK_SEQ_SEED must be within 0..16383."))

    def _validate_durations(self):
        if self._get_setting("MAX_WAIT") <= timedelta(0):
            raise ImproperlyConfigured(_("MAX_WAIT must be positive."))

        if self._get_setting("CLOCK_TOLERANCE") < timedelta(0):
            raise ImproperlyConfigured(_("CLOCK_TOLERANCE cannot be negative."))

    def _validate_policy(self):
        policy = self._get_setting("EXHAUSTION_POLICY")
        if policy not in EXHAUSTION_POLICY.values:
            raise ImproperlyConfigured(
                _(f"'{policy}' is not a valid EXHAUSTION_POLICY.")
            )

    def reload(self, new_user_settings=None):
        self._user_settings = new_user_settings or {}
        self._cache.clear()
        self._validate_all()


shortid_settings = ShortIdSettings(getattr(settings, "DRF_SHORTID", None))


def reload_shortid_settings(*args, **kwargs):
    if kwargs.get("setting") == "DRF_SHORTID":
        shortid_settings.reload(kwargs.get("value"))


setting_changed.connect(reload_shortid_settings)
