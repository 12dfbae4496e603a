import uuid

from django.core.checks import Warning, register

from drf_shortid.clock import system_clock
from drf_shortid.choices import EXHAUSTION_POLICY
from drf_shortid.settings import shortid_settings


@register()
def check_node_id_is_stable(app_configs, **kwargs):
    warnings = []

    # uuid.getnode() sets the multicast bit when it falls back to a random address.
    if shortid_settings.NODE_ID is None and (uuid.getnode() >> 40) & 1:
        warnings.append(
            Warning(
                "No hardware address was found; NODE_ID will change on every restart.",
                hint="Set DRF_SHORTID['NODE_ID'] to a fixed 6-byte value.",
                obj="settings.DRF_SHORTID['NODE_ID']",
                id="drf_shortid.W001",
            )
        )
    return warnings


@register()
def check_exhaustion_policy(app_configs, **kwargs):
    warnings = []

    if (
        shortid_settings.EXHAUSTION_POLICY == EXHAUSTION_POLICY.RAISE
        and shortid_settings.CLOCK in (None, system_clock)
    ):
        warnings.append(
            Warning(
                "EXHAUSTION_POLICY 'raise' fails bursts beyond 16384 ids per tick.",
                hint="Use the 'wait' policy unless callers retry on CounterExhausted.",
                obj="settings.DRF_SHORTID['EXHAUSTION_POLICY']",
                id="drf_shortid.W002",
            )
        )
    return warnings
