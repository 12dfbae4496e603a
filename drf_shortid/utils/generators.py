"""Process-wide identifier generator and stable callables for model defaults.

The generator is built once from 'DRF_SHORTID' on first use and shared by
every caller in the process. The 'generate_*' functions wrap it so model
fields can reference them as defaults; changing how ids are produced then
needs no schema migration.
"""

import logging
import threading

from django.test.signals import setting_changed

from drf_shortid.compat import Optional
from drf_shortid.clock import to_ticks
from drf_shortid.generator import IdGenerator
from drf_shortid.settings import shortid_settings

logger = logging.getLogger(__name__)

_generator: Optional[IdGenerator] = None
# The generator replaced by the last settings change, kept until its successor exists.
_retired: Optional[IdGenerator] = None
_generator_lock = threading.Lock()


def build_generator(previous: Optional[IdGenerator] = None) -> IdGenerator:
    """
    Creates a new generator from the current settings.

    When 'previous' is given, its worker id and clock sequence seed are
    reused unless the settings fix them, and if both generators read the
    same clock the new one continues from the previous one's stamps.
    """
    worker_id = shortid_settings.WORKER_ID
    clock_seq_seed = shortid_settings.CLOCK_SEQ_SEED
    if previous is not None:
        if worker_id is None:
            worker_id = previous.worker_id
        if clock_seq_seed is None:
            clock_seq_seed = previous.clock_seq_seed

    generator = IdGenerator(
        shortid_settings.CLOCK,
        worker_id=worker_id,
        clock_seq_seed=clock_seq_seed,
        exhaustion_policy=shortid_settings.EXHAUSTION_POLICY,
        max_wait=shortid_settings.MAX_WAIT,
        clock_tolerance=shortid_settings.CLOCK_TOLERANCE,
    )
    if previous is not None and previous.clock is generator.clock:
        generator.carry_over(previous)
    return generator


def get_generator() -> IdGenerator:
    """Returns the shared generator, building it on first use."""
    global _generator, _retired

    if _generator is None:
        with _generator_lock:
            if _generator is None:
                _generator = build_generator(_retired)
                _retired = None
                logger.debug("Built shared %r", _generator)
    return _generator


def reset_generator(*args, **kwargs) -> None:
    """Retires the shared generator so the next call rebuilds it from settings."""
    global _generator, _retired

    if kwargs.get("setting", "DRF_SHORTID") != "DRF_SHORTID":
        return
    with _generator_lock:
        if _generator is not None:
            _retired = _generator
        _generator = None


setting_changed.connect(reset_generator)


def generate_uuid1() -> bytes:
    """UUID v1 bytes using the configured NODE_ID."""
    return get_generator().uuidv1(shortid_settings.node_id)


def generate_short_128() -> bytes:
    """Short128 bytes using the configured MACHINE_ID."""
    return get_generator().next_short_128(shortid_settings.machine_id)


def generate_short_96() -> bytes:
    """Short96 bytes using the last three bytes of MACHINE_ID and EPOCH."""
    return get_generator().next_short_96(
        shortid_settings.machine_id[1:], to_ticks(shortid_settings.EPOCH)
    )


def generate_short_64() -> bytes:
    """Short64 bytes using the configured EPOCH."""
    return get_generator().next_short_64(to_ticks(shortid_settings.EPOCH))


GENERATORS = {
    "uuid1": generate_uuid1,
    "short128": generate_short_128,
    "short96": generate_short_96,
    "short64": generate_short_64,
}
