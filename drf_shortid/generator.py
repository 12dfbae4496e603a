"""
Time-ordered identifier generation.

An IdGenerator owns the mutable (tick, sequence) state that keeps calls
within one clock tick apart. Each shape, and each epoch of the rebased
shapes, counts independently; all of them share one lock so concurrent
callers never observe the same pair.
"""

import time
import logging
import secrets
import itertools
import threading
from datetime import timedelta

from drf_shortid import layouts
from drf_shortid.types import Stamp, Clock, BytesLike
from drf_shortid.choices import EXHAUSTION_POLICY
from drf_shortid.compat import Dict, Tuple, Callable, Optional
from drf_shortid.clock import (
    NANOS_PER_TICK,
    UUID_TICKS_BETWEEN_EPOCHS,
    system_clock,
)
from drf_shortid.errors import (
    ClockError,
    InvalidEpoch,
    CounterExhausted,
    WorkerIdOverflow,
    InvalidDiscriminator,
)

logger = logging.getLogger(__name__)

MAX_SEQUENCE = (1 << layouts.SEQUENCE_BITS) - 1
MAX_UUID_TICKS = (1 << 60) - 1
MAX_TIMESTAMP42 = (1 << layouts.TIMESTAMP42_BITS) - 1
MAX_WORKER_ID = 0xFFFF
MAX_SHORT_64_WORKER_ID = 0xFF


def as_discriminator(value: BytesLike, length: int) -> bytes:
    """
    Normalizes a discriminator into exactly 'length' bytes.

    Raises:
        InvalidDiscriminator: If the value is not byte-like or has the wrong length.
    """
    if isinstance(value, (str, int)):
        raise InvalidDiscriminator(
            f"Discriminator must be bytes, not {type(value).__name__}."
        )
    try:
        data = bytes(value)
    except (TypeError, ValueError) as exc:
        raise InvalidDiscriminator(
            f"Discriminator must be a sequence of {length} bytes."
        ) from exc
    if len(data) != length:
        raise InvalidDiscriminator(
            f"Discriminator must be {length} bytes long, got {len(data)}."
        )
    return data


class IdGenerator:
    """
    Produces fixed-width, per-process unique identifiers.

    Construct one instance per process (or per worker) and share it; every
    public method is safe to call from many threads at once.

    Args:
        clock: Callable returning nanoseconds since the Unix epoch.
        worker_id: 16-bit id embedded in the short shapes. Allocated from a
            process-wide counter when omitted.
        clock_seq_seed: 14-bit offset for the UUID v1 clock sequence.
            Random when omitted.
        exhaustion_policy: 'wait' to spin until the next tick (bounded by
            'max_wait'), 'raise' to fail at once with CounterExhausted.
        max_wait: Upper bound on the time spent waiting for the next tick.
        clock_tolerance: How far the clock may step backwards before calls
            fail with ClockError. Smaller steps keep counting on the last tick.
    """

    _worker_ids = itertools.count()
    _worker_ids_lock = threading.Lock()

    def __init__(
        self,
        clock: Optional[Clock] = None,
        *,
        worker_id: Optional[int] = None,
        clock_seq_seed: Optional[int] = None,
        exhaustion_policy: str = EXHAUSTION_POLICY.WAIT,
        max_wait: timedelta = timedelta(milliseconds=10),
        clock_tolerance: timedelta = timedelta(seconds=1),
    ) -> None:
        if exhaustion_policy not in EXHAUSTION_POLICY.values:
            raise ValueError(f"Unknown exhaustion policy '{exhaustion_policy}'.")
        if clock_seq_seed is not None and not 0 <= clock_seq_seed <= MAX_SEQUENCE:
            raise ValueError(f"clock_seq_seed must be within 0..{MAX_SEQUENCE}.")

        self.clock = clock or system_clock
        self.worker_id = self._allocate_worker_id(worker_id)
        self.clock_seq_seed = (
            secrets.randbits(layouts.SEQUENCE_BITS)
            if clock_seq_seed is None
            else clock_seq_seed
        )
        self.exhaustion_policy = exhaustion_policy
        self.max_wait = max_wait
        self.tolerance_ticks = clock_tolerance // timedelta(microseconds=1) * 10

        self._lock = threading.Lock()
        self._state: Dict[Tuple[str, int], Stamp] = {}

        logger.debug(
            "IdGenerator ready (worker_id=%d, policy=%s)",
            self.worker_id,
            self.exhaustion_policy,
        )

    @classmethod
    def _allocate_worker_id(cls, worker_id: Optional[int]) -> int:
        if worker_id is None:
            with cls._worker_ids_lock:
                worker_id = next(cls._worker_ids)
        if not 0 <= worker_id <= MAX_WORKER_ID:
            raise WorkerIdOverflow(
                f"Worker id {worker_id} does not fit 16 bits; too many generators."
            )
        return worker_id

    # Time acquisition

    def _unix_ticks(self) -> int:
        try:
            ns = self.clock()
        except (OSError, OverflowError) as exc:
            raise ClockError("Time source could not be read.") from exc
        if ns < 0:
            raise ClockError("System time is before the Unix epoch.")
        return ns // NANOS_PER_TICK

    def _uuid_ticks(self) -> int:
        ticks = self._unix_ticks() + UUID_TICKS_BETWEEN_EPOCHS
        if ticks > MAX_UUID_TICKS:
            raise ClockError("Time no longer fits the 60-bit UUID time field.")
        return ticks

    def _rebased_ticks(self, epoch: int) -> int:
        rebased = self._unix_ticks() - epoch
        if rebased < 0:
            raise InvalidEpoch(f"Epoch {epoch} lies in the future.")
        rebased >>= layouts.TIMESTAMP42_SHIFT
        if rebased > MAX_TIMESTAMP42:
            raise InvalidEpoch(
                f"Time since epoch {epoch} no longer fits the 42-bit time field."
            )
        return rebased

    # Sequence state

    def _next(
        self, key: Tuple[str, int], read_tick: Callable[[], int], shift: int = 0
    ) -> Stamp:
        """
        Advances the state for 'key' and returns the pair to embed.

        'shift' is the number of 100 ns tick bits dropped by the shape's
        resolution and scales the backwards tolerance accordingly.
        """
        with self._lock:
            tick = read_tick()
            last = self._state.get(key)

            if last is None or tick > last.tick:
                stamp = Stamp(tick, 0)
            elif last.tick - tick > self.tolerance_ticks >> shift:
                raise ClockError(
                    f"Clock moved backwards by {last.tick - tick} ticks for '{key[0]}'."
                )
            elif last.sequence < MAX_SEQUENCE:
                if tick < last.tick:
                    logger.warning(
                        "Clock moved backwards by %d ticks for '%s'; "
                        "continuing on the last recorded tick",
                        last.tick - tick,
                        key[0],
                    )
                stamp = Stamp(last.tick, last.sequence + 1)
            else:
                stamp = Stamp(self._wait_for_next_tick(key, read_tick, last.tick), 0)

            self._state[key] = stamp
            return stamp

    def _wait_for_next_tick(
        self, key: Tuple[str, int], read_tick: Callable[[], int], last_tick: int
    ) -> int:
        if self.exhaustion_policy == EXHAUSTION_POLICY.RAISE:
            raise CounterExhausted(
                f"Sequence for '{key[0]}' exhausted within tick {last_tick}."
            )

        logger.debug("Sequence for '%s' exhausted; waiting for the next tick", key[0])
        deadline = time.monotonic() + self.max_wait.total_seconds()
        while True:
            tick = read_tick()
            if tick > last_tick:
                return tick
            if time.monotonic() >= deadline:
                raise CounterExhausted(
                    f"Clock did not pass tick {last_tick} within {self.max_wait} "
                    f"for '{key[0]}'."
                )

    def carry_over(self, previous: "IdGenerator") -> None:
        """
        Continues counting from the stamps another generator handed out.

        Used when a generator replaces one that shared its worker id and
        clock, so the replacement never reissues an id of its predecessor.
        """
        with previous._lock:
            state = dict(previous._state)
        with self._lock:
            for key, stamp in state.items():
                current = self._state.get(key)
                if current is None or stamp > current:
                    self._state[key] = stamp

    def stamp(self, shape: str, epoch: int = 0) -> Optional[Stamp]:
        """Returns the last (tick, sequence) handed out for a shape, if any."""
        with self._lock:
            return self._state.get((str(shape), epoch))

    # Shapes

    def uuidv1(self, discriminator: BytesLike) -> bytes:
        """
        Generates an RFC 4122 version 1 UUID as 16 raw bytes.

        The discriminator (conventionally a MAC address) fills the node
        field; the clock sequence is the seeded per-tick sequence.

        Raises:
            ClockError: If the clock is unusable or past the 60-bit range.
            CounterExhausted: If the tick's sequence is used up.
        """
        node = as_discriminator(discriminator, 6)
        tick, sequence = self._next((layouts.UUID1.name, 0), self._uuid_ticks)
        return layouts.UUID1.encode(
            **layouts.split_uuid_time(tick),
            variant=layouts.RFC_4122_VARIANT,
            clock_seq=(self.clock_seq_seed + sequence) & MAX_SEQUENCE,
            node=int.from_bytes(node, "big"),
        )

    def next_short_128(self, discriminator: BytesLike) -> bytes:
        """
        Generates a 16-byte id that parses as a version 1 UUID.

        Layout: 60-bit time with version and variant bits, 14-bit sequence,
        16-bit worker id, 4-byte discriminator.
        """
        machine_id = as_discriminator(discriminator, 4)
        tick, sequence = self._next((layouts.SHORT_128.name, 0), self._uuid_ticks)
        return layouts.SHORT_128.encode(
            **layouts.split_uuid_time(tick),
            variant=layouts.RFC_4122_VARIANT,
            clock_seq=sequence,
            worker=self.worker_id,
            discriminator=int.from_bytes(machine_id, "big"),
        )

    def next_short_96(self, discriminator: BytesLike, epoch: int) -> bytes:
        """
        Generates a 12-byte id for network use.

        Layout: 42-bit time in 819.2 us units since 'epoch', 14-bit sequence,
        16-bit worker id, 3-byte discriminator. 'epoch' is given in 100 ns
        ticks since the Unix epoch; 2**42 units cover about 114 years.

        Each distinct epoch keeps its own sequence state for the lifetime of
        the generator, so callers are expected to use a small, fixed set of
        epochs.

        Raises:
            InvalidEpoch: If the current time is before 'epoch' or too far past it.
        """
        machine_id = as_discriminator(discriminator, 3)
        epoch = _check_epoch(epoch)
        tick, sequence = self._next(
            (layouts.SHORT_96.name, epoch),
            lambda: self._rebased_ticks(epoch),
            layouts.TIMESTAMP42_SHIFT,
        )
        return layouts.SHORT_96.encode(
            timestamp=tick,
            sequence=sequence,
            worker=self.worker_id,
            discriminator=int.from_bytes(machine_id, "big"),
        )

    def next_short_64(self, epoch: int) -> bytes:
        """
        Generates an 8-byte id for standalone use.

        Same time and sequence fields as next_short_96, followed by an 8-bit
        worker id. Without a discriminator it is unique within one process only.

        Raises:
            WorkerIdOverflow: If this generator's worker id exceeds 8 bits.
        """
        if self.worker_id > MAX_SHORT_64_WORKER_ID:
            raise WorkerIdOverflow(
                f"Worker id {self.worker_id} does not fit the 8-bit short64 field."
            )
        epoch = _check_epoch(epoch)
        tick, sequence = self._next(
            (layouts.SHORT_64.name, epoch),
            lambda: self._rebased_ticks(epoch),
            layouts.TIMESTAMP42_SHIFT,
        )
        return layouts.SHORT_64.encode(
            timestamp=tick, sequence=sequence, worker=self.worker_id
        )

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} worker_id={self.worker_id}>"


def _check_epoch(epoch: int) -> int:
    if isinstance(epoch, bool) or not isinstance(epoch, int):
        raise InvalidEpoch(f"Epoch must be an int, got {type(epoch).__name__}.")
    return epoch
