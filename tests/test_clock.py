from datetime import datetime, timezone, timedelta

from django.test import SimpleTestCase

from drf_shortid.clock import (
    ManualClock,
    UUID_TICKS_BETWEEN_EPOCHS,
    to_ticks,
    from_ticks,
    system_clock,
)


class TickConversionTests(SimpleTestCase):
    def test_gregorian_offset(self):
        gregorian = datetime(1582, 10, 15, tzinfo=timezone.utc)
        unix = datetime(1970, 1, 1, tzinfo=timezone.utc)
        self.assertEqual(
            (unix - gregorian) // timedelta(microseconds=1) * 10,
            UUID_TICKS_BETWEEN_EPOCHS,
        )

    def test_int_is_taken_as_ticks(self):
        self.assertEqual(to_ticks(12345), 12345)

    def test_datetime_is_converted(self):
        moment = datetime(2020, 1, 1, tzinfo=timezone.utc)
        self.assertEqual(to_ticks(moment), 1577836800 * 10_000_000)

    def test_naive_datetime_is_utc(self):
        self.assertEqual(
            to_ticks(datetime(2020, 1, 1)),
            to_ticks(datetime(2020, 1, 1, tzinfo=timezone.utc)),
        )

    def test_invalid_types(self):
        for value in (True, "2020-01-01", 1.5, None):
            with self.subTest(value=value):
                with self.assertRaises(TypeError):
                    to_ticks(value)

    def test_from_ticks(self):
        self.assertEqual(
            from_ticks(1577836800 * 10_000_000 + 15),
            datetime(2020, 1, 1, 0, 0, 0, 1, tzinfo=timezone.utc),
        )


class ClockTests(SimpleTestCase):
    def test_system_clock_returns_nanoseconds(self):
        now = system_clock()
        self.assertIsInstance(now, int)
        self.assertGreater(now, 1_600_000_000 * 10**9)

    def test_manual_clock_is_frozen_by_default(self):
        clock = ManualClock(42)
        self.assertEqual([clock(), clock()], [42, 42])

    def test_manual_clock_steps(self):
        clock = ManualClock(0, step_ns=100)
        self.assertEqual([clock(), clock(), clock()], [0, 100, 200])

    def test_advance_and_set_chain(self):
        clock = ManualClock(10)
        self.assertIs(clock.advance(5), clock)
        self.assertEqual(clock(), 15)
        self.assertEqual(clock.set(3)(), 3)
