"""
Tests for the sine-wave seeded generator.

Validates that:
1. Timestamps are floored to the interval and the aligned time is returned
2. Bars are deterministic and keep the OHLC envelope
3. Prices stay near the base level of 100
4. A reference bar matches fixed values
"""

import pytest
from datetime import datetime, timedelta, timezone
from decimal import Decimal

from illusionist.core.generators import SeededBarGenerator
from illusionist.core.types import BarInterval, ConfigurationError


START = datetime(2025, 1, 2, 9, 30)


class TestSeededAlignment:
    """Test absolute tick-floor alignment."""

    def test_returns_aligned_timestamp(self):
        """A mid-bucket query returns the bucket start."""
        gen = SeededBarGenerator(42, BarInterval.minutes(5))
        bar = gen.get_bar_at(datetime(2025, 1, 2, 10, 7, 30))
        assert bar.timestamp == datetime(2025, 1, 2, 10, 5)

    def test_same_bucket_same_bar(self):
        """Every time inside one bucket gives the same bar."""
        gen = SeededBarGenerator(42, BarInterval.minutes(5))
        a = gen.get_bar_at(datetime(2025, 1, 2, 10, 5))
        b = gen.get_bar_at(datetime(2025, 1, 2, 10, 9, 59, 999999))
        assert a == b

    def test_daily_alignment_is_midnight(self):
        """Daily bars align to midnight."""
        gen = SeededBarGenerator(42, BarInterval.days(1))
        assert gen.align(datetime(2025, 1, 2, 15, 45)) == datetime(2025, 1, 2)

    def test_tzinfo_preserved(self):
        """The aligned timestamp keeps the query tzinfo."""
        gen = SeededBarGenerator(42, BarInterval.hours(1))
        bar = gen.get_bar_at(datetime(2025, 1, 2, 10, 30, tzinfo=timezone.utc))
        assert bar.timestamp == datetime(2025, 1, 2, 10, 0, tzinfo=timezone.utc)

    def test_accepts_timedelta_interval(self):
        """A timedelta interval is converted to a BarInterval."""
        gen = SeededBarGenerator(42, timedelta(minutes=15))
        assert gen.interval == BarInterval.minutes(15)


class TestSeededBars:
    """Test bar values."""

    def test_deterministic_across_instances(self):
        """Two generators with the same seed agree."""
        a = SeededBarGenerator(42, BarInterval.minutes(1)).get_bar_at(START)
        b = SeededBarGenerator(42, BarInterval.minutes(1)).get_bar_at(START)
        assert a == b

    def test_different_seeds_diverge(self):
        """Different seeds give different prices."""
        a = SeededBarGenerator(1, BarInterval.minutes(1)).get_bar_at(START)
        b = SeededBarGenerator(2, BarInterval.minutes(1)).get_bar_at(START)
        assert a.open != b.open

    def test_ohlc_invariant(self):
        """High and low always bracket open and close."""
        gen = SeededBarGenerator(7, BarInterval.minutes(1))
        for i in range(500):
            bar = gen.get_bar_at(START + timedelta(minutes=i))
            assert bar.is_consistent(), bar

    def test_volume_range(self):
        """Volume is a whole number in [1000, 11000)."""
        gen = SeededBarGenerator(7, BarInterval.minutes(1))
        for i in range(200):
            volume = gen.get_bar_at(START + timedelta(minutes=i)).volume
            assert Decimal(1000) <= volume < Decimal(11000)
            assert volume == volume.to_integral_value()

    def test_price_level(self):
        """open = 10*sin + 2*sin + 100 stays within [88, 112]."""
        gen = SeededBarGenerator(99, BarInterval.hours(1))
        for i in range(100):
            bar = gen.get_bar_at(START + timedelta(hours=i))
            assert Decimal(88) <= bar.open <= Decimal(112)

    def test_prices_are_decimal(self):
        """Every numeric field is a Decimal."""
        bar = SeededBarGenerator(42, BarInterval.minutes(1)).get_bar_at(START)
        for value in (bar.open, bar.high, bar.low, bar.close, bar.volume):
            assert isinstance(value, Decimal)

    def test_large_seed_wraps_to_int32(self):
        """Seeds beyond 32 bits wrap to the same generator."""
        a = SeededBarGenerator(2**32 + 42, BarInterval.minutes(1))
        b = SeededBarGenerator(42, BarInterval.minutes(1))
        assert a.seed == 42
        assert a.get_bar_at(START) == b.get_bar_at(START)

    def test_non_integer_seed_raises(self):
        """A string seed is rejected."""
        with pytest.raises(ConfigurationError, match="Seed"):
            SeededBarGenerator("42", BarInterval.minutes(1))


class TestSeededReferenceBar:
    """Pin one bar to fixed values (rounded to 6 places)."""

    def test_reference_bar(self):
        """Seed 42, 1m, 2025-01-02 09:30 must always give the same bar."""
        bar = SeededBarGenerator(42, BarInterval.minutes(1)).get_bar_at(START)

        assert bar.timestamp == START
        assert round(float(bar.open), 6) == 99.40512
        assert round(float(bar.high), 6) == 100.894218
        assert round(float(bar.low), 6) == 98.509001
        assert round(float(bar.close), 6) == 98.509001
        assert bar.volume == Decimal(3003)
