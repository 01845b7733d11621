"""
Tests for core value types.

Validates that:
1. BarInterval rejects bad units/lengths and parses interval strings
2. BarAnchor normalizes prices to Decimal and rejects non-positive values
3. Bar checks the OHLC envelope and converts to/from flat records
"""

import pytest
from datetime import datetime, timedelta
from decimal import Decimal

from illusionist.core.types import (
    Bar,
    BarAnchor,
    BarInterval,
    ConfigurationError,
    IntervalUnit,
    coerce_interval,
)


class TestBarInterval:
    """Test interval construction and derived values."""

    def test_builders_use_matching_units(self):
        """Each builder should produce its own unit."""
        assert BarInterval.milliseconds(250).unit == IntervalUnit.MILLISECOND
        assert BarInterval.seconds(30).unit == IntervalUnit.SECOND
        assert BarInterval.minutes(5).unit == IntervalUnit.MINUTE
        assert BarInterval.hours(1).unit == IntervalUnit.HOUR
        assert BarInterval.days(1).unit == IntervalUnit.DAY
        assert BarInterval.weeks(2).unit == IntervalUnit.WEEK

    def test_duration(self):
        """duration should match the equivalent timedelta."""
        assert BarInterval.minutes(5).duration == timedelta(minutes=5)
        assert BarInterval.hours(1).duration == timedelta(hours=1)
        assert BarInterval.weeks(1).duration == timedelta(days=7)
        assert BarInterval.milliseconds(250).duration == timedelta(milliseconds=250)

    def test_derived_values(self):
        """Minutes, hours and ticks derive from the length."""
        interval = BarInterval.minutes(90)
        assert interval.total_minutes == 90.0
        assert interval.total_hours == 1.5
        assert interval.ticks == 90 * 60 * 10_000_000

    def test_zero_length_raises(self):
        """A zero length is rejected."""
        with pytest.raises(ConfigurationError, match=">= 1"):
            BarInterval(IntervalUnit.MINUTE, 0)

    def test_negative_length_raises(self):
        """A negative length is rejected."""
        with pytest.raises(ConfigurationError):
            BarInterval.hours(-1)

    def test_non_integer_length_raises(self):
        """Floats and bools are not lengths."""
        with pytest.raises(ConfigurationError):
            BarInterval(IntervalUnit.MINUTE, 1.5)
        with pytest.raises(ConfigurationError):
            BarInterval(IntervalUnit.MINUTE, True)

    def test_wrong_unit_type_raises(self):
        """The unit must be an IntervalUnit."""
        with pytest.raises(ConfigurationError, match="IntervalUnit"):
            BarInterval("minute", 1)

    def test_configuration_error_is_value_error(self):
        """ConfigurationError can be caught as ValueError."""
        with pytest.raises(ValueError):
            BarInterval.minutes(0)

    def test_equality_is_by_value(self):
        """Intervals compare by unit and length."""
        assert BarInterval.minutes(5) == BarInterval(IntervalUnit.MINUTE, 5)
        assert BarInterval.minutes(60) != BarInterval.hours(1)

    def test_str(self):
        """str() gives the compact interval spelling."""
        assert str(BarInterval.minutes(5)) == "5m"
        assert str(BarInterval.milliseconds(250)) == "250ms"
        assert str(BarInterval.days(1)) == "1d"


class TestBarIntervalParsing:
    """Test parse() and from_timedelta()."""

    @pytest.mark.parametrize("text,expected", [
        ("1m", BarInterval.minutes(1)),
        ("5m", BarInterval.minutes(5)),
        ("4h", BarInterval.hours(4)),
        ("4H", BarInterval.hours(4)),
        ("1D", BarInterval.days(1)),
        ("1w", BarInterval.weeks(1)),
        ("30s", BarInterval.seconds(30)),
        ("250ms", BarInterval.milliseconds(250)),
        (" 15m ", BarInterval.minutes(15)),
    ])
    def test_parse_valid(self, text, expected):
        """Accepted spellings, case-insensitive except for months."""
        assert BarInterval.parse(text) == expected

    def test_parse_month_rejected(self):
        """Uppercase M is the exchange spelling for month."""
        with pytest.raises(ConfigurationError, match="Monthly"):
            BarInterval.parse("1M")

    @pytest.mark.parametrize("text", ["", "m", "5", "5x", "0m", "-5m", "1.5h"])
    def test_parse_invalid(self, text):
        """Malformed strings are rejected."""
        with pytest.raises(ConfigurationError):
            BarInterval.parse(text)

    def test_from_timedelta_picks_coarsest_unit(self):
        """from_timedelta chooses the largest unit that divides evenly."""
        assert BarInterval.from_timedelta(timedelta(hours=2)) == BarInterval.hours(2)
        assert BarInterval.from_timedelta(timedelta(minutes=90)) == BarInterval.minutes(90)
        assert BarInterval.from_timedelta(timedelta(days=7)) == BarInterval.weeks(1)
        assert BarInterval.from_timedelta(timedelta(milliseconds=1500)) == BarInterval.milliseconds(1500)

    def test_from_timedelta_rejects_non_positive(self):
        """Zero and negative durations are rejected."""
        with pytest.raises(ConfigurationError, match="positive"):
            BarInterval.from_timedelta(timedelta(0))
        with pytest.raises(ConfigurationError):
            BarInterval.from_timedelta(timedelta(minutes=-5))

    def test_from_timedelta_rejects_sub_millisecond(self):
        """Durations finer than a millisecond are rejected."""
        with pytest.raises(ConfigurationError, match="milliseconds"):
            BarInterval.from_timedelta(timedelta(microseconds=1500))

    def test_coerce_interval(self):
        """coerce_interval accepts intervals, timedeltas and strings."""
        assert coerce_interval(BarInterval.minutes(5)) == BarInterval.minutes(5)
        assert coerce_interval(timedelta(minutes=5)) == BarInterval.minutes(5)
        assert coerce_interval("5m") == BarInterval.minutes(5)
        with pytest.raises(ConfigurationError, match="Unsupported interval type"):
            coerce_interval(5)


class TestBarAnchor:
    """Test anchor validation."""

    def test_int_price_becomes_decimal(self):
        """Int prices are stored as Decimal."""
        anchor = BarAnchor(datetime(2025, 1, 1), 100)
        assert anchor.price == Decimal("100")
        assert isinstance(anchor.price, Decimal)

    def test_float_price_uses_string_form(self):
        """Float prices go through str() so 100.1 stays 100.1."""
        anchor = BarAnchor(datetime(2025, 1, 1), 100.1)
        assert anchor.price == Decimal("100.1")

    def test_string_price(self):
        """String prices keep their exact digits."""
        assert BarAnchor(datetime(2025, 1, 1), "42.50").price == Decimal("42.50")

    @pytest.mark.parametrize("price", [0, -1, "-0.01", Decimal("0")])
    def test_non_positive_price_raises(self, price):
        """Zero and negative prices are rejected."""
        with pytest.raises(ConfigurationError, match="positive"):
            BarAnchor(datetime(2025, 1, 1), price)

    def test_non_numeric_price_raises(self):
        """Non-numeric prices are rejected."""
        with pytest.raises(ConfigurationError, match="numeric"):
            BarAnchor(datetime(2025, 1, 1), "abc")

    def test_non_datetime_timestamp_raises(self):
        """The anchor time must be a datetime."""
        with pytest.raises(ConfigurationError, match="datetime"):
            BarAnchor("2025-01-01", 100)


class TestBar:
    """Test the OHLCV record."""

    def _bar(self, **overrides):
        values = dict(
            timestamp=datetime(2025, 1, 2, 9, 30),
            open=Decimal("100"),
            high=Decimal("101"),
            low=Decimal("99"),
            close=Decimal("100.5"),
            volume=Decimal("1500"),
        )
        values.update(overrides)
        return Bar(**values)

    def test_consistent_bar(self):
        """A well-formed bar is consistent."""
        assert self._bar().is_consistent()

    def test_high_below_close_is_inconsistent(self):
        """A high below the close breaks the envelope."""
        assert not self._bar(high=Decimal("100.2")).is_consistent()

    def test_zero_volume_is_inconsistent(self):
        """Volume must be positive."""
        assert not self._bar(volume=Decimal("0")).is_consistent()

    def test_to_dict_uses_strings(self):
        """to_dict renders numbers as strings."""
        d = self._bar().to_dict()
        assert d["timestamp"] == "2025-01-02T09:30:00"
        assert d["close"] == "100.5"
        assert d["volume"] == "1500"

    def test_from_dict_inverts_to_dict(self):
        """from_dict rebuilds the same bar."""
        bar = self._bar()
        assert Bar.from_dict(bar.to_dict()) == bar

    def test_bar_is_frozen(self):
        """Bars cannot be mutated."""
        bar = self._bar()
        with pytest.raises(AttributeError):
            bar.open = Decimal("1")
