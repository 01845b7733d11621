"""
Core value types for deterministic bar generation.

Provides the immutable building blocks shared by generators, schedules and series:
- IntervalUnit: Fixed tick granularity (value = unit length in milliseconds)
- BarInterval: Bar spacing as (unit, length)
- BarAnchor: Reference (timestamp, price) a GBM path passes through exactly
- Bar: Single OHLCV record

Design principles:
- Frozen dataclasses, value equality only
- Prices and volume are Decimal
- Invalid configuration fails at construction (ConfigurationError)
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import datetime, timedelta
from decimal import Decimal, InvalidOperation
from enum import IntEnum
from typing import Any


# 100-ns ticks, the integer time base used by the noise core
TICKS_PER_MICROSECOND = 10
TICKS_PER_MILLISECOND = 10_000


class ConfigurationError(ValueError):
    """Raised when a generator, schedule or series is configured with invalid values."""


# ─────────────────────────────────────────────────────────────────────────────
# Intervals
# ─────────────────────────────────────────────────────────────────────────────

class IntervalUnit(IntEnum):
    """Tick granularity. Each value is the unit length in milliseconds."""
    MILLISECOND = 1
    SECOND = 1000 * MILLISECOND
    MINUTE = 60 * SECOND
    HOUR = 60 * MINUTE
    DAY = 24 * HOUR
    WEEK = 7 * DAY

    # Month and year are too irregular to be fixed intervals.


# Suffix -> unit for BarInterval.parse()
_UNIT_SUFFIXES: dict[str, IntervalUnit] = {
    "ms": IntervalUnit.MILLISECOND,
    "s": IntervalUnit.SECOND,
    "m": IntervalUnit.MINUTE,
    "h": IntervalUnit.HOUR,
    "d": IntervalUnit.DAY,
    "w": IntervalUnit.WEEK,
}

_INTERVAL_PATTERN = re.compile(r"^\s*(\d+)\s*(ms|s|m|h|d|w)\s*$")

# Largest unit first so from_timedelta() picks the most readable form
_UNITS_DESCENDING = sorted(IntervalUnit, key=lambda u: u.value, reverse=True)


@dataclass(frozen=True)
class BarInterval:
    """
    Bar spacing expressed as a whole number of units.

    Attributes:
        unit: Granularity of the interval
        length: Number of units per bar (>= 1)

    Example:
        >>> BarInterval.minutes(5).duration
        datetime.timedelta(seconds=300)
    """
    unit: IntervalUnit
    length: int = 1

    def __post_init__(self):
        if not isinstance(self.unit, IntervalUnit):
            raise ConfigurationError(
                f"Interval unit must be an IntervalUnit, got {type(self.unit).__name__}"
            )
        if isinstance(self.length, bool) or not isinstance(self.length, int):
            raise ConfigurationError(
                f"Interval length must be an integer, got {type(self.length).__name__}"
            )
        if self.length < 1:
            raise ConfigurationError(f"Interval length must be >= 1, got {self.length}")

    # ── Builders ────────────────────────────────────────────────────────────

    @classmethod
    def milliseconds(cls, length: int = 1) -> BarInterval:
        return cls(IntervalUnit.MILLISECOND, length)

    @classmethod
    def seconds(cls, length: int = 1) -> BarInterval:
        return cls(IntervalUnit.SECOND, length)

    @classmethod
    def minutes(cls, length: int = 1) -> BarInterval:
        return cls(IntervalUnit.MINUTE, length)

    @classmethod
    def hours(cls, length: int = 1) -> BarInterval:
        return cls(IntervalUnit.HOUR, length)

    @classmethod
    def days(cls, length: int = 1) -> BarInterval:
        return cls(IntervalUnit.DAY, length)

    @classmethod
    def weeks(cls, length: int = 1) -> BarInterval:
        return cls(IntervalUnit.WEEK, length)

    @classmethod
    def parse(cls, text: str) -> BarInterval:
        """
        Parse an interval string such as "1m", "5m", "4h", "1D", "250ms".

        Args:
            text: "<length><unit>" with unit one of ms, s, m, h, d, w

        Returns:
            Parsed BarInterval

        Raises:
            ConfigurationError: If the string is not a valid interval
        """
        if not isinstance(text, str):
            raise ConfigurationError(f"Interval must be a string, got {type(text).__name__}")

        # Uppercase "M" is the exchange spelling for month, which is not a fixed interval
        normalized = text.strip()
        if normalized.endswith("M") and not normalized.upper().endswith("MS"):
            raise ConfigurationError(
                f"Invalid interval: '{text}'. Monthly intervals are not supported"
            )

        match = _INTERVAL_PATTERN.match(normalized.lower())
        if not match:
            raise ConfigurationError(
                f"Invalid interval: '{text}'. "
                f"Use <length><unit> with unit in {sorted(_UNIT_SUFFIXES)} (e.g. '1m', '4h', '1d')"
            )
        return cls(_UNIT_SUFFIXES[match.group(2)], int(match.group(1)))

    @classmethod
    def from_timedelta(cls, delta: timedelta) -> BarInterval:
        """
        Convert a timedelta to the coarsest unit that represents it exactly.

        Raises:
            ConfigurationError: If delta is not positive or not a whole number of milliseconds
        """
        if not isinstance(delta, timedelta):
            raise ConfigurationError(f"Expected timedelta, got {type(delta).__name__}")
        if delta <= timedelta(0):
            raise ConfigurationError(f"Interval duration must be positive, got {delta}")
        if delta.microseconds % 1000:
            raise ConfigurationError(f"Interval must be a whole number of milliseconds, got {delta}")

        total_ms = delta // timedelta(milliseconds=1)
        for unit in _UNITS_DESCENDING:
            if total_ms % unit.value == 0:
                return cls(unit, total_ms // unit.value)
        # MILLISECOND always divides, loop cannot fall through
        raise ConfigurationError(f"Cannot represent {delta} as a BarInterval")

    # ── Derived values ──────────────────────────────────────────────────────

    @property
    def total_milliseconds(self) -> int:
        return self.length * self.unit.value

    @property
    def duration(self) -> timedelta:
        return timedelta(milliseconds=self.total_milliseconds)

    @property
    def ticks(self) -> int:
        """Duration in 100-ns ticks."""
        return self.total_milliseconds * TICKS_PER_MILLISECOND

    @property
    def total_minutes(self) -> float:
        return self.total_milliseconds / IntervalUnit.MINUTE.value

    @property
    def total_hours(self) -> float:
        return self.total_milliseconds / IntervalUnit.HOUR.value

    def __str__(self) -> str:
        suffix = {v: k for k, v in _UNIT_SUFFIXES.items()}[self.unit]
        return f"{self.length}{suffix}"


def coerce_interval(value: BarInterval | timedelta | str) -> BarInterval:
    """
    Accept the interval spellings used across the package.

    Raises:
        ConfigurationError: For any other type or an invalid value
    """
    if isinstance(value, BarInterval):
        return value
    if isinstance(value, timedelta):
        return BarInterval.from_timedelta(value)
    if isinstance(value, str):
        return BarInterval.parse(value)
    raise ConfigurationError(
        f"Unsupported interval type: {type(value).__name__}. "
        f"Expected BarInterval, timedelta or interval string"
    )


# ─────────────────────────────────────────────────────────────────────────────
# Anchor
# ─────────────────────────────────────────────────────────────────────────────

def to_decimal(value: Any, name: str = "value") -> Decimal:
    """Convert int/float/str/Decimal to Decimal via its string form."""
    if isinstance(value, Decimal):
        return value
    if isinstance(value, bool):
        raise ConfigurationError(f"{name} must be numeric, got bool")
    try:
        return Decimal(str(value))
    except (InvalidOperation, ValueError, TypeError):
        raise ConfigurationError(f"{name} must be numeric, got {value!r}") from None


@dataclass(frozen=True)
class BarAnchor:
    """
    Reference point where the GBM price path equals exactly `price`.

    Attributes:
        timestamp: Anchor time
        price: Anchor price (> 0), stored as Decimal
    """
    timestamp: datetime
    price: Decimal

    def __post_init__(self):
        if not isinstance(self.timestamp, datetime):
            raise ConfigurationError(
                f"Anchor timestamp must be a datetime, got {type(self.timestamp).__name__}"
            )
        price = to_decimal(self.price, "Anchor price")
        if not price.is_finite() or price <= 0:
            raise ConfigurationError(f"Anchor price must be positive, got {self.price}")
        # frozen: bypass __setattr__ to store the normalized value
        object.__setattr__(self, "price", price)


# ─────────────────────────────────────────────────────────────────────────────
# Bar
# ─────────────────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class Bar:
    """
    Single OHLCV bar.

    Created fresh per query and never mutated. Generators guarantee
    high >= max(open, close), low <= min(open, close) and volume > 0.

    Attributes:
        timestamp: Bar time (aligned or query time, depending on the generator)
        open: Open price
        high: High price
        low: Low price
        close: Close price
        volume: Traded quantity
    """
    timestamp: datetime
    open: Decimal
    high: Decimal
    low: Decimal
    close: Decimal
    volume: Decimal

    def is_consistent(self) -> bool:
        """Check the OHLC envelope and positive volume."""
        return (
            self.high >= self.open and
            self.high >= self.close and
            self.low <= self.open and
            self.low <= self.close and
            self.high >= self.low and
            self.volume > 0
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to a flat record for display/serialization."""
        return {
            "timestamp": self.timestamp.isoformat(),
            "open": str(self.open),
            "high": str(self.high),
            "low": str(self.low),
            "close": str(self.close),
            "volume": str(self.volume),
        }

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> Bar:
        """Create Bar from dict (inverse of to_dict)."""
        ts = d["timestamp"]
        if isinstance(ts, str):
            ts = datetime.fromisoformat(ts)
        return cls(
            timestamp=ts,
            open=to_decimal(d["open"], "open"),
            high=to_decimal(d["high"], "high"),
            low=to_decimal(d["low"], "low"),
            close=to_decimal(d["close"], "close"),
            volume=to_decimal(d["volume"], "volume"),
        )
