"""
Deterministic OHLCV bar generators.

Two models share the noise core:
- SeededBarGenerator: sine-wave bars around 100, no financial model.
  Returns the ALIGNED timestamp.
- GbmBarGenerator: Geometric Brownian Motion driven by pseudo-noise,
  optionally anchored to a (timestamp, price) pair. Returns the QUERY
  timestamp.

The GBM generator is parameterized by a time source:
- RawInterval(interval): plain fixed spacing
- ScheduleAware(schedule): spacing taken from a trading schedule; the
  interval also perturbs the seed so different intervals diverge

Generators hold no mutable state. Derived constants (hourly drift/volatility,
interval and parameter hashes) are computed once in __init__.
"""

from __future__ import annotations

import math
import sys
from dataclasses import dataclass
from datetime import datetime, timedelta
from decimal import Decimal
from typing import Union

from .noise import (
    UNIX_EPOCH,
    deterministic_hash,
    from_ticks,
    hash_float,
    hash_int64,
    pseudo_noise,
    seconds_since,
    to_int32,
    to_ticks,
)
from .schedule import Schedule
from .types import Bar, BarAnchor, BarInterval, ConfigurationError, coerce_interval


# =============================================================================
# Constants
# =============================================================================
HOURS_PER_YEAR = 365.25 * 24

# Seeded model
SEEDED_BASE_PRICE = 100.0
SEEDED_WAVE_AMPLITUDE = 10.0
SEEDED_HARMONIC_AMPLITUDE = 2.0

# GBM model
INTERVAL_TIME_SHIFT = 123.456       # seconds of noise phase per interval hour
INTERVAL_SEED_FACTOR = 17           # schedule-aware seed modifier per interval minute
NOISE_PHASE_OFFSETS = (100.0, 200.0, 300.0)  # close / high / low samples
VARIATION_SCALE = 0.005
UNANCHORED_LOG_FLOOR = math.log(0.1)
UNANCHORED_LOG_CEILING = math.log(10.0)
ANCHOR_EXACT_SECONDS = 1.0
# Largest |ln(price)| whose bar still fits a float after the variation multiplier
MAX_ABS_LOG_PRICE = math.log(sys.float_info.max) - 1.0

# Shared volume synthesis
VOLUME_MODULUS = 10_000
VOLUME_FLOOR = 1_000

_ONE_DAY = timedelta(days=1)


def _validate_seed(seed: int) -> int:
    if isinstance(seed, bool) or not isinstance(seed, int):
        raise ConfigurationError(f"Seed must be an integer, got {type(seed).__name__}")
    return to_int32(seed)


def _volume_from_hash(value: int) -> Decimal:
    return Decimal(value % VOLUME_MODULUS + VOLUME_FLOOR)


# =============================================================================
# Seeded Generator
# =============================================================================
class SeededBarGenerator:
    """
    Sine-wave bar generator.

    Bars are self-consistent (valid OHLC envelope, positive volume) but follow
    no drift/volatility model. Timestamps are floored to the interval by
    absolute tick count and the aligned timestamp is returned.

    Args:
        seed: Seed (wrapped to signed 32-bit)
        interval: Bar spacing (BarInterval, timedelta or "5m"-style string)
        epoch: Time origin for the wave phase
    """

    def __init__(self, seed: int, interval: BarInterval | timedelta | str, epoch: datetime = UNIX_EPOCH):
        self.seed = _validate_seed(seed)
        self._interval = coerce_interval(interval)
        self._interval_ticks = self._interval.ticks
        self._epoch = epoch

    @property
    def interval(self) -> BarInterval:
        return self._interval

    def align(self, timestamp: datetime) -> datetime:
        """Floor timestamp to the interval boundary (absolute tick floor)."""
        ticks = to_ticks(timestamp)
        aligned = ticks // self._interval_ticks * self._interval_ticks
        return from_ticks(aligned, timestamp.tzinfo)

    def get_bar_at(self, timestamp: datetime) -> Bar:
        aligned = self.align(timestamp)
        t = seconds_since(aligned, self._epoch)
        seed = self.seed

        base_wave = math.sin(seed + t * 0.0001)
        harmonic = math.sin(seed * 0.5 + t * 0.0003)
        hashed = deterministic_hash(to_ticks(aligned), seed)
        spike = (hashed % 5) / 5.0

        open_ = base_wave * SEEDED_WAVE_AMPLITUDE + harmonic * SEEDED_HARMONIC_AMPLITUDE + SEEDED_BASE_PRICE
        high = open_ + abs(harmonic) + spike
        low = open_ - abs(base_wave) - spike
        close = open_ + math.sin(t * 0.00005 + seed)

        # Envelope must contain open and close
        high = max(open_, close, high)
        low = min(open_, close, low)

        return Bar(
            timestamp=aligned,
            open=Decimal(open_),
            high=Decimal(high),
            low=Decimal(low),
            close=Decimal(close),
            volume=_volume_from_hash(abs(hashed)),
        )

    def __repr__(self) -> str:
        return f"SeededBarGenerator(seed={self.seed}, interval={self._interval})"


# =============================================================================
# Time Sources
# =============================================================================
@dataclass(frozen=True)
class RawInterval:
    """Fixed spacing with no calendar."""
    interval: BarInterval

    def __post_init__(self):
        object.__setattr__(self, "interval", coerce_interval(self.interval))


@dataclass(frozen=True)
class ScheduleAware:
    """Spacing and valid bar times taken from a trading schedule."""
    schedule: Schedule

    def __post_init__(self):
        if not isinstance(self.schedule, Schedule):
            raise ConfigurationError(
                f"Unsupported schedule type: {type(self.schedule).__name__}. "
                f"Expected a Schedule implementation"
            )

    @property
    def interval(self) -> BarInterval:
        return self.schedule.interval


TimeSource = Union[RawInterval, ScheduleAware]


def as_time_source(value: TimeSource | Schedule | BarInterval | timedelta | str) -> TimeSource:
    """
    Wrap a schedule or interval in its time source.

    Raises:
        ConfigurationError: For unsupported types
    """
    if isinstance(value, (RawInterval, ScheduleAware)):
        return value
    if isinstance(value, Schedule):
        return ScheduleAware(value)
    if isinstance(value, (BarInterval, timedelta, str)):
        return RawInterval(coerce_interval(value))
    raise ConfigurationError(
        f"Unsupported time source: {type(value).__name__}. "
        f"Expected a Schedule, BarInterval, timedelta or interval string"
    )


# =============================================================================
# GBM Generator
# =============================================================================
class GbmBarGenerator:
    """
    Geometric Brownian Motion bar generator.

    price = base * exp(hourly_drift * hours + hourly_vol * noise)

    where base is the anchor price (or 1.0 at UNIX_EPOCH when unanchored),
    hours is the elapsed time from the anchor to the aligned bar, and noise is
    pseudo_noise() under a seed that folds in the bar time, the interval and
    the model parameters.

    Unanchored log prices are clamped to [ln 0.1, ln 10]. The bar containing
    the anchor timestamp opens at exactly the anchor price.

    Alignment: intervals >= 1 day floor to midnight; shorter intervals floor
    the time of day to a multiple of the interval.

    Args:
        seed: Seed (wrapped to signed 32-bit)
        time_source: RawInterval, ScheduleAware, a Schedule, or an interval
        drift: Annualized drift (mu)
        volatility: Annualized volatility (sigma), >= 0
        anchor: Optional (timestamp, price) reference
        epoch: Time origin used when no anchor is given
    """

    def __init__(
        self,
        seed: int,
        time_source: TimeSource | Schedule | BarInterval | timedelta | str,
        drift: float = 0.0001,
        volatility: float = 0.01,
        anchor: BarAnchor | None = None,
        epoch: datetime = UNIX_EPOCH,
    ):
        self.seed = _validate_seed(seed)
        self.time_source = as_time_source(time_source)
        self.drift = float(drift)
        self.volatility = float(volatility)
        self.anchor = anchor

        if not math.isfinite(self.drift):
            raise ConfigurationError(f"Drift must be finite, got {drift}")
        if not math.isfinite(self.volatility) or self.volatility < 0:
            raise ConfigurationError(f"Volatility must be finite and >= 0, got {volatility}")
        if anchor is not None and not isinstance(anchor, BarAnchor):
            raise ConfigurationError(f"Anchor must be a BarAnchor, got {type(anchor).__name__}")

        interval = self.time_source.interval
        self._interval = interval
        self._step = interval.duration

        # Derived constants
        self._hourly_drift = self.drift / HOURS_PER_YEAR
        self._hourly_volatility = self.volatility / math.sqrt(HOURS_PER_YEAR)
        self._interval_hash = hash_int64(interval.ticks)
        self._param_hash = hash_float(self.drift) ^ hash_float(self.volatility)
        self._time_shift = interval.total_hours * INTERVAL_TIME_SHIFT
        self._variation = math.sqrt(interval.total_minutes / 60.0) * VARIATION_SCALE
        self._seed_modifier = (
            int(interval.total_minutes * INTERVAL_SEED_FACTOR)
            if isinstance(self.time_source, ScheduleAware)
            else 0
        )

        if anchor is not None:
            self._reference_time = anchor.timestamp
            self._base_price = anchor.price
            self._aligned_anchor = self.align(anchor.timestamp)
        else:
            self._reference_time = epoch
            self._base_price = Decimal(1)
            self._aligned_anchor = None
        self._base_price_float = float(self._base_price)
        if not math.isfinite(self._base_price_float) or self._base_price_float <= 0:
            raise ConfigurationError(f"Anchor price {self._base_price} is outside the float range")
        self._base_log_price = math.log(self._base_price_float)

    @property
    def interval(self) -> BarInterval:
        return self._interval

    @property
    def schedule(self) -> Schedule | None:
        if isinstance(self.time_source, ScheduleAware):
            return self.time_source.schedule
        return None

    def align(self, timestamp: datetime) -> datetime:
        """Floor timestamp within its calendar day (midnight for >= 1 day intervals)."""
        midnight = timestamp.replace(hour=0, minute=0, second=0, microsecond=0)
        if self._step >= _ONE_DAY:
            return midnight
        elapsed = timestamp - midnight
        return midnight + (elapsed // self._step) * self._step

    def _combined_seed(self, aligned_ticks: int) -> int:
        combined = (
            self.seed
            ^ deterministic_hash(aligned_ticks, self.seed)
            ^ self._interval_hash
            ^ self._param_hash
        )
        return combined ^ self._seed_modifier

    def get_bar_at(self, timestamp: datetime) -> Bar:
        aligned = self.align(timestamp)
        aligned_ticks = to_ticks(aligned)
        t = seconds_since(aligned, self._reference_time)

        seed = self._combined_seed(aligned_ticks)
        adjusted_t = t + self._time_shift

        noise = pseudo_noise(adjusted_t, seed)
        log_price = self._hourly_drift * (t / 3600.0) + self._hourly_volatility * noise
        if self.anchor is None:
            log_price = min(max(log_price, UNANCHORED_LOG_FLOOR), UNANCHORED_LOG_CEILING)
        if abs(self._base_log_price + log_price) > MAX_ABS_LOG_PRICE:
            raise ConfigurationError(
                f"Price at {timestamp.isoformat()} is outside the float range "
                f"(drift={self.drift} over {t / 3600.0:.0f} hours from {self._reference_time.isoformat()})"
            )
        price = self._base_price_float * math.exp(log_price)

        at_anchor = abs(t) < ANCHOR_EXACT_SECONDS or aligned == self._aligned_anchor
        open_f = self._base_price_float if at_anchor else price
        open_ = self._base_price if at_anchor else Decimal(price)

        close_phase, high_phase, low_phase = NOISE_PHASE_OFFSETS
        variation = self._variation
        close_f = open_f * (1.0 + pseudo_noise(adjusted_t + close_phase, seed) * variation)
        high_f = max(open_f, close_f) * (1.0 + abs(pseudo_noise(adjusted_t + high_phase, seed)) * variation)
        low_f = min(open_f, close_f) * (1.0 - abs(pseudo_noise(adjusted_t + low_phase, seed)) * variation)

        close = Decimal(close_f)
        # Envelope must contain the exact anchor open
        high = max(Decimal(high_f), open_, close)
        low = min(Decimal(low_f), open_, close)

        volume = _volume_from_hash(deterministic_hash(aligned_ticks + 1, seed))

        return Bar(
            timestamp=timestamp,
            open=open_,
            high=high,
            low=low,
            close=close,
            volume=volume,
        )

    def __repr__(self) -> str:
        return (
            f"GbmBarGenerator(seed={self.seed}, interval={self._interval}, "
            f"drift={self.drift}, volatility={self.volatility}, anchored={self.anchor is not None})"
        )
