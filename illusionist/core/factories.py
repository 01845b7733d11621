"""
Series factories.

Factories hold the model parameters (seed, drift, volatility) and build a
BarSeries per request:

    factory = GbmBarSeriesFactory(seed=42, drift=0.5, volatility=0.001)
    series = factory.get_series(BarInterval.hours(1), BarAnchor(ts, 100))
    bar = series.get_bar_at(ts)          # open == 100 exactly

Calling conventions for GbmBarSeriesFactory.get_series():
- get_series(interval)               -> unanchored, raw interval
- get_series(interval, anchor)       -> anchored, raw interval
- get_series(schedule, anchor)       -> anchored, schedule-aware

Intervals are BarInterval or timedelta; anything else raises ConfigurationError.
"""

from __future__ import annotations

from datetime import timedelta

from ..utils.logger import get_logger
from .generators import GbmBarGenerator, RawInterval, ScheduleAware, SeededBarGenerator
from .schedule import Schedule
from .series import BarSeries
from .types import BarAnchor, BarInterval, ConfigurationError


def _require_interval(value) -> BarInterval:
    if isinstance(value, BarInterval):
        return value
    if isinstance(value, timedelta):
        return BarInterval.from_timedelta(value)
    raise ConfigurationError(
        f"Unsupported interval type: {type(value).__name__}. Expected BarInterval or timedelta"
    )


def _require_anchor(anchor) -> BarAnchor | None:
    if anchor is None or isinstance(anchor, BarAnchor):
        return anchor
    raise ConfigurationError(f"Anchor must be a BarAnchor, got {type(anchor).__name__}")


class SeededBarSeriesFactory:
    """Builds sine-wave series for a fixed seed."""

    def __init__(self, seed: int):
        self.seed = seed

    def get_series(self, interval: BarInterval | timedelta) -> BarSeries:
        bar_interval = _require_interval(interval)
        generator = SeededBarGenerator(self.seed, bar_interval)
        get_logger().series("SEEDED", "-", bar_interval, seed=generator.seed)
        return BarSeries(generator)


class GbmBarSeriesFactory:
    """
    Builds GBM series for a fixed seed and model parameters.

    Args:
        seed: Seed (wrapped to signed 32-bit)
        symbol: Display label, does not affect prices
        drift: Annualized drift
        volatility: Annualized volatility (>= 0)
    """

    def __init__(
        self,
        seed: int,
        symbol: str = "DEMO",
        drift: float = 0.0001,
        volatility: float = 0.01,
    ):
        if not isinstance(symbol, str) or not symbol.strip():
            raise ConfigurationError(f"Symbol must be a non-empty string, got {symbol!r}")
        if volatility < 0:
            raise ConfigurationError(f"Volatility must be >= 0, got {volatility}")
        self.seed = seed
        self.symbol = symbol.strip().upper()
        self.drift = drift
        self.volatility = volatility

    def get_series(
        self,
        source: BarInterval | timedelta | Schedule,
        anchor: BarAnchor | None = None,
    ) -> BarSeries:
        anchor = _require_anchor(anchor)

        if isinstance(source, Schedule):
            time_source = ScheduleAware(source)
            schedule = source
        else:
            time_source = RawInterval(_require_interval(source))
            schedule = None

        generator = GbmBarGenerator(
            self.seed,
            time_source,
            drift=self.drift,
            volatility=self.volatility,
            anchor=anchor,
        )
        get_logger().series(
            "GBM",
            self.symbol,
            generator.interval,
            seed=generator.seed,
            drift=self.drift,
            volatility=self.volatility,
            anchor=f"{anchor.price}@{anchor.timestamp.isoformat()}" if anchor else None,
            schedule=type(schedule).__name__ if schedule else None,
        )
        return BarSeries(generator, schedule)
