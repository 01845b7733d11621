"""
Illusionist: deterministic synthetic OHLCV bars.

Same seed, interval and model parameters always give the same bars.
"""

from .core import (
    Bar,
    BarAnchor,
    BarInterval,
    BarSeries,
    ConfigurationError,
    DefaultEquitiesScheduleFactory,
    GbmBarSeriesFactory,
    HolidayCalendar,
    IntervalUnit,
    SeededBarSeriesFactory,
    TradingSchedule,
)

__version__ = "0.1.0"

__all__ = [
    "Bar",
    "BarAnchor",
    "BarInterval",
    "BarSeries",
    "ConfigurationError",
    "DefaultEquitiesScheduleFactory",
    "GbmBarSeriesFactory",
    "HolidayCalendar",
    "IntervalUnit",
    "SeededBarSeriesFactory",
    "TradingSchedule",
]
