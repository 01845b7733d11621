"""
Deterministic bar generation core.

Value types, the noise core, generators, schedules, series and factories.
Nothing here performs I/O except HolidayCalendar.from_yaml().
"""

from .types import (
    Bar,
    BarAnchor,
    BarInterval,
    ConfigurationError,
    IntervalUnit,
    coerce_interval,
)
from .noise import (
    UNIX_EPOCH,
    deterministic_hash,
    hash_float,
    hash_int64,
    pseudo_noise,
    seconds_since,
    to_ticks,
)
from .schedule import (
    CalendarLoadError,
    DefaultEquitiesScheduleFactory,
    HolidayCalendar,
    Schedule,
    ScheduleFactory,
    TradingSchedule,
    US_EQUITY_HOLIDAYS,
)
from .generators import (
    GbmBarGenerator,
    RawInterval,
    ScheduleAware,
    SeededBarGenerator,
    TimeSource,
    as_time_source,
)
from .series import BarSeries
from .factories import GbmBarSeriesFactory, SeededBarSeriesFactory
from .frames import bars_to_dataframe, compute_bars_hash, verify_bars_hash

__all__ = [
    # Types
    "Bar",
    "BarAnchor",
    "BarInterval",
    "ConfigurationError",
    "IntervalUnit",
    "coerce_interval",
    # Noise core
    "UNIX_EPOCH",
    "deterministic_hash",
    "hash_float",
    "hash_int64",
    "pseudo_noise",
    "seconds_since",
    "to_ticks",
    # Schedules
    "CalendarLoadError",
    "DefaultEquitiesScheduleFactory",
    "HolidayCalendar",
    "Schedule",
    "ScheduleFactory",
    "TradingSchedule",
    "US_EQUITY_HOLIDAYS",
    # Generators
    "GbmBarGenerator",
    "RawInterval",
    "ScheduleAware",
    "SeededBarGenerator",
    "TimeSource",
    "as_time_source",
    # Series & factories
    "BarSeries",
    "GbmBarSeriesFactory",
    "SeededBarSeriesFactory",
    # Frames
    "bars_to_dataframe",
    "compute_bars_hash",
    "verify_bars_hash",
]
