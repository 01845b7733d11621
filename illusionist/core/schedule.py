"""
Trading-calendar schedules.

A schedule answers two questions for a bar interval:
- is_valid_bar_time(ts): does ts fall inside a trading session?
- next_valid_bar_time(prior): the first valid bar time after prior

No state is stored between calls. Every query is a pure function of the
timestamp, the session hours, the holiday calendar and the interval.

Holidays are injected as a HolidayCalendar. The default calendar is the
U.S. equity holiday table for 2024-2025; other markets/years are loaded
from YAML via HolidayCalendar.from_yaml().

Usage:
    from illusionist.core.schedule import DefaultEquitiesScheduleFactory
    from illusionist.core.types import BarInterval

    schedule = DefaultEquitiesScheduleFactory().get_schedule(BarInterval.hours(1))
    schedule.next_valid_bar_time(datetime(2025, 1, 3, 15, 0))  # -> 2025-01-06 09:30
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import date, datetime, time, timedelta
from pathlib import Path
from typing import Iterable

import yaml

from .types import BarInterval, ConfigurationError, coerce_interval


# Longest run of non-trading days tolerated before the calendar is rejected
MAX_NON_TRADING_DAYS = 366

_SATURDAY = 5


class CalendarLoadError(ConfigurationError):
    """Raised when a holiday calendar file cannot be loaded."""


# =============================================================================
# Holiday Calendars
# =============================================================================

@dataclass(frozen=True)
class HolidayCalendar:
    """
    Immutable set of market holidays.

    Attributes:
        name: Display name (e.g., "US equities 2024-2025")
        dates: Non-trading calendar dates
    """
    name: str
    dates: frozenset[date] = field(default_factory=frozenset)

    def __post_init__(self):
        object.__setattr__(self, "dates", frozenset(self.dates))

    def __contains__(self, day: date) -> bool:
        return day in self.dates

    def __len__(self) -> int:
        return len(self.dates)

    def merged(self, other: HolidayCalendar, name: str | None = None) -> HolidayCalendar:
        """Union of two calendars."""
        return HolidayCalendar(
            name=name or f"{self.name} + {other.name}",
            dates=self.dates | other.dates,
        )

    @classmethod
    def from_dates(cls, name: str, dates: Iterable[date | str]) -> HolidayCalendar:
        """
        Build a calendar from dates or ISO date strings.

        Raises:
            CalendarLoadError: If an entry is not a valid date
        """
        parsed: set[date] = set()
        for value in dates:
            if isinstance(value, datetime):
                parsed.add(value.date())
            elif isinstance(value, date):
                parsed.add(value)
            elif isinstance(value, str):
                try:
                    parsed.add(date.fromisoformat(value.strip()))
                except ValueError:
                    raise CalendarLoadError(
                        f"Invalid holiday date '{value}' in calendar '{name}'. Use YYYY-MM-DD"
                    ) from None
            else:
                raise CalendarLoadError(
                    f"Invalid holiday entry {value!r} in calendar '{name}'"
                )
        return cls(name=name, dates=frozenset(parsed))

    @classmethod
    def from_yaml(cls, path: Path | str) -> HolidayCalendar:
        """
        Load a calendar from YAML.

        Expected layout:
            name: LSE 2025
            holidays:
              - 2025-01-01
              - 2025-04-18

        Raises:
            CalendarLoadError: If the file is missing, empty or malformed
        """
        path = Path(path)
        if not path.exists():
            raise CalendarLoadError(f"Holiday calendar not found: {path}")

        try:
            with open(path, "r", encoding="utf-8") as f:
                raw = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise CalendarLoadError(f"Invalid YAML in {path}: {e}") from e
        except OSError as e:
            raise CalendarLoadError(f"Cannot read holiday calendar {path}: {e.strerror or e}") from e

        if not raw:
            raise CalendarLoadError(f"Empty or invalid YAML in {path}")
        if not isinstance(raw, dict) or "holidays" not in raw:
            raise CalendarLoadError(f"Calendar {path} must define a 'holidays' list")

        holidays = raw["holidays"] or []
        if not isinstance(holidays, list):
            raise CalendarLoadError(f"'holidays' in {path} must be a list of dates")

        return cls.from_dates(str(raw.get("name", path.stem)), holidays)


US_EQUITY_HOLIDAYS = HolidayCalendar.from_dates(
    "US equities 2024-2025",
    [
        # 2024
        date(2024, 1, 1),    # New Year's Day
        date(2024, 1, 15),   # Martin Luther King Jr. Day
        date(2024, 2, 19),   # Presidents' Day
        date(2024, 3, 29),   # Good Friday
        date(2024, 5, 27),   # Memorial Day
        date(2024, 6, 19),   # Juneteenth
        date(2024, 7, 4),    # Independence Day
        date(2024, 9, 2),    # Labor Day
        date(2024, 11, 28),  # Thanksgiving Day
        date(2024, 12, 25),  # Christmas Day
        # 2025
        date(2025, 1, 1),
        date(2025, 1, 20),
        date(2025, 2, 17),
        date(2025, 4, 18),
        date(2025, 5, 26),
        date(2025, 6, 19),
        date(2025, 7, 4),
        date(2025, 9, 1),
        date(2025, 11, 27),
        date(2025, 12, 25),
    ],
)

US_EQUITY_SESSION_OPEN = time(9, 30)
US_EQUITY_SESSION_CLOSE = time(16, 0)


def parse_session_time(value: time | str, name: str = "session time") -> time:
    """
    Accept a time or an "HH:MM[:SS]" string.

    Raises:
        ConfigurationError: If the value is not a valid time of day
    """
    if isinstance(value, time):
        return value
    if isinstance(value, str):
        try:
            return time.fromisoformat(value.strip())
        except ValueError:
            raise ConfigurationError(f"Invalid {name}: '{value}'. Use HH:MM") from None
    raise ConfigurationError(f"Invalid {name} type: {type(value).__name__}")


# =============================================================================
# Schedule Contract
# =============================================================================

class Schedule(ABC):
    """Query contract for trading calendars."""

    @property
    @abstractmethod
    def interval(self) -> BarInterval:
        """Bar interval the schedule advances by."""

    @abstractmethod
    def is_valid_bar_time(self, timestamp: datetime) -> bool:
        """Check whether timestamp falls inside a trading session."""

    @abstractmethod
    def next_valid_bar_time(self, prior: datetime) -> datetime:
        """Return the first valid bar time after prior."""


@dataclass(frozen=True)
class TradingSchedule(Schedule):
    """
    Weekday session schedule with an injected holiday calendar.

    Valid bar times are Monday-Friday, not a holiday, and
    session_open <= time-of-day < session_close. Timestamps are interpreted
    in their own wall-clock time; tzinfo is carried through unchanged.

    Attributes:
        bar_interval: Spacing between consecutive bars
        session_open: First valid time of day
        session_close: First invalid time of day after the session
        holidays: Non-trading dates
    """
    bar_interval: BarInterval
    session_open: time = US_EQUITY_SESSION_OPEN
    session_close: time = US_EQUITY_SESSION_CLOSE
    holidays: HolidayCalendar = US_EQUITY_HOLIDAYS

    def __post_init__(self):
        object.__setattr__(self, "bar_interval", coerce_interval(self.bar_interval))
        object.__setattr__(self, "session_open", parse_session_time(self.session_open, "session_open"))
        object.__setattr__(self, "session_close", parse_session_time(self.session_close, "session_close"))
        if not isinstance(self.holidays, HolidayCalendar):
            raise ConfigurationError(
                f"holidays must be a HolidayCalendar, got {type(self.holidays).__name__}"
            )
        if self.session_open >= self.session_close:
            raise ConfigurationError(
                f"Session open ({self.session_open}) must be before session close ({self.session_close})"
            )

    @property
    def interval(self) -> BarInterval:
        return self.bar_interval

    def is_trading_day(self, day: date) -> bool:
        """Weekday and not a holiday."""
        return day.weekday() < _SATURDAY and day not in self.holidays

    def is_valid_bar_time(self, timestamp: datetime) -> bool:
        if not self.is_trading_day(timestamp.date()):
            return False
        return self.session_open <= timestamp.time() < self.session_close

    def next_valid_bar_time(self, prior: datetime) -> datetime:
        step = self.bar_interval.duration
        candidate = prior + step

        while not self.is_valid_bar_time(candidate):
            day = candidate.date()
            time_of_day = candidate.time()

            if time_of_day >= self.session_close or not self.is_trading_day(day):
                candidate = self._at_session_open(candidate, self.next_trading_day(day))
            elif time_of_day < self.session_open:
                candidate = self._at_session_open(candidate, day)
            else:
                candidate = candidate + step

        return candidate

    def next_trading_day(self, day: date) -> date:
        """
        Earliest trading day strictly after day.

        Raises:
            ConfigurationError: If no trading day exists within MAX_NON_TRADING_DAYS
        """
        candidate = day
        for _ in range(MAX_NON_TRADING_DAYS):
            candidate += timedelta(days=1)
            if self.is_trading_day(candidate):
                return candidate
        raise ConfigurationError(
            f"No trading day within {MAX_NON_TRADING_DAYS} days after {day} "
            f"in calendar '{self.holidays.name}'"
        )

    def _at_session_open(self, reference: datetime, day: date) -> datetime:
        return datetime.combine(day, self.session_open, tzinfo=reference.tzinfo)


# =============================================================================
# Schedule Factories
# =============================================================================

class ScheduleFactory(ABC):
    """Creates schedules for a bar interval."""

    @abstractmethod
    def get_schedule(self, interval: BarInterval) -> Schedule:
        """Return a schedule for the interval."""


class DefaultEquitiesScheduleFactory(ScheduleFactory):
    """
    U.S. equities schedule: 09:30-16:00, Monday-Friday, default holiday table.

    A different calendar or session window can be injected; every interval
    gets the same hours and holidays.
    """

    def __init__(
        self,
        holidays: HolidayCalendar = US_EQUITY_HOLIDAYS,
        session_open: time = US_EQUITY_SESSION_OPEN,
        session_close: time = US_EQUITY_SESSION_CLOSE,
    ):
        self.holidays = holidays
        self.session_open = session_open
        self.session_close = session_close

    def get_schedule(self, interval: BarInterval) -> TradingSchedule:
        return TradingSchedule(
            bar_interval=interval,
            session_open=self.session_open,
            session_close=self.session_close,
            holidays=self.holidays,
        )
