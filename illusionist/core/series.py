"""
Bar series: random-access and sequential access over a generator.

The series holds a generator and a time-advance strategy. With no schedule the
cursor advances by the interval; with a schedule attached it advances via
schedule.next_valid_bar_time(). Sequences are lazy and never buffered.
"""

from __future__ import annotations

from datetime import datetime
from itertools import islice
from typing import Iterator, Protocol

from .schedule import Schedule
from .types import Bar, BarInterval, ConfigurationError


class BarGenerator(Protocol):
    """Anything that turns a timestamp into a Bar."""

    @property
    def interval(self) -> BarInterval: ...

    def get_bar_at(self, timestamp: datetime) -> Bar: ...


class BarSeries:
    """
    Query surface over one generator.

    Args:
        generator: Bar generator (seeded or GBM)
        schedule: Trading schedule used to advance the cursor. Defaults to the
            generator's own schedule when it has one
    """

    def __init__(self, generator: BarGenerator, schedule: Schedule | None = None):
        self.generator = generator
        self.schedule = schedule if schedule is not None else getattr(generator, "schedule", None)
        self._step = generator.interval.duration

    @property
    def interval(self) -> BarInterval:
        return self.generator.interval

    def get_bar_at(self, timestamp: datetime) -> Bar:
        return self.generator.get_bar_at(timestamp)

    def get_bars(self, start: datetime) -> Iterator[Bar]:
        """
        Lazily yield bars from start onward (infinite).

        The first bar is get_bar_at(start). Stop consuming to stop generation.
        """
        cursor = start
        while True:
            yield self.generator.get_bar_at(cursor)
            cursor = self._advance(cursor)

    def take(self, start: datetime, count: int) -> list[Bar]:
        """First `count` bars of get_bars(start)."""
        if isinstance(count, bool) or not isinstance(count, int) or count < 0:
            raise ConfigurationError(f"count must be a non-negative integer, got {count!r}")
        return list(islice(self.get_bars(start), count))

    def _advance(self, cursor: datetime) -> datetime:
        if self.schedule is not None:
            return self.schedule.next_valid_bar_time(cursor)
        return cursor + self._step

    def __repr__(self) -> str:
        return f"BarSeries(generator={self.generator!r}, scheduled={self.schedule is not None})"
