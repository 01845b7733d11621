"""
Subcommand handlers for the Illusionist CLI.

All handle_* functions are module-level, accept an `args` namespace and
return a process exit code. They are dispatched from main() in
illusionist_cli.py.

Sections:
- Shared helpers
- generate handler
- schedule handler
"""

from __future__ import annotations

import json
from datetime import datetime

from ..config.config import Config, get_config
from ..config.constants import GeneratorModel, validate_model, validate_symbol
from ..core.factories import GbmBarSeriesFactory, SeededBarSeriesFactory
from ..core.frames import compute_bars_hash
from ..core.schedule import DefaultEquitiesScheduleFactory, HolidayCalendar, TradingSchedule
from ..core.series import BarSeries
from ..core.types import BarAnchor, BarInterval, ConfigurationError
from ..utils.datetime_utils import default_start, parse_bar_time
from ..utils.logger import get_logger
from .utils import DEMO_DATA_NOTE, build_bars_table, build_times_table, console, print_error


# =============================================================================
# SHARED HELPERS
# =============================================================================

def _load_holidays(path: str | None, config: Config) -> HolidayCalendar:
    if path:
        return HolidayCalendar.from_yaml(path)
    return config.calendar.load_holidays()


def _build_schedule(interval: BarInterval, holidays_path: str | None, config: Config) -> TradingSchedule:
    factory = DefaultEquitiesScheduleFactory(
        holidays=_load_holidays(holidays_path, config),
        session_open=config.calendar.session_open,
        session_close=config.calendar.session_close,
    )
    return factory.get_schedule(interval)


def _build_series(args, config: Config, model: str, seed: int, symbol: str,
                  interval: BarInterval, start: datetime) -> tuple[BarSeries, datetime]:
    """Build the series requested on the command line and the first bar time."""
    if model == GeneratorModel.SEEDED:
        if args.anchor_price is not None or args.schedule:
            raise ConfigurationError("--anchor-price and --schedule apply to the gbm model only")
        return SeededBarSeriesFactory(seed).get_series(interval), start

    drift = args.drift if args.drift is not None else config.generator.drift
    volatility = args.volatility if args.volatility is not None else config.generator.volatility
    factory = GbmBarSeriesFactory(seed, symbol=symbol, drift=drift, volatility=volatility)

    schedule = _build_schedule(interval, args.holidays, config) if args.schedule else None
    if schedule is not None and not schedule.is_valid_bar_time(start):
        start = schedule.next_valid_bar_time(start)

    anchor = BarAnchor(start, args.anchor_price) if args.anchor_price is not None else None

    if schedule is not None:
        return factory.get_series(schedule, anchor), start
    return factory.get_series(interval, anchor), start


# =============================================================================
# GENERATE
# =============================================================================

def handle_generate(args) -> int:
    """Print deterministic sample bars as a table or JSON."""
    logger = get_logger()
    try:
        config = get_config()
        defaults = config.generator

        symbol = validate_symbol(args.symbol or defaults.symbol)
        model = validate_model(args.model or defaults.model)
        seed = args.seed if args.seed is not None else defaults.seed
        interval = BarInterval.parse(args.interval or defaults.interval)
        count = args.count if args.count is not None else defaults.bar_count
        if count < 0:
            raise ConfigurationError(f"--count must be >= 0, got {count}")
        start = parse_bar_time(args.start, "--start") or default_start()

        series, first = _build_series(args, config, model, seed, symbol, interval, start)
        logger.info(
            f"generate: model={model} symbol={symbol} seed={seed} interval={interval} "
            f"count={count} start={first.isoformat()}"
        )
        bars = series.take(first, count)
    except (ConfigurationError, ValueError) as e:
        print_error(str(e), "Check the command options and ILLUSIONIST_* settings.")
        return 1

    digest = compute_bars_hash(bars) if args.show_hash else None

    if args.json_output:
        output = {
            "symbol": symbol,
            "model": model,
            "seed": seed,
            "interval": str(interval),
            "bars": [bar.to_dict() for bar in bars],
        }
        if digest:
            output["hash"] = digest
        print(json.dumps(output, indent=2, default=str))
        return 0

    console.print(build_bars_table(bars, f"{symbol} {interval} bars ({model}, seed {seed})"))
    if digest:
        console.print(f"[bold]Hash:[/] {digest}")
    console.print(f"[dim]{DEMO_DATA_NOTE}[/]")
    return 0


# =============================================================================
# SCHEDULE
# =============================================================================

def handle_schedule(args) -> int:
    """Print the next valid bar times after --from."""
    logger = get_logger()
    try:
        config = get_config()
        interval = BarInterval.parse(args.interval or config.generator.interval)
        prior = parse_bar_time(args.from_time, "--from")
        if prior is None:
            raise ConfigurationError("--from is required")
        if args.count < 0:
            raise ConfigurationError(f"--count must be >= 0, got {args.count}")

        schedule = _build_schedule(interval, args.holidays, config)
        logger.info(
            f"schedule: interval={interval} from={prior.isoformat()} count={args.count} "
            f"calendar={schedule.holidays.name}"
        )

        times = []
        cursor = prior
        for _ in range(args.count):
            cursor = schedule.next_valid_bar_time(cursor)
            times.append(cursor)
    except (ConfigurationError, ValueError) as e:
        print_error(str(e), "Check the command options and ILLUSIONIST_* settings.")
        return 1

    if args.json_output:
        output = {
            "interval": str(interval),
            "from": prior.isoformat(),
            "calendar": schedule.holidays.name,
            "times": [ts.isoformat() for ts in times],
        }
        print(json.dumps(output, indent=2, default=str))
        return 0

    console.print(build_times_table(times, f"Next {len(times)} bar times after {prior:%Y-%m-%d %H:%M} ({interval})"))
    return 0
