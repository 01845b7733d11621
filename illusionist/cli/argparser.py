"""
Argument parser setup for the Illusionist CLI.

Defines all subcommands and their arguments:
- generate: Print deterministic sample bars (seeded or GBM)
- schedule: Print the next valid bar times of the equities calendar
"""

import argparse
from typing import Optional, Sequence

from ..config.constants import GENERATOR_MODELS


def setup_argparse(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    """
    Parse command-line arguments for illusionist_cli.

    Supports:
      generate             Print sample bars (defaults from .env / environment)
      schedule             Print upcoming valid bar times

    Generator options left unset fall back to the ILLUSIONIST_* config values.
    """
    parser = build_parser()
    return parser.parse_args(argv)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="illusionist",
        description="Illusionist - deterministic synthetic OHLCV bars",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  illusionist generate                                   # 5 seeded 1m bars from today 09:00
  illusionist generate --model gbm --interval 1h --count 10
  illusionist generate --model gbm --anchor-price 100 --start "2025-01-02 09:30" --schedule
  illusionist generate --json                            # JSON records instead of a table

  illusionist schedule --interval 1h --from "2025-01-03 15:00" --count 5
  illusionist schedule --interval 5m --from "2024-12-31 16:30" --holidays calendars/lse.yml
        """
    )

    # Verbosity: mutually exclusive group (-q / -v / --debug)
    verbosity = parser.add_mutually_exclusive_group()
    verbosity.add_argument(
        "-q", "--quiet",
        action="store_true",
        default=False,
        help="Quiet mode: WARNING only, minimal output"
    )
    verbosity.add_argument(
        "-v", "--verbose",
        action="store_true",
        default=False,
        help="Verbose mode: INFO command traces"
    )
    verbosity.add_argument(
        "--debug",
        action="store_true",
        default=False,
        help="Debug mode: full DEBUG including factory construction"
    )

    # Add subcommands
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    _setup_generate_subcommand(subparsers)
    _setup_schedule_subcommand(subparsers)

    return parser


def _setup_generate_subcommand(subparsers) -> None:
    """Set up generate subcommand."""
    gen_parser = subparsers.add_parser("generate", help="Print deterministic sample bars")
    gen_parser.add_argument("--symbol", help="Display symbol (default: ILLUSIONIST_SYMBOL or DEMO)")
    gen_parser.add_argument("--seed", type=int, help="Generator seed (default: ILLUSIONIST_SEED or 42)")
    gen_parser.add_argument("--interval", help="Bar interval, e.g. 1m, 5m, 1h, 1d (default: ILLUSIONIST_INTERVAL)")
    gen_parser.add_argument("--model", choices=GENERATOR_MODELS, help="Generator model (default: ILLUSIONIST_MODEL)")
    gen_parser.add_argument("--count", type=int, help="Number of bars (default: ILLUSIONIST_BAR_COUNT or 5)")
    gen_parser.add_argument("--start", help="First bar time (YYYY-MM-DD or YYYY-MM-DD HH:MM, default: today 09:00)")
    gen_parser.add_argument("--drift", type=float, help="Annualized drift for gbm")
    gen_parser.add_argument("--volatility", type=float, help="Annualized volatility for gbm (>= 0)")
    gen_parser.add_argument("--anchor-price", dest="anchor_price", help="Anchor the gbm path at --start to this price")
    gen_parser.add_argument("--schedule", action="store_true", help="Advance through the equities trading calendar (gbm)")
    gen_parser.add_argument("--holidays", help="Holiday calendar YAML for --schedule (default: ILLUSIONIST_HOLIDAYS_FILE)")
    gen_parser.add_argument("--hash", action="store_true", dest="show_hash", help="Print the content hash of the generated bars")
    gen_parser.add_argument("--json", action="store_true", dest="json_output", help="Output results as JSON")


def _setup_schedule_subcommand(subparsers) -> None:
    """Set up schedule subcommand."""
    sched_parser = subparsers.add_parser("schedule", help="Print upcoming valid bar times")
    sched_parser.add_argument("--interval", help="Bar interval (default: ILLUSIONIST_INTERVAL)")
    sched_parser.add_argument("--from", dest="from_time", required=True, help="Prior bar time (YYYY-MM-DD HH:MM)")
    sched_parser.add_argument("--count", type=int, default=5, help="Number of bar times (default: 5)")
    sched_parser.add_argument("--holidays", help="Holiday calendar YAML (default: ILLUSIONIST_HOLIDAYS_FILE)")
    sched_parser.add_argument("--json", action="store_true", dest="json_output", help="Output results as JSON")
