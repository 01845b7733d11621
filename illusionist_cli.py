#!/usr/bin/env python3
"""
Illusionist CLI

Thin shell over the bar generators. It only:
- Parses arguments
- Calls the subcommand handlers
- Exits with their status code

Examples:
  python illusionist_cli.py generate
  python illusionist_cli.py generate --model gbm --interval 1h --count 10 --json
  python illusionist_cli.py schedule --interval 1h --from "2025-01-03 15:00"
"""

import sys

from illusionist.cli.argparser import build_parser, setup_argparse
from illusionist.cli.subcommands import handle_generate, handle_schedule
from illusionist.cli.utils import console
from illusionist.config.config import get_config
from illusionist.core.types import ConfigurationError
from illusionist.utils.logger import setup_logger


def _resolve_log_level(args, default: str) -> str:
    if args.debug:
        return "DEBUG"
    if args.verbose:
        return "INFO"
    if args.quiet:
        return "WARNING"
    return default


def main(argv=None) -> int:
    """Main entry point."""
    # Parse CLI arguments FIRST (before any config or logging)
    args = setup_argparse(argv)

    try:
        config = get_config()
        # Setup logging
        setup_logger(
            log_dir=config.log.log_dir,
            log_level=_resolve_log_level(args, config.log.level),
            log_to_file=config.log.log_to_file,
        )
    except (ConfigurationError, ValueError) as e:
        console.print(f"[bold red]Configuration error:[/] {e}")
        return 1

    try:
        if args.command == "generate":
            return handle_generate(args)
        elif args.command == "schedule":
            return handle_schedule(args)
        else:
            build_parser().print_help()
            return 1
    except KeyboardInterrupt:
        console.print("\n[yellow]Interrupted.[/]")
        return 130


def run():
    """Console-script entry point."""
    sys.exit(main())


if __name__ == "__main__":
    run()
