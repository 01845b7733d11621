"""
Command-line interface.

Argument parsing lives in argparser, command handlers in subcommands.
"""

from .argparser import build_parser, setup_argparse
from .subcommands import handle_generate, handle_schedule

__all__ = [
    "build_parser",
    "setup_argparse",
    "handle_generate",
    "handle_schedule",
]
