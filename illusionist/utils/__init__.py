"""
Utility modules.
"""

from .logger import get_logger, setup_logger, IllusionistLogger
from .datetime_utils import parse_bar_time, default_start

__all__ = [
    # Logger
    "get_logger",
    "setup_logger",
    "IllusionistLogger",
    # Datetime helpers
    "parse_bar_time",
    "default_start",
]
