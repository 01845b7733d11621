"""
Logging system for the bar generator.
Provides human-readable console logs and optional daily file output.
"""

import logging
from datetime import datetime
from pathlib import Path
from typing import Optional

# ANSI color codes for terminal output
class Colors:
    RESET = "\033[0m"
    RED = "\033[91m"
    GREEN = "\033[92m"
    YELLOW = "\033[93m"
    CYAN = "\033[96m"
    WHITE = "\033[97m"
    BOLD = "\033[1m"


class ColoredFormatter(logging.Formatter):
    """Custom formatter with colors for console output."""

    LEVEL_COLORS = {
        logging.DEBUG: Colors.CYAN,
        logging.INFO: Colors.GREEN,
        logging.WARNING: Colors.YELLOW,
        logging.ERROR: Colors.RED,
        logging.CRITICAL: Colors.BOLD + Colors.RED,
    }

    def format(self, record):
        color = self.LEVEL_COLORS.get(record.levelno, Colors.WHITE)
        # Color a copy so other handlers see the plain record
        record = logging.makeLogRecord(record.__dict__)
        record.levelname = f"{color}{record.levelname}{Colors.RESET}"
        record.msg = f"{color}{record.msg}{Colors.RESET}"
        return super().format(record)


class IllusionistLogger:
    """
    Central logging system.

    Features:
    - Console output with colors
    - Optional daily log file (plain text) under log_dir
    - Structured one-line records for series construction
    """

    _instance: Optional['IllusionistLogger'] = None
    _initialized: bool = False

    def __new__(cls, *args, **kwargs):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __init__(self, log_dir: str = "logs", log_level: str = "INFO", log_to_file: bool = False):
        if IllusionistLogger._initialized:
            return

        self.log_dir = Path(log_dir)
        self.log_to_file = log_to_file
        if log_to_file:
            self.log_dir.mkdir(parents=True, exist_ok=True)

        self.main_logger = self._create_logger("illusionist", log_level)

        IllusionistLogger._initialized = True

    def _create_logger(self, name: str, level: str) -> logging.Logger:
        """Create a configured logger instance."""
        logger = logging.getLogger(name)
        level_value = getattr(logging, level.upper(), None)
        if not isinstance(level_value, int):
            raise ValueError(f"Invalid log level: '{level}'")
        logger.setLevel(level_value)
        logger.handlers.clear()

        # Console handler with colors
        console_handler = logging.StreamHandler()
        console_handler.setFormatter(ColoredFormatter(
            "%(asctime)s | %(levelname)s | %(message)s",
            datefmt="%H:%M:%S"
        ))
        logger.addHandler(console_handler)

        # File handler (plain text, no colors)
        if self.log_to_file:
            log_file = self.log_dir / f"illusionist_{datetime.now().strftime('%Y%m%d')}.log"
            file_handler = logging.FileHandler(log_file, encoding='utf-8')
            file_handler.setFormatter(logging.Formatter(
                "%(asctime)s | %(levelname)s | %(name)s | %(message)s",
                datefmt="%Y-%m-%d %H:%M:%S"
            ))
            logger.addHandler(file_handler)

        return logger

    def info(self, msg: str, *args, **kwargs):
        """Log info message."""
        self.main_logger.info(msg, *args, **kwargs)

    def debug(self, msg: str, *args, **kwargs):
        """Log debug message."""
        self.main_logger.debug(msg, *args, **kwargs)

    def warning(self, msg: str, *args, **kwargs):
        """Log warning message."""
        self.main_logger.warning(msg, *args, **kwargs)

    def error(self, msg: str, *args, **kwargs):
        """Log error message."""
        self.main_logger.error(msg, *args, **kwargs)

    def series(self, model: str, symbol: str, interval, **kwargs):
        """
        Log construction of a bar series with structured format.

        Args:
            model: SEEDED or GBM
            symbol: Display symbol (e.g., DEMO)
            interval: Bar interval
            **kwargs: Additional fields (seed, drift, anchor, ...)
        """
        parts = [
            f"[SERIES:{model}]",
            f"symbol={symbol}",
            f"interval={interval}",
        ]
        for key, value in kwargs.items():
            if value is not None:
                parts.append(f"{key}={value}")

        self.main_logger.debug(" | ".join(parts))


# Global logger instance
_logger: Optional[IllusionistLogger] = None


def get_logger(log_dir: str = "logs", log_level: str = "INFO", log_to_file: bool = False) -> IllusionistLogger:
    """Get or create the global logger instance."""
    global _logger
    if _logger is None:
        _logger = IllusionistLogger(log_dir, log_level, log_to_file)
    return _logger


def setup_logger(log_dir: str = "logs", log_level: str = "INFO", log_to_file: bool = False) -> IllusionistLogger:
    """Initialize the logger with custom settings."""
    global _logger
    IllusionistLogger._initialized = False
    IllusionistLogger._instance = None
    _logger = IllusionistLogger(log_dir, log_level, log_to_file)
    return _logger

