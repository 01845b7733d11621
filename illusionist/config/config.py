"""
Configuration management for the bar generator.
Loads settings from environment variables with sensible defaults.
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

from ..core.schedule import (
    US_EQUITY_HOLIDAYS,
    HolidayCalendar,
    parse_session_time,
)
from ..core.types import BarInterval, ConfigurationError
from ..utils.logger import get_logger
from .constants import DEFAULT_SYMBOL, GeneratorModel, validate_model, validate_symbol


def _env_bool(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


def _env_number(name: str, default: str, cast):
    raw = os.getenv(name, default)
    try:
        return cast(raw)
    except ValueError:
        raise ConfigurationError(f"{name} must be a {cast.__name__}, got '{raw}'") from None


@dataclass
class GeneratorConfig:
    """Default generator parameters (overridden by CLI flags)."""
    seed: int = 42
    symbol: str = DEFAULT_SYMBOL
    drift: float = 0.0001
    volatility: float = 0.01
    interval: str = "1m"
    model: str = GeneratorModel.SEEDED
    bar_count: int = 5

    def __post_init__(self):
        """Validate and normalize configuration."""
        try:
            self.symbol = validate_symbol(self.symbol)
            self.model = validate_model(self.model)
        except ValueError as e:
            raise ConfigurationError(str(e)) from None

        # Fail early on a bad interval string
        BarInterval.parse(self.interval)

        if self.volatility < 0:
            raise ConfigurationError(f"ILLUSIONIST_VOLATILITY must be >= 0, got {self.volatility}")
        if self.bar_count < 0:
            raise ConfigurationError(f"ILLUSIONIST_BAR_COUNT must be >= 0, got {self.bar_count}")

    @property
    def bar_interval(self) -> BarInterval:
        return BarInterval.parse(self.interval)


@dataclass
class CalendarConfig:
    """Trading calendar configuration."""
    holidays_file: str = ""
    session_open: str = "09:30"
    session_close: str = "16:00"

    def __post_init__(self):
        open_ = parse_session_time(self.session_open, "ILLUSIONIST_SESSION_OPEN")
        close = parse_session_time(self.session_close, "ILLUSIONIST_SESSION_CLOSE")
        if open_ >= close:
            raise ConfigurationError(
                f"Session open ({self.session_open}) must be before session close ({self.session_close})"
            )

    def load_holidays(self) -> HolidayCalendar:
        """Configured YAML calendar, or the default U.S. table when unset."""
        if not self.holidays_file:
            return US_EQUITY_HOLIDAYS
        return HolidayCalendar.from_yaml(self.holidays_file)


@dataclass
class LogConfig:
    """Logging configuration."""
    level: str = "INFO"
    log_dir: str = "logs"
    log_to_file: bool = False


class Config:
    """
    Central configuration manager.

    Loads configuration from environment variables and provides
    typed access to all settings.
    """

    _instance: Optional['Config'] = None

    def __new__(cls, *args, **kwargs):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
            cls._instance._initialized = False
        return cls._instance

    def __init__(self, env_file: str = ".env"):
        if self._initialized:
            return

        env_path = Path(env_file)
        if env_path.exists():
            load_dotenv(env_path, override=False)

        # Initialize sub-configs
        self.generator = self._load_generator_config()
        self.calendar = self._load_calendar_config()
        self.log = self._load_log_config()

        get_logger().debug(
            f"Config loaded: model={self.generator.model} seed={self.generator.seed} "
            f"interval={self.generator.interval} holidays_file={self.calendar.holidays_file or '-'}"
        )

        self._initialized = True

    def _load_generator_config(self) -> GeneratorConfig:
        """Load generator defaults from environment."""
        return GeneratorConfig(
            seed=_env_number("ILLUSIONIST_SEED", "42", int),
            symbol=os.getenv("ILLUSIONIST_SYMBOL", DEFAULT_SYMBOL),
            drift=_env_number("ILLUSIONIST_DRIFT", "0.0001", float),
            volatility=_env_number("ILLUSIONIST_VOLATILITY", "0.01", float),
            interval=os.getenv("ILLUSIONIST_INTERVAL", "1m"),
            model=os.getenv("ILLUSIONIST_MODEL", GeneratorModel.SEEDED),
            bar_count=_env_number("ILLUSIONIST_BAR_COUNT", "5", int),
        )

    def _load_calendar_config(self) -> CalendarConfig:
        """Load calendar configuration from environment."""
        return CalendarConfig(
            holidays_file=os.getenv("ILLUSIONIST_HOLIDAYS_FILE", ""),
            session_open=os.getenv("ILLUSIONIST_SESSION_OPEN", "09:30"),
            session_close=os.getenv("ILLUSIONIST_SESSION_CLOSE", "16:00"),
        )

    def _load_log_config(self) -> LogConfig:
        """Load logging configuration from environment."""
        return LogConfig(
            level=os.getenv("LOG_LEVEL", "INFO"),
            log_dir=os.getenv("LOG_DIR", "logs"),
            log_to_file=_env_bool("LOG_TO_FILE"),
        )

    def reload(self, env_file: str = ".env"):
        """Reload configuration from environment."""
        self._initialized = False
        Config._instance = None
        return Config(env_file)


def get_config(env_file: str = ".env") -> Config:
    """Get or create the global config instance."""
    return Config(env_file)
