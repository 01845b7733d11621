"""
Configuration management.
"""

from .config import (
    Config,
    get_config,
    GeneratorConfig,
    CalendarConfig,
    LogConfig,
)

from .constants import (
    GeneratorModel,
    GENERATOR_MODELS,
    DEFAULT_SYMBOL,
    validate_model,
    validate_symbol,
)

__all__ = [
    # Config classes
    "Config",
    "get_config",
    "GeneratorConfig",
    "CalendarConfig",
    "LogConfig",
    # Generator models
    "GeneratorModel",
    "GENERATOR_MODELS",
    # Symbols
    "DEFAULT_SYMBOL",
    "validate_model",
    "validate_symbol",
]
