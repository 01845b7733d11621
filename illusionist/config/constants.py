"""
Centralized constants for the bar generator.

Generator models and symbol handling live here so the CLI, config loader
and factories agree on spelling.
"""

from typing import List


# ==================== Generator Models ====================

class GeneratorModel:
    SEEDED = "seeded"  # Sine-wave bars, no drift/volatility model
    GBM = "gbm"        # Geometric Brownian Motion, optionally anchored


GENERATOR_MODELS: List[str] = [GeneratorModel.SEEDED, GeneratorModel.GBM]


def validate_model(model: str) -> str:
    """
    Validate and normalize a generator model name.

    Raises:
        ValueError: If model is not one of GENERATOR_MODELS
    """
    normalized = (model or "").strip().lower()
    if normalized not in GENERATOR_MODELS:
        raise ValueError(
            f"Invalid generator model: '{model}'. Must be one of {GENERATOR_MODELS}"
        )
    return normalized


# ==================== Symbols ====================

DEFAULT_SYMBOL = "DEMO"


def validate_symbol(symbol: str) -> str:
    """
    Validate and normalize a symbol string.

    Symbols are display labels only; they never affect generated prices.

    Args:
        symbol: The symbol to validate (e.g., "demo", "BTC/USDT")

    Returns:
        Normalized symbol (uppercase, no slashes)

    Raises:
        ValueError: If symbol is empty or invalid
    """
    if not symbol:
        raise ValueError("Symbol is required")

    # Normalize: uppercase, remove slashes and whitespace
    normalized = symbol.strip().upper().replace("/", "")

    if not normalized:
        raise ValueError(f"Invalid symbol: '{symbol}'")

    return normalized
