"""
Tabular export of generated bars.

Converts bar sequences to pandas DataFrames (float64 prices) and computes a
short content hash so two runs can be compared for identical output.

Usage:
    from illusionist.core.frames import bars_to_dataframe, compute_bars_hash

    bars = series.take(start, 100)
    df = bars_to_dataframe(bars)
    digest = compute_bars_hash(bars)     # e.g. "3f9c0a1b2d4e"
"""

from __future__ import annotations

import hashlib
from typing import Iterable

import numpy as np
import pandas as pd

from .types import Bar


# =============================================================================
# Constants
# =============================================================================
HASH_LENGTH = 12  # SHA256 prefix length

BAR_COLUMNS = ["timestamp", "open", "high", "low", "close", "volume"]
PRICE_COLUMNS = ["open", "high", "low", "close", "volume"]


# =============================================================================
# Conversion
# =============================================================================
def bars_to_dataframe(bars: Iterable[Bar]) -> pd.DataFrame:
    """
    Build a DataFrame with one row per bar.

    Columns: timestamp, open, high, low, close, volume. Prices and volume are
    float64; timestamps keep their datetime values.
    """
    bars = list(bars)
    if not bars:
        df = pd.DataFrame({col: pd.Series(dtype=np.float64) for col in PRICE_COLUMNS})
        df.insert(0, "timestamp", pd.Series(dtype="datetime64[ns]"))
        return df

    data = {
        "timestamp": pd.to_datetime([bar.timestamp for bar in bars]),
    }
    for col in PRICE_COLUMNS:
        data[col] = np.array([float(getattr(bar, col)) for bar in bars], dtype=np.float64)

    return pd.DataFrame(data, columns=BAR_COLUMNS)


def _compute_dataframe_hash(df: pd.DataFrame) -> str:
    """Compute deterministic hash of DataFrame."""
    # CSV representation for determinism (fixed column order)
    csv_data = df[BAR_COLUMNS].to_csv(index=False)
    return hashlib.sha256(csv_data.encode('utf-8')).hexdigest()


def compute_bars_hash(bars: Iterable[Bar]) -> str:
    """Short SHA256 prefix of the bars' CSV rendering."""
    return _compute_dataframe_hash(bars_to_dataframe(bars))[:HASH_LENGTH]


def verify_bars_hash(bars: Iterable[Bar], expected: str) -> bool:
    """
    Verify that bars hash to the expected value.

    Used to confirm that a regenerated sequence matches a recorded run.
    """
    return compute_bars_hash(bars) == expected
