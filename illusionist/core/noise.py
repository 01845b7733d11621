"""
Deterministic noise core.

Pure functions shared by every generator:
- deterministic_hash: 32-bit multiply-xor-shift avalanche of (ticks, seed)
- pseudo_noise: layered-sine stand-in for Brownian increments
- hash_int64 / hash_float: fold 64-bit values into signed 32-bit seeds

All integer arithmetic reproduces signed 32-bit two's complement wrap-around,
so the same inputs hash to the same value on every platform. Float results
vary only by platform rounding of sin/exp.

The epoch is never read implicitly: callers pass it (UNIX_EPOCH by default).
"""

import math
import struct
from datetime import datetime, timedelta

from .types import TICKS_PER_MICROSECOND


UNIX_EPOCH = datetime(1970, 1, 1)

# Tick origin (0001-01-01T00:00:00)
_TICK_ORIGIN = datetime(1, 1, 1)

_MASK32 = 0xFFFFFFFF
_SIGN32 = 0x80000000

# Avalanche multipliers
_MIX_C1 = 0x85EBCA6B
_MIX_C2 = 0xC2B2AE35

# Layered-sine frequencies, amplitudes and seed phase multipliers
_NOISE_LAYERS = (
    (0.1, 1.0, 1.0),
    (0.05, 0.5, 1.37),
    (0.02, 0.25, 2.17),
)
_NOISE_NORMALIZER = 1.75


def to_int32(value: int) -> int:
    """Wrap an arbitrary Python int to signed 32-bit."""
    value &= _MASK32
    return value - (1 << 32) if value & _SIGN32 else value


def to_ticks(timestamp: datetime) -> int:
    """
    Convert a datetime to 100-ns ticks since 0001-01-01.

    Uses the wall-clock fields only; tzinfo is ignored.
    """
    delta = timestamp.replace(tzinfo=None) - _TICK_ORIGIN
    micros = (delta.days * 86_400 + delta.seconds) * 1_000_000 + delta.microseconds
    return micros * TICKS_PER_MICROSECOND


def from_ticks(ticks: int, tzinfo=None) -> datetime:
    """Inverse of to_ticks (sub-microsecond remainder is dropped)."""
    return (_TICK_ORIGIN + timedelta(microseconds=ticks // TICKS_PER_MICROSECOND)).replace(tzinfo=tzinfo)


def seconds_since(timestamp: datetime, epoch: datetime) -> float:
    """Elapsed seconds from epoch to timestamp (wall-clock, tzinfo ignored)."""
    return (timestamp.replace(tzinfo=None) - epoch.replace(tzinfo=None)).total_seconds()


def deterministic_hash(ticks: int, seed: int) -> int:
    """
    Hash a tick count and seed to a non-negative integer.

    Args:
        ticks: Timestamp in 100-ns ticks
        seed: Signed 32-bit seed

    Returns:
        abs() of the mixed signed 32-bit value, in [0, 2**31]
    """
    x = to_int32(to_int32(ticks ^ (ticks >> 32)) ^ seed)

    x ^= x >> 16
    x = to_int32(x * _MIX_C1)
    x ^= x >> 13
    x = to_int32(x * _MIX_C2)
    x ^= x >> 16

    return abs(x)


def pseudo_noise(t: float, seed: int) -> float:
    """
    Smooth deterministic noise in approximately [-1, 1].

    Args:
        t: Time parameter (seconds)
        seed: Phase seed

    Returns:
        Sum of three sine layers divided by 1.75
    """
    total = 0.0
    for frequency, amplitude, phase in _NOISE_LAYERS:
        total += math.sin(t * frequency + seed * phase) * amplitude
    return total / _NOISE_NORMALIZER


def hash_int64(value: int) -> int:
    """Fold a 64-bit integer into a signed 32-bit hash (low word xor high word)."""
    return to_int32(value) ^ to_int32(value >> 32)


def hash_float(value: float) -> int:
    """
    Fold the IEEE-754 bit pattern of a float into a signed 32-bit hash.

    0.0 and -0.0 hash identically.
    """
    if value == 0.0:
        return 0
    (bits,) = struct.unpack("<q", struct.pack("<d", value))
    return hash_int64(bits)
