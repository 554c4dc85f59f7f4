"""
Numeric sanitising helpers.

Combat math never raises on bad input: NaN, infinities, None and
non-numeric values degrade to a caller-chosen default.
"""

from __future__ import annotations

import math
from typing import Any


def finite_or(value: Any, default: float = 0.0) -> float:
    """Return value as a float, or default if it is missing or non-finite."""
    if isinstance(value, bool):
        return float(value)
    try:
        number = float(value)
    except (TypeError, ValueError):
        return default
    if not math.isfinite(number):
        return default
    return number


def non_negative(value: Any, default: float = 0.0) -> float:
    """Finite, non-negative float; negatives and garbage become default."""
    number = finite_or(value, default)
    return number if number >= 0 else default


def clamp(value: float, low: float, high: float) -> float:
    """Clamp value into [low, high]."""
    return max(low, min(high, value))


def round_half_up(value: float) -> int:
    """Round .5 away from zero for positives (matches the tuning tables)."""
    return int(math.floor(value + 0.5))
