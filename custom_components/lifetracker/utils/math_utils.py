# File: utils/math_utils.py
"""Numeric helpers for levels, progress bars and pattern averages.

No Home Assistant imports; engines call these directly.
"""

from __future__ import annotations

from collections.abc import Sequence

# Decimal places kept on stored percentages and averages
DATA_FLOAT_PRECISION = 2


def round_value(value: float, precision: int = DATA_FLOAT_PRECISION) -> float:
    """Round to the stored precision (40.456 -> 40.46)."""
    return round(value, precision)


def calculate_percentage(
    current: float,
    target: float,
    precision: int = DATA_FLOAT_PRECISION,
) -> float:
    """Return current as a percentage of target.

    A non-positive target yields 0.0, e.g. a badge with no threshold or a
    challenge with no duration. 3 of 7 challenge days gives 42.86.
    """
    if target <= 0:
        return 0.0
    return round_value(current * 100 / target, precision)


def clamp(value: float, min_val: float, max_val: float) -> float:
    """Bound value to [min_val, max_val]."""
    return max(min_val, min(value, max_val))


def mean(values: Sequence[float]) -> float:
    """Arithmetic mean; 0.0 for an empty sample."""
    if not values:
        return 0.0
    return sum(values) / len(values)
