# File: utils/math_utils.py
"""Math and calculation utilities for KidsGrowth.

Pure Python math functions with no engine imports.

Functions:
    - clamp: Bound a value to a closed range
    - calculate_ratio: Clamped completion ratio with zero-target protection
"""

from __future__ import annotations


def clamp(value: float, min_val: float, max_val: float) -> float:
    """Clamp a value between minimum and maximum bounds.

    Examples:
        clamp(1.5, 0, 1) → 1
        clamp(-10, 0, 100) → 0
        clamp(50, 0, 100) → 50
    """
    return max(min_val, min(value, max_val))


def calculate_ratio(current: float, target: float) -> float:
    """Return current/target clamped to [0.0, 1.0].

    A target of zero or less means there is nothing left to do, so the
    ratio is 1.0. Callers that need to flag such targets must check them
    before calling.

    Examples:
        calculate_ratio(2, 3) → 0.6666666666666666
        calculate_ratio(5, 3) → 1.0
        calculate_ratio(0, 0) → 1.0
    """
    if target <= 0:
        return 1.0
    return clamp(current / target, 0.0, 1.0)
