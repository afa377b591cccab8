"""
Numeric helpers shared by the scoring modules.
"""

import math
from typing import Iterable

import numpy as np


def round_half_up(value: float) -> int:
    """
    Round to the nearest integer, ties going up (2.5 -> 3, -2.5 -> -2).

    Python's round() uses banker's rounding, which would report a
    session average of 82.5 as 82.
    """
    return int(math.floor(value + 0.5))


def clamp(value: float, low: float = 0.0, high: float = 100.0) -> float:
    return min(high, max(low, value))


def population_variance(values: Iterable[float]) -> float:
    """Variance over the whole population (ddof=0); 0.0 for no values."""
    arr = np.asarray(list(values), dtype=float)
    if arr.size == 0:
        return 0.0
    return float(np.var(arr))
