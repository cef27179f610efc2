"""Pure math / metric helpers (no I/O)."""

from __future__ import annotations

import math
from typing import Sequence


def simple_return(prev_close: float, curr_close: float) -> float | None:
    """Daily simple return."""
    if prev_close == 0:
        return None
    return (curr_close - prev_close) / prev_close


def mean(values: Sequence[float]) -> float:
    """Arithmetic mean; 0.0 for an empty sequence."""
    if not values:
        return 0.0
    return sum(values) / len(values)


def population_std(values: Sequence[float]) -> float:
    """Population standard deviation (divides by N)."""
    if not values:
        return 0.0
    mu = mean(values)
    return math.sqrt(sum((v - mu) ** 2 for v in values) / len(values))


def max_drawdown(closes: list[float]) -> float | None:
    """Maximum drawdown from a series of close prices.

    Returns a negative fraction (e.g. -0.15 for -15%).
    Returns None if fewer than 2 prices.  Non-positive peaks are skipped.
    """
    if len(closes) < 2:
        return None
    peak = closes[0]
    mdd = 0.0
    for price in closes:
        if price > peak:
            peak = price
        if peak <= 0:
            continue
        dd = (price - peak) / peak
        if dd < mdd:
            mdd = dd
    return mdd
