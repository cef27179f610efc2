"""Series analyzer – aggregate statistics over an OHLCV series."""

from __future__ import annotations

from typing import Sequence

from synthmarket.errors import InvalidParameter, InvalidRange
from synthmarket.schemas.market import AnalysisResult, OHLCVRecord
from synthmarket.services.metrics import max_drawdown, mean, population_std, simple_return

DECIMALS = 4


def daily_returns(series: Sequence[OHLCVRecord]) -> list[float]:
    """Close-to-close simple returns (fractions), one per consecutive pair."""
    returns: list[float] = []
    for prev, curr in zip(series, series[1:]):
        ret = simple_return(prev.close, curr.close)
        if ret is not None:
            returns.append(ret)
    return returns


def analyze(series: Sequence[OHLCVRecord]) -> AnalysisResult:
    """Summarize *series*.

    Returns are close-to-close; ``volatility`` is their population standard
    deviation, not annualized.  Percent fields are already scaled by 100.

    Raises:
        InvalidRange: fewer than two records.
        InvalidParameter: a close at or below zero.
    """
    if len(series) < 2:
        raise InvalidRange(
            f"analysis needs at least 2 records, got {len(series)}",
            hint="Widen the date range.",
        )
    bad = next((r for r in series if r.close <= 0), None)
    if bad is not None:
        raise InvalidParameter(
            f"close must be positive, got {bad.close} on {bad.date}",
            hint="Run the validator to locate malformed records.",
        )

    returns = daily_returns(series)

    closes = [r.close for r in series]
    mdd = max_drawdown(closes) or 0.0
    total = simple_return(closes[0], closes[-1]) or 0.0

    return AnalysisResult(
        avg_volume=round(mean([r.volume for r in series]), 2),
        avg_change_percent=round(mean(returns) * 100, DECIMALS),
        max_gain=round(max(returns) * 100, DECIMALS),
        max_loss=round(min(returns) * 100, DECIMALS),
        volatility=round(population_std(returns) * 100, DECIMALS),
        total_days=len(series),
        total_return_percent=round(total * 100, DECIMALS),
        max_drawdown_percent=round(mdd * 100, DECIMALS),
    )
