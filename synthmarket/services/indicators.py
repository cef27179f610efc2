"""Technical indicator library.

Pure functions over an ordered price series.  A series is either a sequence
of OHLCV records (anything with ``date`` and price attributes) or a bare
sequence of numbers, which are treated as closing prices.

Every function returns a list of points aligned to the input position they
describe; leading positions without enough history are omitted rather than
padded, so ``len(sma(series, 20)) == len(series) - 19``.

RSI conventions: the first averages are simple means of the first
``period`` changes; after that they are smoothed with ``a = 1 / period``
(Wilder) unless ``smoothing`` is given.  With no losses RSI is 100; with
neither gains nor losses (a flat market) it is 50.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Any, Sequence

from synthmarket.errors import InvalidParameter, InvalidRange
from synthmarket.schemas.indicators import (
    BollingerPoint,
    IndicatorBundle,
    MACDPoint,
    MovingAveragePoint,
    RSIPoint,
    SupportResistanceLevel,
)
from synthmarket.services.metrics import mean, population_std

DECIMALS = 4
RSI_DECIMALS = 2
PRICE_SOURCES = ("open", "high", "low", "close", "volume")

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _extract(series: Sequence[Any], source: str = "close") -> tuple[list[float], list[date | None]]:
    """Split *series* into values and dates."""
    if source not in PRICE_SOURCES:
        raise InvalidParameter(f"unknown price source '{source}'", hint=f"Use one of {PRICE_SOURCES}")
    if len(series) == 0:
        raise InvalidRange("indicator input series is empty")

    values: list[float] = []
    dates: list[date | None] = []
    for item in series:
        if isinstance(item, (int, float)):
            values.append(float(item))
            dates.append(None)
        else:
            values.append(float(getattr(item, source)))
            dates.append(getattr(item, "date", None))
    return values, dates


def _check_period(name: str, period: int, length: int, required: int | None = None) -> None:
    if period < 1:
        raise InvalidParameter(f"{name} period must be >= 1, got {period}")
    required = period if required is None else required
    if length < required:
        raise InvalidParameter(
            f"{name} period {period} needs {required} points, series has {length}",
            hint="Use a shorter period or a longer series.",
        )


def _sma_values(values: list[float], period: int) -> list[float]:
    return [mean(values[i - period + 1 : i + 1]) for i in range(period - 1, len(values))]


def _ema_values(values: list[float], period: int) -> list[float]:
    """EMA seeded with the SMA of the first *period* values."""
    k = 2 / (period + 1)
    ema = mean(values[:period])
    out = [ema]
    for price in values[period:]:
        ema = price * k + ema * (1 - k)
        out.append(ema)
    return out


# ---------------------------------------------------------------------------
# Moving averages
# ---------------------------------------------------------------------------


def sma(series: Sequence[Any], period: int, source: str = "close") -> list[MovingAveragePoint]:
    """Simple moving average of the trailing *period* values."""
    values, dates = _extract(series, source)
    _check_period("SMA", period, len(values))
    offset = period - 1
    return [
        MovingAveragePoint(
            index=i + offset, date=dates[i + offset], value=round(v, DECIMALS), period=period
        )
        for i, v in enumerate(_sma_values(values, period))
    ]


def ema(series: Sequence[Any], period: int, source: str = "close") -> list[MovingAveragePoint]:
    """Exponential moving average, ``k = 2 / (period + 1)``."""
    values, dates = _extract(series, source)
    _check_period("EMA", period, len(values))
    offset = period - 1
    return [
        MovingAveragePoint(
            index=i + offset, date=dates[i + offset], value=round(v, DECIMALS), period=period
        )
        for i, v in enumerate(_ema_values(values, period))
    ]


# ---------------------------------------------------------------------------
# RSI
# ---------------------------------------------------------------------------


def _rsi_value(avg_gain: float, avg_loss: float) -> float:
    if avg_loss == 0:
        return 100.0 if avg_gain > 0 else 50.0
    rs = avg_gain / avg_loss
    return 100 - 100 / (1 + rs)


def _rsi_point(
    index: int, day: date | None, value: float, overbought: float, oversold: float
) -> RSIPoint:
    value = round(value, RSI_DECIMALS)
    if value > overbought:
        signal = "overbought"
    elif value < oversold:
        signal = "oversold"
    else:
        signal = "neutral"
    distance = abs(value - 50)
    strength = "strong" if distance > 20 else "moderate" if distance > 10 else "weak"
    return RSIPoint(index=index, date=day, value=value, signal=signal, strength=strength)


def rsi(
    series: Sequence[Any],
    period: int = 14,
    smoothing: float | None = None,
    overbought: float = 70,
    oversold: float = 30,
) -> list[RSIPoint]:
    """Relative Strength Index over closing prices.

    Needs ``period + 1`` closes for the first point, so the output has
    ``len(series) - period`` points.

    Args:
        smoothing: Weight of the newest change in the running averages,
            in (0, 1].  Defaults to ``1 / period``.
    """
    values, dates = _extract(series)
    _check_period("RSI", period, len(values), required=period + 1)
    alpha = 1 / period if smoothing is None else smoothing
    if not 0 < alpha <= 1:
        raise InvalidParameter(f"RSI smoothing must be in (0, 1], got {smoothing}")

    deltas = [b - a for a, b in zip(values, values[1:])]
    gains = [d if d > 0 else 0.0 for d in deltas]
    losses = [-d if d < 0 else 0.0 for d in deltas]

    avg_gain = mean(gains[:period])
    avg_loss = mean(losses[:period])
    points = [_rsi_point(period, dates[period], _rsi_value(avg_gain, avg_loss), overbought, oversold)]

    for i in range(period, len(deltas)):
        avg_gain = avg_gain * (1 - alpha) + gains[i] * alpha
        avg_loss = avg_loss * (1 - alpha) + losses[i] * alpha
        points.append(
            _rsi_point(i + 1, dates[i + 1], _rsi_value(avg_gain, avg_loss), overbought, oversold)
        )
    return points


# ---------------------------------------------------------------------------
# MACD
# ---------------------------------------------------------------------------


def macd(
    series: Sequence[Any],
    fast: int = 12,
    slow: int = 26,
    signal: int = 9,
) -> list[MACDPoint]:
    """MACD line, signal line and histogram.

    The trend label follows the sign of the reported (rounded) histogram.
    """
    for name, period in (("fast", fast), ("slow", slow), ("signal", signal)):
        if period < 1:
            raise InvalidParameter(f"MACD {name} period must be >= 1, got {period}")
    if fast >= slow:
        raise InvalidParameter(f"MACD fast period {fast} must be below slow period {slow}")

    values, dates = _extract(series)
    _check_period("MACD", slow, len(values), required=slow + signal - 1)

    fast_ema = _ema_values(values, fast)
    slow_ema = _ema_values(values, slow)
    shift = slow - fast
    # macd_line[i] describes input position slow - 1 + i
    macd_line = [fast_ema[i + shift] - slow_ema[i] for i in range(len(slow_ema))]
    signal_line = _ema_values(macd_line, signal)

    points: list[MACDPoint] = []
    for j, sig in enumerate(signal_line):
        k = j + signal - 1
        index = slow - 1 + k
        histogram = round(macd_line[k] - sig, DECIMALS)
        if histogram > 0:
            trend = "bullish"
        elif histogram < 0:
            trend = "bearish"
        else:
            trend = "neutral"
        points.append(
            MACDPoint(
                index=index,
                date=dates[index],
                macd=round(macd_line[k], DECIMALS),
                signal=round(sig, DECIMALS),
                histogram=histogram,
                trend=trend,
            )
        )
    return points


# ---------------------------------------------------------------------------
# Bollinger Bands
# ---------------------------------------------------------------------------


def bollinger_bands(
    series: Sequence[Any],
    period: int = 20,
    std_dev_multiplier: float = 2.0,
    source: str = "close",
) -> list[BollingerPoint]:
    """SMA middle band +/- a multiple of the population standard deviation."""
    if std_dev_multiplier < 0:
        raise InvalidParameter(f"std_dev_multiplier must be >= 0, got {std_dev_multiplier}")
    values, dates = _extract(series, source)
    _check_period("Bollinger", period, len(values))

    points: list[BollingerPoint] = []
    for i in range(period - 1, len(values)):
        window = values[i - period + 1 : i + 1]
        middle = mean(window)
        spread = population_std(window) * std_dev_multiplier
        upper = middle + spread
        lower = middle - spread
        width = upper - lower
        points.append(
            BollingerPoint(
                index=i,
                date=dates[i],
                upper=round(upper, DECIMALS),
                middle=round(middle, DECIMALS),
                lower=round(lower, DECIMALS),
                bandwidth=round(width / middle, DECIMALS) if middle else None,
                percent_b=round((values[i] - lower) / width, DECIMALS) if width > 0 else None,
            )
        )
    return points


# ---------------------------------------------------------------------------
# Support / resistance
# ---------------------------------------------------------------------------


@dataclass
class _Level:
    price: float
    kind: str
    touches: int = 0
    last_touch: int = 0


def _touch(levels: list[_Level], price: float, kind: str, tolerance: float, index: int) -> None:
    for level in levels:
        if level.kind == kind and abs(level.price - price) / price < tolerance:
            break
    else:
        level = _Level(price=price, kind=kind)
        levels.append(level)
    level.touches += 1
    level.last_touch = index


def support_resistance(
    series: Sequence[Any],
    lookback: int = 50,
    tolerance: float = 0.02,
    max_levels: int = 5,
    min_strength: float = 0.3,
) -> list[SupportResistanceLevel]:
    """Levels where the trailing *lookback* window turned.

    Local lows become support and local highs resistance; turns within
    *tolerance* of an existing level count as another touch.  Strength is
    the mean of the level's share of the maximum touch count and its
    recency (bars since the last touch relative to the window).
    """
    if tolerance <= 0:
        raise InvalidParameter(f"tolerance must be > 0, got {tolerance}")
    if max_levels < 1:
        raise InvalidParameter(f"max_levels must be >= 1, got {max_levels}")
    lows, dates = _extract(series, "low")
    highs, _ = _extract(series, "high")
    _check_period("support/resistance lookback", lookback, len(lows))

    start = len(lows) - lookback
    levels: list[_Level] = []
    for i in range(start + 1, len(lows) - 1):
        if lows[i] < lows[i - 1] and lows[i] < lows[i + 1] and lows[i] > 0:
            _touch(levels, lows[i], "support", tolerance, i)
        if highs[i] > highs[i - 1] and highs[i] > highs[i + 1] and highs[i] > 0:
            _touch(levels, highs[i], "resistance", tolerance, i)
    if not levels:
        return []

    last = len(lows) - 1
    max_touches = max(level.touches for level in levels)
    ranked: list[SupportResistanceLevel] = []
    for level in levels:
        recency = 1 - (last - level.last_touch) / lookback
        strength = min(1.0, (level.touches / max_touches + recency) / 2)
        if strength <= min_strength:
            continue
        ranked.append(
            SupportResistanceLevel(
                price=round(level.price, DECIMALS),
                kind=level.kind,
                touches=level.touches,
                strength=round(strength, DECIMALS),
                last_touch_index=level.last_touch,
                last_touch_date=dates[level.last_touch],
            )
        )
    ranked.sort(key=lambda lvl: lvl.strength, reverse=True)
    return ranked[:max_levels]


# ---------------------------------------------------------------------------
# Bundle
# ---------------------------------------------------------------------------


def calculate_all_indicators(series: Sequence[Any]) -> IndicatorBundle:
    """Every indicator at its conventional parameters.

    Indicators whose warm-up is longer than the series come back empty.
    """
    n = len(series)
    if n == 0:
        raise InvalidRange("indicator input series is empty")
    return IndicatorBundle(
        sma20=sma(series, 20) if n >= 20 else [],
        sma50=sma(series, 50) if n >= 50 else [],
        ema12=ema(series, 12) if n >= 12 else [],
        ema26=ema(series, 26) if n >= 26 else [],
        rsi=rsi(series) if n >= 15 else [],
        macd=macd(series) if n >= 34 else [],
        bollinger_bands=bollinger_bands(series) if n >= 20 else [],
        support_resistance=support_resistance(series) if n >= 50 else [],
    )
