"""Trading signals – a weighted vote over the indicator library.

Each indicator contributes a score in [-1, 1] (positive is bullish).  The
weighted sum decides the action: above ``ACTION_THRESHOLD`` is a buy, below
its negative a sell, anything between a hold.
"""

from __future__ import annotations

import math
from typing import Any, Sequence

from synthmarket.errors import InvalidParameter
from synthmarket.schemas.indicators import (
    BollingerPoint,
    MACDPoint,
    MovingAveragePoint,
    RSIPoint,
    SignalWeights,
    SupportResistanceLevel,
    TradingSignal,
)
from synthmarket.services.indicators import bollinger_bands, ema, macd, rsi, sma, support_resistance
from synthmarket.services.metrics import mean

MIN_SIGNAL_HISTORY = 50
ACTION_THRESHOLD = 0.3
STRONG_THRESHOLD = 0.6
LEVEL_PROXIMITY = 0.02
VOLUME_WINDOW = 5
VOLUME_SPIKE = 1.5
VOLUME_LULL = 0.7

SIGNAL_TIMEFRAMES: dict[str, SignalWeights] = {
    "short_term": SignalWeights(
        rsi=0.35, macd=0.35, bollinger=0.20, moving_average=0.10,
        support_resistance=0.05, volume=0.15,
    ),
    "medium_term": SignalWeights(),
    "long_term": SignalWeights(
        rsi=0.15, macd=0.15, bollinger=0.20, moving_average=0.35,
        support_resistance=0.15, volume=0.05,
    ),
}


def _clamp(score: float) -> float:
    return max(-1.0, min(1.0, score))


# ---------------------------------------------------------------------------
# Component scores
# ---------------------------------------------------------------------------


def rsi_score(point: RSIPoint) -> float:
    if point.signal == "overbought":
        return -0.8
    if point.signal == "oversold":
        return 0.8
    return (point.value - 50) / 50 * 0.3


def macd_score(point: MACDPoint) -> float:
    if point.trend == "bullish":
        return 0.7
    if point.trend == "bearish":
        return -0.7
    return 0.0


def bollinger_score(point: BollingerPoint, price: float) -> float:
    if price > point.upper:
        return -0.6
    if price < point.lower:
        return 0.6
    if point.percent_b is None:
        return 0.0
    return (point.percent_b - 0.5) * 0.4


def moving_average_score(
    sma20: MovingAveragePoint,
    sma50: MovingAveragePoint,
    ema12: MovingAveragePoint,
    ema26: MovingAveragePoint,
    price: float,
) -> float:
    """Two crossovers (+/-0.3 each) and price against SMA20 (+/-0.2)."""
    score = 0.3 if sma20.value > sma50.value else -0.3
    score += 0.3 if ema12.value > ema26.value else -0.3
    score += 0.2 if price > sma20.value else -0.2
    return _clamp(score)


def support_resistance_score(levels: Sequence[SupportResistanceLevel], price: float) -> float:
    """Bounce off nearby support is bullish, pressing on resistance bearish."""
    if price <= 0:
        return 0.0
    score = 0.0
    for level in levels:
        if abs(price - level.price) / price >= LEVEL_PROXIMITY:
            continue
        if level.kind == "support" and price > level.price:
            score += 0.4 * level.strength
        elif level.kind == "resistance" and price < level.price:
            score -= 0.4 * level.strength
    return _clamp(score)


def volume_score(series: Sequence[Any]) -> float:
    """Spike on the last bar confirms its direction; a lull leans bearish.

    Bare price sequences carry no volume and score 0.
    """
    if len(series) < 20 or isinstance(series[-1], (int, float)):
        return 0.0
    average = mean([float(r.volume) for r in series[-VOLUME_WINDOW:]])
    if average <= 0:
        return 0.0
    ratio = series[-1].volume / average
    if ratio > VOLUME_SPIKE:
        change = series[-1].close - series[-2].close
        return math.copysign(0.3, change) if change else 0.0
    if ratio < VOLUME_LULL:
        return -0.1
    return 0.0


# ---------------------------------------------------------------------------
# Signal
# ---------------------------------------------------------------------------


def _action(score: float) -> str:
    if score > ACTION_THRESHOLD:
        return "buy"
    if score < -ACTION_THRESHOLD:
        return "sell"
    return "hold"


def _strength(score: float) -> str:
    magnitude = abs(score)
    if magnitude > STRONG_THRESHOLD:
        return "strong"
    if magnitude > ACTION_THRESHOLD:
        return "moderate"
    return "weak"


def _reasoning(
    scores: dict[str, float],
    rsi_point: RSIPoint,
    macd_point: MACDPoint,
    band: BollingerPoint,
    sma20: MovingAveragePoint,
    sma50: MovingAveragePoint,
    price: float,
) -> list[str]:
    notes: list[str] = []
    if abs(scores["rsi"]) > 0.5:
        if rsi_point.signal == "overbought":
            notes.append(f"RSI is overbought ({rsi_point.value:.1f}), potential reversal")
        elif rsi_point.signal == "oversold":
            notes.append(f"RSI is oversold ({rsi_point.value:.1f}), potential bounce")
    if abs(scores["macd"]) > 0.5:
        notes.append(f"MACD shows {macd_point.trend} momentum ({macd_point.histogram:.3f})")
    if abs(scores["moving_average"]) > 0.3:
        side = "above" if sma20.value > sma50.value else "below"
        notes.append(
            f"Short-term MA ({sma20.value:.2f}) {side} long-term MA ({sma50.value:.2f})"
        )
    if abs(scores["bollinger"]) > 0.4:
        if price > band.upper:
            notes.append("Price above upper Bollinger Band, potential reversal")
        elif price < band.lower:
            notes.append("Price below lower Bollinger Band, potential bounce")
    if abs(scores["support_resistance"]) > 0.2:
        notes.append("Price near significant support/resistance level")
    if abs(scores["volume"]) > 0.2:
        direction = "bullish" if scores["volume"] > 0 else "bearish"
        notes.append(f"High volume confirms {direction} momentum")
    return notes


def trading_signal(series: Sequence[Any], weights: SignalWeights | None = None) -> TradingSignal:
    """Combine RSI, MACD, Bollinger, moving-average, support/resistance and
    volume scores into a buy/sell/hold call for the last bar.

    ``confidence`` is ``min(1, |score|)``.

    Raises:
        InvalidParameter: fewer than ``MIN_SIGNAL_HISTORY`` bars.
    """
    if len(series) < MIN_SIGNAL_HISTORY:
        raise InvalidParameter(
            f"trading signal needs {MIN_SIGNAL_HISTORY} bars, series has {len(series)}",
            hint="Widen the date range.",
        )
    if weights is None:
        weights = SignalWeights()

    last = series[-1]
    price = float(last) if isinstance(last, (int, float)) else last.close
    rsi_point = rsi(series)[-1]
    macd_point = macd(series)[-1]
    band = bollinger_bands(series)[-1]
    sma20 = sma(series, 20)[-1]
    sma50 = sma(series, 50)[-1]
    ema12 = ema(series, 12)[-1]
    ema26 = ema(series, 26)[-1]
    levels = support_resistance(series)

    scores = {
        "rsi": rsi_score(rsi_point),
        "macd": macd_score(macd_point),
        "bollinger": bollinger_score(band, price),
        "moving_average": moving_average_score(sma20, sma50, ema12, ema26, price),
        "support_resistance": support_resistance_score(levels, price),
        "volume": volume_score(series),
    }
    score = sum(value * getattr(weights, name) for name, value in scores.items())

    return TradingSignal(
        index=len(series) - 1,
        date=getattr(last, "date", None),
        action=_action(score),
        strength=_strength(score),
        confidence=round(min(1.0, abs(score)), 3),
        score=round(score, 4),
        component_scores={name: round(value, 4) for name, value in scores.items()},
        rsi=rsi_point,
        macd=macd_point,
        bollinger=band,
        moving_averages=[sma20, sma50, ema12, ema26],
        reasoning=_reasoning(scores, rsi_point, macd_point, band, sma20, sma50, price),
    )


def multi_timeframe_signals(series: Sequence[Any]) -> dict[str, TradingSignal]:
    """One signal per preset in ``SIGNAL_TIMEFRAMES``."""
    return {name: trading_signal(series, w) for name, w in SIGNAL_TIMEFRAMES.items()}


def signal_alerts(signal: TradingSignal) -> list[str]:
    alerts: list[str] = []
    if signal.strength == "strong":
        alerts.append(f"Strong {signal.action} signal detected")
    if signal.confidence > 0.8:
        alerts.append("High confidence signal")
    if (signal.rsi.signal == "overbought" and signal.macd.trend == "bullish") or (
        signal.rsi.signal == "oversold" and signal.macd.trend == "bearish"
    ):
        alerts.append("Potential indicator divergence detected")
    return alerts
