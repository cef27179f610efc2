"""Technical indicator result points."""

from __future__ import annotations

import datetime as dt
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


class IndicatorPoint(BaseModel):
    """Base point, aligned to the input position it describes."""

    index: int = Field(..., description="Position in the input series")
    date: dt.date | None = None


class MovingAveragePoint(IndicatorPoint):
    value: float
    period: int


class RSIPoint(IndicatorPoint):
    value: float
    signal: Literal["overbought", "oversold", "neutral"]
    strength: Literal["strong", "moderate", "weak"]


class MACDPoint(IndicatorPoint):
    macd: float
    signal: float
    histogram: float
    trend: Literal["bullish", "bearish", "neutral"]


class BollingerPoint(IndicatorPoint):
    upper: float
    middle: float
    lower: float
    bandwidth: float | None = None
    percent_b: float | None = None


class SupportResistanceLevel(BaseModel):
    """Price level where the series turned more than once."""

    price: float
    kind: Literal["support", "resistance"]
    touches: int
    strength: float
    last_touch_index: int
    last_touch_date: dt.date | None = None


class IndicatorBundle(BaseModel):
    """Every indicator computed with its conventional default parameters."""

    sma20: list[MovingAveragePoint] = []
    sma50: list[MovingAveragePoint] = []
    ema12: list[MovingAveragePoint] = []
    ema26: list[MovingAveragePoint] = []
    rsi: list[RSIPoint] = []
    macd: list[MACDPoint] = []
    bollinger_bands: list[BollingerPoint] = []
    support_resistance: list[SupportResistanceLevel] = []


class SignalWeights(BaseModel):
    """Influence of each indicator score on the combined trading signal."""

    model_config = ConfigDict(frozen=True)

    rsi: float = Field(0.25, ge=0)
    macd: float = Field(0.25, ge=0)
    bollinger: float = Field(0.20, ge=0)
    moving_average: float = Field(0.20, ge=0)
    support_resistance: float = Field(0.10, ge=0)
    volume: float = Field(0.10, ge=0)


class TradingSignal(IndicatorPoint):
    """Buy/sell/hold call for the last bar of a series.

    ``score`` is the weighted sum of ``component_scores`` (each in [-1, 1]);
    positive is bullish.
    """

    action: Literal["buy", "sell", "hold"]
    strength: Literal["strong", "moderate", "weak"]
    confidence: float
    score: float
    component_scores: dict[str, float]
    rsi: RSIPoint
    macd: MACDPoint
    bollinger: BollingerPoint
    moving_averages: list[MovingAveragePoint]
    reasoning: list[str] = []
