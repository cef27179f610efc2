"""Tests for the technical indicator library."""

from __future__ import annotations

import math
from datetime import date, timedelta

import pytest

from synthmarket.errors import InvalidParameter, InvalidRange
from synthmarket.schemas.market import OHLCVRecord
from synthmarket.services.indicators import (
    bollinger_bands,
    calculate_all_indicators,
    ema,
    macd,
    rsi,
    sma,
    support_resistance,
)

RAMP = [float(i) for i in range(1, 101)]
WAVE = [100 + 10 * math.sin(i / 5) for i in range(100)]
FLAT = [42.0] * 100


# ---------------------------------------------------------------------------
# Moving averages
# ---------------------------------------------------------------------------


def test_sma_alignment_and_values():
    points = sma(RAMP, 20)
    assert len(points) == 81
    assert points[0].index == 19
    assert points[0].value == pytest.approx(10.5)
    assert points[-1].index == 99
    assert points[-1].value == pytest.approx(90.5)
    assert all(p.period == 20 for p in points)


def test_sma_carries_record_dates(make_records):
    records = make_records(WAVE)
    points = sma(records, 10)
    for p in points:
        assert p.date == records[p.index].date


def test_sma_other_source(make_records):
    records = make_records(RAMP)
    volume = sma(records, 5, source="volume")
    assert volume[0].value == pytest.approx(1_002_000)
    with pytest.raises(InvalidParameter):
        sma(records, 5, source="vwap")


def test_period_validation():
    with pytest.raises(InvalidParameter):
        sma(RAMP, 0)
    with pytest.raises(InvalidParameter):
        sma(RAMP[:10], 20)
    with pytest.raises(InvalidParameter):
        ema(RAMP, -3)
    with pytest.raises(InvalidRange):
        sma([], 5)


def test_sma_period_equal_to_length():
    points = sma(RAMP[:20], 20)
    assert len(points) == 1


def test_ema_seed_and_recurrence():
    period = 10
    points = ema(RAMP, period)
    assert len(points) == 91
    assert points[0].value == pytest.approx(5.5)
    k = 2 / (period + 1)
    assert points[1].value == pytest.approx(round(11 * k + 5.5 * (1 - k), 4))


def test_ema_of_constant_series_is_constant():
    assert {p.value for p in ema(FLAT, 12)} == {42.0}


# ---------------------------------------------------------------------------
# RSI
# ---------------------------------------------------------------------------


def test_rsi_length():
    assert len(rsi(WAVE, 14)) == 86
    assert rsi(WAVE)[0].index == 14


def test_rsi_needs_period_plus_one():
    assert len(rsi(RAMP[:15], 14)) == 1
    with pytest.raises(InvalidParameter):
        rsi(RAMP[:14], 14)


def test_rsi_flat_market_is_50():
    points = rsi(FLAT)
    assert points
    assert all(p.value == 50.0 for p in points)
    assert all(p.signal == "neutral" and p.strength == "weak" for p in points)


def test_rsi_monotonic_series():
    up = rsi(RAMP)
    assert all(p.value == 100.0 for p in up)
    assert all(p.signal == "overbought" and p.strength == "strong" for p in up)

    down = rsi(list(reversed(RAMP)))
    assert all(p.value == 0.0 for p in down)
    assert all(p.signal == "oversold" for p in down)


def test_rsi_bounded(generated_series):
    for p in rsi(generated_series):
        assert 0.0 <= p.value <= 100.0


def test_rsi_first_point_uses_simple_averages():
    closes = [44.0, 44.5, 44.0, 45.0, 46.0]
    # gains 0.5, 0, 1, 1 -> 2.5/4 ; losses 0, 0.5, 0, 0 -> 0.5/4
    expected = 100 - 100 / (1 + 2.5 / 0.5)
    assert rsi(closes, 4)[0].value == pytest.approx(round(expected, 2))


def test_rsi_smoothing_is_configurable():
    wilder = rsi(WAVE, 14)
    fast = rsi(WAVE, 14, smoothing=0.5)
    assert wilder[0].value == fast[0].value
    assert [p.value for p in wilder] != [p.value for p in fast]
    with pytest.raises(InvalidParameter):
        rsi(WAVE, 14, smoothing=0.0)
    with pytest.raises(InvalidParameter):
        rsi(WAVE, 14, smoothing=1.5)


# ---------------------------------------------------------------------------
# MACD
# ---------------------------------------------------------------------------


def test_macd_length_and_alignment():
    points = macd(WAVE)
    assert len(points) == 100 - 25 - 8
    assert points[0].index == 33


def test_macd_trend_matches_histogram(generated_series):
    points = macd(generated_series)
    assert points
    for p in points:
        if p.histogram > 0:
            assert p.trend == "bullish"
        elif p.histogram < 0:
            assert p.trend == "bearish"
        else:
            assert p.trend == "neutral"
        assert p.histogram == pytest.approx(p.macd - p.signal, abs=2e-4)


def test_macd_flat_is_neutral():
    points = macd(FLAT)
    assert all(p.histogram == 0 and p.trend == "neutral" for p in points)


def test_macd_rising_series_positive_line():
    assert all(p.macd > 0 for p in macd(RAMP))


def test_macd_parameter_validation():
    with pytest.raises(InvalidParameter):
        macd(WAVE, fast=26, slow=12)
    with pytest.raises(InvalidParameter):
        macd(WAVE, signal=0)
    with pytest.raises(InvalidParameter):
        macd(WAVE[:33])
    assert len(macd(WAVE[:34])) == 1


# ---------------------------------------------------------------------------
# Bollinger Bands
# ---------------------------------------------------------------------------


def test_bollinger_length_and_ordering():
    points = bollinger_bands(WAVE)
    assert len(points) == 81
    for p in points:
        assert p.upper >= p.middle >= p.lower
        assert p.middle == pytest.approx((p.upper + p.lower) / 2, abs=1e-3)


def test_bollinger_middle_matches_sma():
    bands = bollinger_bands(WAVE, 20)
    averages = sma(WAVE, 20)
    assert [b.middle for b in bands] == [a.value for a in averages]


def test_bollinger_population_std():
    window = [2.0, 4.0, 4.0, 4.0, 5.0, 5.0, 7.0, 9.0]
    point = bollinger_bands(window, period=8, std_dev_multiplier=2)[0]
    assert point.middle == pytest.approx(5.0)
    assert point.upper == pytest.approx(9.0)
    assert point.lower == pytest.approx(1.0)
    assert point.bandwidth == pytest.approx(1.6)
    assert point.percent_b == pytest.approx(1.0)


def test_bollinger_flat_band():
    point = bollinger_bands(FLAT)[0]
    assert point.upper == point.middle == point.lower == 42.0
    assert point.bandwidth == 0.0
    assert point.percent_b is None


def test_bollinger_rejects_negative_multiplier():
    with pytest.raises(InvalidParameter):
        bollinger_bands(WAVE, std_dev_multiplier=-1)


# ---------------------------------------------------------------------------
# Support / resistance
# ---------------------------------------------------------------------------


def test_support_resistance_zigzag():
    closes = [100.0, 104.0, 100.0, 96.0] * 15
    records = [
        OHLCVRecord(
            date=date(2024, 1, 1) + timedelta(days=i),
            open=c, high=c + 1, low=c - 1, close=c, volume=1000,
        )
        for i, c in enumerate(closes)
    ]
    levels = support_resistance(records)
    assert 1 <= len(levels) <= 5
    kinds = {lvl.kind for lvl in levels}
    assert kinds == {"support", "resistance"}
    for lvl in levels:
        assert 0.3 < lvl.strength <= 1.0
        assert lvl.touches > 1
        assert lvl.last_touch_date == records[lvl.last_touch_index].date
    strengths = [lvl.strength for lvl in levels]
    assert strengths == sorted(strengths, reverse=True)


def test_support_resistance_validation(make_records):
    records = make_records(WAVE[:40])
    with pytest.raises(InvalidParameter):
        support_resistance(records, lookback=50)
    with pytest.raises(InvalidParameter):
        support_resistance(records, lookback=20, tolerance=0)


def test_support_resistance_monotonic_has_no_levels():
    assert support_resistance(RAMP) == []


# ---------------------------------------------------------------------------
# Bundle / purity
# ---------------------------------------------------------------------------


def test_all_indicators_short_series():
    bundle = calculate_all_indicators(WAVE[:30])
    assert len(bundle.sma20) == 11
    assert bundle.sma50 == []
    assert len(bundle.ema26) == 5
    assert len(bundle.rsi) == 16
    assert bundle.macd == []
    assert bundle.support_resistance == []


def test_all_indicators_full_series(generated_series):
    bundle = calculate_all_indicators(generated_series)
    n = len(generated_series)
    assert len(bundle.sma50) == n - 49
    assert len(bundle.macd) == n - 33
    assert len(bundle.bollinger_bands) == n - 19
    with pytest.raises(InvalidRange):
        calculate_all_indicators([])


def test_indicators_are_pure(generated_series):
    before = [r.model_dump() for r in generated_series]
    assert rsi(generated_series) == rsi(generated_series)
    assert macd(generated_series) == macd(generated_series)
    assert [r.model_dump() for r in generated_series] == before
