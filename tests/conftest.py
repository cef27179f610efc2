"""Shared pytest fixtures – small deterministic profiles, options and series."""

from __future__ import annotations

from datetime import date, timedelta

import pytest

from synthmarket.schemas.market import GenerationOptions, OHLCVRecord, SymbolProfile
from synthmarket.services.generator import PricePathGenerator


def _make_records(closes: list[float], start: date = date(2024, 1, 1)) -> list[OHLCVRecord]:
    """Consecutive-day records whose open is the previous close."""
    records: list[OHLCVRecord] = []
    prev = closes[0]
    for i, c in enumerate(closes):
        records.append(
            OHLCVRecord(
                date=start + timedelta(days=i),
                open=prev,
                high=max(prev, c) + 1,
                low=max(0.01, min(prev, c) - 1),
                close=c,
                volume=1_000_000 + i * 1000,
            )
        )
        prev = c
    return records


@pytest.fixture
def make_records():
    """Factory: build consecutive-day records from a list of closes."""
    return _make_records


@pytest.fixture
def profile() -> SymbolProfile:
    return SymbolProfile(
        symbol="TEST",
        name="Test Industries",
        sector="Others",
        industry="Testing",
        exchange="NSE",
        base_price=100.0,
        volatility=0.02,
        avg_volume=1_000_000,
    )


@pytest.fixture
def january_options() -> GenerationOptions:
    return GenerationOptions(start_date=date(2024, 1, 1), end_date=date(2024, 1, 31))


@pytest.fixture
def year_options() -> GenerationOptions:
    return GenerationOptions(start_date=date(2024, 1, 1), end_date=date(2024, 12, 31))


@pytest.fixture
def generator() -> PricePathGenerator:
    return PricePathGenerator(seed=1234)


@pytest.fixture
def generated_series(generator, profile, year_options) -> list[OHLCVRecord]:
    """About 260 weekday records for the TEST profile."""
    return generator.generate(profile, year_options)
