"""Market data value types: profiles, scenarios, OHLCV records, options."""

from __future__ import annotations

import datetime as dt

from pydantic import BaseModel, ConfigDict, Field, model_validator


class SymbolProfile(BaseModel):
    """Per-instrument generation parameters."""

    model_config = ConfigDict(frozen=True)

    symbol: str
    name: str
    sector: str
    industry: str
    exchange: str
    base_price: float = Field(..., gt=0)
    volatility: float = Field(..., gt=0, description="Fraction of price per day")
    avg_volume: int = Field(..., gt=0)
    market_cap: float | None = Field(None, description="Crores of INR")
    pe_ratio: float | None = None
    dividend_yield: float | None = None
    description: str = ""


class Scenario(BaseModel):
    """Named bundle of generation parameters simulating a market regime."""

    model_config = ConfigDict(frozen=True)

    key: str
    name: str
    description: str
    volatility: float = Field(..., gt=0, description="Absolute daily volatility")
    trend: float = Field(0.0, description="Signed daily drift fraction")
    volume_multiplier: float = Field(1.0, ge=0)
    start_date: dt.date | None = None
    end_date: dt.date | None = None

    @model_validator(mode="after")
    def _check_window(self) -> Scenario:
        if self.start_date and self.end_date and self.start_date > self.end_date:
            raise ValueError("start_date must not be after end_date")
        return self

    def covers(self, day: dt.date) -> bool:
        """True if *day* falls inside the validity window (or there is none)."""
        if self.start_date is not None and day < self.start_date:
            return False
        if self.end_date is not None and day > self.end_date:
            return False
        return True


class OHLCVRecord(BaseModel):
    """Single trading day.

    Relationships between the prices are not enforced here so that
    externally supplied data can be loaded and then reported on by the
    validator.
    """

    model_config = ConfigDict(frozen=True)

    date: dt.date
    open: float
    high: float
    low: float
    close: float
    volume: int
    adjusted_close: float | None = None


class ValidationRules(BaseModel):
    """Bounds used by the data validator. Change limits are fractions."""

    model_config = ConfigDict(frozen=True)

    min_price: float = 0.01
    max_price: float = 10_000_000.0
    min_volume: int = 0
    max_volume: int = 10**12
    max_daily_change: float = 0.5
    max_gap: float = 0.5


class GenerationOptions(BaseModel):
    """Date range and regime for a generation call.

    ``scenario`` may be a :class:`Scenario`, the key of a built-in
    scenario, or ``None`` for the configured default.
    """

    model_config = ConfigDict(frozen=True)

    start_date: dt.date
    end_date: dt.date
    scenario: Scenario | str | None = None
    validation_rules: ValidationRules | None = None
    include_weekends: bool = False
    seed: int | None = None


class Violation(BaseModel):
    """One failed validation rule."""

    rule: str
    message: str
    value: float | None = None
    date: dt.date | None = None


class AnalysisResult(BaseModel):
    """Aggregate statistics over a series. Percent fields are pre-scaled."""

    avg_volume: float
    avg_change_percent: float
    max_gain: float
    max_loss: float
    volatility: float
    total_days: int
    total_return_percent: float
    max_drawdown_percent: float
