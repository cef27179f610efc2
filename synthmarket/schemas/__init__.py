"""Pydantic schemas."""

from synthmarket.schemas.common import ApiResponse
from synthmarket.schemas.indicators import (
    BollingerPoint,
    IndicatorBundle,
    MACDPoint,
    MovingAveragePoint,
    RSIPoint,
    SignalWeights,
    SupportResistanceLevel,
    TradingSignal,
)
from synthmarket.schemas.market import (
    AnalysisResult,
    GenerationOptions,
    OHLCVRecord,
    Scenario,
    SymbolProfile,
    ValidationRules,
    Violation,
)

__all__ = [
    "ApiResponse",
    "AnalysisResult",
    "GenerationOptions",
    "OHLCVRecord",
    "Scenario",
    "SymbolProfile",
    "ValidationRules",
    "Violation",
    "BollingerPoint",
    "IndicatorBundle",
    "MACDPoint",
    "MovingAveragePoint",
    "RSIPoint",
    "SignalWeights",
    "SupportResistanceLevel",
    "TradingSignal",
]
