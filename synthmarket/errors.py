"""Typed failures raised by the engine."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from synthmarket.schemas.market import Violation


class SynthMarketError(Exception):
    """Base class; ``error_code`` is what the HTTP layer reports."""

    error_code = "INTERNAL_ERROR"

    def __init__(self, message: str, hint: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.hint = hint


class NotFound(SynthMarketError):
    """Unknown symbol or scenario name."""

    error_code = "NOT_FOUND"


class InvalidParameter(SynthMarketError):
    """Non-positive volatility, negative multiplier, bad indicator period."""

    error_code = "INVALID_PARAMETER"


class InvalidRange(SynthMarketError):
    """Start date after end date, or not enough history."""

    error_code = "INVALID_RANGE"


class ValidationFailed(SynthMarketError):
    """Data failed validation and the caller asked for that to be fatal."""

    error_code = "VALIDATION_FAILED"

    def __init__(self, violations: list[Violation], hint: str | None = None) -> None:
        self.violations = list(violations)
        first = self.violations[0].message if self.violations else "no details"
        super().__init__(
            f"{len(self.violations)} validation violation(s); first: {first}",
            hint=hint,
        )
