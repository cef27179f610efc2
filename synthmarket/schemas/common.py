"""Response envelope shared by every HTTP endpoint."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field


class ErrorDetail(BaseModel):
    """Typed failure: a stable ``error_code`` plus an optional fix-it hint."""

    error_code: str
    message: str
    hint: str | None = None


class Meta(BaseModel):
    execution_ms: float = Field(..., description="Wall-clock milliseconds spent in the handler")
    row_count: int | None = Field(None, description="Records, points or violations returned")


class ApiResponse(BaseModel):
    """``{operation, ok, data, error, meta}``; exactly one of data/error is set."""

    operation: str
    ok: bool
    data: Any | None = None
    error: ErrorDetail | None = None
    meta: Meta

    @classmethod
    def success(
        cls, operation: str, data: Any, execution_ms: float, row_count: int | None = None
    ) -> "ApiResponse":
        return cls(
            operation=operation,
            ok=True,
            data=data,
            meta=Meta(execution_ms=execution_ms, row_count=row_count),
        )

    @classmethod
    def failure(
        cls,
        operation: str,
        error_code: str,
        message: str,
        execution_ms: float,
        hint: str | None = None,
    ) -> "ApiResponse":
        return cls(
            operation=operation,
            ok=False,
            error=ErrorDetail(error_code=error_code, message=message, hint=hint),
            meta=Meta(execution_ms=execution_ms, row_count=0),
        )
