"""HTTP handlers – the bridge between request arguments and the engine."""

from __future__ import annotations

import logging
import time
from datetime import date
from typing import Any, Callable

from pydantic import ValidationError

from synthmarket.api.cache import latest_price_cache
from synthmarket.errors import InvalidParameter, SynthMarketError
from synthmarket.schemas.common import ApiResponse
from synthmarket.schemas.market import GenerationOptions, OHLCVRecord, ValidationRules
from synthmarket.services import analyzer, indicators, scenarios, signals, symbols, validator
from synthmarket.services.generator import PricePathGenerator

logger = logging.getLogger("synthmarket.api.handlers")

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _elapsed(t0: float) -> float:
    return round((time.perf_counter() - t0) * 1000, 2)


def _error_response(
    operation: str, code: str, message: str, elapsed: float, hint: str | None = None
) -> dict:
    return ApiResponse.failure(operation, code, message, elapsed, hint=hint).model_dump()


def _ok(operation: str, data, elapsed: float, row_count: int | None = None) -> dict:
    return ApiResponse.success(operation, data, elapsed, row_count=row_count).model_dump()


def _failure(operation: str, exc: SynthMarketError, t0: float) -> dict:
    logger.info("%s failed code=%s message=%s", operation, exc.error_code, exc.message)
    return _error_response(operation, exc.error_code, exc.message, _elapsed(t0), hint=exc.hint)


def _invalid_input(operation: str, exc: ValidationError, t0: float) -> dict:
    first = exc.errors()[0] if exc.errors() else {}
    where = ".".join(str(p) for p in first.get("loc", ()))
    msg = first.get("msg", "invalid input")
    message = f"{where}: {msg}" if where else msg
    return _error_response(operation, "INVALID_INPUT", message, _elapsed(t0))


def _parse_date(value: Any, field: str) -> date:
    if isinstance(value, date):
        return value
    if not value:
        raise InvalidParameter(f"{field} is required", hint="Use ISO format YYYY-MM-DD.")
    try:
        return date.fromisoformat(str(value))
    except ValueError:
        raise InvalidParameter(
            f"{field} '{value}' is not a valid date", hint="Use ISO format YYYY-MM-DD."
        ) from None


TRUE_FLAGS = {"1", "true", "yes", "on"}
FALSE_FLAGS = {"0", "false", "no", "off", ""}


def _parse_flag(value: Any, field: str) -> bool:
    if value is None:
        return False
    if isinstance(value, bool):
        return value
    text = str(value).strip().lower()
    if text in TRUE_FLAGS:
        return True
    if text in FALSE_FLAGS:
        return False
    raise InvalidParameter(f"{field} '{value}' is not a boolean", hint="Use true or false.")


def _options_from(arguments: dict) -> GenerationOptions:
    seed = arguments.get("seed")
    try:
        return GenerationOptions(
            start_date=_parse_date(arguments.get("start_date"), "start_date"),
            end_date=_parse_date(arguments.get("end_date"), "end_date"),
            scenario=arguments.get("scenario") or None,
            include_weekends=_parse_flag(arguments.get("include_weekends"), "include_weekends"),
            seed=int(seed) if seed is not None else None,
        )
    except (ValueError, ValidationError) as exc:
        message = str(exc).splitlines()[0] if str(exc) else "invalid generation options"
        raise InvalidParameter(message, hint="seed must be an integer; scenario a known name.") from None


def _require(arguments: dict, key: str) -> str:
    value = arguments.get(key, "")
    if not value or not str(value).strip():
        raise InvalidParameter(f"{key} is required")
    return str(value).strip()


def _generate(arguments: dict) -> tuple[str, list[OHLCVRecord]]:
    symbol = _require(arguments, "symbol").upper()
    series = PricePathGenerator().generate_for_symbol(symbol, _options_from(arguments))
    return symbol, series


# ---------------------------------------------------------------------------
# Catalog handlers
# ---------------------------------------------------------------------------


async def handle_list_scenarios(arguments: dict) -> dict:
    t0 = time.perf_counter()
    data = [
        scenarios.require_scenario(name).model_dump(mode="json")
        for name in scenarios.list_scenario_names()
    ]
    return _ok("list_scenarios", data, _elapsed(t0), row_count=len(data))


async def handle_get_scenario(arguments: dict) -> dict:
    """Args: {"name": str}"""
    t0 = time.perf_counter()
    try:
        scenario = scenarios.require_scenario(_require(arguments, "name"))
    except SynthMarketError as exc:
        return _failure("get_scenario", exc, t0)
    return _ok("get_scenario", scenario.model_dump(mode="json"), _elapsed(t0), row_count=1)


async def handle_list_symbols(arguments: dict) -> dict:
    """Args: {"sector": str | None}"""
    t0 = time.perf_counter()
    sector = arguments.get("sector")
    profiles = (
        symbols.get_profiles_by_sector(sector)
        if sector
        else [symbols.require_symbol_profile(s) for s in symbols.list_symbols()]
    )
    data = [p.model_dump(mode="json") for p in profiles]
    return _ok("list_symbols", data, _elapsed(t0), row_count=len(data))


async def handle_get_symbol(arguments: dict) -> dict:
    """Args: {"symbol": str}"""
    t0 = time.perf_counter()
    try:
        profile = symbols.require_symbol_profile(_require(arguments, "symbol"))
    except SynthMarketError as exc:
        return _failure("get_symbol", exc, t0)
    return _ok("get_symbol", profile.model_dump(mode="json"), _elapsed(t0), row_count=1)


# ---------------------------------------------------------------------------
# Series handlers
# ---------------------------------------------------------------------------


async def handle_get_price_history(arguments: dict) -> dict:
    """Generate a synthetic OHLCV series.

    Args:
        arguments: {"symbol": str, "start_date": str, "end_date": str,
                    "scenario": str | None, "seed": int | None,
                    "include_weekends": bool}
    """
    t0 = time.perf_counter()
    try:
        symbol, series = _generate(arguments)
    except SynthMarketError as exc:
        return _failure("get_price_history", exc, t0)

    elapsed = _elapsed(t0)
    logger.info("get_price_history symbol=%s rows=%d ms=%.1f", symbol, len(series), elapsed)
    return _ok(
        "get_price_history",
        {"symbol": symbol, "prices": [r.model_dump(mode="json") for r in series]},
        elapsed,
        row_count=len(series),
    )


async def handle_get_analysis(arguments: dict) -> dict:
    """Generate a series and summarize it. Args as for price history."""
    t0 = time.perf_counter()
    try:
        symbol, series = _generate(arguments)
        result = analyzer.analyze(series)
    except SynthMarketError as exc:
        return _failure("get_analysis", exc, t0)

    return _ok(
        "get_analysis",
        {"symbol": symbol, "analysis": result.model_dump(mode="json")},
        _elapsed(t0),
        row_count=1,
    )


def _with_period(fn: Callable, default: int) -> Callable:
    return lambda series, period: fn(series, default if period is None else period)


INDICATORS: dict[str, Callable[[list[OHLCVRecord], int | None], list]] = {
    "sma": _with_period(indicators.sma, 20),
    "ema": _with_period(indicators.ema, 20),
    "rsi": _with_period(indicators.rsi, 14),
    "macd": lambda series, period: indicators.macd(series),
    "bollinger": _with_period(indicators.bollinger_bands, 20),
    "support_resistance": _with_period(indicators.support_resistance, 50),
}


async def handle_get_indicators(arguments: dict) -> dict:
    """Generate a series and compute one indicator (or ``all``).

    Args:
        arguments: price-history args plus {"indicator": str, "period": int | None}
    """
    t0 = time.perf_counter()
    name = str(arguments.get("indicator") or "all").lower()
    period = arguments.get("period")
    try:
        if name != "all" and name not in INDICATORS:
            raise InvalidParameter(
                f"Unknown indicator '{name}'",
                hint=f"Use one of: all, {', '.join(INDICATORS)}",
            )
        symbol, series = _generate(arguments)
        if name == "all":
            data = indicators.calculate_all_indicators(series).model_dump(mode="json")
            rows = None
        else:
            if period is not None and not str(period).lstrip("-").isdigit():
                raise InvalidParameter(f"period '{period}' is not an integer")
            points = INDICATORS[name](series, int(period) if period is not None else None)
            data = [p.model_dump(mode="json") for p in points]
            rows = len(points)
    except SynthMarketError as exc:
        return _failure("get_indicators", exc, t0)

    return _ok(
        "get_indicators",
        {"symbol": symbol, "indicator": name, "values": data},
        _elapsed(t0),
        row_count=rows,
    )


async def handle_get_trading_signal(arguments: dict) -> dict:
    """Buy/sell/hold call for the last generated bar.

    Args:
        arguments: price-history args plus {"timeframe": str | None}, one of
            the signal presets or ``all``; defaults to ``medium_term``.
    """
    t0 = time.perf_counter()
    timeframe = str(arguments.get("timeframe") or "medium_term").lower()
    try:
        if timeframe != "all" and timeframe not in signals.SIGNAL_TIMEFRAMES:
            raise InvalidParameter(
                f"Unknown timeframe '{timeframe}'",
                hint=f"Use one of: all, {', '.join(signals.SIGNAL_TIMEFRAMES)}",
            )
        symbol, series = _generate(arguments)
        if timeframe == "all":
            result = signals.multi_timeframe_signals(series)
        else:
            weights = signals.SIGNAL_TIMEFRAMES[timeframe]
            result = {timeframe: signals.trading_signal(series, weights)}
    except SynthMarketError as exc:
        return _failure("get_trading_signal", exc, t0)

    data = {
        name: {**signal.model_dump(mode="json"), "alerts": signals.signal_alerts(signal)}
        for name, signal in result.items()
    }
    return _ok(
        "get_trading_signal",
        {"symbol": symbol, "signals": data},
        _elapsed(t0),
        row_count=len(data),
    )


async def handle_get_latest_price(arguments: dict) -> dict:
    """Last record of the generated series, served from the TTL cache when warm."""
    t0 = time.perf_counter()
    try:
        options = _options_from(arguments)
        symbol = _require(arguments, "symbol").upper()
    except SynthMarketError as exc:
        return _failure("get_latest_price", exc, t0)

    key = ":".join(
        str(part)
        for part in (
            symbol, options.start_date, options.end_date, options.scenario,
            options.seed, options.include_weekends,
        )
    )
    cached = await latest_price_cache.get(key)
    if cached is not None:
        return _ok("get_latest_price", {**cached, "cached": True}, _elapsed(t0), row_count=1)

    try:
        series = PricePathGenerator().generate_for_symbol(symbol, options)
    except SynthMarketError as exc:
        return _failure("get_latest_price", exc, t0)
    if not series:
        return _error_response(
            "get_latest_price", "INVALID_RANGE", "No trading days in the requested range",
            _elapsed(t0), hint="Widen the date range or include weekends.",
        )

    last = series[-1]
    previous_close = series[-2].close if len(series) > 1 else None
    change = round(last.close - previous_close, 2) if previous_close is not None else None
    payload = {
        "symbol": symbol,
        "price": last.model_dump(mode="json"),
        "change": change,
        "change_percent": (
            round(change / previous_close * 100, 4) if change is not None else None
        ),
    }
    await latest_price_cache.set(key, payload)
    return _ok("get_latest_price", {**payload, "cached": False}, _elapsed(t0), row_count=1)


async def handle_validate_series(arguments: dict) -> dict:
    """Validate caller-supplied records.

    Args:
        arguments: {"records": list[dict], "rules": dict | None}
    """
    t0 = time.perf_counter()
    raw_records = arguments.get("records") or []
    if not isinstance(raw_records, list):
        return _error_response(
            "validate_series",
            "INVALID_INPUT",
            f"records must be a list, got {type(raw_records).__name__}",
            _elapsed(t0),
        )
    try:
        records = [OHLCVRecord.model_validate(r) for r in raw_records]
        raw_rules = arguments.get("rules")
        rules = ValidationRules.model_validate(raw_rules) if raw_rules else None
    except ValidationError as exc:
        return _invalid_input("validate_series", exc, t0)

    violations = validator.validate_series(records, rules)
    elapsed = _elapsed(t0)
    logger.info(
        "validate_series records=%d violations=%d ms=%.1f", len(records), len(violations), elapsed
    )
    return _ok(
        "validate_series",
        {
            "valid": not violations,
            "violations": [v.model_dump(mode="json") for v in violations],
        },
        elapsed,
        row_count=len(violations),
    )
