"""Tests for the HTTP handler functions called directly.

These cover argument parsing and envelope formatting without going
through the ASGI app.
"""

from __future__ import annotations

import pytest

from synthmarket.api.handlers import (
    INDICATORS,
    _error_response,
    _ok,
    handle_get_indicators,
    handle_get_price_history,
    handle_get_scenario,
    handle_get_trading_signal,
    handle_validate_series,
)

# ---------------------------------------------------------------------------
# Helper tests
# ---------------------------------------------------------------------------


def test_error_response_shape():
    """_error_response should produce a well-formed ApiResponse dict."""
    resp = _error_response("test_operation", "TEST_ERR", "Something broke", 1.23, hint="Try again")
    assert resp["operation"] == "test_operation"
    assert resp["ok"] is False
    assert resp["error"]["error_code"] == "TEST_ERR"
    assert resp["error"]["hint"] == "Try again"
    assert resp["meta"]["execution_ms"] == 1.23


def test_ok_response_shape():
    """_ok should produce a well-formed ApiResponse dict."""
    resp = _ok("test_operation", {"foo": "bar"}, 2.34, row_count=5)
    assert resp["ok"] is True
    assert resp["data"] == {"foo": "bar"}
    assert resp["meta"]["row_count"] == 5


# ---------------------------------------------------------------------------
# Handler tests
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
async def test_missing_dates_are_invalid_parameter():
    resp = await handle_get_price_history({"symbol": "TCS"})
    assert resp["ok"] is False
    assert resp["error"]["error_code"] == "INVALID_PARAMETER"
    assert "start_date" in resp["error"]["message"]


@pytest.mark.asyncio
async def test_missing_symbol():
    resp = await handle_get_price_history({"start_date": "2024-01-01", "end_date": "2024-01-05"})
    assert resp["error"]["error_code"] == "INVALID_PARAMETER"


@pytest.mark.asyncio
async def test_non_integer_seed_is_invalid_parameter():
    resp = await handle_get_price_history(
        {"symbol": "TCS", "start_date": "2024-01-01", "end_date": "2024-01-05", "seed": "abc"}
    )
    assert resp["ok"] is False
    assert resp["error"]["error_code"] == "INVALID_PARAMETER"


@pytest.mark.asyncio
async def test_non_integer_period_is_invalid_parameter():
    resp = await handle_get_indicators(
        {
            "symbol": "TCS",
            "start_date": "2024-01-01",
            "end_date": "2024-03-29",
            "indicator": "sma",
            "period": "ten",
        }
    )
    assert resp["error"]["error_code"] == "INVALID_PARAMETER"


@pytest.mark.asyncio
async def test_scenario_hint_lists_names():
    resp = await handle_get_scenario({"name": "nope"})
    assert resp["error"]["error_code"] == "NOT_FOUND"
    assert "normal" in resp["error"]["hint"]


@pytest.mark.asyncio
async def test_every_indicator_dispatches():
    args = {"symbol": "WIPRO", "start_date": "2024-01-01", "end_date": "2024-06-30", "seed": 3}
    for name in INDICATORS:
        resp = await handle_get_indicators({**args, "indicator": name})
        assert resp["ok"] is True, name
        assert resp["data"]["indicator"] == name


@pytest.mark.asyncio
async def test_validate_with_rules():
    record = {"date": "2024-01-02", "open": 5, "high": 6, "low": 4, "close": 5, "volume": 10}
    resp = await handle_validate_series({"records": [record], "rules": {"min_price": 10}})
    assert resp["ok"] is True
    assert resp["data"]["valid"] is False
    assert {v["rule"] for v in resp["data"]["violations"]} == {"price_range"}


@pytest.mark.asyncio
async def test_non_list_records_are_invalid_input():
    resp = await handle_validate_series({"records": 5})
    assert resp["ok"] is False
    assert resp["error"]["error_code"] == "INVALID_INPUT"
    assert "records must be a list" in resp["error"]["message"]


@pytest.mark.asyncio
async def test_include_weekends_string_flags():
    args = {"symbol": "TCS", "start_date": "2024-01-06", "end_date": "2024-01-07"}
    resp = await handle_get_price_history({**args, "include_weekends": "false"})
    assert resp["ok"] is True
    assert resp["meta"]["row_count"] == 0

    resp = await handle_get_price_history({**args, "include_weekends": "true"})
    assert resp["meta"]["row_count"] == 2

    resp = await handle_get_price_history({**args, "include_weekends": "maybe"})
    assert resp["error"]["error_code"] == "INVALID_PARAMETER"


@pytest.mark.asyncio
async def test_trading_signal_timeframes():
    args = {"symbol": "INFY", "start_date": "2024-01-01", "end_date": "2024-06-30", "seed": 7}
    resp = await handle_get_trading_signal(args)
    assert resp["ok"] is True
    assert set(resp["data"]["signals"]) == {"medium_term"}
    signal = resp["data"]["signals"]["medium_term"]
    assert signal["action"] in {"buy", "sell", "hold"}
    assert isinstance(signal["alerts"], list)

    resp = await handle_get_trading_signal({**args, "timeframe": "all"})
    assert set(resp["data"]["signals"]) == {"short_term", "medium_term", "long_term"}

    resp = await handle_get_trading_signal({**args, "timeframe": "hourly"})
    assert resp["error"]["error_code"] == "INVALID_PARAMETER"


@pytest.mark.asyncio
async def test_trading_signal_needs_history():
    resp = await handle_get_trading_signal(
        {"symbol": "INFY", "start_date": "2024-01-01", "end_date": "2024-01-31"}
    )
    assert resp["error"]["error_code"] == "INVALID_PARAMETER"
