"""FastAPI app – HTTP endpoints over the synthetic market engine.

Run with:
    python -m synthmarket.api.server
    # → http://localhost:8000/health
    # → http://localhost:8000/docs  (Swagger UI)
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import Body, FastAPI, Query
from fastapi.responses import JSONResponse

from synthmarket.api.handlers import (
    handle_get_analysis,
    handle_get_indicators,
    handle_get_latest_price,
    handle_get_price_history,
    handle_get_scenario,
    handle_get_symbol,
    handle_get_trading_signal,
    handle_list_scenarios,
    handle_list_symbols,
    handle_validate_series,
)
from synthmarket.config import settings

logger = logging.getLogger("synthmarket.api.server")

ERROR_STATUS: dict[str, int] = {
    "NOT_FOUND": 404,
    "INVALID_PARAMETER": 400,
    "INVALID_RANGE": 400,
    "INVALID_INPUT": 400,
    "VALIDATION_FAILED": 422,
}


def _respond(result: dict) -> JSONResponse:
    """Map an envelope to its HTTP status."""
    if result["ok"]:
        return JSONResponse(content=result)
    code = result["error"]["error_code"]
    return JSONResponse(content=result, status_code=ERROR_STATUS.get(code, 500))


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Server starting (env=%s)", settings.app_env)
    yield
    logger.info("Server shutting down")


app = FastAPI(
    title="Synthetic Market Data",
    description="Seeded synthetic OHLCV series, analysis and technical indicators.",
    version=settings.service_version,
    lifespan=lifespan,
)


# ── Health ────────────────────────────────────────────────────────────────────


@app.get("/health")
async def health():
    return {"status": "ok", "version": settings.service_version}


# ── Catalogs ──────────────────────────────────────────────────────────────────


@app.get("/scenarios")
async def list_scenarios():
    return _respond(await handle_list_scenarios({}))


@app.get("/scenarios/{name}")
async def get_scenario(name: str):
    return _respond(await handle_get_scenario({"name": name}))


@app.get("/symbols")
async def list_symbols(sector: str | None = Query(None)):
    return _respond(await handle_list_symbols({"sector": sector}))


@app.get("/symbols/{symbol}")
async def get_symbol(symbol: str):
    return _respond(await handle_get_symbol({"symbol": symbol}))


# ── Series ────────────────────────────────────────────────────────────────────


def _series_args(
    symbol: str,
    start_date: str,
    end_date: str,
    scenario: str | None,
    seed: int | None,
    include_weekends: bool,
) -> dict:
    return {
        "symbol": symbol,
        "start_date": start_date,
        "end_date": end_date,
        "scenario": scenario,
        "seed": seed,
        "include_weekends": include_weekends,
    }


@app.get("/stocks/{symbol}/history")
async def get_price_history(
    symbol: str,
    start_date: str = Query(...),
    end_date: str = Query(...),
    scenario: str | None = Query(None),
    seed: int | None = Query(None),
    include_weekends: bool = Query(False),
):
    args = _series_args(symbol, start_date, end_date, scenario, seed, include_weekends)
    return _respond(await handle_get_price_history(args))


@app.get("/stocks/{symbol}/analysis")
async def get_analysis(
    symbol: str,
    start_date: str = Query(...),
    end_date: str = Query(...),
    scenario: str | None = Query(None),
    seed: int | None = Query(None),
    include_weekends: bool = Query(False),
):
    args = _series_args(symbol, start_date, end_date, scenario, seed, include_weekends)
    return _respond(await handle_get_analysis(args))


@app.get("/stocks/{symbol}/indicators")
async def get_indicators(
    symbol: str,
    start_date: str = Query(...),
    end_date: str = Query(...),
    indicator: str = Query("all"),
    period: int | None = Query(None),
    scenario: str | None = Query(None),
    seed: int | None = Query(None),
    include_weekends: bool = Query(False),
):
    args = _series_args(symbol, start_date, end_date, scenario, seed, include_weekends)
    args.update(indicator=indicator, period=period)
    return _respond(await handle_get_indicators(args))


@app.get("/stocks/{symbol}/signal")
async def get_trading_signal(
    symbol: str,
    start_date: str = Query(...),
    end_date: str = Query(...),
    timeframe: str = Query("medium_term"),
    scenario: str | None = Query(None),
    seed: int | None = Query(None),
    include_weekends: bool = Query(False),
):
    args = _series_args(symbol, start_date, end_date, scenario, seed, include_weekends)
    args["timeframe"] = timeframe
    return _respond(await handle_get_trading_signal(args))


@app.get("/stocks/{symbol}/latest")
async def get_latest_price(
    symbol: str,
    start_date: str = Query(...),
    end_date: str = Query(...),
    scenario: str | None = Query(None),
    seed: int | None = Query(None),
    include_weekends: bool = Query(False),
):
    args = _series_args(symbol, start_date, end_date, scenario, seed, include_weekends)
    return _respond(await handle_get_latest_price(args))


# ── Validation ────────────────────────────────────────────────────────────────


@app.post("/validate")
async def validate_series(payload: dict = Body(...)):
    return _respond(await handle_validate_series(payload))


# ── Run via uvicorn ───────────────────────────────────────────────────────────

if __name__ == "__main__":
    import uvicorn

    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )
    uvicorn.run(
        "synthmarket.api.server:app",
        host=settings.fastapi_host,
        port=settings.fastapi_port,
        reload=(settings.app_env == "development"),
    )
