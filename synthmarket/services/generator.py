"""Price path generator – walks a daily OHLCV process under a scenario.

Multi-symbol generation gives every symbol its own random stream, seeded
from ``crc32("<seed>:<SYMBOL>")``.  A symbol's series therefore depends only
on the seed, its profile and the options, never on which other symbols were
requested alongside it or in what order.
"""

from __future__ import annotations

import logging
import zlib
from datetime import date, timedelta
from typing import Iterable, Iterator

from synthmarket.config import settings
from synthmarket.errors import InvalidRange
from synthmarket.schemas.market import GenerationOptions, OHLCVRecord, Scenario, SymbolProfile
from synthmarket.services.random_stream import RandomStream
from synthmarket.services.scenarios import (
    MARKET_SCENARIOS,
    NORMAL_VOLATILITY,
    require_scenario,
    resolve_scenario,
)
from synthmarket.services.symbols import SYMBOL_PROFILES, require_symbol_profile
from synthmarket.services.validator import validate_series

logger = logging.getLogger("synthmarket.generator")

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

PRICE_FLOOR = 0.01
VOLUME_FLOOR = 1000
PRICE_DECIMALS = 2
OPEN_SPREAD = 0.5  # open moves at most half a volatility from the previous close
VOLUME_JITTER = (0.5, 1.5)


def trading_days(start: date, end: date, include_weekends: bool = False) -> Iterator[date]:
    """Yield calendar days in ``[start, end]``, skipping Sat/Sun by default."""
    for offset in range((end - start).days + 1):
        day = start + timedelta(days=offset)
        if include_weekends or day.weekday() < 5:
            yield day


def stream_seed(seed: int, symbol: str) -> int:
    """Per-symbol stream seed derived from the shared seed."""
    return zlib.crc32(f"{seed}:{symbol.upper()}".encode())


def _price(value: float) -> float:
    return max(PRICE_FLOOR, round(value, PRICE_DECIMALS))


def _daily_record(
    day: date,
    previous_close: float,
    profile: SymbolProfile,
    regime: Scenario,
    stream: RandomStream,
) -> OHLCVRecord:
    """Draw one day.  High/Low bracket Open/Close by construction."""
    sigma = regime.volatility * profile.volatility / NORMAL_VOLATILITY

    daily_return = stream.normal() * sigma + regime.trend
    close = _price(previous_close * (1 + daily_return))
    open_ = _price(previous_close * (1 + stream.uniform(-1.0, 1.0) * sigma * OPEN_SPREAD))

    high = _price(max(open_, close) * (1 + abs(stream.normal()) * sigma))
    low = _price(min(open_, close) * (1 - abs(stream.normal()) * sigma))

    raw_volume = profile.avg_volume * regime.volume_multiplier * stream.uniform(*VOLUME_JITTER)
    volume = max(VOLUME_FLOOR, round(raw_volume))

    return OHLCVRecord(date=day, open=open_, high=high, low=low, close=close, volume=volume)


class PricePathGenerator:
    """Seeded generator of synthetic daily OHLCV series.

    Args:
        seed: Base seed.  ``GenerationOptions.seed`` overrides it per call;
            when both are absent ``settings.default_seed`` is used.
    """

    def __init__(self, seed: int | None = None) -> None:
        self.seed = settings.default_seed if seed is None else seed

    def _seed_for(self, options: GenerationOptions) -> int:
        return self.seed if options.seed is None else options.seed

    def generate(self, profile: SymbolProfile, options: GenerationOptions) -> list[OHLCVRecord]:
        """Generate one record per eligible day in the options' date range.

        Raises:
            InvalidRange: ``start_date`` is after ``end_date``.
            NotFound: ``options.scenario`` names an unknown scenario.
        """
        if options.start_date > options.end_date:
            raise InvalidRange(
                f"start_date {options.start_date} is after end_date {options.end_date}"
            )
        scenario = resolve_scenario(options.scenario)
        baseline = MARKET_SCENARIOS["normal"]
        seed = self._seed_for(options)
        stream = RandomStream(stream_seed(seed, profile.symbol))

        series: list[OHLCVRecord] = []
        previous_close = profile.base_price
        for day in trading_days(options.start_date, options.end_date, options.include_weekends):
            regime = scenario if scenario.covers(day) else baseline
            record = _daily_record(day, previous_close, profile, regime, stream)
            series.append(record)
            previous_close = record.close

        logger.debug(
            "generate symbol=%s scenario=%s seed=%d records=%d",
            profile.symbol, scenario.key, seed, len(series),
        )

        if options.validation_rules is not None:
            violations = validate_series(series, options.validation_rules)
            if violations:
                logger.warning(
                    "generate symbol=%s: %d advisory violation(s), first: %s",
                    profile.symbol, len(violations), violations[0].message,
                )
        return series

    def generate_for_symbol(self, symbol: str, options: GenerationOptions) -> list[OHLCVRecord]:
        """Look up the profile for *symbol* (``NotFound`` if absent) and generate."""
        return self.generate(require_symbol_profile(symbol), options)

    def generate_multi_company_data(
        self,
        symbols: Iterable[str],
        options: GenerationOptions,
    ) -> dict[str, list[OHLCVRecord]]:
        """Generate a series per symbol, keyed by the normalized symbol.

        Blank entries are skipped; duplicates collapse to one series.
        """
        result: dict[str, list[OHLCVRecord]] = {}
        for raw in symbols:
            symbol = raw.strip().upper()
            if not symbol:
                logger.warning("generate_multi_company_data: skipping blank symbol")
                continue
            if symbol in result:
                continue
            result[symbol] = self.generate_for_symbol(symbol, options)

        logger.info(
            "generate_multi_company_data symbols=%d seed=%d",
            len(result), self._seed_for(options),
        )
        return result

    def generate_all_companies_data(
        self, options: GenerationOptions
    ) -> dict[str, list[OHLCVRecord]]:
        return self.generate_multi_company_data([p.symbol for p in SYMBOL_PROFILES], options)

    def generate_scenario_data(
        self,
        scenario_name: str,
        symbols: Iterable[str],
        options: GenerationOptions,
    ) -> dict[str, list[OHLCVRecord]]:
        """Generate *symbols* under the built-in scenario *scenario_name*."""
        scenario = require_scenario(scenario_name)
        return self.generate_multi_company_data(
            symbols, options.model_copy(update={"scenario": scenario})
        )
