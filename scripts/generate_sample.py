#!/usr/bin/env python3
"""Sample generator – prints a per-symbol summary for every built-in scenario.

Run:
    python -m scripts.generate_sample
"""

from __future__ import annotations

from datetime import date

from synthmarket.schemas.market import GenerationOptions
from synthmarket.services.analyzer import analyze
from synthmarket.services.generator import PricePathGenerator
from synthmarket.services.scenarios import list_scenario_names
from synthmarket.services.validator import validate_series

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

START = date(2024, 1, 1)
END = date(2024, 6, 28)
SYMBOLS = ["RELIANCE", "TCS", "HDFCBANK", "TATAMOTORS"]


def summarize_scenario(generator: PricePathGenerator, scenario: str) -> None:
    options = GenerationOptions(start_date=START, end_date=END, scenario=scenario)
    data = generator.generate_multi_company_data(SYMBOLS, options)
    print(f"\n{scenario}")
    for symbol, series in data.items():
        stats = analyze(series)
        issues = len(validate_series(series))
        print(
            f"  {symbol:<10} days={stats.total_days:>3} "
            f"close={series[-1].close:>10.2f} "
            f"return={stats.total_return_percent:>8.2f}% "
            f"vol={stats.volatility:>6.2f}% "
            f"mdd={stats.max_drawdown_percent:>7.2f}% "
            f"issues={issues}"
        )


def main() -> None:
    print(f"Generating {START} .. {END} …")
    generator = PricePathGenerator()
    for scenario in list_scenario_names():
        summarize_scenario(generator, scenario)
    print("\nDone.")


if __name__ == "__main__":
    main()
