"""Performance benchmarks for generation and indicators.

Run:
    python -m scripts.benchmark
"""

from __future__ import annotations

import time
from datetime import date

from synthmarket.schemas.market import GenerationOptions
from synthmarket.services import analyzer, indicators, signals
from synthmarket.services.generator import PricePathGenerator


def _bench(label: str, fn, iterations: int = 100):
    """Call *fn* *iterations* times and print average wall-clock ms."""
    # Warm up
    fn()

    start = time.perf_counter()
    for _ in range(iterations):
        fn()
    elapsed = time.perf_counter() - start

    avg_ms = elapsed / iterations * 1000
    print(f"  {label}: {avg_ms:.2f} ms avg ({iterations} iterations)")
    return avg_ms


def main():
    print("Running benchmarks …\n")
    generator = PricePathGenerator(seed=7)
    year = GenerationOptions(start_date=date(2024, 1, 1), end_date=date(2024, 12, 31))
    series = generator.generate_for_symbol("RELIANCE", year)

    _bench(
        "generate_for_symbol('RELIANCE', 1 year)",
        lambda: generator.generate_for_symbol("RELIANCE", year),
    )
    _bench(
        "generate_all_companies_data(1 year)",
        lambda: generator.generate_all_companies_data(year),
        iterations=10,
    )
    _bench("analyze(1 year)", lambda: analyzer.analyze(series), iterations=200)
    _bench("rsi(1 year)", lambda: indicators.rsi(series), iterations=200)
    _bench("macd(1 year)", lambda: indicators.macd(series), iterations=200)
    _bench(
        "calculate_all_indicators(1 year)",
        lambda: indicators.calculate_all_indicators(series),
        iterations=50,
    )
    _bench("trading_signal(1 year)", lambda: signals.trading_signal(series), iterations=50)

    print("\nDone.")


if __name__ == "__main__":
    main()
