"""Scenario catalog – built-in market regimes and the custom constructor.

Built-in trends are daily drift fractions: a bull market drifts up 0.3% a
trading day before noise.
"""

from __future__ import annotations

from datetime import date

from synthmarket.config import settings
from synthmarket.errors import InvalidParameter, InvalidRange, NotFound
from synthmarket.schemas.market import Scenario

NORMAL_VOLATILITY = 0.02
"""Volatility of the ``normal`` regime; profiles are scaled relative to it."""


def _scenario(
    key: str,
    name: str,
    description: str,
    volatility: float,
    trend: float,
    volume_multiplier: float,
) -> Scenario:
    return Scenario(
        key=key,
        name=name,
        description=description,
        volatility=volatility,
        trend=trend,
        volume_multiplier=volume_multiplier,
    )


MARKET_SCENARIOS: dict[str, Scenario] = {
    s.key: s
    for s in (
        _scenario(
            "normal", "Normal Market",
            "Typical market conditions with moderate volatility and balanced trends",
            NORMAL_VOLATILITY, 0.0, 1.0,
        ),
        _scenario(
            "bull_market", "Bull Market",
            "Strong upward trend with moderate volatility",
            0.025, 0.003, 1.2,
        ),
        _scenario(
            "bear_market", "Bear Market",
            "Downward trend with increased volatility",
            0.035, -0.0025, 1.3,
        ),
        _scenario(
            "market_crash", "Market Crash",
            "Severe downward movement with high volatility",
            0.06, -0.005, 2.0,
        ),
        _scenario(
            "high_volatility", "High Volatility",
            "Extreme price swings with uncertain direction",
            0.05, 0.0, 1.5,
        ),
        _scenario(
            "sideways", "Sideways Market",
            "Range-bound trading with low volatility",
            0.015, 0.0, 0.8,
        ),
        _scenario(
            "recovery", "Market Recovery",
            "Gradual upward movement after a decline",
            0.03, 0.002, 1.1,
        ),
        _scenario(
            "earnings_season", "Earnings Season",
            "Increased volatility during earnings announcements",
            0.04, 0.001, 1.4,
        ),
        _scenario(
            "covid_crisis", "COVID Crisis",
            "High uncertainty and extreme market movements",
            0.08, -0.003, 2.5,
        ),
        _scenario(
            "tech_bubble", "Tech Bubble",
            "Rapid growth in technology stocks",
            0.045, 0.004, 1.8,
        ),
    )
}


def get_scenario(name: str) -> Scenario | None:
    """Return the built-in scenario for *name*, or ``None``."""
    return MARKET_SCENARIOS.get(name)


def require_scenario(name: str) -> Scenario:
    """Return the built-in scenario for *name* or raise ``NotFound``."""
    scenario = MARKET_SCENARIOS.get(name)
    if scenario is None:
        raise NotFound(
            f"Unknown scenario '{name}'",
            hint=f"Available: {', '.join(MARKET_SCENARIOS)}",
        )
    return scenario


def list_scenario_names() -> list[str]:
    return list(MARKET_SCENARIOS)


def get_scenario_description(name: str) -> str:
    scenario = MARKET_SCENARIOS.get(name)
    return scenario.description if scenario else "Unknown scenario"


def create_custom_scenario(
    name: str,
    volatility: float,
    trend: float,
    volume_multiplier: float,
    start_date: date | None = None,
    end_date: date | None = None,
    description: str | None = None,
) -> Scenario:
    """Build an ad-hoc scenario from caller-supplied numbers.

    Raises:
        InvalidParameter: ``volatility <= 0`` or ``volume_multiplier < 0``.
        InvalidRange: ``start_date`` is after ``end_date``.
    """
    if volatility <= 0:
        raise InvalidParameter(f"volatility must be > 0, got {volatility}")
    if volume_multiplier < 0:
        raise InvalidParameter(f"volume_multiplier must be >= 0, got {volume_multiplier}")
    if start_date is not None and end_date is not None and start_date > end_date:
        raise InvalidRange(f"start_date {start_date} is after end_date {end_date}")

    return Scenario(
        key=name,
        name=name,
        description=description or f"Custom scenario: {name}",
        volatility=volatility,
        trend=trend,
        volume_multiplier=volume_multiplier,
        start_date=start_date,
        end_date=end_date,
    )


def compare_scenarios(first: str, second: str) -> dict[str, float]:
    """Differences ``first - second`` for the three regime parameters."""
    a = require_scenario(first)
    b = require_scenario(second)
    return {
        "volatility_diff": a.volatility - b.volatility,
        "trend_diff": a.trend - b.trend,
        "volume_diff": a.volume_multiplier - b.volume_multiplier,
    }


def resolve_scenario(scenario: Scenario | str | None) -> Scenario:
    """Accept a scenario object, a built-in key, or ``None`` for the default."""
    if isinstance(scenario, Scenario):
        return scenario
    if scenario is None:
        return require_scenario(settings.default_scenario)
    return require_scenario(scenario)
