"""Tests for the scenario catalog."""

from __future__ import annotations

from datetime import date

import pytest
from pydantic import ValidationError

from synthmarket.errors import InvalidParameter, InvalidRange, NotFound
from synthmarket.schemas.market import Scenario
from synthmarket.services.scenarios import (
    compare_scenarios,
    create_custom_scenario,
    get_scenario,
    get_scenario_description,
    list_scenario_names,
    require_scenario,
    resolve_scenario,
)


def test_list_scenario_names_ordered():
    names = list_scenario_names()
    assert names[0] == "normal"
    for expected in ("bull_market", "bear_market", "market_crash", "earnings_season"):
        assert expected in names
    assert len(names) == len(set(names))


def test_get_scenario_found_and_missing():
    bull = get_scenario("bull_market")
    assert bull is not None
    assert bull.trend > 0
    assert get_scenario("nope") is None


def test_require_scenario_unknown_raises():
    with pytest.raises(NotFound):
        require_scenario("nope")


def test_builtins_respect_invariants():
    for name in list_scenario_names():
        s = require_scenario(name)
        assert s.volatility > 0
        assert s.volume_multiplier >= 0
        assert s.key == name


def test_bear_and_crash_trend_downward():
    assert require_scenario("bear_market").trend < 0
    assert require_scenario("market_crash").trend < require_scenario("bear_market").trend


def test_custom_scenario_valid():
    s = create_custom_scenario(
        "budget_week", 0.03, -0.001, 1.5, start_date=date(2024, 2, 1), end_date=date(2024, 2, 7)
    )
    assert s.name == "budget_week"
    assert s.description == "Custom scenario: budget_week"
    assert s.volatility == 0.03
    assert s.covers(date(2024, 2, 3))
    assert not s.covers(date(2024, 1, 31))
    assert not s.covers(date(2024, 2, 8))


def test_custom_scenario_zero_volume_multiplier_allowed():
    s = create_custom_scenario("quiet", 0.01, 0.0, 0.0)
    assert s.volume_multiplier == 0.0


@pytest.mark.parametrize("volatility", [0.0, -0.01])
def test_custom_scenario_rejects_non_positive_volatility(volatility):
    with pytest.raises(InvalidParameter):
        create_custom_scenario("bad", volatility, 0.0, 1.0)


def test_custom_scenario_rejects_negative_volume_multiplier():
    with pytest.raises(InvalidParameter):
        create_custom_scenario("bad", 0.02, 0.0, -0.5)


def test_custom_scenario_rejects_inverted_window():
    with pytest.raises(InvalidRange):
        create_custom_scenario(
            "bad", 0.02, 0.0, 1.0, start_date=date(2024, 3, 1), end_date=date(2024, 2, 1)
        )


def test_scenario_model_enforces_invariants():
    with pytest.raises(ValidationError):
        Scenario(key="x", name="x", description="", volatility=0.0)
    with pytest.raises(ValidationError):
        Scenario(key="x", name="x", description="", volatility=0.02, volume_multiplier=-1)


def test_unbounded_scenario_covers_everything():
    assert require_scenario("normal").covers(date(1999, 12, 31))


def test_compare_scenarios():
    diff = compare_scenarios("market_crash", "normal")
    assert diff["volatility_diff"] == pytest.approx(0.04)
    assert diff["trend_diff"] == pytest.approx(-0.005)
    assert diff["volume_diff"] == pytest.approx(1.0)
    with pytest.raises(NotFound):
        compare_scenarios("normal", "nope")


def test_scenario_description():
    assert "upward" in get_scenario_description("bull_market")
    assert get_scenario_description("nope") == "Unknown scenario"


def test_resolve_scenario():
    assert resolve_scenario(None).key == "normal"
    assert resolve_scenario("sideways").key == "sideways"
    custom = create_custom_scenario("c", 0.02, 0.0, 1.0)
    assert resolve_scenario(custom) is custom
    with pytest.raises(NotFound):
        resolve_scenario("nope")
