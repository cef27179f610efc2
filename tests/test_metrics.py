"""Tests for pure metric helpers."""

from __future__ import annotations

import pytest

from synthmarket.services.metrics import max_drawdown, mean, population_std, simple_return


def test_simple_return():
    assert simple_return(100.0, 110.0) == pytest.approx(0.10)
    assert simple_return(0.0, 5.0) is None


def test_max_drawdown():
    assert max_drawdown([100, 120, 90, 130]) == pytest.approx(-0.25)
    assert max_drawdown([100, 101, 102]) == 0.0
    assert max_drawdown([100]) is None


def test_max_drawdown_skips_non_positive_peaks():
    assert max_drawdown([0.0, 5.0, 4.0]) == pytest.approx(-0.2)
    assert max_drawdown([0.0, 0.0]) == 0.0


def test_mean_and_population_std():
    assert mean([]) == 0.0
    assert mean([1, 2, 3, 4]) == pytest.approx(2.5)
    assert population_std([2, 4, 4, 4, 5, 5, 7, 9]) == pytest.approx(2.0)
    assert population_std([5, 5, 5]) == 0.0
