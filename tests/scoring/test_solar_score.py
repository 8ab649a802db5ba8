import math

import pytest

from solarsite.scoring.solar import calculate_solar_score, payback_tier, radiation_tier


def test_reference_score_is_97():
    assert calculate_solar_score(1800.0, 0.9, 5.0) == 97


@pytest.mark.parametrize("radiation,tier", [(1600, 100), (1599.9, 80), (1400, 80), (1200, 60), (1000, 40), (999, 20)])
def test_radiation_tiers(radiation, tier):
    assert radiation_tier(radiation) == tier


@pytest.mark.parametrize("payback,tier", [(6.99, 100), (7, 80), (10, 60), (15, 40), (20, 20), (math.inf, 20)])
def test_payback_tiers(payback, tier):
    assert payback_tier(payback) == tier


def test_score_range_and_infinite_payback():
    assert calculate_solar_score(2000.0, 1.0, 1.0) == 100
    worst = calculate_solar_score(500.0, 0.0, math.inf)
    assert worst == 14
    assert isinstance(worst, int)


def test_score_monotonic_in_each_input():
    base = calculate_solar_score(1300.0, 0.7, 12.0)
    assert calculate_solar_score(1500.0, 0.7, 12.0) >= base
    assert calculate_solar_score(1300.0, 0.8, 12.0) >= base
    assert calculate_solar_score(1300.0, 0.7, 8.0) >= base


def test_boundary_radiation_scenario_is_97():
    assert calculate_solar_score(1600.0, 0.9, 6.0) == 97
