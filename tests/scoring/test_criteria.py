import pytest

from solarsite.core.models import CriteriaScores, InfrastructureType
from solarsite.scoring.criteria import (
    calculate_overall_score,
    determine_infrastructure_type,
    generate_recommendation,
    is_valid_coordinates,
    is_valid_score,
    summarize_insights,
)


def _scores(demand, grid, accessibility, competition):
    return CriteriaScores(demand=demand, grid=grid, accessibility=accessibility, competition=competition)


def test_reference_location_is_hybrid_65():
    scores = _scores(85, 40, 75, 55)
    assert calculate_overall_score(scores) == 65
    assert determine_infrastructure_type(scores) is InfrastructureType.HYBRID


def test_overall_rounds_half_up():
    # 0.3*55 + 0.25*50 + 0.25*50 + 0.2*50 = 51.5
    assert calculate_overall_score(_scores(55, 50, 50, 50)) == 52


@pytest.mark.parametrize(
    "scores,expected",
    [
        ((81, 0, 71, 0), InfrastructureType.HYBRID),
        ((80, 0, 71, 0), InfrastructureType.FAST_CHARGING),
        ((81, 0, 70, 0), InfrastructureType.FAST_CHARGING),
        ((70, 0, 90, 61), InfrastructureType.BATTERY_SWAP),
        ((40, 0, 0, 61), InfrastructureType.BATTERY_SWAP),
        ((39, 0, 0, 90), InfrastructureType.FAST_CHARGING),
        ((50, 0, 0, 60), InfrastructureType.FAST_CHARGING),
        ((20, 20, 20, 20), InfrastructureType.FAST_CHARGING),
    ],
)
def test_rule_order_at_boundaries(scores, expected):
    assert determine_infrastructure_type(_scores(*scores)) is expected


def test_hybrid_specs_and_financials():
    rec = generate_recommendation(_scores(85, 40, 75, 55))
    specs = rec.technical_specs
    assert (specs.chargers, specs.power_requirement) == (4, "350 kW")
    assert (specs.swap_stations, specs.battery_inventory) == (2, 20)
    money = rec.financial_estimates
    assert money.capital_investment_idr == 2_500_000_000
    assert money.monthly_operational_cost_idr == 30_000_000
    assert money.monthly_revenue_projection_idr == 57_600_000
    assert money.payback_period_months == 91
    assert money.currency == "IDR"
    assert "hybrid" in rec.rationale


def test_fast_charging_mid_demand():
    rec = generate_recommendation(_scores(75, 50, 65, 30))
    assert rec.type is InfrastructureType.FAST_CHARGING
    assert (rec.technical_specs.chargers, rec.technical_specs.power_requirement) == (2, "150 kW")
    assert rec.technical_specs.swap_stations is None
    assert rec.financial_estimates.capital_investment_idr == 800_000_000
    assert rec.financial_estimates.payback_period_months == 63


def test_battery_swap_without_positive_margin_has_no_payback():
    rec = generate_recommendation(_scores(50, 50, 50, 70))
    assert rec.type is InfrastructureType.BATTERY_SWAP
    assert rec.technical_specs.chargers is None
    assert (rec.technical_specs.swap_stations, rec.technical_specs.battery_inventory) == (1, 10)
    assert rec.financial_estimates.monthly_revenue_projection_idr == 18_000_000
    assert rec.financial_estimates.payback_period_months is None


def test_insights_text():
    scores = _scores(85, 40, 75, 55)
    text = summarize_insights(scores, InfrastructureType.HYBRID)
    assert text == (
        "This location has an overall suitability score of 65/100. "
        "Its main strengths are high demand, excellent accessibility. "
        "Main concerns are distance to the grid. "
        "Recommended infrastructure: hybrid."
    )


def test_validators():
    assert is_valid_coordinates(-6.2, 106.8)
    assert not is_valid_coordinates(91, 0)
    assert not is_valid_coordinates(0, -181)
    assert is_valid_score(0) and is_valid_score(100)
    assert not is_valid_score(100.1)
