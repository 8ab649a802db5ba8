"""Multi-criteria location scoring and EV infrastructure recommendation.

The four sub-scores (demand, grid readiness, accessibility, competition) are
computed upstream from external data; this module only aggregates them and
turns them into an infrastructure type with indicative specs and financials.
"""
from __future__ import annotations

from typing import List, Optional

from solarsite.core.models import (
    CRITERIA_WEIGHTS,
    CriteriaScores,
    FinancialEstimates,
    InfrastructureRecommendation,
    InfrastructureType,
    TechnicalSpecs,
)
from solarsite.core.numeric import round_half_up

UTILIZATION_RATE = 0.6
TRANSACTIONS_PER_UNIT_PER_DAY = 10
DAYS_PER_MONTH = 30


def calculate_overall_score(scores: CriteriaScores) -> int:
    return scores.overall


def determine_infrastructure_type(scores: CriteriaScores) -> InfrastructureType:
    """First matching rule wins; the order matters at boundary values."""
    if scores.demand > 80 and scores.accessibility > 70:
        return InfrastructureType.HYBRID
    if scores.demand > 70 and scores.accessibility > 60:
        return InfrastructureType.FAST_CHARGING
    if 40 <= scores.demand <= 70 and scores.competition > 60:
        return InfrastructureType.BATTERY_SWAP
    return InfrastructureType.FAST_CHARGING


def generate_technical_specs(infra_type: InfrastructureType, demand_score: float) -> TechnicalSpecs:
    chargers = power = swap_stations = batteries = None
    if infra_type in (InfrastructureType.FAST_CHARGING, InfrastructureType.HYBRID):
        if demand_score > 80:
            chargers, power = 4, "350 kW"
        elif demand_score > 60:
            chargers, power = 2, "150 kW"
        else:
            chargers, power = 1, "50 kW"
    if infra_type in (InfrastructureType.BATTERY_SWAP, InfrastructureType.HYBRID):
        swap_stations, batteries = (2, 20) if demand_score > 70 else (1, 10)
    return TechnicalSpecs(
        type=infra_type,
        space_requirement="50-200 sq meters",
        chargers=chargers,
        power_requirement=power,
        swap_stations=swap_stations,
        battery_inventory=batteries,
    )


def generate_financial_estimates(infra_type: InfrastructureType, specs: TechnicalSpecs) -> FinancialEstimates:
    """Indicative capex/opex/revenue in IDR.

    ``payback_period_months`` is ``None`` when monthly revenue does not cover
    operating cost.
    """
    if infra_type is InfrastructureType.FAST_CHARGING:
        units = specs.chargers or 1
        capex, opex = units * 400_000_000, units * 8_000_000
    elif infra_type is InfrastructureType.BATTERY_SWAP:
        units = specs.swap_stations or 1
        capex, opex = units * 1_500_000_000, units * 20_000_000
    else:
        capex, opex = 2_500_000_000, 30_000_000

    transaction_value = 100_000 if infra_type is InfrastructureType.BATTERY_SWAP else 80_000
    daily_transactions = (specs.chargers or specs.swap_stations or 1) * TRANSACTIONS_PER_UNIT_PER_DAY * UTILIZATION_RATE
    revenue = round_half_up(daily_transactions * transaction_value * DAYS_PER_MONTH)

    margin = revenue - opex
    payback_months: Optional[int] = round_half_up(capex / margin) if margin > 0 else None
    return FinancialEstimates(
        capital_investment_idr=int(capex),
        monthly_operational_cost_idr=int(opex),
        monthly_revenue_projection_idr=int(revenue),
        payback_period_months=payback_months,
    )


_RATIONALE = {
    InfrastructureType.FAST_CHARGING: (
        "This location suits a public fast-charging station thanks to good demand and accessibility."
    ),
    InfrastructureType.BATTERY_SWAP: (
        "This location is a good fit for a battery-swap station: competition is low and demand is moderate."
    ),
    InfrastructureType.HYBRID: (
        "This location is strategic enough for a hybrid site combining fast charging and battery swapping."
    ),
}


def generate_recommendation(scores: CriteriaScores) -> InfrastructureRecommendation:
    infra_type = determine_infrastructure_type(scores)
    specs = generate_technical_specs(infra_type, scores.demand)
    return InfrastructureRecommendation(
        type=infra_type,
        rationale=_RATIONALE[infra_type],
        technical_specs=specs,
        financial_estimates=generate_financial_estimates(infra_type, specs),
    )


def summarize_insights(scores: CriteriaScores, infra_type: InfrastructureType) -> str:
    overall = calculate_overall_score(scores)
    parts: List[str] = [f"This location has an overall suitability score of {overall}/100."]

    strengths = []
    if scores.demand > 70:
        strengths.append("high demand")
    if scores.grid > 70:
        strengths.append("good grid readiness")
    if scores.accessibility > 70:
        strengths.append("excellent accessibility")
    if scores.competition > 70:
        strengths.append("low competition")
    if strengths:
        parts.append(f"Its main strengths are {', '.join(strengths)}.")

    concerns = []
    if scores.demand < 50:
        concerns.append("moderate demand")
    if scores.grid < 50:
        concerns.append("distance to the grid")
    if scores.accessibility < 50:
        concerns.append("limited accessibility")
    if scores.competition < 50:
        concerns.append("high competition")
    if concerns:
        parts.append(f"Main concerns are {', '.join(concerns)}.")

    parts.append(f"Recommended infrastructure: {infra_type.value}.")
    return " ".join(parts)


def is_valid_coordinates(lat: float, lon: float) -> bool:
    return -90 <= lat <= 90 and -180 <= lon <= 180


def is_valid_score(score: float) -> bool:
    return 0 <= score <= 100


__all__ = [
    "CRITERIA_WEIGHTS",
    "calculate_overall_score",
    "determine_infrastructure_type",
    "generate_technical_specs",
    "generate_financial_estimates",
    "generate_recommendation",
    "summarize_insights",
    "is_valid_coordinates",
    "is_valid_score",
]
