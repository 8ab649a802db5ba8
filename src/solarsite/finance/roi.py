"""Solar panel return-on-investment model.

Production scales linearly with radiation, panel area, efficiency and the
terrain shadow factor. Savings are valued at a flat electricity tariff; the
25-year projection applies geometric panel degradation.
"""
from __future__ import annotations

import math
from typing import Optional, Sequence

from solarsite.core.config import DEFAULT_ASSUMPTIONS, SolarAssumptions
from solarsite.core.debug import DebugCollector, NullDebugCollector
from solarsite.core.models import IrradianceProfile, PanelConfig, ROIAnalysis, SolarROIResult, ValidationError


def radiation_quality(annual_radiation_kwh_m2: float) -> str:
    if annual_radiation_kwh_m2 > 1600:
        return "Excellent solar radiation"
    if annual_radiation_kwh_m2 > 1400:
        return "Good solar radiation"
    if annual_radiation_kwh_m2 > 1200:
        return "Moderate solar radiation"
    return "Limited solar radiation"


def shadow_impact(shadow_factor: float) -> str:
    if shadow_factor > 0.9:
        return "minimal terrain shadowing"
    if shadow_factor > 0.75:
        return "moderate terrain shadowing"
    return "significant terrain shadowing"


def payback_assessment(payback_period_years: float, assumptions: SolarAssumptions = DEFAULT_ASSUMPTIONS) -> str:
    if payback_period_years < assumptions.roi_excellent_years:
        return "Highly recommended for solar investment"
    if payback_period_years < assumptions.roi_good_years:
        return "Good solar investment opportunity"
    if payback_period_years < assumptions.roi_fair_years:
        return "Fair solar potential, consider local incentives"
    return "Solar may not be economically viable at this location"


def generate_recommendation(
    annual_radiation_kwh_m2: float,
    shadow_factor: float,
    payback_period_years: float,
    assumptions: SolarAssumptions = DEFAULT_ASSUMPTIONS,
) -> str:
    return (
        f"{radiation_quality(annual_radiation_kwh_m2)} with {shadow_impact(shadow_factor)}. "
        f"{payback_assessment(payback_period_years, assumptions)}."
    )


def cumulative_profit(
    annual_production_kwh: float,
    installation_cost_idr: float,
    assumptions: SolarAssumptions = DEFAULT_ASSUMPTIONS,
) -> float:
    """Net profit after ``lifetime_years`` with production decaying by ``panel_degradation``/yr."""
    profit = -installation_cost_idr
    for year in range(1, assumptions.lifetime_years + 1):
        production = annual_production_kwh * (1 - assumptions.panel_degradation) ** (year - 1)
        profit += production * assumptions.electricity_rate_idr_kwh
    return profit


def calculate_solar_roi(
    annual_radiation_kwh_m2: float,
    monthly_radiation_kwh_m2: Sequence[float],
    shadow_factor: float,
    area_m2: Optional[float] = None,
    assumptions: SolarAssumptions | None = None,
    debug: DebugCollector | None = None,
) -> SolarROIResult:
    """Installation cost, savings, payback and 25-year projection for one site.

    ``payback_period_years`` is ``math.inf`` when the installation produces no
    savings (zero radiation, zero shadow factor or a zero tariff); callers must
    treat that as "never pays back".
    """
    assumptions = assumptions or DEFAULT_ASSUMPTIONS
    debug = debug or NullDebugCollector()
    if not (0.0 <= shadow_factor <= 1.0):
        raise ValidationError("shadow_factor must be between 0 and 1")
    if annual_radiation_kwh_m2 < 0:
        raise ValidationError("annual_radiation_kwh_m2 must be non-negative")
    if len(monthly_radiation_kwh_m2) != 12:
        raise ValidationError("monthly_radiation_kwh_m2 must contain 12 values")

    area = assumptions.panel_area_m2 if area_m2 is None else float(area_m2)
    efficiency = assumptions.panel_efficiency
    if area <= 0:
        raise ValidationError("area_m2 must be positive")
    yield_factor = area * efficiency * shadow_factor

    annual_production = annual_radiation_kwh_m2 * yield_factor
    monthly_production = tuple(float(m) * yield_factor for m in monthly_radiation_kwh_m2)
    panel = PanelConfig(area_m2=area, efficiency=efficiency, annual_production_kwh=annual_production)

    installation_cost = area * assumptions.installation_cost_per_m2_idr
    annual_savings = annual_production * assumptions.electricity_rate_idr_kwh
    payback = installation_cost / annual_savings if annual_savings > 0 else math.inf

    net_profit = cumulative_profit(annual_production, installation_cost, assumptions)
    roi_percent = net_profit / installation_cost * 100.0

    roi = ROIAnalysis(
        installation_cost_idr=installation_cost,
        annual_savings_idr=annual_savings,
        payback_period_years=payback,
        roi_25_years_percent=roi_percent,
        net_profit_25_years_idr=net_profit,
    )
    debug.emit(
        "roi.summary",
        {
            "annual_production_kwh": annual_production,
            "installation_cost_idr": installation_cost,
            "payback_period_years": payback,
            "roi_percent": roi_percent,
        },
        component="roi",
    )
    return SolarROIResult(
        panel_config=panel,
        roi_analysis=roi,
        monthly_production_kwh=monthly_production,
        recommendation=generate_recommendation(annual_radiation_kwh_m2, shadow_factor, payback, assumptions),
    )


def calculate_roi_for_profile(
    irradiance: IrradianceProfile,
    shadow_factor: float,
    area_m2: Optional[float] = None,
    assumptions: SolarAssumptions | None = None,
    debug: DebugCollector | None = None,
) -> SolarROIResult:
    return calculate_solar_roi(
        irradiance.annual_radiation_kwh_m2,
        irradiance.monthly_radiation_kwh_m2,
        shadow_factor,
        area_m2=area_m2,
        assumptions=assumptions,
        debug=debug,
    )


__all__ = [
    "radiation_quality",
    "shadow_impact",
    "payback_assessment",
    "generate_recommendation",
    "cumulative_profit",
    "calculate_solar_roi",
    "calculate_roi_for_profile",
]
